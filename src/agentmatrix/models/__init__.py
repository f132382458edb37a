"""Data and configuration models for agentmatrix."""

from agentmatrix.models.config import (
    HOSTED_ENDPOINTS,
    AdapterConfig,
    AdapterMode,
    HostedEndpoint,
    MatrixConfig,
)
from agentmatrix.models.records import (
    BatchRequest,
    BatchResult,
    Combination,
    CombinationRun,
    Highlights,
    RecordSource,
    ResultRecord,
)

__all__ = [
    "AdapterConfig",
    "AdapterMode",
    "HostedEndpoint",
    "HOSTED_ENDPOINTS",
    "MatrixConfig",
    "BatchRequest",
    "BatchResult",
    "Combination",
    "CombinationRun",
    "Highlights",
    "RecordSource",
    "ResultRecord",
]
