"""agentmatrix: run one task across agent frameworks and models.

Fans a task out to every selected (framework, model) combination, degrades
gracefully to deterministic mock results when upstreams are missing or
failing, and summarizes the batch into comparable highlights.
"""

from agentmatrix._version import __version__

# Engine
from agentmatrix.dispatcher import Dispatcher
from agentmatrix.aggregator import summarize

# Catalogs
from agentmatrix.frameworks import (
    DEFAULT_FRAMEWORKS,
    FrameworkPersona,
    FrameworkRegistry,
    default_registry,
)
from agentmatrix.pricing import DEFAULT_MODELS, ModelInfo, PricingTable, get_model

# Models and configuration
from agentmatrix.models import (
    AdapterConfig,
    AdapterMode,
    BatchRequest,
    BatchResult,
    Combination,
    CombinationRun,
    Highlights,
    HostedEndpoint,
    MatrixConfig,
    RecordSource,
    ResultRecord,
)

# Adapters
from agentmatrix.providers import (
    FailureKind,
    FallbackAction,
    ProviderAdapter,
    build_adapters,
)

# Exceptions
from agentmatrix.exceptions import (
    AgentMatrixError,
    ConfigError,
    FrameworkError,
    PricingError,
    UnknownFrameworkError,
)

__all__ = [
    "__version__",
    "Dispatcher",
    "summarize",
    "DEFAULT_FRAMEWORKS",
    "FrameworkPersona",
    "FrameworkRegistry",
    "default_registry",
    "DEFAULT_MODELS",
    "ModelInfo",
    "PricingTable",
    "get_model",
    "AdapterConfig",
    "AdapterMode",
    "BatchRequest",
    "BatchResult",
    "Combination",
    "CombinationRun",
    "Highlights",
    "HostedEndpoint",
    "MatrixConfig",
    "RecordSource",
    "ResultRecord",
    "FailureKind",
    "FallbackAction",
    "ProviderAdapter",
    "build_adapters",
    "AgentMatrixError",
    "ConfigError",
    "FrameworkError",
    "PricingError",
    "UnknownFrameworkError",
]
