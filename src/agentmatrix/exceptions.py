"""agentmatrix exception hierarchy.

All agentmatrix-specific exceptions inherit from AgentMatrixError.
"""


class AgentMatrixError(Exception):
    """Base exception for all agentmatrix errors."""


class ConfigError(AgentMatrixError):
    """Raised when configuration values are missing or malformed."""


class PricingError(AgentMatrixError):
    """Raised when a pricing table is built from invalid rates."""

    def __init__(self, model_id: str, rate: object) -> None:
        self.model_id = model_id
        self.rate = rate
        super().__init__(
            f"Invalid cost rate for model '{model_id}': {rate!r} "
            f"(expected a non-negative number)"
        )


class FrameworkError(AgentMatrixError):
    """Raised when the framework registry is used incorrectly."""


class UnknownFrameworkError(FrameworkError):
    """Raised when a framework identifier has no registered adapter."""

    def __init__(self, framework_id: str) -> None:
        self.framework_id = framework_id
        super().__init__(f"No adapter registered for framework '{framework_id}'")
