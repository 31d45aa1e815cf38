"""Exception types raised by the agent core."""


class SpookAIError(Exception):
    """Base class for agent-core errors."""


class ConfigurationError(SpookAIError, ValueError):
    """Raised when configuration values are inconsistent at setup time."""


class MissingCollaboratorError(SpookAIError, RuntimeError):
    """Raised when a required host collaborator was not supplied."""
