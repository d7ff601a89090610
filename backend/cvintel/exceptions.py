"""
Error types raised by the CVIntel services.

Every error surfaces to HTTP callers as a 500 with the message passed through;
the types exist so services and tests can tell the failure kinds apart.
"""

from typing import Optional


class CVIntelError(Exception):
    """Base class for all application errors."""


class ConfigurationError(CVIntelError):
    """Required credentials or connection settings are missing."""


class ProviderError(CVIntelError):
    """The generative-text provider request failed."""


class ProviderResponseError(ProviderError):
    """The provider answered, but not with the JSON the stage expects."""


class PersistenceError(CVIntelError):
    """A store read or write failed."""


class PipelineError(CVIntelError):
    """
    A pipeline stage failed and the remaining stages were skipped.

    Attributes:
        stage: Name of the failing stage (parse, signals, explain, optimize)
        cause: Original exception, if any
    """

    def __init__(self, stage: str, cause: Optional[BaseException] = None):
        self.stage = stage
        self.cause = cause
        message = f"CV analysis failed at stage '{stage}'"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
