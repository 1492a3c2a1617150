"""Exceptions raised while analyzing a meal photo."""

from typing import List, Optional


class AnalysisError(Exception):
    """Base class for analysis errors."""


class InvalidImage(AnalysisError, ValueError):
    """The uploaded image payload could not be decoded."""


class AdapterFailure(AnalysisError):
    """A single provider could not produce a usable answer.

    Recoverable: the cascade logs it and moves on to the next provider.
    """

    def __init__(self, provider: str, reason: str, status_code: Optional[int] = None):
        self.provider = provider
        self.reason = reason
        self.status_code = status_code
        detail = f"{provider} failed: {reason}"
        if status_code is not None:
            detail = f"{detail} (status={status_code})"
        super().__init__(detail)


class UnidentifiableDish(AnalysisError, ValueError):
    """Provider output names no dish and there is no caption to fall back on."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(
            message
            or "Could not identify the dish. Please ensure the food is clearly visible in the image."
        )


class ConfigurationError(AnalysisError):
    """No provider is configured, or none of them produced a result."""


class AllProvidersFailed(ConfigurationError):
    def __init__(self, message: str, failures: Optional[List[Exception]] = None):
        super().__init__(message)
        self.failures = list(failures or [])
