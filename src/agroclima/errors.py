"""Exception types shared by the store, provider clients and orchestrator."""

from typing import Optional


class AgroClimaError(Exception):
    """Base class for errors raised while serving a request."""
    pass


class NotFoundError(AgroClimaError):
    """Raised when a referenced id is absent from the store."""
    pass


class UpstreamError(AgroClimaError):
    """Raised when a collaborator (store or external API) fails.

    Attributes:
        status_code: HTTP status returned by the upstream, if any
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class StoreError(UpstreamError):
    """Raised when the relational store cannot be queried."""
    pass


class WeatherProviderError(UpstreamError):
    """Raised when the weather provider fails, times out or replies with junk."""
    pass


class AnalysisProviderError(UpstreamError):
    """Raised when the generative-text provider fails or times out."""
    pass


class AnalysisParseError(UpstreamError):
    """Raised when an AI reply holds no usable JSON object."""
    pass


class ConfigurationError(UpstreamError):
    """Raised when a required credential is not configured."""
    pass
