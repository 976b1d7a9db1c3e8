#------------------------------------------------------------
#                          errors.py
#        Error types raised while collecting, enriching,
#                 and persisting project records.

from typing import Optional


class PortfolioError(Exception):
    """Base class for every error raised by the generator."""


class UpstreamError(PortfolioError):
    """The hosting API listing call failed (status or transport)."""

    def __init__(self, message: str, status: Optional[int] = None, url: Optional[str] = None):
        super().__init__(message)
        self.status = status
        self.url = url


class EnrichmentUnavailable(PortfolioError):
    """A README or contributor lookup failed or returned nothing."""


class PersistenceError(PortfolioError):
    """An output file could not be written."""


class LocalDataUnavailable(PortfolioError):
    """No usable local projects document; triggers the fallback fetch."""
