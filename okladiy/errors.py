"""Exceptions raised by adapters when a whole invocation cannot succeed."""


class SourceError(Exception):
    """Base class for adapter-level failures."""


class FetchError(SourceError):
    """Transport failure, non-2xx status, or timeout for one URL."""

    def __init__(self, message: str, url: str):
        super().__init__(message)
        self.url = url


class DocumentShapeError(SourceError):
    """A page is missing the structure an adapter depends on."""
