"""
Pipeline exception taxonomy.
"""

from __future__ import annotations


class PipelineError(Exception):
    """Base exception for ingestion and verification failures."""


class ConfigurationError(PipelineError):
    """Raised when required runtime configuration is missing. Fatal to the current source run."""


class SourceFetchError(PipelineError):
    """Raised when a source feed cannot be fetched or decoded. Fatal to that source run only."""


class ItemProcessingError(PipelineError):
    """
    Failure while scoring or writing one candidate.

    Carried inside an ItemResult rather than raised through the run loop.
    """

    def __init__(self, message: str, *, title: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.title = title


class ProbeError(PipelineError):
    """One probe attempt could not reach the target link."""
