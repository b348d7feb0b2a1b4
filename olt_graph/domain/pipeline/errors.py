"""Domain-level errors for the image pipeline.

These never cross the orchestrator boundary: ``run_pipeline`` turns them into
``PipelineFailure`` values. Mapping to HTTP is handled in observability.errors.
"""

from __future__ import annotations


class PipelineError(Exception):
    """Base error for domain pipeline failures."""


class InvalidInputError(PipelineError):
    """Raised when the image reference is empty or unusable."""


class FetchError(PipelineError):
    """Raised by the byte-fetch collaborator on network or configuration failures."""

    def __init__(self, message: str, *, unauthorized: bool = False) -> None:
        super().__init__(message)
        self.unauthorized = unauthorized


class OcrError(PipelineError):
    """Raised when the OCR engine cannot produce text for an image."""
