"""Abstract contract for the image transform collaborator."""

from abc import ABC, abstractmethod

from core.models.processing import ProcessOptions, ProcessResult, ValidationResult


class ImageTransformer(ABC):
    """Validates and transcodes raw image bytes.

    Implementations are black boxes to the upload pipeline. Any exception
    they raise (including timeouts) is reported as a processing failure.
    """

    @abstractmethod
    def validate(self, data: bytes) -> ValidationResult:
        """Check that `data` is an acceptable image."""

    @abstractmethod
    def process(self, data: bytes, options: ProcessOptions) -> ProcessResult:
        """Produce the canonical representation and an optional thumbnail."""
