"""Pillow-backed image transformer.

The source image is fully decoded, re-oriented from its EXIF tag, shrunk
to fit the resize box and re-encoded in its own format. Re-encoding
drops EXIF and other ancillary metadata unless asked to keep it. The
thumbnail is a centre crop filling exactly ``thumb_w`` x ``thumb_h``.
"""

import io
from collections.abc import Iterable

from aws_lambda_powertools import Logger
from PIL import Image, ImageOps, UnidentifiedImageError

from core.config import get_settings
from core.models.errors import ProcessingFailedError
from core.models.processing import ProcessOptions, ProcessResult, ValidationResult
from core.repositories.image_transformer import ImageTransformer
from core.utils.constants import (
    IMAGE_MAX_ASPECT_RATIO,
    IMAGE_MAX_DIMENSION,
    IMAGE_MIN_ASPECT_RATIO,
    IMAGE_MIN_DIMENSION,
    extension_for,
)
from core.utils.mime import detect_mime_type

logger = Logger(UTC=True)

PIL_FORMAT_TYPES: dict[str, str] = {
    "JPEG": "image/jpeg",
    "PNG": "image/png",
    "WEBP": "image/webp",
    "GIF": "image/gif",
}

# formats that can't be written back are re-encoded as JPEG
FALLBACK_FORMAT = "JPEG"

DECODE_ERRORS = (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, ValueError)


class PillowImageTransformer(ImageTransformer):
    """Decodes, normalizes and thumbnails images with Pillow."""

    def __init__(self, allowed_content_types: Iterable[str] | None = None) -> None:
        if allowed_content_types is None:
            allowed_content_types = get_settings().allowed_content_types
        self._allowed = frozenset(allowed_content_types)

    def validate(self, data: bytes) -> ValidationResult:
        """Decode `data` far enough to prove it is a well-formed, allowed image.

        Unusual dimensions or aspect ratios only produce warnings.
        """
        if not data:
            return ValidationResult(is_valid=False, errors=["Image data is empty"])

        try:
            detect_mime_type(data)
        except ValueError as exc:
            return ValidationResult(is_valid=False, errors=[str(exc)])

        try:
            with Image.open(io.BytesIO(data)) as img:
                img.verify()
                image_format = img.format or ""
                width, height = img.size
        except DECODE_ERRORS as exc:
            logger.info("Image failed to decode", extra={"error": type(exc).__name__})
            return ValidationResult(is_valid=False, errors=["Image data is corrupt or unreadable"])

        content_type = PIL_FORMAT_TYPES.get(image_format)
        if content_type is None or content_type not in self._allowed:
            return ValidationResult(
                is_valid=False,
                errors=[f"Image format {image_format or 'unknown'} is not allowed"],
            )

        warnings: list[str] = []
        if width < IMAGE_MIN_DIMENSION or height < IMAGE_MIN_DIMENSION:
            warnings.append(f"image dimensions are very small (minimum {IMAGE_MIN_DIMENSION}px recommended)")
        if width > IMAGE_MAX_DIMENSION or height > IMAGE_MAX_DIMENSION:
            warnings.append(f"image dimensions are very large (maximum {IMAGE_MAX_DIMENSION}px recommended)")
        if not IMAGE_MIN_ASPECT_RATIO <= width / height <= IMAGE_MAX_ASPECT_RATIO:
            warnings.append("image aspect ratio is unusual")

        logger.debug(
            "Image validation completed",
            extra={"content_type": content_type, "width": width, "height": height, "warnings": len(warnings)},
        )

        return ValidationResult(
            is_valid=True,
            warnings=warnings,
            content_type=content_type,
            width=width,
            height=height,
        )

    def process(self, data: bytes, options: ProcessOptions) -> ProcessResult:
        validation = self.validate(data)
        if not validation.is_valid:
            raise ProcessingFailedError(
                message="Image could not be processed",
                details={"errors": validation.errors},
            )

        try:
            with Image.open(io.BytesIO(data)) as source:
                source.load()
                image_format = source.format if source.format in ("JPEG", "PNG", "WEBP") else FALLBACK_FORMAT
                img = ImageOps.exif_transpose(source)
                exif = None if options.strip_metadata else img.info.get("exif")
                img.thumbnail((options.resize_w, options.resize_h), resample=Image.Resampling.LANCZOS)
                processed = self._encode(img, image_format, options, exif=exif)

                thumbnail = self._thumbnail(img, image_format, options)
        except DECODE_ERRORS as exc:
            raise ProcessingFailedError(message="Image could not be processed") from exc

        content_type = PIL_FORMAT_TYPES[image_format]

        logger.info(
            "Image processing completed",
            extra={
                "original_size": len(data),
                "processed_size": len(processed),
                "thumbnail_size": len(thumbnail) if thumbnail else 0,
                "width": img.width,
                "height": img.height,
            },
        )

        return ProcessResult(
            processed_bytes=processed,
            content_type=content_type,
            processed_key_hint=f"processed.{extension_for(content_type)}",
            thumbnail_bytes=thumbnail,
        )

    def _thumbnail(self, img: Image.Image, image_format: str, options: ProcessOptions) -> bytes | None:
        if options.thumb_w <= 0 or options.thumb_h <= 0:
            return None

        try:
            thumb = ImageOps.fit(img, (options.thumb_w, options.thumb_h), method=Image.Resampling.LANCZOS)
            return self._encode(thumb, image_format, options)
        except DECODE_ERRORS:
            # the main image is still usable without a thumbnail
            logger.exception("Failed to generate thumbnail")
            return None

    @staticmethod
    def _encode(
        img: Image.Image,
        image_format: str,
        options: ProcessOptions,
        *,
        exif: bytes | None = None,
    ) -> bytes:
        save_kwargs: dict[str, object] = {"format": image_format}

        if image_format == "JPEG":
            if img.mode not in ("RGB", "L"):
                img = img.convert("RGB")
            save_kwargs.update({"quality": options.quality, "optimize": options.optimize})
        elif image_format == "WEBP":
            save_kwargs["quality"] = options.quality
        elif image_format == "PNG":
            save_kwargs["optimize"] = options.optimize

        if exif:
            save_kwargs["exif"] = exif

        buffer = io.BytesIO()
        img.save(buffer, **save_kwargs)
        return buffer.getvalue()
