from collections.abc import Mapping
from pathlib import PurePosixPath

MAGIC_BYTES: Mapping[bytes, str] = {
    b"\xff\xd8\xff": "image/jpeg",
    b"\x89PNG\r\n\x1a\n": "image/png",
    b"GIF87a": "image/gif",
    b"GIF89a": "image/gif",
}


def detect_mime_type(file_data: bytes) -> str:
    for signature, mime in MAGIC_BYTES.items():
        if file_data.startswith(signature):
            return mime

    # WEBP is a RIFF container with "WEBP" at offset 8
    if file_data[:4] == b"RIFF" and file_data[8:12] == b"WEBP":
        return "image/webp"

    raise ValueError("Unsupported or unknown file type")


def file_extension(file_name: str) -> str | None:
    """Return the lower-cased extension of `file_name` without the dot."""
    suffix = PurePosixPath(file_name.strip()).suffix.lower().lstrip(".")
    return suffix or None
