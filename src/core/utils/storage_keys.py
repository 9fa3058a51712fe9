"""Object key layout for photo storage.

    photos/{owner_id}/processed/{photo_id}.{ext}
    photos/{owner_id}/thumbnails/{photo_id}.{ext}
    photos/{owner_id}/temp/{unix_ts}_{unique}[.{ext}]
"""

import uuid
from datetime import datetime

from core.utils.constants import (
    PHOTO_KEY_PREFIX,
    PROCESSED_FOLDER,
    TEMP_FOLDER,
    THUMBNAIL_FOLDER,
    extension_for,
)
from core.utils.mime import file_extension
from core.utils.time import utc_now


def processed_key(owner_id: str, photo_id: str, content_type: str) -> str:
    return f"{PHOTO_KEY_PREFIX}/{owner_id}/{PROCESSED_FOLDER}/{photo_id}.{extension_for(content_type)}"


def thumbnail_key(owner_id: str, photo_id: str, content_type: str) -> str:
    return f"{PHOTO_KEY_PREFIX}/{owner_id}/{THUMBNAIL_FOLDER}/{photo_id}.{extension_for(content_type)}"


def temp_upload_key(owner_id: str, file_name: str, *, now: datetime | None = None) -> str:
    """Generate a unique key in the owner's temporary area, keeping the file's extension."""
    timestamp = int((now or utc_now()).timestamp())
    name = f"{timestamp}_{uuid.uuid4().hex}"

    extension = file_extension(file_name)
    if extension:
        name = f"{name}.{extension}"

    return f"{PHOTO_KEY_PREFIX}/{owner_id}/{TEMP_FOLDER}/{name}"
