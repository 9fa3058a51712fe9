from datetime import datetime, timezone

from core.utils.storage_keys import processed_key, temp_upload_key, thumbnail_key


def test_processed_key_is_scoped_to_owner() -> None:
    assert processed_key("owner_1", "pho_1", "image/jpeg") == "photos/owner_1/processed/pho_1.jpg"


def test_thumbnail_key_is_sibling_of_processed() -> None:
    assert thumbnail_key("owner_1", "pho_1", "image/png") == "photos/owner_1/thumbnails/pho_1.png"


def test_unknown_content_type_uses_bin_extension() -> None:
    assert processed_key("o", "p", "application/x-unknown").endswith("/p.bin")


class TestTempUploadKey:
    def test_keeps_original_extension(self) -> None:
        now = datetime(2024, 1, 1, tzinfo=timezone.utc)

        key = temp_upload_key("owner_1", "Beach.PNG", now=now)

        prefix = f"photos/owner_1/temp/{int(now.timestamp())}_"
        assert key.startswith(prefix)
        assert key.endswith(".png")

    def test_omits_extension_when_missing(self) -> None:
        key = temp_upload_key("owner_1", "README")

        name = key.rsplit("/", 1)[1]
        assert "." not in name

    def test_keys_are_unique(self) -> None:
        now = datetime(2024, 1, 1, tzinfo=timezone.utc)

        keys = {temp_upload_key("owner_1", "a.jpg", now=now) for _ in range(50)}

        assert len(keys) == 50
