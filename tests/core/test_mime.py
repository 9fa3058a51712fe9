import pytest

from core.utils.mime import detect_mime_type, file_extension


def test_detect_jpeg() -> None:
    assert detect_mime_type(b"\xff\xd8\xff\xe0abc") == "image/jpeg"


def test_detect_png() -> None:
    assert detect_mime_type(b"\x89PNG\r\n\x1a\nxxx") == "image/png"


def test_detect_webp() -> None:
    assert detect_mime_type(b"RIFF\x24\x00\x00\x00WEBPVP8 ") == "image/webp"


def test_riff_without_webp_marker_is_unsupported() -> None:
    with pytest.raises(ValueError):
        detect_mime_type(b"RIFF\x24\x00\x00\x00WAVEfmt ")


def test_unsupported_type() -> None:
    with pytest.raises(ValueError):
        detect_mime_type(b"random-bytes")


@pytest.mark.parametrize(
    "file_name,expected",
    [
        ("beach.PNG", "png"),
        ("archive.tar.gz", "gz"),
        ("  portrait.jpeg ", "jpeg"),
        ("no_extension", None),
        (".hidden", None),
    ],
)
def test_file_extension(file_name: str, expected: str | None) -> None:
    assert file_extension(file_name) == expected
