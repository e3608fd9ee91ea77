import pytest

from echobot.services.messaging.media import (
    extension_for_mime,
    media_filename,
    read_media,
    save_media,
)


@pytest.mark.parametrize(
    "mime_type, extension",
    [
        ("image/jpeg", ".jpg"),
        ("image/png", ".png"),
        ("IMAGE/PNG", ".png"),
        ("image/jpeg; charset=binary", ".jpg"),
        ("application/x-not-a-real-type", ".bin"),
        ("", ".bin"),
    ],
)
def test_extension_for_mime(mime_type, extension):
    assert extension_for_mime(mime_type) == extension


def test_media_filename():
    assert media_filename("923408957390", "wamid.ABC=", "image/jpeg") == (
        "923408957390-wamid.ABC_.jpg"
    )


def test_save_and_read_media(tmp_path):
    folder = tmp_path / "a" / "b"

    path = save_media(folder, "923408957390", "wamid.1", b"data", "image/png")

    assert path == folder / "923408957390-wamid.1.png"
    assert read_media(path) == b"data"


def test_save_media_overwrites_same_message(tmp_path):
    save_media(tmp_path, "1", "m", b"old", "image/png")
    path = save_media(tmp_path, "1", "m", b"new", "image/png")

    assert read_media(path) == b"new"
    assert len(list(tmp_path.iterdir())) == 1
