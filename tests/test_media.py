import io
import os

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from vidtube.core.config import settings
from vidtube.core.errors import BadRequestError
from vidtube.media.storage import delete_media, public_id_from_url, save_upload


@pytest.mark.parametrize(
    "url,expected",
    [
        ("/media/videos/abc123.mp4", "videos/abc123"),
        ("http://cdn.local/media/thumbnails/xyz.png", "thumbnails/xyz"),
        ("/media/avatars/noext", "avatars/noext"),
        ("/elsewhere/videos/abc.mp4", None),
        ("", None),
        (None, None),
    ],
)
def test_public_id_from_url(url, expected):
    assert public_id_from_url(url) == expected


def _upload(name: str, content: bytes, content_type: str) -> UploadFile:
    return UploadFile(
        file=io.BytesIO(content),
        filename=name,
        headers=Headers({"content-type": content_type}),
    )


def test_save_and_delete_roundtrip():
    stored = save_upload(_upload("pic.png", b"\x89PNG", "image/png"), "avatar")
    assert stored.url.startswith("/media/avatars/")
    assert stored.public_id == public_id_from_url(stored.url)

    abs_path = os.path.join(settings.MEDIA_DIR, stored.url[len("/media/"):])
    assert os.path.isfile(abs_path)

    assert delete_media(stored.public_id) is True
    assert not os.path.exists(abs_path)
    # borrar de nuevo no falla
    assert delete_media(stored.public_id) is False


def test_save_rejects_wrong_kind():
    with pytest.raises(BadRequestError):
        save_upload(_upload("doc.txt", b"hello", "text/plain"), "thumbnail")
    with pytest.raises(BadRequestError):
        save_upload(_upload("pic.png", b"\x89PNG", "image/png"), "video")


def test_delete_never_leaves_media_dir():
    outside = os.path.join(os.path.dirname(os.path.realpath(settings.MEDIA_DIR)), "keep.txt")
    with open(outside, "w") as f:
        f.write("x")
    delete_media("../keep")
    assert os.path.exists(outside)
