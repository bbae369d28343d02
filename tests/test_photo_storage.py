import io

from starlette.datastructures import Headers, UploadFile

from config import MAX_PROFILE_PHOTO_SIZE
from utils.photo_storage import save_profile_photo


def _upload(content: bytes, filename="me.png", content_type="image/png"):
    return UploadFile(
        file=io.BytesIO(content),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


def test_saves_image(tmp_path):
    url = save_profile_photo(_upload(b"\x89PNG fake"), target_dir=tmp_path)

    assert url.startswith("/uploads/profiles/")
    assert url.endswith("_me.png")
    stored = list(tmp_path.iterdir())
    assert len(stored) == 1
    assert stored[0].read_bytes() == b"\x89PNG fake"


def test_no_file():
    assert save_profile_photo(None) is None


def test_non_image_is_skipped(tmp_path):
    upload = _upload(b"hello", filename="notes.txt", content_type="text/plain")
    assert save_profile_photo(upload, target_dir=tmp_path) is None
    assert list(tmp_path.iterdir()) == []


def test_oversized_image_is_skipped(tmp_path):
    upload = _upload(b"0" * (MAX_PROFILE_PHOTO_SIZE + 1))
    assert save_profile_photo(upload, target_dir=tmp_path) is None
    assert list(tmp_path.iterdir()) == []
