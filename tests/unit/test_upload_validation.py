import pytest

from editorsync.uploads.models import UploadFile
from editorsync.uploads.validation import is_valid_image_type


def _file(mime_type: str) -> UploadFile:
    return UploadFile(name="f", content=b"", mime_type=mime_type)


class TestIsValidImageType:
    @pytest.mark.parametrize("mime_type", ["image/jpeg", "image/png", "image/gif", "image/webp"])
    def test_accepts_supported_types(self, mime_type: str) -> None:
        assert is_valid_image_type(_file(mime_type))

    def test_is_case_insensitive(self) -> None:
        assert is_valid_image_type(_file("IMAGE/PNG"))

    @pytest.mark.parametrize("mime_type", ["image/svg+xml", "application/pdf", "text/html", ""])
    def test_rejects_other_types(self, mime_type: str) -> None:
        assert not is_valid_image_type(_file(mime_type))
