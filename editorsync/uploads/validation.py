from editorsync.uploads.models import UploadFile

# SVG is excluded: it can carry embedded scripts.
SUPPORTED_IMAGE_TYPES = frozenset({"image/jpeg", "image/png", "image/gif", "image/webp"})


def is_valid_image_type(file: UploadFile) -> bool:
    return file.mime_type.lower() in SUPPORTED_IMAGE_TYPES
