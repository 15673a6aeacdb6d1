from board.errors import UploadRejected
from board.services.storage_keys import FILE_NAMESPACE, PHOTO_NAMESPACE, namespace_of


SINGLE_IMAGE = "single-image"
MULTI_FILE = "multi-file"
UPLOAD_MODES = (SINGLE_IMAGE, MULTI_FILE)

MAX_IMAGE_SIZE = 5 * 1024 * 1024
MAX_FILE_SIZE = 50 * 1024 * 1024

ALLOWED_FILE_MIME_TYPES = {
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "application/vnd.ms-powerpoint",
    "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    "application/zip",
    "application/x-rar-compressed",
    "text/plain",
    "text/csv",
}

MODE_BY_NAMESPACE = {
    PHOTO_NAMESPACE: SINGLE_IMAGE,
    FILE_NAMESPACE: MULTI_FILE,
}


def normalize_mime_type(mime_type) -> str:
    if not isinstance(mime_type, str):
        return ""
    return mime_type.split(";", 1)[0].strip().lower()


def validate_upload(mime_type, byte_size: int, mode: str):
    """Accept or reject a file before any of its bytes are stored.

    Size is checked first so an oversized file is reported as too large
    whatever its declared type.
    """
    if mode not in UPLOAD_MODES:
        raise ValueError(f"Unknown upload mode: {mode}")

    mime_type = normalize_mime_type(mime_type)

    if mode == SINGLE_IMAGE:
        if byte_size > MAX_IMAGE_SIZE:
            raise UploadRejected("too_large", "File must be smaller than 5MB")
        if not mime_type.startswith("image/"):
            raise UploadRejected("not_an_image", "File must be an image")
        return

    if byte_size > MAX_FILE_SIZE:
        raise UploadRejected(
            "too_large",
            f"File must be smaller than {MAX_FILE_SIZE // (1024 * 1024)}MB",
        )
    if mime_type not in ALLOWED_FILE_MIME_TYPES:
        raise UploadRejected(
            "type_not_allowed",
            "File type not allowed. Supported: images, PDF, Word, Excel, "
            "PowerPoint, ZIP, RAR, text files",
        )


def mode_for_key(file_key: str):
    return MODE_BY_NAMESPACE.get(namespace_of(file_key))


def validate_attachment_metadata(file_key: str, file_type: str, file_size: int):
    mode = mode_for_key(file_key)
    if mode is None:
        raise UploadRejected(
            "unknown_namespace",
            "Attachment key does not belong to an upload namespace",
        )
    validate_upload(file_type, file_size, mode)
    return mode
