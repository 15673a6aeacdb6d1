import logging
from dataclasses import asdict, dataclass

from board.errors import ValidationError
from board.extensions.blob_store import get_blob_store
from board.services.storage_keys import (
    DEFAULT_FILE_EXTENSION,
    DEFAULT_PHOTO_EXTENSION,
    FILE_NAMESPACE,
    PHOTO_NAMESPACE,
    make_key,
)
from board.services.upload_validator import (
    SINGLE_IMAGE,
    normalize_mime_type,
    validate_upload,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IncomingFile:
    file_name: str
    mime_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class UploadedAttachment:
    file_url: str
    file_key: str
    file_name: str
    file_type: str
    file_size: int

    def to_dict(self):
        return asdict(self)


def read_upload(file_storage) -> IncomingFile:
    if file_storage is None or not getattr(file_storage, "filename", ""):
        raise ValidationError("No file provided")

    return IncomingFile(
        file_name=file_storage.filename,
        mime_type=normalize_mime_type(getattr(file_storage, "mimetype", None)),
        data=file_storage.read(),
    )


def _key_for(incoming: IncomingFile, mode: str) -> str:
    if mode == SINGLE_IMAGE:
        return make_key(PHOTO_NAMESPACE, incoming.file_name, DEFAULT_PHOTO_EXTENSION)
    return make_key(FILE_NAMESPACE, incoming.file_name, DEFAULT_FILE_EXTENSION)


def store_upload(incoming: IncomingFile, mode: str) -> UploadedAttachment:
    """Validate one file, then write it to the blob store.

    A failed put is not retried; the ``StorageError`` reaches the caller.
    """
    try:
        validate_upload(incoming.mime_type, incoming.size, mode)
    except ValidationError as e:
        logger.info("Rejected upload %r: %s", incoming.file_name, e)
        raise

    key = _key_for(incoming, mode)
    stored = get_blob_store().put(key, incoming.data, incoming.mime_type)

    return UploadedAttachment(
        file_url=stored["url"],
        file_key=key,
        file_name=incoming.file_name,
        file_type=incoming.mime_type,
        file_size=incoming.size,
    )
