import re
import secrets
import time


PHOTO_NAMESPACE = "messages"
FILE_NAMESPACE = "school-files"

DEFAULT_PHOTO_EXTENSION = "jpg"
DEFAULT_FILE_EXTENSION = "bin"

_EXTENSION_RE = re.compile(r"^[a-z0-9]{1,16}$")


def _extension_from_name(file_name, default_extension: str) -> str:
    if not isinstance(file_name, str) or "." not in file_name:
        return default_extension

    extension = file_name.rsplit(".", 1)[-1].strip().lower()
    if not _EXTENSION_RE.match(extension):
        return default_extension
    return extension


def make_key(
    namespace: str,
    original_file_name,
    default_extension: str = DEFAULT_FILE_EXTENSION,
    timestamp_ms: int | None = None,
) -> str:
    """Build ``{namespace}/{token}-{unix_ms}.{ext}`` for a new upload.

    The token carries 128 random bits so keys cannot be guessed or walked.
    """
    namespace = namespace.strip("/")
    if timestamp_ms is None:
        timestamp_ms = time.time_ns() // 1_000_000

    token = secrets.token_urlsafe(16)
    extension = _extension_from_name(original_file_name, default_extension)
    return f"{namespace}/{token}-{timestamp_ms}.{extension}"


def namespace_of(key) -> str:
    if not isinstance(key, str) or "/" not in key:
        return ""
    return key.split("/", 1)[0]
