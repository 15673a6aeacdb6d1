import io
import logging
from dataclasses import dataclass
from threading import Lock

import urllib3
from flask import current_app
from minio import Minio
from minio.error import MinioException, S3Error

from board.errors import NotFoundError, StorageError


logger = logging.getLogger(__name__)

EXTENSION_NAME = "blob_store"

MISSING_OBJECT_CODES = frozenset({"NoSuchKey", "NoSuchObject", "NoSuchBucket", "ResourceNotFound"})


@dataclass(frozen=True)
class BlobInfo:
    size: int
    content_type: str


class BlobStore:
    """Puts opaque bytes under a caller-chosen key in a MinIO bucket."""

    def __init__(
        self,
        endpoint: str,
        access_key: str,
        secret_key: str,
        bucket: str,
        public_base_url: str,
        secure: bool = False,
        connect_timeout: float = 5,
        read_timeout: float = 20,
        pool_maxsize: int = 32,
    ):
        self.bucket = bucket
        self.public_base_url = public_base_url.rstrip("/")
        self._http_client = urllib3.PoolManager(
            timeout=urllib3.Timeout(connect=connect_timeout, read=read_timeout),
            retries=False,
            maxsize=pool_maxsize,
        )
        self._client = Minio(
            endpoint,
            access_key=access_key,
            secret_key=secret_key,
            secure=secure,
            http_client=self._http_client,
        )
        self._bucket_ready = False
        self._bucket_lock = Lock()

    @classmethod
    def from_config(cls, config):
        return cls(
            endpoint=config["MINIO_ENDPOINT"],
            access_key=config["MINIO_ACCESS_KEY"],
            secret_key=config["MINIO_SECRET_KEY"],
            bucket=config["MINIO_BUCKET"],
            public_base_url=config["MINIO_PUBLIC_BASE_URL"],
            secure=config["MINIO_SECURE"],
            connect_timeout=config["MINIO_CONNECT_TIMEOUT"],
            read_timeout=config["MINIO_READ_TIMEOUT"],
            pool_maxsize=config.get("MINIO_HTTP_POOL_MAXSIZE", 32),
        )

    def url_for(self, key: str) -> str:
        return f"{self.public_base_url}/{self.bucket}/{key}"

    def _ensure_bucket(self):
        with self._bucket_lock:
            if self._bucket_ready:
                return
            if not self._client.bucket_exists(self.bucket):
                self._client.make_bucket(self.bucket)
            self._bucket_ready = True

    def put(self, key: str, data: bytes, mime_type: str) -> dict:
        try:
            self._ensure_bucket()
            self._client.put_object(
                bucket_name=self.bucket,
                object_name=key,
                data=io.BytesIO(data),
                length=len(data),
                content_type=mime_type or "application/octet-stream",
            )
        except (MinioException, urllib3.exceptions.HTTPError, OSError) as e:
            logger.error("Blob upload failed for %s: %s", key, e)
            raise StorageError("Upload failed") from e

        return {"url": self.url_for(key)}

    def stat(self, key: str) -> BlobInfo:
        try:
            stat = self._client.stat_object(
                bucket_name=self.bucket,
                object_name=key,
            )
        except S3Error as e:
            if e.code in MISSING_OBJECT_CODES:
                logger.info("Blob %s does not exist", key)
                raise NotFoundError("Stored file not found") from e
            logger.error("Blob lookup failed for %s: %s", key, e)
            raise StorageError("Stored file is unavailable") from e
        except (MinioException, urllib3.exceptions.HTTPError, OSError) as e:
            logger.error("Blob lookup failed for %s: %s", key, e)
            raise StorageError("Stored file is unavailable") from e

        return BlobInfo(
            size=int(getattr(stat, "size", 0) or 0),
            content_type=getattr(stat, "content_type", None) or "application/octet-stream",
        )

    def close(self):
        self._http_client.clear()


def init_blob_store(app):
    store = BlobStore.from_config(app.config)
    app.extensions[EXTENSION_NAME] = store
    return store


def get_blob_store() -> BlobStore:
    return current_app.extensions[EXTENSION_NAME]
