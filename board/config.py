import os
from datetime import timedelta

from dotenv import load_dotenv


load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return int(value)


class Config:
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///board.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Seconds to wait for a pooled connection (or the SQLite write lock).
    DATABASE_TIMEOUT = float(os.getenv("DATABASE_TIMEOUT", "10"))

    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "dev-secret")
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(
        minutes=_env_int("JWT_ACCESS_TOKEN_MINUTES", 15)
    )
    JWT_REFRESH_TOKEN_EXPIRES = timedelta(
        days=_env_int("JWT_REFRESH_TOKEN_DAYS", 30)
    )
    JWT_TOKEN_LOCATION = ["headers", "cookies"]

    # Shared with the identity provider callback that reports sign-ins.
    # Empty disables /api/auth/session.
    IDENTITY_CALLBACK_SECRET = os.getenv("IDENTITY_CALLBACK_SECRET", "")

    # Owner of the deployment; upserted with the admin role.
    OWNER_OPEN_ID = os.getenv("OWNER_OPEN_ID", "").strip()

    MINIO_ENDPOINT = os.getenv("MINIO_ENDPOINT", "localhost:9000")
    MINIO_ACCESS_KEY = os.getenv("MINIO_ACCESS_KEY", "admin")
    MINIO_SECRET_KEY = os.getenv("MINIO_SECRET_KEY", "supersecret")
    MINIO_BUCKET = os.getenv("MINIO_BUCKET", "board")
    MINIO_SECURE = _env_bool("MINIO_SECURE", False)
    MINIO_CONNECT_TIMEOUT = float(os.getenv("MINIO_CONNECT_TIMEOUT", "5"))
    MINIO_READ_TIMEOUT = float(os.getenv("MINIO_READ_TIMEOUT", "20"))
    MINIO_HTTP_POOL_MAXSIZE = _env_int("MINIO_HTTP_POOL_MAXSIZE", 32)
    MINIO_PUBLIC_BASE_URL = os.getenv(
        "MINIO_PUBLIC_BASE_URL",
        "http://127.0.0.1:9000"
    )

    FEED_LIMIT = _env_int("FEED_LIMIT", 100)
    POST_TEXT_MAX_LENGTH = _env_int("POST_TEXT_MAX_LENGTH", 5000)
    POST_MAX_ATTACHMENTS = _env_int("POST_MAX_ATTACHMENTS", 10)
    POST_DELETE_OWNER_ONLY = _env_bool("POST_DELETE_OWNER_ONLY", False)

    # Largest accepted upload plus room for the multipart envelope.
    MAX_CONTENT_LENGTH = _env_int("MAX_CONTENT_LENGTH", 51 * 1024 * 1024)

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # Credentialed CORS cannot use a wildcard origin.
    _default_cors_origins = [
        "http://localhost:5173",
        r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$",
    ]
    _cors_origins_raw = os.getenv("CORS_ALLOWED_ORIGINS", "").strip()
    if _cors_origins_raw:
        _cors_origins = [
            item.strip() for item in _cors_origins_raw.split(",") if item.strip()
        ]
        CORS_ALLOWED_ORIGINS = [
            origin for origin in _cors_origins if origin != "*"
        ] or _default_cors_origins
    else:
        CORS_ALLOWED_ORIGINS = _default_cors_origins

    JWT_COOKIE_SAMESITE = "None"
    JWT_COOKIE_SECURE = True
