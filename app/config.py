import os

from dotenv import load_dotenv
from sqlalchemy.engine import URL


load_dotenv()


class ConfigError(RuntimeError):
    pass


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_list(name: str) -> list[str]:
    raw = os.getenv(name, "").strip()
    return [item.strip() for item in raw.split(",") if item.strip()]


def build_database_uri(host, user, password, name, port=5432):
    if not (host and user and name):
        return None
    return URL.create(
        "postgresql+psycopg",
        username=user,
        password=password or None,
        host=host,
        port=int(port or 5432),
        database=name,
    ).render_as_string(hide_password=False)


class Config:
    PORT = int(os.getenv("PORT", "3000"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL") or build_database_uri(
        os.getenv("DB_HOST"),
        os.getenv("DB_USER"),
        os.getenv("DB_PASSWORD"),
        os.getenv("DB_NAME"),
        os.getenv("DB_PORT", "5432"),
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}

    # 500 MiB per request, enforced by werkzeug before the view runs.
    MAX_CONTENT_LENGTH = int(os.getenv("MAX_CONTENT_LENGTH", str(500 * 1024 * 1024)))

    ASSET_SINK = os.getenv("ASSET_SINK", "local").strip().lower()

    UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", "").strip() or None
    UPLOADS_URL_PREFIX = os.getenv("UPLOADS_URL_PREFIX", "/uploads").rstrip("/")
    APP_PUBLIC_BASE_URL = os.getenv("APP_PUBLIC_BASE_URL", "").strip()

    MINIO_ENDPOINT = os.getenv("MINIO_ENDPOINT", "").strip()
    MINIO_ACCESS_KEY = os.getenv("MINIO_ACCESS_KEY", "").strip()
    MINIO_SECRET_KEY = os.getenv("MINIO_SECRET_KEY", "").strip()
    MINIO_BUCKET = os.getenv("MINIO_BUCKET", "media").strip()
    MINIO_SECURE = _env_bool("MINIO_SECURE", False)
    MINIO_CONNECT_TIMEOUT = float(os.getenv("MINIO_CONNECT_TIMEOUT", "5"))
    MINIO_READ_TIMEOUT = float(os.getenv("MINIO_READ_TIMEOUT", "20"))
    MINIO_HTTP_POOL_MAXSIZE = int(os.getenv("MINIO_HTTP_POOL_MAXSIZE", "32"))
    MINIO_PUBLIC_BASE_URL = os.getenv("MINIO_PUBLIC_BASE_URL", "").strip()
    MEDIA_LOCAL_FALLBACK_ENABLED = _env_bool("MEDIA_LOCAL_FALLBACK_ENABLED", False)

    # Entries starting with "^" are matched as regular expressions.
    _default_cors_origins = [
        "http://127.0.0.1:5500",
        r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$",
    ]
    _env_cors_origins = [
        origin for origin in _env_list("CORS_ALLOWED_ORIGINS") if origin != "*"
    ]
    CORS_ALLOWED_ORIGINS = _env_cors_origins or _default_cors_origins


ASSET_SINKS = ("local", "minio")

_MINIO_REQUIRED = (
    "MINIO_ENDPOINT",
    "MINIO_ACCESS_KEY",
    "MINIO_SECRET_KEY",
    "MINIO_BUCKET",
)


def validate_config(config) -> None:
    """Raise ConfigError listing every missing setting.

    Called once from create_app so a misconfigured process never starts
    serving requests.
    """
    missing = []

    if not config.get("SQLALCHEMY_DATABASE_URI"):
        missing.append("DATABASE_URL (or DB_HOST, DB_USER, DB_PASSWORD, DB_NAME)")

    sink = config.get("ASSET_SINK")
    if sink not in ASSET_SINKS:
        raise ConfigError(
            f"Unknown ASSET_SINK {sink!r}; expected one of {', '.join(ASSET_SINKS)}"
        )

    if sink == "minio":
        missing.extend(key for key in _MINIO_REQUIRED if not config.get(key))

    if missing:
        raise ConfigError("Missing required configuration: " + ", ".join(missing))
