import os
from dataclasses import dataclass
from pathlib import Path

from sqlalchemy.engine import URL


@dataclass(frozen=True)
class Settings:
    secret_key: str
    env: str
    database_url: str
    log_level: str

    upload_root: str
    receitaws_base_url: str


def _getenv(name: str, default: str = "") -> str:
    return (os.environ.get(name) or default).strip()


def _database_url() -> str:
    url = _getenv("DATABASE_URL")
    if url:
        return url
    # Discrete DB_* variables describe a Postgres server.
    host = _getenv("DB_HOST")
    if not host:
        return "sqlite:///gestao.db"
    port = _getenv("DB_PORT")
    return URL.create(
        "postgresql+psycopg2",
        username=_getenv("DB_USER") or None,
        password=_getenv("DB_PASSWORD") or None,
        host=host,
        port=int(port) if port else None,
        database=_getenv("DB_NAME", "gestao_documental"),
    ).render_as_string(hide_password=False)


def load_settings() -> Settings:
    return Settings(
        secret_key=_getenv("SECRET_KEY", "change-me"),
        env=_getenv("ENV", "development"),
        database_url=_database_url(),
        log_level=_getenv("LOG_LEVEL", "INFO").upper(),
        upload_root=_getenv("UPLOAD_ROOT", str(Path(os.getcwd()) / "uploads")),
        receitaws_base_url=_getenv("RECEITAWS_BASE_URL", "https://receitaws.com.br/v1"),
    )


def load_config() -> dict:
    s = load_settings()
    is_production = s.env in ("prod", "production")
    return {
        "SECRET_KEY": s.secret_key,
        "ENV": s.env,
        "DATABASE_URL": s.database_url,
        "LOG_LEVEL": s.log_level,
        "UPLOAD_ROOT": s.upload_root,
        "RECEITAWS_BASE_URL": s.receitaws_base_url,
        # security defaults
        "SESSION_COOKIE_HTTPONLY": True,
        "SESSION_COOKIE_SAMESITE": "Lax",
        "SESSION_COOKIE_SECURE": is_production,
        # request body limit; the 10MB per-file limit is enforced in uploads.py
        "MAX_CONTENT_LENGTH": 25 * 1024 * 1024,
    }
