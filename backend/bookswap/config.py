"""
Application settings.

Values come from environment variables (a local ``.env`` file is loaded
first).  ``Settings.from_env()`` is called once by ``create_app``; tests
build ``Settings`` directly.
"""

import os
from dataclasses import dataclass, field
from datetime import timedelta
from typing import List

from dotenv import load_dotenv

DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


@dataclass
class Settings:
    database_url: str = "sqlite:///./bookswap.db"
    sql_echo: bool = False
    log_level: str = "INFO"
    cors_origins: List[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))

    # Sessions are rolling: expiry is pushed out to now + max_age at most once per update_age
    session_cookie_name: str = "bookswap.session-token"
    session_cookie_secure: bool = False
    session_max_age: timedelta = timedelta(days=30)
    session_update_age: timedelta = timedelta(hours=24)

    github_client_id: str = ""
    github_client_secret: str = ""
    enable_stub_auth: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()

        cors_origins = list(DEFAULT_CORS_ORIGINS)
        extra = os.getenv("CORS_ORIGINS", "")
        if extra:
            cors_origins.extend(o.strip() for o in extra.split(",") if o.strip())

        return cls(
            database_url=os.getenv("DATABASE_URL", "sqlite:///./bookswap.db"),
            sql_echo=_env_bool("SQL_ECHO"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            cors_origins=cors_origins,
            session_cookie_name=os.getenv("SESSION_COOKIE_NAME", "bookswap.session-token"),
            session_cookie_secure=_env_bool("SESSION_COOKIE_SECURE"),
            session_max_age=timedelta(seconds=int(os.getenv("SESSION_MAX_AGE_SECONDS", str(30 * 24 * 60 * 60)))),
            session_update_age=timedelta(seconds=int(os.getenv("SESSION_UPDATE_AGE_SECONDS", str(24 * 60 * 60)))),
            github_client_id=os.getenv("GITHUB_CLIENT_ID", ""),
            github_client_secret=os.getenv("GITHUB_CLIENT_SECRET", ""),
            enable_stub_auth=_env_bool("AUTH_ENABLE_STUB"),
        )
