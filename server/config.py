# server/config.py

import os
from dataclasses import dataclass
from functools import lru_cache
from dotenv import load_dotenv

from server.errors import ConfigurationError


load_dotenv()


ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 60


def _flag(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    """
    Server settings read from the environment (and .env, if present).
    """
    jwt_secret_key: str | None
    database_url: str
    port: int
    client_url: str
    debug: bool
    log_level: str

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            jwt_secret_key=os.getenv("JWT_SECRET_KEY") or None,
            database_url=os.getenv("DATABASE_URL", "sqlite:///./data/app.db"),
            port=int(os.getenv("PORT", "3001")),
            client_url=os.getenv("CLIENT_URL", "http://localhost:8501"),
            debug=_flag(os.getenv("DEBUG", "false")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )

    def require_secret(self) -> str:
        if not self.jwt_secret_key:
            raise ConfigurationError("JWT secret key is not configured")
        return self.jwt_secret_key


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
