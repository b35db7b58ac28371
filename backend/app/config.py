from __future__ import annotations

import warnings
from functools import lru_cache
from pathlib import Path

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    domain: str = "localhost"
    jwt_secret: str = ""  # HS256 signing secret for access tokens
    allow_insecure_jwt: bool = False

    @model_validator(mode="after")
    def _check_jwt_secret(self) -> Settings:
        self.jwt_secret = self.jwt_secret.strip()
        if not self.jwt_secret:
            if self.allow_insecure_jwt:
                warnings.warn(
                    "JWT_SECRET is empty but ALLOW_INSECURE_JWT is set; "
                    "this is INSECURE and should only be used for development.",
                    stacklevel=2,
                )
            else:
                raise ValueError(
                    "JWT_SECRET is not set. An empty JWT secret allows attackers to "
                    "forge access tokens. Set JWT_SECRET in .env or set "
                    "ALLOW_INSECURE_JWT=1 for development."
                )
        return self

    jwt_access_token_expire_minutes: int = 60 * 24
    data_dir: Path = Path("./data")
    db_url: str = "sqlite:///./data/memos.db"

    # Memo listing and stats
    default_list_limit: int = 50
    stats_window_days: int = 30

    # Prefixes used to build external reference strings
    resource_collection: str = "resources"
    memo_collection: str = "memos"


@lru_cache
def get_settings() -> Settings:
    return Settings()
