from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv
from fastapi import Request

DEFAULT_CORS_ORIGINS = ("http://localhost:3000", "http://127.0.0.1:3000")


def _require(name: str) -> str:
    value = os.getenv(name, "").strip()
    if not value:
        raise RuntimeError(f"{name} is not set. Check .env")
    return value


def _flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return default
    return raw in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    database_url: str
    token_secret: str
    code_secret: str
    resend_api_key: str
    mail_from: str
    environment: str = "development"
    password_hash_rounds: int = 12
    cors_origins: tuple[str, ...] = DEFAULT_CORS_ORIGINS
    log_level: str = "INFO"
    auto_create_tables: bool = False

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()

        origins = os.getenv("CORS_ORIGINS", "").strip()
        cors_origins = tuple(o.strip() for o in origins.split(",") if o.strip()) or DEFAULT_CORS_ORIGINS

        return cls(
            database_url=_require("DATABASE_URL"),
            token_secret=_require("TOKEN_SECRET"),
            code_secret=_require("HMAC_VERIFICATION_CODE_SECRET"),
            resend_api_key=_require("RESEND_API_KEY"),
            mail_from=_require("MAIL_FROM"),
            environment=os.getenv("ENV", "development").strip() or "development",
            password_hash_rounds=int(os.getenv("PASSWORD_HASH_ROUNDS", "12")),
            cors_origins=cors_origins,
            log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO",
            auto_create_tables=_flag("DB_AUTO_CREATE"),
        )


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
