"""Application settings and validation."""

import os
from pathlib import Path

BASE = Path(__file__).resolve().parent.parent


class Settings:
    ENV: str
    DATABASE_URL: str
    SQL_ECHO: bool
    API_PREFIX: str
    LOG_LEVEL: str
    ALLOW_DEV_CORS: bool
    CORS_ORIGINS: list
    APP_HOST: str
    APP_PORT: int

    def __init__(self):
        self.ENV = os.getenv("ENV", "dev").lower()
        self.DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{BASE / 'quizzes.db'}")
        self.SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() == "true"
        self.API_PREFIX = os.getenv("API_PREFIX", "/api").rstrip("/")
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        self.ALLOW_DEV_CORS = os.getenv("ALLOW_DEV_CORS", "true").lower() == "true"
        self.CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
        self.APP_HOST = os.getenv("APP_HOST", "0.0.0.0")
        self.APP_PORT = int(os.getenv("APP_PORT", "3000"))
        self._validate()

    def _validate(self):
        if self.API_PREFIX and not self.API_PREFIX.startswith("/"):
            raise RuntimeError("API_PREFIX must start with '/' (e.g. /api)")
        if self.ENV != "dev" and self.ALLOW_DEV_CORS and "*" in self.CORS_ORIGINS:
            raise RuntimeError("wildcard CORS_ORIGINS is only allowed in the dev environment")


settings = Settings()
