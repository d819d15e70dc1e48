"""Frontend settings and validation."""

import os


class Settings:
    ENV: str
    API_URL: str
    HTTP_TIMEOUT_SECONDS: float
    CACHE_TTL_SECONDS: float
    CACHE_MAX_ENTRIES: int
    QUERY_RETRY: int
    LOG_LEVEL: str
    APP_HOST: str
    APP_PORT: int

    def __init__(self):
        self.ENV = os.getenv("ENV", "dev").lower()
        # server-side calls prefer the internal address when one is configured
        self.API_URL = (
            os.getenv("INTERNAL_API_URL")
            or os.getenv("PUBLIC_API_URL")
            or "http://localhost:3000/api"
        ).rstrip("/")
        self.HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", "10"))
        self.CACHE_TTL_SECONDS = float(os.getenv("CACHE_TTL_SECONDS", "30"))
        self.CACHE_MAX_ENTRIES = int(os.getenv("CACHE_MAX_ENTRIES", "500"))
        self.QUERY_RETRY = int(os.getenv("QUERY_RETRY", "0"))
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        self.APP_HOST = os.getenv("APP_HOST", "0.0.0.0")
        self.APP_PORT = int(os.getenv("WEB_PORT", "3001"))
        self._validate()

    def _validate(self):
        if not self.API_URL.startswith(("http://", "https://")):
            raise RuntimeError("API_URL must be an absolute http(s) URL")
        if self.CACHE_TTL_SECONDS < 0 or self.QUERY_RETRY < 0:
            raise RuntimeError("CACHE_TTL_SECONDS and QUERY_RETRY must be >= 0")
        if self.CACHE_MAX_ENTRIES < 1:
            raise RuntimeError("CACHE_MAX_ENTRIES must be >= 1")


settings = Settings()
