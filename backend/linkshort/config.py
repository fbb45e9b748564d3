from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings"""

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./linkshort.db"

    # Security
    SECRET_KEY: str = "linkshort-super-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7  # 7 days
    AUTH_COOKIE_NAME: str = "access_token"

    # Rate Limiting
    RATE_LIMIT_PER_HOUR: int = 100

    # Short codes
    SHORT_CODE_LENGTH: int = 6
    MAX_CODE_ATTEMPTS: int = 5

    # Domains
    BASE_URL: str = "http://localhost:8000"
    FRONTEND_URL: str = "http://localhost:3000"
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    # Fallback pages for the public redirect endpoint
    NOT_FOUND_PATH: str = "/404"
    EXPIRED_PATH: str = "/expired"
    ERROR_PATH: str = "/error"

    # Outbound fetches
    FETCH_PAGE_TITLE: bool = True
    TITLE_FETCH_TIMEOUT: float = 5.0
    DOMAIN_VERIFY_TIMEOUT: float = 5.0

    # Logging
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    def fallback_url(self, path: str) -> str:
        """Absolute URL of a frontend fallback page"""
        return f"{self.FRONTEND_URL.rstrip('/')}{path}"


settings = Settings()
