from pydantic_settings import BaseSettings
from functools import lru_cache
from decimal import Decimal
from typing import List, Optional


def normalize_database_url(value: Optional[str]) -> Optional[str]:
    """Accept URLs pasted straight from a provider console"""
    if not value:
        return value
    url = value.strip()
    if url.startswith("psql "):
        url = url[5:].strip()
    if len(url) >= 2 and url[0] == url[-1] and url[0] in ("'", '"'):
        url = url[1:-1]
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://"):]
    return url


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "ERP Core"
    APP_PORT: int = 3001
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    CORS_ORIGIN: str = "*"

    # Auth
    SECRET_KEY: str = "erp-secret-key-change-in-production"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # Database
    DATABASE_URL: Optional[str] = None
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "erp"
    POSTGRES_PORT: int = 5432
    PGSSLMODE: Optional[str] = None

    # Orders
    TAX_RATE: Decimal = Decimal("0")

    # Pagination
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100

    @property
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        if self.DATABASE_URL:
            return normalize_database_url(self.DATABASE_URL)
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    @property
    def cors_origins(self) -> List[str]:
        if self.CORS_ORIGIN.strip() == "*":
            return ["*"]
        return [origin.strip() for origin in self.CORS_ORIGIN.split(",") if origin.strip()]

    class Config:
        env_file = ".env"
        extra = "ignore"

@lru_cache()
def get_settings() -> Settings:
    return Settings()

settings = get_settings()
