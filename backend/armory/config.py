from pydantic_settings import BaseSettings
from pydantic import Field
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    app_env: str = Field("dev", alias="APP_ENV")
    database_url_override: Optional[str] = Field(None, alias="DATABASE_URL")
    db_host: str = Field("localhost", alias="DB_HOST")
    db_port: int = Field(5432, alias="DB_PORT")
    db_name: str = Field("armory", alias="DB_NAME")
    db_user: str = Field("armory", alias="DB_USER")
    db_password: str = Field("armorypass", alias="DB_PASSWORD")
    jwt_secret: str = Field("devsecret", alias="JWT_SECRET")
    jwt_expire_hours: int = Field(24, alias="JWT_EXPIRE_HOURS")
    rate_limit_login_per_min: int = Field(8, alias="RATE_LIMIT_LOGIN_PER_MIN")
    cors_origins: str = Field("http://localhost:3000", alias="CORS_ORIGINS")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    audit_page_max: int = Field(500, alias="AUDIT_PAGE_MAX")

    class Config:
        env_file = ".env"
        case_sensitive = False

    @property
    def database_url(self) -> str:
        if self.database_url_override:
            return _ensure_async_url(self.database_url_override)
        return (
            f"postgresql+asyncpg://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


def _ensure_async_url(url: str) -> str:
    if url.startswith("postgres://"):
        url = "postgresql+asyncpg://" + url[len("postgres://") :]
    elif url.startswith("postgresql://") and "+asyncpg" not in url:
        url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url


@lru_cache
def get_settings() -> Settings:
    return Settings()  # type: ignore[arg-type]
