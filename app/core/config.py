from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import AnyHttpUrl, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


BASE_DIR = Path(__file__).resolve().parent.parent.parent
ENV_FILE = BASE_DIR / ".env"


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    PROJECT_NAME: str = "Product Catalog"
    API_V1_PREFIX: str = "/api"

    DATABASE_URL: str
    REDIS_URL: Optional[str] = None
    AUTO_CREATE_SCHEMA: bool = False

    MEDIA_ROOT: str = Field(default="media")
    MAX_IMAGE_SIZE_KB: int = Field(default=2048, ge=1)
    CATEGORY_CACHE_TTL: int = Field(default=60, ge=1)

    LOG_LEVEL: str = Field(default="INFO")
    LOG_FILE_PATH: Optional[str] = None

    CORS_ORIGINS: list[AnyHttpUrl] | list[str] = Field(default_factory=list)

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: str | list[str]) -> list[str]:
        if isinstance(v, str):
            v = v.strip().strip('"\'')
            if v == "*":
                return ["*"]
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @property
    def media_root_path(self) -> Path:
        path = Path(self.MEDIA_ROOT)
        if not path.is_absolute():
            path = BASE_DIR / path
        return path


load_dotenv(ENV_FILE)


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()
