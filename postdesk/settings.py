from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


def choose_env_file() -> str:
    return ".env.local" if Path(".env.local").exists() else ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=choose_env_file(),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # tolerate unrelated env vars
    )

    # Storage
    POSTS_DIR: str = "source/_posts"
    IMAGES_DIR: str = "public/images"
    IMAGES_URL_PREFIX: str = "/images"

    # Static site generator
    SITE_DIR: str = "."
    REGENERATE_COMMAND: str = "hexo clean && hexo generate"
    REGENERATE_ENABLED: bool = True
    REGENERATE_TIMEOUT_SECONDS: int = 300

    # Uploads
    MAX_IMAGE_BYTES: int = 10 * 1024 * 1024
    MAX_BATCH_IMAGES: int = 10

    # Logging
    LOG_LEVEL: str = "INFO"

    # Shared bearer token for the editor
    API_TOKEN: str = ""

    # Editor origin (hexo server defaults to :4000)
    CORS_ORIGINS: List[str] = ["http://localhost:4000"]

    @property
    def posts_path(self) -> Path:
        return Path(self.POSTS_DIR)

    @property
    def images_path(self) -> Path:
        return Path(self.IMAGES_DIR)


# Global settings instance (evaluated at import, but reads env on construction)
settings = Settings()
