# camgallery/core/config.py
import os
from functools import lru_cache
from typing import List, Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Application Settings
    APP_NAME: str = "ESP32-CAM Gallery"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    DOCS_ENABLED: bool = True

    # Server Settings
    HOST: str = "0.0.0.0"
    PORT: int = int(os.environ.get("PORT", 3000))

    # Storage Settings
    STORAGE_BACKEND: Literal["local", "azure"] = "local"
    UPLOAD_DIR: str = "uploads"
    FILENAME_PREFIX: str = "photo_"

    # Azure Blob Storage
    AZURE_STORAGE_CONNECTION_STRING: str = ""
    AZURE_CONTAINER_NAME: str = "esp32-photos"
    AZURE_TIMEOUT_SECONDS: int = 30

    # File Upload Settings
    MAX_FILE_SIZE: int = 10 * 1024 * 1024  # 10MB
    MAX_REQUEST_OVERHEAD: int = 64 * 1024  # multipart envelope
    ALLOWED_EXTENSIONS: str = "jpg,jpeg,png,gif"
    ENFORCE_EXTENSIONS: bool = True
    ENABLE_DELETE: bool = True

    # CORS / middleware
    ALLOWED_ORIGINS: str = "*"
    GZIP_MIN_SIZE: int = 500

    # Logging Settings
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    def _split_csv(self, value: str) -> List[str]:
        if value is None:
            return []
        value = value.strip()
        if value == "":
            return []
        return [item.strip() for item in value.split(",")]

    @property
    def allowed_origins_list(self) -> List[str]:
        return self._split_csv(self.ALLOWED_ORIGINS)

    @property
    def allowed_extensions_set(self) -> frozenset:
        return frozenset(ext.lower().lstrip(".") for ext in self._split_csv(self.ALLOWED_EXTENSIONS))

    @property
    def max_request_size(self) -> int:
        return self.MAX_FILE_SIZE + self.MAX_REQUEST_OVERHEAD


@lru_cache()
def get_settings() -> Settings:
    return Settings()
