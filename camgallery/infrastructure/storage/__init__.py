import logging

from ...application.ports.storage_repo import StorageRepository
from ...core.config import Settings
from .local_storage import LocalStorageRepository

logger = logging.getLogger(__name__)


def build_storage(settings: Settings) -> StorageRepository:
    """Pick the storage backend named by ``STORAGE_BACKEND``."""
    if settings.STORAGE_BACKEND == "azure":
        # Imported lazily so local deployments do not load the Azure SDK
        from .azure_blob_storage import AzureBlobStorageRepository

        logger.info(f"Using Azure blob storage container {settings.AZURE_CONTAINER_NAME}")
        return AzureBlobStorageRepository.from_connection_string(
            settings.AZURE_STORAGE_CONNECTION_STRING,
            settings.AZURE_CONTAINER_NAME,
            timeout=settings.AZURE_TIMEOUT_SECONDS,
            prefix=settings.FILENAME_PREFIX,
            allowed_extensions=settings.allowed_extensions_set,
        )

    logger.info(f"Using local storage directory {settings.UPLOAD_DIR}")
    return LocalStorageRepository(
        settings.UPLOAD_DIR,
        prefix=settings.FILENAME_PREFIX,
        allowed_extensions=settings.allowed_extensions_set,
    )


__all__ = ["build_storage", "LocalStorageRepository"]
