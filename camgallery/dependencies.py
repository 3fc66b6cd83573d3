from fastapi import Depends, Request

from .application.ports.storage_repo import StorageRepository
from .application.services import DeleteService, GalleryService, UploadService
from .core.config import Settings


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_storage(request: Request) -> StorageRepository:
    return request.app.state.storage


def get_upload_service(storage: StorageRepository = Depends(get_storage), settings: Settings = Depends(get_app_settings)) -> UploadService:
    return UploadService(
        storage_repo=storage,
        max_file_size=settings.MAX_FILE_SIZE,
        allowed_extensions=settings.allowed_extensions_set,
        enforce_extensions=settings.ENFORCE_EXTENSIONS,
    )


def get_gallery_service(storage: StorageRepository = Depends(get_storage), settings: Settings = Depends(get_app_settings)) -> GalleryService:
    return GalleryService(
        storage_repo=storage,
        allowed_extensions=settings.allowed_extensions_set,
        delete_enabled=settings.ENABLE_DELETE,
    )


def get_delete_service(storage: StorageRepository = Depends(get_storage)) -> DeleteService:
    return DeleteService(storage_repo=storage)
