from .upload_service import UploadResult, UploadService
from .gallery_service import GalleryService, GalleryView
from .delete_service import DeleteService

__all__ = [
    "UploadResult",
    "UploadService",
    "GalleryService",
    "GalleryView",
    "DeleteService",
]
