# Routers package
from . import gallery_router
from . import photos_router

__all__ = [
    "gallery_router",
    "photos_router",
]
