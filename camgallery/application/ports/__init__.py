from .storage_repo import StorageRepository, StoredImage

__all__ = ["StorageRepository", "StoredImage"]
