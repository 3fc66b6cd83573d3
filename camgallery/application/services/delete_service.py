import logging
from dataclasses import dataclass

from ..ports.storage_repo import StorageRepository
from ...exceptions import ImageNotFound, InternalError, NotFoundError, StorageError

logger = logging.getLogger(__name__)


@dataclass
class DeleteService:
    storage_repo: StorageRepository

    def delete(self, name: str) -> None:
        try:
            if not self.storage_repo.exists(name):
                raise NotFoundError("File not found")
            self.storage_repo.delete(name)
        except ImageNotFound:
            # removed by someone else after the existence check
            raise NotFoundError("File not found")
        except StorageError as e:
            logger.error(f"Failed to delete {name}: {e}")
            raise InternalError("Failed to delete file", error=str(e))
        logger.info(f"Deleted {name}")
