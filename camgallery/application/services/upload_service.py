import logging
from dataclasses import dataclass
from typing import FrozenSet, Optional

from fastapi import UploadFile

from ..ports.storage_repo import StorageRepository
from ...exceptions import BadRequestError, InternalError, PayloadTooLargeError, StorageError
from ...utils import extension_of

logger = logging.getLogger(__name__)


@dataclass
class UploadResult:
    success: bool
    name: str
    size_bytes: int
    public_url: str


@dataclass
class UploadService:
    storage_repo: StorageRepository
    max_file_size: int
    allowed_extensions: FrozenSet[str]
    enforce_extensions: bool = True

    def upload(self, file: Optional[UploadFile]) -> UploadResult:
        if file is None or not file.filename:
            raise BadRequestError("No file received")

        if self.enforce_extensions and extension_of(file.filename) not in self.allowed_extensions:
            raise BadRequestError(
                "Unsupported file type",
                error=f"Allowed extensions: {', '.join(sorted(self.allowed_extensions))}",
            )

        file.file.seek(0, 2)
        file_size = file.file.tell()
        file.file.seek(0)
        if file_size > self.max_file_size:
            raise PayloadTooLargeError(f"File too large (max {self.max_file_size // (1024*1024)}MB)")

        content = file.file.read()
        try:
            stored = self.storage_repo.put(file.filename, content)
        except StorageError as e:
            logger.error(f"Upload of {file.filename} failed: {e}")
            raise InternalError("Upload failed", error=str(e))

        logger.info(f"Stored {file.filename} as {stored.name} ({stored.size_bytes} bytes)")
        return UploadResult(success=True, name=stored.name, size_bytes=stored.size_bytes, public_url=stored.url)
