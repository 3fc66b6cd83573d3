import logging
import mimetypes
from datetime import datetime, timezone
from typing import Iterable, List, Optional
from urllib.parse import quote

from azure.core.exceptions import AzureError, ResourceExistsError, ResourceNotFoundError
from azure.storage.blob import BlobServiceClient, ContainerClient, ContentSettings

from ...application.ports.storage_repo import StorageRepository, StoredImage
from ...exceptions import ImageNotFound, StorageError
from .naming import candidate_names, stored_extension

logger = logging.getLogger(__name__)


class AzureBlobStorageRepository(StorageRepository):
    """Photos stored as blobs in a single public-read container.

    Every SDK call is bounded by ``timeout`` seconds and never retried; SDK
    failures surface as ``StorageError`` carrying the SDK message.
    """

    backend_name = "azure"

    def __init__(self, container: ContainerClient, prefix: str = "photo_", allowed_extensions: Optional[Iterable[str]] = None, timeout: int = 30) -> None:
        self.container = container
        self.prefix = prefix
        self.allowed_extensions = frozenset(allowed_extensions or ("jpg", "jpeg", "png", "gif"))
        self.timeout = timeout

    @classmethod
    def from_connection_string(cls, connection_string: str, container_name: str, timeout: int = 30, **kwargs) -> "AzureBlobStorageRepository":
        if not connection_string:
            raise ValueError("AZURE_STORAGE_CONNECTION_STRING is required for the azure storage backend")
        service = BlobServiceClient.from_connection_string(
            connection_string,
            retry_total=0,
            connection_timeout=timeout,
            read_timeout=timeout,
        )
        repo = cls(service.get_container_client(container_name), timeout=timeout, **kwargs)
        repo.ensure_container()
        return repo

    def ensure_container(self) -> None:
        try:
            self.container.create_container(public_access="blob", timeout=self.timeout)
            logger.info(f"Created blob container {self.container.container_name}")
        except ResourceExistsError:
            logger.info(f"Using existing blob container {self.container.container_name}")
        except AzureError as e:
            logger.error(f"Could not prepare blob container: {e}")
            raise StorageError(f"Failed to prepare container: {e}") from e

    def put(self, name_hint: str, content: bytes) -> StoredImage:
        extension = stored_extension(name_hint, self.allowed_extensions)
        content_type = mimetypes.guess_type(f"upload.{extension}")[0] or "image/jpeg"
        for name in candidate_names(self.prefix, extension):
            try:
                self.container.upload_blob(
                    name,
                    content,
                    overwrite=False,
                    content_settings=ContentSettings(content_type=content_type),
                    timeout=self.timeout,
                )
            except ResourceExistsError:
                logger.info(f"Blob {name} already exists, trying next candidate")
                continue
            except AzureError as e:
                logger.error(f"Blob upload failed for {name}: {e}")
                raise StorageError(f"Failed to upload blob: {e}") from e
            return StoredImage(
                name=name,
                size_bytes=len(content),
                created_at=datetime.now(timezone.utc),
                url=self.url_for(name),
            )
        raise StorageError("Could not allocate a unique blob name")

    def list(self) -> List[StoredImage]:
        images: List[StoredImage] = []
        try:
            for blob in self.container.list_blobs(timeout=self.timeout):
                created_at = blob.creation_time or blob.last_modified or datetime.now(timezone.utc)
                images.append(
                    StoredImage(
                        name=blob.name,
                        size_bytes=blob.size or 0,
                        created_at=created_at,
                        url=self.url_for(blob.name),
                    )
                )
        except AzureError as e:
            logger.error(f"Blob listing failed: {e}")
            raise StorageError(f"Failed to list blobs: {e}") from e
        return images

    def exists(self, name: str) -> bool:
        try:
            return self.container.get_blob_client(name).exists(timeout=self.timeout)
        except AzureError as e:
            raise StorageError(f"Failed to check blob {name}: {e}") from e

    def delete(self, name: str) -> None:
        try:
            self.container.delete_blob(name, timeout=self.timeout)
        except ResourceNotFoundError:
            raise ImageNotFound(name)
        except AzureError as e:
            logger.error(f"Blob delete failed for {name}: {e}")
            raise StorageError(f"Failed to delete blob {name}: {e}") from e

    def url_for(self, name: str) -> str:
        return f"{self.container.url}/{quote(name)}"
