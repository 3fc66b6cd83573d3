import errno
import logging
import os
import tempfile
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from ...application.ports.storage_repo import StorageRepository, StoredImage
from ...exceptions import ImageNotFound, StorageError
from .naming import candidate_names, is_safe_name, stored_extension

logger = logging.getLogger(__name__)

# vfat, some CIFS and overlay mounts refuse link(2)
NO_HARD_LINK_ERRNOS = frozenset({errno.EPERM, errno.ENOTSUP, errno.EOPNOTSUPP, errno.ENOSYS, errno.EXDEV})


class LocalStorageRepository(StorageRepository):
    """Flat directory of photos; all metadata comes from ``os.stat``."""

    backend_name = "local"

    def __init__(self, upload_dir: str, prefix: str = "photo_", allowed_extensions: Optional[Iterable[str]] = None, url_prefix: str = "/uploads") -> None:
        self.upload_dir = upload_dir
        self.prefix = prefix
        self.allowed_extensions = frozenset(allowed_extensions or ("jpg", "jpeg", "png", "gif"))
        self.url_prefix = url_prefix.rstrip("/")
        self.hard_links = True
        os.makedirs(self.upload_dir, exist_ok=True)

    def put(self, name_hint: str, content: bytes) -> StoredImage:
        extension = stored_extension(name_hint, self.allowed_extensions)
        tmp_path = None
        try:
            # Hidden temp file in the same directory so the link below stays on one filesystem
            fd, tmp_path = tempfile.mkstemp(prefix=".", suffix=".part", dir=self.upload_dir)
            with os.fdopen(fd, "wb") as f:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            # mkstemp creates 0600
            os.chmod(tmp_path, 0o644)

            for name in candidate_names(self.prefix, extension):
                path = os.path.join(self.upload_dir, name)
                try:
                    self._publish(tmp_path, path)
                except FileExistsError:
                    logger.info(f"Name {name} already taken, trying next candidate")
                    continue
                return self._stored_image(name, os.stat(path))
            raise StorageError(f"Could not allocate a unique name in {self.upload_dir}")
        except StorageError:
            raise
        except OSError as e:
            logger.error(f"Error writing image to {self.upload_dir}: {e}")
            raise StorageError(f"Failed to store image: {e}") from e
        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.remove(tmp_path)

    def _publish(self, tmp_path: str, path: str) -> None:
        """Move the finished temp file to ``path``; FileExistsError if taken."""
        if self.hard_links:
            try:
                os.link(tmp_path, path)
                return
            except OSError as e:
                if e.errno not in NO_HARD_LINK_ERRNOS:
                    raise
                logger.warning(f"{self.upload_dir} does not support hard links, reserving names instead")
                self.hard_links = False
        # Reserve the name exclusively, then atomically replace the empty placeholder
        fd = os.open(path, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o644)
        os.close(fd)
        try:
            os.replace(tmp_path, path)
        except OSError:
            os.remove(path)
            raise

    def list(self) -> List[StoredImage]:
        images: List[StoredImage] = []
        try:
            with os.scandir(self.upload_dir) as entries:
                for entry in entries:
                    if entry.name.startswith(".") or not entry.is_file():
                        continue
                    try:
                        stat = entry.stat()
                    except FileNotFoundError:
                        # deleted between scandir and stat
                        continue
                    images.append(self._stored_image(entry.name, stat))
        except OSError as e:
            logger.error(f"Error reading {self.upload_dir}: {e}")
            raise StorageError(f"Failed to list images: {e}") from e
        return images

    def exists(self, name: str) -> bool:
        return is_safe_name(name) and os.path.isfile(os.path.join(self.upload_dir, name))

    def delete(self, name: str) -> None:
        if not is_safe_name(name):
            raise ImageNotFound(name)
        try:
            os.remove(os.path.join(self.upload_dir, name))
        except FileNotFoundError:
            raise ImageNotFound(name)
        except OSError as e:
            logger.error(f"Error deleting {name}: {e}")
            raise StorageError(f"Failed to delete {name}: {e}") from e

    def url_for(self, name: str) -> str:
        return f"{self.url_prefix}/{name}"

    def _stored_image(self, name: str, stat: os.stat_result) -> StoredImage:
        return StoredImage(
            name=name,
            size_bytes=stat.st_size,
            created_at=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
            url=self.url_for(name),
        )
