from dataclasses import dataclass
from datetime import datetime
from typing import List, Protocol


@dataclass(frozen=True)
class StoredImage:
    name: str
    size_bytes: int
    created_at: datetime
    url: str


class StorageRepository(Protocol):
    """Where uploaded photos live.

    ``put`` must publish the image only once it is fully written, and must be
    safe to call concurrently: uniqueness comes from the generated name, not a
    lock. Backend failures are raised as ``StorageError``.
    """

    backend_name: str

    def put(self, name_hint: str, content: bytes) -> StoredImage:
        ...

    def list(self) -> List[StoredImage]:
        ...

    def exists(self, name: str) -> bool:
        ...

    def delete(self, name: str) -> None:
        ...

    def url_for(self, name: str) -> str:
        ...
