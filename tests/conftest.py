import pytest
from fastapi.testclient import TestClient

from camgallery.core.config import Settings
from camgallery.infrastructure.storage.local_storage import LocalStorageRepository
from camgallery.main import create_app


@pytest.fixture
def settings(tmp_path):
    return Settings(_env_file=None, UPLOAD_DIR=str(tmp_path / "uploads"), STORAGE_BACKEND="local")


@pytest.fixture
def storage(settings):
    return LocalStorageRepository(settings.UPLOAD_DIR, prefix=settings.FILENAME_PREFIX, allowed_extensions=settings.allowed_extensions_set)


@pytest.fixture
def client(settings, storage):
    with TestClient(create_app(settings, storage)) as c:
        yield c
