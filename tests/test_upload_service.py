import pytest

from camgallery.application.services.upload_service import UploadService
from camgallery.exceptions import BadRequestError, InternalError, PayloadTooLargeError

from .fakes import DummyUpload, FakeStorage

ALLOWED = frozenset({"jpg", "jpeg", "png", "gif"})


def make_service(storage, max_file_size=10 * 1024 * 1024, enforce=True):
    return UploadService(storage_repo=storage, max_file_size=max_file_size, allowed_extensions=ALLOWED, enforce_extensions=enforce)


def test_upload_happy_path():
    storage = FakeStorage()
    result = make_service(storage).upload(DummyUpload("test.jpg", b"x" * 1200))

    assert result.success is True
    assert result.size_bytes == 1200
    assert result.public_url == f"/uploads/{result.name}"
    assert len(storage.images) == 1


def test_upload_without_file_is_rejected():
    storage = FakeStorage()
    with pytest.raises(BadRequestError) as exc:
        make_service(storage).upload(None)
    assert exc.value.status_code == 400
    assert exc.value.detail == "No file received"
    assert storage.images == []


def test_upload_with_empty_filename_is_rejected():
    storage = FakeStorage()
    with pytest.raises(BadRequestError):
        make_service(storage).upload(DummyUpload(""))
    assert storage.images == []


@pytest.mark.parametrize("filename", ["notes.txt", "photo.bmp", "archive.jpg.zip", "noextension"])
def test_upload_rejects_unsupported_extensions(filename):
    storage = FakeStorage()
    with pytest.raises(BadRequestError) as exc:
        make_service(storage).upload(DummyUpload(filename))
    assert exc.value.detail == "Unsupported file type"
    assert storage.images == []


def test_upload_extension_check_is_case_insensitive():
    storage = FakeStorage()
    make_service(storage).upload(DummyUpload("IMG_0001.JPEG"))
    assert len(storage.images) == 1


def test_upload_extension_check_can_be_disabled():
    storage = FakeStorage()
    make_service(storage, enforce=False).upload(DummyUpload("frame.raw"))
    assert len(storage.images) == 1


def test_upload_too_large():
    storage = FakeStorage()
    with pytest.raises(PayloadTooLargeError) as exc:
        make_service(storage, max_file_size=1000).upload(DummyUpload("big.jpg", b"x" * 1001))
    assert exc.value.status_code == 413
    assert storage.images == []


def test_upload_exactly_at_limit_is_accepted():
    storage = FakeStorage()
    make_service(storage, max_file_size=1000).upload(DummyUpload("edge.jpg", b"x" * 1000))
    assert len(storage.images) == 1


def test_upload_backend_failure_becomes_internal_error():
    storage = FakeStorage(fail_with="disk full")
    with pytest.raises(InternalError) as exc:
        make_service(storage).upload(DummyUpload("test.jpg"))
    assert exc.value.status_code == 500
    assert exc.value.error == "disk full"
