import errno
import os
import re
import threading

import pytest

from camgallery.exceptions import ImageNotFound, StorageError
from camgallery.infrastructure.storage import naming
from camgallery.infrastructure.storage.local_storage import LocalStorageRepository

NAME_RE = re.compile(r"^photo_\d{13}(_\d+)?\.jpg$")


def test_put_writes_file_with_timestamp_name(storage):
    stored = storage.put("test.jpg", b"\xff\xd8" + b"x" * 1198)

    assert NAME_RE.match(stored.name)
    assert stored.size_bytes == 1200
    assert stored.url == f"/uploads/{stored.name}"
    with open(os.path.join(storage.upload_dir, stored.name), "rb") as f:
        assert len(f.read()) == 1200
    # no temp files left behind
    assert os.listdir(storage.upload_dir) == [stored.name]


def test_put_same_millisecond_gets_counter_suffix(storage, monkeypatch):
    monkeypatch.setattr(naming.time, "time", lambda: 1700000000.123)

    first = storage.put("a.jpg", b"one")
    second = storage.put("b.jpg", b"two")

    assert first.name == "photo_1700000000123.jpg"
    assert second.name == "photo_1700000000123_1.jpg"
    assert sorted(img.name for img in storage.list()) == [first.name, second.name]


@pytest.mark.parametrize("hint,expected", [("cam.PNG", ".png"), ("cam.jpeg", ".jpg"), ("cam.gif", ".gif"), ("cam.bmp", ".jpg"), ("noext", ".jpg")])
def test_put_extension_follows_name_hint(storage, hint, expected):
    assert storage.put(hint, b"data").name.endswith(expected)


def test_put_failure_leaves_nothing_visible(storage, monkeypatch):
    def broken_link(src, dst):
        raise PermissionError("read-only filesystem")

    monkeypatch.setattr(os, "link", broken_link)

    with pytest.raises(StorageError):
        storage.put("test.jpg", b"data")
    assert os.listdir(storage.upload_dir) == []


def test_list_reports_sizes_and_skips_hidden_files(storage):
    storage.put("a.jpg", b"12345")
    with open(os.path.join(storage.upload_dir, ".upload.part"), "wb") as f:
        f.write(b"partial")
    os.makedirs(os.path.join(storage.upload_dir, "subdir"))

    images = storage.list()

    assert len(images) == 1
    assert images[0].size_bytes == 5
    assert images[0].created_at.tzinfo is not None


def test_list_is_restartable(storage):
    storage.put("a.jpg", b"1")
    assert len(storage.list()) == 1
    storage.put("b.jpg", b"2")
    assert len(storage.list()) == 2


def test_list_missing_directory_raises(tmp_path):
    repo = LocalStorageRepository(str(tmp_path / "gone"))
    os.rmdir(repo.upload_dir)

    with pytest.raises(StorageError):
        repo.list()


def test_delete_and_exists(storage):
    stored = storage.put("a.jpg", b"1")
    assert storage.exists(stored.name) is True

    storage.delete(stored.name)

    assert storage.exists(stored.name) is False
    assert storage.list() == []
    with pytest.raises(ImageNotFound):
        storage.delete(stored.name)


@pytest.mark.parametrize("name", ["../secret.jpg", ".hidden.jpg", "a/b.jpg", ""])
def test_unsafe_names_are_never_found(storage, name):
    assert storage.exists(name) is False
    with pytest.raises(ImageNotFound):
        storage.delete(name)


def test_creates_upload_directory(tmp_path):
    target = tmp_path / "nested" / "uploads"
    LocalStorageRepository(str(target))
    assert target.is_dir()


def test_concurrent_puts_in_same_millisecond_get_distinct_names(storage, monkeypatch):
    monkeypatch.setattr(naming.time, "time", lambda: 1700000000.123)
    names = []
    errors = []
    start = threading.Barrier(20)

    def worker(i):
        start.wait()
        try:
            names.append(storage.put(f"frame{i}.jpg", b"x" * (i + 1)).name)
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(20)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert len(set(names)) == 20
    assert sorted(os.listdir(storage.upload_dir)) == sorted(names)
    assert sorted(img.size_bytes for img in storage.list()) == list(range(1, 21))


def test_put_without_hard_link_support_reserves_names(storage, monkeypatch):
    def no_links(src, dst):
        raise OSError(errno.EPERM, "Operation not permitted")

    monkeypatch.setattr(os, "link", no_links)
    monkeypatch.setattr(naming.time, "time", lambda: 1700000000.123)

    first = storage.put("a.jpg", b"first")
    second = storage.put("b.jpg", b"second")

    assert storage.hard_links is False
    assert first.name == "photo_1700000000123.jpg"
    assert second.name == "photo_1700000000123_1.jpg"
    with open(os.path.join(storage.upload_dir, first.name), "rb") as f:
        assert f.read() == b"first"
    assert sorted(os.listdir(storage.upload_dir)) == [first.name, second.name]
