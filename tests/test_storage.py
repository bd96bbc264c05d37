import pathlib

import pytest

from photogallery.storage import (
    FileSystemStorage,
    UploadStorage,
    get_storage_backend,
)
from photogallery.storage.filesystem_storage import generate_filename


def test_storage_interface() -> None:
    # All storage backends must implement the UploadStorage interface
    storage: UploadStorage = FileSystemStorage(base_path="/does/not/matter")
    assert callable(storage.save)


def test_upload_storage_is_abstract() -> None:
    with pytest.raises(TypeError):
        UploadStorage()  # type: ignore[abstract]


def test_filesystem_storage_save(tmp_path: pathlib.Path) -> None:
    storage = FileSystemStorage(base_path=str(tmp_path))
    url = storage.save("photo", "holiday.JPG", b"first")

    assert url.startswith("/uploads/photo/")
    assert url.endswith(".JPG")
    name = url.rsplit("/", 1)[-1]
    assert (tmp_path / "photo" / name).read_bytes() == b"first"


def test_filesystem_storage_creates_field_directory(tmp_path: pathlib.Path) -> None:
    storage = FileSystemStorage(base_path=str(tmp_path / "nested"))
    url = storage.save("profilePic", "me.png", b"avatar")
    assert url.startswith("/uploads/profilePic/")
    assert (tmp_path / "nested" / "profilePic").is_dir()


def test_generate_filename_is_timestamp_plus_extension(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr("time.time", lambda: 1700000000.5)
    assert generate_filename("cat.jpeg") == "1700000000500.jpeg"
    assert generate_filename("no_extension") == "1700000000500"


def test_default_storage_is_filesystem(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("STORAGE_BACKEND", raising=False)
    storage = get_storage_backend()
    assert isinstance(storage, FileSystemStorage)


def test_override_backend_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STORAGE_BACKEND", "FileSystem")
    storage = get_storage_backend()
    assert isinstance(storage, FileSystemStorage)


def test_unknown_backend_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STORAGE_BACKEND", "unknown")
    with pytest.raises(ValueError, match="Unknown storage backend"):
        get_storage_backend()


def test_filesystem_storage_delete(tmp_path: pathlib.Path) -> None:
    storage = FileSystemStorage(base_path=str(tmp_path))
    url = storage.save("photo", "holiday.jpg", b"first")
    storage.delete(url)
    assert list((tmp_path / "photo").iterdir()) == []
    # Deleting again is not an error
    storage.delete(url)
