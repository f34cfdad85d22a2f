# noqa: D104
"""Tests for local storage and the download-folder save-as capability."""

from __future__ import annotations

from pathlib import Path

import pytest

from image_compressor.core.errors import SaveError
from image_compressor.storage.download import DownloadFolderSaver
from image_compressor.storage.local import LocalStorage


class TestLocalStorage:
    def test_temporary_file_is_released(self, storage: LocalStorage) -> None:
        with storage.temporary_file(b"data", suffix="jpg") as path:
            assert path.read_bytes() == b"data"
            assert path.suffix == ".jpg"
            assert path.parent == storage.temp_dir

        assert not path.exists()

    def test_temporary_file_is_released_on_error(self, storage: LocalStorage) -> None:
        with pytest.raises(RuntimeError):
            with storage.temporary_file(b"data", suffix=".jpg") as path:
                raise RuntimeError("interrupted")

        assert not path.exists()

    def test_register_public_download_never_overwrites(self, storage: LocalStorage, temp_dir: Path) -> None:
        source = temp_dir / "source.jpg"
        source.write_bytes(b"one")

        first = storage.register_public_download(source, "compressed.jpg")
        second = storage.register_public_download(source, "compressed.jpg")
        third = storage.register_public_download(source, "compressed.jpg")

        assert [first.name, second.name, third.name] == [
            "compressed.jpg",
            "compressed-1.jpg",
            "compressed-2.jpg",
        ]
        assert [path.name for path in storage.list_downloads()] == sorted(
            ["compressed.jpg", "compressed-1.jpg", "compressed-2.jpg"]
        )


class TestDownloadFolderSaver:
    def test_saves_under_suggested_name(self, folder_saver: DownloadFolderSaver, storage: LocalStorage) -> None:
        saved = folder_saver.save_binary_as(b"\xff\xd8jpeg", "image/jpeg", "compressed.jpg")

        assert saved == storage.download_root / "compressed.jpg"
        assert saved.read_bytes() == b"\xff\xd8jpeg"
        assert list(storage.temp_dir.iterdir()) == []

    def test_custom_target_dir(self, storage: LocalStorage, temp_dir: Path) -> None:
        saver = DownloadFolderSaver(storage, target_dir=temp_dir / "elsewhere")

        saved = saver.save_binary_as(b"jpeg", "image/jpeg", "compressed.jpg")

        assert saved == temp_dir / "elsewhere" / "compressed.jpg"
        assert list(storage.temp_dir.iterdir()) == []

    def test_os_errors_become_save_errors(self, storage: LocalStorage, temp_dir: Path) -> None:
        blocker = temp_dir / "blocker"
        blocker.write_bytes(b"not a directory")
        saver = DownloadFolderSaver(storage, target_dir=blocker / "downloads")

        with pytest.raises(SaveError) as excinfo:
            saver.save_binary_as(b"jpeg", "image/jpeg", "compressed.jpg")

        assert excinfo.value.message.startswith("Could not save compressed.jpg")
        assert list(storage.temp_dir.iterdir()) == []
