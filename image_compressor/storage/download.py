from __future__ import annotations

import mimetypes
from pathlib import Path
from typing import Optional, Protocol

from image_compressor.core.errors import SaveError
from image_compressor.core.logging import configure_logging

from .local import LocalStorage

logger = configure_logging("download")


class BinarySaver(Protocol):
    """قدرة "حفظ باسم" التي توفرها البيئة (مجلد تنزيلات، متصفح، ...)."""

    def save_binary_as(self, data: bytes, media_type: str, suggested_name: str) -> Optional[Path]:
        ...


class DownloadFolderSaver:
    """يحفظ الناتج في مجلد التنزيلات عبر ملف مؤقت يُحرر فور تسليمه."""

    def __init__(self, storage: LocalStorage | None = None, target_dir: Optional[Path] = None) -> None:
        self.storage = storage or LocalStorage()
        self.target_dir = Path(target_dir) if target_dir else self.storage.download_root

    def save_binary_as(self, data: bytes, media_type: str, suggested_name: str) -> Path:
        suffix = Path(suggested_name).suffix or mimetypes.guess_extension(media_type) or ".bin"

        try:
            with self.storage.temporary_file(data, suffix=suffix) as temp_path:
                saved = self.storage.register_public_download(
                    temp_path, suggested_name, directory=self.target_dir
                )
        except OSError as exc:
            logger.error("تعذر حفظ %s: %s", suggested_name, exc)
            raise SaveError(f"Could not save {suggested_name}: {exc.strerror or exc}") from exc

        logger.info("تم حفظ %s (%s، %s بايت) في %s", suggested_name, media_type, len(data), saved)
        return saved
