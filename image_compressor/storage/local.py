import shutil
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator, List, Optional
from uuid import uuid4

from image_compressor.core.config import get_settings


class LocalStorage:
    """خدمات التخزين المحلية للملفات المؤقتة ونتائج الضغط القابلة للتنزيل."""

    def __init__(self, base_dir: Optional[Path] = None, download_root: Optional[Path] = None) -> None:
        settings = get_settings()
        self.base_dir = Path(base_dir or settings.storage_dir)
        self.temp_dir = self.base_dir / "tmp" if base_dir else settings.temp_dir
        self.download_root = Path(download_root or settings.public_dir / "downloads")

        for directory in (self.base_dir, self.temp_dir, self.download_root):
            directory.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def _generate_filename(suffix: str) -> str:
        suffix = suffix if suffix.startswith(".") else f".{suffix.lstrip('.')}"
        return f"{uuid4().hex}{suffix}"

    def save_bytes(self, data: bytes, *, suffix: str, directory: Optional[Path] = None) -> Path:
        directory = directory or self.temp_dir
        target_path = directory / self._generate_filename(suffix)
        target_path.write_bytes(data)
        return target_path

    @contextmanager
    def temporary_file(self, data: bytes, *, suffix: str) -> Iterator[Path]:
        """مرجع مؤقت للبيانات يُحذف عند الخروج من السياق في كل الحالات."""
        path = self.save_bytes(data, suffix=suffix, directory=self.temp_dir)
        try:
            yield path
        finally:
            path.unlink(missing_ok=True)

    def register_public_download(self, source: Path, original_name: str, *, directory: Optional[Path] = None) -> Path:
        """نسخ الملف إلى مجلد التنزيلات دون الكتابة فوق ملف موجود (compressed-1.jpg ...)."""
        directory = Path(directory or self.download_root)
        directory.mkdir(parents=True, exist_ok=True)

        name = Path(original_name)
        target = directory / name.name
        counter = 1
        while target.exists():
            target = directory / f"{name.stem}-{counter}{name.suffix}"
            counter += 1

        shutil.copy2(source, target)
        return target

    def list_downloads(self) -> List[Path]:
        return sorted(path for path in self.download_root.glob("*") if path.is_file())

    def cleanup(self, paths: Iterable[Path]) -> None:
        for path in paths:
            if path and path.exists():
                path.unlink(missing_ok=True)
