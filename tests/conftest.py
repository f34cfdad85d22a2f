# noqa: D104
"""Pytest fixtures for image compressor tests."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Callable, Generator, List, Optional, Tuple

# Settings are cached at import time; keep every directory out of the repo.
os.environ.setdefault("BASE_DIR", tempfile.mkdtemp(prefix="image-compressor-tests-"))
os.environ.setdefault("BACKEND_URL", "http://compressor.test")

import httpx  # noqa: E402
import pytest  # noqa: E402

from image_compressor.models import SourceImage  # noqa: E402
from image_compressor.services.compression_client import CompressionClient  # noqa: E402
from image_compressor.storage.download import DownloadFolderSaver  # noqa: E402
from image_compressor.storage.local import LocalStorage  # noqa: E402

JPEG_HEADER = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00"


class RecordingSaver:
    """In-memory save-as capability that records every call."""

    def __init__(self, fail_with: Optional[Exception] = None) -> None:
        self.calls: List[Tuple[bytes, str, str]] = []
        self.fail_with = fail_with

    def save_binary_as(self, data: bytes, media_type: str, suggested_name: str) -> Path:
        self.calls.append((data, media_type, suggested_name))
        if self.fail_with is not None:
            raise self.fail_with
        return Path("/virtual") / suggested_name


class RecordingBackend:
    """Fake compression service for httpx.MockTransport."""

    def __init__(self, status_code: int = 200, content: bytes = JPEG_HEADER + b"compressed") -> None:
        self.status_code = status_code
        self.content = content
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, content=self.content)

    def respond(self, status_code: int, content: bytes = b"") -> None:
        self.status_code = status_code
        self.content = content

    def respond_json(self, status_code: int, payload: object) -> None:
        self.respond(status_code, json.dumps(payload).encode())


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def storage(temp_dir: Path) -> LocalStorage:
    return LocalStorage(base_dir=temp_dir / "storage", download_root=temp_dir / "downloads")


@pytest.fixture
def folder_saver(storage: LocalStorage) -> DownloadFolderSaver:
    return DownloadFolderSaver(storage)


@pytest.fixture
def png_image() -> SourceImage:
    """A fake PNG large enough to be sent in several chunks."""
    data = b"\x89PNG\r\n\x1a\n" + bytes(range(256)) * 800
    return SourceImage(filename="photo.png", content_type="image/png", data=data)


@pytest.fixture
def backend() -> RecordingBackend:
    return RecordingBackend()


@pytest.fixture
def make_client() -> Callable[[Callable[[httpx.Request], httpx.Response]], CompressionClient]:
    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> CompressionClient:
        return CompressionClient(base_url="http://compressor.test", transport=httpx.MockTransport(handler))

    return _make


@pytest.fixture
def saver() -> RecordingSaver:
    return RecordingSaver()
