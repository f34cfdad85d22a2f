# noqa: D104
"""Tests for the compression HTTP client and upload progress stream."""

from __future__ import annotations

from typing import AsyncIterator, List

import httpx
import pytest

from image_compressor.core.errors import ServerError, TransportError
from image_compressor.models import SourceImage
from image_compressor.services.compression_client import (
    UploadProgressStream,
    upload_percent,
)


async def _chunks(*parts: bytes) -> AsyncIterator[bytes]:
    for part in parts:
        yield part


class TestUploadPercent:
    @pytest.mark.parametrize(
        ("sent", "total", "expected"),
        [
            (0, 100, 0),
            (1, 200, 1),  # 0.5 rounds up
            (1, 3, 33),
            (2, 3, 67),
            (100, 100, 100),
            (150, 100, 100),
        ],
    )
    def test_rounding(self, sent: int, total: int, expected: int) -> None:
        assert upload_percent(sent, total) == expected


class TestUploadProgressStream:
    @pytest.mark.asyncio
    async def test_reports_increasing_percentages(self) -> None:
        seen: List[int] = []
        stream = UploadProgressStream(_chunks(b"a" * 25, b"b" * 25, b"", b"c" * 50), 100, seen.append)

        body = b"".join([chunk async for chunk in stream])

        assert body == b"a" * 25 + b"b" * 25 + b"c" * 50
        assert seen == [25, 50, 100]

    @pytest.mark.asyncio
    async def test_unknown_total_emits_nothing(self) -> None:
        seen: List[int] = []
        stream = UploadProgressStream(_chunks(b"a" * 10, b"b" * 10), None, seen.append)

        assert b"".join([chunk async for chunk in stream]) == b"a" * 10 + b"b" * 10
        assert seen == []


class TestCompressionClient:
    @pytest.mark.asyncio
    async def test_posts_multipart_to_compress_endpoint(self, make_client, backend, png_image: SourceImage) -> None:
        client = make_client(backend)

        payload = await client.compress(png_image, 200)

        assert payload == backend.content
        request = backend.requests[0]
        assert request.method == "POST"
        assert request.url.path == "/image/compress"
        assert request.url.params["targetSizeKb"] == "200"
        assert request.headers["Content-Type"].startswith("multipart/form-data; boundary=")
        body = request.content
        assert b'name="file"; filename="photo.png"' in body
        assert b"Content-Type: image/png" in body
        assert png_image.data in body

    @pytest.mark.asyncio
    async def test_progress_is_monotonic_and_bounded(self, make_client, backend, png_image: SourceImage) -> None:
        seen: List[int] = []
        client = make_client(backend)

        await client.compress(png_image, 200, on_progress=seen.append)

        assert len(seen) > 1
        assert seen == sorted(seen)
        assert all(0 <= percent <= 100 for percent in seen)
        assert seen[-1] == 100

    @pytest.mark.asyncio
    async def test_server_error_message(self, make_client, backend, png_image: SourceImage) -> None:
        backend.respond_json(413, {"message": "File too large"})
        client = make_client(backend)

        with pytest.raises(ServerError) as excinfo:
            await client.compress(png_image, 200)

        assert excinfo.value.message == "File too large"
        assert excinfo.value.status_code == 413

    @pytest.mark.asyncio
    async def test_transport_error(self, make_client, png_image: SourceImage) -> None:
        def unreachable(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Name or service not known", request=request)

        client = make_client(unreachable)

        with pytest.raises(TransportError) as excinfo:
            await client.compress(png_image, 200)

        assert excinfo.value.message == "Name or service not known"
