"""عميل HTTP لخدمة ضغط الصور البعيدة."""

from __future__ import annotations

import io
import math
from typing import AsyncIterable, AsyncIterator, Callable, Optional

import httpx

from image_compressor.core.config import get_settings
from image_compressor.core.errors import ServerError, TransportError, describe_transport_error
from image_compressor.core.logging import configure_logging
from image_compressor.models import SourceImage

logger = configure_logging("client")

ProgressCallback = Callable[[int], None]

COMPRESS_PATH = "/image/compress"


def upload_percent(bytes_sent: int, total_bytes: int) -> int:
    """round(bytes_sent * 100 / total) مع التقريب نحو الأعلى عند النصف، محصورة في [0, 100]."""
    percent = math.floor(bytes_sent * 100 / total_bytes + 0.5)
    return min(100, max(0, percent))


class UploadProgressStream(httpx.AsyncByteStream):
    """يغلف جسم الطلب ويبلغ عن نسبة الإرسال كلما خرج جزء منه.

    لا تصدر أي أحداث إذا كان الحجم الكلي غير معروف، ولا تنخفض النسبة
    المنشورة أبدًا خلال الطلب الواحد.
    """

    def __init__(
        self,
        stream: AsyncIterable[bytes],
        total_bytes: Optional[int],
        on_progress: Optional[ProgressCallback] = None,
    ) -> None:
        self._stream = stream
        self._total = total_bytes
        self._on_progress = on_progress
        self._sent = 0
        self._last = 0

    async def __aiter__(self) -> AsyncIterator[bytes]:
        self._sent = 0
        async for chunk in self._stream:
            self._sent += len(chunk)
            self._publish()
            yield chunk

    def _publish(self) -> None:
        if not self._total or self._on_progress is None:
            return
        percent = upload_percent(self._sent, self._total)
        if percent > self._last:
            self._last = percent
            self._on_progress(percent)


def _content_length(request: httpx.Request) -> Optional[int]:
    value = request.headers.get("Content-Length")
    if value is None or not value.isdigit():
        return None
    return int(value)


class CompressionClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        settings = get_settings()
        self._base_url = (base_url or settings.backend_url).rstrip("/")
        self._timeout = timeout if timeout is not None else settings.request_timeout
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self._base_url

    async def compress(
        self,
        source: SourceImage,
        target_size_kb: int,
        on_progress: Optional[ProgressCallback] = None,
    ) -> bytes:
        """إرسال الصورة كـ multipart/form-data وإرجاع البايتات المضغوطة كما هي."""
        files = {"file": (source.filename, io.BytesIO(source.data), source.content_type)}

        async with httpx.AsyncClient(
            base_url=self._base_url, timeout=self._timeout, transport=self._transport
        ) as client:
            request = client.build_request(
                "POST",
                COMPRESS_PATH,
                params={"targetSizeKb": str(target_size_kb)},
                files=files,
            )
            request.stream = UploadProgressStream(
                request.stream, _content_length(request), on_progress
            )

            try:
                response = await client.send(request)
            except httpx.RequestError as exc:
                logger.warning("فشل طلب الضغط إلى %s: %r", self._base_url, exc)
                raise TransportError(describe_transport_error(exc)) from exc

        if not response.is_success:
            logger.warning("أعادت خدمة الضغط الحالة %s", response.status_code)
            raise ServerError.from_response(response)

        return response.content
