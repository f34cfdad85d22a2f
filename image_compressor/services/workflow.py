from __future__ import annotations

from typing import Any, Callable, Optional

from image_compressor.core.config import get_settings
from image_compressor.core.errors import GENERIC_FAILURE, WorkflowError
from image_compressor.core.logging import configure_logging
from image_compressor.models import (
    CompressionRequest,
    CompressionResult,
    SourceImage,
    WorkflowSnapshot,
    WorkflowStatus,
)
from image_compressor.services.compression_client import CompressionClient
from image_compressor.storage.download import BinarySaver, DownloadFolderSaver

logger = configure_logging("workflow")


class CompressionWorkflow:
    """دورة حياة طلب ضغط واحد: تحقق، إرسال، متابعة الرفع، حفظ الناتج، توحيد الأخطاء.

    الحالة (الملف، الحجم المطلوب، التحميل، النسبة، الخطأ) مملوكة لهذا الكائن
    فقط ولا تتغير إلا عبر العمليات العامة. يُسمح بطلب واحد قيد التنفيذ.

    عند اختيار ملف جديد أو تغيير الحجم المطلوب تُمسح رسالة الخطأ السابقة.
    """

    def __init__(
        self,
        client: CompressionClient | None = None,
        saver: BinarySaver | None = None,
        *,
        target_size: Any = None,
        on_progress: Optional[Callable[[int], None]] = None,
    ) -> None:
        settings = get_settings()
        self._client = client or CompressionClient()
        self._saver = saver or DownloadFolderSaver()
        self._media_type = settings.result_media_type
        self._result_name = settings.result_filename
        self._on_progress = on_progress

        self._file: Optional[SourceImage] = None
        self._target_size: Any = settings.default_target_size_kb if target_size is None else target_size
        self._status = WorkflowStatus.idle
        self._loading = False
        self._progress = 0
        self._error: Optional[WorkflowError] = None
        self._result: Optional[CompressionResult] = None

    # ------------------------------------------------------------------
    @property
    def status(self) -> WorkflowStatus:
        return self._status

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def progress(self) -> int:
        return self._progress

    @property
    def error(self) -> Optional[str]:
        return self._error.message if self._error else None

    @property
    def last_error(self) -> Optional[WorkflowError]:
        return self._error

    @property
    def selected_file(self) -> Optional[SourceImage]:
        return self._file

    @property
    def target_size(self) -> Any:
        return self._target_size

    @property
    def last_result(self) -> Optional[CompressionResult]:
        return self._result

    @property
    def can_submit(self) -> bool:
        return self._file is not None and not self._loading

    # ------------------------------------------------------------------
    def select_file(self, image: Optional[SourceImage]) -> None:
        self._file = image
        self._clear_stale_error()

    def set_target_size(self, value: Any) -> None:
        self._target_size = value
        self._clear_stale_error()

    def snapshot(self) -> WorkflowSnapshot:
        return WorkflowSnapshot(
            status=self._status,
            loading=self._loading,
            progress=self._progress,
            error=self.error,
            file=self._file.describe() if self._file else None,
            target_size=self._target_size,
            result=self._result.describe() if self._result else None,
            can_submit=self.can_submit,
        )

    async def submit(self) -> Optional[CompressionResult]:
        """تنفيذ طلب ضغط واحد؛ يعيد الناتج عند النجاح و None عند الفشل.

        الخطأ يُحفظ في ``error`` ولا يُعاد المحاولة تلقائيًا. التحميل والنسبة
        يعودان إلى False و 0 عند كل خروج.
        """
        if self._loading:
            logger.warning("تم تجاهل طلب ضغط جديد لأن طلبًا آخر قيد التنفيذ.")
            return None

        try:
            request = CompressionRequest.build(self._file, self._target_size)
        except WorkflowError as exc:
            self._fail(exc)
            return None

        self._loading = True
        self._status = WorkflowStatus.submitting
        self._error = None
        self._result = None
        self._set_progress(0)
        logger.info(
            "إرسال %s (%s بايت) للضغط إلى %s كيلوبايت.",
            request.source.filename,
            request.source.size_bytes,
            request.target_size_kb,
        )

        try:
            payload = await self._client.compress(
                request.source, request.target_size_kb, on_progress=self._set_progress
            )
            result = CompressionResult(
                data=payload,
                media_type=self._media_type,
                filename=self._result_name,
                target_size_kb=request.target_size_kb,
            )
            result.saved_to = self._saver.save_binary_as(result.data, result.media_type, result.filename)
        except WorkflowError as exc:
            self._fail(exc)
            return None
        except Exception:
            logger.exception("خطأ غير متوقع أثناء ضغط %s", request.source.filename)
            self._status = WorkflowStatus.failed
            self._error = WorkflowError(GENERIC_FAILURE)
            raise
        finally:
            self._loading = False
            self._set_progress(0)

        self._status = WorkflowStatus.succeeded
        self._result = result
        logger.info("اكتمل الضغط: %s بايت -> %s", result.size_bytes, result.saved_to or result.filename)
        return result

    # ------------------------------------------------------------------
    def _set_progress(self, percent: int) -> None:
        self._progress = percent
        if self._on_progress is not None:
            self._on_progress(percent)

    def _fail(self, exc: WorkflowError) -> None:
        self._status = WorkflowStatus.failed
        self._error = exc
        self._result = None
        logger.info("فشل الضغط: %s", exc.message)

    def _clear_stale_error(self) -> None:
        if self._loading:
            return
        self._error = None
        if self._status in (WorkflowStatus.succeeded, WorkflowStatus.failed):
            self._status = WorkflowStatus.idle
