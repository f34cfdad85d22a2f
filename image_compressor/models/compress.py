from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union

from pydantic import BaseModel, Field

from image_compressor.core.errors import NO_FILE_SELECTED, ValidationError

from .common import FileDescriptor

EMPTY_FILE = "Selected image is empty"
INVALID_TARGET_SIZE = "Target size must be a whole number of kilobytes (1 or more)"


class SourceImage(BaseModel):
    filename: str = Field(..., description="اسم الملف كما اختاره المستخدم.")
    content_type: str = Field("application/octet-stream", description="نوع الوسائط المعلن للملف.")
    data: bytes = Field(..., repr=False)

    @property
    def size_bytes(self) -> int:
        return len(self.data)

    def describe(self) -> FileDescriptor:
        return FileDescriptor(
            filename=self.filename,
            content_type=self.content_type,
            size_bytes=self.size_bytes,
        )


class TargetSizeUpdate(BaseModel):
    target_size: Union[int, str] = Field(..., description="الحجم المطلوب بالكيلوبايت كما أدخله المستخدم.")


def parse_target_size(value: Any) -> int:
    """تحويل قيمة الحجم المدخلة إلى عدد صحيح موجب أو رفع ValidationError."""
    if isinstance(value, bool):
        raise ValidationError(INVALID_TARGET_SIZE)

    if isinstance(value, int):
        number = value
    elif isinstance(value, float) and value.is_integer():
        number = int(value)
    elif isinstance(value, str) and value.strip().isdecimal():
        number = int(value.strip())
    else:
        raise ValidationError(INVALID_TARGET_SIZE)

    if number < 1:
        raise ValidationError(INVALID_TARGET_SIZE)
    return number


class CompressionRequest(BaseModel):
    source: SourceImage
    target_size_kb: int = Field(..., ge=1)

    @classmethod
    def build(cls, source: Optional[SourceImage], target_size: Any) -> "CompressionRequest":
        """إنشاء طلب جديد لكل ضغطة مع التحقق من المدخلات قبل أي اتصال."""
        if source is None:
            raise ValidationError(NO_FILE_SELECTED)
        if not source.data:
            raise ValidationError(EMPTY_FILE)
        return cls(source=source, target_size_kb=parse_target_size(target_size))


class CompressionResult(BaseModel):
    data: bytes = Field(..., repr=False)
    media_type: str = "image/jpeg"
    filename: str = "compressed.jpg"
    target_size_kb: Optional[int] = None
    saved_to: Optional[Path] = None

    @property
    def size_bytes(self) -> int:
        return len(self.data)

    def to_card(self, download_url: Optional[str] = None) -> dict:
        card: dict = {
            "filename": self.saved_to.name if self.saved_to else self.filename,
            "content_type": self.media_type,
            "size_bytes": self.size_bytes,
        }
        if self.target_size_kb is not None:
            card["target_size_kb"] = self.target_size_kb
        if download_url:
            card["download_url"] = download_url
        return card

    def describe(self, download_url: Optional[str] = None) -> FileDescriptor:
        return FileDescriptor(**self.to_card(download_url=download_url))
