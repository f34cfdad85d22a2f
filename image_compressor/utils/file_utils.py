import mimetypes
from pathlib import Path
from typing import Tuple

from fastapi import HTTPException, UploadFile, status

from image_compressor.models import SourceImage


def guess_content_type(filename: str) -> str:
    content_type, _ = mimetypes.guess_type(filename)
    return content_type or "application/octet-stream"


def ensure_image(upload: UploadFile) -> None:
    """التحقق من أن الملف المرفوع صورة."""
    content_type = (upload.content_type or guess_content_type(upload.filename or "")).lower()
    if not content_type.startswith("image/"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="The selected file is not an image.",
        )


async def read_upload(upload: UploadFile) -> SourceImage:
    """قراءة الملف المرفوع بالكامل في الذاكرة كصورة مصدر."""
    filename = upload.filename or "image"
    data = await upload.read()
    return SourceImage(
        filename=filename,
        content_type=upload.content_type or guess_content_type(filename),
        data=data,
    )


def load_image_file(path: Path) -> SourceImage:
    """تحميل صورة من القرص؛ لا يتم التحقق من المحتوى هنا."""
    path = Path(path)
    return SourceImage(
        filename=path.name,
        content_type=guess_content_type(path.name),
        data=path.read_bytes(),
    )


def file_stats(path: Path) -> Tuple[int, str]:
    """إرجاع حجم الملف بالبايت ونوع وسائطه للاستخدام في الاستجابات."""
    size = path.stat().st_size if path.exists() else 0
    return size, guess_content_type(path.name)
