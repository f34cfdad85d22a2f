from __future__ import annotations

import json
from typing import Optional

import httpx

GENERIC_FAILURE = "Compression failed"
NO_FILE_SELECTED = "Select an image"


class WorkflowError(Exception):
    """الخطأ الأساسي لعملية الضغط؛ يحمل نصًا واحدًا يُعرض للمستخدم كما هو."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(WorkflowError):
    """مدخلات غير صالحة؛ لا يتم أي اتصال بالشبكة."""


class TransportError(WorkflowError):
    """فشل على مستوى الاتصال (شبكة، مهلة، DNS) بدون جسم استجابة."""


class ServerError(WorkflowError):
    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ServerError":
        message = message_from_body(response.content) or GENERIC_FAILURE
        return cls(message, status_code=response.status_code)


class SaveError(WorkflowError):
    """تعذر تسليم الملف الناتج إلى وجهة الحفظ."""


def message_from_body(body: bytes) -> Optional[str]:
    """استخراج الحقل ``message`` من جسم خطأ منظم (JSON) إن وُجد."""
    if not body:
        return None
    try:
        payload = json.loads(body)
    except (ValueError, UnicodeDecodeError):
        return None

    if not isinstance(payload, dict):
        return None
    message = payload.get("message")
    if isinstance(message, str) and message:
        return message
    return None


def describe_transport_error(exc: httpx.HTTPError) -> str:
    text = str(exc).strip()
    return text or GENERIC_FAILURE
