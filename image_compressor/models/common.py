from enum import Enum
from typing import Annotated, Optional, Union

from pydantic import BaseModel, Field

# نسبة رفع مئوية صحيحة بين 0 و 100
UploadProgress = Annotated[int, Field(ge=0, le=100)]


class WorkflowStatus(str, Enum):
    idle = "idle"
    submitting = "submitting"
    succeeded = "succeeded"
    failed = "failed"


class FileDescriptor(BaseModel):
    filename: str
    content_type: str
    size_bytes: int
    download_url: Optional[str] = None


class WorkflowSnapshot(BaseModel):
    """صورة للقراءة فقط عن حالة عملية الضغط الحالية."""

    status: WorkflowStatus = WorkflowStatus.idle
    loading: bool = False
    progress: UploadProgress = 0
    error: Optional[str] = None
    file: Optional[FileDescriptor] = None
    target_size: Union[int, str, None] = None
    result: Optional[FileDescriptor] = None
    can_submit: bool = False
