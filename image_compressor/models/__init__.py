from .common import FileDescriptor, UploadProgress, WorkflowSnapshot, WorkflowStatus
from .compress import (
    CompressionRequest,
    CompressionResult,
    SourceImage,
    TargetSizeUpdate,
    parse_target_size,
)

__all__ = [
    "CompressionRequest",
    "CompressionResult",
    "FileDescriptor",
    "SourceImage",
    "TargetSizeUpdate",
    "UploadProgress",
    "WorkflowSnapshot",
    "WorkflowStatus",
    "parse_target_size",
]
