from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Dict
from uuid import uuid4

from fastapi import HTTPException, status

from image_compressor.services.workflow import CompressionWorkflow


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class RegisteredWorkflow:
    workflow_id: str
    workflow: CompressionWorkflow
    created_at: datetime = field(default_factory=_now)
    last_used: datetime = field(default_factory=_now)


_registry: Dict[str, RegisteredWorkflow] = {}
_ttl = timedelta(hours=2)


def register_workflow(workflow: CompressionWorkflow) -> RegisteredWorkflow:
    """تسجيل عملية ضغط جديدة خاصة بعميل واحد وإرجاع معرفها."""
    cleanup()
    entry = RegisteredWorkflow(workflow_id=uuid4().hex, workflow=workflow)
    _registry[entry.workflow_id] = entry
    return entry


def get_workflow(workflow_id: str) -> CompressionWorkflow:
    cleanup()
    entry = _registry.get(workflow_id)
    if not entry:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Unknown or expired workflow id.",
        )
    entry.last_used = _now()
    return entry.workflow


def unregister_workflow(workflow_id: str) -> None:
    _registry.pop(workflow_id, None)


def cleanup() -> None:
    """حذف العمليات الخاملة بعد انتهاء مدة الاحتفاظ، مع إبقاء ما هو قيد التنفيذ."""
    now = _now()
    expired = [
        workflow_id
        for workflow_id, entry in _registry.items()
        if now - entry.last_used > _ttl and not entry.workflow.loading
    ]
    for workflow_id in expired:
        _registry.pop(workflow_id, None)
