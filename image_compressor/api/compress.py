from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from image_compressor.core.errors import SaveError, ValidationError, WorkflowError
from image_compressor.core.logging import configure_logging
from image_compressor.models import TargetSizeUpdate
from image_compressor.services.registry import get_workflow, register_workflow, unregister_workflow
from image_compressor.services.workflow import CompressionWorkflow
from image_compressor.utils.file_utils import ensure_image, read_upload

router = APIRouter(prefix="/workflow", tags=["Image Compression"])

logger = configure_logging("api")


def new_workflow() -> CompressionWorkflow:
    """عملية ضغط جديدة بالإعدادات الافتراضية لكل عميل."""
    return CompressionWorkflow()


def _status_for(error: Optional[WorkflowError]) -> int:
    if isinstance(error, ValidationError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(error, SaveError):
        return status.HTTP_500_INTERNAL_SERVER_ERROR
    return status.HTTP_502_BAD_GATEWAY


@router.post("", summary="بدء عملية ضغط خاصة بهذا العميل")
async def create_workflow(workflow: CompressionWorkflow = Depends(new_workflow)) -> dict:
    entry = register_workflow(workflow)
    logger.info("تم إنشاء عملية ضغط جديدة: %s", entry.workflow_id)
    return {
        "status": "ok",
        "workflow_id": entry.workflow_id,
        "state": workflow.snapshot().model_dump(mode="json"),
    }


@router.delete("/{workflow_id}", summary="إنهاء عملية الضغط وحذفها")
async def delete_workflow(workflow_id: str) -> dict:
    get_workflow(workflow_id)
    unregister_workflow(workflow_id)
    return {"status": "ok"}


@router.get("/{workflow_id}/state", summary="حالة عملية الضغط الحالية")
async def get_state(workflow: CompressionWorkflow = Depends(get_workflow)) -> dict:
    return {"status": "ok", "state": workflow.snapshot().model_dump(mode="json")}


@router.post("/{workflow_id}/file", summary="اختيار صورة للضغط")
async def select_file(
    file: UploadFile = File(...),
    workflow: CompressionWorkflow = Depends(get_workflow),
) -> dict:
    ensure_image(file)
    image = await read_upload(file)
    workflow.select_file(image)
    logger.info("تم اختيار صورة للضغط: %s", image.filename)
    return {"status": "ok", "file": image.describe().model_dump()}


@router.put("/{workflow_id}/target-size", summary="تحديد الحجم المطلوب بالكيلوبايت")
async def set_target_size(
    payload: TargetSizeUpdate,
    workflow: CompressionWorkflow = Depends(get_workflow),
) -> dict:
    workflow.set_target_size(payload.target_size)
    return {"status": "ok", "target_size": workflow.target_size}


@router.post("/{workflow_id}/compress", summary="ضغط الصورة المختارة وإرجاع رابط التنزيل")
async def compress_image(workflow: CompressionWorkflow = Depends(get_workflow)) -> dict:
    if workflow.loading:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A compression is already in progress.",
        )

    result = await workflow.submit()
    if result is None:
        raise HTTPException(
            status_code=_status_for(workflow.last_error),
            detail=workflow.error or "Compression failed",
        )

    download_url = f"/downloads/{result.saved_to.name}" if result.saved_to else None
    return {
        "status": "ok",
        "message": "Image compressed successfully.",
        "result": result.to_card(download_url=download_url),
    }
