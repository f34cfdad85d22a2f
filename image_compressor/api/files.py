from datetime import datetime, timezone

from fastapi import APIRouter

from image_compressor.storage.local import LocalStorage
from image_compressor.utils.file_utils import file_stats

router = APIRouter(prefix="/files", tags=["Files"])
storage = LocalStorage()


@router.get("/", summary="قائمة الصور المضغوطة المتاحة للتنزيل")
async def list_files() -> dict:
    files: list[dict] = []
    for path in storage.list_downloads():
        size_bytes, content_type = file_stats(path)
        files.append(
            {
                "filename": path.name,
                "content_type": content_type,
                "download_url": f"/downloads/{path.name}",
                "size_bytes": size_bytes,
                "updated_at": datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc).isoformat(),
            }
        )

    return {"files": files}
