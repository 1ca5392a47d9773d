import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from starlette.datastructures import UploadFile

from ..db import Settings
from ..deps import get_content_store, get_settings
from ..schemas.uploads import UploadOut
from ..services import SyntheticContentStore

router = APIRouter(prefix="/api", tags=["upload"])
logger = logging.getLogger(__name__)


def _file_size(upload: UploadFile) -> int:
    if upload.size is not None:
        return upload.size
    f = upload.file
    cur = f.tell()
    f.seek(0, 2)
    size = f.tell()
    f.seek(cur, 0)
    return size


@router.post("/upload", response_model=UploadOut)
async def upload_image(
    request: Request,
    settings: Settings = Depends(get_settings),
    content_store: SyntheticContentStore = Depends(get_content_store),
):
    async with request.form() as form:
        image = form.get("image")
        # a plain text field named "image" carries no file
        if not isinstance(image, UploadFile):
            raise HTTPException(status_code=400, detail="No image file provided")
        if not (image.content_type or "").startswith("image/"):
            raise HTTPException(status_code=400, detail="Only image files are allowed")

        size = _file_size(image)
        if size > settings.max_upload_bytes:
            raise HTTPException(status_code=413, detail="File too large")

        try:
            image_url = await content_store.put(image.file, image.filename, image.content_type)
        except Exception as e:
            logger.exception("upload_failed file_name=%s", image.filename)
            raise HTTPException(
                status_code=500,
                detail={"message": "Failed to upload image", "error": str(e)},
            )

    return UploadOut(image_url=image_url, file_name=image.filename, file_size=size)
