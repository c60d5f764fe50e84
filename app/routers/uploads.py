from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from app.auth.deps import optional_user
from app.metrics import record_upload
from app.services.uploads import store_upload

logger = logging.getLogger(__name__)

router = APIRouter(tags=["uploads"])


@router.post("/upload")
async def ui_upload(image: Optional[UploadFile] = File(None), ctx=Depends(optional_user)):
    if image is None:
        record_upload("rejected")
        raise HTTPException(400, "Upload failed")
    content = await image.read()
    try:
        url = store_upload(image.filename, content, content_type=image.content_type)
    except HTTPException:
        record_upload("failed")
        raise
    record_upload("stored")
    logger.info("Upload stored for %s: %s", (ctx or {}).get("id", "anonymous"), url)
    return {"url": url}
