from __future__ import annotations

import logging
import uuid
from typing import Any, Optional

from botocore.exceptions import ClientError
from fastapi import HTTPException

from app.core.aws import s3_client
from app.core.normalize import safe_filename
from app.core.settings import S

logger = logging.getLogger(__name__)

_s3 = None


def _client() -> Any:
    global _s3
    if _s3 is None:
        _s3 = s3_client()
    return _s3


def _bucket() -> str:
    if not S.upload_bucket:
        raise HTTPException(500, "upload bucket not configured")
    return S.upload_bucket


def public_url(key: str) -> str:
    if S.upload_public_base_url:
        return f"{S.upload_public_base_url}/{key}"
    return f"https://{_bucket()}.s3.{S.aws_region}.amazonaws.com/{key}"


def store_upload(file_name: Optional[str], content: bytes, content_type: Optional[str] = None) -> str:
    """Forward one file to S3 and return the URL it is served from."""
    if not content:
        raise HTTPException(400, "Upload failed")
    bucket = _bucket()
    key = f"uploads/{uuid.uuid4().hex}_{safe_filename(file_name)}"
    try:
        _client().put_object(
            Bucket=bucket,
            Key=key,
            Body=content,
            ContentType=content_type or "application/octet-stream",
        )
    except ClientError as exc:
        logger.error("S3 rejected upload %s: %s", key, exc.response.get("Error", {}).get("Message", exc))
        raise HTTPException(500, "Upload failed") from exc
    return public_url(key)
