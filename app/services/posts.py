from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, List

from fastapi import HTTPException

from app.core.ddb import get_item, scan_all
from app.core.normalize import clean_str, missing_fields
from app.core.tables import Tables
from app.core.time import now_iso

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("title", "summary", "content", "image")

MAX_TITLE_LEN = 200
MAX_SUMMARY_LEN = 500
MAX_CONTENT_LEN = 100_000
MAX_IMAGE_URL_LEN = 2048


def post_out(item: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": item.get("post_id"),
        "title": item.get("title", ""),
        "summary": item.get("summary", ""),
        "author": item.get("author", ""),
        "content": item.get("content", ""),
        "image": item.get("image", ""),
        "created_at": item.get("created_at"),
        "updated_at": item.get("updated_at"),
    }


def normalize_post_payload(data: Dict[str, Any]) -> Dict[str, Any]:
    missing = missing_fields(data, ("title", "content"))
    if missing:
        raise HTTPException(400, {"message": "Missing required fields", "missing": missing})
    out = {
        "title": clean_str(data.get("title"), max_len=MAX_TITLE_LEN),
        "summary": clean_str(data.get("summary"), max_len=MAX_SUMMARY_LEN),
        "content": clean_str(data.get("content"), max_len=MAX_CONTENT_LEN),
        "image": clean_str(data.get("image"), max_len=MAX_IMAGE_URL_LEN),
    }
    return {k: v for k, v in out.items() if v is not None}


def list_posts(tables: Tables) -> List[Dict[str, Any]]:
    items = scan_all(tables.posts)
    items.sort(key=lambda it: it.get("created_at", ""), reverse=True)
    return items


def get_post(tables: Tables, post_id: str) -> Dict[str, Any]:
    item = get_item(tables.posts, {"post_id": post_id})
    if not item:
        raise HTTPException(404, "Post not found")
    return item


def _require_author(post: Dict[str, Any], user_id: str) -> None:
    # Posts keep the author as the raw id string from the token.
    if post.get("author") != user_id:
        raise HTTPException(403, "You are not the author of this post")


def create_post(tables: Tables, user_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
    fields = normalize_post_payload(payload)
    ts = now_iso()
    item = {
        **fields,
        "post_id": uuid.uuid4().hex,
        "author": user_id,
        "created_at": ts,
        "updated_at": ts,
    }
    tables.posts.put_item(Item=item)
    logger.info("Post %s created by %s", item["post_id"], user_id)
    return item


def update_post(tables: Tables, user_id: str, post_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
    current = get_post(tables, post_id)
    _require_author(current, user_id)
    fields = normalize_post_payload(payload)
    updated = {
        "post_id": current["post_id"],
        "author": current.get("author"),
        "created_at": current.get("created_at"),
        "updated_at": now_iso(),
        **fields,
    }
    tables.posts.put_item(Item=updated)
    return updated


def delete_post(tables: Tables, user_id: str, post_id: str) -> Dict[str, Any]:
    current = get_post(tables, post_id)
    _require_author(current, user_id)
    tables.posts.delete_item(Key={"post_id": post_id})
    logger.info("Post %s deleted by %s", post_id, user_id)
    return current
