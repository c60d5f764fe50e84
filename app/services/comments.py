from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, List, Optional

from boto3.dynamodb.conditions import Attr, Key
from fastapi import HTTPException

from app.core.ddb import get_item, query_all
from app.core.normalize import clean_str
from app.core.settings import S
from app.core.tables import Tables
from app.core.time import now_iso
from app.services.posts import get_post
from app.services.users import get_author

logger = logging.getLogger(__name__)

MAX_COMMENT_LEN = 1000


def comment_out(item: Dict[str, Any], author: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    out = {
        "id": item.get("comment_id"),
        "post_id": item.get("post_id"),
        "author": author or {"id": item.get("author", "")},
        "content": item.get("content", ""),
        "parent_comment": item.get("parent_comment"),
        "likes": list(item.get("likes") or []),
        "is_edited": bool(item.get("is_edited", False)),
        "created_at": item.get("created_at"),
        "updated_at": item.get("updated_at"),
    }
    if item.get("edited_at"):
        out["edited_at"] = item["edited_at"]
    return out


def _clean_content(value: Optional[str]) -> str:
    if not (value or "").strip():
        raise HTTPException(400, "Comment content is required")
    if len(value.strip()) > MAX_COMMENT_LEN:
        raise HTTPException(400, f"Comment is too long (max {MAX_COMMENT_LEN})")
    return clean_str(value)


def get_comment(tables: Tables, comment_id: str) -> Dict[str, Any]:
    item = get_item(tables.comments, {"comment_id": comment_id})
    if not item:
        raise HTTPException(404, "Comment not found")
    return item


def _is_author(comment: Dict[str, Any], user_id: str) -> bool:
    return str(comment.get("author")) == user_id


def top_level_comments(tables: Tables, post_id: str) -> List[Dict[str, Any]]:
    return query_all(
        tables.comments,
        IndexName=S.comments_post_index,
        KeyConditionExpression=Key("post_id").eq(post_id),
        FilterExpression=Attr("parent_comment").not_exists(),
        ScanIndexForward=False,
    )


def direct_replies(tables: Tables, comment_id: str) -> List[Dict[str, Any]]:
    return query_all(
        tables.comments,
        IndexName=S.comments_parent_index,
        KeyConditionExpression=Key("parent_comment").eq(comment_id),
        ScanIndexForward=True,
    )


def list_comments(tables: Tables, post_id: str) -> List[Dict[str, Any]]:
    """
    Two-level thread for a post: top-level comments newest first, each with its
    direct replies oldest first under "replies".
    """
    authors: Dict[str, Dict[str, str]] = {}
    thread = []
    for comment in top_level_comments(tables, post_id):
        out = comment_out(comment, get_author(tables, comment.get("author", ""), authors))
        out["replies"] = [
            comment_out(reply, get_author(tables, reply.get("author", ""), authors))
            for reply in direct_replies(tables, comment["comment_id"])
        ]
        thread.append(out)
    return thread


def _resolve_parent(tables: Tables, post_id: str, parent_id: Optional[str]) -> Optional[str]:
    if not parent_id:
        return None
    parent = get_item(tables.comments, {"comment_id": parent_id})
    if not parent or parent.get("post_id") != post_id:
        raise HTTPException(400, "Invalid parent comment")
    # Replies hang off the top-level comment; threads stay two levels deep.
    return parent.get("parent_comment") or parent["comment_id"]


def create_comment(
    tables: Tables,
    identity: Dict[str, str],
    post_id: str,
    content: Optional[str],
    parent_comment: Optional[str] = None,
) -> tuple[Dict[str, Any], Dict[str, Any]]:
    """Store a comment; returns (comment, post) so callers can notify the post author."""
    text = _clean_content(content)
    post = get_post(tables, post_id)
    parent_id = _resolve_parent(tables, post_id, parent_comment)

    ts = now_iso()
    item: Dict[str, Any] = {
        "comment_id": uuid.uuid4().hex,
        "post_id": post_id,
        "author": identity["id"],
        "content": text,
        "likes": [],
        "is_edited": False,
        "created_at": ts,
        "updated_at": ts,
    }
    # GSI keys cannot be null, so top-level comments omit the attribute.
    if parent_id:
        item["parent_comment"] = parent_id
    tables.comments.put_item(Item=item)
    logger.info("Comment %s created on post %s", item["comment_id"], post_id)
    return item, post


def update_comment(tables: Tables, user_id: str, comment_id: str, content: Optional[str]) -> Dict[str, Any]:
    current = get_comment(tables, comment_id)
    if not _is_author(current, user_id):
        raise HTTPException(403, "Not authorized to edit this comment")
    text = _clean_content(content)
    ts = now_iso()
    updated = {**current, "content": text, "is_edited": True, "edited_at": ts, "updated_at": ts}
    tables.comments.put_item(Item=updated)
    return updated


def delete_comment(tables: Tables, user_id: str, comment_id: str) -> int:
    """Delete a comment and its direct replies. Returns the number of replies removed."""
    current = get_comment(tables, comment_id)
    if not _is_author(current, user_id):
        raise HTTPException(403, "Not authorized to delete this comment")

    replies = direct_replies(tables, comment_id)
    if replies:
        with tables.comments.batch_writer() as batch:
            for reply in replies:
                batch.delete_item(Key={"comment_id": reply["comment_id"]})
    tables.comments.delete_item(Key={"comment_id": comment_id})
    logger.info("Comment %s deleted with %d replies", comment_id, len(replies))
    return len(replies)


def toggle_like(tables: Tables, user_id: str, comment_id: str) -> tuple[Dict[str, Any], bool]:
    """Flip the caller's like. Returns (updated comment, caller now likes it)."""
    current = get_comment(tables, comment_id)
    likes = [str(v) for v in (current.get("likes") or [])]
    has_liked = user_id in likes
    if has_liked:
        likes = [v for v in likes if v != user_id]
    else:
        likes.append(user_id)
    updated = {**current, "likes": likes}
    tables.comments.put_item(Item=updated)
    return updated, not has_liked
