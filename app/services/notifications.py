from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, List, Optional

from boto3.dynamodb.conditions import Attr, Key
from fastapi import HTTPException

from app.core.ddb import get_item, query_all
from app.core.settings import S
from app.core.tables import Tables
from app.core.time import now_iso, now_ms
from app.metrics import record_notification

logger = logging.getLogger(__name__)

NOTIFICATION_TYPES = ("comment", "like")


def notification_out(item: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": item.get("notification_id"),
        "user": item.get("user_id"),
        "type": item.get("type"),
        "message": item.get("message", ""),
        "link": item.get("link", ""),
        "is_read": bool(item.get("is_read", False)),
        "created_at": item.get("created_at"),
    }


def new_notification_id() -> str:
    # Millisecond prefix keeps the range key in creation order.
    return f"{now_ms():013d}-{uuid.uuid4().hex[:12]}"


def create_notification(tables: Tables, recipient: str, kind: str, message: str, link: str) -> Dict[str, Any]:
    if kind not in NOTIFICATION_TYPES:
        raise ValueError(f"unknown notification type: {kind}")
    item = {
        "user_id": recipient,
        "notification_id": new_notification_id(),
        "type": kind,
        "message": message,
        "link": link,
        "is_read": False,
        "created_at": now_iso(),
    }
    tables.notifications.put_item(Item=item)
    record_notification(kind)
    return item


def _notify(tables: Tables, recipient: Optional[str], actor: Dict[str, str], kind: str, message: str, link: str) -> Optional[Dict[str, Any]]:
    if not recipient or str(recipient) == actor.get("id"):
        return None
    try:
        return create_notification(tables, str(recipient), kind, message, link)
    except Exception:
        # Notifications are a side effect; the triggering write already succeeded.
        logger.exception("Failed to record %s notification for %s", kind, recipient)
        return None


def notify_comment(tables: Tables, post: Dict[str, Any], actor: Dict[str, str]) -> Optional[Dict[str, Any]]:
    post_id = post.get("post_id")
    return _notify(
        tables,
        post.get("author"),
        actor,
        "comment",
        f"{actor.get('name') or 'Someone'} commented on your post",
        f"/post/{post_id}",
    )


def notify_like(tables: Tables, comment: Dict[str, Any], actor: Dict[str, str]) -> Optional[Dict[str, Any]]:
    return _notify(
        tables,
        comment.get("author"),
        actor,
        "like",
        f"{actor.get('name') or 'Someone'} liked your comment",
        f"/post/{comment.get('post_id')}#comment-{comment.get('comment_id')}",
    )


def list_notifications(tables: Tables, user_id: str, limit: Optional[int] = None) -> List[Dict[str, Any]]:
    items = query_all(
        tables.notifications,
        KeyConditionExpression=Key("user_id").eq(user_id),
        ScanIndexForward=False,
    )
    items.sort(key=lambda it: it.get("created_at", ""), reverse=True)
    # Stable sort: unread first, newest first within each group.
    items.sort(key=lambda it: bool(it.get("is_read", False)))
    return items[: (limit or S.notifications_limit)]


def mark_read(tables: Tables, user_id: str, notification_id: str) -> Dict[str, Any]:
    # Keyed by recipient, so another user's id looks exactly like a missing one.
    item = get_item(tables.notifications, {"user_id": user_id, "notification_id": notification_id})
    if not item:
        raise HTTPException(404, "Not found")
    if not item.get("is_read"):
        item = {**item, "is_read": True, "read_at": now_iso()}
        tables.notifications.put_item(Item=item)
    return item


def mark_all_read(tables: Tables, user_id: str) -> int:
    unread = query_all(
        tables.notifications,
        KeyConditionExpression=Key("user_id").eq(user_id),
        FilterExpression=Attr("is_read").eq(False),
    )
    ts = now_iso()
    for item in unread:
        tables.notifications.put_item(Item={**item, "is_read": True, "read_at": ts})
    return len(unread)
