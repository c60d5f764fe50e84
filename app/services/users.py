from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Optional

from boto3.dynamodb.conditions import Key
from fastapi import HTTPException

from app.core.ddb import get_item
from app.core.normalize import clean_str, missing_fields, normalize_email
from app.core.security import hash_password, mint_access_token, verify_password
from app.core.settings import S
from app.core.tables import Tables
from app.core.time import now_iso

logger = logging.getLogger(__name__)

MAX_NAME_LEN = 80
UNKNOWN_AUTHOR_NAME = "Unknown"


def public_user(item: Dict[str, Any]) -> Dict[str, str]:
    return {
        "id": item.get("user_id", ""),
        "name": item.get("name", ""),
        "email": item.get("email", ""),
    }


def find_user_by_email(tables: Tables, email: str) -> Optional[Dict[str, Any]]:
    resp = tables.users.query(
        IndexName=S.users_email_index,
        KeyConditionExpression=Key("email").eq(email),
        Limit=1,
    )
    items = resp.get("Items", [])
    return items[0] if items else None


def get_user(tables: Tables, user_id: str) -> Optional[Dict[str, Any]]:
    if not user_id:
        return None
    return get_item(tables.users, {"user_id": user_id})


def get_author(tables: Tables, user_id: str, cache: Optional[Dict[str, Dict[str, str]]] = None) -> Dict[str, str]:
    """Resolve a user id to the {id, name, email} shape shown next to content."""
    if cache is not None and user_id in cache:
        return cache[user_id]
    item = get_user(tables, user_id)
    author = public_user(item) if item else {"id": user_id, "name": UNKNOWN_AUTHOR_NAME, "email": ""}
    if cache is not None:
        cache[user_id] = author
    return author


def register_user(tables: Tables, payload: Dict[str, Any]) -> Dict[str, str]:
    missing = missing_fields(payload, ("name", "email", "password"))
    if missing:
        raise HTTPException(400, {"message": "Missing required fields", "missing": missing})

    name = clean_str(payload.get("name"), max_len=MAX_NAME_LEN)
    email = normalize_email(payload["email"])

    # Best effort: the index lookup and the put are not atomic.
    if find_user_by_email(tables, email):
        raise HTTPException(409, "User already exists")

    item = {
        "user_id": uuid.uuid4().hex,
        "name": name,
        "email": email,
        "password": hash_password(payload["password"]),
        "created_at": now_iso(),
    }
    tables.users.put_item(Item=item)
    logger.info("Registered user %s", item["user_id"])
    return public_user(item)


def authenticate(tables: Tables, email: Optional[str], password: Optional[str]) -> Dict[str, Any]:
    if not email or not password:
        raise HTTPException(401, "Invalid credentials")
    try:
        normalized = normalize_email(email)
    except HTTPException as exc:
        raise HTTPException(401, "Invalid credentials") from exc
    user = find_user_by_email(tables, normalized)
    if not user or not verify_password(password, user.get("password", "")):
        raise HTTPException(401, "Invalid credentials")

    identity = public_user(user)
    return {"token": mint_access_token(identity), "user": identity}
