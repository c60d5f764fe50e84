from __future__ import annotations

from typing import Dict, Optional

from fastapi import HTTPException, Request

from app.core.security import decode_access_token
from app.core.settings import S


def extract_bearer_token(auth_header: Optional[str]) -> str:
    if not auth_header:
        raise HTTPException(401, "Missing Authorization header")
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(401, "Invalid Authorization header")
    return token.strip()


def identity_from_token(token: str) -> Dict[str, str]:
    payload = decode_access_token(token)
    user_id = payload.get("id")
    if not user_id:
        raise HTTPException(401, "Invalid token")
    return {
        "id": str(user_id),
        "name": str(payload.get("name") or ""),
        "email": str(payload.get("email") or ""),
    }


async def require_user(request: Request) -> Dict[str, str]:
    """
    Stateless bearer-token check. Returns the identity carried by the token:
    {"id", "name", "email"}.
    """
    token = extract_bearer_token(request.headers.get("authorization"))
    return identity_from_token(token)


async def optional_user(request: Request) -> Optional[Dict[str, str]]:
    if S.upload_require_auth:
        return await require_user(request)
    if not request.headers.get("authorization"):
        return None
    try:
        return await require_user(request)
    except HTTPException:
        return None
