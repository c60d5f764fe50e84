from __future__ import annotations

import time
from typing import Any, Dict

import jwt
from fastapi import HTTPException
from passlib.context import CryptContext

from .settings import S

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=S.bcrypt_rounds)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not plain_password or not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Not a hash passlib recognizes.
        return False


def _secret() -> str:
    if not S.jwt_secret:
        raise HTTPException(500, "JWT_SECRET not configured")
    return S.jwt_secret


def mint_access_token(identity: Dict[str, str], ttl_seconds: int | None = None) -> str:
    now = int(time.time())
    ttl = S.token_ttl_seconds if ttl_seconds is None else ttl_seconds
    payload = {
        "id": identity["id"],
        "name": identity.get("name", ""),
        "email": identity.get("email", ""),
        "iat": now,
        "exp": now + ttl,
    }
    return jwt.encode(payload, _secret(), algorithm=S.jwt_algorithm)


def decode_access_token(token: str) -> Dict[str, Any]:
    try:
        payload = jwt.decode(
            token,
            _secret(),
            algorithms=[S.jwt_algorithm],
            options={"require": ["exp", "id"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise HTTPException(401, "Token expired") from exc
    except jwt.PyJWTError as exc:
        raise HTTPException(401, "Invalid token") from exc
    return payload
