from __future__ import annotations

import re
from typing import Any, Dict, Iterable, List, Optional

from fastapi import HTTPException

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+$")


def normalize_email(s: str) -> str:
    s = (s or "").strip().lower()
    if not _EMAIL_RE.match(s) or len(s) > 254:
        raise HTTPException(400, "Invalid email")
    return s


def clean_str(value: Optional[str], *, max_len: Optional[int] = None) -> Optional[str]:
    if value is None:
        return None
    trimmed = str(value).strip()
    if not trimmed:
        return None
    if max_len is not None and len(trimmed) > max_len:
        raise HTTPException(400, f"Value too long (max {max_len})")
    return trimmed


def missing_fields(data: Dict[str, Any], required: Iterable[str]) -> List[str]:
    return [name for name in required if not clean_str(data.get(name))]


def safe_filename(name: Optional[str], default: str = "upload.bin") -> str:
    base = (name or "").replace("\\", "/").rsplit("/", 1)[-1]
    base = re.sub(r"[^A-Za-z0-9._-]+", "_", base).strip("._")
    return base[:120] or default
