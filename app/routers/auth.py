from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from app.auth.deps import require_user
from app.core.tables import Tables, get_tables
from app.metrics import record_login, record_registration
from app.models import LoginReq, RegisterReq
from app.services.users import authenticate, register_user

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", status_code=201)
async def register(body: RegisterReq, tables: Tables = Depends(get_tables)):
    register_user(tables, body.model_dump())
    record_registration()
    return {"message": "Registered successfully"}


@router.post("/login")
async def login(body: LoginReq, tables: Tables = Depends(get_tables)):
    try:
        result = authenticate(tables, body.email, body.password)
    except HTTPException:
        record_login(False)
        raise
    record_login(True)
    return result


@router.get("/me")
async def me(ctx=Depends(require_user)):
    return {"user": ctx}
