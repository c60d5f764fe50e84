from __future__ import annotations

from fastapi import APIRouter, Depends

from app.auth.deps import require_user
from app.core.tables import Tables, get_tables
from app.models import PostIn
from app.services.posts import create_post, delete_post, get_post, list_posts, post_out, update_post

router = APIRouter(prefix="/posts", tags=["posts"])


@router.get("")
async def ui_list_posts(tables: Tables = Depends(get_tables)):
    return [post_out(it) for it in list_posts(tables)]


@router.post("", status_code=201)
async def ui_create_post(body: PostIn, ctx=Depends(require_user), tables: Tables = Depends(get_tables)):
    return post_out(create_post(tables, ctx["id"], body.model_dump()))


@router.get("/{post_id}")
async def ui_get_post(post_id: str, tables: Tables = Depends(get_tables)):
    return post_out(get_post(tables, post_id))


@router.put("/{post_id}")
async def ui_update_post(post_id: str, body: PostIn, ctx=Depends(require_user), tables: Tables = Depends(get_tables)):
    return post_out(update_post(tables, ctx["id"], post_id, body.model_dump()))


@router.delete("/{post_id}")
async def ui_delete_post(post_id: str, ctx=Depends(require_user), tables: Tables = Depends(get_tables)):
    delete_post(tables, ctx["id"], post_id)
    return {"message": "Post deleted successfully"}
