from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks, Depends

from app.auth.deps import require_user
from app.core.tables import Tables, get_tables
from app.models import CommentCreateReq, CommentUpdateReq
from app.services.comments import (
    comment_out,
    create_comment,
    delete_comment,
    list_comments,
    toggle_like,
    update_comment,
)
from app.services.notifications import notify_comment, notify_like
from app.services.users import get_author

router = APIRouter(tags=["comments"])


@router.get("/posts/{post_id}/comments")
async def ui_list_comments(post_id: str, tables: Tables = Depends(get_tables)):
    return list_comments(tables, post_id)


@router.post("/posts/{post_id}/comments", status_code=201)
async def ui_create_comment(
    post_id: str,
    body: CommentCreateReq,
    background_tasks: BackgroundTasks,
    ctx=Depends(require_user),
    tables: Tables = Depends(get_tables),
):
    comment, post = create_comment(tables, ctx, post_id, body.content, body.parent_comment)
    background_tasks.add_task(notify_comment, tables, post, ctx)
    return comment_out(comment, get_author(tables, ctx["id"]))


@router.put("/comments/{comment_id}")
async def ui_update_comment(
    comment_id: str,
    body: CommentUpdateReq,
    ctx=Depends(require_user),
    tables: Tables = Depends(get_tables),
):
    comment = update_comment(tables, ctx["id"], comment_id, body.content)
    return comment_out(comment, get_author(tables, ctx["id"]))


@router.delete("/comments/{comment_id}")
async def ui_delete_comment(comment_id: str, ctx=Depends(require_user), tables: Tables = Depends(get_tables)):
    replies = delete_comment(tables, ctx["id"], comment_id)
    return {"message": "Comment deleted successfully", "replies_deleted": replies}


@router.post("/comments/{comment_id}/like")
async def ui_like_comment(
    comment_id: str,
    background_tasks: BackgroundTasks,
    ctx=Depends(require_user),
    tables: Tables = Depends(get_tables),
):
    comment, has_liked = toggle_like(tables, ctx["id"], comment_id)
    if has_liked:
        background_tasks.add_task(notify_like, tables, comment, ctx)
    return {"likes": len(comment.get("likes") or []), "has_liked": has_liked}
