import asyncio
import unittest

from fastapi import BackgroundTasks, HTTPException

from app.models import CommentCreateReq, CommentUpdateReq, PostIn
from app.routers import comments, notifications, posts
from app.services.notifications import notify_comment, notify_like

from fakes import build_tables

ALICE = {"id": "alice", "name": "Alice", "email": "a@x.com"}
BOB = {"id": "bob", "name": "Bob", "email": "b@x.com"}


def run_async(coro):
    return asyncio.run(coro)


def seeded_tables():
    tables = build_tables()
    tables.users.put_item(Item={"user_id": "alice", "name": "Alice", "email": "a@x.com", "password": "h"})
    tables.users.put_item(Item={"user_id": "bob", "name": "Bob", "email": "b@x.com", "password": "h"})
    tables.posts.put_item(Item={"post_id": "p1", "title": "T", "content": "C", "author": "alice",
                                "created_at": "2024-01-01T00:00:00.000000+00:00"})
    return tables


class TestPostRoutes(unittest.TestCase):
    def test_create_then_fetch(self):
        tables = build_tables()
        created = run_async(posts.ui_create_post(body=PostIn(title="Hi", content="There"), ctx=ALICE, tables=tables))
        self.assertEqual(created["author"], "alice")
        fetched = run_async(posts.ui_get_post(post_id=created["id"], tables=tables))
        self.assertEqual(fetched["title"], "Hi")
        listed = run_async(posts.ui_list_posts(tables=tables))
        self.assertEqual([p["id"] for p in listed], [created["id"]])

    def test_delete_message(self):
        tables = seeded_tables()
        resp = run_async(posts.ui_delete_post(post_id="p1", ctx=ALICE, tables=tables))
        self.assertEqual(resp, {"message": "Post deleted successfully"})


class TestCommentRoutes(unittest.TestCase):
    def test_create_schedules_comment_notification(self):
        tables = seeded_tables()
        tasks = BackgroundTasks()
        resp = run_async(
            comments.ui_create_comment(
                post_id="p1",
                body=CommentCreateReq(content="Great"),
                background_tasks=tasks,
                ctx=BOB,
                tables=tables,
            )
        )
        self.assertEqual(resp["content"], "Great")
        self.assertEqual(resp["author"], {"id": "bob", "name": "Bob", "email": "b@x.com"})
        self.assertEqual([t.func for t in tasks.tasks], [notify_comment])

    def test_parent_alias_accepted(self):
        body = CommentCreateReq.model_validate({"content": "x", "parentComment": "c1"})
        self.assertEqual(body.parent_comment, "c1")

    def test_like_notifies_only_when_liking(self):
        tables = seeded_tables()
        comment, _ = comments.create_comment(tables, ALICE, "p1", "mine")

        tasks = BackgroundTasks()
        resp = run_async(
            comments.ui_like_comment(comment_id=comment["comment_id"], background_tasks=tasks, ctx=BOB, tables=tables)
        )
        self.assertEqual(resp, {"likes": 1, "has_liked": True})
        self.assertEqual([t.func for t in tasks.tasks], [notify_like])

        tasks = BackgroundTasks()
        resp = run_async(
            comments.ui_like_comment(comment_id=comment["comment_id"], background_tasks=tasks, ctx=BOB, tables=tables)
        )
        self.assertEqual(resp, {"likes": 0, "has_liked": False})
        self.assertEqual(tasks.tasks, [])

    def test_update_and_delete(self):
        tables = seeded_tables()
        comment, _ = comments.create_comment(tables, BOB, "p1", "first")
        comments.create_comment(tables, ALICE, "p1", "reply", comment["comment_id"])

        updated = run_async(
            comments.ui_update_comment(
                comment_id=comment["comment_id"], body=CommentUpdateReq(content="second"), ctx=BOB, tables=tables
            )
        )
        self.assertTrue(updated["is_edited"])

        with self.assertRaises(HTTPException) as ctx:
            run_async(comments.ui_delete_comment(comment_id=comment["comment_id"], ctx=ALICE, tables=tables))
        self.assertEqual(ctx.exception.status_code, 403)

        resp = run_async(comments.ui_delete_comment(comment_id=comment["comment_id"], ctx=BOB, tables=tables))
        self.assertEqual(resp, {"message": "Comment deleted successfully", "replies_deleted": 1})
        self.assertEqual(tables.comments.all(), [])


class TestNotificationRoutes(unittest.TestCase):
    def test_list_and_mark(self):
        tables = seeded_tables()
        note = notify_comment(tables, {"post_id": "p1", "author": "alice"}, BOB)

        listed = run_async(notifications.ui_list_notifications(ctx=ALICE, tables=tables))
        self.assertEqual(len(listed), 1)
        self.assertEqual(listed[0]["id"], note["notification_id"])
        self.assertFalse(listed[0]["is_read"])

        self.assertEqual(run_async(notifications.ui_list_notifications(ctx=BOB, tables=tables)), [])

        with self.assertRaises(HTTPException) as ctx:
            run_async(notifications.ui_mark_read(notification_id=note["notification_id"], ctx=BOB, tables=tables))
        self.assertEqual(ctx.exception.status_code, 404)

        marked = run_async(notifications.ui_mark_read(notification_id=note["notification_id"], ctx=ALICE, tables=tables))
        self.assertTrue(marked["is_read"])

        resp = run_async(notifications.ui_mark_all_read(ctx=ALICE, tables=tables))
        self.assertEqual(resp, {"message": "All read", "updated": 0})
