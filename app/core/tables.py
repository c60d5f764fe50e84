from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from fastapi import Request

from .aws import dynamodb_resource
from .settings import S

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Tables:
    users: Any
    posts: Any
    comments: Any
    notifications: Any


class Database:
    """Process-wide DynamoDB handle.

    Created by the application factory, opened on first use and closed by the
    application lifespan on shutdown.
    """

    def __init__(self, resource_factory: Callable[[], Any] = dynamodb_resource):
        self._resource_factory = resource_factory
        self._resource: Optional[Any] = None
        self._tables: Optional[Tables] = None

    @property
    def is_open(self) -> bool:
        return self._tables is not None

    @property
    def tables(self) -> Tables:
        if self._tables is None:
            self.open()
        return self._tables

    def open(self) -> None:
        if self._tables is not None:
            return
        resource = self._resource_factory()
        self._resource = resource
        self._tables = Tables(
            users=resource.Table(S.users_table_name),
            posts=resource.Table(S.posts_table_name),
            comments=resource.Table(S.comments_table_name),
            notifications=resource.Table(S.notifications_table_name),
        )
        logger.info("DynamoDB tables opened (region=%s)", S.aws_region)

    def close(self) -> None:
        if self._resource is None:
            return
        client = getattr(getattr(self._resource, "meta", None), "client", None)
        if client is not None and hasattr(client, "close"):
            client.close()
        self._resource = None
        self._tables = None
        logger.info("DynamoDB tables closed")


def get_tables(request: Request) -> Tables:
    return request.app.state.db.tables
