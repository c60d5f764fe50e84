"""In-memory stand-in for the few DynamoDB Table calls the services make."""
from __future__ import annotations

import copy
from typing import Any, Dict, List, Optional, Sequence, Tuple

from app.core.tables import Tables


def matches(condition: Any, item: Dict[str, Any]) -> bool:
    expr = condition.get_expression()
    op = expr["operator"]
    values = expr["values"]
    if op == "AND":
        return all(matches(v, item) for v in values)
    if op == "OR":
        return any(matches(v, item) for v in values)
    if op == "NOT":
        return not matches(values[0], item)
    name = values[0].name
    if op == "=":
        return name in item and item[name] == values[1]
    if op == "attribute_not_exists":
        return name not in item
    if op == "attribute_exists":
        return name in item
    raise NotImplementedError(op)


class FakeBatchWriter:
    def __init__(self, table: "FakeTable"):
        self.table = table

    def __enter__(self) -> "FakeBatchWriter":
        return self

    def __exit__(self, *exc: Any) -> None:
        return None

    def put_item(self, Item: Dict[str, Any]) -> None:
        self.table.put_item(Item=Item)

    def delete_item(self, Key: Dict[str, Any]) -> None:
        self.table.delete_item(Key=Key)


class FakeTable:
    def __init__(self, key: Sequence[str], indexes: Optional[Dict[str, Tuple[str, Optional[str]]]] = None):
        self.key = tuple(key)
        self.indexes = indexes or {}
        self.items: Dict[Tuple[Any, ...], Dict[str, Any]] = {}
        self.fail_puts = False

    def _key_of(self, data: Dict[str, Any]) -> Tuple[Any, ...]:
        return tuple(data[k] for k in self.key)

    def all(self) -> List[Dict[str, Any]]:
        return [copy.deepcopy(it) for it in self.items.values()]

    def put_item(self, Item: Dict[str, Any], **_: Any) -> Dict[str, Any]:
        if self.fail_puts:
            raise RuntimeError("simulated storage failure")
        self.items[self._key_of(Item)] = copy.deepcopy(Item)
        return {}

    def get_item(self, Key: Dict[str, Any], **_: Any) -> Dict[str, Any]:
        item = self.items.get(self._key_of(Key))
        return {"Item": copy.deepcopy(item)} if item is not None else {}

    def delete_item(self, Key: Dict[str, Any], **_: Any) -> Dict[str, Any]:
        self.items.pop(self._key_of(Key), None)
        return {}

    def batch_writer(self) -> FakeBatchWriter:
        return FakeBatchWriter(self)

    def scan(self, FilterExpression: Any = None, **_: Any) -> Dict[str, Any]:
        items = [it for it in self.all() if FilterExpression is None or matches(FilterExpression, it)]
        return {"Items": items}

    def query(
        self,
        KeyConditionExpression: Any,
        IndexName: Optional[str] = None,
        FilterExpression: Any = None,
        ScanIndexForward: bool = True,
        Limit: Optional[int] = None,
        **_: Any,
    ) -> Dict[str, Any]:
        if IndexName:
            hash_key, range_key = self.indexes[IndexName]
        else:
            hash_key = self.key[0]
            range_key = self.key[1] if len(self.key) > 1 else None
        # Items without the index hash key are not projected into a GSI.
        items = [it for it in self.all() if hash_key in it and matches(KeyConditionExpression, it)]
        if range_key:
            items.sort(key=lambda it: it.get(range_key, ""), reverse=not ScanIndexForward)
        if Limit is not None:
            items = items[:Limit]
        if FilterExpression is not None:
            items = [it for it in items if matches(FilterExpression, it)]
        return {"Items": items}


def build_tables() -> Tables:
    return Tables(
        users=FakeTable(("user_id",), {"email-index": ("email", None)}),
        posts=FakeTable(("post_id",)),
        comments=FakeTable(
            ("comment_id",),
            {
                "post_id-index": ("post_id", "created_at"),
                "parent_comment-index": ("parent_comment", "created_at"),
            },
        ),
        notifications=FakeTable(("user_id", "notification_id")),
    )


class FakeDatabase:
    """Drop-in for app.core.tables.Database backed by FakeTables."""

    def __init__(self, tables: Optional[Tables] = None):
        self.tables = tables or build_tables()
        self.closed = False

    def close(self) -> None:
        self.closed = True
