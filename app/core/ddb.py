from __future__ import annotations

from typing import Any, Dict, List


def query_all(table: Any, **kwargs: Any) -> List[Dict[str, Any]]:
    """Run a query and follow LastEvaluatedKey until every page is read."""
    items: List[Dict[str, Any]] = []
    last_key = None
    while True:
        if last_key:
            kwargs["ExclusiveStartKey"] = last_key
        resp = table.query(**kwargs)
        items.extend(resp.get("Items", []))
        last_key = resp.get("LastEvaluatedKey")
        if not last_key:
            break
    return items


def scan_all(table: Any, **kwargs: Any) -> List[Dict[str, Any]]:
    items: List[Dict[str, Any]] = []
    last_key = None
    while True:
        if last_key:
            kwargs["ExclusiveStartKey"] = last_key
        resp = table.scan(**kwargs)
        items.extend(resp.get("Items", []))
        last_key = resp.get("LastEvaluatedKey")
        if not last_key:
            break
    return items


def get_item(table: Any, key: Dict[str, Any]) -> Dict[str, Any] | None:
    return table.get_item(Key=key).get("Item")
