"""Recursive key/value tree for rendering raw order records."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Mapping

from vinwatch.logic.normalize import PLACEHOLDER, parse_json_optional


@dataclass(slots=True)
class KVNode:
    kind: str  # "object", "array" or "value"
    title: str | None = None
    text: str | None = None
    children: list[KVNode] = field(default_factory=list)


def format_primitive(value: Any) -> str:
    if value is None:
        return PLACEHOLDER
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return value or PLACEHOLDER
    return json.dumps(value, ensure_ascii=False, default=str)


def build_kv_tree(value: Any, title: str | None = None) -> KVNode:
    if isinstance(value, str):
        parsed = parse_json_optional(value)
        if isinstance(parsed, (Mapping, list)):
            return build_kv_tree(parsed, title)
        return KVNode(kind="value", title=title, text=format_primitive(value))
    if isinstance(value, list):
        children = [build_kv_tree(item, f"项 {idx}") for idx, item in enumerate(value, start=1)]
        return KVNode(kind="array", title=title, children=children)
    if isinstance(value, Mapping):
        children = [build_kv_tree(item, str(key)) for key, item in value.items()]
        return KVNode(kind="object", title=title, children=children)
    return KVNode(kind="value", title=title, text=format_primitive(value))
