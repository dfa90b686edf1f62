# -*- coding: utf-8 -*-
"""
LocForge Locale Tree Utilities

Pure transformations between nested locale trees and flat key maps.

A locale tree is the parsed JSON object of one (language, namespace) bundle:
    {"buttons": {"save": "Lưu", "cancel": "Hủy"}, "title": "Kanji"}

Node kinds:
- dict   -> object node, recursed into
- list   -> opaque leaf (arrays are never walked)
- other  -> scalar leaf (normally str; numbers/bools/null are tolerated)

Flattened form joins ancestor keys with KEY_DELIMITER:
    {"buttons.save": "Lưu", "buttons.cancel": "Hủy", "title": "Kanji"}
"""

import copy
import json
from typing import Any, Dict, Optional

from locforge_config import KEY_DELIMITER
from locforge_exceptions import MalformedPathError
from locforge_logger import get_logger

logger = get_logger("core.locale_tree")

LocaleTree = Dict[str, Any]
FlatEntryMap = Dict[str, Any]


def is_node(value: Any) -> bool:
    """True for object nodes (the only values flatten recurses into)."""
    return isinstance(value, dict)


def flatten(tree: Optional[LocaleTree], prefix: str = "") -> FlatEntryMap:
    """
    Flatten a nested tree into {dotted.path: leaf}.

    Depth-first, in insertion order. Lists are kept as opaque leaf values.
    An empty object node contributes no paths.
    """
    result: FlatEntryMap = {}
    if not tree:
        return result

    for key, value in tree.items():
        full_key = f"{prefix}{KEY_DELIMITER}{key}" if prefix else str(key)
        if is_node(value):
            result.update(flatten(value, full_key))
        else:
            result[full_key] = value
    return result


def set_at_path(tree: LocaleTree, path: str, value: Any, strict: bool = False) -> LocaleTree:
    """
    Assign value at a dotted path, creating intermediate objects as needed.

    Mutates tree in place and returns it.

    Lossy overwrite: when an intermediate segment holds a leaf (string, list,
    number), that leaf is replaced by a new object so the path can continue.
    The overwrite is logged. With strict=True a MalformedPathError is raised
    instead and the tree is left untouched.
    """
    segments = path.split(KEY_DELIMITER)

    if strict:
        current = tree
        for segment in segments[:-1]:
            node = current.get(segment)
            if node is None:
                break
            if not is_node(node):
                raise MalformedPathError(
                    f"Cannot walk '{path}': '{segment}' is not an object",
                    path=path, segment=segment,
                )
            current = node

    current = tree
    for segment in segments[:-1]:
        node = current.get(segment)
        if not is_node(node):
            if node is not None:
                logger.warning(
                    f"Overwriting leaf at '{segment}' with an object to set '{path}' "
                    f"(previous value: {node!r})"
                )
            node = {}
            current[segment] = node
        current = node

    current[segments[-1]] = value
    return tree


def get_at_path(tree: Optional[LocaleTree], path: str) -> Any:
    """Return the value at a dotted path, or None when any segment is missing."""
    current: Any = tree
    for segment in path.split(KEY_DELIMITER):
        if not is_node(current) or segment not in current:
            return None
        current = current[segment]
    return current


def unflatten(flat: FlatEntryMap) -> LocaleTree:
    """Rebuild a tree from a flat map by repeated set_at_path on an empty tree."""
    tree: LocaleTree = {}
    for path, value in flat.items():
        set_at_path(tree, path, value)
    return tree


def deep_merge(target: LocaleTree, source: LocaleTree, overwrite: bool = True) -> LocaleTree:
    """
    Merge source into target in place.

    Objects are merged recursively. For conflicting leaves the source wins only
    when overwrite is set. Source subtrees are copied so the two trees never
    share nodes.
    """
    for key, value in source.items():
        existing = target.get(key)
        if is_node(existing) and is_node(value):
            deep_merge(existing, value, overwrite)
        elif key not in target or overwrite:
            target[key] = copy.deepcopy(value)
    return target


def leaf_to_text(value: Any) -> Optional[str]:
    """
    Render a leaf as display text.

    str is returned as-is, None (JSON null) means absent, anything else
    (lists, numbers, booleans) becomes compact JSON.
    """
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
