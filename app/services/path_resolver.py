"""
UGP — Path resolution.
A node without its own assignment inherits the nearest ancestor's; nothing on the path means no permissions.
"""

from __future__ import annotations

from typing import Mapping, Sequence, List

from app.services.permission_codec import EMPTY_PERMISSIONS

# Virtual root that prefixes every stored path
ROOT_ID = -1


def parse_path(raw: str) -> List[int]:
    """'-1,1057,1060' -> [-1, 1057, 1060]. Blank segments are ignored."""
    return [int(part) for part in raw.split(",") if part.strip()]


def format_path(path: Sequence[int]) -> str:
    return ",".join(str(node_id) for node_id in path)


def resolve(path: Sequence[int], assignments_by_node_id: Mapping[int, str]) -> str:
    """
    Return the assignment of the deepest node on ``path`` that has one.

    ``path`` runs root first, the node itself last. An explicit "-" stops the
    walk just like any other assignment, masking grants further up.
    """
    for node_id in reversed(path):
        permissions = assignments_by_node_id.get(node_id)
        if permissions is not None:
            return permissions
    return EMPTY_PERMISSIONS
