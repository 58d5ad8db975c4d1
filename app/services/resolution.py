"""
UGP — Resolution Engine
Computes a role's effective permission string on a node by walking the node's path.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, Optional, Sequence, Tuple

from app.config import get_settings
from app.services.interfaces import AssignmentStore
from app.services.path_resolver import resolve
from app.services.permission_codec import EMPTY_PERMISSIONS

if TYPE_CHECKING:
    from app.models.users import UserType

logger = logging.getLogger(__name__)


def is_assignable_role(role: "UserType", admin_alias: Optional[str] = None) -> bool:
    """
    Admin (all rights implicitly) and system roles with id <= 0 never carry
    explicit assignments and are left out of resolution, propagation and reports.
    """
    alias = admin_alias if admin_alias is not None else get_settings().ADMIN_ROLE_ALIAS
    if role.id <= 0:
        return False
    return (role.alias or "").casefold() != alias.casefold()


class PermissionCache:
    """
    Per-operation memo of effective permissions by role id.

    The key is the role id alone, so one cache serves exactly one path.
    Build a new cache for every operation; never share it.
    """

    def __init__(self) -> None:
        self._path: Optional[Tuple[int, ...]] = None
        self._by_role: Dict[int, str] = {}

    def _bind(self, path: Sequence[int]) -> None:
        key = tuple(path)
        if self._path is None:
            self._path = key
        elif self._path != key:
            raise ValueError(
                f"PermissionCache is bound to path {self._path}, got {key}"
            )

    def get(self, role_id: int, path: Sequence[int]) -> Optional[str]:
        self._bind(path)
        return self._by_role.get(role_id)

    def put(self, role_id: int, path: Sequence[int], permissions: str) -> None:
        self._bind(path)
        self._by_role[role_id] = permissions

    def __len__(self) -> int:
        return len(self._by_role)


class ResolutionEngine:
    def __init__(
        self,
        store: AssignmentStore,
        cache: Optional[PermissionCache] = None,
        admin_alias: Optional[str] = None,
    ) -> None:
        self.store = store
        self.cache = cache
        self.admin_alias = admin_alias

    def effective(self, role: "UserType", path: Sequence[int]) -> str:
        """Effective permission string for ``role`` at the last node of ``path``."""
        if not is_assignable_role(role, self.admin_alias):
            return EMPTY_PERMISSIONS

        if self.cache is not None:
            cached = self.cache.get(role.id, path)
            if cached is not None:
                logger.debug("Permission cache hit for role %s", role.id)
                return cached

        assignments = self.store.get_role_assignments(role.id, path)
        permissions = resolve(path, assignments)

        if self.cache is not None:
            self.cache.put(role.id, path, permissions)
        return permissions
