"""
UGP — Propagation Engine
Writes role-level assignments and copies them onto the role's users.

Writes are independent overwrites with no transaction of their own. When one
fails part-way the rows already written stay written and the raised
PropagationError reports how far it got; running the same operation again converges.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Optional, Tuple

from app.core.exceptions import RoleNotFoundError, propagation_failure
from app.services.interfaces import (
    AssignmentStore,
    RoleDirectory,
    SubjectKind,
    UserDirectory,
)
from app.services.resolution import is_assignable_role

if TYPE_CHECKING:
    from app.models.content import ContentNode
    from app.models.users import User, UserType

logger = logging.getLogger(__name__)

# (subject_kind, subject_id, node_id, permissions)
_Write = Tuple[SubjectKind, int, int, str]


class PropagationEngine:
    def __init__(
        self,
        store: AssignmentStore,
        users: UserDirectory,
        roles: RoleDirectory,
        admin_alias: Optional[str] = None,
    ) -> None:
        self.store = store
        self.users = users
        self.roles = roles
        self.admin_alias = admin_alias

    def set_role_permissions(
        self,
        role: "UserType",
        node: "ContentNode",
        permissions: str,
        cascade_to_users: bool = False,
    ) -> int:
        """
        Overwrite the role's assignment at ``node``; with ``cascade_to_users``
        also overwrite every member's assignment at that node (only that node).
        Returns the number of rows written.
        """
        if not is_assignable_role(role, self.admin_alias):
            raise RoleNotFoundError(role.id, reason="is reserved and cannot be assigned")

        writes: List[_Write] = [(SubjectKind.ROLE, role.id, node.id, permissions)]
        if cascade_to_users:
            writes.extend(
                (SubjectKind.USER, user.id, node.id, permissions)
                for user in self.users.list_users_by_role(role.id)
            )

        written = self._apply("set_role_permissions", writes)
        logger.info(
            "Set user type %s permissions at node %s to %r (%d user(s) updated)",
            role.id,
            node.id,
            permissions,
            written - 1,
        )
        return written

    def count_role_writes(self, role: "UserType", cascade_to_users: bool = False) -> int:
        """Rows ``set_role_permissions`` writes for ``role`` at one node."""
        if not cascade_to_users:
            return 1
        return 1 + len(self.users.list_users_by_role(role.id))

    def sync_user_to_role(self, user: "User") -> int:
        """
        Copy each explicit assignment of the user's role onto ``user`` at the same
        node. Nodes the role never assigned explicitly are left alone for the user.
        """
        role = self.roles.get_role(user.user_type_id)
        if role is None:
            raise RoleNotFoundError(user.user_type_id)
        if not is_assignable_role(role, self.admin_alias):
            logger.info("User %s belongs to reserved user type %s; nothing to sync", user.id, role.id)
            return 0

        writes: List[_Write] = [
            (SubjectKind.USER, user.id, node_id, permissions)
            for node_id, permissions in self.store.get_all_role_assignments(role.id).items()
        ]
        written = self._apply("sync_user_to_role", writes)
        logger.info("Copied %d user type %s assignment(s) to user %s", written, role.id, user.id)
        return written

    def _apply(self, operation: str, writes: List[_Write]) -> int:
        written = 0
        for subject_kind, subject_id, node_id, permissions in writes:
            try:
                self.store.put_assignment(subject_kind, subject_id, node_id, permissions)
            except Exception as exc:
                pending = len(writes) - written
                logger.error(
                    "%s failed at %s %s node %s after %d write(s): %s",
                    operation,
                    subject_kind.value,
                    subject_id,
                    node_id,
                    written,
                    exc,
                )
                raise propagation_failure(operation, written, pending, exc) from exc
            written += 1
        return written
