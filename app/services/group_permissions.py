"""
UGP — User group permission operations.
Apply-all, set and get, each running as one request-scoped unit of work over a Session.
"""

from __future__ import annotations

import logging
from typing import List, Mapping, Optional, Sequence

from sqlalchemy.orm import Session

from app.config import Settings, get_settings
from app.core.actions import StaticActionCatalog
from app.core.exceptions import (
    NodeNotFoundError,
    OperationResult,
    PartialPropagationError,
    PropagationError,
    RoleNotFoundError,
    UGPError,
    UserNotFoundError,
    propagation_failure,
)
from app.services.interfaces import ActionCatalog
from app.services.permission_codec import encode_letters
from app.services.propagation import PropagationEngine
from app.services.reporting import LabelTranslator, ReportingEngine, RolePermissions
from app.services.resolution import PermissionCache, ResolutionEngine, is_assignable_role
from app.services.sql_store import (
    SqlAssignmentStore,
    SqlNodeDirectory,
    SqlRoleDirectory,
    SqlTextService,
    SqlUserDirectory,
)

logger = logging.getLogger(__name__)


class GroupPermissionsService:
    """Entry point for the three user group permission operations."""

    def __init__(
        self,
        session: Session,
        actions: Optional[ActionCatalog] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.session = session
        self.settings = settings or get_settings()
        self.actions = actions or StaticActionCatalog()
        self.roles = SqlRoleDirectory(session)
        self.users = SqlUserDirectory(session)
        self.nodes = SqlNodeDirectory(session)
        self.store = SqlAssignmentStore(session)
        self.texts = SqlTextService(session)
        self.propagation = PropagationEngine(
            self.store, self.users, self.roles, self.settings.ADMIN_ROLE_ALIAS
        )

    # ── Apply all ─────────────────────────────────────────────────────────────

    def apply_all_group_permissions(self, user_id: int) -> OperationResult:
        """Overwrite the user's assignments with every explicit one of their user type."""
        user = self.users.get_user(user_id)
        if user is None:
            return OperationResult.failure(UserNotFoundError(user_id))

        try:
            self.propagation.sync_user_to_role(user)
        except (RoleNotFoundError, PropagationError) as exc:
            return self._fail(exc)

        self.session.commit()
        return OperationResult.ok()

    # ── Set ───────────────────────────────────────────────────────────────────

    def set_group_permissions(
        self,
        node_id: int,
        permissions_by_type_id: Mapping[int, Sequence[str]],
        replace_permissions_on_users: bool = False,
    ) -> OperationResult:
        """
        Overwrite the submitted user types' assignments at one node.

        An empty letter list is stored as "-". User types missing from the
        mapping are not written. Every id is checked before the first write.
        """
        node = self.nodes.get_node(node_id)
        if node is None:
            return OperationResult.failure(NodeNotFoundError(node_id))

        planned = []
        for type_id in sorted(permissions_by_type_id):
            role = self.roles.get_role(type_id)
            if role is None:
                return OperationResult.failure(RoleNotFoundError(type_id))
            if not is_assignable_role(role, self.settings.ADMIN_ROLE_ALIAS):
                return OperationResult.failure(
                    RoleNotFoundError(type_id, reason="is reserved and cannot be assigned")
                )
            planned.append((role, encode_letters(permissions_by_type_id[type_id])))

        total = sum(
            self.propagation.count_role_writes(role, replace_permissions_on_users)
            for role, _ in planned
        )
        written = 0
        for role, cruds in planned:
            try:
                written += self.propagation.set_role_permissions(
                    role, node, cruds, cascade_to_users=replace_permissions_on_users
                )
            except PropagationError as exc:
                done = written + exc.written
                return self._fail(
                    propagation_failure("set_group_permissions", done, total - done, exc.cause)
                )

        self.session.commit()
        return OperationResult.ok()

    # ── Get ───────────────────────────────────────────────────────────────────

    def get_group_permissions(
        self, node_id: int, requesting_user_id: int
    ) -> List[RolePermissions]:
        """Permission matrix for ``node_id``, labelled in the requesting user's culture."""
        node = self.nodes.get_node(node_id)
        if node is None:
            raise NodeNotFoundError(node_id)
        user = self.users.get_user(requesting_user_id)
        if user is None:
            raise UserNotFoundError(requesting_user_id)

        culture = user.culture or self.settings.DEFAULT_CULTURE
        reporting = ReportingEngine(
            roles=self.roles,
            actions=self.actions,
            resolution=ResolutionEngine(
                self.store, PermissionCache(), self.settings.ADMIN_ROLE_ALIAS
            ),
            translator=LabelTranslator(self.texts, culture),
            admin_alias=self.settings.ADMIN_ROLE_ALIAS,
        )
        return reporting.build_matrix(node)

    # ── Helpers ───────────────────────────────────────────────────────────────

    def _fail(self, exc: UGPError) -> OperationResult:
        if isinstance(exc, PartialPropagationError) and not self.settings.PROPAGATION_ATOMIC:
            # Keep what was written; re-running the operation completes it
            self.session.commit()
        else:
            if isinstance(exc, PartialPropagationError):
                logger.warning("Rolling back %d propagated write(s)", exc.written)
            self.session.rollback()
        return OperationResult.failure(exc)
