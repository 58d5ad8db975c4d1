"""
UGP — SQLAlchemy implementations of the collaborator interfaces.
Writes go through per-row savepoints and are never committed here; the calling
operation owns the transaction.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Union

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.content import ContentNode
from app.models.localization import LocalizedText
from app.models.permissions import UserPermission, UserTypePermission
from app.models.users import User, UserType
from app.services.interfaces import (
    AssignmentStore,
    NodeDirectory,
    RoleDirectory,
    SubjectKind,
    TextService,
    UserDirectory,
)

logger = logging.getLogger(__name__)


class SqlRoleDirectory(RoleDirectory):
    def __init__(self, session: Session) -> None:
        self.session = session

    def get_role(self, role_id: int) -> Optional[UserType]:
        return self.session.get(UserType, role_id)

    def list_roles(self) -> List[UserType]:
        return list(self.session.scalars(select(UserType).order_by(UserType.id)))


class SqlUserDirectory(UserDirectory):
    def __init__(self, session: Session) -> None:
        self.session = session

    def get_user(self, user_id: int) -> Optional[User]:
        return self.session.get(User, user_id)

    def list_users_by_role(self, role_id: int) -> List[User]:
        stmt = select(User).where(User.user_type_id == role_id).order_by(User.id)
        return list(self.session.scalars(stmt))


class SqlNodeDirectory(NodeDirectory):
    def __init__(self, session: Session) -> None:
        self.session = session

    def get_node(self, node_id: int) -> Optional[ContentNode]:
        return self.session.get(ContentNode, node_id)


class SqlAssignmentStore(AssignmentStore):
    def __init__(self, session: Session) -> None:
        self.session = session

    def get_role_assignments(
        self, role_id: int, node_ids: Iterable[int]
    ) -> Dict[int, str]:
        ids = set(node_ids)
        if not ids:
            return {}
        stmt = select(UserTypePermission.node_id, UserTypePermission.permissions).where(
            UserTypePermission.user_type_id == role_id,
            UserTypePermission.node_id.in_(ids),
        )
        return {node_id: permissions for node_id, permissions in self.session.execute(stmt)}

    def get_all_role_assignments(self, role_id: int) -> Dict[int, str]:
        stmt = (
            select(UserTypePermission.node_id, UserTypePermission.permissions)
            .where(UserTypePermission.user_type_id == role_id)
            .order_by(UserTypePermission.node_id)
        )
        return {node_id: permissions for node_id, permissions in self.session.execute(stmt)}

    def get_user_assignments(self, user_id: int) -> Dict[int, str]:
        stmt = (
            select(UserPermission.node_id, UserPermission.permissions)
            .where(UserPermission.user_id == user_id)
            .order_by(UserPermission.node_id)
        )
        return {node_id: permissions for node_id, permissions in self.session.execute(stmt)}

    def put_assignment(
        self, subject_kind: SubjectKind, subject_id: int, node_id: int, permissions: str
    ) -> None:
        # Savepoint per row: a failed write leaves earlier rows in the transaction usable
        with self.session.begin_nested():
            row = self._find_row(subject_kind, subject_id, node_id)
            if row is None:
                if subject_kind is SubjectKind.ROLE:
                    row = UserTypePermission(user_type_id=subject_id, node_id=node_id)
                else:
                    row = UserPermission(user_id=subject_id, node_id=node_id)
                self.session.add(row)
            row.permissions = permissions

        logger.debug(
            "Wrote %s %s permissions at node %s: %s",
            subject_kind.value,
            subject_id,
            node_id,
            permissions,
        )

    def _find_row(
        self, subject_kind: SubjectKind, subject_id: int, node_id: int
    ) -> Union[UserTypePermission, UserPermission, None]:
        if subject_kind is SubjectKind.ROLE:
            stmt = select(UserTypePermission).filter_by(
                user_type_id=subject_id, node_id=node_id
            )
        else:
            stmt = select(UserPermission).filter_by(user_id=subject_id, node_id=node_id)
        return self.session.scalars(stmt).first()


class SqlTextService(TextService):
    def __init__(self, session: Session) -> None:
        self.session = session

    def localize(self, key: str, culture: str) -> Optional[str]:
        stmt = select(LocalizedText.value).filter_by(key=key, culture=culture)
        return self.session.scalars(stmt).first()
