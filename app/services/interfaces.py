"""
UGP — Collaborator contracts consumed by the permission engines.

The engines only touch ``id``/``name``/``alias`` on roles, ``id``/``user_type_id``/
``culture`` on users and ``id``/``path`` on nodes, so any persistence layer whose
objects expose those attributes can sit behind these interfaces.
"""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional

if TYPE_CHECKING:
    from app.core.actions import Action
    from app.models.content import ContentNode
    from app.models.users import User, UserType


class SubjectKind(str, enum.Enum):
    ROLE = "role"
    USER = "user"


class RoleDirectory(ABC):
    @abstractmethod
    def get_role(self, role_id: int) -> Optional["UserType"]: ...

    @abstractmethod
    def list_roles(self) -> List["UserType"]: ...


class UserDirectory(ABC):
    @abstractmethod
    def get_user(self, user_id: int) -> Optional["User"]: ...

    @abstractmethod
    def list_users_by_role(self, role_id: int) -> List["User"]: ...


class NodeDirectory(ABC):
    @abstractmethod
    def get_node(self, node_id: int) -> Optional["ContentNode"]: ...


class AssignmentStore(ABC):
    """
    Reads and overwrites permission assignments.

    ``put_assignment`` is an upsert: at most one row exists per
    (subject_kind, subject_id, node_id). Rows are never deleted here.
    """

    @abstractmethod
    def get_role_assignments(
        self, role_id: int, node_ids: Iterable[int]
    ) -> Dict[int, str]:
        """Explicit role assignments among ``node_ids`` in one lookup."""

    @abstractmethod
    def get_all_role_assignments(self, role_id: int) -> Dict[int, str]:
        """Every explicit assignment the role has, keyed by node id."""

    @abstractmethod
    def get_user_assignments(self, user_id: int) -> Dict[int, str]: ...

    @abstractmethod
    def put_assignment(
        self, subject_kind: SubjectKind, subject_id: int, node_id: int, permissions: str
    ) -> None: ...


class TextService(ABC):
    @abstractmethod
    def localize(self, key: str, culture: str) -> Optional[str]: ...


class ActionCatalog(ABC):
    @abstractmethod
    def list_actions(self) -> List["Action"]: ...

    def assignable_actions(self) -> List["Action"]:
        """Actions that may appear in a permission string."""
        return [a for a in self.list_actions() if a.can_be_permission_assigned]
