"""
UGP — Reporting Engine
Builds the user type × action permission matrix shown for a single node.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Optional

from app.services.interfaces import ActionCatalog, RoleDirectory, TextService
from app.services.permission_codec import has_action
from app.services.resolution import PermissionCache, ResolutionEngine, is_assignable_role

if TYPE_CHECKING:
    from app.core.actions import Action
    from app.models.content import ContentNode


@dataclass
class ActionPermission:
    letter: str
    label: str
    has_permission: bool


@dataclass
class RolePermissions:
    user_type_id: int
    label: str
    permissions: List[ActionPermission] = field(default_factory=list)


class LabelTranslator:
    """
    Translates action aliases for one culture, memoized per alias.
    Blank lookups and "[placeholder]" texts fall back to the raw alias.
    """

    def __init__(self, text_service: TextService, culture: str) -> None:
        self.text_service = text_service
        self.culture = culture
        self._labels: Dict[str, str] = {}

    def translate(self, action: "Action") -> str:
        alias = action.alias
        label = self._labels.get(alias)
        if label is None:
            label = self._lookup(alias)
            self._labels[alias] = label
        return label

    def _lookup(self, alias: str) -> str:
        localized = self.text_service.localize(f"actions/{alias}", self.culture)
        if localized is None or not localized.strip():
            return alias
        if localized.startswith("[") and localized.endswith("]"):
            return alias
        return localized


class ReportingEngine:
    def __init__(
        self,
        roles: RoleDirectory,
        actions: ActionCatalog,
        resolution: ResolutionEngine,
        translator: LabelTranslator,
        admin_alias: Optional[str] = None,
    ) -> None:
        self.roles = roles
        self.actions = actions
        self.resolution = resolution
        self.translator = translator
        self.admin_alias = admin_alias
        if self.resolution.cache is None:
            self.resolution.cache = PermissionCache()

    def build_matrix(self, node: "ContentNode") -> List[RolePermissions]:
        path = node.path
        ordered_roles = sorted(
            (r for r in self.roles.list_roles() if is_assignable_role(r, self.admin_alias)),
            key=lambda r: (r.name.casefold(), r.id),
        )
        ordered_actions = sorted(
            self.actions.assignable_actions(),
            key=lambda a: (self.translator.translate(a).casefold(), a.alias),
        )

        matrix: List[RolePermissions] = []
        for role in ordered_roles:
            permissions = self.resolution.effective(role, path)
            matrix.append(
                RolePermissions(
                    user_type_id=role.id,
                    label=role.name,
                    permissions=[
                        ActionPermission(
                            letter=a.letter,
                            label=self.translator.translate(a),
                            has_permission=has_action(permissions, a.letter),
                        )
                        for a in ordered_actions
                    ],
                )
            )
        return matrix
