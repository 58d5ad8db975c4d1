"""
UGP — Reporting tests: label translation and the permission matrix
"""

from __future__ import annotations

from typing import Dict, Optional

import pytest

from app.core.actions import Action, StaticActionCatalog
from app.core.exceptions import NodeNotFoundError, UserNotFoundError
from app.services.group_permissions import GroupPermissionsService
from app.services.interfaces import TextService
from app.services.reporting import LabelTranslator, ReportingEngine
from app.services.resolution import PermissionCache, ResolutionEngine
from app.services.sql_store import SqlAssignmentStore, SqlRoleDirectory


class DictTextService(TextService):
    def __init__(self, texts: Dict[str, str]) -> None:
        self.texts = texts
        self.calls = 0

    def localize(self, key: str, culture: str) -> Optional[str]:
        self.calls += 1
        return self.texts.get(f"{culture}:{key}")


class CountingStore(SqlAssignmentStore):
    def __init__(self, session) -> None:
        super().__init__(session)
        self.lookups = 0

    def get_role_assignments(self, role_id, node_ids):
        self.lookups += 1
        return super().get_role_assignments(role_id, node_ids)


# ─── Label translation ────────────────────────────────────────────────────────


class TestLabelTranslator:
    def test_translated_label(self):
        texts = DictTextService({"da-DK:actions/delete": "Slet"})
        assert LabelTranslator(texts, "da-DK").translate(Action("D", "delete")) == "Slet"

    def test_missing_falls_back_to_alias(self):
        texts = DictTextService({})
        assert LabelTranslator(texts, "da-DK").translate(Action("D", "delete")) == "delete"

    def test_blank_falls_back_to_alias(self):
        texts = DictTextService({"en-US:actions/move": "   "})
        assert LabelTranslator(texts, "en-US").translate(Action("M", "move")) == "move"

    def test_bracketed_placeholder_falls_back_to_alias(self):
        texts = DictTextService({"en-US:actions/rights": "[rights]"})
        assert LabelTranslator(texts, "en-US").translate(Action("R", "rights")) == "rights"

    def test_partial_brackets_kept(self):
        texts = DictTextService({"en-US:actions/rights": "[Rights"})
        assert LabelTranslator(texts, "en-US").translate(Action("R", "rights")) == "[Rights"

    def test_memoized_per_alias(self):
        texts = DictTextService({"en-US:actions/create": "Create"})
        translator = LabelTranslator(texts, "en-US")
        for _ in range(4):
            translator.translate(Action("C", "create"))
        assert texts.calls == 1


# ─── Matrix ───────────────────────────────────────────────────────────────────


@pytest.fixture
def service(db_session):
    return GroupPermissionsService(db_session)


class TestBuildMatrix:
    def test_roles_filtered_and_ordered_by_name(self, seeded, service):
        matrix = service.get_group_permissions(5, 30)
        # Admin (alias) and System (id 0) are left out; "translator" sorts case-insensitively
        assert [row.label for row in matrix] == ["Editor", "translator", "Writer"]
        assert [row.user_type_id for row in matrix] == [3, 4, 2]

    def test_actions_assignable_and_ordered_by_label(self, seeded, service):
        matrix = service.get_group_permissions(5, 30)
        labels = [p.label for p in matrix[0].permissions]

        assert labels == sorted(labels, key=str.casefold)
        assert "refreshNode" not in labels
        assert len(labels) == len(StaticActionCatalog().assignable_actions())
        # Placeholder and blank translations fall back to the alias
        assert "rights" in labels
        assert "move" in labels
        assert "Browse Node" in labels

    def test_label_ties_broken_by_alias(self, seeded, db_session):
        actions = StaticActionCatalog(
            [Action("X", "zeta"), Action("Y", "alpha"), Action("Q", "beta")]
        )
        texts = DictTextService({"en-US:actions/zeta": "Same", "en-US:actions/alpha": "Same"})
        engine = ReportingEngine(
            roles=SqlRoleDirectory(db_session),
            actions=actions,
            resolution=ResolutionEngine(SqlAssignmentStore(db_session)),
            translator=LabelTranslator(texts, "en-US"),
            admin_alias="admin",
        )
        row = engine.build_matrix(seeded["nodes"]["news"])[0]
        # "beta" falls back to its alias and sorts first; the two "Same" labels tie
        assert [p.letter for p in row.permissions] == ["Q", "Y", "X"]

    def test_resolved_flags_follow_inheritance(self, seeded, service):
        service.set_group_permissions(1, {3: ["C", "U"], 2: ["F"]})
        service.set_group_permissions(5, {2: []})

        matrix = {row.user_type_id: row for row in service.get_group_permissions(6, 30)}
        editor = {p.letter: p.has_permission for p in matrix[3].permissions}
        writer = {p.letter: p.has_permission for p in matrix[2].permissions}
        translator = {p.letter: p.has_permission for p in matrix[4].permissions}

        assert editor["C"] and editor["U"]
        assert not editor["D"]
        assert not any(writer.values())
        assert not any(translator.values())

    def test_deterministic(self, seeded, service):
        service.set_group_permissions(1, {3: ["F", "C", "A"]})
        first = service.get_group_permissions(5, 30)
        second = service.get_group_permissions(5, 30)
        assert first == second

    def test_resolves_once_per_role(self, seeded, db_session):
        store = CountingStore(db_session)
        engine = ReportingEngine(
            roles=SqlRoleDirectory(db_session),
            actions=StaticActionCatalog(),
            resolution=ResolutionEngine(store, PermissionCache()),
            translator=LabelTranslator(DictTextService({}), "en-US"),
            admin_alias="admin",
        )
        matrix = engine.build_matrix(seeded["nodes"]["article"])
        assert store.lookups == len(matrix) == 3

    def test_culture_from_requesting_user(self, seeded, db_session, service):
        from app.models.localization import LocalizedText

        db_session.add(LocalizedText(key="actions/delete", culture="da-DK", value="Slet"))
        db_session.commit()

        danish = service.get_group_permissions(5, 31)
        english = service.get_group_permissions(5, 30)
        assert "Slet" in [p.label for p in danish[0].permissions]
        assert "Delete" in [p.label for p in english[0].permissions]

    def test_unknown_node(self, seeded, service):
        with pytest.raises(NodeNotFoundError):
            service.get_group_permissions(404, 30)

    def test_unknown_requesting_user(self, seeded, service):
        with pytest.raises(UserNotFoundError):
            service.get_group_permissions(5, 999)
