"""
UGP — Content tree action catalog.
Each action is addressed by a single letter; permission strings are made of these letters.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from app.services.interfaces import ActionCatalog


@dataclass(frozen=True)
class Action:
    letter: str
    alias: str
    can_be_permission_assigned: bool = True


# ─── Built-in actions ─────────────────────────────────────────────────────────

DEFAULT_ACTIONS: Tuple[Action, ...] = (
    Action("F", "browse"),
    Action("C", "create"),
    Action("A", "update"),
    Action("D", "delete"),
    Action("U", "publish"),
    Action("H", "sendtopublish"),
    Action("M", "move"),
    Action("O", "copy"),
    Action("S", "sort"),
    Action("K", "rollback"),
    Action("R", "rights"),
    Action("P", "protect"),
    Action("I", "assignDomain"),
    Action("N", "notify"),
    Action("Z", "auditTrail"),
    Action("5", "sendToTranslate"),
    Action("4", "translate"),
    # Menu-only actions
    Action("L", "refreshNode", can_be_permission_assigned=False),
    Action("!", "createFolder", can_be_permission_assigned=False),
    Action("B", "republish", can_be_permission_assigned=False),
)


class StaticActionCatalog(ActionCatalog):
    """Fixed in-process action list; letters must be unique."""

    def __init__(self, actions: Optional[Iterable[Action]] = None) -> None:
        self._actions: List[Action] = list(actions if actions is not None else DEFAULT_ACTIONS)
        letters = [a.letter for a in self._actions]
        duplicates = {x for x in letters if letters.count(x) > 1}
        if duplicates:
            raise ValueError(f"Duplicate action letters: {sorted(duplicates)}")
        for action in self._actions:
            if len(action.letter) != 1:
                raise ValueError(f"Action {action.alias!r} letter must be one character")

    def list_actions(self) -> List[Action]:
        return list(self._actions)
