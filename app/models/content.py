"""
UGP — Models: Content tree nodes
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.services.path_resolver import ROOT_ID, format_path, parse_path


class ContentNode(Base):
    """
    A node in the content tree.

    ``raw_path`` holds the ancestor chain as stored, e.g. ``"-1,1,5"``:
    the root sentinel first and the node's own id last.
    """

    __tablename__ = "content_nodes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    parent_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("content_nodes.id"), nullable=True, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    raw_path: Mapped[str] = mapped_column("path", String(1024), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    @property
    def path(self) -> List[int]:
        return parse_path(self.raw_path)

    @classmethod
    def create(
        cls, node_id: int, name: str, parent: Optional["ContentNode"] = None
    ) -> "ContentNode":
        """Build a node whose path extends its parent's (or the root's)."""
        ancestors = parent.path if parent is not None else [ROOT_ID]
        return cls(
            id=node_id,
            parent_id=parent.id if parent is not None else None,
            name=name,
            raw_path=format_path(ancestors + [node_id]),
        )

    def __repr__(self) -> str:
        return f"<ContentNode(id={self.id}, path={self.raw_path!r})>"
