"""
UGP — Models: Localized UI text, keyed like "actions/publish"
"""

from __future__ import annotations

from sqlalchemy import Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class LocalizedText(Base):
    __tablename__ = "localized_texts"
    __table_args__ = (UniqueConstraint("key", "culture", name="uq_text_key_culture"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    key: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    culture: Mapped[str] = mapped_column(String(16), nullable=False)
    value: Mapped[str] = mapped_column(Text, nullable=False, default="")
