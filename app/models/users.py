"""
UGP — Models: User types (roles / user groups) and back-office users
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class UserType(Base):
    """A role. Members inherit its permissions unless overridden per user."""

    __tablename__ = "user_types"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    alias: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    users: Mapped[List["User"]] = relationship("User", back_populates="user_type")

    def __repr__(self) -> str:
        return f"<UserType(id={self.id}, alias={self.alias!r})>"


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    user_type_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("user_types.id"), nullable=False, index=True
    )
    # Culture for translated labels, e.g. "en-US"; falls back to DEFAULT_CULTURE
    culture: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    user_type: Mapped["UserType"] = relationship("UserType", back_populates="users")

    def __repr__(self) -> str:
        return f"<User(id={self.id}, user_type_id={self.user_type_id})>"
