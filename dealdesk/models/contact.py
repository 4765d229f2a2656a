"""Contact model."""

from __future__ import annotations

import uuid

from sqlalchemy import ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, UUIDMixin, TimestampMixin


class Contact(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "contacts"

    name: Mapped[str] = mapped_column(String(200), index=True)
    email: Mapped[str] = mapped_column(String(255), index=True)
    phone: Mapped[str | None] = mapped_column(String(50), default=None)
    position: Mapped[str | None] = mapped_column(String(200), default=None)
    avatar: Mapped[str | None] = mapped_column(String(500), default=None)
    company_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("companies.id", ondelete="SET NULL"),
        default=None, index=True
    )

    def __repr__(self) -> str:
        return f"<Contact {self.name!r}>"
