"""Company model."""

from __future__ import annotations

import uuid

from sqlalchemy import String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, UUIDMixin, TimestampMixin


class Company(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "companies"

    name: Mapped[str] = mapped_column(String(200), index=True)
    logo: Mapped[str | None] = mapped_column(String(500), default=None)
    industry: Mapped[str | None] = mapped_column(String(100), default=None)
    website: Mapped[str | None] = mapped_column(String(500), default=None)
    size: Mapped[str | None] = mapped_column(String(50), default=None)
    created_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, default=None)

    def __repr__(self) -> str:
        return f"<Company {self.name!r}>"
