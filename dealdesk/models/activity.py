"""Activity model - append-only audit trail."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, UUIDMixin, _utcnow

ACTIVITY_TYPES = (
    "deal_created",
    "deal_updated",
    "deal_stage_changed",
    "contact_added",
    "company_added",
)


class Activity(UUIDMixin, Base):
    __tablename__ = "activities"

    type: Mapped[str] = mapped_column(String(50))
    description: Mapped[str] = mapped_column(Text)
    timestamp: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), default=_utcnow,
        nullable=True, index=True,
    )
    entity_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, default=None, index=True)
    entity_type: Mapped[str | None] = mapped_column(String(20), default=None)  # deal, contact, company
    user_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, default=None)

    def __repr__(self) -> str:
        return f"<Activity {self.type} {self.entity_type}>"
