"""Deal model - one row per opportunity on the pipeline board."""

from __future__ import annotations

import uuid

from sqlalchemy import CheckConstraint, Float, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, UUIDMixin, TimestampMixin

DEAL_STAGES = ("lead", "contact", "proposal", "negotiation", "won", "lost")


class Deal(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "deals"
    __table_args__ = (
        CheckConstraint(
            "stage IN ('lead', 'contact', 'proposal', 'negotiation', 'won', 'lost')",
            name="ck_deals_stage",
        ),
    )

    title: Mapped[str] = mapped_column(String(300))
    value: Mapped[float] = mapped_column(Float, default=0.0)
    stage: Mapped[str] = mapped_column(String(20), default="lead", index=True)
    description: Mapped[str | None] = mapped_column(Text, default=None)
    company_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("companies.id", ondelete="SET NULL"),
        default=None, index=True
    )
    assigned_to: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("profiles.id", ondelete="SET NULL"),
        default=None, index=True
    )

    def __repr__(self) -> str:
        return f"<Deal {self.title!r} {self.stage}>"
