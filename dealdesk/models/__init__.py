"""DealDesk models - re-exports all models and Base.metadata."""

from .base import Base, UUIDMixin, TimestampMixin
from .profile import Profile
from .company import Company
from .contact import Contact
from .deal import Deal, DEAL_STAGES
from .activity import Activity, ACTIVITY_TYPES

__all__ = [
    "Base",
    "UUIDMixin",
    "TimestampMixin",
    "Profile",
    "Company",
    "Contact",
    "Deal",
    "DEAL_STAGES",
    "Activity",
    "ACTIVITY_TYPES",
]
