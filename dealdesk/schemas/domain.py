"""Domain shapes returned by services and serialized by the JSON API.

Field names are snake_case in Python and camelCase on the wire
(``created_at`` -> ``createdAt``, ``assigned_to`` -> ``assignedTo``).
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

Stage = Literal["lead", "contact", "proposal", "negotiation", "won", "lost"]
ActivityType = Literal[
    "deal_created",
    "deal_updated",
    "deal_stage_changed",
    "contact_added",
    "company_added",
]
EntityType = Literal["deal", "contact", "company"]


class DomainModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class User(DomainModel):
    id: str
    name: str
    email: str
    avatar: str | None = None


class Company(DomainModel):
    id: str
    name: str
    industry: str = "Unknown"
    logo: str | None = None
    website: str | None = None
    size: str | None = None
    created_at: datetime
    updated_at: datetime
    contacts: tuple[Contact, ...] = ()


class Contact(DomainModel):
    id: str
    name: str
    email: str
    phone: str | None = None
    position: str | None = None
    avatar: str | None = None
    created_at: datetime
    updated_at: datetime
    company: Company


class Deal(DomainModel):
    id: str
    title: str
    value: float
    stage: Stage
    company: Company
    assigned_to: User
    description: str | None = None
    created_at: datetime
    updated_at: datetime


class Activity(DomainModel):
    id: str
    type: ActivityType
    user: User
    description: str
    timestamp: datetime
    entity_id: str | None = None
    entity_type: EntityType | None = None


class DashboardStats(DomainModel):
    total_deals: int
    total_value: float
    won_deals: int
    won_value: float
    new_leads: int
    conversion_rate: int


class StatCard(DomainModel):
    title: str
    value: str
    description: str


Company.model_rebuild()
Contact.model_rebuild()


class BoardColumn(DomainModel):
    stage: Stage
    title: str
    count: int
    value: float
    deals: tuple[Deal, ...] = ()
