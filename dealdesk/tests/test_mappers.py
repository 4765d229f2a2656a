"""Test row -> domain mapping and sentinel fallbacks."""

from __future__ import annotations

import uuid

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from dealdesk import mappers
from dealdesk.mappers import (
    SYSTEM_USER,
    UNASSIGNED_USER,
    UNKNOWN_COMPANY,
    map_activity,
    map_company,
    map_contact,
    map_deal,
)
from dealdesk.models import Activity, Company, Contact, Deal, Profile


@pytest.mark.asyncio
async def test_company_defaults_industry_and_loads_contacts(db: AsyncSession):
    company = Company(name="Hooli")
    db.add(company)
    await db.commit()
    db.add_all([
        Contact(name="Zed", email="zed@hooli.com", company_id=company.id),
        Contact(name="Amy", email="amy@hooli.com", company_id=company.id),
    ])
    await db.commit()

    mapped = await map_company(db, company)
    assert mapped.industry == "Unknown"
    assert mapped.logo is None
    assert [c.name for c in mapped.contacts] == ["Amy", "Zed"]
    assert all(c.company.id == mapped.id for c in mapped.contacts)
    assert all(c.company.contacts == () for c in mapped.contacts)


@pytest.mark.asyncio
async def test_company_without_contacts_lookup(db: AsyncSession):
    company = Company(name="Pied Piper")
    db.add(company)
    await db.commit()
    mapped = await map_company(db, company, with_contacts=False)
    assert mapped.contacts == ()


@pytest.mark.asyncio
async def test_contact_with_null_company_gets_placeholder(db: AsyncSession):
    contact = Contact(name="Orphan", email="orphan@example.com")
    db.add(contact)
    await db.commit()

    mapped = await map_contact(db, contact)
    assert mapped.company == UNKNOWN_COMPANY
    assert mapped.company.id == "unknown"
    assert mapped.company.name == "Unknown Company"


@pytest.mark.asyncio
async def test_contact_with_dangling_company_gets_placeholder(db: AsyncSession):
    contact = Contact(name="Dangling", email="d@example.com", company_id=uuid.uuid4())
    db.add(contact)
    await db.commit()

    mapped = await map_contact(db, contact)
    assert mapped.company is UNKNOWN_COMPANY


@pytest.mark.asyncio
async def test_deal_placeholders(db: AsyncSession):
    deal = Deal(title="Floating", value=10.0, stage="lead", assigned_to=uuid.uuid4())
    db.add(deal)
    await db.commit()

    mapped = await map_deal(db, deal)
    assert mapped.company is UNKNOWN_COMPANY
    assert mapped.assigned_to is UNASSIGNED_USER
    assert mapped.assigned_to.name == "Unassigned"


@pytest.mark.asyncio
async def test_deal_resolves_assignee(db: AsyncSession, profile: Profile):
    company = Company(name="Vandelay", industry="Import/Export")
    db.add(company)
    await db.commit()
    deal = Deal(title="Latex", value=99.5, stage="won",
                company_id=company.id, assigned_to=profile.id)
    db.add(deal)
    await db.commit()

    mapped = await map_deal(db, deal)
    assert mapped.company.name == "Vandelay"
    assert mapped.company.industry == "Import/Export"
    assert mapped.assigned_to.id == str(profile.id)
    assert mapped.assigned_to.email == "dana@example.com"
    assert mapped.value == 99.5


@pytest.mark.asyncio
async def test_failed_lookup_degrades_to_placeholder(db: AsyncSession, monkeypatch):
    deal = Deal(title="Flaky", value=1.0, stage="lead", company_id=uuid.uuid4())
    db.add(deal)
    await db.commit()

    async def broken_get(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("connection lost"))

    monkeypatch.setattr(db, "get", broken_get)
    mapped = await map_deal(db, deal)
    assert mapped.company is UNKNOWN_COMPANY
    assert mapped.assigned_to is UNASSIGNED_USER


@pytest.mark.asyncio
async def test_activity_without_user_is_system(db: AsyncSession):
    row = Activity(type="deal_created", description="Created", entity_type="deal",
                   entity_id=uuid.uuid4())
    db.add(row)
    await db.commit()

    mapped = await map_activity(db, row)
    assert mapped.user is SYSTEM_USER
    assert mapped.entity_id == str(row.entity_id)
    assert mapped.entity_type == "deal"


def test_missing_timestamp_defaults_to_now():
    assert mappers._ts(None).tzinfo is not None


def test_sentinels_serialize_camel_case():
    data = UNKNOWN_COMPANY.model_dump(by_alias=True)
    assert data["id"] == "unknown"
    assert "createdAt" in data
