"""Test contact service CRUD."""

from __future__ import annotations

import uuid

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from dealdesk.errors import NotFoundError
from dealdesk.mappers import UNKNOWN_COMPANY
from dealdesk.schemas.domain import Company
from dealdesk.schemas.forms import CompanyForm, ContactForm, ContactUpdate
from dealdesk.services import activity_svc, company_svc, contact_svc


@pytest.mark.asyncio
async def test_create_contact(db: AsyncSession, company: Company):
    contact = await contact_svc.create_contact(db, ContactForm(
        name="Jane Doe",
        email="jane@acme.com",
        phone="+15551234567",
        position="CTO",
        company_id=company.id,
    ))
    assert contact.name == "Jane Doe"
    assert contact.phone == "+15551234567"
    assert contact.avatar is None
    assert contact.company.id == company.id
    assert contact.company.name == "Acme"

    latest = (await activity_svc.list_activities(db))[0]
    assert latest.type == "contact_added"
    assert latest.description == 'Added new contact "Jane Doe" at Acme'


@pytest.mark.asyncio
async def test_create_contact_for_missing_company(db: AsyncSession):
    with pytest.raises(NotFoundError):
        await contact_svc.create_contact(db, ContactForm(
            name="Lost", email="lost@example.com", company_id=str(uuid.uuid4()),
        ))
    assert await contact_svc.list_contacts(db) == []


@pytest.mark.asyncio
async def test_list_contacts_filtered_by_company(db: AsyncSession, company: Company):
    other = await company_svc.create_company(db, CompanyForm(name="Globex"))
    await contact_svc.create_contact(db, ContactForm(
        name="Bob", email="bob@acme.com", company_id=company.id))
    await contact_svc.create_contact(db, ContactForm(
        name="Alice", email="alice@acme.com", company_id=company.id))
    await contact_svc.create_contact(db, ContactForm(
        name="Hank", email="hank@globex.com", company_id=other.id))

    everyone = await contact_svc.list_contacts(db)
    assert [c.name for c in everyone] == ["Alice", "Bob", "Hank"]

    acme = await contact_svc.list_contacts(db, company_id=company.id)
    assert [c.name for c in acme] == ["Alice", "Bob"]
    assert all(c.company.name == "Acme" for c in acme)


@pytest.mark.asyncio
async def test_update_contact_partial(db: AsyncSession, company: Company):
    contact = await contact_svc.create_contact(db, ContactForm(
        name="Jane Doe", email="jane@acme.com", company_id=company.id))
    updated = await contact_svc.update_contact(
        db, contact.id, ContactUpdate(position="VP Sales"))
    assert updated.position == "VP Sales"
    assert updated.email == "jane@acme.com"
    assert updated.name == "Jane Doe"


@pytest.mark.asyncio
async def test_update_contact_clears_avatar(db: AsyncSession, company: Company):
    contact = await contact_svc.create_contact(db, ContactForm(
        name="Jane Doe", email="jane@acme.com", company_id=company.id,
        avatar="https://img.example.com/jane.png"))
    assert contact.avatar == "https://img.example.com/jane.png"
    updated = await contact_svc.update_contact(db, contact.id, ContactUpdate(avatar=""))
    assert updated.avatar is None


@pytest.mark.asyncio
async def test_contact_survives_company_delete(db: AsyncSession, company: Company):
    contact = await contact_svc.create_contact(db, ContactForm(
        name="Jane Doe", email="jane@acme.com", company_id=company.id))
    await company_svc.delete_company(db, company.id)

    fetched = await contact_svc.get_contact(db, contact.id)
    assert fetched.company == UNKNOWN_COMPANY


@pytest.mark.asyncio
async def test_delete_contact(db: AsyncSession, company: Company):
    contact = await contact_svc.create_contact(db, ContactForm(
        name="Jane Doe", email="jane@acme.com", company_id=company.id))
    before = len(await activity_svc.list_activities(db))

    await contact_svc.delete_contact(db, contact.id)
    with pytest.raises(NotFoundError):
        await contact_svc.get_contact(db, contact.id)
    assert len(await activity_svc.list_activities(db)) == before
