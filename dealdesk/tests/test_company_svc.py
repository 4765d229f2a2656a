"""Test company service CRUD and its audit entries."""

from __future__ import annotations

import uuid

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from dealdesk.errors import NotFoundError
from dealdesk.models import Profile
from dealdesk.schemas.domain import Company
from dealdesk.schemas.forms import CompanyForm, CompanyUpdate, ContactForm
from dealdesk.services import activity_svc, company_svc, contact_svc


@pytest.mark.asyncio
async def test_create_company_records_activity(db: AsyncSession, profile: Profile):
    company = await company_svc.create_company(
        db, CompanyForm(name="Acme", industry="Technology"), actor_id=profile.id
    )
    assert isinstance(company, Company)
    assert company.name == "Acme"
    assert company.industry == "Technology"
    assert company.contacts == ()

    companies = await company_svc.list_companies(db)
    assert [c.name for c in companies] == ["Acme"]

    activities = await activity_svc.list_activities(db)
    assert len(activities) == 1
    assert activities[0].type == "company_added"
    assert activities[0].description == 'Added new company "Acme"'
    assert activities[0].entity_type == "company"
    assert activities[0].entity_id == company.id
    assert activities[0].user.id == str(profile.id)


@pytest.mark.asyncio
async def test_create_company_without_industry(db: AsyncSession):
    company = await company_svc.create_company(db, CompanyForm(name="Blank Co"))
    assert company.industry == "Unknown"


@pytest.mark.asyncio
async def test_list_companies_sorted_with_contacts(db: AsyncSession, company: Company):
    await company_svc.create_company(db, CompanyForm(name="Zenith"))
    await company_svc.create_company(db, CompanyForm(name="Beta"))
    await contact_svc.create_contact(db, ContactForm(
        name="Jane Doe", email="jane@acme.com", company_id=company.id,
    ))

    companies = await company_svc.list_companies(db)
    assert [c.name for c in companies] == ["Acme", "Beta", "Zenith"]
    assert [c.name for c in companies[0].contacts] == ["Jane Doe"]
    assert companies[1].contacts == ()


@pytest.mark.asyncio
async def test_get_company(db: AsyncSession, company: Company):
    fetched = await company_svc.get_company(db, company.id)
    assert fetched.id == company.id
    assert fetched.name == "Acme"


@pytest.mark.asyncio
async def test_get_missing_company(db: AsyncSession):
    with pytest.raises(NotFoundError):
        await company_svc.get_company(db, uuid.uuid4())
    with pytest.raises(NotFoundError):
        await company_svc.get_company(db, "not-a-uuid")


@pytest.mark.asyncio
async def test_update_company(db: AsyncSession, company: Company):
    updated = await company_svc.update_company(
        db, company.id, CompanyUpdate(website="https://acme.example")
    )
    assert updated.website == "https://acme.example"
    assert updated.name == "Acme"
    assert updated.industry == "Technology"


@pytest.mark.asyncio
async def test_update_company_is_not_audited(db: AsyncSession, company: Company):
    await company_svc.update_company(db, company.id, CompanyUpdate(name="Acme Corp"))
    activities = await activity_svc.list_activities(db)
    assert [a.type for a in activities] == ["company_added"]


@pytest.mark.asyncio
async def test_delete_company(db: AsyncSession, company: Company):
    await company_svc.delete_company(db, company.id)
    assert await company_svc.list_companies(db) == []
    assert await company_svc.count_companies(db) == 0
    with pytest.raises(NotFoundError):
        await company_svc.delete_company(db, company.id)


@pytest.mark.asyncio
async def test_listing_twice_returns_equal_results(db: AsyncSession):
    for name in ("Globex", "Acme", "Acme"):
        company = await company_svc.create_company(db, CompanyForm(name=name))
        for person in ("Sam Lee", "Jane Doe", "Jane Doe"):
            await contact_svc.create_contact(db, ContactForm(
                name=person, email=f"{person.split()[0].lower()}@example.com",
                company_id=company.id,
            ))

    companies = await company_svc.list_companies(db)
    assert [c.name for c in companies] == ["Acme", "Acme", "Globex"]
    assert all(len(c.contacts) == 3 for c in companies)
    assert companies == await company_svc.list_companies(db)
    assert await contact_svc.list_contacts(db) == await contact_svc.list_contacts(db)
