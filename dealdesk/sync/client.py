"""CRMClient - the read/write surface UI consumers use instead of services.

Every read goes through the shared :class:`QueryCache`; every write goes
through :meth:`QueryCache.mutate` and invalidates the entity kinds whose
cached views it can change. Each load runs on its own session so
independent queries can resolve concurrently.
"""

from __future__ import annotations

import uuid
from collections.abc import Awaitable, Callable
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..events import EventBus
from ..schemas.domain import Activity, Company, Contact, DashboardStats, Deal, User
from ..schemas.forms import (
    CompanyForm,
    CompanyUpdate,
    ContactForm,
    ContactUpdate,
    DealForm,
    DealUpdate,
)
from ..services import (
    activity_svc,
    company_svc,
    contact_svc,
    dashboard_svc,
    deal_svc,
    profile_svc,
)
from .cache import Loader, QueryCache, QueryKey, Subscription

COMPANIES = "companies"
CONTACTS = "contacts"
DEALS = "deals"
ACTIVITIES = "activities"
PROFILES = "profiles"
DASHBOARD = "dashboard"

_Fetcher = Callable[..., Awaitable[Any]]


async def _companies(db: AsyncSession, id: str | None = None):
    if id is not None:
        return await company_svc.get_company(db, id)
    return await company_svc.list_companies(db)


async def _contacts(db: AsyncSession, id: str | None = None, company_id: str | None = None):
    if id is not None:
        return await contact_svc.get_contact(db, id)
    return await contact_svc.list_contacts(db, company_id=company_id)


async def _deals(db: AsyncSession, id: str | None = None, stage: str | None = None,
                 company_id: str | None = None):
    if id is not None:
        return await deal_svc.get_deal(db, id)
    return await deal_svc.list_deals(db, stage=stage, company_id=company_id)


async def _activities(db: AsyncSession, limit: int = 20):
    return await activity_svc.list_activities(db, limit=limit)


async def _profiles(db: AsyncSession):
    return await profile_svc.list_profiles(db)


async def _dashboard(db: AsyncSession):
    return await dashboard_svc.get_dashboard_stats(db)


FETCHERS: dict[str, _Fetcher] = {
    COMPANIES: _companies,
    CONTACTS: _contacts,
    DEALS: _deals,
    ACTIVITIES: _activities,
    PROFILES: _profiles,
    DASHBOARD: _dashboard,
}


class CRMClient:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        cache: QueryCache | None = None,
        *,
        actor_id: uuid.UUID | str | None = None,
        bus: EventBus | None = None,
    ) -> None:
        self.session_factory = session_factory
        self.cache = cache if cache is not None else QueryCache()
        self.actor_id = actor_id
        self.bus = bus

    # ── plumbing ───────────────────────────────────────────────────────────

    def loader(self, key: QueryKey) -> Loader:
        fetcher = FETCHERS[key.kind]
        params = key.params

        async def load():
            async with self.session_factory() as db:
                return await fetcher(db, **params)

        return load

    async def _session_call(self, fn: _Fetcher, *args: Any, **kwargs: Any) -> Any:
        async with self.session_factory() as db:
            return await fn(db, *args, **kwargs)

    async def query(self, key: QueryKey, *, force: bool = False) -> Any:
        return await self.cache.fetch(key, self.loader(key), force=force)

    async def subscribe(self, key: QueryKey, *, enabled: bool = True) -> Subscription:
        return await self.cache.subscribe(key, self.loader(key), enabled=enabled)

    # ── reads ──────────────────────────────────────────────────────────────

    async def companies(self) -> list[Company]:
        return await self.query(QueryKey.of(COMPANIES))

    async def company(self, company_id: str) -> Company:
        return await self.query(QueryKey.of(COMPANIES, id=str(company_id)))

    async def contacts(self, company_id: str | None = None) -> list[Contact]:
        return await self.query(QueryKey.of(CONTACTS, company_id=company_id))

    async def contact(self, contact_id: str) -> Contact:
        return await self.query(QueryKey.of(CONTACTS, id=str(contact_id)))

    async def deals(self, stage: str | None = None) -> list[Deal]:
        return await self.query(QueryKey.of(DEALS, stage=stage))

    async def deal(self, deal_id: str) -> Deal:
        return await self.query(QueryKey.of(DEALS, id=str(deal_id)))

    async def activities(self, limit: int = 20) -> list[Activity]:
        return await self.query(QueryKey.of(ACTIVITIES, limit=limit))

    async def profiles(self) -> list[User]:
        return await self.query(QueryKey.of(PROFILES))

    async def dashboard_stats(self) -> DashboardStats:
        return await self.query(QueryKey.of(DASHBOARD))

    # ── companies ──────────────────────────────────────────────────────────

    async def create_company(self, data: CompanyForm) -> Company:
        return await self.cache.mutate(
            "creating company",
            lambda: self._session_call(
                company_svc.create_company, data, actor_id=self.actor_id, bus=self.bus
            ),
            invalidates=(COMPANIES, ACTIVITIES),
        )

    async def update_company(self, company_id: str, data: CompanyUpdate) -> Company:
        return await self.cache.mutate(
            "updating company",
            lambda: self._session_call(company_svc.update_company, company_id, data),
            invalidates=(COMPANIES, CONTACTS, DEALS),
        )

    async def delete_company(self, company_id: str) -> None:
        await self.cache.mutate(
            "deleting company",
            lambda: self._session_call(company_svc.delete_company, company_id),
            invalidates=(COMPANIES, CONTACTS, DEALS),
        )

    # ── contacts ───────────────────────────────────────────────────────────

    async def create_contact(self, data: ContactForm) -> Contact:
        return await self.cache.mutate(
            "creating contact",
            lambda: self._session_call(
                contact_svc.create_contact, data, actor_id=self.actor_id, bus=self.bus
            ),
            invalidates=(CONTACTS, COMPANIES, ACTIVITIES),
        )

    async def update_contact(self, contact_id: str, data: ContactUpdate) -> Contact:
        return await self.cache.mutate(
            "updating contact",
            lambda: self._session_call(contact_svc.update_contact, contact_id, data),
            invalidates=(CONTACTS, COMPANIES),
        )

    async def delete_contact(self, contact_id: str) -> None:
        await self.cache.mutate(
            "deleting contact",
            lambda: self._session_call(contact_svc.delete_contact, contact_id),
            invalidates=(CONTACTS, COMPANIES),
        )

    # ── deals ──────────────────────────────────────────────────────────────

    async def create_deal(self, data: DealForm) -> Deal:
        return await self.cache.mutate(
            "creating deal",
            lambda: self._session_call(
                deal_svc.create_deal, data, actor_id=self.actor_id, bus=self.bus
            ),
            invalidates=(DEALS, DASHBOARD, ACTIVITIES),
        )

    async def update_deal(self, deal_id: str, data: DealUpdate) -> Deal:
        return await self.cache.mutate(
            "updating deal",
            lambda: self._session_call(
                deal_svc.update_deal, deal_id, data, actor_id=self.actor_id, bus=self.bus
            ),
            invalidates=(DEALS, DASHBOARD, ACTIVITIES),
        )

    async def move_deal(self, deal_id: str, stage: str) -> Deal:
        return await self.cache.mutate(
            "moving deal",
            lambda: self._session_call(
                deal_svc.move_deal, deal_id, stage, actor_id=self.actor_id, bus=self.bus
            ),
            invalidates=(DEALS, DASHBOARD, ACTIVITIES),
        )

    async def delete_deal(self, deal_id: str) -> None:
        await self.cache.mutate(
            "deleting deal",
            lambda: self._session_call(deal_svc.delete_deal, deal_id),
            invalidates=(DEALS, DASHBOARD),
        )
