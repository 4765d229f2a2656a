"""Dashboard aggregates, recomputed from the current deal set on every call."""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from ..schemas.domain import DashboardStats, StatCard
from . import company_svc, deal_svc


def compute_stats(deals: Iterable[tuple[float, str]]) -> DashboardStats:
    """Aggregate ``(value, stage)`` pairs.

    ``conversion_rate`` is ``round(won / total * 100)`` and 0 for an empty
    pipeline. Rounding is half-up so 2.5% reports as 3, not 2.
    """
    total_deals = 0
    total_value = 0.0
    won_deals = 0
    won_value = 0.0
    new_leads = 0
    for value, stage in deals:
        total_deals += 1
        total_value += value
        if stage == "won":
            won_deals += 1
            won_value += value
        elif stage == "lead":
            new_leads += 1

    conversion_rate = int(won_deals * 100 / total_deals + 0.5) if total_deals else 0
    return DashboardStats(
        total_deals=total_deals,
        total_value=total_value,
        won_deals=won_deals,
        won_value=won_value,
        new_leads=new_leads,
        conversion_rate=conversion_rate,
    )


async def get_dashboard_stats(db: AsyncSession) -> DashboardStats:
    return compute_stats(await deal_svc.list_deal_values(db))


def format_usd(amount: float) -> str:
    """Whole-dollar currency string, e.g. ``$12,500``."""
    rounded = int(abs(amount) + 0.5)
    sign = "-" if amount < 0 and rounded else ""
    return f"{sign}${rounded:,}"


async def get_stat_cards(db: AsyncSession) -> list[StatCard]:
    stats = await get_dashboard_stats(db)
    companies = await company_svc.count_companies(db)
    return [
        StatCard(
            title="Total Revenue",
            value=format_usd(stats.total_value),
            description=f"{stats.total_deals} total deals",
        ),
        StatCard(
            title="Closed Deals",
            value=str(stats.won_deals),
            description=f"{stats.conversion_rate}% conversion rate",
        ),
        StatCard(
            title="New Leads",
            value=str(stats.new_leads),
            description="In the lead stage",
        ),
        StatCard(
            title="Active Companies",
            value=str(companies),
            description="Companies on record",
        ),
    ]
