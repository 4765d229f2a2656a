"""Pipeline board view-model: one column per stage, drag and drop moves."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .models.deal import DEAL_STAGES
from .schemas.domain import Deal

STAGE_TITLES = {
    "lead": "Lead",
    "contact": "Contact Made",
    "proposal": "Proposal",
    "negotiation": "Negotiation",
    "won": "Won",
    "lost": "Lost",
}


@dataclass(frozen=True)
class Column:
    stage: str
    title: str
    deals: tuple[Deal, ...]

    @property
    def count(self) -> int:
        return len(self.deals)

    @property
    def value(self) -> float:
        return sum(d.value for d in self.deals)


@dataclass(frozen=True)
class PendingMove:
    deal_id: str
    stage: str


class PipelineBoard:
    """Board state over an in-memory deal list.

    Columns and their totals are derived on every call. ``drop`` only
    reports the move to make; the caller issues the update.
    """

    def __init__(self, deals: Iterable[Deal] = ()) -> None:
        self.deals: list[Deal] = list(deals)
        self.dragging: str | None = None

    def set_deals(self, deals: Iterable[Deal]) -> None:
        self.deals = list(deals)

    def deals_for(self, stage: str) -> list[Deal]:
        return [d for d in self.deals if d.stage == stage]

    def columns(self) -> list[Column]:
        return [
            Column(stage=s, title=STAGE_TITLES[s], deals=tuple(self.deals_for(s)))
            for s in DEAL_STAGES
        ]

    def find(self, deal_id: str) -> Deal | None:
        return next((d for d in self.deals if d.id == deal_id), None)

    def start_drag(self, deal_id: str) -> None:
        self.dragging = deal_id

    def drop(self, target_stage: str) -> PendingMove | None:
        if target_stage not in DEAL_STAGES:
            raise ValueError(f"Unknown stage: {target_stage}")
        deal_id, self.dragging = self.dragging, None
        if deal_id is None:
            return None
        deal = self.find(deal_id)
        if deal is None or deal.stage == target_stage:
            return None
        return PendingMove(deal_id=deal_id, stage=target_stage)


async def board_drop(board: PipelineBoard, client, target_stage: str) -> Deal | None:
    """Drop the dragged deal on ``target_stage`` and persist through ``client``.

    Returns the updated deal, or None when nothing moved. The board's
    deal list is refreshed from the (invalidated) client cache.
    """
    move = board.drop(target_stage)
    if move is None:
        return None
    updated = await client.move_deal(move.deal_id, move.stage)
    board.set_deals(await client.deals())
    return updated
