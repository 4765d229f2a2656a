"""Deal routes - CRUD, stage moves and the pipeline board."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..board import PipelineBoard
from ..database import get_db
from ..deps import get_current_user_id
from ..errors import MutationError
from ..schemas.domain import BoardColumn, Deal, Stage
from ..schemas.forms import DealForm, DealMove, DealUpdate
from ..services import deal_svc

router = APIRouter(prefix="/api/deals", tags=["deals"])


@router.get("", response_model=list[Deal])
async def deal_list(
    stage: Stage | None = None,
    company_id: str | None = None,
    db: AsyncSession = Depends(get_db),
):
    return await deal_svc.list_deals(db, stage=stage, company_id=company_id)


@router.get("/board", response_model=list[BoardColumn])
async def deal_board(db: AsyncSession = Depends(get_db)):
    board = PipelineBoard(await deal_svc.list_deals(db))
    return [
        BoardColumn(
            stage=col.stage, title=col.title, count=col.count, value=col.value, deals=col.deals
        )
        for col in board.columns()
    ]


@router.post("", response_model=Deal)
async def deal_create(
    data: DealForm,
    db: AsyncSession = Depends(get_db),
    user_id: str | None = Depends(get_current_user_id),
):
    try:
        return await deal_svc.create_deal(db, data, actor_id=user_id)
    except SQLAlchemyError as exc:
        raise MutationError("creating deal", exc) from exc


@router.get("/{deal_id}", response_model=Deal)
async def deal_detail(deal_id: str, db: AsyncSession = Depends(get_db)):
    return await deal_svc.get_deal(db, deal_id)


@router.patch("/{deal_id}", response_model=Deal)
async def deal_update(
    deal_id: str,
    data: DealUpdate,
    db: AsyncSession = Depends(get_db),
    user_id: str | None = Depends(get_current_user_id),
):
    try:
        return await deal_svc.update_deal(db, deal_id, data, actor_id=user_id)
    except SQLAlchemyError as exc:
        raise MutationError("updating deal", exc) from exc


@router.post("/{deal_id}/move", response_model=Deal)
async def deal_move(
    deal_id: str,
    data: DealMove,
    db: AsyncSession = Depends(get_db),
    user_id: str | None = Depends(get_current_user_id),
):
    try:
        return await deal_svc.move_deal(db, deal_id, data.stage, actor_id=user_id)
    except SQLAlchemyError as exc:
        raise MutationError("moving deal", exc) from exc


@router.delete("/{deal_id}")
async def deal_delete(deal_id: str, db: AsyncSession = Depends(get_db)):
    try:
        await deal_svc.delete_deal(db, deal_id)
    except SQLAlchemyError as exc:
        raise MutationError("deleting deal", exc) from exc
    return {"deleted": True}
