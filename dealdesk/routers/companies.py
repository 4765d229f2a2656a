"""Company routes - list, detail, create, edit, delete."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..deps import get_current_user_id
from ..errors import MutationError
from ..schemas.domain import Company, Contact, Deal
from ..schemas.forms import CompanyForm, CompanyUpdate
from ..services import company_svc, contact_svc, deal_svc

router = APIRouter(prefix="/api/companies", tags=["companies"])


@router.get("", response_model=list[Company])
async def company_list(db: AsyncSession = Depends(get_db)):
    return await company_svc.list_companies(db)


@router.post("", response_model=Company)
async def company_create(
    data: CompanyForm,
    db: AsyncSession = Depends(get_db),
    user_id: str | None = Depends(get_current_user_id),
):
    try:
        return await company_svc.create_company(db, data, actor_id=user_id)
    except SQLAlchemyError as exc:
        raise MutationError("creating company", exc) from exc


@router.get("/{company_id}", response_model=Company)
async def company_detail(company_id: str, db: AsyncSession = Depends(get_db)):
    return await company_svc.get_company(db, company_id)


@router.get("/{company_id}/contacts", response_model=list[Contact])
async def company_contacts(company_id: str, db: AsyncSession = Depends(get_db)):
    await company_svc.get_company(db, company_id)
    return await contact_svc.list_contacts(db, company_id=company_id)


@router.get("/{company_id}/deals", response_model=list[Deal])
async def company_deals(company_id: str, db: AsyncSession = Depends(get_db)):
    await company_svc.get_company(db, company_id)
    return await deal_svc.list_deals(db, company_id=company_id)


@router.patch("/{company_id}", response_model=Company)
async def company_update(
    company_id: str, data: CompanyUpdate, db: AsyncSession = Depends(get_db)
):
    try:
        return await company_svc.update_company(db, company_id, data)
    except SQLAlchemyError as exc:
        raise MutationError("updating company", exc) from exc


@router.delete("/{company_id}")
async def company_delete(company_id: str, db: AsyncSession = Depends(get_db)):
    try:
        await company_svc.delete_company(db, company_id)
    except SQLAlchemyError as exc:
        raise MutationError("deleting company", exc) from exc
    return {"deleted": True}
