"""Contact routes - CRUD plus the call-customer action."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field, ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..deps import get_current_user_id
from ..errors import MutationError
from ..forms import field_errors
from ..schemas.domain import Contact
from ..schemas.forms import ContactForm, ContactUpdate
from ..services import call_svc, contact_svc

router = APIRouter(prefix="/api/contacts", tags=["contacts"])


class CallGoal(BaseModel):
    call_goal: str = Field(alias="callGoal")

    model_config = {"populate_by_name": True}


@router.get("", response_model=list[Contact])
async def contact_list(company_id: str | None = None, db: AsyncSession = Depends(get_db)):
    return await contact_svc.list_contacts(db, company_id=company_id)


@router.post("", response_model=Contact)
async def contact_create(
    data: ContactForm,
    db: AsyncSession = Depends(get_db),
    user_id: str | None = Depends(get_current_user_id),
):
    try:
        return await contact_svc.create_contact(db, data, actor_id=user_id)
    except SQLAlchemyError as exc:
        raise MutationError("creating contact", exc) from exc


@router.get("/{contact_id}", response_model=Contact)
async def contact_detail(contact_id: str, db: AsyncSession = Depends(get_db)):
    return await contact_svc.get_contact(db, contact_id)


@router.patch("/{contact_id}", response_model=Contact)
async def contact_update(
    contact_id: str, data: ContactUpdate, db: AsyncSession = Depends(get_db)
):
    try:
        return await contact_svc.update_contact(db, contact_id, data)
    except SQLAlchemyError as exc:
        raise MutationError("updating contact", exc) from exc


@router.delete("/{contact_id}")
async def contact_delete(contact_id: str, db: AsyncSession = Depends(get_db)):
    try:
        await contact_svc.delete_contact(db, contact_id)
    except SQLAlchemyError as exc:
        raise MutationError("deleting contact", exc) from exc
    return {"deleted": True}


@router.post("/{contact_id}/call")
async def contact_call(
    contact_id: str, data: CallGoal, db: AsyncSession = Depends(get_db)
):
    contact = await contact_svc.get_contact(db, contact_id)
    try:
        request = call_svc.build_call_request(contact, data.call_goal)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=field_errors(exc)) from exc
    return await call_svc.initiate_call(request)
