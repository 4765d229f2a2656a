"""Call placement route."""

from __future__ import annotations

from fastapi import APIRouter

from ..schemas.forms import CallRequest
from ..services import call_svc

router = APIRouter(prefix="/api/calls", tags=["calls"])


@router.post("")
async def place_call(data: CallRequest):
    return await call_svc.initiate_call(data)
