"""Outbound call placement via the third-party call webhook."""

from __future__ import annotations

import logging

import httpx

from ..config import settings
from ..errors import CallWebhookError
from ..schemas.domain import Contact
from ..schemas.forms import CallRequest

log = logging.getLogger(__name__)


def build_call_request(contact: Contact, call_goal: str) -> CallRequest:
    return CallRequest(
        name=contact.name,
        phone=contact.phone or "",
        company=contact.company.name,
        call_goal=call_goal,
    )


async def initiate_call(
    request: CallRequest,
    *,
    client: httpx.AsyncClient | None = None,
    url: str | None = None,
) -> dict:
    """POST the call payload; any non-2xx response is a failure."""
    target = url or settings.call_webhook_url
    payload = request.webhook_payload()
    try:
        if client is None:
            async with httpx.AsyncClient(timeout=settings.call_webhook_timeout_seconds) as owned:
                resp = await owned.post(target, json=payload)
        else:
            resp = await client.post(target, json=payload)
    except httpx.HTTPError as exc:
        log.error("Call webhook unreachable for %s: %s", request.name, exc)
        raise CallWebhookError(f"Could not reach call service: {exc}") from exc

    if not resp.is_success:
        log.error("Call webhook returned %s for %s", resp.status_code, request.name)
        raise CallWebhookError(
            f"Call service responded with status {resp.status_code}",
            status_code=resp.status_code,
        )

    log.info("Call initiated to %s", request.name)
    return {
        "status_code": resp.status_code,
        "message": f"Call to {request.name} with goal: {request.call_goal}",
    }
