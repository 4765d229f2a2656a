"""Test form schemas and the dialog submit flow."""

from __future__ import annotations

import asyncio

import pytest
from pydantic import ValidationError

from dealdesk.forms import ConfirmDialog, FormDialog, field_errors, validate_form
from dealdesk.schemas.forms import (
    CallRequest,
    CompanyForm,
    ContactForm,
    ContactUpdate,
    DealForm,
    DealUpdate,
    ProfileUpdate,
)

VALID_CONTACT = {
    "name": "Jane Doe",
    "email": "jane@acme.com",
    "company_id": "c-1",
}


def test_contact_form_valid():
    result = validate_form(ContactForm, VALID_CONTACT)
    assert result.ok
    assert result.values.name == "Jane Doe"
    assert result.values.avatar == ""


def test_contact_form_messages():
    result = validate_form(ContactForm, {
        "name": "J",
        "email": "not-an-email",
        "company_id": "",
        "avatar": "nope",
    })
    assert not result.ok
    assert result.errors == {
        "name": "Name must be at least 2 characters",
        "email": "Please enter a valid email address",
        "company_id": "Company is required",
        "avatar": "Please enter a valid URL",
    }


def test_contact_form_strips_whitespace():
    result = validate_form(ContactForm, {**VALID_CONTACT, "name": "  Jane  "})
    assert result.values.name == "Jane"


def test_company_form_requires_name():
    result = validate_form(CompanyForm, {"name": "   "})
    assert result.errors == {"name": "Company name is required"}


def test_deal_form_messages():
    result = validate_form(DealForm, {
        "title": "X",
        "value": -5,
        "stage": "lead",
        "company_id": "c-1",
    })
    assert result.errors == {
        "title": "Deal title must be at least 2 characters",
        "value": "Value must be a positive number",
    }


def test_deal_form_coerces_value_and_rejects_unknown_stage():
    ok = validate_form(DealForm, {
        "title": "Pilot", "value": "1500", "stage": "proposal", "company_id": "c-1",
    })
    assert ok.values.value == 1500.0

    bad = validate_form(DealForm, {
        "title": "Pilot", "value": 1, "stage": "archived", "company_id": "c-1",
    })
    assert "stage" in bad.errors


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
def test_deal_value_must_be_finite(value):
    result = validate_form(DealForm, {
        "title": "Pilot", "value": value, "stage": "lead", "company_id": "c-1",
    })
    assert result.errors == {"value": "Value must be a positive number"}

    with pytest.raises(ValidationError) as info:
        DealUpdate(value=value)
    assert field_errors(info.value) == {"value": "Value must be a positive number"}


def test_partial_updates_only_validate_what_is_sent():
    update = DealUpdate(stage="won")
    assert update.model_dump(exclude_unset=True) == {"stage": "won"}

    assert ContactUpdate(position="CTO").model_dump(exclude_unset=True) == {"position": "CTO"}

    with pytest.raises(ValidationError):
        ContactUpdate(email="broken")
    with pytest.raises(ValidationError):
        DealUpdate(stage=None)
    with pytest.raises(ValidationError):
        ProfileUpdate(name="A")


def test_call_request_alias_and_payload():
    request = CallRequest.model_validate({
        "name": "Jane Doe", "phone": "+15551234567",
        "company": "Acme", "callGoal": "Book a demo",
    })
    assert request.call_goal == "Book a demo"
    assert request.webhook_payload() == {
        "name": "Jane Doe",
        "phone": "+15551234567",
        "company": "Acme",
        "callGoal": "Book a demo",
    }


def test_call_request_requires_phone():
    with pytest.raises(ValidationError) as info:
        CallRequest(name="Jane", phone="", company="Acme", call_goal="Hi")
    assert field_errors(info.value) == {"phone": "No phone number available"}


@pytest.mark.asyncio
async def test_invalid_form_blocks_submit():
    calls = []

    async def on_submit(values):
        calls.append(values)

    dialog = FormDialog(ContactForm, on_submit)
    dialog.open()
    result = await dialog.submit({**VALID_CONTACT, "email": "not-an-email"})

    assert result is None
    assert calls == []
    assert dialog.is_open
    assert dialog.errors["email"] == "Please enter a valid email address"


@pytest.mark.asyncio
async def test_successful_submit_closes_and_resets():
    async def on_submit(values):
        return values.name

    dialog = FormDialog(ContactForm, on_submit, initial={"avatar": ""})
    dialog.open()
    result = await dialog.submit(VALID_CONTACT)

    assert result == "Jane Doe"
    assert not dialog.is_open
    assert dialog.values == {"avatar": ""}
    assert dialog.errors == {}


@pytest.mark.asyncio
async def test_failed_submit_keeps_input():
    async def on_submit(values):
        raise RuntimeError("Error creating contact: database is locked")

    dialog = FormDialog(ContactForm, on_submit)
    dialog.open()
    result = await dialog.submit(VALID_CONTACT)

    assert result is None
    assert dialog.is_open
    assert dialog.values["email"] == "jane@acme.com"
    assert dialog.submit_error == "Error creating contact: database is locked"
    assert not dialog.is_submitting


@pytest.mark.asyncio
async def test_submit_is_serialized():
    release = asyncio.Event()
    calls = []

    async def on_submit(values):
        calls.append(values)
        await release.wait()
        return "done"

    dialog = FormDialog(ContactForm, on_submit)
    dialog.open()
    first = asyncio.create_task(dialog.submit(VALID_CONTACT))
    await asyncio.sleep(0)
    assert dialog.is_submitting
    assert not dialog.can_submit

    assert await dialog.submit(VALID_CONTACT) is None
    release.set()
    assert await first == "done"
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_closed_dialog_does_not_submit():
    calls = []

    async def on_submit(values):
        calls.append(values)

    dialog = FormDialog(ContactForm, on_submit)
    assert await dialog.submit(VALID_CONTACT) is None
    assert calls == []


@pytest.mark.asyncio
async def test_confirm_dialog():
    deleted = []

    async def delete(target_id):
        deleted.append(target_id)

    dialog = ConfirmDialog(delete)
    assert await dialog.confirm() is False

    dialog.open("deal-1")
    dialog.cancel()
    assert await dialog.confirm() is False
    assert deleted == []

    dialog.open("deal-1")
    assert await dialog.confirm() is True
    assert deleted == ["deal-1"]
    assert not dialog.is_open


@pytest.mark.asyncio
async def test_confirm_dialog_failure_stays_open():
    async def delete(target_id):
        raise RuntimeError("Error deleting deal: locked")

    dialog = ConfirmDialog(delete)
    dialog.open("deal-1")
    assert await dialog.confirm() is False
    assert dialog.is_open
    assert dialog.error == "Error deleting deal: locked"
