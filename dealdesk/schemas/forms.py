"""Declarative validation schemas for the create/edit forms.

The ``*Form`` models gate create submissions; the ``*Update`` models are
the partial variants used for edits. Messages are the ones shown next to
the offending field.
"""

from __future__ import annotations

import math

from pydantic import AnyUrl, BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from pydantic.networks import validate_email
from pydantic_core import PydanticCustomError

from .domain import Stage

_url_adapter = TypeAdapter(AnyUrl)


def _min_length(value: str | None, size: int, message: str) -> str:
    if value is None or len(value.strip()) < size:
        raise PydanticCustomError("too_short", message)
    return value.strip()


def _required(value: str | None, message: str) -> str:
    if value is None or not value.strip():
        raise PydanticCustomError("required", message)
    return value.strip()


def _email(value: str | None) -> str:
    if value is None:
        raise PydanticCustomError("email", "Please enter a valid email address")
    try:
        validate_email(value)
    except PydanticCustomError:
        raise PydanticCustomError("email", "Please enter a valid email address") from None
    return value.strip()


def _url_or_empty(value: str | None) -> str | None:
    if value is None or value == "":
        return value
    try:
        _url_adapter.validate_python(value)
    except ValueError:
        raise PydanticCustomError("url", "Please enter a valid URL") from None
    return value


def _non_negative(value: float | None) -> float:
    if value is None or not math.isfinite(value) or value < 0:
        raise PydanticCustomError("negative", "Value must be a positive number")
    return value


class FormModel(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")


# ── Company ────────────────────────────────────────────────────────────────

class CompanyForm(FormModel):
    name: str
    industry: str | None = None
    website: str | None = None
    logo: str | None = None
    size: str | None = None

    @field_validator("name")
    @classmethod
    def _check_name(cls, v):
        return _required(v, "Company name is required")


class CompanyUpdate(CompanyForm):
    name: str | None = None


# ── Contact ────────────────────────────────────────────────────────────────

class ContactForm(FormModel):
    name: str
    email: str
    company_id: str
    phone: str | None = None
    position: str | None = None
    avatar: str | None = ""

    @field_validator("name")
    @classmethod
    def _check_name(cls, v):
        return _min_length(v, 2, "Name must be at least 2 characters")

    @field_validator("email")
    @classmethod
    def _check_email(cls, v):
        return _email(v)

    @field_validator("company_id")
    @classmethod
    def _check_company(cls, v):
        return _required(v, "Company is required")

    @field_validator("avatar")
    @classmethod
    def _check_avatar(cls, v):
        return _url_or_empty(v)


class ContactUpdate(ContactForm):
    name: str | None = None
    email: str | None = None
    company_id: str | None = None
    avatar: str | None = None


# ── Deal ───────────────────────────────────────────────────────────────────

class DealForm(FormModel):
    title: str
    value: float
    stage: Stage
    company_id: str
    description: str | None = None
    assigned_to: str | None = None

    @field_validator("title")
    @classmethod
    def _check_title(cls, v):
        return _min_length(v, 2, "Deal title must be at least 2 characters")

    @field_validator("value")
    @classmethod
    def _check_value(cls, v):
        return _non_negative(v)

    @field_validator("stage")
    @classmethod
    def _check_stage(cls, v):
        if v is None:
            raise PydanticCustomError("required", "Stage is required")
        return v

    @field_validator("company_id")
    @classmethod
    def _check_company(cls, v):
        return _required(v, "Company is required")


class DealUpdate(DealForm):
    title: str | None = None
    value: float | None = None
    stage: Stage | None = None
    company_id: str | None = None


class DealMove(BaseModel):
    stage: Stage


# ── Profile ────────────────────────────────────────────────────────────────

class ProfileCreate(FormModel):
    name: str
    email: str
    avatar: str | None = ""

    @field_validator("name")
    @classmethod
    def _check_name(cls, v):
        return _min_length(v, 2, "Name must be at least 2 characters")

    @field_validator("email")
    @classmethod
    def _check_email(cls, v):
        return _email(v)

    @field_validator("avatar")
    @classmethod
    def _check_avatar(cls, v):
        return _url_or_empty(v)


class ProfileUpdate(FormModel):
    name: str | None = None
    avatar: str | None = None

    @field_validator("name")
    @classmethod
    def _check_name(cls, v):
        return _min_length(v, 2, "Name must be at least 2 characters")

    @field_validator("avatar")
    @classmethod
    def _check_avatar(cls, v):
        return _url_or_empty(v)


# ── Call ───────────────────────────────────────────────────────────────────

class CallRequest(FormModel):
    """Payload posted to the call-placement webhook."""

    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    name: str
    phone: str
    company: str
    call_goal: str = Field(alias="callGoal")

    @field_validator("phone")
    @classmethod
    def _check_phone(cls, v):
        return _required(v, "No phone number available")

    @field_validator("call_goal")
    @classmethod
    def _check_goal(cls, v):
        return _required(v, "Call goal is required")

    def webhook_payload(self) -> dict[str, str]:
        return {
            "name": self.name,
            "phone": self.phone,
            "company": self.company,
            "callGoal": self.call_goal,
        }
