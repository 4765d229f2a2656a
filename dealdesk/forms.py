"""Form dialogs: schema validation, serialized submission, open/close state."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

log = logging.getLogger(__name__)

FormT = TypeVar("FormT", bound=BaseModel)


@dataclass
class FormResult(Generic[FormT]):
    values: FormT | None
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.values is not None and not self.errors


def field_errors(exc: ValidationError) -> dict[str, str]:
    """First message per field, keyed by dotted field path."""
    errors: dict[str, str] = {}
    for err in exc.errors():
        name = ".".join(str(part) for part in err["loc"]) or "__root__"
        errors.setdefault(name, err["msg"])
    return errors


def validate_form(schema: type[FormT], data: Mapping[str, Any]) -> FormResult[FormT]:
    try:
        return FormResult(values=schema.model_validate(dict(data)))
    except ValidationError as exc:
        return FormResult(values=None, errors=field_errors(exc))


class FormDialog(Generic[FormT]):
    """A create/edit dialog bound to one form schema.

    ``submit`` validates first and never calls ``on_submit`` with an
    invalid shape. While a submission is in flight further submits are
    refused. Success closes and resets the dialog; failure keeps it open
    with the user's input and ``submit_error`` set.
    """

    def __init__(
        self,
        schema: type[FormT],
        on_submit: Callable[[FormT], Awaitable[Any]],
        *,
        initial: Mapping[str, Any] | None = None,
    ) -> None:
        self.schema = schema
        self.on_submit = on_submit
        self.initial = dict(initial or {})
        self.values: dict[str, Any] = dict(self.initial)
        self.errors: dict[str, str] = {}
        self.submit_error: str | None = None
        self.is_open = False
        self.is_submitting = False

    @property
    def can_submit(self) -> bool:
        return self.is_open and not self.is_submitting

    def open(self, initial: Mapping[str, Any] | None = None) -> None:
        if initial is not None:
            self.initial = dict(initial)
        self.reset()
        self.is_open = True

    def close(self) -> None:
        self.is_open = False

    def reset(self) -> None:
        self.values = dict(self.initial)
        self.errors = {}
        self.submit_error = None

    async def submit(self, data: Mapping[str, Any] | None = None) -> Any:
        """Returns the submit handler's result, or None if blocked or failed."""
        if not self.can_submit:
            return None
        if data is not None:
            self.values = {**self.values, **data}

        result = validate_form(self.schema, self.values)
        self.errors = result.errors
        if not result.ok:
            return None

        self.is_submitting = True
        self.submit_error = None
        try:
            outcome = await self.on_submit(result.values)
        except Exception as exc:
            self.submit_error = str(exc)
            log.info("Form submission failed: %s", exc)
            return None
        finally:
            self.is_submitting = False

        self.close()
        self.reset()
        return outcome


class ConfirmDialog:
    """Delete confirmation; ``confirm`` runs the action once per opening."""

    def __init__(self, action: Callable[[str], Awaitable[Any]]) -> None:
        self.action = action
        self.target_id: str | None = None
        self.error: str | None = None
        self.is_pending = False

    @property
    def is_open(self) -> bool:
        return self.target_id is not None

    def open(self, target_id: str) -> None:
        self.target_id = target_id
        self.error = None

    def cancel(self) -> None:
        self.target_id = None

    async def confirm(self) -> bool:
        if self.target_id is None or self.is_pending:
            return False
        self.is_pending = True
        try:
            await self.action(self.target_id)
        except Exception as exc:
            self.error = str(exc)
            return False
        finally:
            self.is_pending = False
        self.target_id = None
        return True
