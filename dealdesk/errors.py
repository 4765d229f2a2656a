"""Exception types shared by services, the sync layer and routers."""

from __future__ import annotations


class DealDeskError(Exception):
    """Base error for DealDesk."""


class NotFoundError(DealDeskError):
    """Raised when a lookup by id matches zero rows."""

    def __init__(self, entity: str, entity_id: object) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity.capitalize()} {entity_id} not found")


class NotAuthenticatedError(DealDeskError):
    """Raised when an operation needs a signed-in user and there is none."""


class CallWebhookError(DealDeskError):
    """Raised when the call-placement webhook rejects or cannot be reached."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class MutationError(DealDeskError):
    """A create/update/delete failed; the message names the operation."""

    def __init__(self, label: str, cause: BaseException) -> None:
        self.label = label
        self.cause = cause
        detail = str(cause) or cause.__class__.__name__
        super().__init__(f"Error {label}: {detail}")
