"""
Domain Errors
=============

Typed failures raised by the domain and application layers.
The API layer maps each error code to an HTTP status (see api/v1/error_handlers.py).
"""
from typing import Any, Dict, Optional


class LedgerError(Exception):
    """Base class for every failure the core reports to its callers."""

    code = "ledger_error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class NotFound(LedgerError):
    """Referenced actor, catalog or relationship entity is absent."""

    code = "not_found"

    def __init__(self, entity: str, entity_id: str):
        super().__init__(f"{entity} '{entity_id}' not found", {"entity": entity, "id": entity_id})
        self.entity = entity
        self.entity_id = entity_id


class InvalidReference(LedgerError):
    """Identifier is malformed."""

    code = "invalid_reference"

    def __init__(self, entity: str, raw_id: Any):
        super().__init__(f"Invalid {entity} ID format: '{raw_id}'", {"entity": entity, "id": str(raw_id)})


class ValidationFailed(LedgerError):
    """Input breaks a domain rule that request validation cannot express."""

    code = "validation_failed"


class CapacityExhausted(LedgerError):
    """No available copies, or the team is full."""

    code = "capacity_exhausted"


class DuplicateConstraintViolation(LedgerError):
    """A one-per-pair or unique-field constraint would be broken."""

    code = "duplicate"


class DuplicateActiveBorrow(DuplicateConstraintViolation):
    code = "duplicate_active_borrow"


class AlreadyMember(DuplicateConstraintViolation):
    code = "already_member"


class AlreadyApplied(DuplicateConstraintViolation):
    code = "already_applied"


class AlreadyReviewed(DuplicateConstraintViolation):
    code = "already_reviewed"


class NoActiveBorrow(LedgerError):
    code = "no_active_borrow"


class NotAnActiveMember(LedgerError):
    code = "not_an_active_member"


class InvalidStatusTransition(LedgerError):
    code = "invalid_status_transition"


class EntityInUse(LedgerError):
    """Entity is still referenced by an open ledger entry and cannot be removed."""

    code = "entity_in_use"


class AuthorizationDenied(LedgerError):
    """Requester is not allowed to perform an owner/author-only operation."""

    code = "authorization_denied"
