"""Identifier helpers. Entities use stringified BSON ObjectIds."""
from typing import Any

from bson import ObjectId

from ledger_api.domain.errors import InvalidReference


def new_id() -> str:
    """Generate a fresh entity identifier."""
    return str(ObjectId())


def require_valid_id(raw_id: Any, entity: str) -> str:
    """
    Validate an incoming identifier.

    Raises:
        InvalidReference: If raw_id is not a 24-char hex ObjectId
    """
    if not isinstance(raw_id, str) or not ObjectId.is_valid(raw_id):
        raise InvalidReference(entity, raw_id)
    return raw_id
