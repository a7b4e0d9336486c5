"""
Contact Model
=============

Plain address-book entry. No relationships, no lifecycle.
"""
from datetime import datetime
from typing import Optional
from dataclasses import dataclass, field

from ledger_api.utils.datetime_utils import now


@dataclass
class Contact:
    id: str
    first_name: str
    last_name: str
    email: str
    favorite_color: Optional[str] = None
    birthday: Optional[str] = None
    created_at: datetime = field(default_factory=lambda: now())
    updated_at: datetime = field(default_factory=lambda: now())

    def update(self, **changes) -> None:
        for name, value in changes.items():
            setattr(self, name, value)
        self.updated_at = now()
