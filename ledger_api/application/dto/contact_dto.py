"""
Contact DTO
===========
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ContactCreateRequest(BaseModel):
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: str = Field(..., pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    favorite_color: Optional[str] = None
    birthday: Optional[str] = Field(None, description="Free-form date string, e.g. 1990-04-12")

    class Config:
        json_schema_extra = {
            "example": {
                "first_name": "Katherine",
                "last_name": "Johnson",
                "email": "katherine@example.com",
                "favorite_color": "blue",
                "birthday": "1918-08-26",
            }
        }


class ContactUpdateRequest(BaseModel):
    first_name: Optional[str] = Field(None, min_length=1)
    last_name: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = Field(None, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    favorite_color: Optional[str] = None
    birthday: Optional[str] = None


class ContactResponse(BaseModel):
    id: str
    first_name: str
    last_name: str
    email: str
    favorite_color: Optional[str] = None
    birthday: Optional[str] = None
    created_at: datetime
    updated_at: datetime
