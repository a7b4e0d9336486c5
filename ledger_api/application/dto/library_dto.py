"""
Library DTO
===========

Pydantic models for book, member and borrow/return API requests and responses.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from ledger_api.domain.models.book import BOOK_GENRES
from ledger_api.domain.models.member import MEMBERSHIP_TYPES

ISBN_PATTERN = r"^(?:\d{9}X|\d{10}|\d{13})$"
PHONE_PATTERN = r"^\+?[1-9]\d{0,15}$"
ZIP_PATTERN = r"^\d{5}(-\d{4})?$"
EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


def _check_genre(value: Optional[str]) -> Optional[str]:
    if value is not None and value not in BOOK_GENRES:
        raise ValueError(f"Genre must be one of: {', '.join(BOOK_GENRES)}")
    return value


def _check_published_year(value: Optional[int]) -> Optional[int]:
    if value is not None and value > datetime.now().year:
        raise ValueError("Published year cannot be in the future")
    return value


def _check_membership_type(value: Optional[str]) -> Optional[str]:
    if value is not None and value not in MEMBERSHIP_TYPES:
        raise ValueError(f"Membership type must be one of: {', '.join(MEMBERSHIP_TYPES)}")
    return value


class BookCreateRequest(BaseModel):
    """DTO for adding a book to the catalog."""
    title: str = Field(..., min_length=1, max_length=200)
    author: str = Field(..., min_length=1, max_length=100)
    isbn: str = Field(..., pattern=ISBN_PATTERN, description="ISBN-10 or ISBN-13")
    published_year: int = Field(..., ge=1000)
    genre: str = "Other"
    total_copies: int = Field(1, ge=1)
    available_copies: Optional[int] = Field(None, ge=0, description="Defaults to total_copies")
    description: Optional[str] = Field(None, max_length=1000)
    publisher: Optional[str] = Field(None, max_length=100)
    language: str = "English"
    page_count: Optional[int] = Field(None, ge=1)

    @field_validator("genre")
    @classmethod
    def validate_genre(cls, value):
        return _check_genre(value)

    @field_validator("published_year")
    @classmethod
    def validate_published_year(cls, value):
        return _check_published_year(value)

    class Config:
        json_schema_extra = {
            "example": {
                "title": "The Left Hand of Darkness",
                "author": "Ursula K. Le Guin",
                "isbn": "9780441478125",
                "published_year": 1969,
                "genre": "Sci-Fi",
                "total_copies": 3,
            }
        }


class BookUpdateRequest(BaseModel):
    """DTO for a partial book update. Omitted fields stay unchanged."""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    author: Optional[str] = Field(None, min_length=1, max_length=100)
    isbn: Optional[str] = Field(None, pattern=ISBN_PATTERN)
    published_year: Optional[int] = Field(None, ge=1000)
    genre: Optional[str] = None
    total_copies: Optional[int] = Field(None, ge=1)
    available_copies: Optional[int] = Field(None, ge=0)
    description: Optional[str] = Field(None, max_length=1000)
    publisher: Optional[str] = Field(None, max_length=100)
    language: Optional[str] = None
    page_count: Optional[int] = Field(None, ge=1)

    @field_validator("genre")
    @classmethod
    def validate_genre(cls, value):
        return _check_genre(value)

    @field_validator("published_year")
    @classmethod
    def validate_published_year(cls, value):
        return _check_published_year(value)


class BookResponse(BaseModel):
    id: str
    title: str
    author: str
    isbn: str
    published_year: int
    genre: str
    total_copies: int
    available_copies: int
    borrowed_copies: int
    description: Optional[str] = None
    publisher: Optional[str] = None
    language: str
    page_count: Optional[int] = None
    status: str
    created_at: datetime
    updated_at: datetime


class AddressSchema(BaseModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = Field(None, pattern=ZIP_PATTERN)


class MemberCreateRequest(BaseModel):
    """DTO for registering a library member."""
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    email: str = Field(..., pattern=EMAIL_PATTERN)
    phone: str = Field(..., pattern=PHONE_PATTERN)
    address: Optional[AddressSchema] = None
    membership_type: str = "Basic"
    is_active: bool = True
    fines: float = Field(0.0, ge=0)

    @field_validator("membership_type")
    @classmethod
    def validate_membership_type(cls, value):
        return _check_membership_type(value)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()

    class Config:
        json_schema_extra = {
            "example": {
                "first_name": "Ada",
                "last_name": "Lovelace",
                "email": "ada@example.com",
                "phone": "+15551234567",
                "membership_type": "Premium",
            }
        }


class MemberUpdateRequest(BaseModel):
    first_name: Optional[str] = Field(None, min_length=1, max_length=50)
    last_name: Optional[str] = Field(None, min_length=1, max_length=50)
    email: Optional[str] = Field(None, pattern=EMAIL_PATTERN)
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    address: Optional[AddressSchema] = None
    membership_type: Optional[str] = None
    is_active: Optional[bool] = None
    fines: Optional[float] = Field(None, ge=0)

    @field_validator("membership_type")
    @classmethod
    def validate_membership_type(cls, value):
        return _check_membership_type(value)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: Optional[str]) -> Optional[str]:
        return value.strip().lower() if value else value


class BorrowRecordResponse(BaseModel):
    book_id: str
    borrow_date: datetime
    due_date: datetime
    return_date: Optional[datetime] = None
    is_returned: bool
    is_overdue: bool


class MemberResponse(BaseModel):
    id: str
    first_name: str
    last_name: str
    full_name: str
    email: str
    phone: str
    address: Optional[AddressSchema] = None
    membership_date: datetime
    membership_type: str
    is_active: bool
    fines: float
    borrowed_books: List[BorrowRecordResponse]
    current_borrowed_count: int
    overdue_count: int
    created_at: datetime
    updated_at: datetime


class LoanResponse(BaseModel):
    """Result of a borrow or return: both sides of the ledger after the change."""
    member: MemberResponse
    book: BookResponse
    record: BorrowRecordResponse
