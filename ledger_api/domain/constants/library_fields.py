"""Constants for Book and Member document field names"""


class BookFields:
    """Field name constants for Book model"""
    ID = "id"
    TITLE = "title"
    AUTHOR = "author"
    ISBN = "isbn"
    GENRE = "genre"
    PUBLISHED_YEAR = "published_year"
    TOTAL_COPIES = "total_copies"
    AVAILABLE_COPIES = "available_copies"
    DESCRIPTION = "description"
    PUBLISHER = "publisher"
    LANGUAGE = "language"
    PAGE_COUNT = "page_count"
    STATUS = "status"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


class MemberFields:
    """Field name constants for Member model"""
    ID = "id"
    FIRST_NAME = "first_name"
    LAST_NAME = "last_name"
    EMAIL = "email"
    PHONE = "phone"
    ADDRESS = "address"
    MEMBERSHIP_DATE = "membership_date"
    MEMBERSHIP_TYPE = "membership_type"
    IS_ACTIVE = "is_active"
    FINES = "fines"
    BORROWED_BOOKS = "borrowed_books"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


class BorrowRecordFields:
    """Field name constants for the embedded borrow ledger entries"""
    BOOK_ID = "book_id"
    BORROW_DATE = "borrow_date"
    DUE_DATE = "due_date"
    RETURN_DATE = "return_date"
    IS_RETURNED = "is_returned"
