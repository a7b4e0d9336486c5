from datetime import timedelta

import pytest

from ledger_api.application.services.book_service import BookService
from ledger_api.application.services.member_service import MemberService
from ledger_api.application.use_cases.library.borrow_book import BorrowBookUseCase
from ledger_api.application.use_cases.library.return_book import ReturnBookUseCase
from ledger_api.domain.errors import (
    CapacityExhausted,
    DuplicateActiveBorrow,
    DuplicateConstraintViolation,
    EntityInUse,
    InvalidReference,
    NoActiveBorrow,
    NotFound,
    ValidationFailed,
)
from ledger_api.domain.repositories.book_repository import BookQuery
from ledger_api.infrastructure.memory.library_repositories import InMemoryBookRepository, InMemoryMemberRepository
from ledger_api.utils.ids import new_id

LOAN_PERIOD_DAYS = 14


@pytest.fixture
def books(store):
    return InMemoryBookRepository(store)


@pytest.fixture
def members(store):
    return InMemoryMemberRepository(store)


@pytest.fixture
def book_service(books, members):
    return BookService(books, members)


@pytest.fixture
def member_service(members, books, clock):
    return MemberService(members, books, LOAN_PERIOD_DAYS, clock)


def _add_book(service, copies=1, isbn="9780441013593", **extra):
    data = dict(
        title="Dune",
        author="Frank Herbert",
        isbn=isbn,
        published_year=1965,
        genre="Sci-Fi",
        total_copies=copies,
    )
    data.update(extra)
    return service.create_book(data)


def _add_member(service, email):
    return service.create_member(
        dict(first_name="Ada", last_name="Lovelace", email=email, phone="+15551234567")
    )


def test_borrow_creates_record_and_takes_a_copy(book_service, member_service, clock):
    book = _add_book(book_service, copies=2)
    member = _add_member(member_service, "ada@example.com")

    loan = member_service.borrow_book(member.id, book.id)

    assert loan.book.available_copies == 1
    assert loan.record.book_id == book.id
    assert loan.record.borrow_date == clock()
    assert loan.record.due_date == clock() + timedelta(days=LOAN_PERIOD_DAYS)
    assert loan.member.current_borrowed_count == 1
    assert member_service.get_member(member.id).borrowed_books[0].is_returned is False


def test_last_copy_goes_to_one_member_only(book_service, member_service):
    book = _add_book(book_service, copies=1)
    first = _add_member(member_service, "first@example.com")
    second = _add_member(member_service, "second@example.com")

    member_service.borrow_book(first.id, book.id)
    with pytest.raises(CapacityExhausted):
        member_service.borrow_book(second.id, book.id)

    assert book_service.get_book(book.id).available_copies == 0
    assert member_service.get_member(second.id).borrowed_books == []

    member_service.return_book(first.id, book.id)
    loan = member_service.borrow_book(second.id, book.id)
    assert loan.book.available_copies == 0


def test_duplicate_active_borrow_leaves_counter_untouched(book_service, member_service):
    book = _add_book(book_service, copies=3)
    member = _add_member(member_service, "ada@example.com")

    member_service.borrow_book(member.id, book.id)
    with pytest.raises(DuplicateActiveBorrow):
        member_service.borrow_book(member.id, book.id)

    assert book_service.get_book(book.id).available_copies == 2
    assert len(member_service.get_member(member.id).borrowed_books) == 1


def test_holder_of_the_only_copy_borrowing_again_is_capacity_exhausted(book_service, member_service):
    book = _add_book(book_service, copies=1)
    member = _add_member(member_service, "ada@example.com")

    member_service.borrow_book(member.id, book.id)
    with pytest.raises(CapacityExhausted):
        member_service.borrow_book(member.id, book.id)

    assert book_service.get_book(book.id).available_copies == 0
    assert len(member_service.get_member(member.id).borrowed_books) == 1


def test_return_closes_the_record_and_puts_the_copy_back(book_service, member_service, clock):
    book = _add_book(book_service, copies=1)
    member = _add_member(member_service, "ada@example.com")
    member_service.borrow_book(member.id, book.id)
    returned_at = clock.advance(days=3)

    loan = member_service.return_book(member.id, book.id)

    assert loan.book.available_copies == 1
    assert loan.record.is_returned is True
    assert loan.record.return_date == returned_at
    assert loan.member.current_borrowed_count == 0


def test_double_return_is_refused_and_counter_stays_at_total(book_service, member_service):
    book = _add_book(book_service, copies=1)
    member = _add_member(member_service, "ada@example.com")
    member_service.borrow_book(member.id, book.id)
    member_service.return_book(member.id, book.id)

    with pytest.raises(NoActiveBorrow):
        member_service.return_book(member.id, book.id)

    assert book_service.get_book(book.id).available_copies == 1


def test_return_of_a_book_never_borrowed(book_service, member_service):
    book = _add_book(book_service)
    member = _add_member(member_service, "ada@example.com")
    with pytest.raises(NoActiveBorrow):
        member_service.return_book(member.id, book.id)


def test_borrow_again_after_return_appends_a_new_record(book_service, member_service, clock):
    book = _add_book(book_service)
    member = _add_member(member_service, "ada@example.com")
    member_service.borrow_book(member.id, book.id)
    member_service.return_book(member.id, book.id)
    clock.advance(days=1)

    loan = member_service.borrow_book(member.id, book.id)

    assert len(loan.member.borrowed_books) == 2
    assert [r.is_returned for r in loan.member.borrowed_books] == [True, False]


def test_borrow_of_archived_book_is_not_found(book_service, member_service):
    book = _add_book(book_service)
    member = _add_member(member_service, "ada@example.com")
    book_service.delete_book(book.id)

    with pytest.raises(NotFound):
        member_service.borrow_book(member.id, book.id)


def test_borrow_with_unknown_member_or_book(book_service, member_service):
    book = _add_book(book_service)
    member = _add_member(member_service, "ada@example.com")

    with pytest.raises(NotFound):
        member_service.borrow_book(new_id(), book.id)
    with pytest.raises(NotFound):
        member_service.borrow_book(member.id, new_id())
    with pytest.raises(InvalidReference):
        member_service.borrow_book("not-an-id", book.id)

    assert book_service.get_book(book.id).available_copies == 1


class RefusingMemberRepository(InMemoryMemberRepository):
    """Refuses the ledger append, as if a concurrent borrow got there first."""

    def append_borrow_record(self, member_id, record):
        return None


def test_refused_ledger_append_gives_the_copy_back(store, books, clock):
    members = RefusingMemberRepository(store)
    book = _add_book(BookService(books, members), copies=1)
    member = _add_member(MemberService(members, books, LOAN_PERIOD_DAYS, clock), "ada@example.com")

    with pytest.raises(DuplicateActiveBorrow):
        BorrowBookUseCase(members, books, LOAN_PERIOD_DAYS, clock).execute(member.id, book.id)

    assert books.find_by_id(book.id).available_copies == 1


def test_return_use_case_with_unknown_member(books, members, clock):
    with pytest.raises(NotFound):
        ReturnBookUseCase(members, books, clock).execute(new_id(), new_id())


# ---------------------------------------------------------------------------
# Catalog maintenance
# ---------------------------------------------------------------------------

def test_available_copies_default_to_total(book_service):
    assert _add_book(book_service, copies=4).available_copies == 4


def test_duplicate_isbn_is_rejected(book_service):
    _add_book(book_service)
    with pytest.raises(DuplicateConstraintViolation):
        _add_book(book_service, title="Dune Messiah")


def test_book_on_loan_cannot_be_archived(book_service, member_service):
    book = _add_book(book_service, copies=2)
    member = _add_member(member_service, "ada@example.com")
    member_service.borrow_book(member.id, book.id)

    with pytest.raises(EntityInUse):
        book_service.delete_book(book.id)

    member_service.return_book(member.id, book.id)
    assert book_service.delete_book(book.id).is_archived()


def test_archived_books_are_hidden_from_listing(book_service):
    kept = _add_book(book_service)
    archived = _add_book(book_service, isbn="9780441172719", title="Dune Messiah")
    book_service.delete_book(archived.id)

    visible = book_service.list_books(BookQuery(), page=1, limit=10)
    everything = book_service.list_books(BookQuery(include_archived=True), page=1, limit=10)

    assert [b.id for b in visible.items] == [kept.id]
    assert visible.total == 1
    assert everything.total == 2


def test_resizing_stock_keeps_loans_out(book_service, member_service):
    book = _add_book(book_service, copies=2)
    member = _add_member(member_service, "ada@example.com")
    member_service.borrow_book(member.id, book.id)

    updated = book_service.update_book(book.id, {"total_copies": 5})
    assert updated.available_copies == 4

    with pytest.raises(ValidationFailed):
        book_service.update_book(book.id, {"total_copies": 0})


def test_member_update_cannot_touch_the_ledger(book_service, member_service):
    book = _add_book(book_service)
    member = _add_member(member_service, "ada@example.com")
    member_service.borrow_book(member.id, book.id)

    updated = member_service.update_member(member.id, {"first_name": "Augusta"})

    assert updated.first_name == "Augusta"
    assert updated.current_borrowed_count == 1


def test_member_with_loans_cannot_be_deleted(book_service, member_service):
    book = _add_book(book_service)
    member = _add_member(member_service, "ada@example.com")
    member_service.borrow_book(member.id, book.id)

    with pytest.raises(EntityInUse):
        member_service.delete_member(member.id)

    member_service.return_book(member.id, book.id)
    member_service.delete_member(member.id)
    with pytest.raises(NotFound):
        member_service.get_member(member.id)


def test_duplicate_member_email_is_rejected(member_service):
    _add_member(member_service, "ada@example.com")
    with pytest.raises(DuplicateConstraintViolation):
        _add_member(member_service, "ada@example.com")
