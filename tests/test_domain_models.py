from datetime import datetime, timedelta, timezone

import pytest

from ledger_api.domain.errors import (
    AlreadyMember,
    CapacityExhausted,
    DuplicateActiveBorrow,
    EntityInUse,
    InvalidStatusTransition,
    NoActiveBorrow,
    NotAnActiveMember,
    ValidationFailed,
)
from ledger_api.domain.models.application import Application, ApplicationStatus, Availability
from ledger_api.domain.models.book import Book
from ledger_api.domain.models.member import Member
from ledger_api.domain.models.project import Project, TeamMemberStatus, Timeline, summarize
from ledger_api.domain.models.review import CategoryRatings, Review
from ledger_api.domain.models.user import Skill, User

T0 = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def _book(total=3, available=None):
    return Book(
        id="b1",
        title="Dune",
        author="Frank Herbert",
        isbn="9780441013593",
        published_year=1965,
        total_copies=total,
        available_copies=total if available is None else available,
    )


def _member():
    return Member(id="m1", first_name="Ada", last_name="Lovelace", email="ada@example.com", phone="+15551234567")


def _project(max_team_size=2):
    return Project(
        id="p1",
        title="Trail map",
        description="Offline maps for hikers",
        owner_id="owner",
        category="mobile-development",
        max_team_size=max_team_size,
    )


def _application():
    return Application(
        id="a1",
        project_id="p1",
        applicant_id="u1",
        cover_letter="I know maps",
        proposed_role="Frontend",
        availability=Availability(hours_per_week=10, start_date=T0),
    )


# ---------------------------------------------------------------------------
# Book
# ---------------------------------------------------------------------------

def test_checkout_takes_one_copy():
    book = _book(total=2)
    book.checkout_copy()
    assert book.available_copies == 1
    assert book.borrowed_copies == 1


def test_checkout_without_copies_is_capacity_exhausted():
    book = _book(total=1, available=0)
    with pytest.raises(CapacityExhausted):
        book.checkout_copy()
    assert book.available_copies == 0


def test_available_is_clamped_to_total_on_creation():
    assert _book(total=2, available=5).available_copies == 2


def test_negative_copies_are_rejected():
    with pytest.raises(ValidationFailed):
        _book(total=-1, available=0)


def test_resize_stock_keeps_loans_out():
    book = _book(total=3, available=1)
    book.resize_stock(5)
    assert book.total_copies == 5
    assert book.available_copies == 3
    assert book.borrowed_copies == 2


def test_resize_stock_below_borrowed_count_fails():
    book = _book(total=3, available=1)
    with pytest.raises(ValidationFailed):
        book.resize_stock(1)
    assert book.total_copies == 3


# ---------------------------------------------------------------------------
# Member ledger
# ---------------------------------------------------------------------------

def test_borrow_sets_due_date_from_borrow_date():
    member = _member()
    record = member.borrow("b1", T0, loan_period_days=14)
    assert record.due_date == T0 + timedelta(days=14)
    assert record.is_returned is False
    assert member.current_borrowed_count == 1


def test_second_active_borrow_of_same_book_fails():
    member = _member()
    member.borrow("b1", T0)
    with pytest.raises(DuplicateActiveBorrow):
        member.borrow("b1", T0)
    assert len(member.borrowed_books) == 1


def test_return_then_borrow_again_keeps_history():
    member = _member()
    member.borrow("b1", T0)
    member.return_book("b1", T0 + timedelta(days=3))
    member.borrow("b1", T0 + timedelta(days=4))

    assert len(member.borrowed_books) == 2
    assert member.borrowed_books[0].is_returned is True
    assert member.borrowed_books[0].return_date == T0 + timedelta(days=3)
    assert member.current_borrowed_count == 1


def test_double_return_is_no_active_borrow():
    member = _member()
    member.borrow("b1", T0)
    member.return_book("b1", T0)
    with pytest.raises(NoActiveBorrow):
        member.return_book("b1", T0)


def test_return_of_never_borrowed_book_is_no_active_borrow():
    with pytest.raises(NoActiveBorrow):
        _member().return_book("b1", T0)


def test_overdue_books_are_active_past_due():
    member = _member()
    member.borrow("b1", T0, loan_period_days=14)
    member.borrow("b2", T0, loan_period_days=14)
    member.return_book("b2", T0 + timedelta(days=1))

    assert member.overdue_books(T0 + timedelta(days=10)) == []
    overdue = member.overdue_books(T0 + timedelta(days=15))
    assert [r.book_id for r in overdue] == ["b1"]


def test_member_with_unreturned_books_cannot_be_deleted():
    member = _member()
    member.borrow("b1", T0)
    with pytest.raises(EntityInUse):
        member.ensure_deletable()
    member.return_book("b1", T0)
    member.ensure_deletable()


# ---------------------------------------------------------------------------
# Project team
# ---------------------------------------------------------------------------

def test_team_is_capped_by_active_members_only():
    project = _project(max_team_size=2)
    project.add_team_member("a", "dev", T0)
    project.add_team_member("b", "dev", T0)
    with pytest.raises(CapacityExhausted):
        project.add_team_member("c", "dev", T0)

    project.remove_team_member("a")
    project.add_team_member("c", "dev", T0)

    assert project.current_team_size == 2
    assert len(project.team_members) == 3
    assert project.team_members[0].status == TeamMemberStatus.REMOVED
    assert project.available_spots == 0


def test_active_member_cannot_be_added_twice():
    project = _project()
    project.add_team_member("a", "dev", T0)
    with pytest.raises(AlreadyMember):
        project.add_team_member("a", "design", T0)


def test_removed_member_can_rejoin():
    project = _project()
    project.add_team_member("a", "dev", T0)
    project.remove_team_member("a")
    project.add_team_member("a", "lead", T0)
    assert project.active_member("a").role == "lead"
    assert project.has_been_member("a")


def test_removing_a_non_member_fails():
    project = _project()
    with pytest.raises(NotAnActiveMember):
        project.remove_team_member("ghost")


def test_short_description_is_derived_from_description():
    long_text = "x" * 500
    assert summarize(long_text).endswith("...")
    assert len(summarize(long_text)) == 200
    assert summarize("short") == "short"
    assert _project().short_description == "Offline maps for hikers"


def test_duration_and_progress_follow_the_timeline():
    project = _project()
    project.timeline = Timeline(start_date=T0, end_date=T0 + timedelta(days=10))
    assert project.duration_in_days == 10
    assert project.progress(T0 - timedelta(days=1)) == 0
    assert project.progress(T0 + timedelta(days=5)) == 50
    assert project.progress(T0 + timedelta(days=20)) == 100


def test_progress_without_timeline_is_zero():
    assert _project().progress(T0) == 0
    assert _project().duration_in_days is None


# ---------------------------------------------------------------------------
# Application status
# ---------------------------------------------------------------------------

def test_first_decision_stamps_the_reviewer():
    application = _application()
    application.transition_to(ApplicationStatus.ACCEPTED, "owner", T0, notes="Welcome")
    assert application.status == ApplicationStatus.ACCEPTED
    assert application.reviewed_by == "owner"
    assert application.reviewed_at == T0
    assert application.review_notes == "Welcome"


def test_under_review_keeps_the_original_stamp():
    application = _application()
    application.transition_to(ApplicationStatus.UNDER_REVIEW, "owner", T0)
    application.transition_to(ApplicationStatus.REJECTED, "someone-else", T0 + timedelta(days=1))
    assert application.reviewed_by == "owner"
    assert application.reviewed_at == T0


@pytest.mark.parametrize("target", [ApplicationStatus.PENDING, ApplicationStatus.REJECTED, "archived"])
def test_accepted_is_final(target):
    application = _application()
    application.transition_to(ApplicationStatus.ACCEPTED, "owner", T0)
    with pytest.raises(InvalidStatusTransition):
        application.transition_to(target, "owner", T0)
    assert application.status == ApplicationStatus.ACCEPTED


def test_only_pending_applications_can_be_revised():
    application = _application()
    application.revise(cover_letter="Updated")
    assert application.cover_letter == "Updated"

    application.transition_to(ApplicationStatus.WITHDRAWN, "owner", T0)
    with pytest.raises(InvalidStatusTransition):
        application.revise(cover_letter="Again")


def test_revise_refuses_status_fields():
    with pytest.raises(InvalidStatusTransition):
        _application().revise(status=ApplicationStatus.ACCEPTED)


# ---------------------------------------------------------------------------
# Review
# ---------------------------------------------------------------------------

def _review(**overrides):
    values = dict(
        id="r1",
        project_id="p1",
        reviewer_id="u1",
        reviewee_id="u2",
        rating=4,
        title="Solid",
        comment="Good work",
    )
    values.update(overrides)
    return Review(**values)


def test_self_review_is_rejected():
    with pytest.raises(ValidationFailed):
        _review(reviewee_id="u1")


@pytest.mark.parametrize("rating", [0, 6])
def test_rating_out_of_range_is_rejected(rating):
    with pytest.raises(ValidationFailed):
        _review(rating=rating)


def test_identity_fields_cannot_be_revised():
    review = _review()
    with pytest.raises(ValidationFailed):
        review.revise(reviewee_id="u3")
    review.revise(rating=5, comment="Even better")
    assert review.rating == 5


def test_category_average_ignores_missing_scores():
    review = _review(categories=CategoryRatings(communication=5, teamwork=4))
    assert review.avg_category_rating == 4.5
    assert _review().avg_category_rating is None


def test_response_replaces_previous_one():
    review = _review()
    review.add_response("Thanks", T0)
    review.add_response("Thanks again", T0 + timedelta(days=1))
    assert review.response.content == "Thanks again"
    assert review.response.responded_at == T0 + timedelta(days=1)


# ---------------------------------------------------------------------------
# User
# ---------------------------------------------------------------------------

def test_profile_completion_counts_filled_fields():
    user = User(
        id="u1",
        name="Grace",
        email="grace@example.com",
        bio="Compilers",
        skills=[Skill(name="COBOL", level="expert")],
        location="Arlington",
        preferred_project_types=["devops"],
        languages=["English"],
    )
    assert user.profile_completion == 100
