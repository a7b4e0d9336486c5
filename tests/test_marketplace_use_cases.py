from datetime import timedelta

import pytest

from ledger_api.application.services.application_service import ApplicationService
from ledger_api.application.services.project_service import ProjectService
from ledger_api.application.services.review_service import ReviewService
from ledger_api.application.services.user_service import UserService
from ledger_api.domain.errors import (
    AlreadyApplied,
    AlreadyMember,
    AlreadyReviewed,
    AuthorizationDenied,
    CapacityExhausted,
    InvalidStatusTransition,
    NotAnActiveMember,
    NotFound,
    ValidationFailed,
)
from ledger_api.domain.models.application import ApplicationStatus
from ledger_api.domain.models.project import ProjectStatus, TeamMemberStatus
from ledger_api.domain.repositories.project_repository import ProjectQuery
from ledger_api.infrastructure.memory.marketplace_repositories import (
    InMemoryApplicationRepository,
    InMemoryProjectRepository,
    InMemoryReviewRepository,
    InMemoryUserRepository,
)
from ledger_api.utils.ids import new_id


@pytest.fixture
def users(store):
    return InMemoryUserRepository(store)


@pytest.fixture
def projects(store):
    return InMemoryProjectRepository(store)


@pytest.fixture
def user_service(users, clock):
    return UserService(users, clock=clock)


@pytest.fixture
def project_service(projects, users, clock):
    return ProjectService(projects, users, clock=clock)


@pytest.fixture
def application_service(store, projects, clock):
    return ApplicationService(InMemoryApplicationRepository(store), projects, clock=clock)


@pytest.fixture
def review_service(store, projects, users, clock):
    return ReviewService(InMemoryReviewRepository(store), projects, users, clock=clock)


@pytest.fixture
def people(user_service):
    """Owner plus three other users, keyed by name."""
    return {
        name: user_service.create_user({"name": name, "email": f"{name}@example.com"}).id
        for name in ("owner", "alice", "bob", "carol")
    }


@pytest.fixture
def project(project_service, people):
    return project_service.create_project(
        people["owner"],
        {
            "title": "Trail map",
            "description": "Offline maps for hikers",
            "category": "mobile-development",
            "max_team_size": 2,
        },
    )


def _apply(service, project_id, applicant_id, clock):
    return service.create_application(
        applicant_id,
        {
            "project_id": project_id,
            "cover_letter": "I have shipped two map apps",
            "proposed_role": "Mobile developer",
            "availability": {"hours_per_week": 10, "start_date": clock() + timedelta(days=7)},
        },
    )


def _review(service, project_id, reviewer_id, reviewee_id, rating=4, **extra):
    data = {
        "project_id": project_id,
        "reviewee_id": reviewee_id,
        "rating": rating,
        "title": "Solid teammate",
        "comment": "Delivered what was promised",
    }
    data.update(extra)
    return service.create_review(reviewer_id, data)


# ---------------------------------------------------------------------------
# Projects and teams
# ---------------------------------------------------------------------------

def test_project_owner_must_exist(project_service):
    with pytest.raises(NotFound):
        project_service.create_project(new_id(), {"title": "x", "description": "y", "category": "other"})


def test_new_project_defaults(project, people):
    assert project.owner_id == people["owner"]
    assert project.status == ProjectStatus.PLANNING
    assert project.team_members == []
    assert project.short_description == "Offline maps for hikers"


def test_team_capacity_counts_active_members_only(project_service, project, people):
    owner = people["owner"]
    project_service.add_team_member(project.id, people["alice"], "dev", owner)
    project_service.add_team_member(project.id, people["bob"], "design", owner)

    with pytest.raises(CapacityExhausted):
        project_service.add_team_member(project.id, people["carol"], "qa", owner)

    project_service.remove_team_member(project.id, people["alice"], owner)
    updated = project_service.add_team_member(project.id, people["carol"], "qa", owner)

    assert updated.current_team_size == 2
    assert len(updated.team_members) == 3
    statuses = {m.user_id: m.status for m in updated.team_members}
    assert statuses[people["alice"]] == TeamMemberStatus.REMOVED
    assert statuses[people["carol"]] == TeamMemberStatus.ACTIVE


def test_active_member_cannot_join_twice(project_service, project, people):
    project_service.add_team_member(project.id, people["alice"], "dev", people["owner"])
    with pytest.raises(AlreadyMember):
        project_service.add_team_member(project.id, people["alice"], "dev", people["owner"])


def test_only_the_owner_changes_the_team(project_service, project, people):
    with pytest.raises(AuthorizationDenied):
        project_service.add_team_member(project.id, people["bob"], "dev", people["alice"])

    project_service.add_team_member(project.id, people["bob"], "dev", people["owner"])
    with pytest.raises(AuthorizationDenied):
        project_service.remove_team_member(project.id, people["bob"], people["bob"])


def test_unknown_user_cannot_be_added(project_service, project, people):
    with pytest.raises(NotFound):
        project_service.add_team_member(project.id, new_id(), "dev", people["owner"])


def test_removing_a_non_member(project_service, project, people):
    with pytest.raises(NotAnActiveMember):
        project_service.remove_team_member(project.id, people["carol"], people["owner"])


def test_max_team_size_cannot_drop_below_active_team(project_service, project, people):
    owner = people["owner"]
    project_service.add_team_member(project.id, people["alice"], "dev", owner)
    project_service.add_team_member(project.id, people["bob"], "dev", owner)

    with pytest.raises(ValidationFailed):
        project_service.update_project(project.id, owner, {"max_team_size": 1})

    updated = project_service.update_project(project.id, owner, {"max_team_size": 4, "title": "Trail map v2"})
    assert updated.max_team_size == 4
    assert updated.title == "Trail map v2"
    assert updated.current_team_size == 2


def test_update_keeps_team_and_views(project_service, project, people):
    project_service.add_team_member(project.id, people["alice"], "dev", people["owner"])
    project_service.view_project(project.id)

    updated = project_service.update_project(project.id, people["owner"], {"description": "New scope"})

    assert updated.views == 1
    assert updated.current_team_size == 1
    assert updated.short_description == "New scope"


def test_only_the_owner_updates_or_cancels(project_service, project, people):
    with pytest.raises(AuthorizationDenied):
        project_service.update_project(project.id, people["alice"], {"title": "Mine now"})
    with pytest.raises(AuthorizationDenied):
        project_service.delete_project(project.id, people["alice"])

    cancelled = project_service.delete_project(project.id, people["owner"])
    assert cancelled.status == ProjectStatus.CANCELLED


def test_views_are_counted(project_service, project):
    project_service.view_project(project.id)
    assert project_service.view_project(project.id).views == 2


def test_projects_filter_by_owner(project_service, project, people):
    mine = project_service.list_projects(ProjectQuery(owner_id=people["owner"]), page=1, limit=10)
    theirs = project_service.list_projects(ProjectQuery(owner_id=people["alice"]), page=1, limit=10)
    assert [p.id for p in mine.items] == [project.id]
    assert theirs.total == 0


def test_project_stats_count_status_category_and_technologies(project_service, project, people):
    project_service.create_project(
        people["alice"],
        {"title": "Chat", "description": "Team chat", "category": "web-development", "technologies": ["Python", "React"]},
    )
    project_service.create_project(
        people["bob"],
        {"title": "Site", "description": "Landing page", "category": "web-development", "technologies": ["React"]},
    )
    project_service.delete_project(project.id, people["owner"])

    stats = project_service.get_stats()

    assert stats.total_projects == 3
    assert stats.by_status == {ProjectStatus.PLANNING: 2, ProjectStatus.CANCELLED: 1}
    assert stats.by_category == {"mobile-development": 1, "web-development": 2}
    assert stats.top_technologies == [("React", 2), ("Python", 1)]


def test_user_stats_cover_available_users_only(user_service, people):
    user_service.create_user(
        {"name": "dana", "email": "dana@example.com", "experience_level": "senior",
         "skills": [{"name": "Python"}, {"name": "Go"}]}
    )
    user_service.create_user(
        {"name": "erin", "email": "erin@example.com", "experience_level": "senior", "skills": [{"name": "Python"}]}
    )
    user_service.create_user(
        {"name": "frank", "email": "frank@example.com", "is_available": False,
         "skills": [{"name": "Go"}, {"name": "Rust"}]}
    )

    stats = user_service.get_stats()

    assert stats.available_users == 6
    assert stats.by_experience_level == {"junior": 4, "senior": 2}
    assert stats.top_skills == [("Python", 2), ("Go", 1)]


# ---------------------------------------------------------------------------
# Applications
# ---------------------------------------------------------------------------

def test_one_application_per_project(application_service, project_service, project, people, clock):
    _apply(application_service, project.id, people["alice"], clock)
    with pytest.raises(AlreadyApplied):
        _apply(application_service, project.id, people["alice"], clock)

    other = project_service.create_project(
        people["owner"], {"title": "Other", "description": "Other", "category": "other"}
    )
    assert _apply(application_service, other.id, people["alice"], clock).project_id == other.id


def test_application_to_unknown_project(application_service, people, clock):
    with pytest.raises(NotFound):
        _apply(application_service, new_id(), people["alice"], clock)


def test_owner_decides_and_is_stamped(application_service, project, people, clock):
    application = _apply(application_service, project.id, people["alice"], clock)

    accepted = application_service.update_status(
        application.id, ApplicationStatus.ACCEPTED, people["owner"], review_notes="Welcome aboard"
    )

    assert accepted.status == ApplicationStatus.ACCEPTED
    assert accepted.reviewed_by == people["owner"]
    assert accepted.reviewed_at == clock()
    assert accepted.review_notes == "Welcome aboard"


def test_decisions_are_final(application_service, project, people, clock):
    application = _apply(application_service, project.id, people["alice"], clock)
    application_service.update_status(application.id, ApplicationStatus.REJECTED, people["owner"])

    with pytest.raises(InvalidStatusTransition):
        application_service.update_status(application.id, ApplicationStatus.ACCEPTED, people["owner"])
    assert application_service.get_application(application.id).status == ApplicationStatus.REJECTED


def test_only_the_project_owner_decides(application_service, project, people, clock):
    application = _apply(application_service, project.id, people["alice"], clock)
    with pytest.raises(AuthorizationDenied):
        application_service.update_status(application.id, ApplicationStatus.ACCEPTED, people["alice"])


def test_applicant_edits_while_pending(application_service, project, people, clock):
    application = _apply(application_service, project.id, people["alice"], clock)

    revised = application_service.update_application(
        application.id, people["alice"], {"cover_letter": "Now with references"}
    )
    assert revised.cover_letter == "Now with references"

    with pytest.raises(AuthorizationDenied):
        application_service.update_application(application.id, people["bob"], {"cover_letter": "Hijack"})

    application_service.update_status(application.id, ApplicationStatus.UNDER_REVIEW, people["owner"])
    with pytest.raises(InvalidStatusTransition):
        application_service.update_application(application.id, people["alice"], {"cover_letter": "Late"})


class DecidingApplicationRepository(InMemoryApplicationRepository):
    """Accepts the application just before the applicant's edit is written."""

    def update(self, application):
        self._items[application.id].status = ApplicationStatus.ACCEPTED
        return super().update(application)


def test_edit_racing_a_decision_is_refused(store, projects, project, people, clock):
    service = ApplicationService(DecidingApplicationRepository(store), projects, clock=clock)
    application = _apply(service, project.id, people["alice"], clock)

    with pytest.raises(InvalidStatusTransition):
        service.update_application(application.id, people["alice"], {"cover_letter": "Too late"})

    stored = service.get_application(application.id)
    assert stored.status == ApplicationStatus.ACCEPTED
    assert stored.cover_letter == "I have shipped two map apps"


def test_stale_edit_cannot_reopen_a_decided_application(store, application_service, project, people, clock):
    applications = InMemoryApplicationRepository(store)
    application = _apply(application_service, project.id, people["alice"], clock)
    stale = applications.find_by_id(application.id)

    application_service.update_status(application.id, ApplicationStatus.ACCEPTED, people["owner"])
    stale.revise(cover_letter="Edited after the decision")

    assert applications.update(stale) is None
    stored = application_service.get_application(application.id)
    assert stored.status == ApplicationStatus.ACCEPTED
    assert stored.reviewed_by == people["owner"]
    assert stored.reviewed_at == clock()
    assert stored.cover_letter == "I have shipped two map apps"


def test_project_applications_are_owner_only(application_service, project, people, clock):
    _apply(application_service, project.id, people["alice"], clock)
    _apply(application_service, project.id, people["bob"], clock)

    page = application_service.list_for_project(project.id, people["owner"], None, page=1, limit=10)
    assert page.total == 2

    with pytest.raises(AuthorizationDenied):
        application_service.list_for_project(project.id, people["alice"], None, page=1, limit=10)


def test_only_the_applicant_deletes(application_service, project, people, clock):
    application = _apply(application_service, project.id, people["alice"], clock)
    with pytest.raises(AuthorizationDenied):
        application_service.delete_application(application.id, people["owner"])

    application_service.delete_application(application.id, people["alice"])
    with pytest.raises(NotFound):
        application_service.get_application(application.id)


# ---------------------------------------------------------------------------
# Reviews
# ---------------------------------------------------------------------------

@pytest.fixture
def team(project_service, project, people):
    """Alice and Bob on the team."""
    project_service.add_team_member(project.id, people["alice"], "dev", people["owner"])
    project_service.add_team_member(project.id, people["bob"], "dev", people["owner"])
    return project


def test_one_review_per_reviewer_and_project(review_service, team, people):
    _review(review_service, team.id, people["owner"], people["alice"])
    with pytest.raises(AlreadyReviewed):
        _review(review_service, team.id, people["owner"], people["bob"])


def test_self_review_is_rejected(review_service, team, people):
    with pytest.raises(ValidationFailed):
        _review(review_service, team.id, people["alice"], people["alice"])


def test_outsiders_cannot_review(review_service, team, people):
    with pytest.raises(AuthorizationDenied):
        _review(review_service, team.id, people["carol"], people["alice"])


def test_removed_members_can_still_review(review_service, project_service, team, people):
    project_service.remove_team_member(team.id, people["alice"], people["owner"])
    review = _review(review_service, team.id, people["alice"], people["bob"])
    assert review.reviewer_id == people["alice"]


def test_reviewee_must_exist(review_service, team, people):
    with pytest.raises(NotFound):
        _review(review_service, team.id, people["owner"], new_id())


def test_rating_stats_cover_public_reviews_only(review_service, team, people):
    _review(review_service, team.id, people["owner"], people["alice"], rating=5)
    _review(review_service, team.id, people["bob"], people["alice"], rating=2, is_public=False)

    page, stats = review_service.reviews_for_user(people["alice"], page=1, limit=10)

    assert page.total == 1
    assert stats.total_reviews == 1
    assert stats.avg_rating == 5


def test_private_reviews_are_visible_to_the_parties_only(review_service, team, people):
    review = _review(review_service, team.id, people["owner"], people["alice"], is_public=False)

    assert review_service.get_review(review.id, people["alice"]).id == review.id
    assert review_service.get_review(review.id, people["owner"]).id == review.id
    with pytest.raises(AuthorizationDenied):
        review_service.get_review(review.id, people["bob"])
    with pytest.raises(AuthorizationDenied):
        review_service.get_review(review.id, None)


def test_reviewer_edits_but_cannot_retarget(review_service, team, people):
    review = _review(review_service, team.id, people["owner"], people["alice"])

    edited = review_service.update_review(review.id, people["owner"], {"rating": 5, "comment": "Even better"})
    assert edited.rating == 5

    with pytest.raises(ValidationFailed):
        review_service.update_review(review.id, people["owner"], {"reviewee_id": people["bob"]})
    with pytest.raises(AuthorizationDenied):
        review_service.update_review(review.id, people["alice"], {"rating": 1})


def test_only_the_reviewee_responds(review_service, team, people, clock):
    review = _review(review_service, team.id, people["owner"], people["alice"])

    with pytest.raises(AuthorizationDenied):
        review_service.respond(review.id, people["owner"], "Thanks to me")

    answered = review_service.respond(review.id, people["alice"], "Thank you!")
    assert answered.response.content == "Thank you!"
    assert answered.response.responded_at == clock()


def test_helpful_votes_accumulate(review_service, team, people):
    review = _review(review_service, team.id, people["owner"], people["alice"])
    review_service.mark_helpful(review.id)
    assert review_service.mark_helpful(review.id).helpful_count == 2


def test_edits_keep_helpful_votes_counted_meanwhile(store, review_service, team, people):
    reviews = InMemoryReviewRepository(store)
    review = _review(review_service, team.id, people["owner"], people["alice"])
    stale = review_service.get_review(review.id, people["owner"])
    review_service.mark_helpful(review.id)

    stale.revise(title="Great teammate")
    reviews.update(stale)

    stored = review_service.get_review(review.id, people["owner"])
    assert stored.title == "Great teammate"
    assert stored.helpful_count == 1


def test_only_the_reviewer_deletes(review_service, team, people):
    review = _review(review_service, team.id, people["owner"], people["alice"])
    with pytest.raises(AuthorizationDenied):
        review_service.delete_review(review.id, people["alice"])

    review_service.delete_review(review.id, people["owner"])
    with pytest.raises(NotFound):
        review_service.get_review(review.id, people["owner"])
