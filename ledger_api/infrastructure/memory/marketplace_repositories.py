"""
In-Memory Marketplace Repositories
==================================

User, project, application and review repositories backed by InMemoryStore.
Unique keys mirror the MongoDB indexes.
"""
import copy
from collections import Counter
from typing import Iterable, List, Optional, Tuple

from ledger_api.domain.errors import (
    AlreadyApplied,
    AlreadyReviewed,
    DuplicateConstraintViolation,
    NotFound,
)
from ledger_api.domain.models.application import EDITABLE_FIELDS, Application
from ledger_api.domain.models.project import Project, TeamMember, TeamMemberStatus
from ledger_api.domain.models.review import Review
from ledger_api.domain.models.user import User
from ledger_api.domain.repositories.application_repository import ApplicationQuery, ApplicationRepository
from ledger_api.domain.repositories.project_repository import ProjectQuery, ProjectRepository, ProjectStats
from ledger_api.domain.repositories.review_repository import RatingStats, ReviewQuery, ReviewRepository
from ledger_api.domain.repositories.user_repository import UserQuery, UserRepository, UserStats
from ledger_api.infrastructure.memory.store import InMemoryRepository, contains
from ledger_api.utils.datetime_utils import now


def _top(names: Iterable[str], top: int) -> List[Tuple[str, int]]:
    """Most frequent names first, ties by name."""
    counts = Counter(names)
    return sorted(counts.items(), key=lambda item: (-item[1], item[0]))[:top]


class InMemoryUserRepository(InMemoryRepository, UserRepository):
    COLLECTION_NAME = "users"

    def _check_email_free(self, user: User) -> None:
        for other in self._items.values():
            if other.email == user.email and other.id != user.id:
                raise DuplicateConstraintViolation("User with this email already exists")

    @staticmethod
    def _matches(user: User, query: UserQuery) -> bool:
        if query.experience_level and user.experience_level != query.experience_level:
            return False
        if query.is_available is not None and user.is_available != query.is_available:
            return False
        if query.skill and not any(s.name.lower() == query.skill.lower() for s in user.skills):
            return False
        return True

    def create(self, user: User) -> User:
        with self._lock:
            self._check_email_free(user)
            return self._put(user)

    def update(self, user: User) -> User:
        with self._lock:
            if user.id not in self._items:
                raise NotFound("User", user.id)
            self._check_email_free(user)
            user.updated_at = now()
            return self._put(user)

    def find_by_id(self, user_id: str) -> Optional[User]:
        with self._lock:
            return self._get(user_id)

    def find_page(self, query: UserQuery, skip: int, limit: int) -> List[User]:
        with self._lock:
            matches = self._select(lambda u: self._matches(u, query))
            return self._page(matches, skip, limit, lambda u: u.created_at)

    def count(self, query: UserQuery) -> int:
        with self._lock:
            return len(self._select(lambda u: self._matches(u, query)))

    def delete(self, user_id: str) -> bool:
        with self._lock:
            return self._items.pop(user_id, None) is not None

    def exists(self, user_id: str) -> bool:
        with self._lock:
            return user_id in self._items

    def stats(self, top: int = 10) -> UserStats:
        with self._lock:
            available = [u for u in self._items.values() if u.is_available]
            return UserStats(
                available_users=len(available),
                by_experience_level=dict(Counter(u.experience_level for u in available)),
                top_skills=_top((s.name for u in available for s in u.skills), top),
            )


class InMemoryProjectRepository(InMemoryRepository, ProjectRepository):
    COLLECTION_NAME = "projects"

    @staticmethod
    def _matches(project: Project, query: ProjectQuery) -> bool:
        if query.status and project.status != query.status:
            return False
        if query.category and project.category != query.category:
            return False
        if query.owner_id and project.owner_id != query.owner_id:
            return False
        if query.difficulty and project.difficulty != query.difficulty:
            return False
        if query.skills and not {s.name for s in project.required_skills}.intersection(query.skills):
            return False
        if query.search:
            texts = [project.title, project.description, *project.technologies, *project.tags]
            if not any(contains(text, query.search) for text in texts):
                return False
        return True

    def create(self, project: Project) -> Project:
        with self._lock:
            return self._put(project)

    def update(self, project: Project) -> Project:
        with self._lock:
            stored = self._items.get(project.id)
            if stored is None:
                raise NotFound("Project", project.id)
            project.team_members = stored.team_members
            project.views = stored.views
            project.updated_at = now()
            return self._put(project)

    def find_by_id(self, project_id: str) -> Optional[Project]:
        with self._lock:
            return self._get(project_id)

    def find_page(self, query: ProjectQuery, skip: int, limit: int) -> List[Project]:
        with self._lock:
            matches = self._select(lambda p: self._matches(p, query))
            return self._page(matches, skip, limit, lambda p: (p.featured, p.created_at))

    def count(self, query: ProjectQuery) -> int:
        with self._lock:
            return len(self._select(lambda p: self._matches(p, query)))

    def add_team_member(self, project_id: str, member: TeamMember) -> Optional[Project]:
        with self._lock:
            project = self._items.get(project_id)
            if project is None:
                return None
            if project.active_member(member.user_id) is not None:
                return None
            if project.current_team_size >= project.max_team_size:
                return None
            project.team_members.append(copy.deepcopy(member))
            project.updated_at = member.joined_at
            return self._get(project_id)

    def remove_team_member(self, project_id: str, user_id: str) -> Optional[Project]:
        with self._lock:
            project = self._items.get(project_id)
            if project is None:
                return None
            member = project.active_member(user_id)
            if member is None:
                return None
            member.status = TeamMemberStatus.REMOVED
            project.updated_at = now()
            return self._get(project_id)

    def increment_views(self, project_id: str) -> None:
        with self._lock:
            project = self._items.get(project_id)
            if project is not None:
                project.views += 1

    def stats(self, top: int = 10) -> ProjectStats:
        with self._lock:
            projects = list(self._items.values())
            return ProjectStats(
                total_projects=len(projects),
                by_status=dict(Counter(p.status for p in projects)),
                by_category=dict(Counter(p.category for p in projects)),
                top_technologies=_top((t for p in projects for t in p.technologies), top),
            )


class InMemoryApplicationRepository(InMemoryRepository, ApplicationRepository):
    COLLECTION_NAME = "applications"

    @staticmethod
    def _matches(application: Application, query: ApplicationQuery) -> bool:
        if query.status and application.status != query.status:
            return False
        if query.project_id and application.project_id != query.project_id:
            return False
        if query.applicant_id and application.applicant_id != query.applicant_id:
            return False
        return True

    def create(self, application: Application) -> Application:
        with self._lock:
            for other in self._items.values():
                if (other.project_id, other.applicant_id) == (application.project_id, application.applicant_id):
                    raise AlreadyApplied("You have already applied to this project")
            return self._put(application)

    def update(self, application: Application) -> Optional[Application]:
        with self._lock:
            stored = self._items.get(application.id)
            if stored is None or not stored.is_pending():
                return None
            for name in EDITABLE_FIELDS:
                setattr(stored, name, copy.deepcopy(getattr(application, name)))
            stored.updated_at = application.updated_at
            return self._get(application.id)

    def update_status(self, application: Application, expected_status: str) -> Optional[Application]:
        with self._lock:
            stored = self._items.get(application.id)
            if stored is None or stored.status != expected_status:
                return None
            return self._put(application)

    def find_by_id(self, application_id: str) -> Optional[Application]:
        with self._lock:
            return self._get(application_id)

    def find_by_project_and_applicant(self, project_id: str, applicant_id: str) -> Optional[Application]:
        with self._lock:
            for application in self._items.values():
                if application.project_id == project_id and application.applicant_id == applicant_id:
                    return copy.deepcopy(application)
            return None

    def find_page(self, query: ApplicationQuery, skip: int, limit: int) -> List[Application]:
        with self._lock:
            matches = self._select(lambda a: self._matches(a, query))
            return self._page(matches, skip, limit, lambda a: a.created_at)

    def count(self, query: ApplicationQuery) -> int:
        with self._lock:
            return len(self._select(lambda a: self._matches(a, query)))

    def delete(self, application_id: str) -> bool:
        with self._lock:
            return self._items.pop(application_id, None) is not None


class InMemoryReviewRepository(InMemoryRepository, ReviewRepository):
    COLLECTION_NAME = "reviews"

    @staticmethod
    def _matches(review: Review, query: ReviewQuery) -> bool:
        if query.project_id and review.project_id != query.project_id:
            return False
        if query.reviewer_id and review.reviewer_id != query.reviewer_id:
            return False
        if query.reviewee_id and review.reviewee_id != query.reviewee_id:
            return False
        if query.is_public is not None and review.is_public != query.is_public:
            return False
        return True

    def create(self, review: Review) -> Review:
        with self._lock:
            for other in self._items.values():
                if (other.project_id, other.reviewer_id) == (review.project_id, review.reviewer_id):
                    raise AlreadyReviewed("You have already reviewed this project")
            return self._put(review)

    def update(self, review: Review) -> Review:
        with self._lock:
            stored = self._items.get(review.id)
            if stored is None:
                raise NotFound("Review", review.id)
            review.project_id = stored.project_id
            review.reviewer_id = stored.reviewer_id
            review.reviewee_id = stored.reviewee_id
            review.created_at = stored.created_at
            review.helpful_count = stored.helpful_count
            return self._put(review)

    def find_by_id(self, review_id: str) -> Optional[Review]:
        with self._lock:
            return self._get(review_id)

    def find_by_project_and_reviewer(self, project_id: str, reviewer_id: str) -> Optional[Review]:
        with self._lock:
            for review in self._items.values():
                if review.project_id == project_id and review.reviewer_id == reviewer_id:
                    return copy.deepcopy(review)
            return None

    def find_page(self, query: ReviewQuery, skip: int, limit: int) -> List[Review]:
        with self._lock:
            matches = self._select(lambda r: self._matches(r, query))
            return self._page(matches, skip, limit, lambda r: r.created_at)

    def count(self, query: ReviewQuery) -> int:
        with self._lock:
            return len(self._select(lambda r: self._matches(r, query)))

    def delete(self, review_id: str) -> bool:
        with self._lock:
            return self._items.pop(review_id, None) is not None

    def increment_helpful(self, review_id: str) -> Optional[Review]:
        with self._lock:
            review = self._items.get(review_id)
            if review is None:
                return None
            review.helpful_count += 1
            return self._get(review_id)

    def rating_stats(self, reviewee_id: str) -> RatingStats:
        with self._lock:
            ratings = [
                r.rating for r in self._items.values()
                if r.reviewee_id == reviewee_id and r.is_public
            ]
        if not ratings:
            return RatingStats()
        return RatingStats(avg_rating=round(sum(ratings) / len(ratings), 2), total_reviews=len(ratings))
