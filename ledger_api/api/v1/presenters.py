"""
Presenters
==========

Entity -> response DTO conversion shared by the controllers.
Derived fields (counts, overdue flags, progress) are computed here, on read.
"""
from dataclasses import asdict
from datetime import datetime
from typing import Optional

from ledger_api.application.dto.contact_dto import ContactResponse
from ledger_api.application.dto.library_dto import (
    AddressSchema,
    BookResponse,
    BorrowRecordResponse,
    MemberResponse,
)
from ledger_api.application.dto.marketplace_dto import (
    ApplicationResponse,
    AvailabilitySchema,
    CategoryRatingsSchema,
    CompensationSchema,
    NameCountSchema,
    ProjectResponse,
    ProjectStatsResponse,
    RequiredSkillSchema,
    ReviewReplySchema,
    ReviewResponse,
    SkillOfferSchema,
    SkillSchema,
    TeamMemberSchema,
    TimelineSchema,
    UserResponse,
    UserStatsResponse,
)
from ledger_api.domain.models.application import Application
from ledger_api.domain.models.book import Book
from ledger_api.domain.models.contact import Contact
from ledger_api.domain.models.member import BorrowRecord, Member
from ledger_api.domain.models.project import Project
from ledger_api.domain.models.review import Review
from ledger_api.domain.models.user import User
from ledger_api.domain.repositories.project_repository import ProjectStats
from ledger_api.domain.repositories.user_repository import UserStats
from ledger_api.utils.datetime_utils import now


def book_response(book: Book) -> BookResponse:
    return BookResponse(
        id=book.id,
        title=book.title,
        author=book.author,
        isbn=book.isbn,
        published_year=book.published_year,
        genre=book.genre,
        total_copies=book.total_copies,
        available_copies=book.available_copies,
        borrowed_copies=book.borrowed_copies,
        description=book.description,
        publisher=book.publisher,
        language=book.language,
        page_count=book.page_count,
        status=book.status,
        created_at=book.created_at,
        updated_at=book.updated_at,
    )


def borrow_record_response(record: BorrowRecord, at: Optional[datetime] = None) -> BorrowRecordResponse:
    return BorrowRecordResponse(
        book_id=record.book_id,
        borrow_date=record.borrow_date,
        due_date=record.due_date,
        return_date=record.return_date,
        is_returned=record.is_returned,
        is_overdue=record.is_overdue(at),
    )


def member_response(member: Member) -> MemberResponse:
    at = now()
    return MemberResponse(
        id=member.id,
        first_name=member.first_name,
        last_name=member.last_name,
        full_name=member.full_name,
        email=member.email,
        phone=member.phone,
        address=AddressSchema(**asdict(member.address)) if member.address else None,
        membership_date=member.membership_date,
        membership_type=member.membership_type,
        is_active=member.is_active,
        fines=member.fines,
        borrowed_books=[borrow_record_response(r, at) for r in member.borrowed_books],
        current_borrowed_count=member.current_borrowed_count,
        overdue_count=len(member.overdue_books(at)),
        created_at=member.created_at,
        updated_at=member.updated_at,
    )


def user_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        bio=user.bio,
        skills=[SkillSchema(**asdict(s)) for s in user.skills],
        experience_level=user.experience_level,
        location=user.location,
        website=user.website,
        github=user.github,
        is_available=user.is_available,
        preferred_project_types=user.preferred_project_types,
        hourly_rate=user.hourly_rate,
        languages=user.languages,
        profile_completion=user.profile_completion,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


def user_stats_response(stats: UserStats) -> UserStatsResponse:
    return UserStatsResponse(
        available_users=stats.available_users,
        by_experience_level=stats.by_experience_level,
        top_skills=[NameCountSchema(name=name, count=count) for name, count in stats.top_skills],
    )


def project_response(project: Project) -> ProjectResponse:
    return ProjectResponse(
        id=project.id,
        title=project.title,
        description=project.description,
        short_description=project.short_description,
        owner_id=project.owner_id,
        category=project.category,
        status=project.status,
        required_skills=[RequiredSkillSchema(**asdict(s)) for s in project.required_skills],
        technologies=project.technologies,
        tags=project.tags,
        difficulty=project.difficulty,
        max_team_size=project.max_team_size,
        timeline=TimelineSchema(**asdict(project.timeline)),
        is_remote=project.is_remote,
        featured=project.featured,
        views=project.views,
        team_members=[TeamMemberSchema(**asdict(m)) for m in project.team_members],
        current_team_size=project.current_team_size,
        available_spots=project.available_spots,
        duration_in_days=project.duration_in_days,
        progress=project.progress(),
        created_at=project.created_at,
        updated_at=project.updated_at,
    )


def project_stats_response(stats: ProjectStats) -> ProjectStatsResponse:
    return ProjectStatsResponse(
        total_projects=stats.total_projects,
        by_status=stats.by_status,
        by_category=stats.by_category,
        top_technologies=[NameCountSchema(name=name, count=count) for name, count in stats.top_technologies],
    )


def application_response(application: Application) -> ApplicationResponse:
    compensation = application.expected_compensation
    return ApplicationResponse(
        id=application.id,
        project_id=application.project_id,
        applicant_id=application.applicant_id,
        cover_letter=application.cover_letter,
        proposed_role=application.proposed_role,
        skills_offered=[SkillOfferSchema(**asdict(s)) for s in application.skills_offered],
        availability=AvailabilitySchema(**asdict(application.availability)),
        expected_compensation=CompensationSchema(**asdict(compensation)) if compensation else None,
        status=application.status,
        reviewed_by=application.reviewed_by,
        reviewed_at=application.reviewed_at,
        review_notes=application.review_notes,
        days_old=application.days_old(),
        created_at=application.created_at,
        updated_at=application.updated_at,
    )


def review_response(review: Review) -> ReviewResponse:
    return ReviewResponse(
        id=review.id,
        project_id=review.project_id,
        reviewer_id=review.reviewer_id,
        reviewee_id=review.reviewee_id,
        rating=review.rating,
        title=review.title,
        comment=review.comment,
        categories=CategoryRatingsSchema(**asdict(review.categories)),
        avg_category_rating=review.avg_category_rating,
        pros=review.pros,
        cons=review.cons,
        would_work_again=review.would_work_again,
        is_public=review.is_public,
        is_verified=review.is_verified,
        response=ReviewReplySchema(**asdict(review.response)) if review.response else None,
        helpful_count=review.helpful_count,
        created_at=review.created_at,
        updated_at=review.updated_at,
    )


def contact_response(contact: Contact) -> ContactResponse:
    return ContactResponse(
        id=contact.id,
        first_name=contact.first_name,
        last_name=contact.last_name,
        email=contact.email,
        favorite_color=contact.favorite_color,
        birthday=contact.birthday,
        created_at=contact.created_at,
        updated_at=contact.updated_at,
    )
