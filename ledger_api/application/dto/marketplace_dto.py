"""
Marketplace DTO
===============

Pydantic models for user, project, team, application and review endpoints.
"""
from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ledger_api.application.dto.common_dto import PaginationMeta
from ledger_api.utils.datetime_utils import ensure_aware

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"

SkillLevel = Literal["beginner", "intermediate", "advanced", "expert"]
ExperienceLevel = Literal["junior", "mid", "senior", "lead", "principal"]
ProjectCategory = Literal[
    "web-development",
    "mobile-development",
    "data-science",
    "machine-learning",
    "devops",
    "blockchain",
    "game-development",
    "other",
]
ProjectStatusValue = Literal["planning", "open", "in-progress", "completed", "cancelled"]
ApplicationTarget = Literal["under-review", "accepted", "rejected", "withdrawn"]


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

class SkillSchema(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    level: SkillLevel = "beginner"
    years_of_experience: int = Field(0, ge=0, le=50)


class UserCreateRequest(BaseModel):
    """DTO for creating a marketplace profile."""
    name: str = Field(..., min_length=1, max_length=50)
    email: str = Field(..., pattern=EMAIL_PATTERN)
    bio: str = Field("", max_length=500)
    skills: List[SkillSchema] = Field(default_factory=list)
    experience_level: ExperienceLevel = "junior"
    location: str = Field("", max_length=100)
    website: str = ""
    github: str = ""
    is_available: bool = True
    preferred_project_types: List[str] = Field(default_factory=list)
    hourly_rate: Optional[float] = Field(None, ge=0)
    languages: List[str] = Field(default_factory=list)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Grace Hopper",
                "email": "grace@example.com",
                "skills": [{"name": "COBOL", "level": "expert", "years_of_experience": 30}],
                "experience_level": "principal",
            }
        }


class UserUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    email: Optional[str] = Field(None, pattern=EMAIL_PATTERN)
    bio: Optional[str] = Field(None, max_length=500)
    skills: Optional[List[SkillSchema]] = None
    experience_level: Optional[ExperienceLevel] = None
    location: Optional[str] = Field(None, max_length=100)
    website: Optional[str] = None
    github: Optional[str] = None
    is_available: Optional[bool] = None
    preferred_project_types: Optional[List[str]] = None
    hourly_rate: Optional[float] = Field(None, ge=0)
    languages: Optional[List[str]] = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: Optional[str]) -> Optional[str]:
        return value.strip().lower() if value else value


class UserResponse(BaseModel):
    id: str
    name: str
    email: str
    bio: str
    skills: List[SkillSchema]
    experience_level: str
    location: str
    website: str
    github: str
    is_available: bool
    preferred_project_types: List[str]
    hourly_rate: Optional[float] = None
    languages: List[str]
    profile_completion: int
    created_at: datetime
    updated_at: datetime


class NameCountSchema(BaseModel):
    name: str
    count: int


class UserStatsResponse(BaseModel):
    available_users: int
    by_experience_level: Dict[str, int]
    top_skills: List[NameCountSchema]


# ---------------------------------------------------------------------------
# Projects and team
# ---------------------------------------------------------------------------

class RequiredSkillSchema(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    level: SkillLevel = "intermediate"
    is_required: bool = True


class TimelineSchema(BaseModel):
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    estimated_duration_weeks: Optional[int] = Field(None, ge=1)

    @model_validator(mode="after")
    def check_order(self) -> "TimelineSchema":
        if self.start_date and self.end_date and ensure_aware(self.end_date) <= ensure_aware(self.start_date):
            raise ValueError("End date must be after start date")
        return self


class ProjectCreateRequest(BaseModel):
    """DTO for creating a project. The requester becomes its owner."""
    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=2000)
    short_description: Optional[str] = Field(None, max_length=200)
    category: ProjectCategory
    status: ProjectStatusValue = "planning"
    required_skills: List[RequiredSkillSchema] = Field(default_factory=list)
    technologies: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    difficulty: SkillLevel = "intermediate"
    max_team_size: int = Field(5, ge=1, le=20)
    timeline: TimelineSchema = Field(default_factory=TimelineSchema)
    is_remote: bool = True

    class Config:
        json_schema_extra = {
            "example": {
                "title": "Open-source bike share map",
                "description": "Live availability map for community bike docks.",
                "category": "web-development",
                "max_team_size": 4,
                "required_skills": [{"name": "React", "level": "intermediate"}],
            }
        }


class ProjectUpdateRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, min_length=1, max_length=2000)
    short_description: Optional[str] = Field(None, max_length=200)
    category: Optional[ProjectCategory] = None
    status: Optional[ProjectStatusValue] = None
    required_skills: Optional[List[RequiredSkillSchema]] = None
    technologies: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    difficulty: Optional[SkillLevel] = None
    max_team_size: Optional[int] = Field(None, ge=1, le=20)
    timeline: Optional[TimelineSchema] = None
    is_remote: Optional[bool] = None


class TeamMemberAddRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    user_id: str = Field(..., description="User to add to the team")
    role: str = Field(..., min_length=1, max_length=50)


class TeamMemberSchema(BaseModel):
    user_id: str
    role: str
    joined_at: datetime
    status: str


class ProjectResponse(BaseModel):
    id: str
    title: str
    description: str
    short_description: Optional[str] = None
    owner_id: str
    category: str
    status: str
    required_skills: List[RequiredSkillSchema]
    technologies: List[str]
    tags: List[str]
    difficulty: str
    max_team_size: int
    timeline: TimelineSchema
    is_remote: bool
    featured: bool
    views: int
    team_members: List[TeamMemberSchema]
    current_team_size: int
    available_spots: int
    duration_in_days: Optional[int] = None
    progress: int
    created_at: datetime
    updated_at: datetime


class ProjectStatsResponse(BaseModel):
    total_projects: int
    by_status: Dict[str, int]
    by_category: Dict[str, int]
    top_technologies: List[NameCountSchema]


# ---------------------------------------------------------------------------
# Applications
# ---------------------------------------------------------------------------

class SkillOfferSchema(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    level: SkillLevel = "intermediate"


class AvailabilitySchema(BaseModel):
    hours_per_week: int = Field(..., ge=1, le=168)
    start_date: datetime
    end_date: Optional[datetime] = None

    @model_validator(mode="after")
    def check_order(self) -> "AvailabilitySchema":
        if self.end_date and ensure_aware(self.end_date) <= ensure_aware(self.start_date):
            raise ValueError("End date must be after start date")
        return self


class CompensationSchema(BaseModel):
    amount: Optional[float] = Field(None, ge=0)
    currency: str = Field("USD", min_length=3, max_length=3)
    type: Literal["hourly", "fixed", "equity", "volunteer"] = "hourly"


class ApplicationCreateRequest(BaseModel):
    """DTO for applying to a project. The requester is the applicant."""
    project_id: str
    cover_letter: str = Field(..., min_length=1, max_length=2000)
    proposed_role: str = Field(..., min_length=1, max_length=100)
    skills_offered: List[SkillOfferSchema] = Field(default_factory=list)
    availability: AvailabilitySchema
    expected_compensation: Optional[CompensationSchema] = None

    class Config:
        json_schema_extra = {
            "example": {
                "project_id": "6650c0ffee00000000000001",
                "cover_letter": "I have built two map frontends with Leaflet.",
                "proposed_role": "Frontend developer",
                "availability": {"hours_per_week": 10, "start_date": "2025-01-06T00:00:00Z"},
            }
        }


class ApplicationUpdateRequest(BaseModel):
    """Applicant edits, accepted only while the application is pending."""
    cover_letter: Optional[str] = Field(None, min_length=1, max_length=2000)
    proposed_role: Optional[str] = Field(None, min_length=1, max_length=100)
    skills_offered: Optional[List[SkillOfferSchema]] = None
    availability: Optional[AvailabilitySchema] = None
    expected_compensation: Optional[CompensationSchema] = None


class ApplicationStatusRequest(BaseModel):
    status: ApplicationTarget
    review_notes: Optional[str] = Field(None, max_length=1000)


class ApplicationResponse(BaseModel):
    id: str
    project_id: str
    applicant_id: str
    cover_letter: str
    proposed_role: str
    skills_offered: List[SkillOfferSchema]
    availability: AvailabilitySchema
    expected_compensation: Optional[CompensationSchema] = None
    status: str
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    review_notes: Optional[str] = None
    days_old: int
    created_at: datetime
    updated_at: datetime


# ---------------------------------------------------------------------------
# Reviews
# ---------------------------------------------------------------------------

class CategoryRatingsSchema(BaseModel):
    communication: Optional[int] = Field(None, ge=1, le=5)
    technical_skills: Optional[int] = Field(None, ge=1, le=5)
    reliability: Optional[int] = Field(None, ge=1, le=5)
    teamwork: Optional[int] = Field(None, ge=1, le=5)
    quality: Optional[int] = Field(None, ge=1, le=5)


class ReviewCreateRequest(BaseModel):
    """DTO for reviewing a fellow participant. The requester is the reviewer."""
    project_id: str
    reviewee_id: str
    rating: int = Field(..., ge=1, le=5)
    title: str = Field(..., min_length=1, max_length=100)
    comment: str = Field(..., min_length=1, max_length=2000)
    categories: CategoryRatingsSchema = Field(default_factory=CategoryRatingsSchema)
    pros: List[str] = Field(default_factory=list)
    cons: List[str] = Field(default_factory=list)
    would_work_again: bool = True
    is_public: bool = True

    class Config:
        json_schema_extra = {
            "example": {
                "project_id": "6650c0ffee00000000000001",
                "reviewee_id": "6650c0ffee00000000000002",
                "rating": 5,
                "title": "Great collaborator",
                "comment": "Shipped the map layer a week early.",
            }
        }


class ReviewUpdateRequest(BaseModel):
    """Reviewer edits. project, reviewer and reviewee cannot be changed."""
    rating: Optional[int] = Field(None, ge=1, le=5)
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    comment: Optional[str] = Field(None, min_length=1, max_length=2000)
    categories: Optional[CategoryRatingsSchema] = None
    pros: Optional[List[str]] = None
    cons: Optional[List[str]] = None
    would_work_again: Optional[bool] = None
    is_public: Optional[bool] = None
    # Accepted only so that an attempt to change them is reported as a domain error
    project_id: Optional[str] = None
    reviewer_id: Optional[str] = None
    reviewee_id: Optional[str] = None


class ReviewResponseRequest(BaseModel):
    content: str = Field(..., min_length=1, max_length=1000)


class ReviewReplySchema(BaseModel):
    content: str
    responded_at: datetime


class ReviewResponse(BaseModel):
    id: str
    project_id: str
    reviewer_id: str
    reviewee_id: str
    rating: int
    title: str
    comment: str
    categories: CategoryRatingsSchema
    avg_category_rating: Optional[float] = None
    pros: List[str]
    cons: List[str]
    would_work_again: bool
    is_public: bool
    is_verified: bool
    response: Optional[ReviewReplySchema] = None
    helpful_count: int
    created_at: datetime
    updated_at: datetime


class RatingStatsSchema(BaseModel):
    avg_rating: float
    total_reviews: int


class UserReviewsResponse(BaseModel):
    """Reviews received by a user, with rating statistics over the public ones."""
    success: bool = True
    data: List[ReviewResponse]
    stats: RatingStatsSchema
    pagination: PaginationMeta
