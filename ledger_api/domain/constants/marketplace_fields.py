"""Constants for marketplace document field names"""


class UserFields:
    ID = "id"
    NAME = "name"
    EMAIL = "email"
    BIO = "bio"
    SKILLS = "skills"
    EXPERIENCE_LEVEL = "experience_level"
    LOCATION = "location"
    WEBSITE = "website"
    GITHUB = "github"
    IS_AVAILABLE = "is_available"
    PREFERRED_PROJECT_TYPES = "preferred_project_types"
    HOURLY_RATE = "hourly_rate"
    LANGUAGES = "languages"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


class ProjectFields:
    ID = "id"
    TITLE = "title"
    DESCRIPTION = "description"
    SHORT_DESCRIPTION = "short_description"
    OWNER_ID = "owner_id"
    CATEGORY = "category"
    STATUS = "status"
    REQUIRED_SKILLS = "required_skills"
    TECHNOLOGIES = "technologies"
    TAGS = "tags"
    DIFFICULTY = "difficulty"
    MAX_TEAM_SIZE = "max_team_size"
    TIMELINE = "timeline"
    IS_REMOTE = "is_remote"
    FEATURED = "featured"
    VIEWS = "views"
    TEAM_MEMBERS = "team_members"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


class TeamMemberFields:
    USER_ID = "user_id"
    ROLE = "role"
    JOINED_AT = "joined_at"
    STATUS = "status"


class ApplicationFields:
    ID = "id"
    PROJECT_ID = "project_id"
    APPLICANT_ID = "applicant_id"
    COVER_LETTER = "cover_letter"
    PROPOSED_ROLE = "proposed_role"
    SKILLS_OFFERED = "skills_offered"
    AVAILABILITY = "availability"
    EXPECTED_COMPENSATION = "expected_compensation"
    STATUS = "status"
    REVIEWED_BY = "reviewed_by"
    REVIEWED_AT = "reviewed_at"
    REVIEW_NOTES = "review_notes"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


class ReviewFields:
    ID = "id"
    PROJECT_ID = "project_id"
    REVIEWER_ID = "reviewer_id"
    REVIEWEE_ID = "reviewee_id"
    RATING = "rating"
    TITLE = "title"
    COMMENT = "comment"
    CATEGORIES = "categories"
    PROS = "pros"
    CONS = "cons"
    WOULD_WORK_AGAIN = "would_work_again"
    IS_PUBLIC = "is_public"
    IS_VERIFIED = "is_verified"
    RESPONSE = "response"
    HELPFUL_COUNT = "helpful_count"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


class ContactFields:
    ID = "id"
    FIRST_NAME = "first_name"
    LAST_NAME = "last_name"
    EMAIL = "email"
    FAVORITE_COLOR = "favorite_color"
    BIRTHDAY = "birthday"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"
