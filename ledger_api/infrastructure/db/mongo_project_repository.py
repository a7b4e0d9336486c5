"""
MongoDB Project Repository
==========================

Concrete implementation of ProjectRepository using MongoDB.

Team entries live in an embedded array. Adding a member is one conditional
update that checks both "no active entry for this user" and "active count
below max_team_size", so two concurrent joins cannot overfill the team.
"""
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from pymongo import ReturnDocument

from ledger_api.domain.constants.marketplace_fields import ProjectFields, TeamMemberFields
from ledger_api.domain.errors import NotFound
from ledger_api.domain.models.project import (
    Project,
    ProjectStatus,
    RequiredSkill,
    TeamMember,
    TeamMemberStatus,
    Timeline,
)
from ledger_api.domain.repositories.project_repository import ProjectQuery, ProjectRepository, ProjectStats
from ledger_api.infrastructure.db.mongo_base import MongoRepository, icontains
from ledger_api.utils.datetime_utils import ensure_aware, now

# Fields written only by the team and view operations
_LEDGER_FIELDS = {ProjectFields.TEAM_MEMBERS, ProjectFields.VIEWS, ProjectFields.CREATED_AT}


def _active_entry_of(user_id: str) -> Dict[str, Any]:
    return {"$elemMatch": {TeamMemberFields.USER_ID: user_id, TeamMemberFields.STATUS: TeamMemberStatus.ACTIVE}}


class MongoProjectRepository(MongoRepository, ProjectRepository):
    """MongoDB implementation of ProjectRepository."""

    COLLECTION_NAME = "projects"

    def ensure_indexes(self) -> None:
        super().ensure_indexes()
        self._collection.create_index(ProjectFields.OWNER_ID)
        self._collection.create_index([(ProjectFields.STATUS, 1), (ProjectFields.CATEGORY, 1)])

    def _to_entity(self, doc: dict) -> Project:
        """Convert MongoDB document to Project entity."""
        timeline = doc.get(ProjectFields.TIMELINE) or {}
        return Project(
            id=doc[ProjectFields.ID],
            title=doc[ProjectFields.TITLE],
            description=doc[ProjectFields.DESCRIPTION],
            owner_id=doc[ProjectFields.OWNER_ID],
            category=doc[ProjectFields.CATEGORY],
            short_description=doc.get(ProjectFields.SHORT_DESCRIPTION),
            status=doc.get(ProjectFields.STATUS, ProjectStatus.PLANNING),
            required_skills=[RequiredSkill(**s) for s in doc.get(ProjectFields.REQUIRED_SKILLS, [])],
            technologies=doc.get(ProjectFields.TECHNOLOGIES, []),
            tags=doc.get(ProjectFields.TAGS, []),
            difficulty=doc.get(ProjectFields.DIFFICULTY, "intermediate"),
            max_team_size=doc.get(ProjectFields.MAX_TEAM_SIZE, 5),
            timeline=Timeline(
                start_date=ensure_aware(timeline.get("start_date")),
                end_date=ensure_aware(timeline.get("end_date")),
                estimated_duration_weeks=timeline.get("estimated_duration_weeks"),
            ),
            is_remote=doc.get(ProjectFields.IS_REMOTE, True),
            featured=doc.get(ProjectFields.FEATURED, False),
            views=doc.get(ProjectFields.VIEWS, 0),
            team_members=[
                TeamMember(
                    user_id=m[TeamMemberFields.USER_ID],
                    role=m[TeamMemberFields.ROLE],
                    joined_at=ensure_aware(m[TeamMemberFields.JOINED_AT]),
                    status=m.get(TeamMemberFields.STATUS, TeamMemberStatus.ACTIVE),
                )
                for m in doc.get(ProjectFields.TEAM_MEMBERS, [])
            ],
            created_at=ensure_aware(doc.get(ProjectFields.CREATED_AT)) or now(),
            updated_at=ensure_aware(doc.get(ProjectFields.UPDATED_AT)) or now(),
        )

    def _to_document(self, project: Project) -> dict:
        """Convert Project entity to MongoDB document."""
        return asdict(project)

    @staticmethod
    def _filter(query: ProjectQuery) -> Dict[str, Any]:
        conditions: Dict[str, Any] = {}
        if query.status:
            conditions[ProjectFields.STATUS] = query.status
        if query.category:
            conditions[ProjectFields.CATEGORY] = query.category
        if query.owner_id:
            conditions[ProjectFields.OWNER_ID] = query.owner_id
        if query.difficulty:
            conditions[ProjectFields.DIFFICULTY] = query.difficulty
        if query.skills:
            conditions[f"{ProjectFields.REQUIRED_SKILLS}.name"] = {"$in": query.skills}
        if query.search:
            conditions["$or"] = [
                {ProjectFields.TITLE: icontains(query.search)},
                {ProjectFields.DESCRIPTION: icontains(query.search)},
                {ProjectFields.TECHNOLOGIES: icontains(query.search)},
                {ProjectFields.TAGS: icontains(query.search)},
            ]
        return conditions

    def create(self, project: Project) -> Project:
        self._collection.insert_one(self._to_document(project))
        return project

    def update(self, project: Project) -> Project:
        """Update descriptive fields; team entries and view count are left alone."""
        project.updated_at = now()
        doc = self._to_document(project)
        result = self._collection.find_one_and_update(
            self._by_id(project.id),
            {"$set": {k: v for k, v in doc.items() if k not in _LEDGER_FIELDS}},
            return_document=ReturnDocument.AFTER,
        )

        if not result:
            raise NotFound("Project", project.id)

        return self._to_entity(result)

    def find_by_id(self, project_id: str) -> Optional[Project]:
        doc = self._find_doc(project_id)
        if not doc:
            return None
        return self._to_entity(doc)

    def find_page(self, query: ProjectQuery, skip: int, limit: int) -> List[Project]:
        docs = (
            self._collection.find(self._filter(query))
            .sort([(ProjectFields.FEATURED, -1), (ProjectFields.CREATED_AT, -1)])
            .skip(skip)
            .limit(limit)
        )
        return [self._to_entity(doc) for doc in docs]

    def count(self, query: ProjectQuery) -> int:
        return self._collection.count_documents(self._filter(query))

    def add_team_member(self, project_id: str, member: TeamMember) -> Optional[Project]:
        """Push an active entry if the user has none and a spot is free."""
        active_count = {
            "$size": {
                "$filter": {
                    "input": {"$ifNull": [f"${ProjectFields.TEAM_MEMBERS}", []]},
                    "as": "m",
                    "cond": {"$eq": [f"$$m.{TeamMemberFields.STATUS}", TeamMemberStatus.ACTIVE]},
                }
            }
        }
        result = self._collection.find_one_and_update(
            {
                ProjectFields.ID: project_id,
                ProjectFields.TEAM_MEMBERS: {"$not": _active_entry_of(member.user_id)},
                "$expr": {"$lt": [active_count, f"${ProjectFields.MAX_TEAM_SIZE}"]},
            },
            {
                "$push": {ProjectFields.TEAM_MEMBERS: asdict(member)},
                "$set": {ProjectFields.UPDATED_AT: member.joined_at},
            },
            return_document=ReturnDocument.AFTER,
        )
        return self._to_entity(result) if result else None

    def remove_team_member(self, project_id: str, user_id: str) -> Optional[Project]:
        """Flip the user's active entry to removed."""
        team = ProjectFields.TEAM_MEMBERS
        result = self._collection.find_one_and_update(
            {ProjectFields.ID: project_id, team: _active_entry_of(user_id)},
            {
                "$set": {
                    f"{team}.$.{TeamMemberFields.STATUS}": TeamMemberStatus.REMOVED,
                    ProjectFields.UPDATED_AT: now(),
                }
            },
            return_document=ReturnDocument.AFTER,
        )
        return self._to_entity(result) if result else None

    def increment_views(self, project_id: str) -> None:
        self._collection.update_one(self._by_id(project_id), {"$inc": {ProjectFields.VIEWS: 1}})

    def stats(self, top: int = 10) -> ProjectStats:
        return ProjectStats(
            total_projects=self._collection.count_documents({}),
            by_status=dict(self._count_by(ProjectFields.STATUS)),
            by_category=dict(self._count_by(ProjectFields.CATEGORY)),
            top_technologies=self._count_by(
                ProjectFields.TECHNOLOGIES, unwind=ProjectFields.TECHNOLOGIES, top=top
            ),
        )
