"""
MongoDB Application Repository
==============================

Concrete implementation of ApplicationRepository using MongoDB.
A unique compound index on (project_id, applicant_id) enforces one
application per user per project.
"""
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from ledger_api.domain.constants.marketplace_fields import ApplicationFields
from ledger_api.domain.errors import AlreadyApplied
from ledger_api.domain.models.application import (
    EDITABLE_FIELDS,
    Application,
    ApplicationStatus,
    Availability,
    Compensation,
    SkillOffer,
)
from ledger_api.domain.repositories.application_repository import (
    ApplicationQuery,
    ApplicationRepository,
)
from ledger_api.infrastructure.db.mongo_base import MongoRepository
from ledger_api.utils.datetime_utils import ensure_aware, now

_STATUS_FIELDS = (
    ApplicationFields.STATUS,
    ApplicationFields.REVIEWED_BY,
    ApplicationFields.REVIEWED_AT,
    ApplicationFields.REVIEW_NOTES,
    ApplicationFields.UPDATED_AT,
)

_EDITABLE_FIELDS = tuple(sorted(EDITABLE_FIELDS)) + (ApplicationFields.UPDATED_AT,)


class MongoApplicationRepository(MongoRepository, ApplicationRepository):
    """MongoDB implementation of ApplicationRepository."""

    COLLECTION_NAME = "applications"

    def ensure_indexes(self) -> None:
        super().ensure_indexes()
        self._collection.create_index(
            [(ApplicationFields.PROJECT_ID, 1), (ApplicationFields.APPLICANT_ID, 1)],
            unique=True,
        )

    def _to_entity(self, doc: dict) -> Application:
        """Convert MongoDB document to Application entity."""
        availability = doc[ApplicationFields.AVAILABILITY]
        compensation = doc.get(ApplicationFields.EXPECTED_COMPENSATION)
        return Application(
            id=doc[ApplicationFields.ID],
            project_id=doc[ApplicationFields.PROJECT_ID],
            applicant_id=doc[ApplicationFields.APPLICANT_ID],
            cover_letter=doc[ApplicationFields.COVER_LETTER],
            proposed_role=doc[ApplicationFields.PROPOSED_ROLE],
            availability=Availability(
                hours_per_week=availability["hours_per_week"],
                start_date=ensure_aware(availability["start_date"]),
                end_date=ensure_aware(availability.get("end_date")),
            ),
            skills_offered=[SkillOffer(**s) for s in doc.get(ApplicationFields.SKILLS_OFFERED, [])],
            expected_compensation=Compensation(**compensation) if compensation else None,
            status=doc[ApplicationFields.STATUS],
            reviewed_by=doc.get(ApplicationFields.REVIEWED_BY),
            reviewed_at=ensure_aware(doc.get(ApplicationFields.REVIEWED_AT)),
            review_notes=doc.get(ApplicationFields.REVIEW_NOTES),
            created_at=ensure_aware(doc.get(ApplicationFields.CREATED_AT)) or now(),
            updated_at=ensure_aware(doc.get(ApplicationFields.UPDATED_AT)) or now(),
        )

    def _to_document(self, application: Application) -> dict:
        return asdict(application)

    @staticmethod
    def _filter(query: ApplicationQuery) -> Dict[str, Any]:
        conditions: Dict[str, Any] = {}
        if query.status:
            conditions[ApplicationFields.STATUS] = query.status
        if query.project_id:
            conditions[ApplicationFields.PROJECT_ID] = query.project_id
        if query.applicant_id:
            conditions[ApplicationFields.APPLICANT_ID] = query.applicant_id
        return conditions

    def create(self, application: Application) -> Application:
        try:
            self._collection.insert_one(self._to_document(application))
        except DuplicateKeyError:
            raise AlreadyApplied("You have already applied to this project")
        return application

    def update(self, application: Application) -> Optional[Application]:
        """Persist applicant edits while the stored application is still pending."""
        doc = self._to_document(application)
        result = self._collection.find_one_and_update(
            {ApplicationFields.ID: application.id, ApplicationFields.STATUS: ApplicationStatus.PENDING},
            {"$set": {k: doc[k] for k in _EDITABLE_FIELDS}},
            return_document=ReturnDocument.AFTER,
        )
        return self._to_entity(result) if result else None

    def update_status(self, application: Application, expected_status: str) -> Optional[Application]:
        """Write the status fields only if the stored status still equals expected_status."""
        doc = self._to_document(application)
        result = self._collection.find_one_and_update(
            {ApplicationFields.ID: application.id, ApplicationFields.STATUS: expected_status},
            {"$set": {k: doc[k] for k in _STATUS_FIELDS}},
            return_document=ReturnDocument.AFTER,
        )
        return self._to_entity(result) if result else None

    def find_by_id(self, application_id: str) -> Optional[Application]:
        doc = self._find_doc(application_id)
        if not doc:
            return None
        return self._to_entity(doc)

    def find_by_project_and_applicant(self, project_id: str, applicant_id: str) -> Optional[Application]:
        doc = self._collection.find_one(
            {ApplicationFields.PROJECT_ID: project_id, ApplicationFields.APPLICANT_ID: applicant_id}
        )
        if not doc:
            return None
        return self._to_entity(doc)

    def find_page(self, query: ApplicationQuery, skip: int, limit: int) -> List[Application]:
        docs = (
            self._collection.find(self._filter(query))
            .sort(ApplicationFields.CREATED_AT, -1)
            .skip(skip)
            .limit(limit)
        )
        return [self._to_entity(doc) for doc in docs]

    def count(self, query: ApplicationQuery) -> int:
        return self._collection.count_documents(self._filter(query))

    def delete(self, application_id: str) -> bool:
        return self._delete_doc(application_id)
