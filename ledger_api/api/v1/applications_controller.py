"""
Application Controller
======================

FastAPI controller for applications to join a project.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from ledger_api.api.v1.dependencies import (
    PageParams,
    get_application_service,
    get_current_user_id,
    get_page_params,
)
from ledger_api.api.v1.error_handlers import ERROR_RESPONSES
from ledger_api.api.v1.presenters import application_response
from ledger_api.application.dto.common_dto import DataResponse, MessageResponse, PageResponse, pagination_of
from ledger_api.application.dto.marketplace_dto import (
    ApplicationCreateRequest,
    ApplicationResponse,
    ApplicationStatusRequest,
    ApplicationUpdateRequest,
)
from ledger_api.application.services.application_service import ApplicationService
from ledger_api.domain.repositories.application_repository import ApplicationQuery

router = APIRouter(tags=["applications"], responses=ERROR_RESPONSES)


def _page_response(page) -> PageResponse[ApplicationResponse]:
    return PageResponse[ApplicationResponse](
        data=[application_response(a) for a in page.items],
        pagination=pagination_of(page),
    )


@router.get(
    "",
    response_model=PageResponse[ApplicationResponse],
    summary="List applications",
    dependencies=[Depends(get_current_user_id)],
)
async def list_applications(
    status_filter: Optional[str] = Query(None, alias="status"),
    project_id: Optional[str] = None,
    applicant_id: Optional[str] = None,
    paging: PageParams = Depends(get_page_params),
    service: ApplicationService = Depends(get_application_service),
) -> PageResponse[ApplicationResponse]:
    query = ApplicationQuery(status=status_filter, project_id=project_id, applicant_id=applicant_id)
    return _page_response(service.list_applications(query, paging.page, paging.limit))


@router.get("/mine", response_model=PageResponse[ApplicationResponse], summary="Applications sent by the requester")
async def list_my_applications(
    status_filter: Optional[str] = Query(None, alias="status"),
    paging: PageParams = Depends(get_page_params),
    requester_id: str = Depends(get_current_user_id),
    service: ApplicationService = Depends(get_application_service),
) -> PageResponse[ApplicationResponse]:
    query = ApplicationQuery(status=status_filter, applicant_id=requester_id)
    return _page_response(service.list_applications(query, paging.page, paging.limit))


@router.get(
    "/project/{project_id}",
    response_model=PageResponse[ApplicationResponse],
    summary="Applications received by a project",
    description="Only the project owner can list them.",
)
async def list_project_applications(
    project_id: str,
    status_filter: Optional[str] = Query(None, alias="status"),
    paging: PageParams = Depends(get_page_params),
    requester_id: str = Depends(get_current_user_id),
    service: ApplicationService = Depends(get_application_service),
) -> PageResponse[ApplicationResponse]:
    page = service.list_for_project(project_id, requester_id, status_filter, paging.page, paging.limit)
    return _page_response(page)


@router.get(
    "/{application_id}",
    response_model=DataResponse[ApplicationResponse],
    summary="Get application by ID",
    dependencies=[Depends(get_current_user_id)],
)
async def get_application(
    application_id: str,
    service: ApplicationService = Depends(get_application_service),
) -> DataResponse[ApplicationResponse]:
    application = service.get_application(application_id)
    return DataResponse[ApplicationResponse](data=application_response(application))


@router.post(
    "",
    response_model=DataResponse[ApplicationResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Apply to a project",
    description="A user can apply to a given project only once (409 otherwise).",
)
async def create_application(
    request: ApplicationCreateRequest,
    requester_id: str = Depends(get_current_user_id),
    service: ApplicationService = Depends(get_application_service),
) -> DataResponse[ApplicationResponse]:
    application = service.create_application(requester_id, request.model_dump())
    return DataResponse[ApplicationResponse](
        message="Application submitted successfully",
        data=application_response(application),
    )


@router.put(
    "/{application_id}",
    response_model=DataResponse[ApplicationResponse],
    summary="Edit a pending application",
)
async def update_application(
    application_id: str,
    request: ApplicationUpdateRequest,
    requester_id: str = Depends(get_current_user_id),
    service: ApplicationService = Depends(get_application_service),
) -> DataResponse[ApplicationResponse]:
    application = service.update_application(
        application_id, requester_id, request.model_dump(exclude_unset=True)
    )
    return DataResponse[ApplicationResponse](
        message="Application updated successfully",
        data=application_response(application),
    )


@router.put(
    "/{application_id}/status",
    response_model=DataResponse[ApplicationResponse],
    summary="Decide on an application",
    description="""
    Project owner only. Allowed moves:

    - pending -> under-review | accepted | rejected | withdrawn
    - under-review -> accepted | rejected | withdrawn

    accepted, rejected and withdrawn are final; anything else is answered with 409.
    """,
)
async def update_application_status(
    application_id: str,
    request: ApplicationStatusRequest,
    requester_id: str = Depends(get_current_user_id),
    service: ApplicationService = Depends(get_application_service),
) -> DataResponse[ApplicationResponse]:
    application = service.update_status(application_id, request.status, requester_id, request.review_notes)
    return DataResponse[ApplicationResponse](
        message=f"Application {application.status}",
        data=application_response(application),
    )


@router.delete("/{application_id}", response_model=MessageResponse, summary="Delete an application")
async def delete_application(
    application_id: str,
    requester_id: str = Depends(get_current_user_id),
    service: ApplicationService = Depends(get_application_service),
) -> MessageResponse:
    service.delete_application(application_id, requester_id)
    return MessageResponse(message="Application deleted successfully")
