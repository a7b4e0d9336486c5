"""
Project Controller
==================

FastAPI controller for collaboration projects and their teams.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from ledger_api.api.v1.dependencies import (
    PageParams,
    get_current_user_id,
    get_page_params,
    get_project_service,
)
from ledger_api.api.v1.error_handlers import ERROR_RESPONSES
from ledger_api.api.v1.presenters import project_response, project_stats_response
from ledger_api.application.dto.common_dto import DataResponse, PageResponse, pagination_of
from ledger_api.application.dto.marketplace_dto import (
    ProjectCreateRequest,
    ProjectResponse,
    ProjectStatsResponse,
    ProjectUpdateRequest,
    TeamMemberAddRequest,
)
from ledger_api.application.services.project_service import ProjectService
from ledger_api.domain.repositories.project_repository import ProjectQuery

router = APIRouter(tags=["projects"], responses=ERROR_RESPONSES)


@router.get(
    "",
    response_model=PageResponse[ProjectResponse],
    summary="List projects",
    description="Featured projects first, then newest first.",
)
async def list_projects(
    status_filter: Optional[str] = Query(None, alias="status"),
    category: Optional[str] = None,
    owner_id: Optional[str] = None,
    difficulty: Optional[str] = None,
    skills: Optional[List[str]] = Query(None, description="Required skill names (any match)"),
    search: Optional[str] = None,
    paging: PageParams = Depends(get_page_params),
    service: ProjectService = Depends(get_project_service),
) -> PageResponse[ProjectResponse]:
    query = ProjectQuery(
        status=status_filter,
        category=category,
        owner_id=owner_id,
        difficulty=difficulty,
        skills=skills or [],
        search=search,
    )
    page = service.list_projects(query, paging.page, paging.limit)
    return PageResponse[ProjectResponse](
        data=[project_response(p) for p in page.items],
        pagination=pagination_of(page),
    )


@router.get("/mine", response_model=PageResponse[ProjectResponse], summary="Projects owned by the requester")
async def list_my_projects(
    requester_id: str = Depends(get_current_user_id),
    paging: PageParams = Depends(get_page_params),
    service: ProjectService = Depends(get_project_service),
) -> PageResponse[ProjectResponse]:
    page = service.list_projects(ProjectQuery(owner_id=requester_id), paging.page, paging.limit)
    return PageResponse[ProjectResponse](
        data=[project_response(p) for p in page.items],
        pagination=pagination_of(page),
    )


@router.get(
    "/stats",
    response_model=DataResponse[ProjectStatsResponse],
    summary="Project statistics",
    description="Totals by status and category, plus the ten most used technologies.",
    dependencies=[Depends(get_current_user_id)],
)
async def get_project_stats(
    service: ProjectService = Depends(get_project_service),
) -> DataResponse[ProjectStatsResponse]:
    return DataResponse[ProjectStatsResponse](data=project_stats_response(service.get_stats()))


@router.get("/{project_id}", response_model=DataResponse[ProjectResponse], summary="Get project by ID")
async def get_project(
    project_id: str,
    service: ProjectService = Depends(get_project_service),
) -> DataResponse[ProjectResponse]:
    """Fetch a project. Each fetch counts as one view."""
    return DataResponse[ProjectResponse](data=project_response(service.view_project(project_id)))


@router.post(
    "",
    response_model=DataResponse[ProjectResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create a project",
)
async def create_project(
    request: ProjectCreateRequest,
    requester_id: str = Depends(get_current_user_id),
    service: ProjectService = Depends(get_project_service),
) -> DataResponse[ProjectResponse]:
    project = service.create_project(requester_id, request.model_dump())
    return DataResponse[ProjectResponse](message="Project created successfully", data=project_response(project))


@router.put("/{project_id}", response_model=DataResponse[ProjectResponse], summary="Update a project")
async def update_project(
    project_id: str,
    request: ProjectUpdateRequest,
    requester_id: str = Depends(get_current_user_id),
    service: ProjectService = Depends(get_project_service),
) -> DataResponse[ProjectResponse]:
    project = service.update_project(project_id, requester_id, request.model_dump(exclude_unset=True))
    return DataResponse[ProjectResponse](message="Project updated successfully", data=project_response(project))


@router.delete(
    "/{project_id}",
    response_model=DataResponse[ProjectResponse],
    summary="Cancel a project",
    description="Projects are cancelled rather than erased so team history survives.",
)
async def delete_project(
    project_id: str,
    requester_id: str = Depends(get_current_user_id),
    service: ProjectService = Depends(get_project_service),
) -> DataResponse[ProjectResponse]:
    project = service.delete_project(project_id, requester_id)
    return DataResponse[ProjectResponse](message="Project cancelled successfully", data=project_response(project))


@router.post(
    "/{project_id}/team",
    response_model=DataResponse[ProjectResponse],
    summary="Add a team member",
    description="""
    Owner only. Fails with 409 when the user is already an active member
    or the team is at max_team_size. Removed members do not count.
    """,
)
async def add_team_member(
    project_id: str,
    request: TeamMemberAddRequest,
    requester_id: str = Depends(get_current_user_id),
    service: ProjectService = Depends(get_project_service),
) -> DataResponse[ProjectResponse]:
    project = service.add_team_member(project_id, request.user_id, request.role, requester_id)
    return DataResponse[ProjectResponse](message="Team member added successfully", data=project_response(project))


@router.delete(
    "/{project_id}/team/{user_id}",
    response_model=DataResponse[ProjectResponse],
    summary="Remove a team member",
)
async def remove_team_member(
    project_id: str,
    user_id: str,
    requester_id: str = Depends(get_current_user_id),
    service: ProjectService = Depends(get_project_service),
) -> DataResponse[ProjectResponse]:
    project = service.remove_team_member(project_id, user_id, requester_id)
    return DataResponse[ProjectResponse](message="Team member removed successfully", data=project_response(project))
