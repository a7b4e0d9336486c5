"""
Contact Controller
==================

FastAPI controller for the address book.
"""
from fastapi import APIRouter, Depends, status

from ledger_api.api.v1.dependencies import PageParams, get_contact_service, get_page_params
from ledger_api.api.v1.error_handlers import ERROR_RESPONSES
from ledger_api.api.v1.presenters import contact_response
from ledger_api.application.dto.common_dto import DataResponse, MessageResponse, PageResponse, pagination_of
from ledger_api.application.dto.contact_dto import ContactCreateRequest, ContactResponse, ContactUpdateRequest
from ledger_api.application.services.contact_service import ContactService

router = APIRouter(tags=["contacts"], responses=ERROR_RESPONSES)


@router.get("", response_model=PageResponse[ContactResponse], summary="List contacts")
async def list_contacts(
    paging: PageParams = Depends(get_page_params),
    service: ContactService = Depends(get_contact_service),
) -> PageResponse[ContactResponse]:
    page = service.list_contacts(paging.page, paging.limit)
    return PageResponse[ContactResponse](
        data=[contact_response(c) for c in page.items],
        pagination=pagination_of(page),
    )


@router.get("/{contact_id}", response_model=DataResponse[ContactResponse], summary="Get contact by ID")
async def get_contact(
    contact_id: str,
    service: ContactService = Depends(get_contact_service),
) -> DataResponse[ContactResponse]:
    return DataResponse[ContactResponse](data=contact_response(service.get_contact(contact_id)))


@router.post(
    "",
    response_model=DataResponse[ContactResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create a contact",
)
async def create_contact(
    request: ContactCreateRequest,
    service: ContactService = Depends(get_contact_service),
) -> DataResponse[ContactResponse]:
    contact = service.create_contact(request.model_dump())
    return DataResponse[ContactResponse](message="Contact created successfully", data=contact_response(contact))


@router.put("/{contact_id}", response_model=DataResponse[ContactResponse], summary="Update a contact")
async def update_contact(
    contact_id: str,
    request: ContactUpdateRequest,
    service: ContactService = Depends(get_contact_service),
) -> DataResponse[ContactResponse]:
    contact = service.update_contact(contact_id, request.model_dump(exclude_unset=True))
    return DataResponse[ContactResponse](message="Contact updated successfully", data=contact_response(contact))


@router.delete("/{contact_id}", response_model=MessageResponse, summary="Delete a contact")
async def delete_contact(
    contact_id: str,
    service: ContactService = Depends(get_contact_service),
) -> MessageResponse:
    service.delete_contact(contact_id)
    return MessageResponse(message="Contact deleted successfully")
