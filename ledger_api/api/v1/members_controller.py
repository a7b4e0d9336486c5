"""
Member Controller
=================

FastAPI controller for library members and the borrow/return operations.
"""
from typing import Optional

from fastapi import APIRouter, Depends, status

from ledger_api.api.v1.dependencies import PageParams, get_member_service, get_page_params
from ledger_api.api.v1.error_handlers import ERROR_RESPONSES
from ledger_api.api.v1.presenters import book_response, borrow_record_response, member_response
from ledger_api.application.dto.common_dto import DataResponse, MessageResponse, PageResponse, pagination_of
from ledger_api.application.dto.library_dto import (
    LoanResponse,
    MemberCreateRequest,
    MemberResponse,
    MemberUpdateRequest,
)
from ledger_api.application.services.member_service import MemberService
from ledger_api.application.use_cases.library.borrow_book import Loan
from ledger_api.domain.repositories.member_repository import MemberQuery

router = APIRouter(tags=["members"], responses=ERROR_RESPONSES)


def _loan_response(loan: Loan) -> LoanResponse:
    return LoanResponse(
        member=member_response(loan.member),
        book=book_response(loan.book),
        record=borrow_record_response(loan.record),
    )


@router.get("", response_model=PageResponse[MemberResponse], summary="List members")
async def list_members(
    membership_type: Optional[str] = None,
    is_active: Optional[bool] = None,
    paging: PageParams = Depends(get_page_params),
    service: MemberService = Depends(get_member_service),
) -> PageResponse[MemberResponse]:
    page = service.list_members(
        MemberQuery(membership_type=membership_type, is_active=is_active),
        paging.page,
        paging.limit,
    )
    return PageResponse[MemberResponse](
        data=[member_response(m) for m in page.items],
        pagination=pagination_of(page),
    )


@router.get("/{member_id}", response_model=DataResponse[MemberResponse], summary="Get member by ID")
async def get_member(
    member_id: str,
    service: MemberService = Depends(get_member_service),
) -> DataResponse[MemberResponse]:
    return DataResponse[MemberResponse](data=member_response(service.get_member(member_id)))


@router.post(
    "",
    response_model=DataResponse[MemberResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Register a member",
)
async def create_member(
    request: MemberCreateRequest,
    service: MemberService = Depends(get_member_service),
) -> DataResponse[MemberResponse]:
    member = service.create_member(request.model_dump())
    return DataResponse[MemberResponse](message="Member created successfully", data=member_response(member))


@router.put("/{member_id}", response_model=DataResponse[MemberResponse], summary="Update a member")
async def update_member(
    member_id: str,
    request: MemberUpdateRequest,
    service: MemberService = Depends(get_member_service),
) -> DataResponse[MemberResponse]:
    """Update profile fields. The borrow ledger can only change through borrow/return."""
    member = service.update_member(member_id, request.model_dump(exclude_unset=True))
    return DataResponse[MemberResponse](message="Member updated successfully", data=member_response(member))


@router.delete(
    "/{member_id}",
    response_model=MessageResponse,
    summary="Delete a member",
    description="Refused while the member holds unreturned books.",
)
async def delete_member(
    member_id: str,
    service: MemberService = Depends(get_member_service),
) -> MessageResponse:
    service.delete_member(member_id)
    return MessageResponse(message="Member deleted successfully")


@router.post(
    "/{member_id}/borrow/{book_id}",
    response_model=DataResponse[LoanResponse],
    summary="Borrow a book",
    description="""
    Lend one copy of a book to a member.

    1. The book must exist, not be archived and have a copy available (409 otherwise)
    2. The member must not already hold an unreturned copy of the same book (409)
    3. due_date is borrow_date plus the loan period
    """,
)
async def borrow_book(
    member_id: str,
    book_id: str,
    service: MemberService = Depends(get_member_service),
) -> DataResponse[LoanResponse]:
    loan = service.borrow_book(member_id, book_id)
    return DataResponse[LoanResponse](message="Book borrowed successfully", data=_loan_response(loan))


@router.post(
    "/{member_id}/return/{book_id}",
    response_model=DataResponse[LoanResponse],
    summary="Return a book",
)
async def return_book(
    member_id: str,
    book_id: str,
    service: MemberService = Depends(get_member_service),
) -> DataResponse[LoanResponse]:
    loan = service.return_book(member_id, book_id)
    return DataResponse[LoanResponse](message="Book returned successfully", data=_loan_response(loan))
