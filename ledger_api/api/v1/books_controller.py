"""
Book Controller
===============

FastAPI controller for the book catalog.
"""
from typing import Optional

from fastapi import APIRouter, Depends, status

from ledger_api.api.v1.dependencies import PageParams, get_book_service, get_page_params
from ledger_api.api.v1.error_handlers import ERROR_RESPONSES
from ledger_api.api.v1.presenters import book_response
from ledger_api.application.dto.common_dto import DataResponse, PageResponse, pagination_of
from ledger_api.application.dto.library_dto import BookCreateRequest, BookResponse, BookUpdateRequest
from ledger_api.application.services.book_service import BookService
from ledger_api.domain.repositories.book_repository import BookQuery

router = APIRouter(tags=["books"], responses=ERROR_RESPONSES)


@router.get(
    "",
    response_model=PageResponse[BookResponse],
    summary="List books",
    description="Newest first. Archived books are hidden unless include_archived is set.",
)
async def list_books(
    genre: Optional[str] = None,
    author: Optional[str] = None,
    search: Optional[str] = None,
    include_archived: bool = False,
    paging: PageParams = Depends(get_page_params),
    service: BookService = Depends(get_book_service),
) -> PageResponse[BookResponse]:
    """List books with optional filters."""
    query = BookQuery(genre=genre, author=author, search=search, include_archived=include_archived)
    page = service.list_books(query, paging.page, paging.limit)
    return PageResponse[BookResponse](
        data=[book_response(book) for book in page.items],
        pagination=pagination_of(page),
    )


@router.get("/{book_id}", response_model=DataResponse[BookResponse], summary="Get book by ID")
async def get_book(
    book_id: str,
    service: BookService = Depends(get_book_service),
) -> DataResponse[BookResponse]:
    return DataResponse[BookResponse](data=book_response(service.get_book(book_id)))


@router.post(
    "",
    response_model=DataResponse[BookResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Add a book",
)
async def create_book(
    request: BookCreateRequest,
    service: BookService = Depends(get_book_service),
) -> DataResponse[BookResponse]:
    """Add a book. available_copies defaults to total_copies."""
    book = service.create_book(request.model_dump())
    return DataResponse[BookResponse](message="Book created successfully", data=book_response(book))


@router.put(
    "/{book_id}",
    response_model=DataResponse[BookResponse],
    summary="Update a book",
    description="""
    Partial update. Changing total_copies keeps the copies on loan out:
    available_copies moves by the same amount unless given explicitly.
    """,
)
async def update_book(
    book_id: str,
    request: BookUpdateRequest,
    service: BookService = Depends(get_book_service),
) -> DataResponse[BookResponse]:
    book = service.update_book(book_id, request.model_dump(exclude_unset=True))
    return DataResponse[BookResponse](message="Book updated successfully", data=book_response(book))


@router.delete(
    "/{book_id}",
    response_model=DataResponse[BookResponse],
    summary="Archive a book",
    description="Books are archived, not erased. Refused while any copy is on loan.",
)
async def delete_book(
    book_id: str,
    service: BookService = Depends(get_book_service),
) -> DataResponse[BookResponse]:
    book = service.delete_book(book_id)
    return DataResponse[BookResponse](message="Book archived successfully", data=book_response(book))
