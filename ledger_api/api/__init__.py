"""
API/Presentation Layer
======================

HTTP API layer using FastAPI.
This layer handles HTTP requests and responses.

Contains:
- Controllers: FastAPI route handlers per resource
- Presenters: entity to response DTO conversion
- Dependencies: service lookup, requester identity, paging
- Error handlers: domain error to HTTP status mapping
"""
