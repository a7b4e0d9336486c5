"""
Application Layer
=================

Application services and use cases.
This layer orchestrates domain entities and repositories.

Contains:
- Use Cases: multi-record operations (borrow, return, team changes, ...)
- Services: Application services that coordinate multiple use cases
- DTOs: Pydantic request/response models
"""
