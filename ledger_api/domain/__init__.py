"""
Domain Layer
============

Core business logic and domain models.
This layer has no dependencies on external frameworks or infrastructure.

Contains:
- Entities: Domain models representing business concepts
- Repository Interfaces: Abstract contracts for data access
- Errors: the failure kinds every layer raises
"""
