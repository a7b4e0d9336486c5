"""
Infrastructure Layer
====================

Concrete implementations of the repository interfaces.

Contains:
- db: MongoDB repositories and connection management
- memory: in-process store used by tests and local demos
"""
