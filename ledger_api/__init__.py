"""
Catalog Ledger API
==================

Library lending ledger, project collaboration marketplace and address book
served over one FastAPI application.
"""
