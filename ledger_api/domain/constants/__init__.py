"""Stored field names."""
