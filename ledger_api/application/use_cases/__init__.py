"""
Use Cases
=========

Operations that touch more than one record and must keep them consistent.
"""
