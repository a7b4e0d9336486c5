"""Project team use cases."""
