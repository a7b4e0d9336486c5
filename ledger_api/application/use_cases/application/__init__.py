"""Project application use cases."""
