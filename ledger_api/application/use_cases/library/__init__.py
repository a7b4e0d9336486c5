"""Library lending use cases."""
