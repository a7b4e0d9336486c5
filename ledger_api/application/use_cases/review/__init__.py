"""Review use cases."""
