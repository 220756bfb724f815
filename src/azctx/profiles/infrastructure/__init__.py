"""Infrastructure adapters for the profiles bounded context."""
