"""Domain layer for the profiles bounded context."""
