"""Application layer for the profiles bounded context."""
