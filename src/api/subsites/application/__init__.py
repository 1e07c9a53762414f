"""Application layer for the subsites bounded context."""
