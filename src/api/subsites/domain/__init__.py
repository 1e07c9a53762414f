"""Domain layer for the subsites bounded context."""
