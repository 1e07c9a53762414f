"""Infrastructure layer for the subsites bounded context."""
