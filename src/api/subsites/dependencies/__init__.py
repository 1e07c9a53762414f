"""FastAPI dependencies for the subsites bounded context."""
