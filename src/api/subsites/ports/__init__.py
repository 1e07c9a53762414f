"""Ports (interfaces) for the subsites bounded context."""
