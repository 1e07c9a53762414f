"""Observability for shared middleware operations."""

from shared_kernel.middleware.observability.subsite_context_probe import (
    DefaultSubsiteContextProbe,
    SubsiteContextProbe,
)

__all__ = [
    "DefaultSubsiteContextProbe",
    "SubsiteContextProbe",
]
