"""Domain-Oriented Observability for the subsites application layer.

Probes for application service operations following Domain-Oriented
Observability patterns.
"""

from subsites.application.observability.access_probe import (
    DefaultGroupAccessProbe,
    GroupAccessProbe,
)
from subsites.application.observability.group_service_probe import (
    DefaultGroupServiceProbe,
    GroupServiceProbe,
)
from subsites.application.observability.lifecycle_probe import (
    DefaultGroupLifecycleProbe,
    GroupLifecycleProbe,
)

__all__ = [
    "DefaultGroupAccessProbe",
    "DefaultGroupLifecycleProbe",
    "DefaultGroupServiceProbe",
    "GroupAccessProbe",
    "GroupLifecycleProbe",
    "GroupServiceProbe",
]
