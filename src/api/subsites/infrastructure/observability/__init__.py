"""Domain-Oriented Observability for subsites infrastructure.

Probes for query scoping, the legacy migration and repository operations.
"""

from subsites.infrastructure.observability.migration_probe import (
    DefaultLegacyMigrationProbe,
    LegacyMigrationProbe,
)
from subsites.infrastructure.observability.query_scope_probe import (
    DefaultQueryScopeProbe,
    QueryScopeProbe,
)
from subsites.infrastructure.observability.repository_probe import (
    DefaultGroupRepositoryProbe,
    GroupRepositoryProbe,
)

__all__ = [
    "DefaultGroupRepositoryProbe",
    "DefaultLegacyMigrationProbe",
    "DefaultQueryScopeProbe",
    "GroupRepositoryProbe",
    "LegacyMigrationProbe",
    "QueryScopeProbe",
]
