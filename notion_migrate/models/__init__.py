"""Data models for the migration tool."""

from .schema import (
    PropertyType,
    PropertyDefinition,
    DatabaseSchema,
)
from .migration import (
    MigrationConfig,
    MigrationRun,
    MigrationStatus,
)
from .record import (
    PageRecord,
    MigrationResult,
)

__all__ = [
    "PropertyType",
    "PropertyDefinition",
    "DatabaseSchema",
    "MigrationConfig",
    "MigrationRun",
    "MigrationStatus",
    "PageRecord",
    "MigrationResult",
]
