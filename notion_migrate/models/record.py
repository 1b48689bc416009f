"""Record models for migration data."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from datetime import datetime

from dateutil import parser as date_parser


@dataclass
class PageRecord:
    """A page read from (or created in) a database."""
    id: str
    properties: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    created_time: Optional[datetime] = None
    url: Optional[str] = None
    raw_data: Optional[Dict[str, Any]] = None  # Original API payload

    def get_property(self, name: str) -> Optional[Dict[str, Any]]:
        """Get a property value object by name."""
        return self.properties.get(name)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "PageRecord":
        """Create from a page object returned by the API."""
        created_time = None
        if data.get("created_time"):
            try:
                created_time = date_parser.isoparse(data["created_time"])
            except ValueError:
                created_time = None

        return cls(
            id=str(data.get("id", "")),
            properties=data.get("properties") or {},
            created_time=created_time,
            url=data.get("url"),
            raw_data=data,
        )


@dataclass
class MigrationResult:
    """Result of attempting to create one page in the target."""
    record_id: str
    target_id: Optional[str] = None  # ID assigned by target database
    success: bool = False
    dry_run: bool = False
    error: Optional[str] = None
    properties: List[str] = field(default_factory=list)  # Property names sent (or that would be sent)
    completed_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "record_id": self.record_id,
            "target_id": self.target_id,
            "success": self.success,
            "dry_run": self.dry_run,
            "error": self.error,
            "properties": self.properties,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
        }
