"""Schema models for database property definitions."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from enum import Enum


class PropertyType(str, Enum):
    """Property types the mapper knows how to copy."""
    TITLE = "title"
    RICH_TEXT = "rich_text"
    NUMBER = "number"
    SELECT = "select"
    MULTI_SELECT = "multi_select"
    DATE = "date"
    CHECKBOX = "checkbox"
    URL = "url"
    EMAIL = "email"
    PHONE_NUMBER = "phone_number"
    RELATION = "relation"
    UNSUPPORTED = "unsupported"

    @classmethod
    def parse(cls, value: Optional[str]) -> "PropertyType":
        """Parse a service type name, falling back to UNSUPPORTED."""
        try:
            parsed = cls(value)
        except ValueError:
            return cls.UNSUPPORTED
        return parsed


@dataclass
class PropertyDefinition:
    """Definition of a property in a database schema."""
    name: str
    type: PropertyType
    raw_type: str = ""
    id: Optional[str] = None
    config: Dict[str, Any] = field(default_factory=dict)  # e.g. select options, passed through

    @property
    def is_supported(self) -> bool:
        return self.type != PropertyType.UNSUPPORTED

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "name": self.name,
            "type": self.raw_type or self.type.value,
            "id": self.id,
            "config": self.config,
        }

    @classmethod
    def from_api(cls, name: str, data: Dict[str, Any]) -> "PropertyDefinition":
        """Create from a property object returned by the API."""
        raw_type = data.get("type", "")
        return cls(
            name=data.get("name", name),
            type=PropertyType.parse(raw_type),
            raw_type=raw_type,
            id=data.get("id"),
            config=data.get(raw_type) or {},
        )


@dataclass
class DatabaseSchema:
    """Property schema of a database, in the service's key order."""
    id: str
    title: str = ""
    properties: Dict[str, PropertyDefinition] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.properties)

    @property
    def property_names(self) -> List[str]:
        return list(self.properties.keys())

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "id": self.id,
            "title": self.title,
            "properties": {k: v.to_dict() for k, v in self.properties.items()},
        }

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "DatabaseSchema":
        """Create from a database object returned by the API."""
        title_spans = data.get("title") or []
        title = "".join(span.get("plain_text", "") for span in title_spans)

        properties = {
            name: PropertyDefinition.from_api(name, prop)
            for name, prop in (data.get("properties") or {}).items()
        }

        return cls(
            id=data.get("id", ""),
            title=title,
            properties=properties,
        )
