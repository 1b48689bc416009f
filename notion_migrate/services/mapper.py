"""Property mapper for re-shaping source pages to a target schema."""

import logging
from typing import Any, Callable, Dict, Optional

from ..models.record import PageRecord
from ..models.schema import DatabaseSchema, PropertyType

logger = logging.getLogger(__name__)

Handler = Callable[[PropertyType, Dict[str, Any]], Optional[Dict[str, Any]]]


class PropertyMapper:
    """
    Maps a source page's property values onto a target database schema.

    Every property in the target schema is looked up by name on the
    source page and copied according to the target's declared type.
    Values are passed through as-is, never coerced between types.
    """

    def __init__(self):
        """Initialize the mapper."""
        self._handlers = self._register_handlers()

    def _register_handlers(self) -> Dict[PropertyType, Handler]:
        """Register one handler per supported property type."""
        return {
            PropertyType.TITLE: self._map_list,
            PropertyType.RICH_TEXT: self._map_list,
            PropertyType.NUMBER: self._map_number,
            PropertyType.SELECT: self._map_object,
            PropertyType.MULTI_SELECT: self._map_list,
            PropertyType.DATE: self._map_object,
            PropertyType.CHECKBOX: self._map_checkbox,
            PropertyType.URL: self._map_string,
            PropertyType.EMAIL: self._map_string,
            PropertyType.PHONE_NUMBER: self._map_string,
            PropertyType.RELATION: self._map_list,
        }

    def map_properties(
        self,
        record: PageRecord,
        schema: DatabaseSchema
    ) -> Dict[str, Dict[str, Any]]:
        """
        Map a source page onto a target schema.

        Args:
            record: Source page
            schema: Target database schema

        Returns:
            Property values keyed by target property name, ready to send
        """
        mapped: Dict[str, Dict[str, Any]] = {}

        for name, definition in schema.properties.items():
            source_value = record.get_property(name)

            if definition.type == PropertyType.CHECKBOX:
                # Checkbox is the only type with a default
                if source_value is None:
                    logger.warning(f"Property \"{name}\" not found on source page {record.id}, defaulting to false")
                mapped[name] = self._handlers[definition.type](definition.type, source_value or {})
                continue

            if source_value is None:
                logger.warning(f"Property \"{name}\" not found on source page {record.id}")
                continue

            if not definition.is_supported:
                logger.warning(
                    f"Unsupported property type: {definition.raw_type or 'unknown'} ({name})"
                )
                continue

            handler = self._handlers[definition.type]
            value = handler(definition.type, source_value)

            if value is None:
                logger.debug(f"Skipping \"{name}\": no {definition.type.value} value on page {record.id}")
                continue

            mapped[name] = value

        return mapped

    # Handlers take the target type and the source value object and return
    # the {type: value} object to send, or None to omit the property.

    def _map_list(self, prop_type: PropertyType, source: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        value = source.get(prop_type.value)
        if value is None:
            return None
        return {prop_type.value: value}

    def _map_object(self, prop_type: PropertyType, source: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        value = source.get(prop_type.value)
        if not value:
            return None
        return {prop_type.value: value}

    def _map_number(self, prop_type: PropertyType, source: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        value = source.get(prop_type.value)
        if value is None or isinstance(value, bool):
            return None
        return {prop_type.value: value}

    def _map_string(self, prop_type: PropertyType, source: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        value = source.get(prop_type.value)
        if not value:
            return None
        return {prop_type.value: value}

    def _map_checkbox(self, prop_type: PropertyType, source: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return {prop_type.value: bool(source.get(prop_type.value) or False)}
