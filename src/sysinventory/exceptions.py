"""
Custom exceptions for the sysinventory package.
"""

from typing import Any, Optional


class InventoryError(Exception):
    """Base class for every error raised while collecting inventory."""


class AdapterError(InventoryError):
    """Raised when the WMI session cannot be opened or a query fails."""
    
    def __init__(self, message: str, entity_kind: Optional[str] = None):
        """
        Initialize AdapterError.
        
        Args:
            message: Description of the connection or query failure
            entity_kind: Optional entity kind that was being fetched
        """
        self.entity_kind = entity_kind
        full_message = f"WMI adapter error: {message}"
        if entity_kind:
            full_message += f" (entity: {entity_kind})"
        super().__init__(full_message)


class CoercionError(ValueError):
    """Raised by a single coercion rule when a raw value cannot be converted."""


class NormalizationError(InventoryError, ValueError):
    """
    Raised when one field of one raw property bag fails its coercion rule.
    
    Scoped to a single record: sibling records in the same batch are
    normalized independently.
    """
    
    def __init__(
        self,
        entity_kind: str,
        field_name: str,
        raw_value: Any,
        reason: str,
        position: Optional[int] = None,
    ):
        self.entity_kind = entity_kind
        self.field_name = field_name
        self.raw_value = raw_value
        self.reason = reason
        self.position = position
        message = f"{entity_kind}.{field_name}: {reason} (raw value: {raw_value!r})"
        if position is not None:
            message += f" [record {position}]"
        super().__init__(message)

    def at_position(self, position: int) -> "NormalizationError":
        """Return a copy of this error tagged with the record's position in its batch."""
        return NormalizationError(
            self.entity_kind,
            self.field_name,
            self.raw_value,
            self.reason,
            position=position,
        )
