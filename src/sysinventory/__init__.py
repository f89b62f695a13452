"""
sysinventory - Typed hardware and OS inventory from Windows Management Instrumentation.

Submodules:
    - sysinventory.hardware: WMI queries, record schemas and normalization
    - sysinventory.exceptions: Error types
"""

# Import submodules for namespace access (si.hardware.fetch_processors())
from . import hardware
from . import exceptions

# Top-level convenience exports (most common operations)
from .hardware import (
    fetch_processors,
    fetch_graphics_adapters,
    fetch_operating_system,
    fetch_memory_modules,
    host_inventory,
    WMISession,
    EntityKind,
    FetchResult,
)
from .exceptions import InventoryError, AdapterError, NormalizationError

__version__ = "0.1.0"

__all__ = [
    # Submodules
    "hardware",
    "exceptions",
    
    # Primary API
    "fetch_processors",
    "fetch_graphics_adapters",
    "fetch_operating_system",
    "fetch_memory_modules",
    "host_inventory",
    "WMISession",
    "EntityKind",
    "FetchResult",
    
    # Errors
    "InventoryError",
    "AdapterError",
    "NormalizationError",
]
