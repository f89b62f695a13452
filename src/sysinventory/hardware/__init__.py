"""
Hardware and operating system inventory via WMI.

Provides typed records for processors, graphics adapters, the operating
system and physical memory modules.
"""

from .wmi_session import (
    WMISession,
    EntityKind,
    InventorySource,
    RawPropertyBag,
)
from .schema import (
    CPUArchitecture,
    CacheSizes,
    ProcessorRecord,
    RefreshRate,
    GraphicsAdapterRecord,
    OperatingSystemRecord,
    MemoryModuleRecord,
    NormalizationIssue,
    HostInventory,
    NOT_AVAILABLE,
)
from .normalizer import (
    FetchResult,
    FieldRule,
    EntitySchema,
    SCHEMAS,
    normalize_bag,
    normalize_batch,
)
from .inventory import (
    fetch_processors,
    fetch_graphics_adapters,
    fetch_operating_system,
    fetch_memory_modules,
    host_inventory,
)

__all__ = [
    # Fetch API
    "fetch_processors",
    "fetch_graphics_adapters",
    "fetch_operating_system",
    "fetch_memory_modules",
    "host_inventory",
    
    # Adapter
    "WMISession",
    "EntityKind",
    "InventorySource",
    "RawPropertyBag",
    
    # Schemas
    "CPUArchitecture",
    "CacheSizes",
    "ProcessorRecord",
    "RefreshRate",
    "GraphicsAdapterRecord",
    "OperatingSystemRecord",
    "MemoryModuleRecord",
    "NormalizationIssue",
    "HostInventory",
    "NOT_AVAILABLE",
    
    # Normalization (for custom sources and advanced usage)
    "FetchResult",
    "FieldRule",
    "EntitySchema",
    "SCHEMAS",
    "normalize_bag",
    "normalize_batch",
]
