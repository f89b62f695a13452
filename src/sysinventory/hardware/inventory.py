#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Inventory Module

Provides one fetch function per entity kind, plus host_inventory() to
gather all four in one call. Each fetch runs the raw WMI query, normalizes
every returned property bag and assigns indices in result order.

When no session is passed, a WMISession is opened for the call and closed
afterwards. Pass your own session to reuse one connection across calls.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from .normalizer import (
    FetchResult,
    GRAPHICS_ADAPTER_SCHEMA,
    MEMORY_MODULE_SCHEMA,
    OPERATING_SYSTEM_SCHEMA,
    PROCESSOR_SCHEMA,
    EntitySchema,
    normalize_batch,
)
from .schema import (
    GraphicsAdapterRecord,
    HostInventory,
    MemoryModuleRecord,
    NormalizationIssue,
    OperatingSystemRecord,
    ProcessorRecord,
)
from .wmi_session import InventorySource, WMISession

# Module logger
logger = logging.getLogger(__name__)


@contextmanager
def _session_scope(session: Optional[InventorySource]) -> Iterator[InventorySource]:
    """Use the caller's session, or open one just for this block."""
    if session is not None:
        yield session
        return
    with WMISession() as owned:
        yield owned


def _fetch(schema: EntitySchema, session: Optional[InventorySource]) -> FetchResult:
    with _session_scope(session) as source:
        bags = source.fetch(schema.kind)
    return normalize_batch(schema, bags)


def fetch_processors(session: Optional[InventorySource] = None) -> FetchResult[ProcessorRecord]:
    """
    Fetch all processors (Win32_Processor).

    Args:
        session: Source of raw property bags; a fresh WMISession if omitted

    Returns:
        FetchResult with ProcessorRecords and any normalization errors

    Raises:
        AdapterError: If the WMI connection or query fails

    Example:
        >>> for cpu in fetch_processors():
        ...     print(cpu.name, cpu.frequency, cpu.architecture.value)
    """
    return _fetch(PROCESSOR_SCHEMA, session)


def fetch_graphics_adapters(session: Optional[InventorySource] = None) -> FetchResult[GraphicsAdapterRecord]:
    """
    Fetch all graphics adapters (Win32_VideoController), indexed from 0.

    Raises:
        AdapterError: If the WMI connection or query fails
    """
    return _fetch(GRAPHICS_ADAPTER_SCHEMA, session)


def fetch_operating_system(session: Optional[InventorySource] = None) -> FetchResult[OperatingSystemRecord]:
    """
    Fetch operating system information (Win32_OperatingSystem).

    Raises:
        AdapterError: If the WMI connection or query fails
    """
    return _fetch(OPERATING_SYSTEM_SCHEMA, session)


def fetch_memory_modules(session: Optional[InventorySource] = None) -> FetchResult[MemoryModuleRecord]:
    """
    Fetch installed memory modules (Win32_PhysicalMemory), indexed from 0.

    ``free_memory`` is always 0 because WMI does not report it per module.

    Raises:
        AdapterError: If the WMI connection or query fails
    """
    return _fetch(MEMORY_MODULE_SCHEMA, session)


def host_inventory(session: Optional[InventorySource] = None) -> HostInventory:
    """
    Fetch every entity kind over a single session.

    Records that fail normalization are listed in ``issues`` instead of
    aborting the inventory.

    Returns:
        HostInventory: A validated Pydantic BaseModel with all records

    Raises:
        AdapterError: If the WMI connection or any query fails

    Example:
        >>> inv = host_inventory()
        >>> print(inv.operating_systems[0].product_name)
        >>> print(sum(m.total_memory for m in inv.memory_modules) / 1024**3, "GB")
    """
    with _session_scope(session) as source:
        processors = fetch_processors(source)
        graphics_adapters = fetch_graphics_adapters(source)
        operating_systems = fetch_operating_system(source)
        memory_modules = fetch_memory_modules(source)

    issues = [
        NormalizationIssue(
            entity_kind=error.entity_kind,
            field_name=error.field_name,
            raw_value=repr(error.raw_value),
            reason=error.reason,
            position=error.position,
        )
        for result in (processors, graphics_adapters, operating_systems, memory_modules)
        for error in result.errors
    ]
    if issues:
        logger.warning(f"Host inventory completed with {len(issues)} rejected record(s)")

    return HostInventory(
        processors=processors.records,
        graphics_adapters=graphics_adapters.records,
        operating_systems=operating_systems.records,
        memory_modules=memory_modules.records,
        issues=issues,
    )
