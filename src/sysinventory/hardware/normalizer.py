#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Field Normalization Layer

Turns raw WMI property bags into typed inventory records. Each entity kind
has a declarative table of FieldRules: which WMI property feeds which record
field, the coercion applied to it, and what to use when the property is
absent (missing or None). Fields with no fallback are required.

Batches are normalized record by record: a bag that fails one required
rule yields a NormalizationError naming the entity kind, field and raw
value, and the remaining bags are still normalized. Indices are assigned
after failed bags are dropped, so they stay contiguous from zero.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, Iterable, Iterator, List, Optional, Sequence, Type, TypeVar

from ..exceptions import CoercionError, NormalizationError
from . import coercion
from .schema import (
    GraphicsAdapterRecord,
    InventoryRecord,
    MemoryModuleRecord,
    NOT_AVAILABLE,
    OperatingSystemRecord,
    ProcessorRecord,
)
from .wmi_session import EntityKind, RawPropertyBag

# Module logger
logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=InventoryRecord)


class _Required:
    """Marker for rules with no absence fallback."""

    def __repr__(self):
        return "REQUIRED"


REQUIRED = _Required()


@dataclass(frozen=True)
class FieldRule:
    """
    How one record field is produced from a property bag.

    Attributes:
        target: Record field, dotted for nested models (e.g., "cache_size.l1")
        source: WMI property name, or None for a field WMI never reports
        coerce: Coercion applied to a present raw value
        default: Value used when the property is absent, or REQUIRED
    """
    target: str
    source: Optional[str]
    coerce: Callable[[Any], Any] = coercion.as_text
    default: Any = REQUIRED

    @property
    def required(self) -> bool:
        return self.default is REQUIRED


@dataclass(frozen=True)
class EntitySchema(Generic[RecordT]):
    """Rule table for one entity kind."""
    kind: EntityKind
    record_type: Type[RecordT]
    rules: Sequence[FieldRule]
    indexed: bool = False

    def build(self, fields: Dict[str, Any], index: Optional[int] = None) -> RecordT:
        """Assemble normalized fields (and the synthesized index) into a record."""
        values = _nest(fields)
        if self.indexed:
            if index is None:
                raise ValueError(f"{self.kind} records require an index")
            values["index"] = index
        return self.record_type(**values)


@dataclass
class FetchResult(Generic[RecordT]):
    """
    Outcome of fetching one entity kind.

    Iterating, indexing and len() operate on the successfully normalized
    records; ``errors`` holds one NormalizationError per rejected bag.
    """
    kind: EntityKind
    records: List[RecordT] = field(default_factory=list)
    errors: List[NormalizationError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True when every raw record normalized successfully."""
        return not self.errors

    def raise_first(self) -> "FetchResult[RecordT]":
        """Raise the first normalization error, if any; otherwise return self."""
        if self.errors:
            raise self.errors[0]
        return self

    def __iter__(self) -> Iterator[RecordT]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)

    def __getitem__(self, position: int) -> RecordT:
        return self.records[position]


# ============================================================================
# RULE TABLES
# ============================================================================

PROCESSOR_SCHEMA = EntitySchema(
    kind=EntityKind.PROCESSOR,
    record_type=ProcessorRecord,
    rules=(
        FieldRule("vendor", "Manufacturer"),
        FieldRule("model", "Description"),
        FieldRule("name", "Name"),
        FieldRule("frequency", "CurrentClockSpeed", coercion.frequency_to_text),
        FieldRule("architecture", "Architecture", coercion.architecture_from_code),
        FieldRule("cores", "NumberOfCores", coercion.number_to_text),
        FieldRule("logical_cores", "NumberOfLogicalProcessors", coercion.number_to_text),
        FieldRule("cache_size.l1", "L1CacheSize", coercion.optional_number_to_text, default=NOT_AVAILABLE),
        FieldRule("cache_size.l2", "L2CacheSize", coercion.number_to_text, default="0"),
        FieldRule("cache_size.l3", "L3CacheSize", coercion.number_to_text, default="0"),
        FieldRule("virtualisation", "VirtualizationFirmwareEnabled", coercion.as_flag),
    ),
)

GRAPHICS_ADAPTER_SCHEMA = EntitySchema(
    kind=EntityKind.GRAPHICS_ADAPTER,
    record_type=GraphicsAdapterRecord,
    indexed=True,
    rules=(
        FieldRule("vendor", "AdapterCompatibility"),
        FieldRule("model", "Name"),
        FieldRule("memory", "AdapterRAM", coercion.capacity_to_bytes),
        FieldRule("device_id", "DeviceID"),
        FieldRule("refresh_rate.min", "MinRefreshRate", coercion.as_unsigned),
        FieldRule("refresh_rate.max", "MaxRefreshRate", coercion.as_unsigned),
        FieldRule("display_drivers_location", "InstalledDisplayDrivers", coercion.split_driver_paths),
        FieldRule("driver_version", "DriverVersion"),
        FieldRule("video_mode_description", "VideoModeDescription", coercion.wrap_single),
        FieldRule("status", "Status", coercion.status_to_flag),
    ),
)

OPERATING_SYSTEM_SCHEMA = EntitySchema(
    kind=EntityKind.OPERATING_SYSTEM,
    record_type=OperatingSystemRecord,
    rules=(
        FieldRule("name", "Name"),
        FieldRule("short_name", "Caption"),
        FieldRule("version", "Version"),
        FieldRule("os_architecture", "OSArchitecture"),
        FieldRule("status", "Status"),
        FieldRule("computer_name", "CSName"),
        FieldRule("last_boot_time", "LastBootUpTime", coercion.parse_wmi_datetime),
    ),
)

MEMORY_MODULE_SCHEMA = EntitySchema(
    kind=EntityKind.MEMORY_MODULE,
    record_type=MemoryModuleRecord,
    indexed=True,
    rules=(
        FieldRule("vendor", "Manufacturer", default=""),
        FieldRule("model", "Model", default=""),
        FieldRule("name", "DeviceLocator", default=""),
        FieldRule("serial_number", "SerialNumber", default=""),
        FieldRule("part_number", "PartNumber", default=""),
        FieldRule("total_memory", "Capacity", coercion.capacity_to_bytes),
        FieldRule("free_memory", None, default=0),
    ),
)

SCHEMAS: Dict[EntityKind, EntitySchema] = {
    schema.kind: schema
    for schema in (
        PROCESSOR_SCHEMA,
        GRAPHICS_ADAPTER_SCHEMA,
        OPERATING_SYSTEM_SCHEMA,
        MEMORY_MODULE_SCHEMA,
    )
}


# ============================================================================
# NORMALIZATION
# ============================================================================

def _apply_rule(kind: EntityKind, rule: FieldRule, bag: RawPropertyBag) -> Any:
    if rule.source is None:
        return rule.default

    raw = bag.get(rule.source)
    if raw is None:
        if rule.required:
            raise NormalizationError(
                str(kind), rule.target, raw,
                f"missing required property '{rule.source}'",
            )
        return rule.default

    try:
        return rule.coerce(raw)
    except CoercionError as e:
        raise NormalizationError(str(kind), rule.target, raw, str(e)) from e


def normalize_bag(schema: EntitySchema, bag: RawPropertyBag) -> Dict[str, Any]:
    """
    Apply every rule of ``schema`` to one property bag.

    Returns:
        Dict of normalized values keyed by (dotted) record field

    Raises:
        NormalizationError: For the first field whose rule fails
    """
    return {rule.target: _apply_rule(schema.kind, rule, bag) for rule in schema.rules}


def normalize_batch(schema: EntitySchema[RecordT], bags: Iterable[RawPropertyBag]) -> FetchResult[RecordT]:
    """
    Normalize every bag of a query result independently.

    Bags that fail are reported in ``errors`` (tagged with their position in
    ``bags``); the others become records in adapter order, indexed from zero.
    """
    result: FetchResult[RecordT] = FetchResult(kind=schema.kind)
    normalized: List[Dict[str, Any]] = []

    for position, bag in enumerate(bags):
        try:
            normalized.append(normalize_bag(schema, bag))
        except NormalizationError as e:
            error = e.at_position(position)
            logger.warning(f"Skipping {schema.kind} record: {error}")
            result.errors.append(error)

    for index, fields in enumerate(normalized):
        result.records.append(schema.build(fields, index=index))

    logger.info(
        f"Normalized {len(result.records)} {schema.kind} record(s), "
        f"{len(result.errors)} rejected"
    )
    return result


def _nest(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Expand dotted keys into nested dicts: {"a.b": 1} -> {"a": {"b": 1}}."""
    nested: Dict[str, Any] = {}
    for target, value in fields.items():
        *parents, leaf = target.split(".")
        node = nested
        for parent in parents:
            node = node.setdefault(parent, {})
        node[leaf] = value
    return nested
