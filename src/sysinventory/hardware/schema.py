#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Inventory Schema Definitions

Pydantic BaseModel schemas for the records produced by the inventory
fetch functions (processors, graphics adapters, operating system and
physical memory modules).

Records are immutable once built. Every record serializes with
``model_dump_json()`` and reads back with ``model_validate_json()`` without
losing information, including the "N/A" sentinel and architecture names.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


# Sentinel text for a value the platform did not report
NOT_AVAILABLE = "N/A"


class CPUArchitecture(str, Enum):
    """Processor architecture as reported by Win32_Processor.Architecture."""
    X86 = "X86"
    Arm = "Arm"
    X64 = "X64"
    Neutral = "Neutral"
    Arm64 = "Arm64"
    X86OnArm64 = "X86OnArm64"  # Arm64 emulating x86
    Unknown = "Unknown"

    @classmethod
    def from_code(cls, code: int) -> "CPUArchitecture":
        """Map a WMI architecture code to a member; unknown codes give Unknown."""
        return _ARCHITECTURE_CODES.get(code, cls.Unknown)


_ARCHITECTURE_CODES = {
    0: CPUArchitecture.X86,
    5: CPUArchitecture.Arm,
    9: CPUArchitecture.X64,
    11: CPUArchitecture.Neutral,
    12: CPUArchitecture.Arm64,
    14: CPUArchitecture.X86OnArm64,
    65535: CPUArchitecture.Unknown,
}


class InventoryRecord(BaseModel):
    """Base class for all inventory records."""

    class Config:
        """Pydantic configuration."""
        # Records are never mutated after normalization
        frozen = True
        extra = "forbid"


class CacheSizes(InventoryRecord):
    """Processor cache sizes in KB, kept as display text."""
    l1: str = Field(NOT_AVAILABLE, description="L1 cache size, 'N/A' when not reported")
    l2: str = Field(..., description="L2 cache size")
    l3: str = Field(..., description="L3 cache size")


class ProcessorRecord(InventoryRecord):
    """One Win32_Processor instance."""
    vendor: str = Field(..., description="Processor manufacturer (e.g., 'GenuineIntel')")
    model: str = Field(..., description="Human-readable processor description")
    name: str = Field(..., description="Processor name string")
    frequency: str = Field(..., description="Current clock speed with unit (e.g., '3600 MHz')")
    architecture: CPUArchitecture = Field(..., description="Processor architecture")
    cores: str = Field(..., description="Number of physical cores")
    logical_cores: str = Field(..., description="Number of logical processors")
    cache_size: CacheSizes = Field(..., description="L1/L2/L3 cache sizes")
    virtualisation: bool = Field(..., description="Whether virtualization is enabled in firmware")


class RefreshRate(InventoryRecord):
    """Refresh rate range in Hz. min <= max is expected but not enforced."""
    min: int = Field(..., ge=0, description="Minimum refresh rate")
    max: int = Field(..., ge=0, description="Maximum refresh rate")


class GraphicsAdapterRecord(InventoryRecord):
    """One Win32_VideoController instance."""
    index: int = Field(..., ge=0, description="Zero-based position in the fetch result")
    vendor: str = Field(..., description="Adapter vendor (AdapterCompatibility)")
    model: str = Field(..., description="Adapter model name")
    memory: int = Field(..., ge=0, description="Dedicated adapter memory in bytes")
    device_id: str = Field(..., description="Device identifier (e.g., 'VideoController1')")
    refresh_rate: RefreshRate = Field(..., description="Supported refresh rate range")
    display_drivers_location: List[str] = Field(..., description="Installed display driver file paths")
    driver_version: str = Field(..., description="Driver version string")
    video_mode_description: List[str] = Field(..., description="Supported video mode descriptions")
    status: bool = Field(..., description="True when the adapter reports status 'OK'")


class OperatingSystemRecord(InventoryRecord):
    """One Win32_OperatingSystem instance."""
    name: str = Field(..., description="Full OS name as reported by WMI")
    short_name: str = Field(..., description="OS caption (e.g., 'Microsoft Windows 11 Pro')")
    version: str = Field(..., description="OS version (e.g., '10.0.22631')")
    os_architecture: str = Field(..., description="OS architecture (e.g., '64-bit')")
    status: str = Field(..., description="OS status string")
    computer_name: str = Field(..., description="Host name (CSName)")
    last_boot_time: datetime = Field(..., description="Last boot time, naive local time")

    @property
    def product_name(self) -> str:
        """
        Product part of ``name``.

        WMI packs the install directory and boot partition into Name,
        separated by '|' (e.g., 'Microsoft Windows 11 Pro|C:\\WINDOWS|...').
        """
        return self.name.split("|", 1)[0].strip()


class MemoryModuleRecord(InventoryRecord):
    """One Win32_PhysicalMemory instance."""
    index: int = Field(..., ge=0, description="Zero-based position in the fetch result")
    vendor: str = Field("", description="Module manufacturer")
    model: str = Field("", description="Module model")
    name: str = Field("", description="Slot name (DeviceLocator, e.g., 'DIMM A1')")
    serial_number: str = Field("", description="Module serial number")
    part_number: str = Field("", description="Module part number")
    total_memory: int = Field(..., ge=0, description="Module capacity in bytes")
    # WMI has no per-module free memory; 0 means unavailable, not empty
    free_memory: int = Field(0, ge=0, description="Always 0: not reported by WMI")


class NormalizationIssue(BaseModel):
    """Serializable summary of a record that failed normalization."""
    entity_kind: str = Field(..., description="Entity kind of the failing record")
    field_name: str = Field(..., description="Record field whose rule failed")
    raw_value: str = Field(..., description="repr() of the offending raw value")
    reason: str = Field(..., description="Why the coercion failed")
    position: Optional[int] = Field(None, description="Position of the raw bag in the query result")


class HostInventory(BaseModel):
    """
    Complete host inventory from host_inventory().

    Holds every successfully normalized record plus one issue per raw
    record that could not be normalized.
    """
    processors: List[ProcessorRecord] = Field(default_factory=list, description="Processors")
    graphics_adapters: List[GraphicsAdapterRecord] = Field(default_factory=list, description="Graphics adapters")
    operating_systems: List[OperatingSystemRecord] = Field(default_factory=list, description="Operating system instances")
    memory_modules: List[MemoryModuleRecord] = Field(default_factory=list, description="Physical memory modules")
    issues: List[NormalizationIssue] = Field(default_factory=list, description="Records rejected during normalization")

    class Config:
        """Pydantic configuration."""
        frozen = True
