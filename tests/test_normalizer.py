"""Tests for per-entity normalization and batch behavior."""

from datetime import datetime

import pytest

from sysinventory.exceptions import NormalizationError
from sysinventory.hardware import EntityKind
from sysinventory.hardware.normalizer import (
    GRAPHICS_ADAPTER_SCHEMA,
    MEMORY_MODULE_SCHEMA,
    OPERATING_SYSTEM_SCHEMA,
    PROCESSOR_SCHEMA,
    SCHEMAS,
    FieldRule,
    normalize_bag,
    normalize_batch,
)
from sysinventory.hardware.schema import CPUArchitecture


class TestSchemaTables:
    def test_every_kind_has_a_schema(self):
        assert set(SCHEMAS) == set(EntityKind)

    def test_only_gpu_and_memory_are_indexed(self):
        indexed = {kind for kind, schema in SCHEMAS.items() if schema.indexed}
        assert indexed == {EntityKind.GRAPHICS_ADAPTER, EntityKind.MEMORY_MODULE}

    def test_rule_required_flag(self):
        assert FieldRule("vendor", "Manufacturer").required
        assert not FieldRule("vendor", "Manufacturer", default="").required


class TestProcessor:
    def test_full_record(self, processor_bag):
        cpu = normalize_batch(PROCESSOR_SCHEMA, [processor_bag]).raise_first()[0]
        assert cpu.vendor == "GenuineIntel"
        assert cpu.frequency == "3610 MHz"
        assert cpu.architecture is CPUArchitecture.X64
        assert cpu.cores == "12"
        assert cpu.logical_cores == "20"
        assert cpu.cache_size.l1 == "N/A"
        assert cpu.cache_size.l2 == "12288"
        assert cpu.cache_size.l3 == "25600"
        assert cpu.virtualisation is True

    def test_l1_present(self, processor_bag):
        processor_bag["L1CacheSize"] = 256
        fields = normalize_bag(PROCESSOR_SCHEMA, processor_bag)
        assert fields["cache_size.l1"] == "256"

    def test_l1_key_missing(self, processor_bag):
        del processor_bag["L1CacheSize"]
        fields = normalize_bag(PROCESSOR_SCHEMA, processor_bag)
        assert fields["cache_size.l1"] == "N/A"

    def test_l2_l3_default_to_zero(self, processor_bag):
        del processor_bag["L2CacheSize"]
        processor_bag["L3CacheSize"] = None
        fields = normalize_bag(PROCESSOR_SCHEMA, processor_bag)
        assert fields["cache_size.l2"] == "0"
        assert fields["cache_size.l3"] == "0"

    def test_unknown_architecture_is_not_an_error(self, processor_bag):
        processor_bag["Architecture"] = 42
        fields = normalize_bag(PROCESSOR_SCHEMA, processor_bag)
        assert fields["architecture"] is CPUArchitecture.Unknown

    def test_missing_core_count(self, processor_bag):
        del processor_bag["NumberOfCores"]
        with pytest.raises(NormalizationError) as exc_info:
            normalize_bag(PROCESSOR_SCHEMA, processor_bag)
        assert exc_info.value.field_name == "cores"
        assert exc_info.value.raw_value is None
        assert "NumberOfCores" in exc_info.value.reason


class TestGraphicsAdapter:
    def test_full_record(self, gpu_bag):
        gpu = normalize_batch(GRAPHICS_ADAPTER_SCHEMA, [gpu_bag]).raise_first()[0]
        assert gpu.index == 0
        assert gpu.memory == 4293918720
        assert gpu.refresh_rate.min == 50
        assert gpu.refresh_rate.max == 165
        assert gpu.display_drivers_location == [
            "C:\\Windows\\System32\\DriverStore\\nvldumdx.dll",
            "C:\\Windows\\System32\\DriverStore\\nvwgf2umx.dll",
        ]
        assert gpu.video_mode_description == ["2560 x 1440 x 4294967296 colors"]
        assert gpu.status is True

    def test_degraded_status(self, gpu_bag):
        gpu_bag["Status"] = "Degraded"
        assert normalize_bag(GRAPHICS_ADAPTER_SCHEMA, gpu_bag)["status"] is False

    def test_indices_follow_adapter_order(self, gpu_bag):
        bags = [
            dict(gpu_bag, Name="Intel(R) UHD Graphics 770", DeviceID="VideoController3"),
            dict(gpu_bag, Name="NVIDIA GeForce RTX 3080"),
            dict(gpu_bag, Name="Microsoft Basic Display Adapter", DeviceID="VideoController2"),
        ]
        result = normalize_batch(GRAPHICS_ADAPTER_SCHEMA, bags)
        assert [gpu.index for gpu in result] == [0, 1, 2]
        assert [gpu.model for gpu in result] == [bag["Name"] for bag in bags]


class TestOperatingSystem:
    def test_full_record(self, os_bag):
        os_info = normalize_batch(OPERATING_SYSTEM_SCHEMA, [os_bag]).raise_first()[0]
        assert os_info.name == os_bag["Name"]
        assert os_info.short_name == "Microsoft Windows 11 Pro"
        assert os_info.computer_name == "WORKSTATION-01"
        assert os_info.last_boot_time == datetime(2024, 1, 15, 9, 30, 0)

    def test_boot_time_without_fraction(self, os_bag):
        os_bag["LastBootUpTime"] = "20240115093000"
        with pytest.raises(NormalizationError) as exc_info:
            normalize_bag(OPERATING_SYSTEM_SCHEMA, os_bag)
        assert exc_info.value.field_name == "last_boot_time"
        assert exc_info.value.raw_value == "20240115093000"


class TestMemoryModule:
    def test_full_record(self, memory_bag):
        module = normalize_batch(MEMORY_MODULE_SCHEMA, [memory_bag]).raise_first()[0]
        assert module.index == 0
        assert module.vendor == "Kingston"
        assert module.model == ""
        assert module.name == "DIMM A1"
        assert module.total_memory == 17179869184
        assert module.free_memory == 0

    def test_native_capacity(self, memory_bag):
        memory_bag["Capacity"] = 17179869184
        assert normalize_bag(MEMORY_MODULE_SCHEMA, memory_bag)["total_memory"] == 17179869184

    def test_free_memory_ignores_input(self, memory_bag):
        memory_bag["FreeMemory"] = 1024
        assert normalize_bag(MEMORY_MODULE_SCHEMA, memory_bag)["free_memory"] == 0

    def test_text_fields_default_to_empty(self):
        fields = normalize_bag(MEMORY_MODULE_SCHEMA, {"Capacity": 8589934592})
        assert fields["vendor"] == ""
        assert fields["serial_number"] == ""

    def test_bad_capacity(self, memory_bag):
        memory_bag["Capacity"] = "abc"
        with pytest.raises(NormalizationError) as exc_info:
            normalize_bag(MEMORY_MODULE_SCHEMA, memory_bag)
        error = exc_info.value
        assert error.entity_kind == "memory_module"
        assert error.field_name == "total_memory"
        assert error.raw_value == "abc"


class TestPartialBatch:
    def test_one_bad_record_is_reported_not_dropped(self, memory_bag):
        bags = [
            dict(memory_bag, DeviceLocator="DIMM A1"),
            dict(memory_bag, DeviceLocator="DIMM A2", Capacity="abc"),
            dict(memory_bag, DeviceLocator="DIMM B1"),
            dict(memory_bag, DeviceLocator="DIMM B2"),
        ]
        result = normalize_batch(MEMORY_MODULE_SCHEMA, bags)

        assert len(result) == 3
        assert not result.ok
        assert [m.name for m in result] == ["DIMM A1", "DIMM B1", "DIMM B2"]
        assert [m.index for m in result] == [0, 1, 2]

        assert len(result.errors) == 1
        error = result.errors[0]
        assert error.field_name == "total_memory"
        assert error.raw_value == "abc"
        assert error.position == 1

    def test_raise_first(self, os_bag):
        bad = dict(os_bag, LastBootUpTime="garbage")
        result = normalize_batch(OPERATING_SYSTEM_SCHEMA, [os_bag, bad])
        assert len(result) == 1
        with pytest.raises(NormalizationError, match=r"\[record 1\]"):
            result.raise_first()

    def test_empty_batch(self):
        result = normalize_batch(PROCESSOR_SCHEMA, [])
        assert result.ok
        assert list(result) == []
