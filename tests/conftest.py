"""Shared fixtures: realistic WMI property bags and an in-memory source."""

from typing import Dict, List, Optional

import pytest

from sysinventory.exceptions import AdapterError
from sysinventory.hardware import EntityKind


class FakeSource:
    """InventorySource that serves canned property bags."""

    def __init__(self, bags: Optional[Dict[EntityKind, List[dict]]] = None, fail: bool = False):
        self.bags = bags or {}
        self.fail = fail
        self.calls: List[EntityKind] = []

    def fetch(self, kind: EntityKind) -> List[dict]:
        self.calls.append(kind)
        if self.fail:
            raise AdapterError("query failed: access denied", str(kind))
        return [dict(bag) for bag in self.bags.get(kind, [])]


@pytest.fixture
def processor_bag():
    return {
        "Manufacturer": "GenuineIntel",
        "Description": "Intel64 Family 6 Model 151 Stepping 2",
        "Name": "12th Gen Intel(R) Core(TM) i7-12700K",
        "CurrentClockSpeed": 3610,
        "Architecture": 9,
        "NumberOfCores": 12,
        "NumberOfLogicalProcessors": 20,
        "L1CacheSize": None,
        "L2CacheSize": 12288,
        "L3CacheSize": 25600,
        "VirtualizationFirmwareEnabled": True,
        "Status": "OK",
    }


@pytest.fixture
def gpu_bag():
    return {
        "AdapterCompatibility": "NVIDIA",
        "Name": "NVIDIA GeForce RTX 3080",
        "AdapterRAM": 4293918720,
        "DeviceID": "VideoController1",
        "MinRefreshRate": 50,
        "MaxRefreshRate": 165,
        "InstalledDisplayDrivers": (
            "C:\\Windows\\System32\\DriverStore\\nvldumdx.dll, "
            "C:\\Windows\\System32\\DriverStore\\nvwgf2umx.dll"
        ),
        "DriverVersion": "31.0.15.3623",
        "VideoModeDescription": "2560 x 1440 x 4294967296 colors",
        "Status": "OK",
    }


@pytest.fixture
def os_bag():
    return {
        "Name": "Microsoft Windows 11 Pro|C:\\WINDOWS|\\Device\\Harddisk0\\Partition3",
        "Caption": "Microsoft Windows 11 Pro",
        "Version": "10.0.22631",
        "OSArchitecture": "64-bit",
        "Status": "OK",
        "CSName": "WORKSTATION-01",
        "LastBootUpTime": "20240115093000.500000+060",
    }


@pytest.fixture
def memory_bag():
    return {
        "Manufacturer": "Kingston",
        "Model": None,
        "DeviceLocator": "DIMM A1",
        "SerialNumber": "1A2B3C4D",
        "PartNumber": "KF432C16BB/16",
        "Capacity": "17179869184",
    }


@pytest.fixture
def host_source(processor_bag, gpu_bag, os_bag, memory_bag):
    second_module = dict(memory_bag, DeviceLocator="DIMM B1", SerialNumber="5E6F7A8B")
    return FakeSource({
        EntityKind.PROCESSOR: [processor_bag],
        EntityKind.GRAPHICS_ADAPTER: [gpu_bag],
        EntityKind.OPERATING_SYSTEM: [os_bag],
        EntityKind.MEMORY_MODULE: [memory_bag, second_module],
    })


@pytest.fixture
def make_source():
    return FakeSource
