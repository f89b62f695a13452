#!/usr/bin/env python3
"""
Demo script for host_inventory()
"""

import logging

from sysinventory import host_inventory, AdapterError


def main():
    logging.basicConfig(level=logging.INFO)
    print("Collecting host inventory...")

    try:
        inv = host_inventory()
    except AdapterError as e:
        print(f"Inventory unavailable: {e}")
        return

    print(f"\n=== Operating System ===")
    for os_info in inv.operating_systems:
        print(f"OS: {os_info.product_name} {os_info.version} ({os_info.os_architecture})")
        print(f"  Host: {os_info.computer_name}, status {os_info.status}")
        print(f"  Last boot: {os_info.last_boot_time:%Y-%m-%d %H:%M:%S}")

    print(f"\n=== Processors ===")
    for cpu in inv.processors:
        print(f"CPU: {cpu.name} [{cpu.architecture.value}] @ {cpu.frequency}")
        print(f"  Cores: {cpu.cores} physical, {cpu.logical_cores} logical")
        print(f"  Cache: L1 {cpu.cache_size.l1}, L2 {cpu.cache_size.l2}, L3 {cpu.cache_size.l3}")
        print(f"  Virtualization: {'enabled' if cpu.virtualisation else 'disabled'}")

    print(f"\n=== Graphics ===")
    for gpu in inv.graphics_adapters:
        state = "OK" if gpu.status else "not OK"
        print(f"GPU {gpu.index}: {gpu.vendor} {gpu.model} ({gpu.memory / 1024**3:.1f} GB) [{state}]")
        print(f"  Driver {gpu.driver_version}, {gpu.refresh_rate.min}-{gpu.refresh_rate.max} Hz")

    print(f"\n=== Memory ===")
    for module in inv.memory_modules:
        print(f"Slot {module.index} ({module.name}): {module.total_memory / 1024**3:.0f} GB {module.vendor} {module.part_number}")

    if inv.issues:
        print(f"\n=== Rejected Records ===")
        for issue in inv.issues:
            print(f"  {issue.entity_kind}[{issue.position}].{issue.field_name}: {issue.reason}")

    # JSON serialization
    json_data = inv.model_dump_json(indent=2)
    print(f"\n=== JSON Output (first 500 chars) ===")
    print(json_data[:500] + "..." if len(json_data) > 500 else json_data)


if __name__ == "__main__":
    main()
