#!/usr/bin/env python3
"""
Print the raw property bags of any WMI class.

Usage:
    python dump_wmi_class.py Win32_VideoController
"""

import sys
from pprint import pprint

from sysinventory import WMISession, AdapterError


def main():
    class_name = sys.argv[1] if len(sys.argv) > 1 else "Win32_OperatingSystem"

    try:
        with WMISession() as session:
            bags = session.fetch_class(class_name)
    except AdapterError as e:
        print(e, file=sys.stderr)
        sys.exit(1)

    print(f"{class_name}: {len(bags)} instance(s)")
    for bag in bags:
        pprint(bag)


if __name__ == "__main__":
    main()
