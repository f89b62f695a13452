#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Field coercion rules for raw WMI property values.

WMI hands back loosely typed values: integers, strings, booleans or None,
and the exact type of a property can drift between Windows builds (uint64
properties such as Capacity arrive as strings through COM, for example).
Each function here converts one raw value into one canonical field value,
or raises CoercionError with the reason.

Every rule checks the raw type explicitly and ends in a rejection branch.
Booleans are never accepted where an integer is expected, even though
bool is a subclass of int.
"""

from datetime import datetime
from typing import Any, List

from ..exceptions import CoercionError
from .schema import CPUArchitecture, NOT_AVAILABLE


# ============================================================================
# CONFIGURATION CONSTANTS
# ============================================================================

FREQUENCY_UNIT = "MHz"              # Win32_Processor.CurrentClockSpeed unit
HEALTHY_STATUS = "OK"               # Only status treated as operational
DRIVER_PATH_SEPARATOR = ","         # InstalledDisplayDrivers delimiter

# CIM_DATETIME: yyyymmddHHMMSS.ffffff+UUU, parsed up to the '.'
WMI_DATETIME_FORMAT = "%Y%m%d%H%M%S"
WMI_DATETIME_SEPARATOR = "."


def _type_name(value: Any) -> str:
    return type(value).__name__


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


# ============================================================================
# DIRECT COPY
# ============================================================================

def as_text(value: Any) -> str:
    """Copy a string value verbatim."""
    if isinstance(value, str):
        return value
    raise CoercionError(f"expected text, got {_type_name(value)}")


def as_flag(value: Any) -> bool:
    """Copy a boolean value verbatim."""
    if isinstance(value, bool):
        return value
    raise CoercionError(f"expected boolean, got {_type_name(value)}")


def as_unsigned(value: Any) -> int:
    """Copy a non-negative integer verbatim."""
    if _is_integer(value):
        if value < 0:
            raise CoercionError(f"expected non-negative integer, got {value}")
        return value
    raise CoercionError(f"expected integer, got {_type_name(value)}")


# ============================================================================
# NUMERIC TO TEXT
# ============================================================================

def number_to_text(value: Any) -> str:
    """Render an integer as decimal display text (e.g., core counts)."""
    return str(as_unsigned(value))


def optional_number_to_text(value: Any) -> str:
    """
    Render an optional integer as decimal text.

    None becomes the "N/A" sentinel rather than an error, keeping
    "not reported" distinct from a reported zero.
    """
    if value is None:
        return NOT_AVAILABLE
    return number_to_text(value)


def frequency_to_text(value: Any) -> str:
    """Render a clock speed as '<value> MHz'."""
    return f"{as_unsigned(value)} {FREQUENCY_UNIT}"


# ============================================================================
# ENUM MAPPING
# ============================================================================

def architecture_from_code(value: Any) -> CPUArchitecture:
    """
    Map a Win32_Processor.Architecture code to CPUArchitecture.

    Any integer is accepted; codes outside the known table resolve to
    Unknown. Only a non-integer raw value is an error.
    """
    if _is_integer(value):
        return CPUArchitecture.from_code(value)
    raise CoercionError(f"expected architecture code, got {_type_name(value)}")


# ============================================================================
# COMPOSITE VALUES
# ============================================================================

def split_driver_paths(value: Any) -> List[str]:
    """
    Split a comma-delimited driver list into trimmed paths.

    Empty segments (e.g., from a trailing comma) are kept as empty strings.

    Example:
        >>> split_driver_paths("igdumdim64.dll, igd10iumd64.dll")
        ['igdumdim64.dll', 'igd10iumd64.dll']
    """
    text = as_text(value)
    return [segment.strip() for segment in text.split(DRIVER_PATH_SEPARATOR)]


def wrap_single(value: Any) -> List[str]:
    """Wrap a single description string into a one-element list."""
    return [as_text(value)]


def status_to_flag(value: Any) -> bool:
    """True only for the exact status 'OK'; any other string is False."""
    return as_text(value) == HEALTHY_STATUS


def capacity_to_bytes(value: Any) -> int:
    """
    Convert a capacity that arrives as a number or a numeric string.

    COM marshals uint64 properties as strings, so both "17179869184" and
    17179869184 are accepted. Anything else is rejected.
    """
    if _is_integer(value):
        return as_unsigned(value)
    if isinstance(value, str):
        text = value.strip()
        if text.isascii() and text.isdigit():
            return int(text)
        raise CoercionError(f"capacity is not a non-negative integer string: {value!r}")
    raise CoercionError(f"unexpected value for capacity: {_type_name(value)}")


def parse_wmi_datetime(value: Any) -> datetime:
    """
    Parse a CIM_DATETIME string into a naive datetime.

    The value looks like '20240115093000.500000+060'. Only the part before
    the first '.' is parsed; the fractional seconds and UTC offset are
    dropped, so the result is local time without tzinfo.

    Raises:
        CoercionError: If there is no '.' or the prefix is not a valid timestamp
    """
    text = as_text(value)
    prefix, separator, _ = text.partition(WMI_DATETIME_SEPARATOR)
    if not separator:
        raise CoercionError(f"timestamp has no '{WMI_DATETIME_SEPARATOR}' separator: {text!r}")
    try:
        return datetime.strptime(prefix, WMI_DATETIME_FORMAT)
    except ValueError as e:
        raise CoercionError(f"invalid timestamp {prefix!r}: {e}") from e
