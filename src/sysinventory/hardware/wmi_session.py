#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Raw WMI query adapter.

This module owns the only contact with Windows Management Instrumentation.
It issues one fixed ``SELECT * FROM <class>`` query per entity kind and
returns the results as plain property bags (dicts from property name to
int, str, bool or None), in whatever order WMI returns them.

The connection is an explicit WMISession object owned by the caller rather
than process-wide state. Every failure (the ``wmi`` library missing on a
non-Windows host, a refused connection, a failing query) surfaces as
AdapterError. Nothing is retried here.
"""

import logging
import re
import threading
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol, Union

from ..exceptions import AdapterError
from ..utils import safe_import

# Module logger
logger = logging.getLogger(__name__)

# Loosely typed scalar as delivered by WMI
RawValue = Union[int, str, bool, None]
RawPropertyBag = Dict[str, Any]


# ============================================================================
# CONFIGURATION CONSTANTS
# ============================================================================

DEFAULT_NAMESPACE = "root\\cimv2"
QUERY_TEMPLATE = "SELECT * FROM {class_name}"

# WMI class names are plain identifiers (e.g., Win32_Processor)
_CLASS_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class EntityKind(Enum):
    """Inventory entity kinds and the WMI class each one is read from."""
    PROCESSOR = "Win32_Processor"
    GRAPHICS_ADAPTER = "Win32_VideoController"
    OPERATING_SYSTEM = "Win32_OperatingSystem"
    MEMORY_MODULE = "Win32_PhysicalMemory"

    @property
    def wmi_class(self) -> str:
        return self.value

    @property
    def query(self) -> str:
        """The fixed WQL statement for this entity kind."""
        return QUERY_TEMPLATE.format(class_name=self.value)

    def __str__(self):
        return self.name.lower()


class InventorySource(Protocol):
    """Anything that can return raw property bags for an entity kind."""

    def fetch(self, kind: EntityKind) -> List[RawPropertyBag]:
        ...


class WMISession:
    """
    A WMI connection scoped to a batch of inventory calls.

    The session is opened lazily on first fetch, or explicitly with open()
    or a ``with`` block, and released by close(). Queries through one
    session are serialized with a lock. COM objects are bound to the thread
    that created them, so threads that need parallel queries should each
    open their own session.

    Example:
        >>> with WMISession() as session:
        ...     bags = session.fetch(EntityKind.PROCESSOR)
    """

    def __init__(
        self,
        computer: str = "",
        namespace: str = DEFAULT_NAMESPACE,
        user: str = "",
        password: str = "",
    ):
        """
        Args:
            computer: Remote host name, empty for the local machine
            namespace: WMI namespace to connect to
            user: User name for a remote connection
            password: Password for a remote connection
        """
        self.computer = computer
        self.namespace = namespace
        self.user = user
        self.password = password
        self._connection = None
        self._com_initialized = False
        self._lock = threading.Lock()

    @property
    def is_open(self) -> bool:
        return self._connection is not None

    def open(self) -> "WMISession":
        """
        Connect to WMI.

        Raises:
            AdapterError: If the wmi library is unavailable or the connection fails
        """
        with self._lock:
            if self._connection is None:
                self._connection = self._connect()
        return self

    def _connect(self):
        wmi = safe_import("wmi")
        if not wmi:
            raise AdapterError("the 'wmi' library is not available on this platform")

        # COM must be initialized on every thread that talks to WMI
        pythoncom = safe_import("pythoncom", "pywin32")
        if pythoncom:
            try:
                pythoncom.CoInitialize()
                self._com_initialized = True
            except Exception as e:
                raise AdapterError(f"failed to initialize the COM library: {e}") from e

        target = self.computer or "localhost"
        logger.debug(f"Connecting to WMI namespace {self.namespace} on {target}")
        try:
            return wmi.WMI(
                computer=self.computer,
                namespace=self.namespace,
                user=self.user,
                password=self.password,
            )
        except Exception as e:
            self._uninitialize_com()
            raise AdapterError(f"failed to connect to WMI on {target}: {e}") from e

    def close(self) -> None:
        """Release the connection. Safe to call more than once."""
        with self._lock:
            if self._connection is None:
                return
            self._connection = None
            self._uninitialize_com()
        logger.debug("WMI session closed")

    def _uninitialize_com(self) -> None:
        if not self._com_initialized:
            return
        pythoncom = safe_import("pythoncom", "pywin32")
        if pythoncom:
            pythoncom.CoUninitialize()
        self._com_initialized = False

    def __enter__(self) -> "WMISession":
        return self.open()

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def fetch(self, kind: EntityKind) -> List[RawPropertyBag]:
        """
        Run the fixed query for ``kind`` and return one property bag per instance.

        Raises:
            AdapterError: If the session cannot be opened or the query fails
        """
        return self._run(kind.query, entity_kind=str(kind))

    def fetch_class(self, class_name: str) -> List[RawPropertyBag]:
        """
        Return every instance of an arbitrary WMI class as property bags.

        Intended for inspecting what a class actually reports on a host.

        Raises:
            AdapterError: If ``class_name`` is not a valid identifier or the query fails
        """
        if not _CLASS_NAME_PATTERN.match(class_name or ""):
            raise AdapterError(f"invalid WMI class name: {class_name!r}")
        return self._run(QUERY_TEMPLATE.format(class_name=class_name))

    def _run(self, wql: str, entity_kind: Optional[str] = None) -> List[RawPropertyBag]:
        if not self.is_open:
            self.open()

        logger.debug(f"WMI query: {wql}")
        with self._lock:
            if self._connection is None:
                raise AdapterError("session was closed during the query", entity_kind)
            try:
                instances = self._connection.query(wql)
                bags = [_to_property_bag(instance) for instance in instances]
            except Exception as e:
                raise AdapterError(f"query failed: {wql}: {e}", entity_kind) from e

        logger.debug(f"WMI query returned {len(bags)} instance(s)")
        return bags


def _to_property_bag(instance) -> RawPropertyBag:
    """Copy the properties of one WMI object into a plain dict."""
    return {name: getattr(instance, name) for name in instance.properties}
