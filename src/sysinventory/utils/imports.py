"""Safe import utilities for platform-specific dependencies."""

import logging

logger = logging.getLogger(__name__)


def safe_import(module_name: str, package_name: str = None):
    """
    Safely import a module, returning None if unavailable.
    
    Use this for platform-specific libraries such as ``wmi`` that only
    install on Windows, so the package itself imports everywhere.
    
    Args:
        module_name: The module to import (e.g., "wmi", "pythoncom")
        package_name: Distribution name used in the debug log (defaults to module_name)
        
    Returns:
        The imported module, or None if import fails
        
    Examples:
        >>> wmi = safe_import("wmi")
        >>> if not wmi:
        ...     raise AdapterError("WMI is not available on this platform")
    """
    try:
        return __import__(module_name, fromlist=[''])
    except ImportError as e:
        logger.debug(f"Optional dependency {package_name or module_name} unavailable: {e}")
        return None
    except Exception as e:
        # pywin32 can fail with OSError/COM errors while loading its DLLs
        logger.debug(f"Importing {module_name} failed: {e}")
        return None
