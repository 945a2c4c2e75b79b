"""
DaVinci Resolve host access: session connector and capability probing.
"""

from .capabilities import (
    CapabilityTable,
    call_operation,
    has_capability,
    invoke_if_present,
)
from .connection import (
    HostSession,
    connect,
    find_script_module,
    get_feature_support_info,
    get_host_version,
    get_os_info,
    log_feature_support,
)

__all__ = [
    "CapabilityTable",
    "HostSession",
    "call_operation",
    "connect",
    "find_script_module",
    "get_feature_support_info",
    "get_host_version",
    "get_os_info",
    "has_capability",
    "invoke_if_present",
    "log_feature_support",
]
