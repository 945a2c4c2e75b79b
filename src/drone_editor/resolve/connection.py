"""
DaVinci Resolve Session Connector

Locates the host scripting entry point (``bmd`` inside Resolve, or the
``DaVinciResolveScript`` module for external scripting), then acquires the
Fusion bridge and the Resolve session with a bounded number of retries.

Usage:
    from drone_editor.resolve.connection import connect

    session = connect(max_attempts=3, retry_delay=2)
    project = session.project
"""

import builtins
import importlib
import platform
import sys
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..exceptions import ConnectionExhausted, HostError, HostUnavailable
from ..logger import logger
from .capabilities import CapabilityTable, call_operation, has_capability, invoke_if_present

SCRIPT_MODULE_NAMES = ("DaVinciResolveScript", "fusionscript")


@dataclass
class HostSession:
    """
    Borrowed handles into the running Resolve instance.

    The host owns every object; project, media pool and timeline are fetched
    on access rather than cached, since the user can switch them at any time.
    """

    resolve: Any
    fusion: Any = None
    capabilities: CapabilityTable = field(default_factory=CapabilityTable)
    attempts: int = 1

    @property
    def project_manager(self) -> Any:
        manager, _ = invoke_if_present(self.resolve, "GetProjectManager")
        return manager

    @property
    def project(self) -> Any:
        project, _ = invoke_if_present(self.project_manager, "GetCurrentProject")
        return project

    @property
    def media_pool(self) -> Any:
        media_pool, _ = invoke_if_present(self.project, "GetMediaPool")
        return media_pool

    @property
    def version(self) -> str:
        return get_host_version(self.resolve)


def find_script_module() -> Optional[Any]:
    """
    Return the object that exposes ``scriptapp``, or None outside Resolve.

    External scripts import ``DaVinciResolveScript`` (or ``fusionscript``)
    from the Resolve install; inside Resolve's script menu the ``bmd``
    global is injected instead.
    """
    for module_name in SCRIPT_MODULE_NAMES:
        try:
            module = importlib.import_module(module_name)
        except ImportError:
            continue
        if has_capability(module, "scriptapp"):
            return module

    main_module = sys.modules.get("__main__")
    for holder in (builtins, main_module):
        bmd = getattr(holder, "bmd", None)
        if has_capability(bmd, "scriptapp"):
            return bmd

    return None


def connect(
    max_attempts: int = 3,
    retry_delay: float = 2.0,
    script_module: Any = None,
) -> HostSession:
    """
    Connect to the running DaVinci Resolve instance.

    Each attempt acquires the Fusion bridge and then the Resolve session;
    a failure at either step uses up the attempt and waits ``retry_delay``
    seconds before the next one (never after the last).

    Args:
        max_attempts: Number of connection attempts (at least 1)
        retry_delay: Seconds to wait between attempts
        script_module: Object exposing ``scriptapp`` (auto-detected if None)

    Returns:
        HostSession on the first successful attempt

    Raises:
        HostUnavailable: No scripting entry point (permanent, not retried)
        ConnectionExhausted: All attempts failed
    """
    bridge_api = script_module if script_module is not None else find_script_module()
    if bridge_api is None:
        logger.critical("bmd global not available. Make sure you're running this from within DaVinci Resolve.")
        raise HostUnavailable()

    max_attempts = max(1, int(max_attempts))

    for attempt in range(1, max_attempts + 1):
        resolve, fusion, reason = _attempt_connection(bridge_api)

        if resolve is not None:
            logger.info(f"Connected to DaVinci Resolve on attempt {attempt}")
            return HostSession(
                resolve=resolve,
                fusion=fusion,
                capabilities=CapabilityTable.from_resolve(resolve),
                attempts=attempt,
            )

        logger.warning(f"Attempt {attempt}: {reason}")
        if attempt < max_attempts:
            logger.debug(f"Retrying connection in {retry_delay}s, attempt {attempt + 1} of {max_attempts}")
            time.sleep(retry_delay)

    logger.critical(f"Failed to connect to DaVinci Resolve after {max_attempts} attempts.")
    raise ConnectionExhausted(max_attempts)


def _attempt_connection(bridge_api: Any):
    """One bridge -> session round. Returns (resolve, fusion, failure_reason)."""
    try:
        fusion = call_operation(bridge_api, "scriptapp", "Fusion")
    except HostError as e:
        return None, None, f"Failed to get Fusion: {_reason(e)}"
    if not fusion:
        return None, None, "Failed to get Fusion: scriptapp returned nothing"

    try:
        resolve = call_operation(fusion, "GetResolve")
    except HostError as e:
        return None, fusion, f"Failed to get Resolve: {_reason(e)}"
    if not resolve:
        return None, fusion, "Failed to get Resolve: GetResolve returned nothing"

    return resolve, fusion, ""


def _reason(error: HostError) -> str:
    return getattr(error, "reason", "") or error.user_message


# =============================================================================
# Host / environment information
# =============================================================================

def get_os_info() -> str:
    """Human-readable OS name: Windows, macOS, Linux or the raw system name."""
    system = platform.system()
    if system == "Darwin":
        return "macOS"
    return system or "Unknown"


def get_host_version(resolve: Any) -> str:
    """Resolve version string, or a hint based on which methods exist."""
    if resolve is None:
        return "Unknown"

    version, found = invoke_if_present(resolve, "GetVersionString")
    if found and version:
        return str(version)

    manager, _ = invoke_if_present(resolve, "GetProjectManager")
    project, _ = invoke_if_present(manager, "GetCurrentProject")
    if project is not None:
        for method_name in ("GetSetting", "GetPresetList", "GetRenderFormats"):
            if has_capability(project, method_name):
                return f"Unknown (has {method_name})"

    return "Unknown"


def get_current_page(project: Any, resolve: Any = None) -> Optional[str]:
    """Name of the open Resolve page, asking the session first."""
    for owner in (resolve, project):
        if not has_capability(owner, "GetCurrentPage"):
            continue
        page, found = invoke_if_present(owner, "GetCurrentPage")
        if found and page:
            return page
    return None


def switch_page(project: Any, page: Optional[str], resolve: Any = None) -> bool:
    """Open a Resolve page ("edit", "color", "fusion", ...). No-op for None."""
    if not page:
        return False
    if has_capability(resolve, "OpenPage"):
        _, found = invoke_if_present(resolve, "OpenPage", page.lower())
        return found
    _, found = invoke_if_present(project, "SetCurrentPage", page)
    return found


FEATURE_PROBES = {
    "Transitions": ("timeline", "AddTransition"),
    "Timeline Item Removal": ("timeline", "RemoveItem"),
    "Fusion Titles": ("timeline", "InsertFusionTitleIntoTimeline"),
    "Fusion Generators": ("timeline", "InsertFusionGeneratorIntoTimeline"),
    "Subtitles from Audio": ("timeline", "CreateSubtitlesFromAudio"),
    "Media Duplication": ("media_pool", "DuplicateMediaPoolItem"),
    "Timeline Appending": ("media_pool", "AppendToTimeline"),
    "Audio Transcription": ("media_pool", "TranscribeAudio"),
}


def get_feature_support_info(
    project: Any,
    capabilities: Optional[CapabilityTable] = None,
) -> Dict[str, bool]:
    """
    Map of optional feature name to availability for the current project.

    Recomputed on every call; the timeline can change between calls.
    """
    if project is None:
        return {}

    timeline, _ = invoke_if_present(project, "GetCurrentTimeline")
    media_pool, _ = invoke_if_present(project, "GetMediaPool")
    targets = {"timeline": timeline, "media_pool": media_pool}
    table = capabilities or CapabilityTable()

    support = {}
    for feature, (target, method_name) in FEATURE_PROBES.items():
        obj = targets[target]
        support[feature] = obj is not None and table.supports(method_name, obj)
    return support


def log_feature_support(project: Any, capabilities: Optional[CapabilityTable] = None) -> Dict[str, bool]:
    """Log one line per optional API feature and return the support map."""
    support = get_feature_support_info(project, capabilities)
    for feature, supported in support.items():
        logger.info(f"API Feature {feature}: {'Available' if supported else 'Not Available'}")
    return support
