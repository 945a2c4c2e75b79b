"""
Capability probing for the DaVinci Resolve scripting API.

The scripting API changes between Resolve releases, so every optional
operation is checked before it is called. Two layers:

- ``has_capability`` / ``invoke_if_present``: live probes on a host object.
  A missing method is a normal outcome, never an exception.
- ``CapabilityTable``: a static map from Resolve major version to the
  operations that release exposes, built once at connect time.

Usage:
    from drone_editor.resolve.capabilities import invoke_if_present

    items, found = invoke_if_present(timeline, "GetItemListInTrack", "video", 1)
    if not found:
        return False
"""

import re
from dataclasses import dataclass
from typing import Any, FrozenSet, Optional, Tuple

from ..exceptions import CapabilityMissing, HostCallFailed
from ..logger import logger


def has_capability(obj: Any, operation_name: str) -> bool:
    """True if ``obj`` exposes a callable named ``operation_name``. Never raises."""
    if obj is None or not isinstance(operation_name, str) or not operation_name:
        return False
    try:
        member = getattr(obj, operation_name, None)
    except Exception:
        return False
    return member is not None and callable(member)


def call_operation(obj: Any, operation_name: str, *args, **kwargs) -> Any:
    """
    Call ``obj.operation_name(*args)`` and return its result.

    Raises:
        CapabilityMissing: The host object does not expose the method
        HostCallFailed: The host raised while executing it
    """
    if not has_capability(obj, operation_name):
        raise CapabilityMissing(operation_name)
    try:
        return getattr(obj, operation_name)(*args, **kwargs)
    except Exception as e:
        raise HostCallFailed(operation_name, str(e)) from e


def invoke_if_present(obj: Any, operation_name: str, *args, **kwargs) -> Tuple[Any, bool]:
    """
    Call ``obj.operation_name(*args)`` if the host exposes it.

    Returns:
        (result, True) on success. (None, False) when the method is missing
        or raised; both mean "skip this feature" to the caller.
    """
    try:
        return call_operation(obj, operation_name, *args, **kwargs), True
    except CapabilityMissing as e:
        logger.info(e.user_message)
    except HostCallFailed as e:
        logger.warning(e.user_message)
    return None, False


# =============================================================================
# Static capability table
# =============================================================================

_BASE_OPERATIONS = frozenset({
    # Resolve / ProjectManager / Project
    "GetProjectManager", "GetCurrentProject", "GetMediaPool", "GetName",
    "GetCurrentTimeline", "SetCurrentTimeline", "GetTimelineCount",
    "GetTimelineByIndex", "GetSetting", "SetSetting", "GetCurrentPage",
    "OpenPage", "GetFusion",
    # MediaPool / Folder / MediaPoolItem
    "ImportMedia", "CreateTimelineFromClips", "AppendToTimeline",
    "GetRootFolder", "AddSubFolder", "GetClipList", "GetSubFolderList",
    "MoveClips", "GetClipProperty",
    # Timeline / TimelineItem
    "GetItemListInTrack", "GetTrackCount", "GetMediaPoolItem",
    "GetStart", "GetEnd", "GetFusionCompByIndex", "AddFusionComp",
})

_V16_OPERATIONS = _BASE_OPERATIONS | frozenset({
    "GetVersion", "GetVersionString", "SetLUT", "GetCurrentVideoItem",
    "SetCurrentTimecode",
})

_V17_OPERATIONS = _V16_OPERATIONS | frozenset({
    "InsertFusionTitleIntoTimeline", "InsertFusionGeneratorIntoTimeline",
    "InsertGeneratorIntoTimeline", "DeleteClips", "DuplicateTimeline",
    "AddTrack", "SetClipsLinked",
})

_V18_OPERATIONS = _V17_OPERATIONS | frozenset({
    "CreateSubtitlesFromAudio", "TranscribeAudio", "GetTrackSubType",
    "GetUniqueId",
})

# (first major version, last major version or None for open-ended, operations)
CAPABILITY_MATRIX = (
    (15, 15, _BASE_OPERATIONS),
    (16, 16, _V16_OPERATIONS),
    (17, 17, _V17_OPERATIONS),
    (18, None, _V18_OPERATIONS),
)

TRACKED_OPERATIONS: FrozenSet[str] = frozenset().union(*(ops for _, _, ops in CAPABILITY_MATRIX))


def parse_major_version(version: Any) -> Optional[int]:
    """Extract the major version from ``GetVersion()`` lists or version strings."""
    if isinstance(version, (list, tuple)) and version:
        version = version[0]
    if isinstance(version, bool):
        return None
    if isinstance(version, (int, float)):
        return int(version)
    if isinstance(version, str):
        match = re.match(r"\s*(\d+)", version)
        if match:
            return int(match.group(1))
    return None


def operations_for_version(major: Optional[int]) -> Optional[FrozenSet[str]]:
    if major is None:
        return None
    for first, last, operations in CAPABILITY_MATRIX:
        if major >= first and (last is None or major <= last):
            return operations
    if major < CAPABILITY_MATRIX[0][0]:
        return frozenset()
    return None


@dataclass
class CapabilityTable:
    """
    Operations supported by the connected host, computed once per session.

    Operations the table tracks are answered from the version row; anything
    else (or an unknown version) falls back to a live probe.
    """

    version: Optional[str] = None
    major: Optional[int] = None
    operations: Optional[FrozenSet[str]] = None

    @classmethod
    def from_resolve(cls, resolve: Any) -> "CapabilityTable":
        version_string, found = invoke_if_present(resolve, "GetVersionString")
        raw_version = version_string if found else None
        if raw_version is None:
            version_list, found = invoke_if_present(resolve, "GetVersion")
            raw_version = version_list if found else None

        major = parse_major_version(raw_version)
        table = cls(
            version=str(raw_version) if raw_version is not None else None,
            major=major,
            operations=operations_for_version(major),
        )
        if table.operations is None:
            logger.info("Unknown Resolve version, capabilities will be probed live")
        else:
            logger.info(f"Resolve {table.version}: {len(table.operations)} known API operations")
        return table

    @property
    def is_known(self) -> bool:
        return self.operations is not None

    def supports(self, operation_name: str, obj: Any = None) -> bool:
        """
        True if the operation can be used.

        The live object must expose the method; the version row can only
        veto operations it knows about.
        """
        live = has_capability(obj, operation_name)
        if not self.is_known or operation_name not in TRACKED_OPERATIONS:
            return live
        if obj is None:
            return operation_name in self.operations
        return live and operation_name in self.operations
