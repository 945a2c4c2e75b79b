"""
Drone Editor Exception Hierarchy

Structured exception types for the few places that raise: the host
connector, project persistence, option files and the front-end selector.
Host delegates never raise; they log and return a sentinel instead.
All exceptions inherit from DroneEditorError for easy catching.

Usage:
    from drone_editor.exceptions import HostUnavailable, ProjectSchemaError

    try:
        store.load(path, project, media_pool)
    except ProjectSchemaError as e:
        logger.error(f"Load failed: {e}")
"""

from typing import Optional


class DroneEditorError(Exception):
    """Base exception for all Drone Editor errors."""

    def __init__(self, message: str, suggestion: Optional[str] = None):
        self.user_message = message
        self.suggestion = suggestion or ""
        super().__init__(message)

    def __str__(self) -> str:
        return self.user_message


# =============================================================================
# Host Connection Errors
# =============================================================================

class HostError(DroneEditorError):
    """Error talking to the DaVinci Resolve scripting host."""
    pass


class HostUnavailable(HostError):
    """No scripting entry point: not running inside (or next to) Resolve."""

    def __init__(self, message: str = "DaVinci Resolve scripting API is not available"):
        super().__init__(
            message,
            suggestion="Run the script from Workspace > Scripts inside DaVinci Resolve, "
                       "or set RESOLVE_SCRIPT_API / RESOLVE_SCRIPT_LIB for external scripting",
        )


class ConnectionExhausted(HostError):
    """The bridge or session could not be acquired within the retry budget."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(
            f"Failed to connect to DaVinci Resolve after {attempts} attempts",
            suggestion="Make sure Resolve is running and external scripting is enabled "
                       "(Preferences > System > General)",
        )


class CapabilityMissing(HostError):
    """A host operation is not exposed by this Resolve version."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"Method {operation} not available in this API version")


class HostCallFailed(HostError):
    """The host raised while executing a delegated call."""

    def __init__(self, operation: str, reason: str = ""):
        self.operation = operation
        self.reason = reason
        super().__init__(f"Error calling {operation}: {reason}" if reason else f"Error calling {operation}")


class ValidationError(DroneEditorError):
    """Missing or invalid arguments for a host operation."""
    pass


# =============================================================================
# Project Persistence Errors
# =============================================================================

class ProjectError(DroneEditorError):
    """Error saving or loading a .droneproj file."""

    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        super().__init__(message)


class ProjectIOError(ProjectError):
    """Project file missing, empty, unreadable or unwritable."""
    pass


class ProjectEncodeError(ProjectError):
    """Project record could not be serialized to JSON."""
    pass


class ProjectDecodeError(ProjectError):
    """Project file is not a JSON object."""
    pass


class ProjectSchemaError(ProjectError):
    """Project file parsed but lacks the version field."""
    pass


# =============================================================================
# Configuration / AI / UI Errors
# =============================================================================

class ConfigurationError(DroneEditorError):
    """Invalid options file or setting value."""
    pass


class AIBridgeError(DroneEditorError):
    """External analysis tool or service failed."""
    pass


class FrontEndError(DroneEditorError):
    """A UI front-end could not be built or crashed while running."""
    pass
