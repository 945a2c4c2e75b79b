"""
Project Persistence (.droneproj)

A project file is a flat UTF-8 JSON record: name, description, timestamps,
a snapshot of the editor options, the current timeline summary and the
clips on its primary video track. Media is referenced by path only.

Saving re-derives the timeline and clip data from the live host. Loading
replaces the in-memory record and then reconciles it with the host: an
existing timeline of the recorded name is made current, otherwise the
clips are found (or re-imported) and the timeline is rebuilt.

Usage:
    store = ProjectStore()
    store.new("Coastline Flight", "DJI Mini 4 footage")
    store.save(Path("coastline.droneproj"), project, media_pool, options)
"""

import json
import re
import time
from dataclasses import dataclass, field, fields
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from . import media_pool as media_pool_ops
from . import timeline as timeline_ops
from .config import EditorOptions
from .exceptions import (
    ProjectDecodeError,
    ProjectEncodeError,
    ProjectIOError,
    ProjectSchemaError,
)
from .logger import logger
from .resolve.capabilities import invoke_if_present

PROJECT_VERSION = "1.0"
PROJECT_EXTENSION = ".droneproj"
DEFAULT_PROJECT_NAME = "Untitled Drone Project"
IMPORTED_TIMELINE_NAME = "Imported Timeline"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

DEFAULT_FPS = 30
DEFAULT_WIDTH = 1920
DEFAULT_HEIGHT = 1080


def _now() -> int:
    return int(time.time())


def _number(value: Any, default: Any) -> Any:
    """Host settings come back as strings; keep numbers numeric."""
    if value is None or value == "":
        return default
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return int(number) if number.is_integer() else number


def _format_timestamp(value: Any) -> str:
    try:
        return datetime.fromtimestamp(value).strftime(DATE_FORMAT)
    except (TypeError, ValueError, OverflowError, OSError):
        return "Unknown"


@dataclass
class ProjectRecord:
    """In-memory form of a .droneproj file."""

    version: str = PROJECT_VERSION
    name: str = DEFAULT_PROJECT_NAME
    description: str = ""
    created: int = field(default_factory=_now)
    modified: int = field(default_factory=_now)
    settings: Dict[str, Any] = field(default_factory=dict)
    timeline_data: Dict[str, Any] = field(default_factory=dict)
    clip_data: List[Dict[str, Any]] = field(default_factory=list)
    resolve_project_name: Optional[str] = None
    current_timeline_name: Optional[str] = None
    # Top-level keys this version does not know, written back unchanged
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def known_keys(cls) -> List[str]:
        return [f.name for f in fields(cls) if f.name != "extra"]

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.extra)
        for key in self.known_keys():
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProjectRecord":
        known = {key: data[key] for key in cls.known_keys() if key in data}
        extra = {key: value for key, value in data.items() if key not in known}
        return cls(**known, extra=extra)


class ProjectStore:
    """
    Owns the current ProjectRecord for an editor session.

    Save and load raise ProjectError subclasses; autosave reports a bool.
    """

    def __init__(self, record: Optional[ProjectRecord] = None, autosave_dir: Optional[Path] = None):
        self.record = record or ProjectRecord()
        self.autosave_dir = autosave_dir

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def new(self, name: Optional[str] = None, description: Optional[str] = None) -> ProjectRecord:
        """Start a fresh record (the previous one is discarded)."""
        self.record = ProjectRecord(
            name=name or DEFAULT_PROJECT_NAME,
            description=description or "",
        )
        logger.info(f"New project: {self.record.name}")
        return self.record

    # -------------------------------------------------------------------------
    # Save
    # -------------------------------------------------------------------------

    def _capture_host_state(self, project: Any) -> None:
        record = self.record

        project_name, found = invoke_if_present(project, "GetName")
        if found and project_name:
            record.resolve_project_name = project_name

        current_timeline, _ = invoke_if_present(project, "GetCurrentTimeline")
        if not current_timeline:
            return

        timeline_name, _ = invoke_if_present(current_timeline, "GetName")
        record.current_timeline_name = timeline_name

        def setting(key, default):
            value, _ = invoke_if_present(current_timeline, "GetSetting", key)
            return _number(value, default)

        record.timeline_data = {
            "name": timeline_name,
            "fps": setting("timelineFrameRate", DEFAULT_FPS),
            "resolution": {
                "width": setting("timelineResolutionWidth", DEFAULT_WIDTH),
                "height": setting("timelineResolutionHeight", DEFAULT_HEIGHT),
            },
        }

        clips = []
        for index, item in enumerate(timeline_ops.get_video_items(current_timeline), start=1):
            media_item, found = invoke_if_present(item, "GetMediaPoolItem")
            if not found or not media_item:
                continue
            start_frame, _ = invoke_if_present(item, "GetStart")
            end_frame, _ = invoke_if_present(item, "GetEnd")
            clips.append({
                "index": index,
                "name": media_pool_ops.get_item_name(media_item) or media_pool_ops.get_clip_name(media_item),
                "start_frame": start_frame,
                "end_frame": end_frame,
                "file_path": media_pool_ops.get_clip_file_path(media_item),
            })
        record.clip_data = clips

    def save(
        self,
        path: Path,
        project: Any = None,
        media_pool: Any = None,
        options: Optional[EditorOptions] = None,
    ) -> Path:
        """
        Write the current record, refreshed from the host, to ``path``.

        Raises:
            ProjectEncodeError: The record holds values JSON cannot encode
            ProjectIOError: The file cannot be written
        """
        path = Path(path)
        logger.info(f"Saving project to: {path}")

        self.record.modified = _now()
        if project is not None:
            self._capture_host_state(project)
        if options is not None:
            self.record.settings = options.to_dict()

        try:
            content = json.dumps(self.record.to_dict(), indent=2, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            logger.error(f"Error encoding project data: {e}")
            raise ProjectEncodeError(f"Error encoding project data: {e}", path=str(path)) from e

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            logger.error(f"Error opening file for writing: {e}")
            raise ProjectIOError(f"Could not open file: {e}", path=str(path)) from e

        logger.info("Project saved successfully")
        return path

    # -------------------------------------------------------------------------
    # Load
    # -------------------------------------------------------------------------

    @staticmethod
    def read(path: Path) -> Dict[str, Any]:
        """Parse and validate a project file without touching any state."""
        path = Path(path)
        if not path.is_file():
            logger.error(f"Project file not found: {path}")
            raise ProjectIOError("Project file not found", path=str(path))

        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Could not read project file: {e}")
            raise ProjectIOError(f"Could not read project file: {e}", path=str(path)) from e

        if not content.strip():
            logger.error("Empty project file")
            raise ProjectIOError("Empty project file", path=str(path))

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            logger.error(f"Error decoding project data: {e}")
            raise ProjectDecodeError("Invalid project file format", path=str(path)) from e

        if not isinstance(data, dict):
            logger.error("Error decoding project data: top level is not an object")
            raise ProjectDecodeError("Invalid project file format", path=str(path))

        if not data.get("version"):
            logger.error("Project file has no version information")
            raise ProjectSchemaError("Invalid project file format", path=str(path))

        return data

    def load(
        self,
        path: Path,
        project: Any = None,
        media_pool: Any = None,
        options: Optional[EditorOptions] = None,
    ) -> ProjectRecord:
        """
        Replace the current record with the file at ``path`` and reconcile.

        Raises:
            ProjectIOError, ProjectDecodeError, ProjectSchemaError
        """
        logger.info(f"Loading project from: {path}")
        data = self.read(path)

        self.record = ProjectRecord.from_dict(data)

        if options is not None and isinstance(self.record.settings, dict):
            options.update_from_dict(self.record.settings)

        if project is None or media_pool is None:
            logger.warning("No Resolve project available, skipping timeline reconciliation")
        else:
            self.reconcile(project, media_pool)

        logger.info("Project loaded successfully")
        return self.record

    def reconcile(self, project: Any, media_pool: Any) -> Optional[Any]:
        """
        Bring the host in line with the record's timeline.

        Returns:
            The timeline made current or created, or None
        """
        record = self.record
        if not record.clip_data:
            return None

        timeline_data = record.timeline_data or {}
        timeline_name = timeline_data.get("name") or IMPORTED_TIMELINE_NAME

        existing = timeline_ops.find_by_name(project, timeline_name)
        if existing is not None:
            logger.info(f"Timeline already exists: {timeline_name}")
            invoke_if_present(project, "SetCurrentTimeline", existing)
            return existing

        logger.info(f"Creating new timeline from project data: {timeline_name}")
        clips = []
        for clip_entry in record.clip_data:
            clip = media_pool_ops.get_item_by_name(media_pool, clip_entry.get("name"))
            if clip is None:
                clip = media_pool_ops.get_item_by_path(media_pool, clip_entry.get("file_path"))
            if clip is None and clip_entry.get("file_path"):
                imported = media_pool_ops.import_media(media_pool, [clip_entry["file_path"]])
                clip = imported[0] if imported else None
            if clip is not None:
                clips.append(clip)

        if not clips:
            logger.warning("None of the project's clips could be found or imported")
            return None

        new_timeline = timeline_ops.create_from_clips(project, media_pool, clips, timeline_name)
        if new_timeline is None:
            return None

        if timeline_data.get("fps"):
            invoke_if_present(new_timeline, "SetSetting", "timelineFrameRate", str(timeline_data["fps"]))
        resolution = timeline_data.get("resolution") or {}
        if resolution.get("width") and resolution.get("height"):
            invoke_if_present(new_timeline, "SetSetting", "timelineResolutionWidth", str(resolution["width"]))
            invoke_if_present(new_timeline, "SetSetting", "timelineResolutionHeight", str(resolution["height"]))
        return new_timeline

    # -------------------------------------------------------------------------
    # Autosave / summary
    # -------------------------------------------------------------------------

    def autosave_filename(self, base_dir: Optional[Path] = None, now: Optional[datetime] = None) -> Path:
        """``<sanitized name>_<YYYYmmdd_HHMMSS>_autosave.droneproj`` under the autosave dir."""
        if base_dir is None:
            base_dir = self.autosave_dir
        if base_dir is None:
            from .config import get_settings
            base_dir = get_settings().paths.autosave_dir

        now = now or datetime.now()
        name = "".join(ch for ch in (self.record.name or "") if ch.isalnum() or ch.isspace())
        name = re.sub(r"\s+", "_", name)
        return Path(base_dir) / f"{name}_{now:%Y%m%d_%H%M%S}_autosave{PROJECT_EXTENSION}"

    def autosave(self, project: Any = None, media_pool: Any = None, options: Optional[EditorOptions] = None) -> bool:
        """Save under a generated autosave filename; False on failure."""
        path = self.autosave_filename()
        try:
            self.save(path, project, media_pool, options)
        except (ProjectIOError, ProjectEncodeError) as e:
            logger.error(f"Autosave failed: {e}")
            return False
        return True

    def summary(self) -> Dict[str, Any]:
        record = self.record
        timeline_data = record.timeline_data or {}
        return {
            "name": record.name,
            "description": record.description,
            "created": _format_timestamp(record.created),
            "modified": _format_timestamp(record.modified),
            "timeline_name": timeline_data.get("name") or "None",
            "clip_count": len(record.clip_data or []),
        }
