"""
Editing Workflows - shared business logic for every front-end

Each workflow takes the EditorContext and a FrontEnd, asks the user what
it needs through the FrontEnd, runs the host and AI operations and
reports the outcome as an alert. Workflows return True on success and
never raise for host or persistence failures.

Usage:
    from drone_editor import workflows

    workflows.auto_edit(context, front_end)
"""

import re
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

from . import color_grading, fusion, media_pool, timeline
from .exceptions import ProjectError
from .logger import log_error, log_step, log_success, log_warning, logger
from .ui.base import PROJECT_FILE_FILTER, VIDEO_FILE_FILTER, FrontEnd

if TYPE_CHECKING:
    from .app import EditorContext

SCENES_TIMELINE_NAME = "Drone Scenes"
HIGHLIGHTS_TIMELINE_NAME = "Drone Highlights"
AUTO_EDIT_TIMELINE_NAME = "Auto Drone Edit"
TOP_HIGHLIGHTS = 5
DEFAULT_PRESET = "Drone Aerial"

AUTO_EDIT_AUDIO = {
    "normalize": True,
    "noise_reduction": 0.7,
    "eq": True,
    "compression": 0.5,
}


def scaled_progress(progress: Callable[[int], None], low: int, high: int) -> Callable[[int], None]:
    """Map a 0-100 sub-task onto the ``low``-``high`` band of an outer bar."""
    def report(percent: int) -> None:
        progress(int(low + (high - low) * percent / 100))
    return report


def project_file_name(name: str) -> str:
    cleaned = "".join(ch for ch in (name or "") if ch.isalnum() or ch.isspace())
    return re.sub(r"\s+", "_", cleaned) + ".droneproj"


def _require_media_pool(ctx: "EditorContext", ui: FrontEnd) -> Optional[Any]:
    pool = ctx.media_pool
    if pool is None:
        ui.show_alert("Error", "Cannot access the media pool", "error")
    return pool


def _media_pool_clips(ctx: "EditorContext", ui: FrontEnd) -> List[Any]:
    pool = _require_media_pool(ctx, ui)
    if pool is None:
        return []
    clips = media_pool.list_clips(pool)
    if not clips:
        ui.show_alert("No Clips", "No clips found in media pool", "warning")
    return clips


def _build_trimmed_timeline(ctx: "EditorContext", segments: List[Any], name: str) -> Optional[Any]:
    """New timeline of the segments' source clips, trimmed to the segments."""
    source_clips = []
    for segment in segments:
        if all(segment.clip is not clip for clip in source_clips):
            source_clips.append(segment.clip)

    new_timeline = timeline.create_from_clips(ctx.project, ctx.media_pool, source_clips, name)
    if new_timeline is None:
        return None
    timeline.update_with_trimmed_clips(ctx.project, ctx.media_pool, new_timeline, segments)
    return new_timeline


# =============================================================================
# Media
# =============================================================================

def import_media(ctx: "EditorContext", ui: FrontEnd, paths: Optional[List[str]] = None) -> bool:
    """Ask for video files and import them into the media pool."""
    pool = _require_media_pool(ctx, ui)
    if pool is None:
        return False

    if paths is None:
        paths = ui.ask_open_paths("Import Media Files", str(Path.home()), VIDEO_FILE_FILTER, multi=True)
    if not paths:
        logger.info("Import cancelled")
        return False

    def task(progress):
        progress(0)
        items = media_pool.import_media(pool, paths)
        progress(100)
        return items

    items = ui.show_progress("Importing Media", "Importing media files...", task)
    if not items:
        ui.show_alert("Import Failed", "Failed to import media files", "error")
        return False

    ui.show_alert("Import Complete", f"Successfully imported {len(items)} files", "info")
    return True


# =============================================================================
# AI workflows
# =============================================================================

def detect_scenes(ctx: "EditorContext", ui: FrontEnd) -> bool:
    """
    Split the media pool clips into scenes.

    The current timeline is rebuilt from the scenes if the user agrees;
    without a current timeline a new one is created.
    """
    clips = _media_pool_clips(ctx, ui)
    if not clips:
        return False

    if not ui.show_confirm("Scene Detection", f"Analyze {len(clips)} clips for scene changes?"):
        return False

    segments = ui.show_progress(
        "Scene Detection", "Analyzing clips...",
        lambda progress: ctx.ai.detect_scenes(clips, progress),
    )
    if not segments:
        ui.show_alert("Scene Detection Failed", "No scenes detected", "warning")
        return False

    current = ctx.current_timeline
    if current is not None:
        if not ui.show_confirm("Update Timeline", "Update current timeline with detected scenes?"):
            return False
        timeline.update_with_trimmed_clips(ctx.project, ctx.media_pool, current, segments)
        ui.show_alert("Scene Detection Complete", f"Updated timeline with {len(segments)} scenes", "info")
        return True

    if _build_trimmed_timeline(ctx, segments, SCENES_TIMELINE_NAME) is None:
        ui.show_alert("Timeline Creation Failed", "Failed to create new timeline", "error")
        return False

    ui.show_alert("Scene Detection Complete", f"Created new timeline with {len(segments)} scenes", "info")
    return True


def smart_highlights(ctx: "EditorContext", ui: FrontEnd) -> bool:
    """Build a timeline from the five best highlight windows."""
    clips = _media_pool_clips(ctx, ui)
    if not clips:
        return False

    highlights = ui.show_progress(
        "Smart Highlights", "Detecting highlights...",
        lambda progress: ctx.ai.smart_highlight(clips, progress),
    )
    if not highlights:
        ui.show_alert("No Highlights", "No highlights detected", "warning")
        return False

    top = [h.to_segment() for h in highlights[:TOP_HIGHLIGHTS]]
    if _build_trimmed_timeline(ctx, top, HIGHLIGHTS_TIMELINE_NAME) is None:
        ui.show_alert("Timeline Creation Failed", "Failed to create highlights timeline", "error")
        return False

    ui.show_alert("Highlights Created", f"Created highlights timeline with {len(top)} clips", "info")
    return True


def apply_color_preset(ctx: "EditorContext", ui: FrontEnd, preset: Optional[str] = None) -> bool:
    """Apply the selected LUT (or named look) to the current timeline."""
    preset = preset or ctx.options.lut_selection
    project = ctx.project

    if preset in color_grading.PRESET_LUTS:
        applied = color_grading.apply_preset(project, preset)
    else:
        lut_path = color_grading.get_lut_path(preset)
        if not lut_path:
            ui.show_alert("Error", f"LUT {preset} not found", "error")
            return False
        applied = color_grading.apply_lut(project, lut_path)

    if applied:
        ui.show_alert("Success", f"Applied {preset} LUT", "info")
    else:
        ui.show_alert("Error", "Failed to apply LUT", "error")
    return applied


def auto_color(ctx: "EditorContext", ui: FrontEnd, intensity: float = 0.5) -> bool:
    current = ctx.current_timeline
    if current is None:
        ui.show_alert("No Timeline", "No current timeline found", "warning")
        return False

    success = ui.show_progress(
        "Auto Color", "Applying auto color grading...",
        lambda progress: ctx.ai.auto_color_grade(current, intensity, progress),
    )
    if success:
        ui.show_alert("Success", "Applied auto color grading", "info")
    else:
        ui.show_alert("Error", "Failed to apply auto color grading", "error")
    return bool(success)


def audio_options(ctx: "EditorContext") -> Dict[str, Any]:
    """Audio enhancement settings derived from the editor options."""
    return {
        "normalize": ctx.options.auto_volume,
        "noise_reduction": 0.5,
        "eq": ctx.options.noise_gate_eq,
        "compression": 0.3,
    }


def enhance_audio(ctx: "EditorContext", ui: FrontEnd) -> bool:
    current = ctx.current_timeline
    if current is None:
        ui.show_alert("No Timeline", "No current timeline found", "warning")
        return False

    success = ui.show_progress(
        "Audio Enhancement", "Enhancing audio...",
        lambda progress: ctx.ai.enhance_audio(current, audio_options(ctx), progress),
    )
    if success:
        ui.show_alert("Success", "Enhanced audio successfully", "info")
    else:
        ui.show_alert("Error", "Failed to enhance audio", "error")
    return bool(success)


def fusion_effects(ctx: "EditorContext", ui: FrontEnd) -> bool:
    success = ui.show_progress(
        "Fusion Effects", "Adding titles, transitions and effects...",
        lambda progress: fusion.run_automation(ctx.project, ctx.resolve),
    )
    if success:
        ui.show_alert("Success", "Fusion effects applied", "info")
    else:
        ui.show_alert("Error", "Failed to apply Fusion effects", "error")
    return bool(success)


def run_auto_edit(ctx: "EditorContext", clips: List[Any], progress: Callable[[int], None]) -> Optional[Any]:
    """
    Scenes -> timeline -> transitions -> colour -> audio, without dialogs.

    Returns the new timeline, or None if it could not be created.
    """
    options = ctx.options

    progress(10)
    log_step(f"Detecting scenes in {len(clips)} clips")
    segments = ctx.ai.detect_scenes(clips, scaled_progress(progress, 10, 40))

    progress(40)
    log_step("Building auto edit timeline")
    new_timeline = timeline.create_from_clips(ctx.project, ctx.media_pool, clips, AUTO_EDIT_TIMELINE_NAME)
    if new_timeline is None:
        log_error("Auto edit stopped: timeline could not be created")
        return None
    if segments:
        timeline.update_with_trimmed_clips(ctx.project, ctx.media_pool, new_timeline, segments)
    else:
        log_warning("No scenes detected, keeping whole clips")

    progress(50)
    log_step("Adding transitions")
    timeline.apply_transitions(new_timeline, options.default_transition, options.default_transition_duration)

    progress(60)
    preset = options.lut_selection if options.lut_selection in color_grading.PRESET_LUTS else DEFAULT_PRESET
    log_step(f"Applying colour preset {preset}")
    color_grading.apply_preset(ctx.project, preset)

    progress(70)
    log_step("Enhancing audio")
    ctx.ai.enhance_audio(new_timeline, dict(AUTO_EDIT_AUDIO), scaled_progress(progress, 70, 100))

    progress(100)
    log_success(f"Auto edit ready: {AUTO_EDIT_TIMELINE_NAME} ({len(segments or [])} scenes)")
    return new_timeline


def auto_edit(ctx: "EditorContext", ui: FrontEnd) -> bool:
    """Automatic edit of every clip in the media pool."""
    clips = _media_pool_clips(ctx, ui)
    if not clips:
        return False

    new_timeline = ui.show_progress(
        "Auto Edit", "Creating automatic edit...",
        lambda progress: run_auto_edit(ctx, clips, progress),
    )
    if new_timeline is None:
        ui.show_alert("Error", "Failed to create timeline", "error")
        return False

    ui.show_alert("Auto Edit Complete", "Successfully created automatic edit", "info")
    return True


# =============================================================================
# Project files
# =============================================================================

def new_project(ctx: "EditorContext", ui: FrontEnd, name: Optional[str] = None, description: str = "") -> bool:
    if ctx.options.confirm_deletions and not ui.show_confirm(
        "New Project", "Create a new project? Any unsaved changes will be lost."
    ):
        return False

    ctx.store.new(name, description)
    ctx.last_save_path = None
    ui.show_alert("Project Created", "New project created successfully", "info")
    return True


def save_project(ctx: "EditorContext", ui: FrontEnd, path: Optional[str] = None, save_as: bool = False) -> bool:
    """Save to ``path``, the last save location, or a path the user picks."""
    if path is None and not save_as:
        path = ctx.last_save_path
    if path is None:
        path = ui.ask_save_path(
            "Save Project",
            str(ctx.settings.paths.project_dir),
            PROJECT_FILE_FILTER,
            project_file_name(ctx.store.record.name),
        )
    if not path:
        return False

    try:
        saved = ctx.store.save(Path(path), ctx.project, ctx.media_pool, ctx.options)
    except ProjectError as e:
        ui.show_alert("Save Error", f"Failed to save project: {e}", "error")
        return False

    ctx.last_save_path = str(saved)
    ui.show_alert("Project Saved", "Project saved successfully", "info")
    return True


def load_project(ctx: "EditorContext", ui: FrontEnd, path: Optional[str] = None) -> bool:
    if path is None:
        paths = ui.ask_open_paths("Open Project", str(ctx.settings.paths.project_dir), PROJECT_FILE_FILTER, multi=False)
        path = paths[0] if paths else None
    if not path:
        return False

    try:
        ctx.store.load(Path(path), ctx.project, ctx.media_pool, ctx.options)
    except ProjectError as e:
        ui.show_alert("Load Error", f"Failed to load project: {e}", "error")
        return False

    ctx.last_save_path = str(path)
    ui.show_alert("Project Loaded", "Project loaded successfully", "info")
    return True


def autosave(ctx: "EditorContext") -> bool:
    """Periodic save to the autosave directory; silent apart from logging."""
    return ctx.store.autosave(ctx.project, ctx.media_pool, ctx.options)


ACTIONS: Dict[str, Callable[["EditorContext", FrontEnd], Any]] = {
    "Import": import_media,
    "DetectScenes": detect_scenes,
    "Highlights": smart_highlights,
    "ColorGrading": apply_color_preset,
    "AutoColor": auto_color,
    "EnhanceAudio": enhance_audio,
    "FusionEffects": fusion_effects,
    "AutoEdit": auto_edit,
    "NewProject": new_project,
    "SaveProject": save_project,
    "LoadProject": load_project,
}
