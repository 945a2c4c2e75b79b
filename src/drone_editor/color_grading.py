"""
Color Grading Module - LUT lookup and application for Drone Editor

This module provides:
- LUT file lookup by name across the Resolve LUT folders (.cube, .3dl, .dat)
- Applying a LUT to every clip on the primary video track
- Auto colour correction where the host exposes it
- Named colour presets (Cinematic, Vintage, Drone Aerial)

Usage:
    from drone_editor.color_grading import apply_preset

    apply_preset(project, "Drone Aerial")
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .logger import logger
from .resolve.capabilities import has_capability, invoke_if_present
from .resolve.connection import get_current_page, switch_page
from .timeline import get_video_items


# =============================================================================
# LUT File Support
# =============================================================================

SUPPORTED_LUT_EXTENSIONS = (".cube", ".3dl", ".dat")

# Display name -> file name shipped with Resolve
LUT_FILE_NAMES: Dict[str, str] = {
    "Default": "Default.cube",
    "Cinematic": "Film Look.cube",
    "Vintage": "Vintage Film.cube",
}

# Preset -> LUT name searched for it
PRESET_LUTS: Dict[str, str] = {
    "Cinematic": "Cinematic",
    "Vintage": "Vintage",
    "Drone Aerial": "Drone",
}


def _lut_dirs(lut_dirs: Optional[Sequence[Path]]) -> List[Path]:
    if lut_dirs is not None:
        return [Path(d) for d in lut_dirs]
    from .config import get_settings
    return list(get_settings().paths.lut_dirs)


def find_lut_file(name: str, lut_dir: Path) -> Optional[Path]:
    """
    Find a LUT file by name in one LUT directory.

    Args:
        name: LUT name (with or without extension)
        lut_dir: Directory to search

    Returns:
        Path to LUT file if found, None otherwise
    """
    if not lut_dir.exists():
        return None

    # Try exact match first
    for ext in SUPPORTED_LUT_EXTENSIONS:
        lut_path = lut_dir / f"{name}{ext}"
        if lut_path.is_file():
            return lut_path

    # Try with extension already included
    lut_path = lut_dir / name
    if lut_path.is_file() and lut_path.suffix.lower() in SUPPORTED_LUT_EXTENSIONS:
        return lut_path

    return None


def get_lut_path(lut_name: str, lut_dirs: Optional[Sequence[Path]] = None) -> Optional[str]:
    """
    Path of a LUT by display name, searching the Resolve LUT folders in order.

    Returns:
        Absolute path string, or None if no folder holds it
    """
    if not lut_name:
        logger.error("Cannot get LUT path: No LUT name provided")
        return None

    file_name = LUT_FILE_NAMES.get(lut_name, lut_name)
    for directory in _lut_dirs(lut_dirs):
        lut_path = find_lut_file(file_name, directory)
        if lut_path:
            logger.info(f"Found LUT at: {lut_path}")
            return str(lut_path)

    logger.warning(f"LUT not found: {lut_name}")
    return None


def list_available_luts(lut_dirs: Optional[Sequence[Path]] = None) -> List[str]:
    """
    List LUT names (without extension) across all LUT folders.

    Returns:
        Sorted, de-duplicated list of names
    """
    luts = set()
    for lut_dir in _lut_dirs(lut_dirs):
        if not lut_dir.is_dir():
            continue
        for file in lut_dir.iterdir():
            if file.is_file() and file.suffix.lower() in SUPPORTED_LUT_EXTENSIONS:
                luts.add(file.stem)
    return sorted(luts)


# =============================================================================
# Host Operations
# =============================================================================

def apply_lut_to_item(item: Any, lut_path: str) -> bool:
    """Apply a LUT to one timeline item."""
    # Resolve 16+ grades node 1; older builds had ApplyLUT(path)
    if has_capability(item, "SetLUT"):
        result, found = invoke_if_present(item, "SetLUT", 1, lut_path)
        return bool(found and result)
    result, found = invoke_if_present(item, "ApplyLUT", lut_path)
    return bool(found and result)


def apply_lut(project: Any, lut_path: str) -> bool:
    """
    Apply a LUT file to every clip on the current timeline's video track 1.

    Returns:
        True if at least one clip took the LUT
    """
    if project is None:
        logger.error("Cannot apply LUT: No project provided")
        return False

    if not lut_path:
        logger.error("Cannot apply LUT: No LUT path provided")
        return False

    if not os.path.isfile(lut_path):
        logger.error(f"LUT file does not exist: {lut_path}")
        return False

    current_timeline, _ = invoke_if_present(project, "GetCurrentTimeline")
    if not current_timeline:
        logger.warning("No current timeline found")
        return False

    video_items = get_video_items(current_timeline)
    if not video_items:
        logger.warning("No video items in timeline")
        return False

    success_count = sum(1 for item in video_items if apply_lut_to_item(item, lut_path))
    logger.info(f"Applied LUT to {success_count} of {len(video_items)} clips")
    return success_count > 0


def auto_color_correction(project: Any, resolve: Any = None) -> bool:
    """
    Run the host's automatic colour balance on each clip of video track 1.

    Returns:
        True if at least one clip was corrected
    """
    if project is None:
        logger.error("Cannot apply auto color correction: No project provided")
        return False

    current_timeline, _ = invoke_if_present(project, "GetCurrentTimeline")
    if not current_timeline:
        logger.warning("No current timeline found")
        return False

    video_items = get_video_items(current_timeline)
    if not video_items:
        logger.warning("No video items in timeline")
        return False

    previous_page = get_current_page(project, resolve)
    switch_page(project, "Color", resolve)

    success_count = 0
    try:
        for item in video_items:
            invoke_if_present(current_timeline, "SetCurrentVideoItem", item)
            if has_capability(item, "AutoColorAdjust"):
                result, found = invoke_if_present(item, "AutoColorAdjust")
            else:
                result, found = invoke_if_present(current_timeline, "AutoColorAdjustCurrentClip")
            if found and result:
                success_count += 1
    finally:
        switch_page(project, previous_page, resolve)

    logger.info(f"Applied auto color correction to {success_count} of {len(video_items)} clips")
    return success_count > 0


def apply_preset(project: Any, preset_name: str, lut_dirs: Optional[Sequence[Path]] = None) -> bool:
    """
    Apply a named colour look to the current timeline.

    "Drone Aerial" falls back to auto colour correction when its LUT is
    not installed.
    """
    if project is None or not preset_name:
        logger.error("Cannot apply color preset: Missing required parameters")
        return False

    current_timeline, _ = invoke_if_present(project, "GetCurrentTimeline")
    if not current_timeline:
        logger.warning("No current timeline found")
        return False

    if not get_video_items(current_timeline):
        logger.warning("No video items in timeline")
        return False

    lut_name = PRESET_LUTS.get(preset_name)
    if lut_name is None:
        logger.warning(f"Unknown preset: {preset_name}")
        return False

    lut_path = get_lut_path(lut_name, lut_dirs)
    if lut_path:
        return apply_lut(project, lut_path)

    logger.warning(f"{lut_name} LUT not found")
    if preset_name == "Drone Aerial":
        return auto_color_correction(project)
    return False
