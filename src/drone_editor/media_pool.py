"""
Media Pool Delegate

Thin wrappers around the Resolve MediaPool: importing files, organising
bins and looking clips up by name. Every function validates its arguments
and returns a sentinel (None / False / []) with an ERROR line instead of
raising; host exceptions are caught at the call.

Usage:
    from drone_editor import media_pool

    items = media_pool.import_media(pool, ["/footage/DJI_0001.MP4"])
    drone_bin = media_pool.get_or_create_bin(pool, "Drone Footage")
"""

import os
from typing import Any, List, Optional, Sequence

from .logger import logger
from .resolve.capabilities import has_capability, invoke_if_present

UNKNOWN_CLIP_NAME = "Unknown"
CLIP_NAME_PROPERTIES = ("File Path", "Clip Name", "Name")


def import_media(media_pool: Any, file_paths: Sequence[str]) -> Optional[List[Any]]:
    """
    Import files into the media pool.

    Paths that do not exist are dropped with a warning.

    Args:
        media_pool: Resolve MediaPool
        file_paths: Files to import

    Returns:
        List of imported MediaPoolItems, or None if nothing was imported
    """
    if media_pool is None:
        logger.error("Cannot import media: MediaPool object is nil")
        return None

    if not file_paths:
        logger.error("Cannot import media: No file paths provided")
        return None

    valid_paths = []
    for path in file_paths:
        if path and os.path.isfile(path):
            valid_paths.append(str(path))
        else:
            logger.warning(f"File does not exist: {path}")

    if not valid_paths:
        logger.error("No valid files to import")
        return None

    logger.info(f"Importing {len(valid_paths)} media files")

    try:
        new_items = media_pool.ImportMedia(valid_paths)
    except Exception as e:
        logger.error(f"Failed to import media files: {e}")
        return None

    if not new_items:
        logger.error("Failed to import media files")
        return None

    new_items = list(new_items)
    logger.info(f"Successfully imported {len(new_items)} media files")
    for i, item in enumerate(new_items, start=1):
        logger.debug(f"Imported item {i}: {get_clip_name(item)}")

    return new_items


def create_bin(media_pool: Any, name: str, parent_bin: Any = None) -> Optional[Any]:
    """
    Create a bin (sub-folder) under ``parent_bin`` or the root folder.

    Returns:
        The new Folder, or None on failure
    """
    if media_pool is None:
        logger.error("Cannot create bin: MediaPool object is nil")
        return None

    if not name:
        logger.error("Cannot create bin: No name provided")
        return None

    try:
        parent_bin = parent_bin or media_pool.GetRootFolder()
        logger.info(f"Creating bin '{name}'")
        new_bin = media_pool.AddSubFolder(parent_bin, name)
    except Exception as e:
        logger.error(f"Failed to create bin '{name}': {e}")
        return None

    if not new_bin:
        logger.error(f"Failed to create bin '{name}'")
        return None

    logger.info(f"Successfully created bin '{name}'")
    return new_bin


def find_bin(folder: Any, name: str) -> Optional[Any]:
    """Direct sub-folder of ``folder`` called ``name``, if the host can list them."""
    sub_folders, found = invoke_if_present(folder, "GetSubFolderList")
    if not found or not sub_folders:
        return None

    for sub_folder in sub_folders:
        folder_name, _ = invoke_if_present(sub_folder, "GetName")
        if folder_name == name:
            return sub_folder
    return None


def get_or_create_bin(media_pool: Any, name: str) -> Optional[Any]:
    """
    Return the root-level bin called ``name``, creating it if needed.

    Older hosts cannot list sub-folders; there a failed create most likely
    means the bin already exists, and None is returned.
    """
    if media_pool is None:
        logger.error("Cannot get or create bin: MediaPool object is nil")
        return None

    if not name:
        logger.error("Cannot get or create bin: No name provided")
        return None

    root_bin, _ = invoke_if_present(media_pool, "GetRootFolder")
    if not root_bin:
        logger.error("Cannot get root folder")
        return None

    existing = find_bin(root_bin, name)
    if existing is not None:
        logger.info(f"Found existing bin '{name}'")
        return existing

    logger.info(f"Creating bin '{name}' (if it doesn't exist)")
    new_bin, _ = invoke_if_present(media_pool, "AddSubFolder", root_bin, name)
    if not new_bin:
        logger.warning(f"Failed to create bin '{name}', it might already exist")
        return None

    logger.info(f"Successfully created or found bin '{name}'")
    return new_bin


def list_clips(media_pool: Any, folder: Any = None) -> List[Any]:
    """Clips in ``folder`` (default: root folder). Empty list on failure."""
    if media_pool is None:
        logger.error("Cannot list clips: MediaPool object is nil")
        return []

    if folder is None:
        folder, _ = invoke_if_present(media_pool, "GetRootFolder")
    clips, _ = invoke_if_present(folder, "GetClipList")
    return list(clips or [])


def get_item_name(clip: Any) -> Optional[str]:
    """The clip's own media pool name (GetName, else the Clip Name property)."""
    try:
        if has_capability(clip, "GetName"):
            value = clip.GetName()
        elif has_capability(clip, "GetClipProperty"):
            value = clip.GetClipProperty("Clip Name")
        else:
            value = None
    except Exception as e:
        logger.debug(f"Could not read clip name: {e}")
        return None
    return str(value) if value else None


def get_item_by_name(media_pool: Any, name: str) -> Optional[Any]:
    """First clip in the root folder whose name equals ``name``."""
    if media_pool is None or not name:
        return None

    for clip in list_clips(media_pool):
        if get_item_name(clip) == name:
            return clip

    return None


def get_item_by_path(media_pool: Any, file_path: str) -> Optional[Any]:
    """First clip in the root folder whose File Path equals ``file_path``."""
    if media_pool is None or not file_path:
        return None

    for clip in list_clips(media_pool):
        if get_clip_file_path(clip) == file_path:
            return clip

    return None


def move_item_to_bin(media_pool: Any, item: Any, bin_folder: Any) -> bool:
    """Move one MediaPoolItem into ``bin_folder``."""
    if media_pool is None or item is None or bin_folder is None:
        logger.error("Cannot move item: Missing required parameters")
        return False

    try:
        result = media_pool.MoveClips([item], bin_folder)
    except Exception as e:
        logger.error(f"Failed to move item to bin: {e}")
        return False

    if not result:
        logger.error("Failed to move item to bin")
        return False

    logger.info("Successfully moved item to bin")
    return True


# =============================================================================
# Clip metadata
# =============================================================================

def get_clip_name(clip: Any) -> str:
    """
    Best available display name for a clip.

    Tries the File Path, Clip Name and Name properties, then GetName().
    """
    if clip is None:
        return UNKNOWN_CLIP_NAME

    if has_capability(clip, "GetClipProperty"):
        for prop in CLIP_NAME_PROPERTIES:
            try:
                value = clip.GetClipProperty(prop)
            except Exception:
                continue
            if value:
                return str(value)

    if has_capability(clip, "GetName"):
        try:
            value = clip.GetName()
        except Exception:
            value = None
        if value:
            return str(value)

    return UNKNOWN_CLIP_NAME


def get_clip_file_path(clip: Any) -> str:
    value, found = invoke_if_present(clip, "GetClipProperty", "File Path")
    return str(value) if found and value else ""


def get_clip_duration(clip: Any) -> Any:
    """Raw ``Duration`` property (number or timecode string), None if unavailable."""
    if clip is None:
        return None
    value, found = invoke_if_present(clip, "GetClipProperty", "Duration")
    return value if found else None
