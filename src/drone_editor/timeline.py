"""
Timeline Delegate

Wrappers around the Resolve Timeline: building timelines from clips,
inserting transitions between consecutive items on the primary video
track, rebuilding a timeline from trimmed segments, and timecode helpers.

Like the media pool delegate, nothing here raises: invalid arguments and
host failures are logged and reported as None / False.
"""

import math
import re
from typing import Any, Iterable, List, Optional

from .logger import logger
from .media_pool import get_clip_name
from .resolve.capabilities import has_capability, invoke_if_present

DEFAULT_TIMELINE_NAME = "Drone Timeline"
DEFAULT_TRANSITION = "Cross Dissolve"
DEFAULT_TRANSITION_FRAMES = 30
DEFAULT_FPS = 30

PRIMARY_VIDEO_TRACK = ("video", 1)

_TIMECODE_FULL = re.compile(r"^\s*(\d+):(\d+):(\d+)[:;](\d+)\s*$")
_TIMECODE_SHORT = re.compile(r"^\s*(\d+):(\d+):(\d+)\s*$")


def create_from_clips(
    project: Any,
    media_pool: Any,
    clips: List[Any],
    name: str = DEFAULT_TIMELINE_NAME,
) -> Optional[Any]:
    """
    Create a timeline containing ``clips`` in order.

    Returns:
        The new Timeline, or None on failure
    """
    if project is None or media_pool is None or not clips:
        logger.error("Cannot create timeline: Missing required parameters")
        return None

    name = name or DEFAULT_TIMELINE_NAME
    logger.info(f"Creating timeline '{name}' with {len(clips)} clips")

    try:
        new_timeline = media_pool.CreateTimelineFromClips(name, list(clips))
    except Exception as e:
        logger.error(f"Failed to create timeline: {e}")
        return None

    if not new_timeline:
        logger.error("Failed to create timeline")
        return None

    logger.info("Timeline created successfully")
    return new_timeline


def get_current(project: Any) -> Optional[Any]:
    """The project's current timeline, or None."""
    if project is None:
        logger.error("Cannot get current timeline: No project provided")
        return None

    current, _ = invoke_if_present(project, "GetCurrentTimeline")
    if not current:
        logger.warning("No current timeline found")
        return None
    return current


def find_by_name(project: Any, name: str) -> Optional[Any]:
    """Timeline called ``name`` in the project (indices are 1-based)."""
    if project is None or not name:
        return None

    count, found = invoke_if_present(project, "GetTimelineCount")
    if not found or not count:
        return None

    for index in range(1, int(count) + 1):
        candidate, _ = invoke_if_present(project, "GetTimelineByIndex", index)
        if candidate is None:
            continue
        candidate_name, _ = invoke_if_present(candidate, "GetName")
        if candidate_name == name:
            return candidate
    return None


def get_video_items(timeline_obj: Any) -> List[Any]:
    """Items on video track 1, empty list if unavailable."""
    items, _ = invoke_if_present(timeline_obj, "GetItemListInTrack", *PRIMARY_VIDEO_TRACK)
    return list(items or [])


def apply_transitions(
    timeline_obj: Any,
    transition_type: str = DEFAULT_TRANSITION,
    duration: int = DEFAULT_TRANSITION_FRAMES,
) -> bool:
    """
    Add a transition between every pair of consecutive items on video track 1.

    Returns:
        True if at least one transition was added
    """
    if timeline_obj is None:
        logger.error("Cannot apply transitions: No timeline provided")
        return False

    transition_type = transition_type or DEFAULT_TRANSITION
    duration = duration or DEFAULT_TRANSITION_FRAMES

    if not has_capability(timeline_obj, "GetItemListInTrack") or not has_capability(timeline_obj, "AddTransition"):
        logger.warning("Timeline does not support required methods for transitions")
        return False

    video_items = get_video_items(timeline_obj)
    if len(video_items) < 2:
        logger.warning("Not enough video items in timeline to add transitions")
        return False

    success_count = 0
    total_attempts = len(video_items) - 1
    for left, right in zip(video_items, video_items[1:]):
        try:
            if timeline_obj.AddTransition(transition_type, left, right, duration):
                success_count += 1
        except Exception as e:
            logger.debug(f"AddTransition failed: {e}")

    logger.info(f"Applied {success_count} transitions (out of {total_attempts} attempts)")
    return success_count > 0


def clear_video_track(timeline_obj: Any) -> int:
    """Remove every item from video track 1. Returns the number removed."""
    video_items = get_video_items(timeline_obj)
    if not video_items:
        return 0

    logger.info(f"Clearing {len(video_items)} clips from timeline")

    if has_capability(timeline_obj, "DeleteClips"):
        _, found = invoke_if_present(timeline_obj, "DeleteClips", video_items)
        return len(video_items) if found else 0

    removed = 0
    for item in video_items:
        _, found = invoke_if_present(timeline_obj, "RemoveItem", item)
        if found:
            removed += 1
        else:
            logger.warning("Failed to remove item from timeline")
    return removed


def _append_segment(media_pool: Any, clip: Any, start: float, end: float, fps: float) -> bool:
    clip_info = {
        "mediaPoolItem": clip,
        "startFrame": int(math.floor(start * fps)),
        "endFrame": int(math.floor(end * fps)),
    }
    result, found = invoke_if_present(media_pool, "AppendToTimeline", [clip_info])
    if found and result:
        return True

    # Hosts without clip-info support take the whole clip
    result, found = invoke_if_present(media_pool, "AppendToTimeline", [clip])
    return bool(found and result)


def update_with_trimmed_clips(
    project: Any,
    media_pool: Any,
    timeline_obj: Any,
    segments: Iterable[Any],
    fps: float = DEFAULT_FPS,
) -> bool:
    """
    Rebuild video track 1 from trimmed segments.

    Args:
        segments: Segment objects or (clip, start_seconds, end_seconds) tuples

    Returns:
        True once the rebuild ran (individual append failures are logged)
    """
    segments = list(segments or [])
    if project is None or media_pool is None or timeline_obj is None or not segments:
        logger.error("Cannot update timeline: Missing required parameters")
        return False

    clear_video_track(timeline_obj)

    logger.info(f"Adding {len(segments)} trimmed clips to timeline")
    for segment in segments:
        try:
            source_clip, start, end = _unpack_segment(segment)
        except (TypeError, ValueError):
            logger.warning("Invalid clip data provided")
            continue

        if source_clip is None or start is None or end is None:
            logger.warning("Invalid clip data provided")
            continue

        logger.info(f"Adding clip {get_clip_name(source_clip)} ({start:.2f} to {end:.2f} seconds)")

        trimmed_clip = source_clip
        if has_capability(media_pool, "DuplicateMediaPoolItem"):
            duplicate, found = invoke_if_present(media_pool, "DuplicateMediaPoolItem", source_clip)
            if found and duplicate:
                trimmed_clip = duplicate

        if not _append_segment(media_pool, trimmed_clip, start, end, fps):
            logger.warning("Failed to append clip to timeline")

    return True


def _unpack_segment(segment: Any):
    if hasattr(segment, "clip") and hasattr(segment, "start") and hasattr(segment, "end"):
        return segment.clip, segment.start, segment.end
    source_clip, start, end = segment[:3]
    return source_clip, start, end


# =============================================================================
# Timecode
# =============================================================================

def seconds_to_timecode(seconds: float, fps: int = DEFAULT_FPS) -> str:
    """Seconds to ``HH:MM:SS:FF`` (frames rounded half-up)."""
    fps = int(fps or DEFAULT_FPS)
    frames = int(math.floor(seconds * fps + 0.5))

    hours, frames = divmod(frames, fps * 3600)
    minutes, frames = divmod(frames, fps * 60)
    secs, frames = divmod(frames, fps)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}:{frames:02d}"


def timecode_to_seconds(timecode: str, fps: int = DEFAULT_FPS) -> float:
    """``HH:MM:SS:FF`` or ``HH:MM:SS`` to seconds; anything else is 0.0."""
    if not isinstance(timecode, str):
        return 0.0

    fps = fps or DEFAULT_FPS
    match = _TIMECODE_FULL.match(timecode)
    if match:
        h, m, s, f = (int(g) for g in match.groups())
    else:
        match = _TIMECODE_SHORT.match(timecode)
        if not match:
            return 0.0
        h, m, s = (int(g) for g in match.groups())
        f = 0

    return h * 3600 + m * 60 + s + f / fps
