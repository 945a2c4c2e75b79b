"""
Fairlight audio helpers: per-track volume normalisation and noise reduction.
"""

from typing import Any

from .logger import logger

TRACK_TYPE = "audio"
TARGET_PEAK_DB = -1.0
NOISE_REDUCTION_EFFECT = "Noise Reduction"


def _valid_track_index(track_index: Any) -> bool:
    return isinstance(track_index, int) and not isinstance(track_index, bool) and track_index >= 1


def normalize_track_volume(timeline_obj: Any, track_index: int, target_peak: float = TARGET_PEAK_DB) -> bool:
    """
    Set an audio track's level so it peaks at ``target_peak`` dBFS.

    Args:
        timeline_obj: Resolve Timeline
        track_index: 1-based audio track index
        target_peak: Target level in dB

    Returns:
        True if the new volume was set
    """
    if timeline_obj is None:
        logger.error("Cannot normalize track volume: No timeline object provided")
        return False

    if not _valid_track_index(track_index):
        logger.error(f"Invalid track index: {track_index}")
        return False

    try:
        current_volume = timeline_obj.GetTrackVolume(TRACK_TYPE, track_index)
    except Exception as e:
        logger.error(f"Failed to get current volume for track {track_index}: {e}")
        return False

    if current_volume is None:
        logger.error(f"Failed to get current volume for track {track_index}")
        return False

    gain_adjustment = target_peak - current_volume
    new_volume = current_volume + gain_adjustment
    logger.info(f"Normalizing track {track_index} by {gain_adjustment} dB")

    try:
        timeline_obj.SetTrackVolume(TRACK_TYPE, track_index, new_volume)
    except Exception as e:
        logger.error(f"Failed to normalize track {track_index}: {e}")
        return False

    logger.info(
        f"Successfully normalized track {track_index}. "
        f"Old Volume: {current_volume} dB, New Volume: {new_volume} dB"
    )
    return True


def apply_noise_reduction(timeline_obj: Any, track_index: int) -> bool:
    """Add the Fairlight noise reduction effect to an audio track."""
    if timeline_obj is None:
        logger.error("Cannot apply noise reduction: No timeline object provided")
        return False

    if not _valid_track_index(track_index):
        logger.error(f"Invalid track index: {track_index}")
        return False

    try:
        timeline_obj.AddTrackEffect(TRACK_TYPE, track_index, NOISE_REDUCTION_EFFECT)
    except Exception as e:
        logger.error(f"Failed to add '{NOISE_REDUCTION_EFFECT}' effect to track {track_index}: {e}")
        return False

    logger.info(f"Successfully applied noise reduction to track {track_index}")
    return True


def get_audio_track_count(timeline_obj: Any) -> int:
    """Number of audio tracks, 0 when it cannot be read."""
    if timeline_obj is None:
        return 0
    try:
        count = timeline_obj.GetTrackCount(TRACK_TYPE)
    except Exception as e:
        logger.warning(f"Error calling GetTrackCount: {e}")
        return 0
    return int(count or 0)
