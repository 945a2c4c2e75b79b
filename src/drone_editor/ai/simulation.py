"""
Simulated AI - placeholder analysis with pseudo-random results

Scene cuts, highlight windows and processing delays are drawn from a
``random.Random`` that can be seeded for reproducible runs. Audio
enhancement is real: it drives the Fairlight track operations.

Usage:
    ai = SimulatedAI(rng=random.Random(42), sleep=lambda _: None)
    segments = ai.detect_scenes(clips, progress=print)
"""

import math
import random
import re
import time
from typing import Any, Callable, Dict, List, Optional

from .. import fairlight_audio
from ..logger import logger
from ..media_pool import get_clip_duration, get_clip_name
from ..timeline import get_video_items
from .base import AIProvider, Highlight, ProgressCallback, Segment, report_progress

MIN_SEGMENT_SECONDS = 2
SKIP_PROBABILITY = 0.1
FALLBACK_DURATION_RANGE = (20, 60)
HIGHLIGHT_LENGTH_RANGE = (3, 7)
HIGHLIGHT_SCORE_RANGE = (0.6, 1.0)
MAX_AUDIO_TRACKS = 10

_TIMECODE = re.compile(r"(\d+):(\d+):(\d+)")


class SimulatedAI(AIProvider):
    """Pseudo-random stand-in for scene detection, highlights and grading."""

    name = "simulation"

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        sleep: Optional[Callable[[float], None]] = None,
        simulate_latency: bool = True,
    ):
        self.rng = rng or random.Random()
        if not simulate_latency:
            self.sleep = lambda _seconds: None
        else:
            self.sleep = sleep or time.sleep

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def clip_duration(self, clip: Any) -> float:
        """
        Clip length in seconds.

        Numbers are used as-is; ``H:M:S[:F]`` timecodes are parsed with the
        frame field ignored; anything else gets a random 20-60 s.
        """
        raw = get_clip_duration(clip)
        if isinstance(raw, (int, float)) and not isinstance(raw, bool):
            return float(raw)
        if isinstance(raw, str):
            match = _TIMECODE.search(raw)
            if match:
                h, m, s = (int(g) for g in match.groups())
                return float(h * 3600 + m * 60 + s)
        return float(self.rng.randint(*FALLBACK_DURATION_RANGE))

    def _delay(self, low: float, high: float) -> None:
        self.sleep(self.rng.uniform(low, high))

    def _process_video_items(self, timeline: Any, what: str, delay_range, progress) -> bool:
        if timeline is None:
            logger.error(f"Cannot run {what}: No timeline provided")
            return False

        video_items = get_video_items(timeline)
        if not video_items:
            logger.warning("No video items in timeline")
            return False

        logger.info(f"Starting AI {what} on {len(video_items)} clips")
        for i, _item in enumerate(video_items, start=1):
            self._delay(*delay_range)
            report_progress(progress, i, len(video_items))

        logger.info(f"AI {what} completed")
        return True

    # -------------------------------------------------------------------------
    # AIProvider
    # -------------------------------------------------------------------------

    def detect_scenes(self, clips: List[Any], progress: Optional[ProgressCallback] = None) -> List[Segment]:
        if not clips:
            logger.error("Cannot detect scenes: No clips provided")
            return []

        logger.info(f"Starting AI scene detection on {len(clips)} clips")
        segments: List[Segment] = []

        for i, clip in enumerate(clips, start=1):
            clip_name = get_clip_name(clip)
            duration = self.clip_duration(clip)

            boundaries = [0.0]
            for _ in range(self.rng.randint(1, 3)):
                if duration > 4:
                    boundaries.append(float(self.rng.randint(2, math.floor(duration) - 2)))
            boundaries.append(duration)
            boundaries.sort()

            cuts = ", ".join(f"{b:g}" for b in boundaries)
            logger.info(f"Clip '{clip_name}' (duration {duration:.2f} sec): Detected scene changes at {cuts}")

            for start, end in zip(boundaries, boundaries[1:]):
                if end - start < MIN_SEGMENT_SECONDS or self.rng.random() < SKIP_PROBABILITY:
                    logger.info(f"Skipping segment from {start:.2f} to {end:.2f} (duration {end - start:.2f} sec)")
                    continue
                segments.append(Segment(clip, start, end))
                logger.info(f"Created subclip for '{clip_name}': {start:.2f} to {end:.2f}")

            report_progress(progress, i, len(clips))

        logger.info(f"AI scene detection completed: Found {len(segments)} scenes")
        return segments

    def smart_highlight(self, clips: List[Any], progress: Optional[ProgressCallback] = None) -> List[Highlight]:
        if not clips:
            logger.error("Cannot detect highlights: No clips provided")
            return []

        logger.info(f"Starting AI smart highlight detection on {len(clips)} clips")
        highlights: List[Highlight] = []

        for i, clip in enumerate(clips, start=1):
            clip_name = get_clip_name(clip)
            duration = self.clip_duration(clip)

            for _ in range(self.rng.randint(1, 3)):
                length = self.rng.randint(*HIGHLIGHT_LENGTH_RANGE)
                start = 0
                if duration > length + 2:
                    start = self.rng.randint(1, math.floor(duration - length - 1))
                end = min(start + length, duration)
                score = self.rng.uniform(*HIGHLIGHT_SCORE_RANGE)

                if end <= start:
                    continue
                highlights.append(Highlight(clip, float(start), float(end), score))
                logger.info(f"Detected highlight in '{clip_name}': {start:.2f} to {end:.2f} (score: {score:.2f})")

            report_progress(progress, i, len(clips))

        highlights.sort(key=lambda h: h.score, reverse=True)
        logger.info(f"AI smart highlight detection completed: Found {len(highlights)} highlights")
        return highlights

    def auto_color_grade(self, timeline: Any, intensity: float = 0.5, progress: Optional[ProgressCallback] = None) -> bool:
        return self._process_video_items(timeline, "auto color grading", (0.1, 0.6), progress)

    def enhance_audio(
        self,
        timeline: Any,
        options: Optional[Dict[str, Any]] = None,
        progress: Optional[ProgressCallback] = None,
    ) -> bool:
        """
        Normalise and denoise every audio track through Fairlight.

        ``options`` may switch off ``normalize`` or ``noise_reduction``.
        Succeeds when at least one track was processed.
        """
        if timeline is None:
            logger.error("Cannot enhance audio: No timeline provided")
            return False

        options = options or {}
        normalize = options.get("normalize", True)
        denoise = options.get("noise_reduction", True)

        track_count = fairlight_audio.get_audio_track_count(timeline)
        if track_count == 0:
            logger.warning("No audio tracks found in timeline")
            return False

        logger.info(f"Starting Fairlight audio enhancements on {track_count} audio tracks")
        succeeded = 0
        for track_index in range(1, track_count + 1):
            track_ok = False
            if normalize:
                if fairlight_audio.normalize_track_volume(timeline, track_index):
                    track_ok = True
                else:
                    logger.error(f"Failed to normalize volume for audio track {track_index}")
            if denoise:
                if fairlight_audio.apply_noise_reduction(timeline, track_index):
                    track_ok = True
                else:
                    logger.error(f"Failed to apply noise reduction for audio track {track_index}")
            if track_ok:
                succeeded += 1
            report_progress(progress, track_index, track_count)

        logger.info(f"Fairlight audio enhancements completed: {succeeded} of {track_count} tracks")
        return succeeded > 0

    def smart_reframe(self, timeline: Any, aspect: str = "16:9", progress: Optional[ProgressCallback] = None) -> bool:
        return self._process_video_items(timeline, f"smart reframing to {aspect or '16:9'}", (0.2, 1.0), progress)

    def noise_reduction(self, timeline: Any, strength: float = 0.5, progress: Optional[ProgressCallback] = None) -> bool:
        return self._process_video_items(timeline, f"noise reduction (strength: {strength})", (0.5, 1.5), progress)

    def voice_isolation(self, timeline: Any, intensity: float = 0.7, progress: Optional[ProgressCallback] = None) -> bool:
        if timeline is None:
            logger.error("Cannot isolate voices: No timeline provided")
            return False

        tracks = {}
        for track_index in range(1, MAX_AUDIO_TRACKS + 1):
            try:
                items = timeline.GetItemListInTrack("audio", track_index)
            except Exception:
                items = None
            if items:
                tracks[track_index] = list(items)

        if not tracks:
            logger.warning("No audio tracks found in timeline")
            return False

        total_items = sum(len(items) for items in tracks.values())
        logger.info(f"Starting AI voice isolation on {len(tracks)} audio tracks")

        done = 0
        for items in tracks.values():
            for _item in items:
                self._delay(0.2, 0.7)
                done += 1
                report_progress(progress, done, total_items)

        logger.info("AI voice isolation completed")
        return True
