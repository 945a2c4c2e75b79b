"""
AI Bridge - delegates analysis to external tools

- Scene detection: local executable printing JSON scene lists
- Colour grading: HTTP service returning a LUT per clip (requests)
- Audio enhancement: local executable run on exported track audio

Every operation falls back to the wrapped SimulatedAI when its tool is
missing, the run or request fails, the output cannot be parsed, or
nothing usable comes back.

Usage:
    bridge = BridgeAI(get_settings().ai)
    bridge.load_credentials(Path("ai_settings.json"))
    segments = bridge.detect_scenes(clips)
"""

import json
import os
import subprocess
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

import requests

from ..color_grading import apply_lut_to_item
from ..config import AIConfig
from ..core.cmd_runner import CommandError, executable_available, run_command
from ..logger import logger
from ..media_pool import get_clip_file_path, get_clip_name
from ..timeline import get_video_items
from .base import AIProvider, Highlight, ProgressCallback, Segment, report_progress
from .simulation import MAX_AUDIO_TRACKS, SimulatedAI

DEFAULT_AUDIO_OPTIONS = {
    "normalize": True,
    "noise_reduction": 0.5,
    "eq": True,
    "compression": 0.3,
}


class BridgeAI(AIProvider):
    """External-tool strategy with per-operation fallback to the simulation."""

    name = "bridge"

    def __init__(self, config: Optional[AIConfig] = None, fallback: Optional[SimulatedAI] = None):
        self.config = config or AIConfig()
        self.fallback = fallback or SimulatedAI(simulate_latency=self.config.simulate_latency)
        self.api_key = self.config.color_grade_api_key or None

    # -------------------------------------------------------------------------
    # Setup
    # -------------------------------------------------------------------------

    def load_credentials(self, path: Path) -> bool:
        """
        Read API keys from a JSON file: ``{"api_keys": {"color_grading": "..."}}``.

        Also reports which external binaries are missing.
        """
        logger.info("Initializing AI bridge")
        path = Path(path)
        if not path.is_file():
            logger.error("Cannot load AI settings: File not found")
            return False

        try:
            settings = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Invalid AI settings JSON: {e}")
            return False

        if not isinstance(settings, dict):
            logger.error("Invalid AI settings JSON")
            return False

        api_keys = settings.get("api_keys") or {}
        if api_keys.get("color_grading"):
            self.api_key = api_keys["color_grading"]

        for label, executable in (
            ("Scene detection", self.config.scene_detect_executable),
            ("Audio enhancement", self.config.audio_enhance_executable),
        ):
            if not executable_available(executable):
                logger.warning(f"{label} binary not found at: {executable}")
                logger.info(f"Will fall back to simulation for {label.lower()}")

        logger.info("AI bridge initialized successfully")
        return True

    # -------------------------------------------------------------------------
    # Scene detection
    # -------------------------------------------------------------------------

    def _parse_scenes(self, clip: Any, output: str) -> List[Segment]:
        data = json.loads(output)
        if isinstance(data, dict):
            data = data.get("scenes", [])
        if not isinstance(data, list):
            raise ValueError("scene list expected")

        segments = []
        for scene in data[: self.config.max_scenes]:
            start = float(scene["start_time"])
            end = float(scene["end_time"])
            if 0 <= start < end:
                segments.append(Segment(clip, start, end))
        return segments

    def _detect_clip_scenes(self, executable: str, clip: Any) -> List[Segment]:
        """Run the scene detector on one clip; empty list when it fails."""
        clip_path = get_clip_file_path(clip)
        if not clip_path:
            logger.warning("Could not get file path for clip, skipping")
            return []

        logger.info(f"Processing clip: {clip_path}")
        cmd = [
            executable,
            "--input", clip_path,
            "--threshold", str(self.config.scene_sensitivity),
            "--min-scene-length", str(self.config.min_scene_length),
            "--output", "json",
        ]
        try:
            result = run_command(cmd, timeout=self.config.command_timeout)
        except (CommandError, subprocess.TimeoutExpired, OSError):
            logger.error(f"Scene detection failed for: {clip_path}")
            return []

        try:
            segments = self._parse_scenes(clip, result.stdout)
        except (ValueError, KeyError, TypeError) as e:
            logger.error(f"Failed to parse scene detection output: {e}")
            return []

        for segment in segments:
            logger.info(f"Detected scene in '{get_clip_name(clip)}': {segment.start:.2f} to {segment.end:.2f}")
        return segments

    def detect_scenes(self, clips: List[Any], progress: Optional[ProgressCallback] = None) -> List[Segment]:
        if not clips:
            logger.error("Cannot detect scenes: No clips provided")
            return []

        executable = self.config.scene_detect_executable
        if not executable_available(executable):
            logger.warning("Scene detection binary not found, falling back to simulation")
            return self.fallback.detect_scenes(clips, progress)

        logger.info(f"Starting real AI scene detection on {len(clips)} clips")
        results: List[Segment] = []

        for i, clip in enumerate(clips, start=1):
            try:
                results.extend(self._detect_clip_scenes(executable, clip))
            finally:
                report_progress(progress, i, len(clips))

        logger.info(f"AI scene detection completed: Found {len(results)} scenes")
        if not results:
            # progress already reached 100 for this pass
            logger.warning("No scenes detected, falling back to simulation")
            return self.fallback.detect_scenes(clips)
        return results

    def smart_highlight(self, clips: List[Any], progress: Optional[ProgressCallback] = None) -> List[Highlight]:
        logger.warning("Real highlight detection not implemented, falling back to simulation")
        return self.fallback.smart_highlight(clips, progress)

    # -------------------------------------------------------------------------
    # Colour grading
    # -------------------------------------------------------------------------

    def _request_lut(self, clip_path: str, style: str, intensity: float) -> Optional[str]:
        payload = {
            "file_path": clip_path,
            "style": style,
            "intensity": intensity,
            "return_type": "lut",
        }
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }
        try:
            response = requests.post(
                self.config.color_grade_endpoint,
                json=payload,
                headers=headers,
                timeout=self.config.request_timeout,
            )
        except requests.exceptions.Timeout:
            logger.error(f"Color grading API request timeout ({self.config.request_timeout}s)")
            return None
        except requests.RequestException as e:
            logger.error(f"Color grading API request failed: {e}")
            return None

        if response.status_code != 200:
            logger.error(f"Color grading API request failed ({response.status_code})")
            return None

        try:
            result = response.json()
        except ValueError:
            result = None
        if not isinstance(result, dict) or not result.get("lut_path"):
            logger.error("Failed to parse color grading API response")
            return None
        return result["lut_path"]

    def auto_color_grade(
        self,
        timeline: Any,
        intensity: float = 0.5,
        progress: Optional[ProgressCallback] = None,
        style: str = "drone-aerial",
    ) -> bool:
        if timeline is None:
            logger.error("Cannot color grade: No timeline provided")
            return False

        if not self.api_key:
            logger.warning("No API key for color grading service, falling back to simulation")
            return self.fallback.auto_color_grade(timeline, intensity, progress)

        video_items = get_video_items(timeline)
        if not video_items:
            logger.warning("No video items in timeline")
            return False

        logger.info(f"Starting real AI color grading with style: {style}")
        success_count = 0
        for i, item in enumerate(video_items, start=1):
            media_item = None
            try:
                media_item = item.GetMediaPoolItem()
            except Exception as e:
                logger.debug(f"GetMediaPoolItem failed: {e}")
            clip_path = get_clip_file_path(media_item)
            if not clip_path:
                logger.warning("Could not get file path for timeline item, skipping")
                continue

            logger.info(f"Processing clip for color grading: {clip_path}")
            lut_path = self._request_lut(clip_path, style, intensity)
            if lut_path and apply_lut_to_item(item, lut_path):
                success_count += 1
            report_progress(progress, i, len(video_items))

        logger.info(f"Applied AI color grading to {success_count} of {len(video_items)} clips")
        if success_count == 0:
            logger.warning("No clips were color graded, falling back to simulation")
            return self.fallback.auto_color_grade(timeline, intensity, progress)
        return True

    # -------------------------------------------------------------------------
    # Audio
    # -------------------------------------------------------------------------

    def _enhance_track(self, timeline: Any, track_index: int, options: Dict[str, Any]) -> bool:
        fd, temp_audio = tempfile.mkstemp(suffix=".wav", prefix="drone_editor_")
        os.close(fd)
        enhanced_audio = f"{temp_audio}.enhanced.wav"
        try:
            try:
                timeline.ExportAudio(track_index, temp_audio, "WAV")
            except Exception as e:
                logger.warning(f"Failed to export audio track {track_index}: {e}")
                return False

            cmd = [
                self.config.audio_enhance_executable,
                "--input", temp_audio,
                "--output", enhanced_audio,
                "--normalize", "1" if options.get("normalize") else "0",
                "--noise-reduction", str(options.get("noise_reduction", 0.5)),
                "--eq", "1" if options.get("eq") else "0",
                "--compression", str(options.get("compression", 0.3)),
                "--eq-preset", self.config.eq_preset,
                "--wind-removal", "1" if self.config.wind_removal else "0",
            ]
            try:
                run_command(cmd, timeout=self.config.command_timeout)
            except (CommandError, subprocess.TimeoutExpired, OSError):
                logger.error(f"Audio enhancement failed for track {track_index}")
                return False

            try:
                timeline.ImportAudio(track_index, enhanced_audio)
            except Exception as e:
                logger.warning(f"Failed to import enhanced audio for track {track_index}: {e}")
                return False
            return True
        finally:
            for path in (temp_audio, enhanced_audio):
                if os.path.exists(path):
                    os.remove(path)

    def enhance_audio(
        self,
        timeline: Any,
        options: Optional[Dict[str, Any]] = None,
        progress: Optional[ProgressCallback] = None,
    ) -> bool:
        if timeline is None:
            logger.error("Cannot enhance audio: No timeline provided")
            return False

        options = {**DEFAULT_AUDIO_OPTIONS, **(options or {})}

        if not executable_available(self.config.audio_enhance_executable):
            logger.warning("Audio enhancement binary not found, falling back to simulation")
            return self.fallback.enhance_audio(timeline, options, progress)

        audio_tracks = []
        for track_index in range(1, MAX_AUDIO_TRACKS + 1):
            try:
                items = timeline.GetItemListInTrack("audio", track_index)
            except Exception:
                items = None
            if items:
                audio_tracks.append(track_index)

        if not audio_tracks:
            logger.warning("No audio tracks found in timeline")
            return False

        logger.info("Starting real audio enhancement processing")
        success_count = 0
        for i, track_index in enumerate(audio_tracks, start=1):
            if self._enhance_track(timeline, track_index, options):
                success_count += 1
            report_progress(progress, i, len(audio_tracks))

        logger.info(f"Enhanced {success_count} of {len(audio_tracks)} audio tracks")
        if success_count == 0:
            logger.warning("No audio tracks were enhanced, falling back to simulation")
            return self.fallback.enhance_audio(timeline, options, progress)
        return True

    # -------------------------------------------------------------------------
    # Simulation-only operations
    # -------------------------------------------------------------------------

    def smart_reframe(self, timeline: Any, aspect: str = "16:9", progress: Optional[ProgressCallback] = None) -> bool:
        return self.fallback.smart_reframe(timeline, aspect, progress)

    def noise_reduction(self, timeline: Any, strength: float = 0.5, progress: Optional[ProgressCallback] = None) -> bool:
        return self.fallback.noise_reduction(timeline, strength, progress)

    def voice_isolation(self, timeline: Any, intensity: float = 0.7, progress: Optional[ProgressCallback] = None) -> bool:
        return self.fallback.voice_isolation(timeline, intensity, progress)
