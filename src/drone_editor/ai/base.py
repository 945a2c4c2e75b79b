"""
AI Provider Interface - scene, highlight, colour and audio analysis

One interface, two strategies:
    - SimulatedAI: pseudo-random scene cuts and highlights, sleeps to
      imitate processing time
    - BridgeAI: external executables and an HTTP grading service, falling
      back to the simulation whenever they are unavailable

The strategy is chosen once at startup (see ``get_ai_provider``).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

ProgressCallback = Callable[[int], None]


# =============================================================================
# Data Classes
# =============================================================================

@dataclass
class Segment:
    """A trimmed region of a clip, in seconds (start < end)."""
    clip: Any
    start: float
    end: float

    @property
    def duration(self) -> float:
        return self.end - self.start

    def __iter__(self):
        return iter((self.clip, self.start, self.end))

    def to_dict(self) -> Dict[str, Any]:
        return {"start": self.start, "end": self.end, "duration": self.duration}


@dataclass
class Highlight:
    """A scored window of a clip, in seconds."""
    clip: Any
    start: float
    end: float
    score: float

    @property
    def duration(self) -> float:
        return self.end - self.start

    def to_segment(self) -> Segment:
        return Segment(self.clip, self.start, self.end)

    def to_dict(self) -> Dict[str, Any]:
        return {"start": self.start, "end": self.end, "score": round(self.score, 3)}


def report_progress(progress: Optional[ProgressCallback], done: int, total: int) -> None:
    """Call ``progress`` with floor(100 * done / total)."""
    if progress is None or total <= 0:
        return
    progress(int(100 * done // total))


# =============================================================================
# Provider Interface
# =============================================================================

class AIProvider(ABC):
    """Analysis and enhancement operations used by the editing workflows."""

    name = "base"

    @abstractmethod
    def detect_scenes(self, clips: List[Any], progress: Optional[ProgressCallback] = None) -> List[Segment]:
        """Split each clip into scene segments."""

    @abstractmethod
    def smart_highlight(self, clips: List[Any], progress: Optional[ProgressCallback] = None) -> List[Highlight]:
        """Scored highlight windows across all clips, best first."""

    @abstractmethod
    def auto_color_grade(
        self,
        timeline: Any,
        intensity: float = 0.5,
        progress: Optional[ProgressCallback] = None,
    ) -> bool:
        """Grade every clip on the primary video track."""

    @abstractmethod
    def enhance_audio(
        self,
        timeline: Any,
        options: Optional[Dict[str, Any]] = None,
        progress: Optional[ProgressCallback] = None,
    ) -> bool:
        """Clean up and level the timeline's audio tracks."""

    @abstractmethod
    def smart_reframe(self, timeline: Any, aspect: str = "16:9", progress: Optional[ProgressCallback] = None) -> bool:
        """Reframe video items for a target aspect ratio."""

    @abstractmethod
    def noise_reduction(self, timeline: Any, strength: float = 0.5, progress: Optional[ProgressCallback] = None) -> bool:
        """Reduce video noise on the primary track."""

    @abstractmethod
    def voice_isolation(self, timeline: Any, intensity: float = 0.7, progress: Optional[ProgressCallback] = None) -> bool:
        """Isolate dialogue on the audio tracks."""
