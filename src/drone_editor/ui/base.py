"""
Front-end interface shared by the Fusion, standard and console UIs.

Business logic lives in ``drone_editor.workflows``; a front-end only shows
dialogs, collects paths and wires its controls to those workflows.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, List, Optional

ProgressTask = Callable[[Callable[[int], None]], Any]

ALERT_LEVELS = ("info", "warning", "error")

VIDEO_FILE_FILTER = "Video Files (*.mp4 *.mov *.avi *.mxf *.mkv)"
PROJECT_FILE_FILTER = "Drone Project (*.droneproj)"

# Toolbar actions every windowed front-end offers, in display order
MAIN_ACTIONS = (
    ("Import", "Import Media"),
    ("DetectScenes", "Detect Scenes"),
    ("Highlights", "Smart Highlights"),
    ("ColorGrading", "Color Grading"),
    ("AutoColor", "Auto Color"),
    ("EnhanceAudio", "Enhance Audio"),
    ("FusionEffects", "Fusion Effects"),
    ("AutoEdit", "Auto Edit"),
    ("NewProject", "New Project"),
    ("SaveProject", "Save Project"),
    ("LoadProject", "Load Project"),
    ("Exit", "Exit"),
)


class FrontEnd(ABC):
    """User-facing dialogs plus the front-end's main loop."""

    name = "base"

    def __init__(self, context: Any = None):
        self.context = context

    @abstractmethod
    def show_alert(self, title: str, message: str, level: str = "info") -> None:
        """Modal message; ``level`` is info, warning or error."""

    @abstractmethod
    def show_confirm(self, title: str, message: str) -> bool:
        """Yes/No question; False when dismissed."""

    @abstractmethod
    def show_progress(self, title: str, message: str, task: ProgressTask) -> Any:
        """
        Run ``task(progress)`` to completion with a progress display.

        ``progress`` takes an integer percentage. Returns the task's result.
        """

    @abstractmethod
    def ask_open_paths(
        self,
        title: str,
        directory: Optional[str] = None,
        file_filter: Optional[str] = None,
        multi: bool = True,
    ) -> Optional[List[str]]:
        """Files to open, or None if cancelled."""

    @abstractmethod
    def ask_save_path(
        self,
        title: str,
        directory: Optional[str] = None,
        file_filter: Optional[str] = None,
        default_name: Optional[str] = None,
    ) -> Optional[str]:
        """Target file, or None if cancelled."""

    @abstractmethod
    def run(self) -> Any:
        """Show the main interface and block until the user exits."""

    def dispatch(self, action_id: str) -> Any:
        """Run the workflow bound to a toolbar action."""
        from .. import workflows
        handler = workflows.ACTIONS.get(action_id)
        if handler is None:
            return None
        return handler(self.context, self)
