"""
Fusion UIManager front-end.

Builds the main window with ``UIDispatcher.AddWindow`` and drives it with
``RunLoop``. Dialogs are small modal windows that run a nested loop until
a button calls ``ExitLoop``. File selection goes through
``fusion.RequestFile``.
"""

import time
from typing import Any, Callable, Dict, List, Optional

from ..exceptions import FrontEndError
from ..logger import logger
from .base import MAIN_ACTIONS, FrontEnd, ProgressTask

WINDOW_ID = "DroneEditorMain"
STATUS_ID = "Status"
AUTOSAVE_TIMER_ID = "AutosaveTimer"

ALERT_ICONS = {"info": "Information", "warning": "Warning", "error": "Critical"}


def _paths_from_request(result: Any) -> List[str]:
    """RequestFile gives a string, a list, or a Lua table (dict) of strings."""
    if not result:
        return []
    if isinstance(result, str):
        return [result]
    if isinstance(result, dict):
        return [str(result[key]) for key in sorted(result)]
    return [str(p) for p in result]


class FusionUI(FrontEnd):
    """Main window and dialogs built with Fusion's UIManager."""

    name = "fusion"

    def __init__(
        self,
        context: Any,
        ui_manager: Any,
        dispatcher: Any,
        clock: Callable[[], float] = time.monotonic,
    ):
        super().__init__(context)
        if ui_manager is None or dispatcher is None:
            raise FrontEndError("Fusion UI Manager is not available")
        self.ui = ui_manager
        self.dispatcher = dispatcher
        self.clock = clock
        self.window = None
        self.timer = None
        self._last_autosave = clock()
        logger.info("Successfully initialized Fusion UI Manager")

    # -------------------------------------------------------------------------
    # Dialogs
    # -------------------------------------------------------------------------

    def _modal(self, window_id: str, title: str, message: str, buttons: Dict[str, str]) -> Optional[str]:
        """Show a one-label window with ``buttons``; returns the clicked button's ID."""
        ui = self.ui
        clicked: Dict[str, Optional[str]] = {"id": None}

        dialog = self.dispatcher.AddWindow(
            {"ID": window_id, "WindowTitle": title, "Geometry": [200, 200, 400, 120]},
            ui.VGroup([
                ui.Label({"ID": "Message", "Text": message, "WordWrap": True}),
                ui.HGroup([ui.Button({"ID": button_id, "Text": text}) for button_id, text in buttons.items()]),
            ]),
        )

        def close(button_id):
            def handler(ev):
                clicked["id"] = button_id
                self.dispatcher.ExitLoop()
            return handler

        for button_id in buttons:
            setattr(getattr(dialog.On, button_id), "Clicked", close(button_id))
        setattr(getattr(dialog.On, window_id), "Close", close(None))

        dialog.Show()
        self.dispatcher.RunLoop()
        dialog.Hide()
        return clicked["id"]

    def show_alert(self, title: str, message: str, level: str = "info") -> None:
        icon = ALERT_ICONS.get(level, ALERT_ICONS["info"])
        logger.debug(f"Alert ({icon}): {title} - {message}")
        self._modal("DroneEditorAlert", title, message, {"OK": "OK"})

    def show_confirm(self, title: str, message: str) -> bool:
        return self._modal("DroneEditorConfirm", title, message, {"Yes": "Yes", "No": "No"}) == "Yes"

    def show_progress(self, title: str, message: str, task: ProgressTask) -> Any:
        ui = self.ui
        dialog = self.dispatcher.AddWindow(
            {"ID": "DroneEditorProgress", "WindowTitle": title, "Geometry": [200, 200, 400, 100]},
            ui.VGroup([
                ui.Label({"ID": "Message", "Text": message}),
                ui.Label({"ID": "Percent", "Text": "0%"}),
            ]),
        )
        items = dialog.GetItems()
        dialog.Show()

        def progress(percent: int) -> None:
            items["Percent"].Text = f"{max(0, min(100, int(percent)))}%"

        try:
            return task(progress)
        finally:
            dialog.Hide()

    def _request_file(self, title, directory, file_filter, default_name=None, saving=False) -> Any:
        fusion = getattr(self.context, "fusion", None)
        if fusion is None:
            logger.error("Cannot show file dialog: Fusion not available")
            return None
        options = {"FReqS_Title": title, "FReqB_Saving": saving}
        if file_filter:
            options["FReqS_Filter"] = file_filter
        return fusion.RequestFile(directory or "", default_name or "", options)

    def ask_open_paths(self, title, directory=None, file_filter=None, multi=True) -> Optional[List[str]]:
        paths = _paths_from_request(self._request_file(title, directory, file_filter))
        if not paths:
            return None
        return paths if multi else paths[:1]

    def ask_save_path(self, title, directory=None, file_filter=None, default_name=None) -> Optional[str]:
        paths = _paths_from_request(self._request_file(title, directory, file_filter, default_name, saving=True))
        return paths[0] if paths else None

    # -------------------------------------------------------------------------
    # Main window
    # -------------------------------------------------------------------------

    def update_status(self) -> None:
        if self.window is None:
            return
        project = getattr(self.context, "project", None)
        name = "No project"
        if project is not None and hasattr(project, "GetName"):
            name = project.GetName() or name
        self.window.GetItems()[STATUS_ID].Text = f"Current project: {name}"

    def maybe_autosave(self) -> bool:
        """Autosave once the configured interval has elapsed."""
        interval = self.context.settings.ui.autosave_interval_minutes * 60
        if interval <= 0 or self.clock() - self._last_autosave < interval:
            return False
        self._last_autosave = self.clock()
        from .. import workflows
        return workflows.autosave(self.context)

    def _on_action(self, action_id: str) -> Callable[[Any], None]:
        def handler(ev):
            if action_id == "Exit":
                self.dispatcher.ExitLoop()
                return
            logger.debug(f"Toolbar action: {action_id}")
            self.dispatch(action_id)
            self.update_status()
        return handler

    def build_window(self) -> Any:
        ui = self.ui
        buttons = [ui.Button({"ID": action_id, "Text": label}) for action_id, label in MAIN_ACTIONS]
        window = self.dispatcher.AddWindow(
            {"ID": WINDOW_ID, "WindowTitle": "Drone Editor", "Geometry": [100, 100, 800, 600]},
            ui.VGroup([
                ui.HGroup(buttons[:6]),
                ui.HGroup(buttons[6:]),
                ui.Label({"ID": STATUS_ID, "Text": "Ready"}),
            ]),
        )

        for action_id, _ in MAIN_ACTIONS:
            setattr(getattr(window.On, action_id), "Clicked", self._on_action(action_id))
        setattr(getattr(window.On, WINDOW_ID), "Close", lambda ev: self.dispatcher.ExitLoop())

        timer = ui.Timer({"ID": AUTOSAVE_TIMER_ID, "Interval": 60 * 1000})

        def on_timer(ev):
            self.update_status()
            self.maybe_autosave()

        setattr(getattr(self.dispatcher.On, AUTOSAVE_TIMER_ID), "Timeout", on_timer)
        timer.Start()
        self.timer = timer

        self.window = window
        return window

    def run(self) -> bool:
        window = self.build_window()
        self.update_status()
        window.Show()
        logger.info("Using Fusion UI for application interface")
        self.dispatcher.RunLoop()
        window.Hide()
        return True
