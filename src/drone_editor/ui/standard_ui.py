"""
Standard UI front-end, used when Fusion's UIManager is unavailable.

Wraps a Qt-style ``ui`` object exposed by the host script environment:
``MessageBox``, ``FileDialog``, ``Dialog``, ``VBoxLayout``, ``Label``,
``ProgressBar``, ``MainWindow`` and ``Button``.
"""

from typing import Any, List, Optional

from ..exceptions import FrontEndError
from ..logger import logger
from .base import MAIN_ACTIONS, FrontEnd, ProgressTask


class StandardUI(FrontEnd):
    """Dialogs and a toolbar window on the host's standard ``ui`` object."""

    name = "standard"

    def __init__(self, context: Any, ui_module: Any):
        super().__init__(context)
        if ui_module is None:
            raise FrontEndError("Standard UI is not available")
        self.ui = ui_module
        self.window = None

    def show_alert(self, title: str, message: str, level: str = "info") -> None:
        box = self.ui.MessageBox
        icon = {"warning": box.Warning, "error": box.Critical}.get(level, box.Information)
        dialog = box({"WindowTitle": title, "Text": message, "Icon": icon})
        dialog.Show()

    def show_confirm(self, title: str, message: str) -> bool:
        box = self.ui.MessageBox
        dialog = box({
            "WindowTitle": title,
            "Text": message,
            "Icon": box.Question,
            "Buttons": [box.Yes, box.No],
            "DefaultButton": box.No,
        })
        return dialog.Show() == box.Yes

    def show_progress(self, title: str, message: str, task: ProgressTask) -> Any:
        ui = self.ui
        dialog = ui.Dialog({"WindowTitle": title, "Geometry": {"Width": 400, "Height": 100}})
        layout = ui.VBoxLayout({"Parent": dialog})
        ui.Label({"Text": message, "Parent": layout})
        bar = ui.ProgressBar({"Parent": layout, "Minimum": 0, "Maximum": 100, "Value": 0})
        dialog.Show()

        def progress(percent: int) -> None:
            bar.Value = max(0, min(100, int(percent)))

        try:
            return task(progress)
        finally:
            dialog.Close()

    def ask_open_paths(self, title, directory=None, file_filter=None, multi=True) -> Optional[List[str]]:
        request = {"WindowTitle": title, "Directory": directory or "", "Filter": file_filter or ""}
        if multi:
            result = self.ui.FileDialog.getOpenFileNames(request)
        else:
            result = self.ui.FileDialog.getOpenFileName(request)
        if not result:
            return None
        if isinstance(result, str):
            return [result]
        return [str(p) for p in result]

    def ask_save_path(self, title, directory=None, file_filter=None, default_name=None) -> Optional[str]:
        target = default_name or ""
        if directory:
            target = f"{directory}/{target}"
        result = self.ui.FileDialog.getSaveFileName({
            "WindowTitle": title,
            "Directory": target,
            "Filter": file_filter or "",
        })
        return str(result) if result else None

    def run(self) -> bool:
        ui = self.ui
        window = ui.MainWindow({"WindowTitle": "Drone Editor", "Geometry": {"Width": 800, "Height": 600}})
        layout = ui.VBoxLayout({"Parent": window})

        for action_id, label in MAIN_ACTIONS:
            button = ui.Button({"Text": label, "Parent": layout})
            if action_id == "Exit":
                button.Clicked = lambda *args: window.Close()
            else:
                button.Clicked = lambda *args, action_id=action_id: self.dispatch(action_id)

        self.window = window
        window.Show()
        logger.info("Using standard UI for application interface")
        ui.exec()
        return True
