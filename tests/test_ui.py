"""
Tests for the Fusion, standard and console front-ends.

The host UI toolkits are replaced with MagicMock objects; button clicks are
simulated by calling the handlers the front-end registered on them.
"""

import io
from types import SimpleNamespace
from unittest.mock import MagicMock

import click
import pytest
from rich.console import Console

from drone_editor import workflows
from drone_editor.exceptions import FrontEndError
from drone_editor.ui import MAIN_ACTIONS, ConsoleUI, FusionUI, StandardUI
from drone_editor.ui.console import BANNER, HELP_LINES
from drone_editor.ui.fusion_ui import _paths_from_request


@pytest.fixture
def dispatcher():
    return MagicMock(name="UIDispatcher")


@pytest.fixture
def fusion_ui(context, dispatcher):
    return FusionUI(context, MagicMock(name="UIManager"), dispatcher)


def click_during_loop(dispatcher, button_id):
    """Make the next RunLoop press ``button_id`` on the dialog."""
    def run_loop():
        dialog = dispatcher.AddWindow.return_value
        getattr(dialog.On, button_id).Clicked(None)
    dispatcher.RunLoop.side_effect = run_loop


class TestFusionDialogs:

    def test_requires_manager(self, context):
        with pytest.raises(FrontEndError):
            FusionUI(context, None, MagicMock())
        with pytest.raises(FrontEndError):
            FusionUI(context, MagicMock(), None)

    def test_alert_waits_for_ok(self, fusion_ui, dispatcher):
        click_during_loop(dispatcher, "OK")

        fusion_ui.show_alert("Import Complete", "Successfully imported 2 files")

        dialog = dispatcher.AddWindow.return_value
        dialog.Show.assert_called_once_with()
        dialog.Hide.assert_called_once_with()
        dispatcher.ExitLoop.assert_called_once_with()
        label = fusion_ui.ui.Label.call_args.args[0]
        assert label["Text"] == "Successfully imported 2 files"

    @pytest.mark.parametrize("button, expected", [("Yes", True), ("No", False)])
    def test_confirm(self, fusion_ui, dispatcher, button, expected):
        click_during_loop(dispatcher, button)
        assert fusion_ui.show_confirm("Scene Detection", "Detect scenes in 2 clips?") is expected

    def test_confirm_closed_window_is_no(self, fusion_ui, dispatcher):
        dialog = dispatcher.AddWindow.return_value
        dispatcher.RunLoop.side_effect = lambda: dialog.On.DroneEditorConfirm.Close(None)
        assert fusion_ui.show_confirm("New Project", "Discard?") is False

    def test_progress_updates_label(self, fusion_ui, dispatcher):
        dialog = dispatcher.AddWindow.return_value
        percent_label = dialog.GetItems.return_value.__getitem__.return_value

        def task(progress):
            progress(40)
            assert percent_label.Text == "40%"
            progress(140)
            return "done"

        assert fusion_ui.show_progress("Auto Edit", "Working", task) == "done"
        assert percent_label.Text == "100%"
        dialog.Hide.assert_called_once_with()

    def test_progress_hides_on_error(self, fusion_ui, dispatcher):
        def task(progress):
            raise ValueError("host went away")

        with pytest.raises(ValueError):
            fusion_ui.show_progress("Auto Edit", "Working", task)
        dispatcher.AddWindow.return_value.Hide.assert_called_once_with()


class TestFusionFileRequests:

    def test_open_uses_request_file(self, fusion_ui, context):
        context.fusion.RequestFile.return_value = {2: "/f/b.mp4", 1: "/f/a.mp4"}

        paths = fusion_ui.ask_open_paths("Select Media", "/f", "Video Files (*.mp4)")

        assert paths == ["/f/a.mp4", "/f/b.mp4"]
        context.fusion.RequestFile.assert_called_once_with(
            "/f", "", {"FReqS_Title": "Select Media", "FReqB_Saving": False, "FReqS_Filter": "Video Files (*.mp4)"}
        )

    def test_single_selection(self, fusion_ui, context):
        context.fusion.RequestFile.return_value = ["/p/a.droneproj", "/p/b.droneproj"]
        assert fusion_ui.ask_open_paths("Open", multi=False) == ["/p/a.droneproj"]

    def test_cancelled(self, fusion_ui, context):
        context.fusion.RequestFile.return_value = None
        assert fusion_ui.ask_open_paths("Open") is None
        assert fusion_ui.ask_save_path("Save") is None

    def test_save_path(self, fusion_ui, context):
        context.fusion.RequestFile.return_value = "/p/coastline.droneproj"
        assert fusion_ui.ask_save_path("Save", "/p", default_name="coastline.droneproj") == "/p/coastline.droneproj"
        assert context.fusion.RequestFile.call_args.args[2]["FReqB_Saving"] is True

    def test_path_shapes(self):
        assert _paths_from_request("/a.mp4") == ["/a.mp4"]
        assert _paths_from_request(("/a.mp4", "/b.mp4")) == ["/a.mp4", "/b.mp4"]
        assert _paths_from_request({}) == []


class TestFusionMainWindow:

    def test_run_builds_toolbar(self, fusion_ui, dispatcher, context):
        assert fusion_ui.run() is True

        labels = [call.args[0]["Text"] for call in fusion_ui.ui.Button.call_args_list]
        assert labels == [label for _, label in MAIN_ACTIONS]
        window = dispatcher.AddWindow.return_value
        window.Show.assert_called_once_with()
        dispatcher.RunLoop.assert_called_once_with()
        fusion_ui.timer.Start.assert_called_once_with()
        status = window.GetItems.return_value.__getitem__.return_value
        assert status.Text == "Current project: Coastline Flight"

    def test_toolbar_dispatches(self, fusion_ui, dispatcher, monkeypatch):
        calls = []
        monkeypatch.setitem(workflows.ACTIONS, "DetectScenes", lambda ctx, ui: calls.append((ctx, ui)))
        window = fusion_ui.build_window()

        window.On.DetectScenes.Clicked(None)

        assert calls == [(fusion_ui.context, fusion_ui)]

    def test_exit_button(self, fusion_ui, dispatcher):
        window = fusion_ui.build_window()
        window.On.Exit.Clicked(None)
        dispatcher.ExitLoop.assert_called_once_with()

    def test_autosave_interval(self, context, dispatcher, monkeypatch):
        now = [0.0]
        saved = []
        monkeypatch.setattr(workflows, "autosave", lambda ctx: saved.append(ctx) or True)
        ui = FusionUI(context, MagicMock(), dispatcher, clock=lambda: now[0])

        now[0] = 60.0
        assert ui.maybe_autosave() is False
        now[0] = 5 * 60.0
        assert ui.maybe_autosave() is True
        assert ui.maybe_autosave() is False
        assert saved == [context]

    def test_timer_triggers_autosave(self, fusion_ui, dispatcher, monkeypatch):
        checks = []
        monkeypatch.setattr(fusion_ui, "maybe_autosave", lambda: checks.append(True))
        fusion_ui.build_window()

        dispatcher.On.AutosaveTimer.Timeout(None)

        assert checks == [True]


@pytest.fixture
def qt_ui():
    ui = MagicMock(name="ui")
    ui.Button.side_effect = lambda props: MagicMock(name=props["Text"])
    return ui


class TestStandardUI:

    def test_requires_module(self, context):
        with pytest.raises(FrontEndError):
            StandardUI(context, None)

    @pytest.mark.parametrize("level, icon", [("info", "Information"), ("warning", "Warning"), ("error", "Critical")])
    def test_alert_icon(self, context, qt_ui, level, icon):
        StandardUI(context, qt_ui).show_alert("Title", "Message", level)
        props = qt_ui.MessageBox.call_args.args[0]
        assert props["Icon"] is getattr(qt_ui.MessageBox, icon)
        qt_ui.MessageBox.return_value.Show.assert_called_once_with()

    def test_confirm(self, context, qt_ui):
        qt_ui.MessageBox.return_value.Show.return_value = qt_ui.MessageBox.Yes
        assert StandardUI(context, qt_ui).show_confirm("New Project", "Discard?") is True
        qt_ui.MessageBox.return_value.Show.return_value = qt_ui.MessageBox.No
        assert StandardUI(context, qt_ui).show_confirm("New Project", "Discard?") is False

    def test_progress_bar(self, context, qt_ui):
        bar = qt_ui.ProgressBar.return_value

        result = StandardUI(context, qt_ui).show_progress("Auto Edit", "Working", lambda p: p(-5) or p(70) or 3)

        assert result == 3
        assert bar.Value == 70
        qt_ui.Dialog.return_value.Close.assert_called_once_with()

    def test_open_paths(self, context, qt_ui):
        qt_ui.FileDialog.getOpenFileNames.return_value = ["/f/a.mp4", "/f/b.mp4"]
        qt_ui.FileDialog.getOpenFileName.return_value = "/p/a.droneproj"
        front_end = StandardUI(context, qt_ui)

        assert front_end.ask_open_paths("Select Media") == ["/f/a.mp4", "/f/b.mp4"]
        assert front_end.ask_open_paths("Open", multi=False) == ["/p/a.droneproj"]
        qt_ui.FileDialog.getOpenFileNames.return_value = []
        assert front_end.ask_open_paths("Select Media") is None

    def test_save_path(self, context, qt_ui):
        qt_ui.FileDialog.getSaveFileName.return_value = "/p/x.droneproj"

        assert StandardUI(context, qt_ui).ask_save_path("Save", "/p", "Drone Project", "x.droneproj") == "/p/x.droneproj"
        assert qt_ui.FileDialog.getSaveFileName.call_args.args[0]["Directory"] == "/p/x.droneproj"

    def test_run_wires_buttons(self, context, qt_ui, monkeypatch):
        calls = []
        monkeypatch.setitem(workflows.ACTIONS, "Import", lambda ctx, ui: calls.append(ui))
        created = []
        qt_ui.Button.side_effect = lambda props: created.append(MagicMock(name=props["Text"])) or created[-1]
        front_end = StandardUI(context, qt_ui)

        assert front_end.run() is True

        qt_ui.exec.assert_called_once_with()
        assert len(created) == len(MAIN_ACTIONS)
        created[0].Clicked()
        assert calls == [front_end]
        created[-1].Clicked()
        qt_ui.MainWindow.return_value.Close.assert_called_once_with()


@pytest.fixture
def output():
    return io.StringIO()


@pytest.fixture
def console_ui(context, output):
    return ConsoleUI(context, console=Console(file=output, width=120, color_system=None))


class TestConsoleUI:

    def test_alert(self, console_ui, output):
        console_ui.show_alert("Save Error", "Could not open file", "error")
        assert output.getvalue().strip() == "Save Error: Could not open file"

    def test_confirm_defaults_to_no(self, console_ui, monkeypatch):
        seen = {}

        def fake_confirm(text, default=None):
            seen.update(text=text, default=default)
            return True

        monkeypatch.setattr(click, "confirm", fake_confirm)
        assert console_ui.show_confirm("New Project", "Discard?") is True
        assert seen == {"text": "New Project: Discard?", "default": False}

    def test_progress_returns_task_result(self, console_ui):
        seen = []
        assert console_ui.show_progress("Auto Edit", "Working", lambda p: seen.append(p(50)) or 7) == 7

    def test_open_paths_split(self, console_ui, monkeypatch):
        monkeypatch.setattr(click, "prompt", lambda *args, **kwargs: " /f/a.mp4 ; /f/b.mp4;; ")
        assert console_ui.ask_open_paths("Select Media") == ["/f/a.mp4", "/f/b.mp4"]
        assert console_ui.ask_open_paths("Open", multi=False) == ["/f/a.mp4"]

    def test_open_paths_blank(self, console_ui, monkeypatch):
        monkeypatch.setattr(click, "prompt", lambda *args, **kwargs: "")
        assert console_ui.ask_open_paths("Select Media") is None

    def test_save_path_default(self, console_ui, monkeypatch):
        defaults = []
        monkeypatch.setattr(click, "prompt", lambda text, default=None: defaults.append(default) or default)
        assert console_ui.ask_save_path("Save", "/p", default_name="a.droneproj") == "/p/a.droneproj"
        assert console_ui.ask_save_path("Save") is None

    def test_help(self, console_ui, output):
        console_ui.print_help()
        text = output.getvalue()
        for signature, description in HELP_LINES:
            assert f"{signature} - {description}" in text

    def test_run_starts_repl(self, context, output):
        sessions = []
        front_end = ConsoleUI(
            context,
            console=Console(file=output, color_system=None),
            interact=lambda banner, local: sessions.append((banner, local)),
        )

        assert front_end.run() is True

        banner, namespace = sessions[0]
        assert banner == BANNER
        assert namespace["project"] is context.project
        assert namespace["context"] is context
        for name in ("import_media", "get_clips", "create_timeline", "apply_transitions", "apply_lut",
                     "detect_scenes", "highlights", "enhance_audio", "auto_edit",
                     "save_project", "load_project", "feature_support", "help"):
            assert callable(namespace[name])

    def test_namespace_helpers(self, console_ui, context, clips):
        namespace = console_ui.namespace()
        assert namespace["get_clips"]() == clips
        assert len(namespace["feature_support"]()) == 8

    def test_auto_edit_helper(self, console_ui, output, monkeypatch):
        monkeypatch.setattr(workflows, "run_auto_edit", lambda ctx, clips, progress: MagicMock())
        assert console_ui.namespace()["auto_edit"]() is True
        assert "Auto-edit completed successfully" in output.getvalue()

    def test_auto_edit_without_clips(self, context, output):
        context.resolve.GetProjectManager.return_value.GetCurrentProject.return_value.GetMediaPool.return_value = None
        front_end = ConsoleUI(context, console=Console(file=output, color_system=None))
        assert front_end.namespace()["auto_edit"]() is False
        assert "No clips available" in output.getvalue()

    def test_save_project_helper(self, console_ui, monkeypatch):
        calls = []
        monkeypatch.setattr(workflows, "save_project", lambda ctx, ui, path: calls.append(path) or True)
        assert console_ui.namespace()["save_project"]("/p/a.droneproj") is True
        assert calls == ["/p/a.droneproj"]


def test_context_without_fusion_has_no_file_dialog(dispatcher):
    context = SimpleNamespace(fusion=None)
    ui = FusionUI(context, MagicMock(), dispatcher)
    assert ui.ask_open_paths("Open") is None
