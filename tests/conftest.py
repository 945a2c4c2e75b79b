"""
Shared fixtures: MagicMock stand-ins for the Resolve scripting objects.
"""

import random
from unittest.mock import MagicMock

import pytest

from drone_editor.ai import SimulatedAI
from drone_editor.app import EditorContext
from drone_editor.config import EditorOptions, Settings
from drone_editor.logger import reset_dedup
from drone_editor.project import ProjectStore
from drone_editor.resolve.capabilities import CapabilityTable
from drone_editor.resolve.connection import HostSession
from drone_editor.ui.base import FrontEnd


@pytest.fixture(autouse=True)
def fresh_log_dedup():
    """Consecutive identical messages are suppressed; start each test clean."""
    reset_dedup()
    yield
    reset_dedup()


def make_clip(name="DJI_0001.MP4", duration=30.0, file_path=None):
    clip = MagicMock(name=name)
    props = {
        "File Path": file_path if file_path is not None else f"/footage/{name}",
        "Clip Name": name,
        "Name": name,
        "Duration": duration,
    }
    clip.GetClipProperty.side_effect = lambda key: props.get(key)
    clip.GetName.return_value = name
    return clip


def make_item(clip, start=0, end=300):
    item = MagicMock(name=f"item:{clip.GetName.return_value}")
    item.GetMediaPoolItem.return_value = clip
    item.GetStart.return_value = start
    item.GetEnd.return_value = end
    return item


def make_timeline(items=None, name="Drone Timeline", audio_tracks=0):
    items = list(items or [])
    timeline = MagicMock(name=name)
    timeline.GetName.return_value = name
    timeline.GetItemListInTrack.side_effect = (
        lambda kind, index: items if (kind, index) == ("video", 1) else []
    )
    settings = {
        "timelineFrameRate": "30",
        "timelineResolutionWidth": "3840",
        "timelineResolutionHeight": "2160",
    }
    timeline.GetSetting.side_effect = lambda key: settings.get(key)
    timeline.GetTrackCount.return_value = audio_tracks
    timeline.GetTrackVolume.return_value = -6.0
    timeline.AddTransition.return_value = True
    return timeline


def make_media_pool(clips=None, created_timeline=None):
    pool = MagicMock(name="MediaPool")
    root = MagicMock(name="RootFolder")
    root.GetClipList.return_value = list(clips or [])
    root.GetSubFolderList.return_value = []
    pool.GetRootFolder.return_value = root
    pool.CreateTimelineFromClips.return_value = created_timeline
    pool.AppendToTimeline.return_value = [MagicMock()]
    return pool


def make_project(timeline=None, media_pool=None, name="Coastline Flight"):
    project = MagicMock(name="Project")
    project.GetName.return_value = name
    project.GetCurrentTimeline.return_value = timeline
    project.GetMediaPool.return_value = media_pool
    project.GetTimelineCount.return_value = 0
    project.GetCurrentPage.return_value = "edit"
    return project


def make_resolve(project=None, version="18.6.4"):
    resolve = MagicMock(name="Resolve")
    resolve.GetVersionString.return_value = version
    resolve.GetProjectManager.return_value.GetCurrentProject.return_value = project
    resolve.GetCurrentPage.return_value = "edit"
    return resolve


@pytest.fixture
def clips():
    return [make_clip("DJI_0001.MP4", 30.0), make_clip("DJI_0002.MP4", 45.0)]


@pytest.fixture
def timeline(clips):
    return make_timeline([make_item(c, i * 300, (i + 1) * 300) for i, c in enumerate(clips)])


@pytest.fixture
def media_pool(clips):
    return make_media_pool(clips, created_timeline=make_timeline([], name="New Timeline"))


@pytest.fixture
def project(timeline, media_pool):
    return make_project(timeline, media_pool)


@pytest.fixture
def resolve(project):
    return make_resolve(project)


@pytest.fixture
def quiet_ai():
    """Seeded simulation without sleeps."""
    return SimulatedAI(rng=random.Random(7), simulate_latency=False)


@pytest.fixture
def settings(tmp_path, monkeypatch):
    monkeypatch.setenv("DRONE_EDITOR_AUTOSAVE_DIR", str(tmp_path / "autosave"))
    monkeypatch.setenv("DRONE_EDITOR_PROJECT_DIR", str(tmp_path / "projects"))
    monkeypatch.setenv("DRONE_EDITOR_OPTIONS", str(tmp_path / "settings.json"))
    monkeypatch.setenv("DRONE_EDITOR_LOG_FILE", str(tmp_path / "logs" / "drone_editor.log"))
    monkeypatch.setenv("LUT_DIRS", str(tmp_path / "luts"))
    return Settings()


@pytest.fixture
def context(settings, resolve, quiet_ai):
    session = HostSession(resolve=resolve, fusion=MagicMock(name="Fusion"), capabilities=CapabilityTable())
    return EditorContext(
        settings=settings,
        options=EditorOptions(),
        ai=quiet_ai,
        store=ProjectStore(autosave_dir=settings.paths.autosave_dir),
        session=session,
    )


class RecordingUI(FrontEnd):
    """FrontEnd that records alerts and answers dialogs from preset values."""

    name = "recording"

    def __init__(self, context=None, confirm=True, open_paths=None, save_path=None):
        super().__init__(context)
        self.alerts = []
        self.confirms = []
        self.progress_values = []
        self.confirm_answer = confirm
        self.open_paths = open_paths
        self.save_path = save_path
        self.ran = False

    def show_alert(self, title, message, level="info"):
        self.alerts.append((title, message, level))

    def show_confirm(self, title, message):
        self.confirms.append((title, message))
        return self.confirm_answer

    def show_progress(self, title, message, task):
        return task(self.progress_values.append)

    def ask_open_paths(self, title, directory=None, file_filter=None, multi=True):
        return self.open_paths

    def ask_save_path(self, title, directory=None, file_filter=None, default_name=None):
        return self.save_path

    def run(self):
        self.ran = True
        return True

    @property
    def titles(self):
        return [title for title, _, _ in self.alerts]


@pytest.fixture
def recording_ui(context):
    return RecordingUI(context)
