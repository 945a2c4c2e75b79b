"""
Tests for the media pool delegate.
"""

import logging
from unittest.mock import MagicMock

from drone_editor import media_pool
from drone_editor.media_pool import (
    create_bin,
    get_clip_duration,
    get_clip_file_path,
    get_clip_name,
    get_item_by_name,
    get_item_by_path,
    get_item_name,
    get_or_create_bin,
    import_media,
    list_clips,
    move_item_to_bin,
)

from conftest import make_clip, make_media_pool


class TestImportMedia:

    def test_imports_existing_files(self, tmp_path):
        footage = [tmp_path / "DJI_0001.MP4", tmp_path / "DJI_0002.MP4"]
        for path in footage:
            path.write_bytes(b"")
        pool = make_media_pool()
        imported = [make_clip("DJI_0001.MP4"), make_clip("DJI_0002.MP4")]
        pool.ImportMedia.return_value = imported

        result = import_media(pool, [str(p) for p in footage])

        assert result == imported
        pool.ImportMedia.assert_called_once_with([str(p) for p in footage])

    def test_drops_missing_files(self, tmp_path, caplog):
        present = tmp_path / "DJI_0001.MP4"
        present.write_bytes(b"")
        missing = str(tmp_path / "gone.MP4")
        pool = make_media_pool()
        pool.ImportMedia.return_value = [make_clip()]

        import_media(pool, [str(present), missing])

        pool.ImportMedia.assert_called_once_with([str(present)])
        assert f"File does not exist: {missing}" in caplog.text

    def test_nothing_valid(self, tmp_path):
        pool = make_media_pool()
        assert import_media(pool, [str(tmp_path / "missing.mov")]) is None
        pool.ImportMedia.assert_not_called()

    def test_missing_arguments(self):
        assert import_media(None, ["/a.mp4"]) is None
        assert import_media(make_media_pool(), []) is None

    def test_host_returns_nothing(self, tmp_path):
        path = tmp_path / "clip.mov"
        path.write_bytes(b"")
        pool = make_media_pool()
        pool.ImportMedia.return_value = []
        assert import_media(pool, [str(path)]) is None

    def test_host_raises(self, tmp_path, caplog):
        path = tmp_path / "clip.mov"
        path.write_bytes(b"")
        pool = make_media_pool()
        pool.ImportMedia.side_effect = RuntimeError("disk offline")
        assert import_media(pool, [str(path)]) is None
        assert "disk offline" in caplog.text


class TestBins:

    def test_create_bin_under_root(self):
        pool = make_media_pool()
        new_bin = create_bin(pool, "Drone Footage")
        pool.AddSubFolder.assert_called_once_with(pool.GetRootFolder.return_value, "Drone Footage")
        assert new_bin is pool.AddSubFolder.return_value

    def test_create_bin_requires_name(self):
        assert create_bin(make_media_pool(), "") is None

    def test_get_or_create_reuses_existing(self):
        pool = make_media_pool()
        existing = MagicMock()
        existing.GetName.return_value = "Drone Footage"
        pool.GetRootFolder.return_value.GetSubFolderList.return_value = [existing]

        assert get_or_create_bin(pool, "Drone Footage") is existing
        pool.AddSubFolder.assert_not_called()

    def test_get_or_create_creates(self):
        pool = make_media_pool()
        assert get_or_create_bin(pool, "Selects") is pool.AddSubFolder.return_value

    def test_get_or_create_failed_create(self, caplog):
        pool = make_media_pool()
        pool.AddSubFolder.return_value = None
        assert get_or_create_bin(pool, "Selects") is None
        assert "it might already exist" in caplog.text

    def test_move_item(self):
        pool = make_media_pool()
        clip, target = make_clip(), MagicMock()
        pool.MoveClips.return_value = True
        assert move_item_to_bin(pool, clip, target) is True
        pool.MoveClips.assert_called_once_with([clip], target)

    def test_move_item_missing_parameters(self):
        assert move_item_to_bin(make_media_pool(), None, MagicMock()) is False


class TestClips:

    def test_list_clips(self, clips):
        assert list_clips(make_media_pool(clips)) == clips

    def test_list_clips_without_pool(self):
        assert list_clips(None) == []

    def test_get_item_by_name(self, clips):
        pool = make_media_pool(clips)
        assert get_item_by_name(pool, "DJI_0002.MP4") is clips[1]
        assert get_item_by_name(pool, "DJI_9999.MP4") is None

    def test_get_item_by_clip_property(self):
        clip = MagicMock(spec=["GetClipProperty"])
        clip.GetClipProperty.return_value = "Sunrise.mov"
        pool = make_media_pool([clip])
        assert get_item_by_name(pool, "Sunrise.mov") is clip
        clip.GetClipProperty.assert_called_with("Clip Name")

    def test_get_item_by_path(self, clips):
        pool = make_media_pool(clips)
        assert get_item_by_path(pool, "/footage/DJI_0002.MP4") is clips[1]
        assert get_item_by_path(pool, "/footage/DJI_9999.MP4") is None
        assert get_item_by_path(pool, "") is None

    def test_item_name_is_not_the_path(self):
        clip = make_clip("DJI_0001.MP4")
        assert get_item_name(clip) == "DJI_0001.MP4"
        assert get_clip_name(clip) == "/footage/DJI_0001.MP4"
        assert get_item_name(MagicMock(spec=[])) is None


class TestClipMetadata:

    def test_name_prefers_file_path(self):
        clip = make_clip("DJI_0001.MP4", file_path="/footage/DJI_0001.MP4")
        assert get_clip_name(clip) == "/footage/DJI_0001.MP4"

    def test_name_falls_back_to_get_name(self):
        clip = MagicMock()
        clip.GetClipProperty.return_value = None
        clip.GetName.return_value = "Orbit"
        assert get_clip_name(clip) == "Orbit"

    def test_name_unknown(self):
        assert get_clip_name(None) == media_pool.UNKNOWN_CLIP_NAME
        assert get_clip_name(MagicMock(spec=[])) == "Unknown"

    def test_file_path_and_duration(self):
        clip = make_clip("a.mov", duration="00:00:42:12", file_path="/f/a.mov")
        assert get_clip_file_path(clip) == "/f/a.mov"
        assert get_clip_duration(clip) == "00:00:42:12"
        assert get_clip_file_path(None) == ""
        assert get_clip_duration(None) is None
