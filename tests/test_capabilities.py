"""
Tests for host capability probing and the per-version capability table.
"""

import logging
from unittest.mock import MagicMock

import pytest

from drone_editor.exceptions import CapabilityMissing, HostCallFailed, HostError
from drone_editor.resolve.capabilities import (
    CapabilityTable,
    TRACKED_OPERATIONS,
    call_operation,
    has_capability,
    invoke_if_present,
    operations_for_version,
    parse_major_version,
)


class Host:
    label = "not callable"

    def GetName(self):
        return "Timeline 1"

    def Explode(self):
        raise RuntimeError("boom")

    @property
    def Broken(self):
        raise RuntimeError("property failed")


class TestHasCapability:

    def test_present_method(self):
        assert has_capability(Host(), "GetName") is True

    def test_missing_method(self):
        assert has_capability(Host(), "AddTransition") is False

    def test_non_callable_attribute(self):
        assert has_capability(Host(), "label") is False

    def test_none_object(self):
        assert has_capability(None, "GetName") is False

    def test_raising_attribute_is_absent(self):
        assert has_capability(Host(), "Broken") is False

    def test_empty_name(self):
        assert has_capability(Host(), "") is False


class TestInvokeIfPresent:

    def test_success(self):
        assert invoke_if_present(Host(), "GetName") == ("Timeline 1", True)

    def test_passes_arguments(self):
        host = MagicMock()
        host.GetItemListInTrack.return_value = ["a"]
        result, found = invoke_if_present(host, "GetItemListInTrack", "video", 1)
        assert found is True
        assert result == ["a"]
        host.GetItemListInTrack.assert_called_once_with("video", 1)

    def test_missing_logs_info(self, caplog):
        caplog.set_level(logging.INFO, logger="drone_editor")
        assert invoke_if_present(Host(), "AddTransition") == (None, False)
        assert "Method AddTransition not available in this API version" in caplog.text

    def test_raising_logs_warning(self, caplog):
        assert invoke_if_present(Host(), "Explode") == (None, False)
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert warnings and warnings[-1].getMessage() == "Error calling Explode: boom"


class TestCallOperation:

    def test_returns_result(self):
        assert call_operation(Host(), "GetName") == "Timeline 1"

    def test_missing_raises(self):
        with pytest.raises(CapabilityMissing) as exc_info:
            call_operation(Host(), "AddTransition")
        assert exc_info.value.operation == "AddTransition"
        assert isinstance(exc_info.value, HostError)

    def test_host_error_is_wrapped(self):
        with pytest.raises(HostCallFailed) as exc_info:
            call_operation(Host(), "Explode")
        assert exc_info.value.reason == "boom"
        assert isinstance(exc_info.value.__cause__, RuntimeError)


class TestVersionParsing:

    def test_version_list(self):
        assert parse_major_version([18, 6, 4, 6, ""]) == 18

    def test_version_string(self):
        assert parse_major_version("17.4.6") == 17

    def test_garbage(self):
        assert parse_major_version("studio") is None
        assert parse_major_version(None) is None
        assert parse_major_version(True) is None

    def test_operations_by_version(self):
        assert "SetLUT" not in operations_for_version(15)
        assert "SetLUT" in operations_for_version(16)
        assert "InsertFusionTitleIntoTimeline" in operations_for_version(17)
        assert "TranscribeAudio" in operations_for_version(19)
        assert operations_for_version(14) == frozenset()
        assert operations_for_version(None) is None


class TestCapabilityTable:

    def test_from_resolve_known_version(self):
        resolve = MagicMock()
        resolve.GetVersionString.return_value = "18.6.4"
        table = CapabilityTable.from_resolve(resolve)
        assert table.major == 18
        assert table.is_known

    def test_from_resolve_falls_back_to_version_list(self):
        resolve = MagicMock(spec=["GetVersion"])
        resolve.GetVersion.return_value = [16, 2, 8]
        table = CapabilityTable.from_resolve(resolve)
        assert table.major == 16

    def test_from_resolve_unknown(self):
        table = CapabilityTable.from_resolve(MagicMock(spec=[]))
        assert table.version is None
        assert not table.is_known

    def test_version_row_vetoes_live_method(self):
        table = CapabilityTable(version="15.3", major=15, operations=operations_for_version(15))
        item = MagicMock()
        assert has_capability(item, "SetLUT")
        assert table.supports("SetLUT", item) is False

    def test_live_object_must_expose_method(self):
        table = CapabilityTable(version="18.0", major=18, operations=operations_for_version(18))
        assert table.supports("SetLUT", MagicMock(spec=[])) is False
        assert table.supports("SetLUT", MagicMock()) is True

    def test_untracked_operation_uses_live_probe(self):
        table = CapabilityTable(version="15.3", major=15, operations=operations_for_version(15))
        assert "AddTransition" not in TRACKED_OPERATIONS
        assert table.supports("AddTransition", MagicMock()) is True
        assert table.supports("AddTransition", MagicMock(spec=[])) is False

    def test_without_object_answers_from_table(self):
        table = CapabilityTable(version="16.0", major=16, operations=operations_for_version(16))
        assert table.supports("SetLUT") is True
        assert table.supports("TranscribeAudio") is False

    def test_unknown_version_probes_live(self):
        table = CapabilityTable()
        assert table.supports("TranscribeAudio", MagicMock()) is True
        assert table.supports("TranscribeAudio") is False
