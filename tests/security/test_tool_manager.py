"""Tests for the ToolManager: locating the oscap binary."""

import pytest

from scapdriver.security.tool_manager import ToolManager


class TestToolManagerResolution:
    def test_not_found(self, monkeypatch):
        monkeypatch.setattr("shutil.which", lambda name: None)
        tm = ToolManager()
        tool = tm.check_tool()
        assert tool.installed is False
        assert tool.path is None

    def test_config_path(self, tmp_path):
        exe = tmp_path / "oscap"
        exe.write_text("fake binary")

        tm = ToolManager({"path": str(exe)})
        tool = tm.check_tool()
        assert tool.installed is True
        assert tool.path == exe.resolve()

    def test_missing_config_path_falls_back_to_path(self, tmp_path, monkeypatch):
        on_path = tmp_path / "usr-bin-oscap"
        on_path.write_text("fake binary")
        monkeypatch.setattr(
            "shutil.which", lambda name: str(on_path) if name == "oscap" else None
        )

        tm = ToolManager({"path": str(tmp_path / "nowhere")})
        tool = tm.check_tool()
        assert tool.installed is True
        assert tool.path == on_path.resolve()

    def test_custom_exe_name(self, tmp_path, monkeypatch):
        seen = []

        def fake_which(name):
            seen.append(name)
            return None

        monkeypatch.setattr("shutil.which", fake_which)
        ToolManager({"exe_name": "oscap-ssh"}).check_tool()
        assert seen == ["oscap-ssh"]


class TestGetToolPath:
    def test_returns_path(self, tmp_path):
        exe = tmp_path / "oscap"
        exe.write_text("fake binary")
        assert ToolManager({"path": str(exe)}).get_tool_path() == exe.resolve()

    def test_raises_when_missing(self, monkeypatch):
        monkeypatch.setattr("shutil.which", lambda name: None)
        with pytest.raises(FileNotFoundError, match="oscap.path"):
            ToolManager().get_tool_path()
