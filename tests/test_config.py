"""Tests for ConfigManager: YAML loading, env overrides, capabilities."""

import pytest

from scapdriver.config import ConfigManager
from scapdriver.security.models import CapabilitySet, ScanConfig


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "driver:\n"
        "  name: test-driver\n"
        "  log_level: DEBUG\n"
        f"  logs_dir: {tmp_path / 'logs'}\n"
        "oscap:\n"
        "  exe_name: oscap\n"
        "capabilities:\n"
        "  version: 1.3\n"
        "  baseline_support: true\n"
        "  progress_reporting: true\n"
        "scan:\n"
        "  timeout: 120\n"
    )
    return path


class TestConfigManager:
    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Configuration file not found"):
            ConfigManager(str(tmp_path / "nope.yaml"))

    def test_driver_section(self, config_file):
        config = ConfigManager(str(config_file)).get_config()
        assert config.name == "test-driver"
        assert config.log_level == "DEBUG"

    def test_other_sections(self, config_file):
        cm = ConfigManager(str(config_file))
        assert cm.get_section("oscap") == {"exe_name": "oscap"}
        assert cm.get_section("scan") == {"timeout": 120}
        assert cm.get_section("missing") == {}

    def test_capabilities(self, config_file):
        caps = ConfigManager(str(config_file)).get_capabilities()
        assert isinstance(caps, CapabilitySet)
        assert caps.version == "1.3"
        assert caps.baseline_support is True
        assert caps.progress_reporting is True
        assert caps.tailoring_support is False

    def test_env_overrides(self, config_file, monkeypatch):
        monkeypatch.setenv("SCAPD_OSCAP_PATH", "/opt/oscap/bin/oscap")
        monkeypatch.setenv("SCAPD_CAPABILITIES_TAILORING_SUPPORT", "true")
        cm = ConfigManager(str(config_file))
        assert cm.get_section("oscap")["path"] == "/opt/oscap/bin/oscap"
        assert cm.get_capabilities().tailoring_support is True

    def test_scan_config(self, config_file):
        scan_config = ConfigManager(str(config_file)).get_scan_config()
        assert isinstance(scan_config, ScanConfig)
        assert scan_config.timeout == 120
        assert scan_config.chunk_size == 4096

    def test_scan_config_env_strings_are_coerced(self, config_file, monkeypatch):
        monkeypatch.setenv("SCAPD_SCAN_TIMEOUT", "30")
        monkeypatch.setenv("SCAPD_SCAN_CHUNK_SIZE", "16")
        scan_config = ConfigManager(str(config_file)).get_scan_config()
        assert scan_config.timeout == 30.0
        assert scan_config.chunk_size == 16
        assert scan_config.max_read_failures == 3

    def test_empty_file_uses_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        cm = ConfigManager(str(path))
        assert cm.get_config().log_level == "INFO"
        assert cm.get_capabilities() == CapabilitySet()

    def test_create_directories(self, config_file, tmp_path):
        cm = ConfigManager(str(config_file))
        cm.create_directories()
        assert (tmp_path / "logs").is_dir()
