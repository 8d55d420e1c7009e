"""
Tests for centralized configuration and environment overrides.
"""
import dataclasses
from pathlib import Path

import pytest

from tools.core_config import CONFIG, CoreConfig, get_project_root


pytestmark = pytest.mark.unit


class TestCoreConfig:

    def test_config_is_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            CONFIG.DEFAULT_SAFETY_PCT = 20.0

    def test_salt_dose_table_is_read_only(self):
        table = CONFIG.get_salt_dose_table()
        assert dict(table) == {20000.0: 6.0, 24000.0: 9.0, 27000.0: 12.0, 30000.0: 15.0}
        with pytest.raises(TypeError):
            table[35000.0] = 18.0

    def test_penalty_weights(self):
        assert CONFIG.IRON_HARDNESS_WEIGHT == 3.0
        assert CONFIG.MANGANESE_HARDNESS_WEIGHT == 2.0


class TestEnvironment:

    def test_project_root_default(self, monkeypatch):
        monkeypatch.delenv("SOFTENER_SIZING_ROOT", raising=False)
        assert (get_project_root() / "tools" / "core_config.py").exists()

    def test_project_root_override(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SOFTENER_SIZING_ROOT", str(tmp_path))
        assert get_project_root() == tmp_path

    def test_project_root_override_missing_path(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SOFTENER_SIZING_ROOT", str(tmp_path / "missing"))
        assert get_project_root() != tmp_path / "missing"

    def test_log_file_override(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SOFTENER_SIZING_LOG_FILE", str(tmp_path / "sizing.log"))
        assert CoreConfig().get_log_file() == Path(tmp_path / "sizing.log")

    def test_log_file_default(self, monkeypatch):
        monkeypatch.delenv("SOFTENER_SIZING_LOG_FILE", raising=False)
        assert CONFIG.get_log_file().name == "softener_sizing_mcp.log"

    @pytest.mark.parametrize("raw, expected", [
        (None, 30.0), ("12", 12.0), ("0", 30.0), ("-4", 30.0), ("soon", 30.0),
    ])
    def test_tool_timeout(self, monkeypatch, raw, expected):
        if raw is None:
            monkeypatch.delenv("MCP_SIZING_TIMEOUT_S", raising=False)
        else:
            monkeypatch.setenv("MCP_SIZING_TIMEOUT_S", raw)
        assert CONFIG.get_tool_timeout() == expected
