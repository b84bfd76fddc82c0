"""
LNC Configuration Tests
=======================

Tests for defaults and environment overrides of LNCConfig.
"""

from lnc.config import LNCConfig


class TestLNCConfig:
    """LNCConfig.from_env()"""

    def test_defaults(self, monkeypatch):
        for name in ("LNC_TRACE", "LNC_LOG_LEVEL", "LNC_INPUT_PROMPT"):
            monkeypatch.delenv(name, raising=False)
        config = LNCConfig.from_env()
        assert config == LNCConfig(trace=False, log_level="WARNING", input_prompt="Input")

    def test_trace_from_env(self, monkeypatch):
        monkeypatch.setenv("LNC_TRACE", "yes")
        assert LNCConfig.from_env().trace is True

    def test_trace_false_values(self, monkeypatch):
        monkeypatch.setenv("LNC_TRACE", "0")
        assert LNCConfig.from_env().trace is False

    def test_log_level_is_upper_cased(self, monkeypatch):
        monkeypatch.setenv("LNC_LOG_LEVEL", " debug ")
        assert LNCConfig.from_env().log_level == "DEBUG"

    def test_input_prompt(self, monkeypatch):
        monkeypatch.setenv("LNC_INPUT_PROMPT", "Value")
        assert LNCConfig.from_env().input_prompt == "Value"
