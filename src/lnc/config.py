"""
LNC Toolchain - Configuration
=============================

Runtime settings for the command-line tools. Configuration can come from:
- Default values (defined here)
- Environment variables (LNC_TRACE, LNC_LOG_LEVEL, LNC_INPUT_PROMPT)
- Command-line flags, which take precedence over both
"""

from dataclasses import dataclass
import os


_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})


@dataclass
class LNCConfig:
    """
    Configuration for running LNC programs.

    Attributes:
        trace: Emit interpreter trace lines (default: False)
        log_level: Level for the root logger (default: "WARNING")
        input_prompt: Prompt shown when inp reads from the console
    """

    trace: bool = False
    log_level: str = "WARNING"
    input_prompt: str = "Input"

    @classmethod
    def from_env(cls) -> "LNCConfig":
        """Build a configuration from defaults overlaid with environment variables."""
        config = cls()
        if "LNC_TRACE" in os.environ:
            config.trace = os.environ["LNC_TRACE"].strip().lower() in _TRUE_VALUES
        if "LNC_LOG_LEVEL" in os.environ:
            config.log_level = os.environ["LNC_LOG_LEVEL"].strip().upper()
        if "LNC_INPUT_PROMPT" in os.environ:
            config.input_prompt = os.environ["LNC_INPUT_PROMPT"]
        return config

