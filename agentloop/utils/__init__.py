"""
Utilities Module
================

Common utilities shared across the agent:
- logger: Context-prefixed diagnostic logging on stderr
- config: Environment-driven configuration
"""

from agentloop.utils.logger import Logger, logger, set_level
from agentloop.utils.config import get_config, reset_config, Config

__all__ = ["Logger", "logger", "set_level", "get_config", "reset_config", "Config"]
