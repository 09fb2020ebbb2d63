from agent_start.config.loader import ConfigLoader, LoadedConfig
from agent_start.config.merge import merge, merge_settings
from agent_start.config.validator import ConfigValidator, ValidationIssue

__all__ = [
    "ConfigLoader",
    "ConfigValidator",
    "LoadedConfig",
    "ValidationIssue",
    "merge",
    "merge_settings",
]
