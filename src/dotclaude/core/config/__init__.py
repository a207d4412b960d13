"""
Configuration models and loading.

This module provides frozen Pydantic models for the statusline
configuration with multi-layer merging: defaults < user < project < env vars.
"""

from .loader import (
    get_project_config_path,
    get_user_config_path,
    get_xdg_config_home,
    load_config,
)
from .models import (
    ContextConfig,
    CostSegmentConfig,
    GitSegmentConfig,
    SessionSegmentConfig,
    StatuslineConfig,
    ThresholdsConfig,
    TimeoutsConfig,
    UsageSegmentConfig,
)

__all__ = [
    # Models
    "ContextConfig",
    "CostSegmentConfig",
    "GitSegmentConfig",
    "SessionSegmentConfig",
    "StatuslineConfig",
    "ThresholdsConfig",
    "TimeoutsConfig",
    "UsageSegmentConfig",
    # Loader functions
    "get_project_config_path",
    "get_user_config_path",
    "get_xdg_config_home",
    "load_config",
]
