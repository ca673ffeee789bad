"""
配置管理模块

包含评估、搜索、AI、对局和系统配置。
"""

from .config_manager import ConfigManager
from .engine_config import (
    EvaluationConfig, SearchConfig, AIConfig, GameConfig, SystemConfig,
    DEFAULT_EVALUATION_CONFIG, DEFAULT_SEARCH_CONFIG, DEFAULT_AI_CONFIG,
    DEFAULT_GAME_CONFIG, DEFAULT_SYSTEM_CONFIG
)

__all__ = [
    'ConfigManager',
    'EvaluationConfig', 'SearchConfig', 'AIConfig', 'GameConfig', 'SystemConfig',
    'DEFAULT_EVALUATION_CONFIG', 'DEFAULT_SEARCH_CONFIG', 'DEFAULT_AI_CONFIG',
    'DEFAULT_GAME_CONFIG', 'DEFAULT_SYSTEM_CONFIG'
]
