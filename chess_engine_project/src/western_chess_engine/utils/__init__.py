"""
工具模块

包含日志和异常处理。
"""

from .logger import (
    setup_logger, configure_logging, get_logger, LoggerMixin, PerformanceLogger, performance_logger
)
from .exceptions import (
    ChessEngineError, InvalidMoveError, SearchTimeoutError,
    ConfigurationError, GameStateError, DataError
)

__all__ = [
    'setup_logger', 'configure_logging', 'get_logger', 'LoggerMixin', 'PerformanceLogger', 'performance_logger',
    'ChessEngineError', 'InvalidMoveError', 'SearchTimeoutError',
    'ConfigurationError', 'GameStateError', 'DataError'
]
