"""
国际象棋引擎

包括规则引擎、局面评估、带 alpha-beta 剪枝的极小化极大搜索、AI决策和对局接口。
"""

__version__ = "0.1.0"
__author__ = "Chess Engine Team"

# 导入核心组件
from .rules_engine import (
    Board, Move, Piece, PieceType, Color, GameState, GameStatus, EndType, Player,
    MoveValidator, RulesEngine
)
from .search_algorithm import EvaluationEngine, MoveGenerator, MinimaxEngine
from .inference_interface import ChessAI, AnalysisResult, GameInterface, GameEvent
from .config import ConfigManager, EvaluationConfig, SearchConfig, AIConfig, GameConfig, SystemConfig
from .utils import setup_logger, get_logger, ChessEngineError

__all__ = [
    "__version__", "__author__",
    "Board", "Move", "Piece", "PieceType", "Color",
    "GameState", "GameStatus", "EndType", "Player",
    "MoveValidator", "RulesEngine",
    "EvaluationEngine", "MoveGenerator", "MinimaxEngine",
    "ChessAI", "AnalysisResult", "GameInterface", "GameEvent",
    "ConfigManager", "EvaluationConfig", "SearchConfig", "AIConfig", "GameConfig", "SystemConfig",
    "setup_logger", "get_logger", "ChessEngineError"
]
