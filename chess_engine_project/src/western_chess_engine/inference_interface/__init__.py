"""
推理接口模块

包含AI决策、对局接口、对局事件和棋谱工具。
"""

from .chess_ai import ChessAI, AnalysisResult
from .events import EventDispatcher, GameEvent
from .game_interface import GameInterface, SNAPSHOT_VERSION
from .game_record import (
    MoveStatistics, compute_statistics, format_move_list, moves_by_color, moves_since
)

__all__ = [
    # AI核心
    'ChessAI',
    'AnalysisResult',

    # 对局接口
    'GameInterface',
    'SNAPSHOT_VERSION',

    # 事件
    'EventDispatcher',
    'GameEvent',

    # 棋谱
    'MoveStatistics',
    'compute_statistics',
    'format_move_list',
    'moves_by_color',
    'moves_since'
]
