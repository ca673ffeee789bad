"""
搜索算法模块

包含局面评估、走法生成与排序，以及带 alpha-beta 剪枝的极小化极大搜索。
"""

from .evaluation import EvaluationEngine, CENTER_SQUARES
from .move_generator import MoveGenerator
from .minimax_engine import MinimaxEngine, SearchStatistics, MATE_SCORE, INFINITY

__all__ = [
    'EvaluationEngine', 'CENTER_SQUARES',
    'MoveGenerator',
    'MinimaxEngine', 'SearchStatistics', 'MATE_SCORE', 'INFINITY'
]
