"""
国际象棋引擎 (Western Chess Engine)

一个国际象棋规则引擎与极小化极大搜索AI，包含规则判定、局面评估、AI对弈和对局接口。
"""

__version__ = "0.1.0"
__author__ = "Chess Engine Team"
__email__ = "team@western-chess-engine.dev"
__description__ = "国际象棋引擎 - 规则引擎、alpha-beta 搜索AI与对局接口"

# 导入主要模块
from chess_engine_project.src import western_chess_engine

__all__ = [
    "western_chess_engine",
    "__version__",
    "__author__",
    "__email__",
    "__description__",
]
