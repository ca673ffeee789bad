"""
Western Chess Engine 源代码模块

包含子系统：
- western_chess_engine: 国际象棋规则引擎与搜索AI
"""

from . import western_chess_engine

__all__ = [
    "western_chess_engine",
]
