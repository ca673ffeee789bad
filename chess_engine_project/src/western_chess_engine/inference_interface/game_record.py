"""
棋谱记录工具

走法列表的格式化、筛选和统计。
"""

from collections import Counter
from dataclasses import dataclass
from typing import List, Optional, Dict, Any

from ..rules_engine import Color, Move, PieceType


@dataclass
class MoveStatistics:
    """棋谱统计"""
    total: int = 0
    white_moves: int = 0
    black_moves: int = 0
    captures: int = 0
    checks: int = 0
    castles: int = 0
    promotions: int = 0
    en_passant: int = 0
    longest_move: Optional[Move] = None
    most_active_piece: Optional[PieceType] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total': self.total,
            'white_moves': self.white_moves,
            'black_moves': self.black_moves,
            'captures': self.captures,
            'checks': self.checks,
            'castles': self.castles,
            'promotions': self.promotions,
            'en_passant': self.en_passant,
            'longest_move': self.longest_move.to_coordinate_notation() if self.longest_move else None,
            'most_active_piece': self.most_active_piece.config_key if self.most_active_piece else None,
        }


def move_distance(move: Move) -> int:
    """走法的曼哈顿距离"""
    return abs(move.to_pos[0] - move.from_pos[0]) + abs(move.to_pos[1] - move.from_pos[1])


def compute_statistics(moves: List[Move]) -> MoveStatistics:
    """
    统计走法列表

    Args:
        moves: 按顺序排列的走法

    Returns:
        MoveStatistics: 统计结果，距离相同时取最早的走法
    """
    stats = MoveStatistics(total=len(moves))
    if not moves:
        return stats

    stats.white_moves = sum(1 for move in moves if move.piece.color is Color.WHITE)
    stats.black_moves = stats.total - stats.white_moves
    stats.captures = sum(1 for move in moves if move.is_capture)
    stats.checks = sum(1 for move in moves if move.gives_check)
    stats.castles = sum(1 for move in moves if move.is_castle)
    stats.promotions = sum(1 for move in moves if move.is_promotion)
    stats.en_passant = sum(1 for move in moves if move.is_en_passant)

    stats.longest_move = max(moves, key=move_distance)
    stats.most_active_piece = Counter(move.piece.piece_type for move in moves).most_common(1)[0][0]
    return stats


def format_move_list(moves: List[Move], with_numbers: bool = True) -> str:
    """
    格式化为代数记法棋谱

    回合编号从1开始，第一步为黑方走法时记作 "1... e5"。

    Args:
        moves: 走法列表
        with_numbers: 是否添加回合编号

    Returns:
        str: 如 "1. e4 e5 2. Nf3 Nc6"
    """
    offset = 1 if moves and moves[0].piece.color is Color.BLACK else 0
    parts = []
    for index, move in enumerate(moves):
        ply = index + offset
        if with_numbers and ply % 2 == 0:
            parts.append(f"{ply // 2 + 1}.")
        elif with_numbers and index == 0:
            parts.append(f"{ply // 2 + 1}...")
        parts.append(move.to_algebraic_notation())
    return " ".join(parts)


def moves_by_color(moves: List[Move], color: Color) -> List[Move]:
    return [move for move in moves if move.piece.color is color]


def moves_since(moves: List[Move], index: int) -> List[Move]:
    """
    获取指定半回合之后的走法

    Args:
        moves: 走法列表
        index: 半回合序号，0 表示从第一步开始

    Returns:
        List[Move]: 新列表，越界时为空
    """
    if index < 0:
        index = 0
    return list(moves[index:])
