"""
国际象棋规则引擎模块

包含棋盘表示、走法生成、合法性验证和终局判断等核心功能。
"""

from .pieces import Color, PieceType, Piece, PIECE_VALUES, PROMOTION_TYPES
from .move import Move, Square, is_valid_square, square_name, parse_square, parse_coordinate_notation
from .movement import pseudo_legal_moves, is_pseudo_legal, attacks
from .chess_board import Board
from .game_state import GameState, GameStatus, EndType, Player
from .move_validator import MoveValidator
from .rule_engine import RulesEngine

__all__ = [
    'Color', 'PieceType', 'Piece', 'PIECE_VALUES', 'PROMOTION_TYPES',
    'Move', 'Square', 'is_valid_square', 'square_name', 'parse_square', 'parse_coordinate_notation',
    'pseudo_legal_moves', 'is_pseudo_legal', 'attacks',
    'Board',
    'GameState', 'GameStatus', 'EndType', 'Player',
    'MoveValidator', 'RulesEngine'
]
