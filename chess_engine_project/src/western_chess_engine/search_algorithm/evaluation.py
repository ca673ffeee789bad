"""
局面评估

基于子力、子力位置表、机动性、王的安全和中心控制的启发式评估。
"""

import logging
from typing import Dict, Optional

import numpy as np

from ..config.engine_config import EvaluationConfig
from ..rules_engine import Board, Color, Move, MoveValidator, PieceType
from ..utils.exceptions import ConfigurationError

CENTER_SQUARES = ((3, 3), (3, 4), (4, 3), (4, 4))


class EvaluationEngine:
    """
    局面评估引擎

    子力价值和子力位置表作为配置注入，子力位置表按白方视角书写，
    黑方查表时将行号镜像为 7 - row。
    """

    def __init__(self, config: Optional[EvaluationConfig] = None,
                 validator: Optional[MoveValidator] = None):
        """
        初始化评估引擎

        Args:
            config: 评估配置
            validator: 走法验证器，用于计算机动性和走法模拟
        """
        self.config = config or EvaluationConfig()
        self.validator = validator or MoveValidator()
        self.logger = logging.getLogger(__name__)

        self.material_values = self._build_material_values()
        self.piece_square_tables = self._build_piece_square_tables()

    def _build_material_values(self) -> Dict[PieceType, int]:
        values = {}
        for piece_type in PieceType:
            if piece_type.config_key not in self.config.material_values:
                raise ConfigurationError('evaluation', f"缺少子力价值: {piece_type.config_key}")
            values[piece_type] = int(self.config.material_values[piece_type.config_key])
        return values

    def _build_piece_square_tables(self) -> Dict[PieceType, np.ndarray]:
        tables = {}
        for piece_type in PieceType:
            raw = self.config.piece_square_tables.get(piece_type.config_key)
            if raw is None:
                raise ConfigurationError('evaluation', f"缺少子力位置表: {piece_type.config_key}")
            table = np.array(raw, dtype=np.int32)
            if table.shape != (8, 8):
                raise ConfigurationError(
                    'evaluation', f"子力位置表尺寸错误: {piece_type.config_key} {table.shape}"
                )
            table.setflags(write=False)
            tables[piece_type] = table
        return tables

    # ==================== 局面评估 ====================

    def evaluate(self, board: Board, color: Color, last_move: Optional[Move] = None) -> int:
        """
        从指定方视角评估局面，正值表示该方占优

        Args:
            board: 棋盘
            color: 评估视角
            last_move: 上一步走法，用于计算机动性时的吃过路兵

        Returns:
            int: 评估分数
        """
        score = self.side_score(board, color) - self.side_score(board, color.opponent)
        score += self.config.mobility_weight * self.mobility(board, color, last_move)
        score += self.king_safety(board, color)
        score += self.config.center_weight * self.center_control(board, color)
        return int(score)

    def side_score(self, board: Board, color: Color) -> int:
        """一方的子力价值与位置分之和"""
        return self.material(board, color) + self.positional_score(board, color)

    def material(self, board: Board, color: Color) -> int:
        return sum(self.material_values[piece.piece_type] for piece in board.pieces_of(color))

    def material_balance(self, board: Board, color: Color) -> int:
        return self.material(board, color) - self.material(board, color.opponent)

    def positional_score(self, board: Board, color: Color) -> int:
        score = 0
        for piece in board.pieces_of(color):
            row = piece.row if color is Color.WHITE else 7 - piece.row
            score += int(self.piece_square_tables[piece.piece_type][row, piece.col])
        return score

    def mobility(self, board: Board, color: Color, last_move: Optional[Move] = None) -> int:
        """双方合法走法数之差"""
        own = len(self.validator.all_legal_moves(color, board, last_move))
        opponent = len(self.validator.all_legal_moves(color.opponent, board, last_move))
        return own - opponent

    def king_safety(self, board: Board, color: Color) -> int:
        """
        王的安全分

        被将军扣分；王周围每个不受对方攻击的格子加分；王不在棋盘上时给出大额惩罚。
        """
        king = board.king_of(color)
        if king is None:
            return -self.config.missing_king_penalty

        score = 0
        if board.is_in_check(color):
            score -= self.config.in_check_penalty

        for dr in (-1, 0, 1):
            for dc in (-1, 0, 1):
                if dr == 0 and dc == 0:
                    continue
                square = (king.row + dr, king.col + dc)
                if 0 <= square[0] < 8 and 0 <= square[1] < 8 and not board.is_square_attacked(square, color):
                    score += self.config.king_shelter_bonus
        return score

    def center_control(self, board: Board, color: Color) -> int:
        """中心四格中己方攻击数减去对方攻击数"""
        score = 0
        for square in CENTER_SQUARES:
            if board.is_square_attacked(square, color.opponent):
                score += 1
            if board.is_square_attacked(square, color):
                score -= 1
        return score

    # ==================== 走法评估 ====================

    def evaluate_move(self, move: Move, board: Board) -> int:
        """
        评估单步走法（在 board 上尚未执行）

        吃子价值；走后将军加分；未移动的马或象出动加分；
        走后落点受对方攻击时按棋子价值扣分。

        Args:
            move: 走法
            board: 走前棋盘

        Returns:
            int: 走法分数
        """
        score = 0
        if move.captured_piece is not None:
            score += self.material_values[move.captured_piece.piece_type]

        simulated = self.validator.simulate(move, board)
        if simulated is None:
            return score

        mover = move.piece
        if simulated.is_in_check(mover.color.opponent):
            score += self.config.check_bonus

        if not mover.has_moved and mover.piece_type in (PieceType.KNIGHT, PieceType.BISHOP):
            score += self.config.development_bonus

        if simulated.is_square_attacked(move.to_pos, mover.color):
            score -= self.material_values[mover.piece_type] // self.config.hanging_divisor

        return score
