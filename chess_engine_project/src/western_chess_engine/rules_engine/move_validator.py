"""
走法验证器

在复制的棋盘上模拟走法，过滤掉会让己方王被将军的伪合法走法。
"""

import logging
from typing import List, Optional

from .chess_board import Board
from .move import Move, is_valid_square
from .movement import pseudo_legal_moves, KINGSIDE_ROOK_COL, QUEENSIDE_ROOK_COL, KING_START_COL
from .pieces import Piece, PieceType, Color


class MoveValidator:
    """
    走法验证器

    合法走法 = 伪合法走法 + 易位/吃过路兵的附加条件 + 走后己方王不被将军。
    上一步走法作为参数显式传入，用于吃过路兵的判断。
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def is_legal(self, move: Move, board: Board, last_move: Optional[Move] = None) -> bool:
        """
        验证走法是否合法

        Args:
            move: 要验证的走法
            board: 当前棋盘
            last_move: 对方上一步走法

        Returns:
            bool: 是否合法，越界或起点无子时返回False
        """
        if not is_valid_square(move.from_pos) or not is_valid_square(move.to_pos):
            return False

        piece = board.piece_at(move.from_pos)
        if piece is None:
            return False
        if piece.piece_type is not move.piece.piece_type or piece.color is not move.piece.color:
            return False

        # 以生成的候选走法为准，走法标志不信任调用方
        for candidate in pseudo_legal_moves(piece, board, last_move):
            if candidate.to_pos == tuple(move.to_pos) and candidate.promotion_type == move.promotion_type:
                return self._passes_rules(candidate, board, last_move)

        return False

    def _passes_rules(self, move: Move, board: Board, last_move: Optional[Move]) -> bool:
        if move.is_castle and not self.validate_castle(move, board):
            return False
        if move.is_en_passant and not self.validate_en_passant(move, board, last_move):
            return False
        return not self.leaves_king_in_check(move, board)

    def validate_castle(self, move: Move, board: Board) -> bool:
        """
        验证易位条件

        王和车都未移动；王当前未被将军；王车之间无子；
        王经过的格子（含目标格）不受对方攻击。
        """
        king = board.piece_at(move.from_pos)
        if king is None or king.piece_type is not PieceType.KING or king.has_moved:
            return False

        row = king.color.back_row
        if move.from_pos != (row, KING_START_COL) or move.to_pos[0] != row:
            return False

        rook_col = KINGSIDE_ROOK_COL if move.is_kingside_castle else QUEENSIDE_ROOK_COL
        rook = board.piece_at((row, rook_col))
        if (rook is None or rook.piece_type is not PieceType.ROOK
                or rook.color != king.color or rook.has_moved):
            return False

        if board.is_in_check(king.color):
            return False

        low, high = sorted((KING_START_COL, rook_col))
        if any(not board.is_empty((row, col)) for col in range(low + 1, high)):
            return False

        step = 1 if move.is_kingside_castle else -1
        transit = [(row, KING_START_COL + step), (row, KING_START_COL + 2 * step)]
        return not any(board.is_square_attacked(square, king.color) for square in transit)

    def validate_en_passant(self, move: Move, board: Board, last_move: Optional[Move]) -> bool:
        """
        验证吃过路兵条件

        吃子兵位于吃过路兵行；相邻列有对方的兵；
        且上一步正是该兵前进两格落到这一列。
        """
        pawn = board.piece_at(move.from_pos)
        if pawn is None or pawn.piece_type is not PieceType.PAWN:
            return False
        if pawn.row != pawn.color.en_passant_row:
            return False

        victim_square = (move.from_pos[0], move.to_pos[1])
        victim = board.piece_at(victim_square)
        if victim is None or victim.piece_type is not PieceType.PAWN or victim.color == pawn.color:
            return False

        if last_move is None:
            return False
        return (last_move.piece.piece_type is PieceType.PAWN
                and last_move.piece.color == victim.color
                and last_move.is_double_pawn_push
                and tuple(last_move.to_pos) == victim_square)

    def legal_moves_for(self, piece: Piece, board: Board, last_move: Optional[Move] = None) -> List[Move]:
        """
        获取单个棋子的合法走法

        Args:
            piece: 棋子
            board: 棋盘
            last_move: 对方上一步走法

        Returns:
            List[Move]: 合法走法列表
        """
        return [
            move for move in pseudo_legal_moves(piece, board, last_move)
            if self._passes_rules(move, board, last_move)
        ]

    def all_legal_moves(self, color: Color, board: Board, last_move: Optional[Move] = None) -> List[Move]:
        """获取一方全部合法走法"""
        moves: List[Move] = []
        for piece in board.pieces_of(color):
            moves.extend(self.legal_moves_for(piece, board, last_move))
        return moves

    def has_legal_move(self, color: Color, board: Board, last_move: Optional[Move] = None) -> bool:
        """是否至少有一步合法走法，找到即返回"""
        for piece in board.pieces_of(color):
            for move in pseudo_legal_moves(piece, board, last_move):
                if self._passes_rules(move, board, last_move):
                    return True
        return False

    # ==================== 模拟 ====================

    def simulate(self, move: Move, board: Board) -> Optional[Board]:
        """在棋盘副本上执行走法，失败时返回None"""
        copy_board = board.clone()
        if not copy_board.execute_move(move):
            return None
        return copy_board

    def leaves_king_in_check(self, move: Move, board: Board) -> bool:
        simulated = self.simulate(move, board)
        if simulated is None:
            return True
        return simulated.is_in_check(move.piece.color)

    def gives_check(self, move: Move, board: Board) -> bool:
        simulated = self.simulate(move, board)
        return simulated is not None and simulated.is_in_check(move.piece.color.opponent)

    def annotate(self, move: Move, board: Board) -> Move:
        """
        设置走法的将军与将死标志

        Args:
            move: 走法（在 board 上尚未执行）
            board: 走前棋盘

        Returns:
            Move: 设置了标志的同一走法对象
        """
        simulated = self.simulate(move, board)
        if simulated is None:
            return move

        opponent = move.piece.color.opponent
        move.gives_check = simulated.is_in_check(opponent)
        move.gives_checkmate = move.gives_check and not self.has_legal_move(opponent, simulated, move)
        return move
