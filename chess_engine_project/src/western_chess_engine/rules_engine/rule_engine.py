"""
国际象棋规则引擎

根据棋盘和对局状态判断将军、将死、逼和以及各种和棋条件。
"""

import logging
from typing import Dict, Any, Optional, Tuple

from .chess_board import Board
from .game_state import GameState, GameStatus, EndType
from .move import Move
from .move_validator import MoveValidator
from .pieces import Color, PieceType
from ..utils.exceptions import GameStateError


class RulesEngine:
    """
    规则引擎

    状态机：IN_PROGRESS / CHECK_* 为非终局状态，
    CHECKMATE_*、STALEMATE、DRAW、RESIGN_* 为终局状态。
    """

    def __init__(self, validator: Optional[MoveValidator] = None, fifty_move_limit: int = 100):
        """
        初始化规则引擎

        Args:
            validator: 走法验证器
            fifty_move_limit: 五十回合规则对应的半回合数
        """
        self.validator = validator or MoveValidator()
        self.fifty_move_limit = fifty_move_limit
        self.logger = logging.getLogger(__name__)

    # ==================== 将军与终局判断 ====================

    def is_in_check(self, color: Color, board: Board) -> bool:
        return board.is_in_check(color)

    def is_checkmate(self, color: Color, board: Board, last_move: Optional[Move] = None) -> bool:
        """
        检查指定方是否被将死：被将军且没有合法走法

        Args:
            color: 颜色
            board: 棋盘
            last_move: 对方上一步走法

        Returns:
            bool: 是否被将死
        """
        if not board.is_in_check(color):
            return False
        return not self.validator.has_legal_move(color, board, last_move)

    def is_stalemate(self, color: Color, board: Board, last_move: Optional[Move] = None) -> bool:
        """检查指定方是否被逼和：未被将军且没有合法走法"""
        if board.is_in_check(color):
            return False
        return not self.validator.has_legal_move(color, board, last_move)

    def is_insufficient_material(self, board: Board) -> bool:
        """
        检查是否子力不足以将死

        王对王；王马对王；王象对王；王象对王象且双象同色格。
        """
        minors = {Color.WHITE: [], Color.BLACK: []}
        for piece in board.all_pieces():
            if piece.piece_type is PieceType.KING:
                continue
            if piece.piece_type not in (PieceType.KNIGHT, PieceType.BISHOP):
                return False
            minors[piece.color].append(piece)

        white, black = minors[Color.WHITE], minors[Color.BLACK]
        if len(white) + len(black) <= 1:
            return True

        if len(white) == 1 and len(black) == 1:
            if white[0].piece_type is PieceType.BISHOP and black[0].piece_type is PieceType.BISHOP:
                # 格子颜色由 (行 + 列) 的奇偶决定
                return (white[0].row + white[0].col) % 2 == (black[0].row + black[0].col) % 2

        return False

    def is_fifty_move_draw(self, state: GameState) -> bool:
        return state.halfmove_clock >= self.fifty_move_limit

    def is_threefold_repetition(self, state: GameState, fingerprint: str) -> bool:
        return state.position_count(fingerprint) >= state.repetition_limit

    # ==================== 状态判定 ====================

    def validate_kings(self, board: Board):
        """
        校验双方各有且只有一个王

        Raises:
            GameStateError: 王的数量不为1
        """
        for color in Color:
            count = board.count_pieces(color)[PieceType.KING]
            if count != 1:
                raise GameStateError(f"{color.value}方王的数量为{count}", "对局进行中每方必须恰好有一个王")

    def determine_outcome(self, board: Board, state: GameState) -> Tuple[GameStatus, EndType]:
        """
        判定行棋方视角下的对局状态及终局原因

        优先级：将死 → 逼和 → 子力不足 → 五十回合 → 三次重复 → 将军 → 进行中。

        Args:
            board: 棋盘
            state: 对局状态

        Returns:
            Tuple[GameStatus, EndType]: 状态与终局原因
        """
        self.validate_kings(board)

        color = state.active_color
        last_move = state.last_move
        in_check = board.is_in_check(color)
        has_moves = self.validator.has_legal_move(color, board, last_move)

        if in_check and not has_moves:
            return GameStatus.checkmate_for(color), EndType.CHECKMATE
        if not has_moves:
            return GameStatus.STALEMATE, EndType.STALEMATE
        if self.is_insufficient_material(board):
            return GameStatus.DRAW, EndType.INSUFFICIENT_MATERIAL
        if self.is_fifty_move_draw(state):
            return GameStatus.DRAW, EndType.FIFTY_MOVE_RULE
        if self.is_threefold_repetition(state, board.to_compact_notation()):
            return GameStatus.DRAW, EndType.THREEFOLD_REPETITION
        if in_check:
            return GameStatus.check_for(color), EndType.NONE
        return GameStatus.IN_PROGRESS, EndType.NONE

    def determine_status(self, board: Board, state: GameState) -> GameStatus:
        """判定行棋方视角下的对局状态"""
        return self.determine_outcome(board, state)[0]

    def get_game_status(self, board: Board, state: GameState) -> Dict[str, Any]:
        """
        获取对局状态摘要

        Args:
            board: 棋盘
            state: 对局状态

        Returns:
            Dict: 状态信息
        """
        status, end_type = self.determine_outcome(board, state)
        legal_moves = self.validator.all_legal_moves(state.active_color, board, state.last_move)

        winner = None
        if status.is_checkmate:
            winner = state.active_color.opponent.value

        return {
            'active_color': state.active_color.value,
            'status': status.value,
            'end_type': end_type.value,
            'in_check': board.is_in_check(state.active_color),
            'game_over': status.is_terminal,
            'winner': winner,
            'legal_moves_count': len(legal_moves),
            'halfmove_clock': state.halfmove_clock,
            'move_number': state.move_number,
        }
