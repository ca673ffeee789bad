"""
走法生成与排序

在走法验证器之上提供吃子、将军、易位、升变等分类走法，
以及基于 MVV-LVA 的启发式排序。
"""

import logging
from typing import List, Optional

from ..rules_engine import Board, Color, Move, MoveValidator
from .evaluation import EvaluationEngine


class MoveGenerator:
    """
    走法生成器

    排序分数 = MVV-LVA + 将军加分 + 评估引擎的走法分，按分数降序稳定排序，
    同分走法保持输入顺序。
    """

    def __init__(self, validator: Optional[MoveValidator] = None,
                 evaluator: Optional[EvaluationEngine] = None,
                 check_bonus: int = 50):
        """
        初始化走法生成器

        Args:
            validator: 走法验证器
            evaluator: 评估引擎
            check_bonus: 将军走法的固定加分
        """
        self.validator = validator or MoveValidator()
        self.evaluator = evaluator or EvaluationEngine(validator=self.validator)
        self.check_bonus = check_bonus
        self.logger = logging.getLogger(__name__)

    def generate_legal_moves(self, color: Color, board: Board, last_move: Optional[Move] = None) -> List[Move]:
        return self.validator.all_legal_moves(color, board, last_move)

    # ==================== 分类走法 ====================

    def capture_moves(self, color: Color, board: Board, last_move: Optional[Move] = None) -> List[Move]:
        """吃子走法（含吃过路兵）"""
        moves = [move for move in self.generate_legal_moves(color, board, last_move) if move.is_capture]
        for move in moves:
            self.validator.annotate(move, board)
        return moves

    def check_moves(self, color: Color, board: Board, last_move: Optional[Move] = None) -> List[Move]:
        """将军走法，需要模拟每一步"""
        checks = []
        for move in self.generate_legal_moves(color, board, last_move):
            self.validator.annotate(move, board)
            if move.gives_check:
                checks.append(move)
        return checks

    def castling_moves(self, color: Color, board: Board, last_move: Optional[Move] = None) -> List[Move]:
        moves = [move for move in self.generate_legal_moves(color, board, last_move) if move.is_castle]
        for move in moves:
            self.validator.annotate(move, board)
        return moves

    def promotion_moves(self, color: Color, board: Board, last_move: Optional[Move] = None) -> List[Move]:
        """升变走法，每个到达底线的兵生成后、车、象、马四种走法"""
        moves = [move for move in self.generate_legal_moves(color, board, last_move) if move.is_promotion]
        for move in moves:
            self.validator.annotate(move, board)
        return moves

    # ==================== 排序 ====================

    @staticmethod
    def mvv_lva_score(move: Move) -> int:
        """最有价值受害者 / 最小价值攻击者"""
        if move.captured_piece is None:
            return 0
        return move.captured_piece.value * 10 - move.piece.value

    def heuristic_value(self, move: Move, board: Board) -> int:
        score = self.mvv_lva_score(move)
        if self.validator.gives_check(move, board):
            score += self.check_bonus
        score += self.evaluator.evaluate_move(move, board)
        return score

    def sort_by_heuristic_value(self, moves: List[Move], board: Board) -> List[Move]:
        """
        按启发式分数降序排序

        Args:
            moves: 走法列表
            board: 走前棋盘

        Returns:
            List[Move]: 新的有序列表，同分走法保持原顺序
        """
        scores = {id(move): self.heuristic_value(move, board) for move in moves}
        return sorted(moves, key=lambda move: scores[id(move)], reverse=True)

    def ordered_moves(self, color: Color, board: Board, last_move: Optional[Move] = None) -> List[Move]:
        return self.sort_by_heuristic_value(self.generate_legal_moves(color, board, last_move), board)

    # ==================== 走法生成校验 ====================

    def perft(self, board: Board, color: Color, depth: int, last_move: Optional[Move] = None) -> int:
        """
        统计指定深度的叶子节点数，用于校验走法生成

        Args:
            board: 棋盘
            color: 行棋方
            depth: 深度
            last_move: 上一步走法

        Returns:
            int: 叶子节点数
        """
        if depth <= 0:
            return 1

        moves = self.generate_legal_moves(color, board, last_move)
        if depth == 1:
            return len(moves)

        nodes = 0
        for move in moves:
            child = board.clone()
            child.execute_move(move)
            nodes += self.perft(child, color.opponent, depth - 1, move)
        return nodes
