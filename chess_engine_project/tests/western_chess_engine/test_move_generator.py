"""
测试MoveGenerator类的功能

测试分类走法、MVV-LVA 排序和 perft 节点数。
"""

import pytest

from chess_engine_project.src.western_chess_engine.rules_engine import (
    Board, Color, Move, Piece, PieceType, PROMOTION_TYPES
)
from chess_engine_project.src.western_chess_engine.search_algorithm import MoveGenerator


class TestMoveGenerator:
    """MoveGenerator类的测试"""

    def setup_method(self):
        """每个测试方法前的设置"""
        self.generator = MoveGenerator()
        self.board = Board.initial_position()

    def test_perft_initial_position(self):
        """测试初始局面的 perft 节点数"""
        assert self.generator.perft(self.board, Color.WHITE, 0) == 1
        assert self.generator.perft(self.board, Color.WHITE, 1) == 20
        assert self.generator.perft(self.board, Color.WHITE, 2) == 400

    def test_perft_with_castling(self):
        """测试含易位局面的 perft"""
        board = Board.from_compact_notation("r3k2r/8/8/8/8/8/8/R3K2R")
        # 车 a1 10步 + 车 h1 9步 + 王 5步 + 2次易位
        assert self.generator.perft(board, Color.WHITE, 1) == 26

    def test_promotion_moves(self):
        """测试升变生成四种走法"""
        board = Board.from_compact_notation("4k3/P7/8/8/8/8/8/4K3")
        promotions = self.generator.promotion_moves(Color.WHITE, board)
        assert len(promotions) == 4
        assert {move.promotion_type for move in promotions} == set(PROMOTION_TYPES)
        assert all(move.to_pos == (0, 0) for move in promotions)

    def test_capture_moves(self):
        """测试吃子走法"""
        board = Board.from_compact_notation("4k3/8/8/3p4/4P3/8/8/4K3")
        captures = self.generator.capture_moves(Color.WHITE, board)
        assert [move.to_coordinate_notation() for move in captures] == ['e4d5']
        assert captures[0].captured_piece.color is Color.BLACK

        assert self.generator.capture_moves(Color.WHITE, self.board) == []

    def test_check_moves(self):
        """测试将军走法"""
        board = Board.from_compact_notation("4k3/8/8/8/8/8/8/R3K3")
        checks = self.generator.check_moves(Color.WHITE, board)
        assert [move.to_coordinate_notation() for move in checks] == ['a1a8']
        assert checks[0].gives_check

    def test_castling_moves(self):
        """测试易位走法"""
        board = Board.from_compact_notation("r3k2r/8/8/8/8/8/8/R3K2R")
        castles = self.generator.castling_moves(Color.WHITE, board)
        assert len(castles) == 2
        assert self.generator.castling_moves(Color.WHITE, self.board) == []

    def test_mvv_lva_score(self):
        """测试最有价值受害者 / 最小价值攻击者分数"""
        pawn = Piece(PieceType.PAWN, Color.WHITE)
        queen = Piece(PieceType.QUEEN, Color.WHITE)
        black_queen = Piece(PieceType.QUEEN, Color.BLACK)
        black_pawn = Piece(PieceType.PAWN, Color.BLACK)

        pawn_takes_queen = Move(pawn, (4, 4), (3, 3), captured_piece=black_queen)
        queen_takes_pawn = Move(queen, (4, 4), (3, 3), captured_piece=black_pawn)
        quiet = Move(pawn, (6, 4), (5, 4))

        assert MoveGenerator.mvv_lva_score(pawn_takes_queen) == 8900
        assert MoveGenerator.mvv_lva_score(queen_takes_pawn) == 100
        assert MoveGenerator.mvv_lva_score(quiet) == 0

    def test_ordering_prefers_captures(self):
        """测试排序时吃子走法排在前面"""
        board = Board.from_compact_notation("4k3/8/8/3p4/4P3/8/8/4K3")
        ordered = self.generator.ordered_moves(Color.WHITE, board)
        assert ordered[0].to_coordinate_notation() == 'e4d5'

    def test_sort_is_stable(self):
        """测试同分走法保持输入顺序"""
        moves = self.generator.generate_legal_moves(Color.WHITE, self.board)
        ordered = self.generator.sort_by_heuristic_value(moves, self.board)

        knight_moves = [move for move in moves if move.piece.piece_type is PieceType.KNIGHT]
        pawn_moves = [move for move in moves if move.piece.piece_type is PieceType.PAWN]

        # 马出动有加分，兵的走法都是0分
        assert ordered[:4] == knight_moves
        assert ordered[4:] == pawn_moves
        assert len(ordered) == len(moves)

    def test_sort_does_not_modify_input(self):
        """测试排序返回新列表"""
        moves = self.generator.generate_legal_moves(Color.WHITE, self.board)
        original = list(moves)
        self.generator.sort_by_heuristic_value(moves, self.board)
        assert moves == original


if __name__ == "__main__":
    pytest.main([__file__])
