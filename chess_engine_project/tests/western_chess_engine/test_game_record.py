"""
测试棋谱记录工具

测试棋谱格式化、按颜色筛选和走法统计。
"""

import pytest

from chess_engine_project.src.western_chess_engine.inference_interface import (
    MoveStatistics, compute_statistics, format_move_list, moves_by_color, moves_since
)
from chess_engine_project.src.western_chess_engine.rules_engine import Color, Move, Piece, PieceType


def make_move(piece_type, color, from_pos, to_pos, **kwargs):
    return Move(Piece(piece_type, color), from_pos, to_pos, **kwargs)


class TestGameRecord:
    """棋谱工具的测试"""

    def setup_method(self):
        """每个测试方法前的设置"""
        self.moves = [
            make_move(PieceType.PAWN, Color.WHITE, (6, 4), (4, 4)),
            make_move(PieceType.PAWN, Color.BLACK, (1, 4), (3, 4)),
            make_move(PieceType.KNIGHT, Color.WHITE, (7, 6), (5, 5)),
            make_move(PieceType.KNIGHT, Color.BLACK, (0, 1), (2, 2)),
            make_move(PieceType.KNIGHT, Color.WHITE, (5, 5), (3, 4),
                      captured_piece=Piece(PieceType.PAWN, Color.BLACK)),
        ]

    def test_format_move_list(self):
        """测试棋谱格式化"""
        assert format_move_list(self.moves) == "1. e4 e5 2. Nf3 Nc6 3. Nxe5"
        assert format_move_list(self.moves, with_numbers=False) == "e4 e5 Nf3 Nc6 Nxe5"
        assert format_move_list([]) == ""

    def test_format_move_list_black_first(self):
        """测试从黑方开始的棋谱编号"""
        black_first = self.moves[1:]
        assert format_move_list(black_first) == "1... e5 2. Nf3 Nc6 3. Nxe5"
        assert format_move_list(black_first[:1]) == "1... e5"
        assert format_move_list(black_first, with_numbers=False) == "e5 Nf3 Nc6 Nxe5"

    def test_moves_by_color(self):
        """测试按颜色筛选"""
        white = moves_by_color(self.moves, Color.WHITE)
        assert len(white) == 3
        assert all(move.piece.color is Color.WHITE for move in white)
        assert len(moves_by_color(self.moves, Color.BLACK)) == 2

    def test_moves_since(self):
        """测试获取指定半回合之后的走法"""
        assert moves_since(self.moves, 3) == self.moves[3:]
        assert moves_since(self.moves, -2) == self.moves
        assert moves_since(self.moves, 10) == []
        assert moves_since(self.moves, 0) is not self.moves

    def test_compute_statistics(self):
        """测试走法统计"""
        stats = compute_statistics(self.moves)
        assert stats.total == 5
        assert stats.white_moves == 3
        assert stats.black_moves == 2
        assert stats.captures == 1
        assert stats.castles == 0
        assert stats.most_active_piece is PieceType.KNIGHT
        # 距离相同时取最早的走法
        assert stats.longest_move is self.moves[2]

        data = stats.to_dict()
        assert data['longest_move'] == 'g1f3'
        assert data['most_active_piece'] == 'knight'

    def test_special_move_counts(self):
        """测试易位、升变和吃过路兵计数"""
        moves = [
            make_move(PieceType.KING, Color.WHITE, (7, 4), (7, 6), is_kingside_castle=True),
            make_move(PieceType.PAWN, Color.BLACK, (6, 1), (7, 1), is_promotion=True,
                      promotion_type=PieceType.QUEEN, gives_check=True),
            make_move(PieceType.PAWN, Color.WHITE, (3, 4), (2, 3), is_en_passant=True,
                      captured_piece=Piece(PieceType.PAWN, Color.BLACK)),
        ]
        stats = compute_statistics(moves)
        assert stats.castles == 1
        assert stats.promotions == 1
        assert stats.en_passant == 1
        assert stats.checks == 1
        assert stats.captures == 1

    def test_empty_statistics(self):
        """测试空棋谱"""
        stats = compute_statistics([])
        assert stats == MoveStatistics()
        assert stats.to_dict()['longest_move'] is None


if __name__ == "__main__":
    pytest.main([__file__])
