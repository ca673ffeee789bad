"""
测试Board类的功能

测试棋盘初始化、紧凑记法转换、棋子放置以及各类走法的执行。
"""

import numpy as np
import pytest

from chess_engine_project.src.western_chess_engine.rules_engine import (
    Board, Color, Move, Piece, PieceType
)


class TestBoard:
    """Board类的测试"""

    def setup_method(self):
        """每个测试方法前的设置"""
        self.board = Board.initial_position()

    def test_initial_position(self):
        """测试初始局面"""
        assert len(self.board.all_pieces()) == 32
        assert self.board.to_compact_notation() == Board.INITIAL_NOTATION
        assert self.board.king_square(Color.WHITE) == (7, 4)
        assert self.board.king_square(Color.BLACK) == (0, 4)

        # 初始局面所有棋子都未移动
        assert all(not piece.has_moved for piece in self.board.all_pieces())

        white_counts = self.board.count_pieces(Color.WHITE)
        assert white_counts[PieceType.PAWN] == 8
        assert white_counts[PieceType.QUEEN] == 1
        assert white_counts[PieceType.KING] == 1

    def test_empty_board(self):
        """测试空棋盘"""
        board = Board()
        assert board.all_pieces() == []
        assert board.to_compact_notation() == "8/8/8/8/8/8/8/8"
        assert board.king_of(Color.WHITE) is None
        # 没有王时不视为被将军
        assert not board.is_in_check(Color.WHITE)

    def test_piece_queries(self):
        """测试棋子查询"""
        piece = self.board.piece_at((7, 3))
        assert piece.piece_type is PieceType.QUEEN
        assert piece.color is Color.WHITE
        assert piece.position == (7, 3)

        assert self.board.piece_at((4, 4)) is None
        assert self.board.piece_at((8, 0)) is None
        assert self.board.piece_at((-1, 3)) is None
        assert self.board.piece_at("e4") is None

        assert self.board.is_empty((4, 4))
        assert not self.board.is_empty((8, 8))
        assert self.board.is_enemy_piece((0, 0), Color.WHITE)
        assert self.board.is_own_piece((7, 0), Color.WHITE)

    def test_place_and_remove(self):
        """测试放置和移除棋子"""
        board = Board()
        knight = Piece(PieceType.KNIGHT, Color.BLACK)
        assert board.place(knight, (3, 3))
        assert board.piece_at((3, 3)) is knight
        assert knight.position == (3, 3)

        # 越界放置失败
        assert not board.place(Piece(PieceType.ROOK, Color.WHITE), (8, 0))

        # 覆盖已有棋子
        bishop = Piece(PieceType.BISHOP, Color.WHITE)
        board.place(bishop, (3, 3))
        assert board.piece_at((3, 3)) is bishop

        removed = board.remove((3, 3))
        assert removed is bishop
        assert board.piece_at((3, 3)) is None
        assert board.remove((3, 3)) is None
        assert board.remove((9, 9)) is None

    def test_remove_king_clears_reference(self):
        """测试移除王后王的引用被清除"""
        self.board.remove((7, 4))
        assert self.board.king_of(Color.WHITE) is None
        assert self.board.king_square(Color.WHITE) is None

    def test_compact_notation_round_trip(self):
        """测试紧凑记法往返转换"""
        notation = "r3k2r/pp3ppp/2n5/3pP3/8/5N2/PPP2PPP/R3K2R"
        board = Board.from_compact_notation(notation)
        assert board is not None
        assert board.to_compact_notation() == notation

        # 附加字段被忽略
        with_fields = Board.from_compact_notation(Board.INITIAL_NOTATION + " w KQkq - 0 1")
        assert with_fields == self.board

    def test_invalid_compact_notation(self):
        """测试格式错误的紧凑记法"""
        invalid = [
            "",
            "   ",
            None,
            "8/8/8/8",
            "rnbqkbnr/pppppppp/9/8/8/8/PPPPPPPP/RNBQKBNR",
            "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNRR",
            "rnbqkbnr/ppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR",
            "xnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR",
            "rnbqkbnr/pppppppp/0/8/8/8/PPPPPPPP/RNBQKBNR",
        ]
        for notation in invalid:
            assert Board.from_compact_notation(notation) is None, notation

    def test_inferred_moved_flags(self):
        """测试从紧凑记法推断已移动标志"""
        board = Board.from_compact_notation("r3k2r/8/8/8/4P3/8/P7/R2K3R")
        assert board.piece_at((4, 4)).has_moved        # e4 兵不在初始行
        assert not board.piece_at((6, 0)).has_moved    # a2 兵在初始行
        assert board.piece_at((7, 3)).has_moved        # 白王不在 e1
        assert not board.piece_at((7, 0)).has_moved    # 角上的车
        assert not board.piece_at((0, 4)).has_moved    # 黑王在 e8

    def test_execute_normal_move(self):
        """测试执行普通走法"""
        pawn = self.board.piece_at((6, 4))
        move = Move(pawn, (6, 4), (4, 4))
        assert self.board.execute_move(move)

        assert self.board.piece_at((6, 4)) is None
        assert self.board.piece_at((4, 4)) is pawn
        assert pawn.has_moved

    def test_execute_move_from_empty_square(self):
        """测试起点无子的走法执行失败"""
        move = Move(Piece(PieceType.PAWN, Color.WHITE), (4, 4), (3, 4))
        assert not self.board.execute_move(move)
        assert self.board.to_compact_notation() == Board.INITIAL_NOTATION

    def test_execute_capture(self):
        """测试吃子"""
        board = Board.from_compact_notation("4k3/8/8/3p4/4P3/8/8/4K3")
        pawn = board.piece_at((4, 4))
        move = Move(pawn, (4, 4), (3, 3), captured_piece=board.piece_at((3, 3)))
        assert board.execute_move(move)

        assert board.piece_at((3, 3)) is pawn
        assert len(board.pieces_of(Color.BLACK)) == 1

    def test_execute_castle(self):
        """测试执行王翼和后翼易位"""
        board = Board.from_compact_notation("r3k2r/8/8/8/8/8/8/R3K2R")
        king = board.piece_at((7, 4))
        assert board.execute_move(Move(king, (7, 4), (7, 6), is_kingside_castle=True))
        assert board.piece_at((7, 6)).piece_type is PieceType.KING
        assert board.piece_at((7, 5)).piece_type is PieceType.ROOK
        assert board.piece_at((7, 7)) is None
        assert board.piece_at((7, 4)) is None

        black_king = board.piece_at((0, 4))
        assert board.execute_move(Move(black_king, (0, 4), (0, 2), is_queenside_castle=True))
        assert board.piece_at((0, 2)).piece_type is PieceType.KING
        assert board.piece_at((0, 3)).piece_type is PieceType.ROOK
        assert board.piece_at((0, 0)) is None

    def test_execute_castle_without_rook(self):
        """测试缺少车时易位失败"""
        board = Board.from_compact_notation("4k3/8/8/8/8/8/8/4K3")
        king = board.piece_at((7, 4))
        assert not board.execute_move(Move(king, (7, 4), (7, 6), is_kingside_castle=True))
        assert board.piece_at((7, 4)) is king

    def test_execute_en_passant(self):
        """测试执行吃过路兵"""
        board = Board.from_compact_notation("4k3/8/8/3pP3/8/8/8/4K3")
        pawn = board.piece_at((3, 4))
        victim = board.piece_at((3, 3))
        move = Move(pawn, (3, 4), (2, 3), captured_piece=victim, is_en_passant=True)
        assert board.execute_move(move)

        assert board.piece_at((2, 3)) is pawn
        assert board.piece_at((3, 3)) is None
        assert board.count_pieces(Color.BLACK)[PieceType.PAWN] == 0

    def test_execute_promotion(self):
        """测试执行升变"""
        board = Board.from_compact_notation("4k3/P7/8/8/8/8/8/4K3")
        pawn = board.piece_at((1, 0))
        move = Move(pawn, (1, 0), (0, 0), is_promotion=True, promotion_type=PieceType.KNIGHT)
        assert board.execute_move(move)

        promoted = board.piece_at((0, 0))
        assert promoted.piece_type is PieceType.KNIGHT
        assert promoted.color is Color.WHITE
        assert promoted.has_moved
        assert board.count_pieces(Color.WHITE)[PieceType.PAWN] == 0

    def test_clone_independence(self):
        """测试复制的棋盘与原棋盘互不影响"""
        copy_board = self.board.clone()
        assert copy_board == self.board

        pawn = copy_board.piece_at((6, 4))
        copy_board.execute_move(Move(pawn, (6, 4), (4, 4)))

        assert self.board.piece_at((6, 4)) is not None
        assert self.board.piece_at((4, 4)) is None
        assert copy_board != self.board
        assert copy_board.king_of(Color.WHITE) is not self.board.king_of(Color.WHITE)

    def test_square_attacks(self):
        """测试格子受攻击判断"""
        # e3 受白方 d2、f2 兵攻击
        assert self.board.is_square_attacked((5, 4), Color.BLACK)
        # e6 受黑方兵攻击
        assert self.board.is_square_attacked((2, 4), Color.WHITE)
        # e4 在开局时不受黑方攻击
        assert not self.board.is_square_attacked((4, 4), Color.WHITE)
        assert not self.board.is_square_attacked((9, 9), Color.WHITE)

    def test_is_in_check(self):
        """测试将军判断"""
        board = Board.from_compact_notation("4k3/4r3/8/8/8/8/8/4K3")
        assert board.is_in_check(Color.WHITE)
        assert not board.is_in_check(Color.BLACK)

        # 中间有子阻挡时不构成将军
        board.place(Piece(PieceType.PAWN, Color.WHITE), (4, 4))
        assert not board.is_in_check(Color.WHITE)

    def test_to_matrix(self):
        """测试矩阵表示"""
        matrix = self.board.to_matrix()
        assert matrix.shape == (8, 8)
        assert matrix.dtype == np.int8
        assert matrix[7, 4] == 6
        assert matrix[0, 4] == -6
        assert matrix[6, 0] == 1
        assert matrix[1, 0] == -1
        assert np.all(matrix[2:6] == 0)
        assert matrix.sum() == 0

    def test_visual_string(self):
        """测试可视化字符串"""
        text = str(self.board)
        lines = text.splitlines()
        assert lines[0].strip() == "a b c d e f g h"
        assert lines[1].startswith("8 r n b q k b n r")
        assert lines[8].startswith("1 R N B Q K B N R")


if __name__ == "__main__":
    pytest.main([__file__])
