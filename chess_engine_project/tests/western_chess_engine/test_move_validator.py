"""
测试MoveValidator类的功能

测试合法走法过滤、易位与吃过路兵条件以及将军标注。
"""

import pytest

from chess_engine_project.src.western_chess_engine.rules_engine import (
    Board, Color, Move, MoveValidator, Piece, PieceType
)


def coordinate_set(moves):
    return {move.to_coordinate_notation() for move in moves}


class TestMoveValidator:
    """MoveValidator类的测试"""

    def setup_method(self):
        """每个测试方法前的设置"""
        self.validator = MoveValidator()
        self.board = Board.initial_position()

    def test_initial_legal_moves(self):
        """测试初始局面的合法走法"""
        white_moves = self.validator.all_legal_moves(Color.WHITE, self.board)
        assert len(white_moves) == 20

        notations = coordinate_set(white_moves)
        assert 'e2e4' in notations
        assert 'e2e3' in notations
        assert 'g1f3' in notations
        assert 'b1c3' in notations
        assert 'e1e2' not in notations

        assert len(self.validator.all_legal_moves(Color.BLACK, self.board)) == 20

    def test_is_legal(self):
        """测试单步走法的合法性验证"""
        pawn = self.board.piece_at((6, 4))
        assert self.validator.is_legal(Move(pawn, (6, 4), (4, 4)), self.board)
        assert not self.validator.is_legal(Move(pawn, (6, 4), (3, 4)), self.board)

        # 起点无子
        assert not self.validator.is_legal(Move(pawn, (4, 4), (3, 4)), self.board)
        # 声明的棋子类型与实际不符
        fake = Piece(PieceType.ROOK, Color.WHITE)
        assert not self.validator.is_legal(Move(fake, (6, 4), (4, 4)), self.board)
        # 越界
        assert not self.validator.is_legal(Move(pawn, (6, 4), (9, 4)), self.board)

    def test_flags_not_trusted(self):
        """测试调用方提供的走法标志不影响验证结果"""
        pawn = self.board.piece_at((6, 4))
        forged = Move(pawn, (6, 4), (4, 4), is_en_passant=True)
        assert self.validator.is_legal(forged, self.board)

        king = self.board.piece_at((7, 4))
        forged_castle = Move(king, (7, 4), (7, 6), is_kingside_castle=True)
        assert not self.validator.is_legal(forged_castle, self.board)

    def test_pinned_piece(self):
        """测试被牵制的棋子不能离开牵制线"""
        board = Board.from_compact_notation("k3r3/8/8/8/8/8/4B3/4K3")
        bishop = board.piece_at((6, 4))
        assert self.validator.legal_moves_for(bishop, board) == []

    def test_moves_never_leave_king_in_check(self):
        """测试任何合法走法走后己方王都不被将军"""
        positions = [
            ("rnb1kbnr/pppp1ppp/8/4p3/5PPq/8/PPPPP2P/RNBQKBNR", Color.WHITE),
            ("4k3/8/8/8/8/8/4r3/4K3", Color.WHITE),
            ("r3k2r/8/8/8/3b4/8/8/R3K2R", Color.WHITE),
            ("4k3/8/8/1B6/8/8/8/4K3", Color.BLACK),
        ]
        for notation, color in positions:
            board = Board.from_compact_notation(notation)
            for move in self.validator.all_legal_moves(color, board):
                simulated = self.validator.simulate(move, board)
                assert not simulated.is_in_check(color), f"{notation} {move}"

    def test_king_cannot_capture_defended_piece(self):
        """测试王不能吃有保护的棋子"""
        board = Board.from_compact_notation("4k3/8/8/8/8/8/3rr3/4K3")
        king = board.piece_at((7, 4))
        notations = coordinate_set(self.validator.legal_moves_for(king, board))
        assert 'e1e2' not in notations
        assert 'e1d2' not in notations

    def test_castling_available(self):
        """测试满足条件时可以双向易位"""
        board = Board.from_compact_notation("r3k2r/8/8/8/8/8/8/R3K2R")
        king = board.piece_at((7, 4))
        moves = self.validator.legal_moves_for(king, board)
        castles = [move for move in moves if move.is_castle]
        assert len(castles) == 2
        assert {move.to_pos for move in castles} == {(7, 6), (7, 2)}

    def test_castling_blocked(self):
        """测试王车之间有子时不能易位"""
        king = self.board.piece_at((7, 4))
        assert not any(move.is_castle for move in self.validator.legal_moves_for(king, self.board))

    def test_castling_through_attacked_square(self):
        """测试王经过受攻击的格子时不能易位"""
        # 黑车控制 f1
        board = Board.from_compact_notation("r3kr2/8/8/8/8/8/8/R3K2R")
        king = board.piece_at((7, 4))
        castles = [move for move in self.validator.legal_moves_for(king, board) if move.is_castle]
        assert len(castles) == 1
        assert castles[0].is_queenside_castle

    def test_castling_out_of_check(self):
        """测试被将军时不能易位"""
        board = Board.from_compact_notation("4k3/4r3/8/8/8/8/8/R3K2R")
        king = board.piece_at((7, 4))
        assert not any(move.is_castle for move in self.validator.legal_moves_for(king, board))

    def test_castling_after_rook_moved(self):
        """测试车移动过后不能向该侧易位"""
        board = Board.from_compact_notation("4k3/8/8/8/8/8/8/R3K2R")
        board.piece_at((7, 7)).has_moved = True
        king = board.piece_at((7, 4))
        castles = [move for move in self.validator.legal_moves_for(king, board) if move.is_castle]
        assert len(castles) == 1
        assert castles[0].is_queenside_castle

    def test_en_passant_after_double_push(self):
        """测试对方兵前进两格后可以立即吃过路兵"""
        board = Board.from_compact_notation("4k3/8/8/3pP3/8/8/8/4K3")
        black_pawn = board.piece_at((3, 3))
        white_pawn = board.piece_at((3, 4))
        last_move = Move(black_pawn, (1, 3), (3, 3))

        moves = self.validator.legal_moves_for(white_pawn, board, last_move)
        en_passant = [move for move in moves if move.is_en_passant]
        assert len(en_passant) == 1
        assert en_passant[0].to_pos == (2, 3)
        assert en_passant[0].captured_piece is black_pawn

    def test_en_passant_requires_last_move(self):
        """测试吃过路兵只能在对方兵前进两格后立即进行"""
        board = Board.from_compact_notation("4k3/8/8/3pP3/8/8/8/4K3")
        white_pawn = board.piece_at((3, 4))

        assert not any(move.is_en_passant for move in self.validator.legal_moves_for(white_pawn, board))

        # 上一步是其他走法
        black_king = board.piece_at((0, 4))
        king_move = Move(black_king, (0, 3), (0, 4))
        moves = self.validator.legal_moves_for(white_pawn, board, king_move)
        assert not any(move.is_en_passant for move in moves)

        # 上一步只前进一格
        black_pawn = board.piece_at((3, 3))
        single_step = Move(black_pawn, (2, 3), (3, 3))
        moves = self.validator.legal_moves_for(white_pawn, board, single_step)
        assert not any(move.is_en_passant for move in moves)

    def test_has_legal_move(self):
        """测试是否存在合法走法"""
        assert self.validator.has_legal_move(Color.WHITE, self.board)
        stalemate = Board.from_compact_notation("7k/5Q2/6K1/8/8/8/8/8")
        assert not self.validator.has_legal_move(Color.BLACK, stalemate)

    def test_simulate_does_not_modify_board(self):
        """测试模拟走法不修改原棋盘"""
        pawn = self.board.piece_at((6, 4))
        simulated = self.validator.simulate(Move(pawn, (6, 4), (4, 4)), self.board)
        assert simulated.piece_at((4, 4)) is not None
        assert self.board.piece_at((4, 4)) is None
        assert self.board.piece_at((6, 4)) is pawn
        assert not pawn.has_moved

    def test_annotate(self):
        """测试将军与将死标注"""
        board = Board.from_compact_notation("6k1/5ppp/8/8/8/8/8/R5K1")
        rook = board.piece_at((7, 0))

        mate = self.validator.annotate(Move(rook, (7, 0), (0, 0)), board)
        assert mate.gives_check
        assert mate.gives_checkmate

        quiet = self.validator.annotate(Move(rook, (7, 0), (3, 0)), board)
        assert not quiet.gives_check
        assert not quiet.gives_checkmate

        board = Board.from_compact_notation("6k1/8/8/8/8/8/8/R5K1")
        rook = board.piece_at((7, 0))
        check = self.validator.annotate(Move(rook, (7, 0), (0, 0)), board)
        assert check.gives_check
        assert not check.gives_checkmate


if __name__ == "__main__":
    pytest.main([__file__])
