"""
国际象棋棋盘数据结构

定义棋盘的表示、走法执行和紧凑记法转换功能。
"""

import logging
from typing import List, Optional, Dict

import numpy as np

from .pieces import Piece, PieceType, Color
from .move import Move, Square, is_valid_square
from .movement import attacks, KINGSIDE_ROOK_COL, QUEENSIDE_ROOK_COL, KING_START_COL

logger = logging.getLogger(__name__)


class Board:
    """
    国际象棋棋盘类

    8x8 的棋盘网格，持有棋子并维护双方王的引用。
    棋盘不引用对局状态，吃过路兵所需的上一步走法由调用方显式传入。
    """

    SIZE = 8

    INITIAL_NOTATION = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"

    BACK_RANK = (
        PieceType.ROOK, PieceType.KNIGHT, PieceType.BISHOP, PieceType.QUEEN,
        PieceType.KING, PieceType.BISHOP, PieceType.KNIGHT, PieceType.ROOK,
    )

    # 矩阵表示中的棋子编码，黑方为负数
    PIECE_CODES = {
        PieceType.PAWN: 1, PieceType.KNIGHT: 2, PieceType.BISHOP: 3,
        PieceType.ROOK: 4, PieceType.QUEEN: 5, PieceType.KING: 6,
    }

    def __init__(self):
        """创建空棋盘"""
        self.grid = np.empty((self.SIZE, self.SIZE), dtype=object)
        self.kings: Dict[Color, Optional[Piece]] = {Color.WHITE: None, Color.BLACK: None}

    @classmethod
    def initial_position(cls) -> 'Board':
        """创建标准初始局面"""
        board = cls()
        for col, piece_type in enumerate(cls.BACK_RANK):
            board.place(Piece(piece_type, Color.BLACK), (0, col))
            board.place(Piece(PieceType.PAWN, Color.BLACK), (1, col))
            board.place(Piece(PieceType.PAWN, Color.WHITE), (6, col))
            board.place(Piece(piece_type, Color.WHITE), (7, col))
        return board

    # ==================== 棋子放置与查询 ====================

    def place(self, piece: Piece, square: Square) -> bool:
        """
        在指定格放置棋子

        无条件覆盖目标格，设置棋子坐标并清除已移动标志。

        Args:
            piece: 棋子
            square: 目标格

        Returns:
            bool: 坐标越界时返回False
        """
        if not is_valid_square(square):
            return False

        row, col = square
        # 棋子已在本棋盘其他位置时先移走
        if is_valid_square(piece.position) and self.grid[piece.row, piece.col] is piece:
            self.grid[piece.row, piece.col] = None

        self._detach(self.grid[row, col])
        piece.row, piece.col = row, col
        piece.has_moved = False
        self.grid[row, col] = piece
        if piece.piece_type is PieceType.KING:
            self.kings[piece.color] = piece
        return True

    def remove(self, square: Square) -> Optional[Piece]:
        """移走指定格上的棋子并返回它"""
        if not is_valid_square(square):
            return None
        piece = self.grid[square[0], square[1]]
        self.grid[square[0], square[1]] = None
        self._detach(piece)
        return piece

    def _detach(self, piece: Optional[Piece]):
        if piece is not None and self.kings.get(piece.color) is piece:
            self.kings[piece.color] = None

    def piece_at(self, square: Square) -> Optional[Piece]:
        """
        获取指定格上的棋子

        Args:
            square: (行, 列)

        Returns:
            Optional[Piece]: 越界或空格时返回None
        """
        if not is_valid_square(square):
            return None
        return self.grid[square[0], square[1]]

    def is_empty(self, square: Square) -> bool:
        """格子在棋盘内且没有棋子"""
        return is_valid_square(square) and self.grid[square[0], square[1]] is None

    def is_enemy_piece(self, square: Square, color: Color) -> bool:
        piece = self.piece_at(square)
        return piece is not None and piece.color != color

    def is_own_piece(self, square: Square, color: Color) -> bool:
        piece = self.piece_at(square)
        return piece is not None and piece.color == color

    def pieces_of(self, color: Color) -> List[Piece]:
        """按行优先顺序扫描全盘，返回指定颜色的所有棋子"""
        return [piece for piece in self.grid.flat if piece is not None and piece.color == color]

    def all_pieces(self) -> List[Piece]:
        return [piece for piece in self.grid.flat if piece is not None]

    def king_of(self, color: Color) -> Optional[Piece]:
        """获取指定颜色的王"""
        king = self.kings.get(color)
        if king is not None and self.grid[king.row, king.col] is king:
            return king
        return None

    def king_square(self, color: Color) -> Optional[Square]:
        king = self.king_of(color)
        return king.position if king else None

    def count_pieces(self, color: Optional[Color] = None) -> Dict[PieceType, int]:
        """统计棋子数量"""
        counts = {piece_type: 0 for piece_type in PieceType}
        for piece in self.all_pieces():
            if color is None or piece.color == color:
                counts[piece.piece_type] += 1
        return counts

    # ==================== 攻击与将军 ====================

    def is_square_attacked(self, square: Square, defender_color: Color) -> bool:
        """
        判断格子是否受到防守方对手的攻击

        Args:
            square: 目标格
            defender_color: 防守方颜色

        Returns:
            bool: 是否受攻击，越界时返回False
        """
        if not is_valid_square(square):
            return False
        square = tuple(square)
        return any(attacks(piece, square, self) for piece in self.pieces_of(defender_color.opponent))

    def is_in_check(self, color: Color) -> bool:
        """
        判断指定颜色是否被将军

        没有王时返回False，王的数量由规则引擎校验。
        """
        king_square = self.king_square(color)
        if king_square is None:
            return False
        return self.is_square_attacked(king_square, color)

    # ==================== 走法执行 ====================

    def execute_move(self, move: Move) -> bool:
        """
        执行走法

        根据走法标志分派到易位、吃过路兵或普通走法（含升变）。
        不维护上一步走法等对局记录，那是对局状态的职责。

        Args:
            move: 要执行的走法

        Returns:
            bool: 起点没有棋子或易位缺少车时返回False
        """
        if not is_valid_square(move.from_pos) or not is_valid_square(move.to_pos):
            return False

        piece = self.piece_at(move.from_pos)
        if piece is None:
            return False

        if move.is_kingside_castle or move.is_queenside_castle:
            return self._execute_castle(piece, move)

        if move.is_en_passant:
            return self._execute_en_passant(piece, move)

        self._execute_normal(piece, move)
        if move.is_promotion:
            self._execute_promotion(piece, move)
        return True

    def _relocate(self, piece: Piece, target: Square):
        """移动棋子到目标格，目标格原有棋子被移除"""
        self.grid[piece.row, piece.col] = None
        self._detach(self.grid[target[0], target[1]])
        piece.row, piece.col = target
        piece.has_moved = True
        self.grid[target[0], target[1]] = piece

    def _execute_normal(self, piece: Piece, move: Move):
        self._relocate(piece, move.to_pos)

    def _execute_castle(self, king: Piece, move: Move) -> bool:
        row = move.from_pos[0]
        if move.is_kingside_castle:
            rook_from, rook_to, king_to = KINGSIDE_ROOK_COL, 5, 6
        else:
            rook_from, rook_to, king_to = QUEENSIDE_ROOK_COL, 3, 2

        rook = self.piece_at((row, rook_from))
        if rook is None or rook.piece_type is not PieceType.ROOK or king.col != KING_START_COL:
            logger.warning(f"易位失败，缺少车或王不在原位: {move}")
            return False

        self._relocate(king, (row, king_to))
        self._relocate(rook, (row, rook_to))
        return True

    def _execute_en_passant(self, pawn: Piece, move: Move) -> bool:
        # 被吃的兵与吃子兵同行，位于目标列
        self.remove((move.from_pos[0], move.to_pos[1]))
        self._relocate(pawn, move.to_pos)
        return True

    def _execute_promotion(self, pawn: Piece, move: Move):
        promoted = Piece(move.promotion_type or PieceType.QUEEN, pawn.color,
                         pawn.row, pawn.col, has_moved=True)
        self.grid[pawn.row, pawn.col] = promoted

    # ==================== 复制与格式转换 ====================

    def clone(self) -> 'Board':
        """深复制所有棋子并重建王的引用"""
        board = Board()
        for piece in self.all_pieces():
            copy_piece = piece.clone()
            board.grid[copy_piece.row, copy_piece.col] = copy_piece
            if copy_piece.piece_type is PieceType.KING:
                board.kings[copy_piece.color] = copy_piece
        return board

    def to_compact_notation(self) -> str:
        """
        转换为紧凑记法（FEN的棋子布局部分）

        按行从第8横线到第1横线扫描，连续空格用数字表示，大写为白方。
        该字符串同时用作重复局面判断的局面指纹。

        Returns:
            str: 如 "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"
        """
        ranks = []
        for row in range(self.SIZE):
            rank = ""
            empty_count = 0
            for col in range(self.SIZE):
                piece = self.grid[row, col]
                if piece is None:
                    empty_count += 1
                else:
                    if empty_count > 0:
                        rank += str(empty_count)
                        empty_count = 0
                    rank += piece.symbol
            if empty_count > 0:
                rank += str(empty_count)
            ranks.append(rank)
        return "/".join(ranks)

    @classmethod
    def from_compact_notation(cls, notation: str) -> Optional['Board']:
        """
        从紧凑记法创建棋盘

        只解析棋子布局，附加字段（行棋方、易位权、过路兵目标格）会被忽略。
        兵不在初始行、王不在e线原位、车不在角上时视为已移动。

        Args:
            notation: 紧凑记法字符串

        Returns:
            Optional[Board]: 格式错误时返回None
        """
        if not isinstance(notation, str) or not notation.strip():
            return None

        placement = notation.split()[0]
        ranks = placement.split("/")
        if len(ranks) != cls.SIZE:
            return None

        board = cls()
        for row, rank in enumerate(ranks):
            col = 0
            for char in rank:
                if char.isdigit():
                    empty = int(char)
                    if not 1 <= empty <= cls.SIZE:
                        return None
                    col += empty
                else:
                    piece = Piece.from_symbol(char)
                    if piece is None or col >= cls.SIZE:
                        return None
                    board.place(piece, (row, col))
                    col += 1
                if col > cls.SIZE:
                    return None
            if col != cls.SIZE:
                return None

        board._infer_moved_flags()
        return board

    def _infer_moved_flags(self):
        for piece in self.all_pieces():
            back_row = piece.color.back_row
            if piece.piece_type is PieceType.PAWN:
                piece.has_moved = piece.row != piece.color.pawn_start_row
            elif piece.piece_type is PieceType.KING:
                piece.has_moved = piece.position != (back_row, KING_START_COL)
            elif piece.piece_type is PieceType.ROOK:
                piece.has_moved = piece.position not in ((back_row, QUEENSIDE_ROOK_COL),
                                                         (back_row, KINGSIDE_ROOK_COL))

    def to_matrix(self) -> np.ndarray:
        """
        转换为整数矩阵

        Returns:
            np.ndarray: 8x8 矩阵，白方为正数，黑方为负数，空格为0
        """
        matrix = np.zeros((self.SIZE, self.SIZE), dtype=np.int8)
        for piece in self.all_pieces():
            code = self.PIECE_CODES[piece.piece_type]
            matrix[piece.row, piece.col] = code if piece.color is Color.WHITE else -code
        return matrix

    def to_visual_string(self) -> str:
        """转换为可视化字符串，第8横线在上"""
        lines = ["  a b c d e f g h"]
        for row in range(self.SIZE):
            rank = 8 - row
            cells = [self.grid[row, col].symbol if self.grid[row, col] else "." for col in range(self.SIZE)]
            lines.append(f"{rank} {' '.join(cells)} {rank}")
        lines.append("  a b c d e f g h")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.to_visual_string()

    def __eq__(self, other) -> bool:
        if not isinstance(other, Board):
            return False
        return self.to_compact_notation() == other.to_compact_notation()

    def __hash__(self) -> int:
        return hash(self.to_compact_notation())
