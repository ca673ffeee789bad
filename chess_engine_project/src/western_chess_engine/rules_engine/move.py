"""
国际象棋走法数据结构

定义走法的表示、记法转换以及坐标工具函数。

坐标为 (行, 列)，第0行是黑方底线（第8横线），第7行是白方底线（第1横线）。
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Any

from .pieces import Piece, PieceType

Square = Tuple[int, int]

FILES = "abcdefgh"


def is_valid_square(square: Any) -> bool:
    """检查坐标是否在棋盘范围内，格式错误的输入同样返回False"""
    try:
        row, col = square
    except (TypeError, ValueError):
        return False
    return isinstance(row, int) and isinstance(col, int) and 0 <= row < 8 and 0 <= col < 8


def square_name(square: Square) -> str:
    """
    坐标转换为代数记法格名

    Args:
        square: (行, 列)

    Returns:
        str: 如 "e4"，越界时返回空字符串
    """
    if not is_valid_square(square):
        return ""
    row, col = square
    return f"{FILES[col]}{8 - row}"


def parse_square(name: str) -> Optional[Square]:
    """
    解析格名

    Args:
        name: 如 "e4"

    Returns:
        Optional[Square]: 坐标，格式错误时返回None
    """
    if not isinstance(name, str) or len(name) != 2:
        return None
    file_char, rank_char = name[0].lower(), name[1]
    if file_char not in FILES or not rank_char.isdigit():
        return None
    rank = int(rank_char)
    if not 1 <= rank <= 8:
        return None
    return (8 - rank, FILES.index(file_char))


def parse_coordinate_notation(notation: str) -> Optional[Tuple[Square, Square, Optional[PieceType]]]:
    """
    解析坐标记法

    Args:
        notation: 如 "e2e4" 或带升变字母的 "e7e8q"

    Returns:
        (起点, 终点, 升变类型)，格式错误时返回None
    """
    if not isinstance(notation, str):
        return None
    text = notation.strip()
    if len(text) not in (4, 5):
        return None

    from_pos = parse_square(text[0:2])
    to_pos = parse_square(text[2:4])
    if from_pos is None or to_pos is None:
        return None

    promotion = None
    if len(text) == 5:
        promotion = PieceType.from_letter(text[4])
        if promotion is None or promotion in (PieceType.PAWN, PieceType.KING):
            return None

    return from_pos, to_pos, promotion


def _piece_ref(piece: Piece) -> dict:
    """走法中只记录棋子的类型和颜色，棋子坐标会随对局变化"""
    return {'type': piece.piece_type.config_key, 'color': piece.color.value}


@dataclass
class Move:
    """
    国际象棋走法类

    描述一次从起点到终点的移动以及特殊走法标志。
    构造后除检测阶段设置的将军标志外不再修改。
    """
    piece: Piece                                  # 移动的棋子
    from_pos: Square                              # 起始位置 (行, 列)
    to_pos: Square                                # 目标位置 (行, 列)
    captured_piece: Optional[Piece] = None        # 被吃掉的棋子
    is_kingside_castle: bool = False              # 王翼易位
    is_queenside_castle: bool = False             # 后翼易位
    is_en_passant: bool = False                   # 吃过路兵
    is_promotion: bool = False                    # 升变
    promotion_type: Optional[PieceType] = None    # 升变类型
    gives_check: bool = False                     # 是否将军
    gives_checkmate: bool = False                 # 是否将死

    @property
    def is_castle(self) -> bool:
        return self.is_kingside_castle or self.is_queenside_castle

    @property
    def is_capture(self) -> bool:
        return self.captured_piece is not None

    @property
    def is_pawn_move(self) -> bool:
        return self.piece.piece_type is PieceType.PAWN

    @property
    def is_double_pawn_push(self) -> bool:
        return self.is_pawn_move and abs(self.to_pos[0] - self.from_pos[0]) == 2

    def to_coordinate_notation(self) -> str:
        """
        转换为坐标记法

        Returns:
            str: 如 "e2e4"，升变时追加小写升变字母，如 "e7e8q"
        """
        notation = f"{square_name(self.from_pos)}{square_name(self.to_pos)}"
        if self.is_promotion and self.promotion_type is not None:
            notation += self.promotion_type.letter
        return notation

    def to_algebraic_notation(self) -> str:
        """
        转换为简化代数记法

        同种棋子可到达同一格时不区分起点，这是已知限制。

        Returns:
            str: 如 "Nf3"、"exd5"、"e8=Q"、"O-O"、"Qxf7#"
        """
        if self.is_kingside_castle:
            notation = "O-O"
        elif self.is_queenside_castle:
            notation = "O-O-O"
        else:
            destination = square_name(self.to_pos)
            capture = "x" if self.is_capture else ""
            if self.is_pawn_move:
                prefix = FILES[self.from_pos[1]] if capture else ""
                notation = f"{prefix}{capture}{destination}"
                if self.is_promotion and self.promotion_type is not None:
                    notation += f"={self.promotion_type.letter.upper()}"
            else:
                notation = f"{self.piece.piece_type.letter.upper()}{capture}{destination}"

        if self.gives_checkmate:
            notation += "#"
        elif self.gives_check:
            notation += "+"
        return notation

    def __str__(self) -> str:
        return self.to_coordinate_notation()

    def __repr__(self) -> str:
        return (f"Move({self.piece.symbol} {self.to_coordinate_notation()}, "
                f"captured={self.captured_piece.symbol if self.captured_piece else None})")

    def __eq__(self, other) -> bool:
        if not isinstance(other, Move):
            return False
        return (self.from_pos == other.from_pos and
                self.to_pos == other.to_pos and
                self.promotion_type == other.promotion_type and
                self.piece.piece_type == other.piece.piece_type and
                self.piece.color == other.piece.color)

    def __hash__(self) -> int:
        return hash((self.from_pos, self.to_pos, self.promotion_type,
                     self.piece.piece_type, self.piece.color))

    def to_dict(self) -> dict:
        """转换为字典，包含全部标志"""
        return {
            'piece': _piece_ref(self.piece),
            'from_pos': list(self.from_pos),
            'to_pos': list(self.to_pos),
            'captured_piece': _piece_ref(self.captured_piece) if self.captured_piece else None,
            'is_kingside_castle': self.is_kingside_castle,
            'is_queenside_castle': self.is_queenside_castle,
            'is_en_passant': self.is_en_passant,
            'is_promotion': self.is_promotion,
            'promotion_type': self.promotion_type.config_key if self.promotion_type else None,
            'gives_check': self.gives_check,
            'gives_checkmate': self.gives_checkmate,
            'notation': self.to_coordinate_notation(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Move':
        """从字典创建Move对象，字段缺失或类型错误时抛出 KeyError/ValueError/TypeError"""
        captured = data.get('captured_piece')
        promotion = data.get('promotion_type')
        return cls(
            piece=Piece.from_dict(data['piece']),
            from_pos=tuple(data['from_pos']),
            to_pos=tuple(data['to_pos']),
            captured_piece=Piece.from_dict(captured) if captured else None,
            is_kingside_castle=data.get('is_kingside_castle', False),
            is_queenside_castle=data.get('is_queenside_castle', False),
            is_en_passant=data.get('is_en_passant', False),
            is_promotion=data.get('is_promotion', False),
            promotion_type=PieceType[promotion.upper()] if promotion else None,
            gives_check=data.get('gives_check', False),
            gives_checkmate=data.get('gives_checkmate', False),
        )
