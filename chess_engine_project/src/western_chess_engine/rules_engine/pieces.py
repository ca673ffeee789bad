"""
棋子数据结构

定义颜色、棋子类型和棋子对象。

棋子类型是封闭的枚举，各类型的走法规则通过 movement 模块中的分派表选择，
而不是通过子类覆写。
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple, Optional


class Color(Enum):
    """棋子颜色"""
    WHITE = "white"
    BLACK = "black"

    @property
    def opponent(self) -> 'Color':
        """对方颜色"""
        return Color.BLACK if self is Color.WHITE else Color.WHITE

    @property
    def pawn_direction(self) -> int:
        """兵前进方向：白方向第0行前进，黑方向第7行前进"""
        return -1 if self is Color.WHITE else 1

    @property
    def back_row(self) -> int:
        """底线所在行"""
        return 7 if self is Color.WHITE else 0

    @property
    def pawn_start_row(self) -> int:
        return 6 if self is Color.WHITE else 1

    @property
    def promotion_row(self) -> int:
        return 0 if self is Color.WHITE else 7

    @property
    def en_passant_row(self) -> int:
        """可以吃过路兵的兵所在行"""
        return 3 if self is Color.WHITE else 4


class PieceType(Enum):
    """棋子类型，值为FEN记法中的小写字母"""
    PAWN = "p"
    KNIGHT = "n"
    BISHOP = "b"
    ROOK = "r"
    QUEEN = "q"
    KING = "k"

    @property
    def letter(self) -> str:
        return self.value

    @property
    def config_key(self) -> str:
        """配置文件中使用的名称"""
        return self.name.lower()

    @classmethod
    def from_letter(cls, letter: str) -> Optional['PieceType']:
        """从字母解析棋子类型（不区分大小写），无法识别时返回None"""
        return _LETTER_TO_TYPE.get(letter.lower()) if letter else None


_LETTER_TO_TYPE = {piece_type.value: piece_type for piece_type in PieceType}

# 棋子静态价值
PIECE_VALUES: Dict[PieceType, int] = {
    PieceType.PAWN: 100,
    PieceType.KNIGHT: 320,
    PieceType.BISHOP: 330,
    PieceType.ROOK: 500,
    PieceType.QUEEN: 900,
    PieceType.KING: 10000,
}

# 可选的升变类型，按常见偏好排序
PROMOTION_TYPES = (PieceType.QUEEN, PieceType.ROOK, PieceType.BISHOP, PieceType.KNIGHT)

PIECE_NAMES = {
    PieceType.PAWN: "兵",
    PieceType.KNIGHT: "马",
    PieceType.BISHOP: "象",
    PieceType.ROOK: "车",
    PieceType.QUEEN: "后",
    PieceType.KING: "王",
}


@dataclass(eq=False)
class Piece:
    """
    棋子类

    棋子归其所在的棋盘格所有，移动时原地修改行列坐标，
    只有在推演时才通过 clone 显式复制。
    """
    piece_type: PieceType
    color: Color
    row: int = -1
    col: int = -1
    has_moved: bool = False

    @property
    def position(self) -> Tuple[int, int]:
        return (self.row, self.col)

    @property
    def value(self) -> int:
        return PIECE_VALUES[self.piece_type]

    @property
    def symbol(self) -> str:
        """FEN符号，大写为白方"""
        letter = self.piece_type.letter
        return letter.upper() if self.color is Color.WHITE else letter

    @property
    def is_slider(self) -> bool:
        return self.piece_type in (PieceType.BISHOP, PieceType.ROOK, PieceType.QUEEN)

    @classmethod
    def from_symbol(cls, symbol: str) -> Optional['Piece']:
        """从FEN符号创建棋子，无法识别时返回None"""
        piece_type = PieceType.from_letter(symbol)
        if piece_type is None:
            return None
        color = Color.WHITE if symbol.isupper() else Color.BLACK
        return cls(piece_type, color)

    def clone(self) -> 'Piece':
        return Piece(self.piece_type, self.color, self.row, self.col, self.has_moved)

    def to_dict(self) -> dict:
        return {
            'type': self.piece_type.config_key,
            'color': self.color.value,
            'row': self.row,
            'col': self.col,
            'has_moved': self.has_moved,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Piece':
        return cls(
            piece_type=PieceType[data['type'].upper()],
            color=Color(data['color']),
            row=data.get('row', -1),
            col=data.get('col', -1),
            has_moved=data.get('has_moved', False),
        )

    def __str__(self) -> str:
        return self.symbol

    def __repr__(self) -> str:
        return (f"Piece({self.color.value} {self.piece_type.config_key} "
                f"at {self.position}, has_moved={self.has_moved})")
