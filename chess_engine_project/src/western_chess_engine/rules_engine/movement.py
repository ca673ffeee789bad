"""
棋子走法规则

按棋子类型分派的伪合法走法生成与攻击判断。

伪合法走法只考虑几何规则，不检查走后己方王是否被将军。
攻击判断与走法生成分开：兵只按斜线攻击，王的攻击不包含易位。
"""

from typing import Callable, Dict, List, Optional, Tuple

from .pieces import Piece, PieceType, PROMOTION_TYPES
from .move import Move, Square

KNIGHT_OFFSETS: Tuple[Tuple[int, int], ...] = (
    (-2, -1), (-2, 1), (-1, -2), (-1, 2),
    (1, -2), (1, 2), (2, -1), (2, 1),
)

KING_OFFSETS: Tuple[Tuple[int, int], ...] = (
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1), (0, 1),
    (1, -1), (1, 0), (1, 1),
)

DIAGONAL_DIRECTIONS = ((-1, -1), (-1, 1), (1, -1), (1, 1))
ORTHOGONAL_DIRECTIONS = ((-1, 0), (1, 0), (0, -1), (0, 1))
ALL_DIRECTIONS = DIAGONAL_DIRECTIONS + ORTHOGONAL_DIRECTIONS

KINGSIDE_ROOK_COL = 7
QUEENSIDE_ROOK_COL = 0
KING_START_COL = 4


def _in_bounds(row: int, col: int) -> bool:
    return 0 <= row < 8 and 0 <= col < 8


def _add_pawn_move(moves: List[Move], piece: Piece, target: Square, captured: Optional[Piece]):
    """到达底线时展开为四种升变走法"""
    if target[0] == piece.color.promotion_row:
        for promotion_type in PROMOTION_TYPES:
            moves.append(Move(piece, piece.position, target, captured_piece=captured,
                              is_promotion=True, promotion_type=promotion_type))
    else:
        moves.append(Move(piece, piece.position, target, captured_piece=captured))


def en_passant_move(piece: Piece, board, last_move: Optional[Move]) -> Optional[Move]:
    """
    生成吃过路兵走法

    Args:
        piece: 吃子的兵
        board: 棋盘
        last_move: 对方上一步走法

    Returns:
        Optional[Move]: 满足条件时返回走法，否则返回None
    """
    if last_move is None or piece.piece_type is not PieceType.PAWN:
        return None
    if piece.row != piece.color.en_passant_row:
        return None
    if not last_move.is_double_pawn_push or last_move.piece.color == piece.color:
        return None

    victim_row, victim_col = last_move.to_pos
    if victim_row != piece.row or abs(victim_col - piece.col) != 1:
        return None

    victim = board.piece_at((victim_row, victim_col))
    if victim is None or victim.piece_type is not PieceType.PAWN or victim.color == piece.color:
        return None

    target = (piece.row + piece.color.pawn_direction, victim_col)
    if not board.is_empty(target):
        return None

    return Move(piece, piece.position, target, captured_piece=victim, is_en_passant=True)


def _pawn_moves(piece: Piece, board, last_move: Optional[Move]) -> List[Move]:
    moves: List[Move] = []
    direction = piece.color.pawn_direction
    row, col = piece.position

    one_step = (row + direction, col)
    if board.is_empty(one_step):
        _add_pawn_move(moves, piece, one_step, None)

        two_step = (row + 2 * direction, col)
        if (not piece.has_moved and row == piece.color.pawn_start_row
                and board.is_empty(two_step)):
            moves.append(Move(piece, piece.position, two_step))

    for dc in (-1, 1):
        target = (row + direction, col + dc)
        occupant = board.piece_at(target)
        if occupant is not None and occupant.color != piece.color:
            _add_pawn_move(moves, piece, target, occupant)

    en_passant = en_passant_move(piece, board, last_move)
    if en_passant is not None:
        moves.append(en_passant)

    return moves


def _offset_moves(piece: Piece, board, offsets) -> List[Move]:
    moves: List[Move] = []
    for dr, dc in offsets:
        target = (piece.row + dr, piece.col + dc)
        if not _in_bounds(*target):
            continue
        occupant = board.piece_at(target)
        if occupant is None:
            moves.append(Move(piece, piece.position, target))
        elif occupant.color != piece.color:
            moves.append(Move(piece, piece.position, target, captured_piece=occupant))
    return moves


def _ray_moves(piece: Piece, board, directions) -> List[Move]:
    moves: List[Move] = []
    for dr, dc in directions:
        row, col = piece.row + dr, piece.col + dc
        while _in_bounds(row, col):
            occupant = board.piece_at((row, col))
            if occupant is None:
                moves.append(Move(piece, piece.position, (row, col)))
            else:
                # 遇到第一个棋子即停止，敌方棋子可以被吃
                if occupant.color != piece.color:
                    moves.append(Move(piece, piece.position, (row, col), captured_piece=occupant))
                break
            row += dr
            col += dc
    return moves


def _knight_moves(piece: Piece, board, last_move: Optional[Move]) -> List[Move]:
    return _offset_moves(piece, board, KNIGHT_OFFSETS)


def _bishop_moves(piece: Piece, board, last_move: Optional[Move]) -> List[Move]:
    return _ray_moves(piece, board, DIAGONAL_DIRECTIONS)


def _rook_moves(piece: Piece, board, last_move: Optional[Move]) -> List[Move]:
    return _ray_moves(piece, board, ORTHOGONAL_DIRECTIONS)


def _queen_moves(piece: Piece, board, last_move: Optional[Move]) -> List[Move]:
    return _ray_moves(piece, board, ALL_DIRECTIONS)


def castling_candidates(king: Piece, board) -> List[Move]:
    """
    生成易位候选走法

    只检查王和车是否在原位且未移动，路径与受攻击检查由走法验证器完成。
    """
    moves: List[Move] = []
    back_row = king.color.back_row
    if king.has_moved or king.position != (back_row, KING_START_COL):
        return moves

    for rook_col, target_col, kingside in ((KINGSIDE_ROOK_COL, 6, True),
                                           (QUEENSIDE_ROOK_COL, 2, False)):
        rook = board.piece_at((back_row, rook_col))
        if (rook is not None and rook.piece_type is PieceType.ROOK
                and rook.color == king.color and not rook.has_moved):
            moves.append(Move(king, king.position, (back_row, target_col),
                              is_kingside_castle=kingside,
                              is_queenside_castle=not kingside))
    return moves


def _king_moves(piece: Piece, board, last_move: Optional[Move]) -> List[Move]:
    return _offset_moves(piece, board, KING_OFFSETS) + castling_candidates(piece, board)


MoveGeneratorFn = Callable[[Piece, object, Optional[Move]], List[Move]]

MOVE_GENERATORS: Dict[PieceType, MoveGeneratorFn] = {
    PieceType.PAWN: _pawn_moves,
    PieceType.KNIGHT: _knight_moves,
    PieceType.BISHOP: _bishop_moves,
    PieceType.ROOK: _rook_moves,
    PieceType.QUEEN: _queen_moves,
    PieceType.KING: _king_moves,
}


def _pawn_attacks(piece: Piece, square: Square, board) -> bool:
    row, col = square
    return row == piece.row + piece.color.pawn_direction and abs(col - piece.col) == 1


def _knight_attacks(piece: Piece, square: Square, board) -> bool:
    return (square[0] - piece.row, square[1] - piece.col) in KNIGHT_OFFSETS


def _king_attacks(piece: Piece, square: Square, board) -> bool:
    dr, dc = square[0] - piece.row, square[1] - piece.col
    return (dr, dc) != (0, 0) and max(abs(dr), abs(dc)) == 1


def _ray_attacks(piece: Piece, square: Square, board, diagonal: bool, orthogonal: bool) -> bool:
    dr, dc = square[0] - piece.row, square[1] - piece.col
    if (dr, dc) == (0, 0):
        return False

    is_diagonal = abs(dr) == abs(dc)
    is_orthogonal = dr == 0 or dc == 0
    if not ((diagonal and is_diagonal) or (orthogonal and is_orthogonal)):
        return False

    step_r = (dr > 0) - (dr < 0)
    step_c = (dc > 0) - (dc < 0)
    row, col = piece.row + step_r, piece.col + step_c
    while (row, col) != tuple(square):
        if board.piece_at((row, col)) is not None:
            return False
        row += step_r
        col += step_c
    return True


def _bishop_attacks(piece: Piece, square: Square, board) -> bool:
    return _ray_attacks(piece, square, board, diagonal=True, orthogonal=False)


def _rook_attacks(piece: Piece, square: Square, board) -> bool:
    return _ray_attacks(piece, square, board, diagonal=False, orthogonal=True)


def _queen_attacks(piece: Piece, square: Square, board) -> bool:
    return _ray_attacks(piece, square, board, diagonal=True, orthogonal=True)


AttackTestFn = Callable[[Piece, Square, object], bool]

ATTACK_TESTS: Dict[PieceType, AttackTestFn] = {
    PieceType.PAWN: _pawn_attacks,
    PieceType.KNIGHT: _knight_attacks,
    PieceType.BISHOP: _bishop_attacks,
    PieceType.ROOK: _rook_attacks,
    PieceType.QUEEN: _queen_attacks,
    PieceType.KING: _king_attacks,
}


def pseudo_legal_moves(piece: Piece, board, last_move: Optional[Move] = None) -> List[Move]:
    """
    生成棋子的伪合法走法

    Args:
        piece: 棋子
        board: 棋盘
        last_move: 上一步走法，用于吃过路兵判断

    Returns:
        List[Move]: 伪合法走法列表
    """
    return MOVE_GENERATORS[piece.piece_type](piece, board, last_move)


def is_pseudo_legal(piece: Piece, destination: Square, board, last_move: Optional[Move] = None) -> bool:
    """判断棋子能否按几何规则到达目标格"""
    destination = tuple(destination)
    return any(move.to_pos == destination for move in pseudo_legal_moves(piece, board, last_move))


def attacks(piece: Piece, square: Square, board) -> bool:
    """判断棋子是否攻击目标格"""
    if not _in_bounds(*square):
        return False
    return ATTACK_TESTS[piece.piece_type](piece, square, board)
