"""
对局状态

维护行棋方、走法历史、半回合计数、局面重复计数和终局状态。
"""

import copy
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Dict, List, Optional, Any

from .pieces import Color
from .move import Move
from ..utils.exceptions import GameStateError


class GameStatus(Enum):
    """对局状态枚举，CHECKMATE_WHITE 表示白方被将死"""
    IN_PROGRESS = "in_progress"          # 进行中
    CHECK_WHITE = "check_white"          # 白方被将军
    CHECK_BLACK = "check_black"          # 黑方被将军
    CHECKMATE_WHITE = "checkmate_white"  # 白方被将死
    CHECKMATE_BLACK = "checkmate_black"  # 黑方被将死
    STALEMATE = "stalemate"              # 逼和
    DRAW = "draw"                        # 和棋
    RESIGN_WHITE = "resign_white"        # 白方认输
    RESIGN_BLACK = "resign_black"        # 黑方认输

    @property
    def is_terminal(self) -> bool:
        return self not in (GameStatus.IN_PROGRESS, GameStatus.CHECK_WHITE, GameStatus.CHECK_BLACK)

    @property
    def is_check(self) -> bool:
        return self in (GameStatus.CHECK_WHITE, GameStatus.CHECK_BLACK)

    @property
    def is_checkmate(self) -> bool:
        return self in (GameStatus.CHECKMATE_WHITE, GameStatus.CHECKMATE_BLACK)

    @classmethod
    def check_for(cls, color: Color) -> 'GameStatus':
        return cls.CHECK_WHITE if color is Color.WHITE else cls.CHECK_BLACK

    @classmethod
    def checkmate_for(cls, color: Color) -> 'GameStatus':
        return cls.CHECKMATE_WHITE if color is Color.WHITE else cls.CHECKMATE_BLACK

    @classmethod
    def resign_for(cls, color: Color) -> 'GameStatus':
        return cls.RESIGN_WHITE if color is Color.WHITE else cls.RESIGN_BLACK


class EndType(Enum):
    """终局原因"""
    NONE = "none"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"
    RESIGNATION = "resignation"
    DRAW_AGREEMENT = "draw_agreement"
    FIFTY_MOVE_RULE = "fifty_move_rule"
    THREEFOLD_REPETITION = "threefold_repetition"
    INSUFFICIENT_MATERIAL = "insufficient_material"


@dataclass
class Player:
    """
    玩家

    只由回合切换逻辑修改。剩余时间只是计数器，不与真实时钟绑定。
    """
    name: str
    color: Color
    remaining_time: float = 600.0    # 剩余时间(秒)
    is_turn: bool = False
    move_count: int = 0
    score: int = 0
    has_resigned: bool = False

    def start_turn(self):
        self.is_turn = True

    def end_turn(self):
        self.is_turn = False
        self.move_count += 1

    def add_time(self, seconds: float):
        self.remaining_time += seconds

    def remove_time(self, seconds: float):
        self.remaining_time = max(0.0, self.remaining_time - seconds)

    def is_time_up(self) -> bool:
        return self.remaining_time <= 0

    def reset(self, initial_time: float = 600.0):
        self.remaining_time = initial_time
        self.is_turn = False
        self.move_count = 0
        self.score = 0
        self.has_resigned = False

    def clone(self) -> 'Player':
        return copy.copy(self)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['color'] = self.color.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Player':
        return cls(
            name=data['name'],
            color=Color(data['color']),
            remaining_time=float(data.get('remaining_time', 600.0)),
            is_turn=data.get('is_turn', False),
            move_count=data.get('move_count', 0),
            score=data.get('score', 0),
            has_resigned=data.get('has_resigned', False),
        )


class GameState:
    """
    对局状态类

    与棋盘一起创建、一起随走法更新；推演时与棋盘一同复制。
    终局状态只能前进，不能回退，除非调用 reset 显式重新初始化。
    """

    def __init__(self, white_player: Optional[Player] = None,
                 black_player: Optional[Player] = None,
                 repetition_limit: int = 3):
        """
        初始化对局状态

        Args:
            white_player: 白方玩家
            black_player: 黑方玩家
            repetition_limit: 重复局面判和次数
        """
        self.white_player = white_player or Player('White', Color.WHITE)
        self.black_player = black_player or Player('Black', Color.BLACK)
        self.repetition_limit = repetition_limit

        self.active_player: Player = self.white_player
        self.status = GameStatus.IN_PROGRESS
        self.end_type = EndType.NONE
        self.winner: Optional[Player] = None

        self.move_history: List[Move] = []
        self.halfmove_clock = 0
        self.repetition_counts: Dict[str, int] = {}

        self.white_player.start_turn()
        self.black_player.is_turn = False

    # ==================== 查询 ====================

    @property
    def active_color(self) -> Color:
        return self.active_player.color

    @property
    def last_move(self) -> Optional[Move]:
        return self.move_history[-1] if self.move_history else None

    @property
    def move_number(self) -> int:
        """当前回合数（从1开始）"""
        return len(self.move_history) // 2 + 1

    @property
    def is_over(self) -> bool:
        return self.status.is_terminal

    def player_of(self, color: Color) -> Player:
        return self.white_player if color is Color.WHITE else self.black_player

    def position_count(self, fingerprint: str) -> int:
        return self.repetition_counts.get(fingerprint, 0)

    # ==================== 走法记录 ====================

    def record_move(self, move: Move):
        """
        记录走法并更新半回合计数

        兵的走法或吃子时计数归零，否则加一。
        """
        self.move_history.append(move)
        if move.is_pawn_move or move.is_capture:
            self.halfmove_clock = 0
        else:
            self.halfmove_clock += 1

    def record_position(self, fingerprint: str) -> bool:
        """
        记录到达的局面

        Args:
            fingerprint: 局面指纹

        Returns:
            bool: 该局面出现次数是否达到重复判和次数
        """
        count = self.repetition_counts.get(fingerprint, 0) + 1
        self.repetition_counts[fingerprint] = count
        return count >= self.repetition_limit

    def switch_turn(self):
        """结束当前行棋方回合并交给对方"""
        self.active_player.end_turn()
        self.active_player = self.player_of(self.active_player.color.opponent)
        self.active_player.start_turn()

    def set_active_color(self, color: Color):
        """把行棋权交给指定方，不计入走子数"""
        if self.active_player.color is not color:
            self.active_player.is_turn = False
            self.active_player = self.player_of(color)
            self.active_player.start_turn()

    # ==================== 状态转换 ====================

    def set_status(self, status: GameStatus):
        """
        设置对局状态

        Raises:
            GameStateError: 已处于终局时试图改为其他状态
        """
        if self.status.is_terminal and status != self.status:
            raise GameStateError(
                f"{self.status.value} -> {status.value}",
                "终局状态不能回退"
            )
        self.status = status

    def declare_checkmate(self, loser: Color):
        self.set_status(GameStatus.checkmate_for(loser))
        self.end_type = EndType.CHECKMATE
        self.winner = self.player_of(loser.opponent)

    def declare_stalemate(self):
        self.set_status(GameStatus.STALEMATE)
        self.end_type = EndType.STALEMATE
        self.winner = None

    def declare_draw(self, end_type: EndType = EndType.DRAW_AGREEMENT):
        self.set_status(GameStatus.DRAW)
        self.end_type = end_type
        self.winner = None

    def declare_resignation(self, color: Color):
        self.set_status(GameStatus.resign_for(color))
        self.end_type = EndType.RESIGNATION
        self.player_of(color).has_resigned = True
        self.winner = self.player_of(color.opponent)

    def apply_outcome(self, status: GameStatus, end_type: EndType):
        """按规则引擎给出的结果更新状态"""
        if status.is_checkmate:
            loser = Color.WHITE if status is GameStatus.CHECKMATE_WHITE else Color.BLACK
            self.declare_checkmate(loser)
        elif status is GameStatus.STALEMATE:
            self.declare_stalemate()
        elif status is GameStatus.DRAW:
            self.declare_draw(end_type)
        else:
            self.set_status(status)

    def reset(self, initial_time: float = 600.0):
        """重新初始化为开局状态"""
        self.white_player.reset(initial_time)
        self.black_player.reset(initial_time)
        self.active_player = self.white_player
        self.white_player.start_turn()
        self.status = GameStatus.IN_PROGRESS
        self.end_type = EndType.NONE
        self.winner = None
        self.move_history = []
        self.halfmove_clock = 0
        self.repetition_counts = {}

    # ==================== 复制与快照 ====================

    def clone(self) -> 'GameState':
        """复制玩家、历史和计数器，走法对象共享"""
        state = GameState.__new__(GameState)
        state.white_player = self.white_player.clone()
        state.black_player = self.black_player.clone()
        state.repetition_limit = self.repetition_limit
        state.active_player = state.player_of(self.active_player.color)
        state.status = self.status
        state.end_type = self.end_type
        state.winner = state.player_of(self.winner.color) if self.winner else None
        state.move_history = list(self.move_history)
        state.halfmove_clock = self.halfmove_clock
        state.repetition_counts = dict(self.repetition_counts)
        return state

    def to_snapshot(self) -> Dict[str, Any]:
        """
        导出可序列化快照

        Returns:
            Dict: 走法列表（含全部标志）、玩家信息、状态和结果
        """
        return {
            'moves': [move.to_dict() for move in self.move_history],
            'players': {
                'white': self.white_player.to_dict(),
                'black': self.black_player.to_dict(),
            },
            'active_color': self.active_color.value,
            'status': self.status.value,
            'outcome': {
                'winner': self.winner.color.value if self.winner else None,
                'end_type': self.end_type.value,
            },
            'halfmove_clock': self.halfmove_clock,
        }

    def __repr__(self) -> str:
        return (f"GameState(active={self.active_color.value}, status={self.status.value}, "
                f"moves={len(self.move_history)}, halfmove_clock={self.halfmove_clock})")
