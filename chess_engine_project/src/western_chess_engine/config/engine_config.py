"""
引擎配置数据结构

定义评估、搜索、AI、对局和系统配置类以及默认参数。
子力位置表均按白方视角书写，第0行对应第8横线。
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional


PAWN_TABLE = [
    [0, 0, 0, 0, 0, 0, 0, 0],
    [50, 50, 50, 50, 50, 50, 50, 50],
    [10, 10, 20, 30, 30, 20, 10, 10],
    [5, 5, 10, 25, 25, 10, 5, 5],
    [0, 0, 0, 20, 20, 0, 0, 0],
    [5, -5, -10, 0, 0, -10, -5, 5],
    [5, 10, 10, -20, -20, 10, 10, 5],
    [0, 0, 0, 0, 0, 0, 0, 0],
]

KNIGHT_TABLE = [
    [-50, -40, -30, -30, -30, -30, -40, -50],
    [-40, -20, 0, 0, 0, 0, -20, -40],
    [-30, 0, 10, 15, 15, 10, 0, -30],
    [-30, 5, 15, 20, 20, 15, 5, -30],
    [-30, 0, 15, 20, 20, 15, 0, -30],
    [-30, 5, 10, 15, 15, 10, 5, -30],
    [-40, -20, 0, 5, 5, 0, -20, -40],
    [-50, -40, -30, -30, -30, -30, -40, -50],
]

BISHOP_TABLE = [
    [-20, -10, -10, -10, -10, -10, -10, -20],
    [-10, 0, 0, 0, 0, 0, 0, -10],
    [-10, 0, 5, 10, 10, 5, 0, -10],
    [-10, 5, 5, 10, 10, 5, 5, -10],
    [-10, 0, 10, 10, 10, 10, 0, -10],
    [-10, 10, 10, 10, 10, 10, 10, -10],
    [-10, 5, 0, 0, 0, 0, 5, -10],
    [-20, -10, -10, -10, -10, -10, -10, -20],
]

ROOK_TABLE = [
    [0, 0, 0, 0, 0, 0, 0, 0],
    [5, 10, 10, 10, 10, 10, 10, 5],
    [-5, 0, 0, 0, 0, 0, 0, -5],
    [-5, 0, 0, 0, 0, 0, 0, -5],
    [-5, 0, 0, 0, 0, 0, 0, -5],
    [-5, 0, 0, 0, 0, 0, 0, -5],
    [-5, 0, 0, 0, 0, 0, 0, -5],
    [0, 0, 0, 5, 5, 0, 0, 0],
]

QUEEN_TABLE = [
    [-20, -10, -10, -5, -5, -10, -10, -20],
    [-10, 0, 0, 0, 0, 0, 0, -10],
    [-10, 0, 5, 5, 5, 5, 0, -10],
    [-5, 0, 5, 5, 5, 5, 0, -5],
    [0, 0, 5, 5, 5, 5, 0, -5],
    [-10, 5, 5, 5, 5, 5, 0, -10],
    [-10, 0, 5, 0, 0, 0, 0, -10],
    [-20, -10, -10, -5, -5, -10, -10, -20],
]

# 中局王表
KING_TABLE = [
    [-30, -40, -40, -50, -50, -40, -40, -30],
    [-30, -40, -40, -50, -50, -40, -40, -30],
    [-30, -40, -40, -50, -50, -40, -40, -30],
    [-30, -40, -40, -50, -50, -40, -40, -30],
    [-20, -30, -30, -40, -40, -30, -30, -20],
    [-10, -20, -20, -20, -20, -20, -20, -10],
    [20, 20, 0, 0, 0, 0, 20, 20],
    [20, 30, 10, 0, 0, 10, 30, 20],
]


def _default_material_values() -> Dict[str, int]:
    return {
        'pawn': 100,
        'knight': 320,
        'bishop': 330,
        'rook': 500,
        'queen': 900,
        'king': 10000,
    }


def _default_piece_square_tables() -> Dict[str, List[List[int]]]:
    return {
        'pawn': [list(row) for row in PAWN_TABLE],
        'knight': [list(row) for row in KNIGHT_TABLE],
        'bishop': [list(row) for row in BISHOP_TABLE],
        'rook': [list(row) for row in ROOK_TABLE],
        'queen': [list(row) for row in QUEEN_TABLE],
        'king': [list(row) for row in KING_TABLE],
    }


@dataclass
class EvaluationConfig:
    """局面评估配置"""
    material_values: Dict[str, int] = field(default_factory=_default_material_values)
    piece_square_tables: Dict[str, List[List[int]]] = field(default_factory=_default_piece_square_tables)
    mobility_weight: int = 2            # 机动性权重
    center_weight: int = 3              # 中心控制权重
    in_check_penalty: int = 50          # 被将军惩罚
    king_shelter_bonus: int = 5         # 王周围安全格奖励
    missing_king_penalty: int = 1000    # 王丢失惩罚
    check_bonus: int = 50               # 走法将军奖励
    development_bonus: int = 10         # 轻子出动奖励
    hanging_divisor: int = 10           # 落点受攻击时按棋子价值的惩罚比例


@dataclass
class SearchConfig:
    """搜索配置"""
    default_depth: int = 2              # 默认搜索深度
    max_depth: int = 6                  # 允许的最大深度
    check_ordering_bonus: int = 50      # 走法排序中将军的固定加分
    log_statistics: bool = True         # 是否记录搜索统计


@dataclass
class AIConfig:
    """AI驱动配置"""
    difficulty_level: int = 5           # 难度级别 (1-6)
    search_depth: int = 2               # 高难度下的搜索深度
    time_limit: float = 3.0             # 单步搜索时间限制(秒)
    random_seed: Optional[int] = None   # 随机种子，便于复现


@dataclass
class GameConfig:
    """对局配置"""
    white_name: str = 'White'           # 白方名称
    black_name: str = 'Black'           # 黑方名称
    initial_time: float = 600.0         # 每方初始时间(秒)
    fifty_move_limit: int = 100         # 五十回合规则对应的半回合数
    repetition_limit: int = 3           # 重复局面判和次数
    allow_undo: bool = True             # 是否允许悔棋


@dataclass
class SystemConfig:
    """系统配置"""
    log_level: str = 'INFO'             # 日志级别
    log_file: str = ''                  # 日志文件，为空时只输出到控制台
    log_dir: str = 'logs'               # 日志目录
    log_max_size: int = 10              # 日志文件最大大小(MB)
    log_backup_count: int = 5           # 日志备份数量


# 默认配置实例
DEFAULT_EVALUATION_CONFIG = EvaluationConfig()
DEFAULT_SEARCH_CONFIG = SearchConfig()
DEFAULT_AI_CONFIG = AIConfig()
DEFAULT_GAME_CONFIG = GameConfig()
DEFAULT_SYSTEM_CONFIG = SystemConfig()
