"""
极小化极大搜索

带 alpha-beta 剪枝的定深搜索，叶子节点由评估引擎打分。
每个分支都在复制的棋盘和对局状态上推演，实盘状态不会被修改。
"""

import threading
from dataclasses import dataclass
from typing import Optional, Tuple

from ..config.engine_config import SearchConfig
from ..rules_engine import Board, Color, GameState, GameStatus, Move, RulesEngine
from ..utils.logger import LoggerMixin, performance_logger
from .evaluation import EvaluationEngine
from .move_generator import MoveGenerator

MATE_SCORE = 100000
INFINITY = 200000
SEARCH_TIMER = 'minimax_search'


@dataclass
class SearchStatistics:
    """单次搜索的统计信息"""
    nodes: int = 0
    cutoffs: int = 0
    time_used: float = 0.0
    depth: int = 0
    best_score: Optional[int] = None
    cancelled: bool = False


class MinimaxEngine(LoggerMixin):
    """
    极小化极大搜索引擎

    搜索本身不跨调用保存局面信息，只保留最近一次搜索的统计数据。
    走法排序只影响剪枝效率，不改变搜索结果的分值。
    """

    def __init__(self, rules_engine: Optional[RulesEngine] = None,
                 evaluator: Optional[EvaluationEngine] = None,
                 move_generator: Optional[MoveGenerator] = None,
                 config: Optional[SearchConfig] = None):
        """
        初始化搜索引擎

        Args:
            rules_engine: 规则引擎
            evaluator: 评估引擎
            move_generator: 走法生成器
            config: 搜索配置
        """
        self.config = config or SearchConfig()
        self.rules_engine = rules_engine or RulesEngine()
        self.validator = self.rules_engine.validator
        self.evaluator = evaluator or EvaluationEngine(validator=self.validator)
        self.move_generator = move_generator or MoveGenerator(
            self.validator, self.evaluator, self.config.check_ordering_bonus
        )
        self.last_statistics = SearchStatistics()

    # ==================== 根节点 ====================

    def best_move(self, board: Board, state: GameState, color: Color,
                  depth: Optional[int] = None,
                  cancel_event: Optional[threading.Event] = None) -> Optional[Move]:
        """
        搜索最佳走法

        Args:
            board: 当前棋盘（不会被修改）
            state: 当前对局状态（不会被修改）
            color: 搜索方
            depth: 搜索深度，默认取配置
            cancel_event: 取消信号，只在根节点的候选走法之间检查

        Returns:
            Optional[Move]: 没有合法走法时返回None
        """
        depth = depth if depth is not None else self.config.default_depth
        depth = max(1, min(depth, self.config.max_depth))
        stats = SearchStatistics(depth=depth)
        self.last_statistics = stats

        moves = self.validator.all_legal_moves(color, board, state.last_move)
        if not moves:
            return None
        if len(moves) == 1:
            return moves[0]

        ordered = self.move_generator.sort_by_heuristic_value(moves, board)

        best: Optional[Move] = None
        best_score: Optional[int] = None
        alpha, beta = -INFINITY, INFINITY

        performance_logger.start_timer(SEARCH_TIMER)
        try:
            for index, move in enumerate(ordered):
                if cancel_event is not None and cancel_event.is_set():
                    stats.cancelled = True
                    self.log_info(f"搜索被取消，已评估 {index}/{len(ordered)} 个候选走法")
                    break

                child_board, child_state = self.play_move(board, state, move)
                if child_board is None:
                    continue

                score = self.minimax(child_board, child_state, depth - 1, alpha, beta,
                                     False, color.opponent, stats)
                self.log_debug(f"候选走法 {move.to_coordinate_notation()} 得分 {score}")

                if best_score is None or score > best_score:
                    best_score = score
                    best = move
                    alpha = max(alpha, best_score)
                    if beta <= alpha:
                        stats.cutoffs += 1
                        break
        finally:
            stats.time_used = performance_logger.end_timer(SEARCH_TIMER)

        if best is None:
            best = ordered[0]

        stats.best_score = best_score
        if self.config.log_statistics:
            performance_logger.log_search_stats(stats.nodes, stats.cutoffs, stats.time_used, depth)
        return best

    # ==================== 递归搜索 ====================

    def minimax(self, board: Board, state: GameState, depth: int,
                alpha: int, beta: int, maximizing: bool, color: Color,
                stats: Optional[SearchStatistics] = None) -> int:
        """
        带 alpha-beta 剪枝的极小化极大搜索

        Args:
            board: 棋盘
            state: 对局状态
            depth: 剩余深度
            alpha: 下界
            beta: 上界
            maximizing: 当前行棋方是否为极大方
            color: 当前行棋方
            stats: 本次搜索的统计对象，默认记入 last_statistics

        Returns:
            int: 从极大方视角的局面分数
        """
        if stats is None:
            stats = self.last_statistics
        stats.nodes += 1
        perspective = color if maximizing else color.opponent

        terminal = self.terminal_score(board, state, depth, maximizing, color)
        if terminal is not None:
            return terminal

        last_move = state.last_move
        if depth <= 0:
            return self.evaluator.evaluate(board, perspective, last_move)

        ordered = self.move_generator.ordered_moves(color, board, last_move)

        if maximizing:
            value = -INFINITY
            for move in ordered:
                child_board, child_state = self.play_move(board, state, move)
                if child_board is None:
                    continue
                value = max(value, self.minimax(child_board, child_state, depth - 1,
                                                alpha, beta, False, color.opponent, stats))
                alpha = max(alpha, value)
                if beta <= alpha:
                    stats.cutoffs += 1
                    break
            return value

        value = INFINITY
        for move in ordered:
            child_board, child_state = self.play_move(board, state, move)
            if child_board is None:
                continue
            value = min(value, self.minimax(child_board, child_state, depth - 1,
                                            alpha, beta, True, color.opponent, stats))
            beta = min(beta, value)
            if beta <= alpha:
                stats.cutoffs += 1
                break
        return value

    def terminal_score(self, board: Board, state: GameState, depth: int,
                       maximizing: bool, color: Color) -> Optional[int]:
        """
        终局分数

        行棋方被将死时，越浅的将死分值绝对值越大；逼和与各类和棋为0。
        非终局返回None。
        """
        if state.status.is_terminal:
            return self._recorded_outcome_score(state, maximizing, color)

        if not self.validator.has_legal_move(color, board, state.last_move):
            if board.is_in_check(color):
                return -(MATE_SCORE + depth) if maximizing else MATE_SCORE + depth
            return 0

        if (self.rules_engine.is_insufficient_material(board)
                or self.rules_engine.is_fifty_move_draw(state)
                or self.rules_engine.is_threefold_repetition(state, board.to_compact_notation())):
            return 0
        return None

    @staticmethod
    def _recorded_outcome_score(state: GameState, maximizing: bool, color: Color) -> int:
        perspective = color if maximizing else color.opponent
        if state.status.is_checkmate:
            loser = Color.WHITE if state.status is GameStatus.CHECKMATE_WHITE else Color.BLACK
            return -MATE_SCORE if loser is perspective else MATE_SCORE
        if state.status in (GameStatus.RESIGN_WHITE, GameStatus.RESIGN_BLACK):
            loser = Color.WHITE if state.status is GameStatus.RESIGN_WHITE else Color.BLACK
            return -MATE_SCORE if loser is perspective else MATE_SCORE
        return 0

    @staticmethod
    def play_move(board: Board, state: GameState, move: Move) -> Tuple[Optional[Board], Optional[GameState]]:
        """
        在棋盘和对局状态的副本上执行走法

        Returns:
            (新棋盘, 新状态)，走法无法执行时返回 (None, None)
        """
        child_board = board.clone()
        if not child_board.execute_move(move):
            return None, None

        child_state = state.clone()
        child_state.set_active_color(move.piece.color)
        child_state.record_move(move)
        child_state.record_position(child_board.to_compact_notation())
        child_state.switch_turn()
        return child_board, child_state
