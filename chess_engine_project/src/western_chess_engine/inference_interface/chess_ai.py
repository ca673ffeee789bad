"""
国际象棋AI决策核心

按难度级别选择走法：低难度随机或在排序靠前的走法中随机选择，
高难度在独立线程中运行极小化极大搜索，超时或失败时退回排序后的第一步。
"""

import time
import logging
import random
import threading
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any

from ..config.engine_config import AIConfig
from ..rules_engine import Board, Color, GameState, Move
from ..search_algorithm import MinimaxEngine
from ..utils.exceptions import SearchTimeoutError

MIN_LEVEL = 1
MAX_LEVEL = 6


@dataclass
class AnalysisResult:
    """
    分析结果数据结构
    """
    best_move: Optional[Move]
    evaluation: Optional[int]
    nodes_searched: int
    time_used: float
    depth: int
    difficulty_level: int
    fallback_used: bool = False
    timed_out: bool = False
    metadata: Dict[str, Any] = field(default_factory=dict)


class ChessAI:
    """
    国际象棋AI

    难度 1-2 随机走法；3 在排序前三中随机；4 在排序前二中随机；
    5-6 使用极小化极大搜索。
    """

    def __init__(self, config: Optional[AIConfig] = None, engine: Optional[MinimaxEngine] = None):
        """
        初始化AI

        Args:
            config: AI配置
            engine: 搜索引擎
        """
        self.config = config or AIConfig()
        self.config.difficulty_level = max(MIN_LEVEL, min(MAX_LEVEL, self.config.difficulty_level))
        self.engine = engine or MinimaxEngine()
        self.rng = random.Random(self.config.random_seed)
        self.logger = logging.getLogger(__name__)

        self.stats = {
            'moves_chosen': 0,
            'searches': 0,
            'timeouts': 0,
            'fallbacks': 0,
            'total_search_time': 0.0,
            'total_nodes_searched': 0,
        }

        self.logger.info(f"ChessAI初始化完成，难度级别: {self.config.difficulty_level}")

    # ==================== 难度 ====================

    def set_difficulty_level(self, level: int):
        """
        设置难度级别

        Args:
            level: 难度级别 (1-6)，越界时截断
        """
        level = max(MIN_LEVEL, min(MAX_LEVEL, level))
        self.config.difficulty_level = level
        self.logger.info(f"AI难度级别设置为: {level}")

    def get_difficulty_level(self) -> int:
        return self.config.difficulty_level

    # ==================== 走法选择 ====================

    def get_best_move(self, board: Board, state: GameState) -> Optional[Move]:
        """
        为当前行棋方选择走法

        Args:
            board: 棋盘
            state: 对局状态

        Returns:
            Optional[Move]: 没有合法走法或对局已结束时返回None
        """
        return self.analyze(board, state).best_move

    def choose_move(self, board: Board, state: GameState) -> Optional[Move]:
        return self.get_best_move(board, state)

    def analyze(self, board: Board, state: GameState, color: Optional[Color] = None) -> AnalysisResult:
        """
        分析局面并给出走法

        Args:
            board: 棋盘（不会被修改）
            state: 对局状态（不会被修改）
            color: 行棋方，默认取对局状态中的行棋方

        Returns:
            AnalysisResult: 分析结果
        """
        color = color or state.active_color
        level = self.config.difficulty_level
        start_time = time.time()

        result = AnalysisResult(
            best_move=None, evaluation=None, nodes_searched=0,
            time_used=0.0, depth=0, difficulty_level=level,
            metadata={'color': color.value},
        )

        if state.is_over:
            return result

        ordered = self.engine.move_generator.ordered_moves(color, board, state.last_move)
        if not ordered:
            return result

        if level <= 2:
            result.best_move = self.rng.choice(ordered)
        elif level <= 4:
            top = ordered[:3] if level == 3 else ordered[:2]
            result.best_move = self.rng.choice(top)
        else:
            self._run_search(board, state, color, ordered, result)

        result.time_used = time.time() - start_time
        self._update_stats(result)

        self.logger.debug(
            f"走法选择完成: 难度={level}, 走法={result.best_move}, "
            f"评估={result.evaluation}, 时间={result.time_used:.2f}s"
        )
        return result

    def _run_search(self, board: Board, state: GameState, color: Color,
                    ordered: List[Move], result: AnalysisResult):
        depth = self.config.search_depth
        result.depth = depth
        try:
            move = self._search_with_timeout(board, state, color, depth)
        except SearchTimeoutError as e:
            self.logger.warning(f"{e}，使用排序后的第一步")
            result.timed_out = True
            move = None
        except Exception as e:
            self.logger.error(f"搜索失败: {e}，使用排序后的第一步")
            move = None

        statistics = self.engine.last_statistics
        result.nodes_searched = statistics.nodes
        if move is None:
            result.best_move = ordered[0]
            result.fallback_used = True
        else:
            result.best_move = move
            result.evaluation = statistics.best_score

    def _search_with_timeout(self, board: Board, state: GameState, color: Color, depth: int) -> Optional[Move]:
        """
        在独立线程中搜索，超过时间限制时通知搜索停止

        搜索只在根节点的候选走法之间检查取消信号，
        超时后不等待工作线程结束，因此工作线程只拿到棋盘和状态的副本。

        Raises:
            SearchTimeoutError: 超过时间限制
        """
        cancel_event = threading.Event()
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix='minimax')
        start_time = time.time()
        try:
            future = executor.submit(self.engine.best_move, board.clone(), state.clone(),
                                     color, depth, cancel_event)
            try:
                return future.result(timeout=self.config.time_limit)
            except FutureTimeoutError:
                cancel_event.set()
                raise SearchTimeoutError(self.config.time_limit, time.time() - start_time)
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

    # ==================== 统计 ====================

    def _update_stats(self, result: AnalysisResult):
        self.stats['moves_chosen'] += 1
        if result.depth:
            self.stats['searches'] += 1
            self.stats['total_search_time'] += result.time_used
            self.stats['total_nodes_searched'] += result.nodes_searched
        if result.timed_out:
            self.stats['timeouts'] += 1
        if result.fallback_used:
            self.stats['fallbacks'] += 1

    def get_statistics(self) -> Dict[str, Any]:
        """
        获取统计信息

        Returns:
            Dict[str, Any]: 统计信息
        """
        stats = self.stats.copy()
        if stats['searches'] > 0:
            stats['average_search_time'] = stats['total_search_time'] / stats['searches']
            stats['average_nodes'] = stats['total_nodes_searched'] / stats['searches']
        else:
            stats['average_search_time'] = 0.0
            stats['average_nodes'] = 0.0
        stats['difficulty_level'] = self.config.difficulty_level
        return stats

    def reset_statistics(self):
        for key in self.stats:
            self.stats[key] = 0.0 if isinstance(self.stats[key], float) else 0
