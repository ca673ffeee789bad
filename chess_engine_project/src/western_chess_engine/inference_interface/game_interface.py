"""
对局接口

面向界面层的对局门面：走子、悔棋与重做、认输与和棋、AI走子、
事件订阅以及对局快照的保存与恢复。
"""

import json
import logging
from pathlib import Path
from typing import List, Optional, Dict, Any, Tuple, Callable

from ..config.engine_config import GameConfig, AIConfig, SearchConfig, EvaluationConfig
from ..rules_engine import (
    Board, Color, GameState, GameStatus, EndType, Player, Move, Piece, PieceType,
    RulesEngine, Square, is_valid_square, parse_coordinate_notation
)
from ..rules_engine.movement import KING_START_COL
from ..search_algorithm import EvaluationEngine, MinimaxEngine
from ..utils.exceptions import DataError, GameStateError, InvalidMoveError
from .chess_ai import ChessAI
from .events import EventDispatcher, GameEvent
from .game_record import compute_statistics, format_move_list

SNAPSHOT_VERSION = 1

CASTLING_NOTATION = {
    'O-O': 6, '0-0': 6,
    'O-O-O': 2, '0-0-0': 2,
}


class GameInterface:
    """
    对局接口

    棋盘和对局状态只由本类修改。悔棋通过从基准局面完整回放实现，
    基准局面是新对局的初始局面、恢复快照时的起始局面或 load_game 载入的局面。
    事件在引擎线程中同步分发，监听器中调用修改对局的方法会抛出 GameStateError。
    """

    def __init__(self, config: Optional[GameConfig] = None,
                 ai_config: Optional[AIConfig] = None,
                 rules_engine: Optional[RulesEngine] = None,
                 ai: Optional[ChessAI] = None,
                 search_config: Optional[SearchConfig] = None,
                 evaluation_config: Optional[EvaluationConfig] = None):
        """
        初始化对局接口

        Args:
            config: 对局配置
            ai_config: AI配置
            rules_engine: 规则引擎
            ai: AI实例，提供时忽略 ai_config
            search_config: 搜索配置
            evaluation_config: 评估配置
        """
        self.config = config or GameConfig()
        self.logger = logging.getLogger(__name__)

        self.rules_engine = rules_engine or RulesEngine(fifty_move_limit=self.config.fifty_move_limit)
        self.validator = self.rules_engine.validator

        if ai is None:
            evaluator = EvaluationEngine(evaluation_config, self.validator)
            engine = MinimaxEngine(self.rules_engine, evaluator, config=search_config)
            ai = ChessAI(ai_config, engine)
        self.ai = ai

        self.events = EventDispatcher()

        self.board: Board = Board.initial_position()
        self.state: GameState = GameState()
        self.base_board: Board = self.board.clone()
        self.base_state: GameState = self.state.clone()
        self.redo_stack: List[Move] = []
        self.draw_offer: Optional[Color] = None

        self.new_game()

    # ==================== 对局管理 ====================

    def new_game(self, white_name: Optional[str] = None, black_name: Optional[str] = None):
        """
        开始新对局

        Args:
            white_name: 白方名称，默认取配置
            black_name: 黑方名称，默认取配置
        """
        self._ensure_not_dispatching("new_game")

        white = Player(white_name or self.config.white_name, Color.WHITE, self.config.initial_time)
        black = Player(black_name or self.config.black_name, Color.BLACK, self.config.initial_time)
        state = GameState(white, black, repetition_limit=self.config.repetition_limit)
        board = Board.initial_position()
        state.record_position(board.to_compact_notation())

        self._set_base(board.clone(), state)
        self.board = board
        self.state = state
        self.logger.info(f"新对局开始: {white.name} vs {black.name}")

    def load_game(self, board: Board, state: GameState):
        """
        载入外部构造的棋盘和对局状态

        载入的局面成为悔棋的基准，载入前已有的走法不能悔棋。

        Args:
            board: 棋盘
            state: 对局状态

        Raises:
            GameStateError: 任一方王的数量不为1
        """
        self._ensure_not_dispatching("load_game")
        self.rules_engine.validate_kings(board)

        self._set_base(board.clone(), state.clone())
        self.board = board
        self.state = state
        self.events.emit(GameEvent.STATUS_CHANGED, self.state.status)

    def _set_base(self, board: Board, state: GameState):
        self.base_board = board
        self.base_state = state.clone()
        self.redo_stack = []
        self.draw_offer = None

    @property
    def base_length(self) -> int:
        return len(self.base_state.move_history)

    # ==================== 查询 ====================

    def piece_at(self, square: Square) -> Optional[Piece]:
        return self.board.piece_at(square)

    def legal_moves_at(self, square: Square) -> List[Move]:
        """
        获取指定格上行棋方棋子的合法走法

        Args:
            square: (行, 列)

        Returns:
            List[Move]: 越界、空格、非行棋方棋子或对局已结束时为空
        """
        if self.state.is_over:
            return []
        piece = self.board.piece_at(square)
        if piece is None or piece.color is not self.state.active_color:
            return []
        return self.validator.legal_moves_for(piece, self.board, self.state.last_move)

    def all_legal_moves(self, color: Optional[Color] = None) -> List[Move]:
        """获取一方全部合法走法，默认取行棋方"""
        color = color or self.state.active_color
        return self.validator.all_legal_moves(color, self.board, self.state.last_move)

    def is_move_valid(self, from_pos: Square, to_pos: Square,
                      promotion: Optional[PieceType] = None) -> bool:
        if self.state.is_over:
            return False
        return self._find_legal_move(self.board, self.state, from_pos, to_pos, promotion) is not None

    def current_status(self) -> GameStatus:
        return self.state.status

    def is_in_check(self, color: Optional[Color] = None) -> bool:
        return self.board.is_in_check(color or self.state.active_color)

    def is_game_over(self) -> bool:
        return self.state.is_over

    @property
    def active_player(self) -> Player:
        return self.state.active_player

    def get_game_status(self) -> Dict[str, Any]:
        """
        获取对局状态摘要

        Returns:
            Dict[str, Any]: 行棋方、状态、终局原因、双方玩家等信息
        """
        return {
            'active_color': self.state.active_color.value,
            'status': self.state.status.value,
            'end_type': self.state.end_type.value,
            'winner': self.state.winner.color.value if self.state.winner else None,
            'in_check': self.is_in_check(),
            'game_over': self.state.is_over,
            'move_number': self.state.move_number,
            'halfmove_clock': self.state.halfmove_clock,
            'draw_offer': self.draw_offer.value if self.draw_offer else None,
            'can_undo': self.can_undo(),
            'can_redo': self.can_redo(),
            'position': self.board.to_compact_notation(),
            'players': {
                'white': self.state.white_player.to_dict(),
                'black': self.state.black_player.to_dict(),
            },
        }

    def get_move_history(self) -> List[Move]:
        return list(self.state.move_history)

    def get_move_list_text(self) -> str:
        return format_move_list(self.state.move_history[self.base_length:])

    def get_statistics(self) -> Dict[str, Any]:
        return compute_statistics(self.state.move_history).to_dict()

    def material_score(self, color: Color) -> int:
        """一方子力价值之和（不含王）"""
        return sum(piece.value for piece in self.board.pieces_of(color)
                   if piece.piece_type is not PieceType.KING)

    def board_at(self, ply: int) -> Optional[Board]:
        """
        获取基准局面之后第 ply 个半回合的棋盘

        Args:
            ply: 半回合数，0 表示基准局面

        Returns:
            Optional[Board]: 越界时返回None
        """
        moves = self.state.move_history[self.base_length:]
        if not 0 <= ply <= len(moves):
            return None
        board, _ = self._replay(self.base_board, self.base_state, moves[:ply])
        return board

    # ==================== 走子 ====================

    def attempt_move(self, from_pos: Square, to_pos: Square,
                     promotion: Optional[PieceType] = None) -> bool:
        """
        尝试走子

        易位、吃过路兵和升变由走法生成识别，兵到达底线未指定升变类型时升变为后。

        Args:
            from_pos: 起点
            to_pos: 终点
            promotion: 升变类型

        Returns:
            bool: 走子是否成功，非法走法或对局已结束时返回False

        Raises:
            GameStateError: 在事件监听器中调用
        """
        self._ensure_not_dispatching("attempt_move")
        if not self._attempt(from_pos, to_pos, promotion):
            return False
        self.redo_stack.clear()
        return True

    def play_notation(self, notation: str) -> bool:
        """
        按记法走子

        Args:
            notation: 坐标记法如 "e2e4"、"e7e8q"，或易位记法 "O-O"、"O-O-O"

        Returns:
            bool: 是否成功
        """
        parsed = self.parse_notation(notation)
        if parsed is None:
            return False
        return self.attempt_move(*parsed)

    def parse_notation(self, notation: str) -> Optional[Tuple[Square, Square, Optional[PieceType]]]:
        if not isinstance(notation, str):
            return None
        text = notation.strip()
        if text in CASTLING_NOTATION:
            row = self.state.active_color.back_row
            return (row, KING_START_COL), (row, CASTLING_NOTATION[text]), None
        return parse_coordinate_notation(text)

    def ai_move(self) -> Optional[Move]:
        """
        让AI为行棋方走一步

        Returns:
            Optional[Move]: 实际执行的走法，对局已结束或没有走法时返回None
        """
        self._ensure_not_dispatching("ai_move")
        if self.state.is_over:
            return None

        move = self.ai.choose_move(self.board, self.state)
        if move is None:
            return None
        if not self.attempt_move(move.from_pos, move.to_pos, move.promotion_type):
            self.logger.error(f"AI走法无法执行: {move}")
            return None
        return self.state.last_move

    def _attempt(self, from_pos: Square, to_pos: Square, promotion: Optional[PieceType]) -> bool:
        if self.state.is_over:
            return False

        move = self._find_legal_move(self.board, self.state, from_pos, to_pos, promotion)
        if move is None:
            return False

        previous = self.state.status
        self._apply(self.board, self.state, move)
        self.draw_offer = None
        self.logger.debug(f"走法执行成功: {move.to_coordinate_notation()}")

        self.events.emit(GameEvent.MOVE_PLAYED, move)
        if self.board.is_in_check(self.state.active_color):
            self.events.emit(GameEvent.CHECK_DETECTED, self.state.active_color)
        if self.state.status != previous:
            self.events.emit(GameEvent.STATUS_CHANGED, self.state.status)
        if self.state.is_over:
            self.logger.info(f"对局结束: {self.state.status.value} ({self.state.end_type.value})")
            self.events.emit(GameEvent.GAME_OVER, self.state.status)
        return True

    def _find_legal_move(self, board: Board, state: GameState, from_pos: Square,
                         to_pos: Square, promotion: Optional[PieceType]) -> Optional[Move]:
        if not is_valid_square(from_pos) or not is_valid_square(to_pos):
            return None
        piece = board.piece_at(from_pos)
        if piece is None or piece.color is not state.active_color:
            return None

        to_pos = tuple(to_pos)
        for candidate in self.validator.legal_moves_for(piece, board, state.last_move):
            if candidate.to_pos != to_pos:
                continue
            if not candidate.is_promotion:
                return candidate
            if candidate.promotion_type is (promotion or PieceType.QUEEN):
                return candidate
        return None

    def _apply(self, board: Board, state: GameState, move: Move):
        """在给定棋盘和状态上执行已验证的走法并更新终局判定"""
        self.validator.annotate(move, board)
        board.execute_move(move)
        state.record_move(move)
        state.record_position(board.to_compact_notation())
        state.switch_turn()

        status, end_type = self.rules_engine.determine_outcome(board, state)
        state.apply_outcome(status, end_type)

    def _replay(self, base_board: Board, base_state: GameState,
                moves: List[Move]) -> Tuple[Board, GameState]:
        """
        从基准局面依次回放走法

        Raises:
            InvalidMoveError: 某一步无法合法执行
        """
        board = base_board.clone()
        state = base_state.clone()
        for index, recorded in enumerate(moves):
            move = self._find_legal_move(board, state, recorded.from_pos,
                                         recorded.to_pos, recorded.promotion_type)
            if move is None or state.is_over:
                raise InvalidMoveError(recorded.to_coordinate_notation(), f"第{index + 1}步无法回放")
            self._apply(board, state, move)
        return board, state

    # ==================== 悔棋与重做 ====================

    def can_undo(self) -> bool:
        return self.config.allow_undo and len(self.state.move_history) > self.base_length

    def can_redo(self) -> bool:
        return bool(self.redo_stack)

    def undo_last_move(self) -> bool:
        """
        撤销最后一步

        从基准局面回放除最后一步外的全部走法，认输和协议和棋随之撤销。

        Returns:
            bool: 是否成功撤销
        """
        self._ensure_not_dispatching("undo_last_move")
        if not self.can_undo():
            return False

        history = self.state.move_history
        last = history[-1]
        previous = self.state.status

        self.board, self.state = self._replay(self.base_board, self.base_state,
                                              history[self.base_length:-1])
        self.redo_stack.append(last)
        self.draw_offer = None
        self.logger.debug(f"撤销走法成功: {last.to_coordinate_notation()}")

        self.events.emit(GameEvent.MOVE_UNDONE, last)
        if self.state.status != previous:
            self.events.emit(GameEvent.STATUS_CHANGED, self.state.status)
        return True

    def redo_move(self) -> bool:
        """重做最近一次撤销的走法"""
        self._ensure_not_dispatching("redo_move")
        if not self.redo_stack:
            return False

        move = self.redo_stack[-1]
        if not self._attempt(move.from_pos, move.to_pos, move.promotion_type):
            return False
        self.redo_stack.pop()
        return True

    # ==================== 认输与和棋 ====================

    def resign(self, color: Optional[Color] = None) -> bool:
        """
        认输

        Args:
            color: 认输方，默认为行棋方

        Returns:
            bool: 对局已结束时返回False
        """
        self._ensure_not_dispatching("resign")
        if self.state.is_over:
            return False

        color = color or self.state.active_color
        self.state.declare_resignation(color)
        self.draw_offer = None
        self.logger.info(f"{color.value}方认输")
        self._emit_game_over()
        return True

    def offer_draw(self, color: Optional[Color] = None) -> bool:
        self._ensure_not_dispatching("offer_draw")
        if self.state.is_over:
            return False
        self.draw_offer = color or self.state.active_color
        return True

    def accept_draw(self) -> bool:
        """接受和棋提议，没有待处理的提议时返回False"""
        self._ensure_not_dispatching("accept_draw")
        if self.draw_offer is None or self.state.is_over:
            return False
        self.state.declare_draw(EndType.DRAW_AGREEMENT)
        self.draw_offer = None
        self.logger.info("双方同意和棋")
        self._emit_game_over()
        return True

    def decline_draw(self) -> bool:
        self._ensure_not_dispatching("decline_draw")
        if self.draw_offer is None:
            return False
        self.draw_offer = None
        return True

    def _emit_game_over(self):
        self.events.emit(GameEvent.STATUS_CHANGED, self.state.status)
        self.events.emit(GameEvent.GAME_OVER, self.state.status)

    # ==================== 事件 ====================

    def subscribe(self, event: GameEvent, listener: Callable[[Any], None]):
        self.events.subscribe(event, listener)

    def unsubscribe(self, event: GameEvent, listener: Callable[[Any], None]) -> bool:
        return self.events.unsubscribe(event, listener)

    def _ensure_not_dispatching(self, operation: str):
        if self.events.dispatching:
            raise GameStateError(operation, "事件监听器中不能修改对局")

    # ==================== 快照 ====================

    def snapshot(self) -> Dict[str, Any]:
        """
        导出对局快照

        Returns:
            Dict[str, Any]: 可 JSON 序列化的快照，走法从基准局面开始记录
        """
        data = {
            'version': SNAPSHOT_VERSION,
            'start_position': self.base_board.to_compact_notation(),
            'start_color': self.base_state.active_color.value,
        }
        data.update(self.state.to_snapshot())
        data['moves'] = [move.to_dict() for move in self.state.move_history[self.base_length:]]
        return data

    def restore(self, snapshot: Dict[str, Any]):
        """
        从快照恢复对局

        失败时当前对局保持不变。

        Args:
            snapshot: snapshot() 导出的数据

        Raises:
            DataError: 快照格式错误
            InvalidMoveError: 快照中的走法无法回放
        """
        self._ensure_not_dispatching("restore")
        board, base_state, moves, status, end_type = self._parse_snapshot(snapshot)

        final_board, final_state = self._replay(board, base_state, moves)
        if status.is_terminal and not final_state.is_over:
            if status in (GameStatus.RESIGN_WHITE, GameStatus.RESIGN_BLACK):
                final_state.declare_resignation(
                    Color.WHITE if status is GameStatus.RESIGN_WHITE else Color.BLACK
                )
            elif status is GameStatus.DRAW and end_type is EndType.DRAW_AGREEMENT:
                final_state.declare_draw(EndType.DRAW_AGREEMENT)
            else:
                raise DataError('snapshot', f"记录的状态 {status.value} 与棋谱不一致")

        self._set_base(board, base_state)
        self.board = final_board
        self.state = final_state
        self.logger.info(f"对局已恢复，共 {len(moves)} 步")
        self.events.emit(GameEvent.STATUS_CHANGED, self.state.status)

    def _parse_snapshot(self, snapshot: Dict[str, Any]):
        if not isinstance(snapshot, dict):
            raise DataError('snapshot', "快照必须是字典")
        if snapshot.get('version', SNAPSHOT_VERSION) != SNAPSHOT_VERSION:
            raise DataError('snapshot', f"不支持的快照版本: {snapshot.get('version')}")

        board = Board.from_compact_notation(snapshot.get('start_position', Board.INITIAL_NOTATION))
        if board is None:
            raise DataError('snapshot', f"起始局面格式错误: {snapshot.get('start_position')}")
        try:
            self.rules_engine.validate_kings(board)
        except GameStateError as e:
            raise DataError('snapshot', e.message) from e

        moves_data = snapshot.get('moves', [])
        if not isinstance(moves_data, list):
            raise DataError('snapshot', "moves 必须是列表")

        try:
            moves = [Move.from_dict(item) for item in moves_data]
            players = snapshot.get('players') or {}
            white = (Player.from_dict(players['white']) if 'white' in players
                     else Player(self.config.white_name, Color.WHITE, self.config.initial_time))
            black = (Player.from_dict(players['black']) if 'black' in players
                     else Player(self.config.black_name, Color.BLACK, self.config.initial_time))
            start_color = Color(snapshot.get('start_color', Color.WHITE.value))
            status = GameStatus(snapshot.get('status', GameStatus.IN_PROGRESS.value))
            outcome = snapshot.get('outcome') or {}
            end_type = EndType(outcome.get('end_type', EndType.NONE.value))
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            raise DataError('snapshot', f"字段错误: {e}") from e

        if white.color is not Color.WHITE or black.color is not Color.BLACK:
            raise DataError('snapshot', "玩家颜色错误")

        for player in (white, black):
            player.is_turn = False
            player.move_count = 0
            player.has_resigned = False

        base_state = GameState(white, black, repetition_limit=self.config.repetition_limit)
        base_state.set_active_color(start_color)
        base_state.record_position(board.to_compact_notation())
        return board, base_state, moves, status, end_type

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.snapshot(), ensure_ascii=False, indent=indent)

    def from_json(self, text: str):
        """
        从 JSON 文本恢复对局

        Raises:
            DataError: JSON 格式错误或快照格式错误
            InvalidMoveError: 快照中的走法无法回放
        """
        try:
            data = json.loads(text)
        except (json.JSONDecodeError, TypeError) as e:
            raise DataError('snapshot', f"JSON解析失败: {e}") from e
        self.restore(data)

    def save_game(self, filepath: str) -> bool:
        """
        保存对局到文件

        Returns:
            bool: 是否成功保存
        """
        try:
            path = Path(filepath)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(self.to_json(), encoding='utf-8')
            self.logger.info(f"对局已保存: {filepath}")
            return True
        except OSError as e:
            self.logger.error(f"保存对局失败: {e}")
            return False

    def load_game_file(self, filepath: str) -> bool:
        """
        从文件加载对局

        Returns:
            bool: 是否成功加载，失败时当前对局保持不变
        """
        try:
            text = Path(filepath).read_text(encoding='utf-8')
            self.from_json(text)
            return True
        except (OSError, DataError, InvalidMoveError) as e:
            self.logger.error(f"加载对局失败: {e}")
            return False
