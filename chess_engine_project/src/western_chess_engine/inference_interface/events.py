"""
对局事件

同步的订阅式事件分发。监听器在引擎线程中依次调用，
监听器抛出的异常只记录日志，不影响引擎状态和其他监听器。
"""

import logging
from enum import Enum
from typing import Any, Callable, Dict, List

Listener = Callable[[Any], None]


class GameEvent(Enum):
    """对局事件类型及其负载"""
    MOVE_PLAYED = "move_played"          # 负载: Move
    MOVE_UNDONE = "move_undone"          # 负载: Move
    STATUS_CHANGED = "status_changed"    # 负载: GameStatus
    CHECK_DETECTED = "check_detected"    # 负载: 被将军方 Color
    GAME_OVER = "game_over"              # 负载: GameStatus


class EventDispatcher:
    """
    事件分发器

    dispatching 在分发期间为 True，对局接口据此拒绝监听器中的重入修改。
    """

    def __init__(self):
        self.listeners: Dict[GameEvent, List[Listener]] = {event: [] for event in GameEvent}
        self.dispatching = False
        self.logger = logging.getLogger(__name__)

    def subscribe(self, event: GameEvent, listener: Listener):
        """订阅事件，同一监听器重复订阅只保留一次"""
        if listener not in self.listeners[event]:
            self.listeners[event].append(listener)

    def unsubscribe(self, event: GameEvent, listener: Listener) -> bool:
        """
        取消订阅

        Returns:
            bool: 监听器此前是否已订阅
        """
        if listener in self.listeners[event]:
            self.listeners[event].remove(listener)
            return True
        return False

    def clear(self):
        for listeners in self.listeners.values():
            listeners.clear()

    def emit(self, event: GameEvent, payload: Any):
        """
        按订阅顺序同步通知监听器

        Args:
            event: 事件类型
            payload: 事件负载
        """
        previous = self.dispatching
        self.dispatching = True
        try:
            for listener in list(self.listeners[event]):
                try:
                    listener(payload)
                except Exception:
                    self.logger.exception(f"事件监听器执行失败: {event.value}")
        finally:
            self.dispatching = previous
