"""
异常定义

定义国际象棋引擎的各种异常类型。

正常的非法输入（越界坐标、非法走法、格式错误的局面串）通过返回值表示，
这里的异常只用于内部不变量被破坏、配置错误以及持久化数据损坏等情况。
"""


class ChessEngineError(Exception):
    """
    国际象棋引擎基础异常

    所有引擎相关异常的基类。
    """

    def __init__(self, message: str, error_code: str = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__

    def __str__(self):
        return f"[{self.error_code}] {self.message}"


class InvalidMoveError(ChessEngineError):
    """
    非法走法异常

    回放持久化棋谱时遇到无法执行的走法时抛出。
    """

    def __init__(self, move_str: str, reason: str = ""):
        message = f"非法走法: {move_str}"
        if reason:
            message += f" - {reason}"
        super().__init__(message, "INVALID_MOVE")
        self.move_str = move_str
        self.reason = reason


class SearchTimeoutError(ChessEngineError):
    """
    搜索超时异常

    当搜索超过时间限制时抛出。
    """

    def __init__(self, time_limit: float, actual_time: float = None):
        message = f"搜索超时: 时间限制 {time_limit:.2f}秒"
        if actual_time:
            message += f", 实际用时 {actual_time:.2f}秒"
        super().__init__(message, "SEARCH_TIMEOUT")
        self.time_limit = time_limit
        self.actual_time = actual_time


class ConfigurationError(ChessEngineError):
    """
    配置错误异常

    当配置名称未知或配置参数无效时抛出。
    """

    def __init__(self, config_name: str, reason: str = ""):
        message = f"配置错误 - {config_name}"
        if reason:
            message += f": {reason}"
        super().__init__(message, "CONFIG_ERROR")
        self.config_name = config_name
        self.reason = reason


class GameStateError(ChessEngineError):
    """
    游戏状态异常

    当游戏状态无效或不一致时抛出，例如某方没有王、终局状态被回退、
    事件监听器在回调中重入引擎。
    """

    def __init__(self, state_description: str, reason: str = ""):
        message = f"游戏状态错误: {state_description}"
        if reason:
            message += f" - {reason}"
        super().__init__(message, "GAME_STATE_ERROR")
        self.state_description = state_description
        self.reason = reason


class DataError(ChessEngineError):
    """
    数据相关异常

    当持久化快照格式错误时抛出。
    """

    def __init__(self, data_type: str, reason: str = ""):
        message = f"数据错误 - {data_type}"
        if reason:
            message += f": {reason}"
        super().__init__(message, "DATA_ERROR")
        self.data_type = data_type
        self.reason = reason
