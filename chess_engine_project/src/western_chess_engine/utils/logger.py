"""
日志系统

引擎类按类名记录到 western_chess 下，模块按包路径记录到 chess_engine_project 下。
"""

import logging
import logging.handlers
import sys
import threading
import time
from pathlib import Path
from typing import Dict, List, Optional, Tuple

ENGINE_LOGGER = 'western_chess'
PACKAGE_LOGGER = 'chess_engine_project'

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def setup_logger(
    name: str = ENGINE_LOGGER,
    level: str = 'INFO',
    log_file: Optional[str] = None,
    log_dir: str = 'logs/western_chess_engine',
    max_size: int = 10,  # MB
    backup_count: int = 5,
    console_output: bool = True
) -> logging.Logger:
    """
    设置日志记录器

    Args:
        name: 日志记录器名称
        level: 日志级别，未知级别按 INFO 处理
        log_file: 日志文件名，为空时不写文件
        log_dir: 日志目录
        max_size: 日志文件最大大小(MB)
        backup_count: 轮转备份数量
        console_output: 是否输出到控制台

    Returns:
        logging.Logger: 配置好的日志记录器，已配置过的直接返回
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    log_level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(log_level)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers: List[logging.Handler] = []
    if console_output:
        handlers.append(logging.StreamHandler(sys.stdout))
    if log_file:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.handlers.RotatingFileHandler(
            filename=log_path / log_file,
            maxBytes=max_size * 1024 * 1024,
            backupCount=backup_count,
            encoding='utf-8'
        ))

    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger


def configure_logging(system_config, debug: bool = False) -> List[logging.Logger]:
    """
    按系统配置设置引擎和包两棵日志树

    Args:
        system_config: SystemConfig 配置对象
        debug: 为True时强制使用 DEBUG 级别

    Returns:
        List[logging.Logger]: 引擎日志记录器和包日志记录器
    """
    return [
        setup_logger(
            name=name,
            level='DEBUG' if debug else system_config.log_level,
            log_file=system_config.log_file or None,
            log_dir=system_config.log_dir,
            max_size=system_config.log_max_size,
            backup_count=system_config.log_backup_count,
        )
        for name in (ENGINE_LOGGER, PACKAGE_LOGGER)
    ]


def get_logger(name: str = ENGINE_LOGGER) -> logging.Logger:
    return logging.getLogger(name)


class LoggerMixin:
    """为引擎类提供以类名区分的日志记录器"""

    @property
    def logger(self) -> logging.Logger:
        return get_logger(f'{ENGINE_LOGGER}.{self.__class__.__name__}')

    def log_info(self, message: str, *args, **kwargs):
        self.logger.info(message, *args, **kwargs)

    def log_debug(self, message: str, *args, **kwargs):
        self.logger.debug(message, *args, **kwargs)


class PerformanceLogger:
    """
    性能日志记录器

    计时器按 (线程, 操作名) 区分，超时后仍在后台运行的搜索线程
    不会覆盖新搜索的计时。
    """

    def __init__(self, name: str = 'performance'):
        self.logger = get_logger(f'{ENGINE_LOGGER}.{name}')
        self.start_times: Dict[Tuple[int, str], float] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _key(operation: str) -> Tuple[int, str]:
        return threading.get_ident(), operation

    def start_timer(self, operation: str):
        """开始计时"""
        with self._lock:
            self.start_times[self._key(operation)] = time.perf_counter()
        self.logger.debug(f"开始计时: {operation}")

    def end_timer(self, operation: str) -> float:
        """
        结束计时

        Returns:
            float: 耗时(秒)，当前线程没有该计时器时返回0
        """
        with self._lock:
            start_time = self.start_times.pop(self._key(operation), None)
        if start_time is None:
            self.logger.warning(f"未找到计时器: {operation}")
            return 0.0

        elapsed = time.perf_counter() - start_time
        self.logger.debug(f"操作完成: {operation}, 耗时: {elapsed:.3f}秒")
        return elapsed

    def is_timing(self, operation: str) -> bool:
        with self._lock:
            return self._key(operation) in self.start_times

    def log_search_stats(self, nodes: int, cutoffs: int, time_used: float, depth: Optional[int] = None):
        """记录一次极小化极大搜索的节点数、剪枝次数和速度"""
        nodes_per_second = nodes / time_used if time_used > 0 else 0.0
        depth_str = f"深度: {depth}, " if depth is not None else ""
        self.logger.info(
            f"搜索统计 - {depth_str}节点数: {nodes}, "
            f"剪枝次数: {cutoffs}, "
            f"耗时: {time_used:.3f}秒, "
            f"速度: {nodes_per_second:.0f} nodes/sec"
        )


# 全局性能日志记录器实例
performance_logger = PerformanceLogger()
