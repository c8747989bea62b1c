"""
日誌工具模組

所有 logger 都掛在 "twlint" 命名空間下。函式庫本身只掛 NullHandler，
是否輸出由使用者（或 verbose=True）決定。

使用方式:
    from twlint.utils.logger import get_logger, TimingContext

    logger = get_logger("engine")          # -> twlint.engine
    with TimingContext("find_text", logger):
        ...
"""

import functools
import logging
import time
from typing import Callable, Optional

ROOT_LOGGER_NAME = "twlint"
DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """取得 twlint 命名空間下的 logger"""
    if not name:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if name.startswith(ROOT_LOGGER_NAME + ".") or name == ROOT_LOGGER_NAME:
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def setup_logger(level: int = logging.INFO, fmt: str = DEFAULT_FORMAT) -> logging.Logger:
    """
    為 twlint 根 logger 掛上 console handler

    重複呼叫只會調整等級，不會重複掛 handler。
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)

    for handler in logger.handlers:
        if getattr(handler, "_twlint_console", False):
            handler.setLevel(level)
            return logger

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    handler._twlint_console = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    return logger


def enable_debug_logging() -> logging.Logger:
    return setup_logger(level=logging.DEBUG)


class TimingContext:
    """
    計時 context manager

    Args:
        operation: 操作名稱（出現在日誌中）
        logger: 使用的 logger，預設為 twlint 根 logger
        level: 日誌等級
        callback: 計時回呼 (operation, elapsed_seconds) -> None
    """

    def __init__(
        self,
        operation: str,
        logger: Optional[logging.Logger] = None,
        level: int = logging.DEBUG,
        callback: Optional[Callable[[str, float], None]] = None,
    ):
        self.operation = operation
        self.logger = logger or get_logger()
        self.level = level
        self.callback = callback
        self.elapsed = 0.0
        self._start = 0.0

    def __enter__(self) -> "TimingContext":
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.elapsed = time.perf_counter() - self._start
        if self.logger.isEnabledFor(self.level):
            self.logger.log(self.level, f"[Timing] {self.operation}: {self.elapsed * 1000:.2f}ms")
        if self.callback is not None:
            try:
                self.callback(self.operation, self.elapsed)
            except Exception:
                self.logger.exception("on_timing 回呼執行失敗")
        return False


def log_timing(operation: Optional[str] = None, level: int = logging.DEBUG):
    """函式計時裝飾器"""

    def decorator(func):
        name = operation or func.__qualname__

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            with TimingContext(name, get_logger("timing"), level):
                return func(*args, **kwargs)

        return wrapper

    return decorator
