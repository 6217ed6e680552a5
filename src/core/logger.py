"""
日志模块
Logging Module

基于loguru的统一日志，控制台彩色输出 + 按大小滚动的文件输出

设置来源优先级: 环境变量（含 .env） > 配置文件 app 段 > 默认值
"""

import os
import sys
import threading
from datetime import datetime
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from loguru import logger

ENV_FILES = (".env", "config/.env")


def load_env_files() -> Optional[str]:
    """
    加载第一个存在的.env文件，不覆盖已有环境变量

    Returns:
        加载的文件路径，没有则为None
    """
    for env_file in ENV_FILES:
        if os.path.exists(env_file):
            load_dotenv(env_file, override=False)
            return env_file
    return None


def _stderr_sink(message) -> None:
    # 按写入时的 sys.stderr 输出
    sys.stderr.write(message)


class Logger:
    """
    日志管理类

    封装loguru；配置加载后可通过 configure 应用 app 段的日志设置
    """

    _instance: Optional["Logger"] = None
    _lock = threading.Lock()
    _initialized: bool = False

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if not hasattr(self, '_initialized') or not self._initialized:
            self.level = "INFO"
            self.logs_dir = Path("logs")
            self.debug_mode = False
            self.log_file: Optional[Path] = None
            self._setup_logger()
            Logger._initialized = True

    def configure(
        self,
        log_level: Optional[str] = None,
        logs_dir: Optional[str] = None,
        debug: Optional[bool] = None,
    ) -> None:
        """
        按配置文件的 app 段重建输出，环境变量仍然优先

        Args:
            log_level: 控制台日志级别
            logs_dir: 日志目录
            debug: 调试模式，开启后控制台输出DEBUG
        """
        with self._lock:
            self._setup_logger(log_level, logs_dir, debug)

    def _setup_logger(
        self,
        log_level: Optional[str] = None,
        logs_dir: Optional[str] = None,
        debug: Optional[bool] = None,
    ) -> None:
        """
        设置日志输出
        """
        load_env_files()

        level = (os.getenv("APP_LOG_LEVEL") or log_level or "INFO").upper()
        directory = Path(os.getenv("APP_LOGS_DIR") or logs_dir or "logs").resolve()
        debug_env = os.getenv("APP_DEBUG")
        debug_mode = debug_env.strip().lower() == "true" if debug_env else bool(debug)

        if self.log_file is not None and (level, directory, debug_mode) == (
            self.level, self.logs_dir, self.debug_mode
        ):
            return

        self.level = level
        self.logs_dir = directory
        self.debug_mode = debug_mode
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        self.log_file = directory / f"quote_{timestamp}.log"

        logger.remove()

        console_format = (
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{message}</cyan>"
        )
        file_format = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {message}"

        # stderr 输出，CLI 的 stdout 只留给 JSON
        logger.add(
            _stderr_sink,
            format=console_format,
            level="DEBUG" if debug_mode else level,
            colorize=True,
        )

        # 首条日志写入时才创建目录和文件
        logger.add(
            str(self.log_file),
            format=file_format,
            level="DEBUG",
            rotation="10 MB",
            retention="7 days",
            compression="gz",
            delay=True,
        )

    def info(self, message: str, **kwargs) -> None:
        logger.info(message, **kwargs)

    def debug(self, message: str, **kwargs) -> None:
        logger.debug(message, **kwargs)

    def warning(self, message: str, **kwargs) -> None:
        logger.warning(message, **kwargs)

    def error(self, message: str, **kwargs) -> None:
        logger.error(message, **kwargs)

    def exception(self, message: str, **kwargs) -> None:
        """
        带堆栈的错误日志
        """
        logger.exception(message, **kwargs)

    def success(self, message: str, **kwargs) -> None:
        logger.success(message, **kwargs)


def get_logger(*_args, **_kwargs) -> Logger:
    """
    获取日志单例

    Returns:
        Logger实例
    """
    return Logger()
