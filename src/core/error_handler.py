"""
统一异常处理模块
Unified Error Handling

报价引擎的异常层级与日志装饰器
"""

import asyncio
import time
from functools import wraps
from typing import Any, Callable, Dict, Optional

from src.core.logger import get_logger


class QuoteEngineError(Exception):
    """基础异常类"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典"""
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ConfigError(QuoteEngineError):
    """配置错误"""
    pass


class AIError(QuoteEngineError):
    """AI服务错误"""
    pass


class QuoteRequestError(QuoteEngineError):
    """报价请求参数错误"""
    pass


def log_execution_time(logger=None):
    """
    记录执行时间装饰器

    Args:
        logger: 日志记录器，不指定则使用全局logger
    """
    if logger is None:
        logger = get_logger()

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def async_wrapper(*args, **kwargs):
            start_time = time.perf_counter()
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                elapsed = time.perf_counter() - start_time
                logger.error(f"{func.__name__} failed after {elapsed:.2f}s: {e}")
                raise
            elapsed = time.perf_counter() - start_time
            logger.debug(f"{func.__name__} executed in {elapsed:.2f}s")
            return result

        @wraps(func)
        def sync_wrapper(*args, **kwargs):
            start_time = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                elapsed = time.perf_counter() - start_time
                logger.error(f"{func.__name__} failed after {elapsed:.2f}s: {e}")
                raise
            elapsed = time.perf_counter() - start_time
            logger.debug(f"{func.__name__} executed in {elapsed:.2f}s")
            return result

        if asyncio.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper
    return decorator
