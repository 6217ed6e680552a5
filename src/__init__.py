"""
物流报价工具
Logistics Quote Engine

承运商报价评估、命令行与 Web 表单
"""

__version__ = "1.0.0"
__author__ = "Project Team"

from .core.config import Config
from .core.logger import Logger

__all__ = [
    "Config",
    "Logger",
    "__version__",
]
