"""
功能模块
Modules

报价评估与智能分析
"""

from .analysis.service import QuoteAnalysisService
from .quote.service import QuoteService

__all__ = [
    "QuoteAnalysisService",
    "QuoteService",
]
