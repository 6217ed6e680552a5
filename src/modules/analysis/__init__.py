"""报价智能分析模块。"""

from .service import QuoteAnalysisService

__all__ = ["QuoteAnalysisService"]
