"""
报价智能分析服务
Quote Analysis Service

把评估引擎的可用报价交给大语言模型，生成简短的选型建议
"""

from __future__ import annotations

import json
import os
from typing import Any, Sequence

from openai import APIError, APITimeoutError, AsyncOpenAI

from src.core.config import get_config
from src.core.error_handler import AIError, log_execution_time
from src.core.logger import get_logger
from src.modules.quote.models import QuoteOutcome, ShipmentRequest

MISSING_KEY_MESSAGE = "API Key is missing from environment variables."
FAILURE_MESSAGE = "Failed to generate analysis. Please try again."
EMPTY_ANALYSIS = "No analysis generated."


class QuoteAnalysisService:
    """
    报价分析服务

    通过OpenAI兼容接口调用模型，默认指向Gemini。只读取报价结果，不回写。
    """

    def __init__(self, config: dict | None = None, top_n: int | None = None):
        """
        初始化分析服务

        Args:
            config: AI配置字典，不指定则读取全局配置的 ai 段
            top_n: 提交给模型的可用报价条数上限
        """
        app_config = get_config()
        self.config = config or app_config.ai
        self.logger = get_logger()

        self.api_key_env = str(self.config.get("api_key_env") or "API_KEY")
        self.api_key = (
            self.config.get("api_key")
            or os.getenv(self.api_key_env)
            or os.getenv("GEMINI_API_KEY")
            or os.getenv("OPENAI_API_KEY")
        )
        self.base_url = self.config.get("base_url")
        self.model = self.config.get("model", "gemini-2.5-flash")
        self.temperature = self.config.get("temperature", 0.4)
        self.max_tokens = self.config.get("max_tokens", 600)
        self.timeout = self.config.get("timeout", 30)
        self.top_n = max(1, int(top_n or app_config.get("quote.analysis_top_n", 4)))

        self.client: AsyncOpenAI | None = None
        self._init_client()

    def _init_client(self) -> None:
        """初始化AI客户端"""
        if not self.api_key:
            self.logger.warning(f"AI API Key not found ({self.api_key_env}). Quote analysis is unavailable.")
            return
        self.client = AsyncOpenAI(api_key=self.api_key, base_url=self.base_url, timeout=self.timeout)
        self.logger.debug(f"AI client initialized for model {self.model}")

    @property
    def available(self) -> bool:
        return self.client is not None

    def build_prompt(self, request: ShipmentRequest, outcomes: Sequence[QuoteOutcome]) -> str:
        top_quotes = [item.to_dict() for item in outcomes if item.is_compatible][: self.top_n]
        return (
            "You are a logistics expert for DKSH China. Analyze the following transport quotes.\n\n"
            "Shipment Details:\n"
            f"- Origin: {request.origin}\n"
            f"- Destination: {request.destination}\n"
            f"- Weight: {request.weight_kg} kg\n"
            f"- Type: {request.cargo_type.value}\n"
            f"- Business Line: {request.business_line.value}\n\n"
            "Quotes Generated:\n"
            f"{json.dumps(top_quotes, ensure_ascii=False, indent=2)}\n\n"
            "Please provide a concise recommendation.\n"
            "1. Identify the most cost-effective option.\n"
            "2. Highlight any specific risks or notes (e.g. specialized DG carriers vs General).\n"
            "3. Mention if the price difference is significant.\n"
            "Keep it under 150 words. Format as Markdown."
        )

    async def analyze(self, request: ShipmentRequest, outcomes: Sequence[QuoteOutcome]) -> str | None:
        """
        生成报价分析

        Args:
            request: 报价请求
            outcomes: 评估引擎输出

        Returns:
            Markdown 文本；没有可用报价时返回 None

        Raises:
            AIError: 缺少密钥（不发起请求）或调用失败
        """
        if not any(item.is_compatible for item in outcomes):
            return None

        if self.client is None:
            raise AIError(MISSING_KEY_MESSAGE, {"api_key_env": self.api_key_env})

        prompt = self.build_prompt(request, outcomes)
        return await self._generate(prompt)

    @log_execution_time()
    async def _generate(self, prompt: str) -> str:
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
            content = response.choices[0].message.content if response.choices else None
        except APITimeoutError as e:
            self.logger.error(f"AI call timeout after {self.timeout}s: {e}")
            raise AIError(FAILURE_MESSAGE, {"reason": "timeout"}) from e
        except APIError as e:
            self.logger.error(f"AI API error: {e}")
            raise AIError(FAILURE_MESSAGE, {"reason": "api_error"}) from e
        except Exception as e:
            self.logger.error(f"Unexpected AI call error: {e}")
            raise AIError(FAILURE_MESSAGE, {"reason": type(e).__name__}) from e

        text = str(content or "").strip()
        return text or EMPTY_ANALYSIS


def summarize_for_display(analysis: str | None) -> list[str]:
    """按行拆分分析文本，去掉空行，供表单逐段渲染。"""
    if not analysis:
        return []
    return [line for line in analysis.splitlines() if line.strip()]


def analysis_payload(analysis: str | None, error: AIError | None = None) -> dict[str, Any]:
    if error is not None:
        return {"analysis": None, "error": error.message}
    return {"analysis": analysis, "error": None}
