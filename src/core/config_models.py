"""
配置模型与验证
Configuration Models and Validation

使用Pydantic进行配置验证
"""

from typing import List, Optional, Dict, Any
from pydantic import BaseModel, Field, validator
from enum import Enum


DEFAULT_CITIES = [
    "Shanghai", "Zhangjiagang", "Guangzhou", "Beijing", "Jinan", "Chengdu", "Wuhan", "Shenzhen",
]


class Provider(str, Enum):
    """AI提供商枚举"""
    GEMINI = "gemini"
    OPENAI = "openai"
    DEEPSEEK = "deepseek"


class AppConfig(BaseModel):
    """应用配置模型"""
    name: str = Field(default="logistics-quote-engine", description="应用名称")
    version: str = Field(default="1.0.0", description="版本号")
    debug: bool = Field(default=False, description="调试模式")
    log_level: str = Field(default="INFO", description="日志级别")
    logs_dir: str = Field(default="logs", description="日志目录")

    @validator("log_level")
    def validate_log_level(cls, v):
        """验证日志级别"""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}, got {v}")
        return v


class QuoteConfig(BaseModel):
    """报价配置模型"""
    currency: str = Field(default="CNY", description="报价币种")
    default_origin: str = Field(default="Shanghai", description="表单默认始发地")
    default_destination: str = Field(default="Guangzhou", description="表单默认目的地")
    cities: List[str] = Field(default_factory=lambda: list(DEFAULT_CITIES), description="可选城市")
    analysis_top_n: int = Field(default=4, ge=1, le=10, description="提交给AI分析的报价条数")

    @validator("cities")
    def validate_cities(cls, v):
        """城市列表不能为空"""
        cleaned = [str(city).strip() for city in v if str(city).strip()]
        if not cleaned:
            raise ValueError("cities must contain at least one city")
        return cleaned


class AIConfig(BaseModel):
    """AI服务配置模型"""
    provider: Provider = Provider.GEMINI
    api_key: Optional[str] = Field(default=None, description="API密钥")
    api_key_env: str = Field(default="API_KEY", description="API密钥环境变量名")
    base_url: Optional[str] = Field(
        default="https://generativelanguage.googleapis.com/v1beta/openai/",
        description="OpenAI兼容接口地址",
    )
    model: str = Field(default="gemini-2.5-flash", description="模型名称")
    temperature: float = Field(default=0.4, ge=0.0, le=2.0, description="温度参数")
    max_tokens: int = Field(default=600, ge=1, le=4000, description="最大生成令牌数")
    timeout: int = Field(default=30, ge=1, le=120, description="API调用超时时间（秒）")


class ConfigModel(BaseModel):
    """完整配置模型"""
    app: AppConfig = Field(default_factory=AppConfig)
    quote: QuoteConfig = Field(default_factory=QuoteConfig)
    ai: AIConfig = Field(default_factory=AIConfig)

    @validator("quote")
    def validate_default_cities(cls, v):
        """默认城市必须在城市列表中"""
        for city in (v.default_origin, v.default_destination):
            if city not in v.cities:
                raise ValueError(f'default city "{city}" not found in cities list')
        return v

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典"""
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ConfigModel':
        """从字典创建配置"""
        return cls(**data)
