"""
测试工具和fixtures
Test Utilities and Fixtures
"""

import sys
import tempfile
from pathlib import Path
from unittest.mock import AsyncMock, Mock

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from src.core.config import Config, get_config
from src.modules.quote.carriers import DEFAULT_CARRIERS, CarrierFeeRules, CarrierPolicy
from src.modules.quote.models import (
    BillingBasis,
    BusinessLine,
    CargoType,
    ShipmentRequest,
    TransportMode,
)


@pytest.fixture
def temp_dir():
    """创建临时目录"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_config_file(temp_dir):
    """创建临时配置文件"""
    config_file = temp_dir / "config.yaml"
    config_content = """
app:
  name: "logistics-quote-engine"
  version: "1.0.0"
  debug: true
  log_level: "DEBUG"

quote:
  currency: "CNY"
  default_origin: "Shanghai"
  default_destination: "Guangzhou"
  cities: ["Shanghai", "Guangzhou", "Jinan"]
  analysis_top_n: 3

ai:
  provider: "gemini"
  api_key: "test_api_key"
  base_url: "https://api.test.com/v1"
  model: "gemini-2.5-flash"
  temperature: 0.2
  max_tokens: 500
  timeout: 20
"""
    config_file.write_text(config_content, encoding="utf-8")
    return config_file


@pytest.fixture
def config(temp_config_file):
    """测试配置实例"""
    config = Config(str(temp_config_file))
    yield config


@pytest.fixture
def registry():
    return DEFAULT_CARRIERS


@pytest.fixture
def make_request():
    """构造报价请求，未指定字段取默认值"""

    def _make(**overrides) -> ShipmentRequest:
        fields = {
            "origin": "Shanghai",
            "destination": "Guangzhou",
            "business_line": BusinessLine.SCI,
            "cargo_type": CargoType.DG,
            "mode": TransportMode.LTL,
            "weight_kg": 600.0,
            "volume_cbm": 1.5,
        }
        fields.update(overrides)
        return ShipmentRequest(**fields)

    return _make


@pytest.fixture
def make_carrier():
    """构造测试用承运商，默认支持全部能力、无附加费"""

    def _make(**overrides) -> CarrierPolicy:
        fields = {
            "id": "test_carrier",
            "name": "Test Carrier",
            "base_location": "Shanghai",
            "billing_basis": BillingBasis.NET,
            "split_point_kg": 500,
            "supported_lines": frozenset(BusinessLine),
            "supported_types": frozenset(CargoType),
            "supported_modes": frozenset(TransportMode),
            "rules": CarrierFeeRules(description="No fees."),
        }
        fields.update(overrides)
        return CarrierPolicy(**fields)

    return _make


@pytest.fixture
def mock_ai_client():
    """Mock AI客户端"""
    client = Mock()
    response = Mock()
    response.choices = [Mock()]
    response.choices[0].message.content = "**Recommendation:** Lianqiang is the cheapest option."
    client.chat.completions.create = AsyncMock(return_value=response)
    return client


@pytest.fixture
def no_ai_key(monkeypatch):
    """清除所有AI密钥环境变量"""
    for name in ("API_KEY", "GEMINI_API_KEY", "OPENAI_API_KEY", "TEST_AI_KEY"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def reset_config():
    """每个用例结束后丢弃配置单例，避免配置在用例间泄漏"""
    yield
    Config._instance = None
    get_config.cache_clear()


@pytest.fixture
def isolated_logging(monkeypatch, temp_dir):
    """在临时工作目录中重建日志，结束后恢复默认输出"""
    from src.core.logger import Logger

    for name in ("APP_LOG_LEVEL", "APP_LOGS_DIR", "APP_DEBUG"):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(temp_dir)
    yield temp_dir
    monkeypatch.undo()
    Logger().configure()
