"""
配置模块单元测试
Config Module Unit Tests
"""

import pytest
from pydantic import ValidationError

from src.core.config import Config, get_config
from src.core.config_models import (
    DEFAULT_CITIES,
    AIConfig,
    AppConfig,
    ConfigModel,
    Provider,
    QuoteConfig,
)
from src.core.error_handler import ConfigError


class TestConfig:
    """配置管理类测试"""

    def test_config_singleton(self):
        """测试单例模式"""
        config1 = Config()
        config2 = Config()
        assert config1 is config2
        assert get_config() is config1

    def test_config_load_from_yaml(self, temp_config_file):
        """测试从YAML加载配置"""
        config = Config(str(temp_config_file))
        assert config.get("app.name") == "logistics-quote-engine"
        assert config.get("quote.analysis_top_n") == 3
        assert config.get("ai.base_url") == "https://api.test.com/v1"

    def test_config_get_section(self, config):
        """测试获取配置段落"""
        quote_config = config.get_section("quote")
        assert quote_config["cities"] == ["Shanghai", "Guangzhou", "Jinan"]
        assert quote_config["currency"] == "CNY"
        assert config.ai["api_key"] == "test_api_key"
        assert config.app["log_level"] == "DEBUG"

    def test_config_get_value(self, config):
        """测试获取配置值"""
        assert config.get("ai.provider") == "gemini"
        assert config.get("ai.temperature") == 0.2
        assert config.get("nonexistent.key", "default") == "default"
        assert config.get_section("missing", {"a": 1}) == {"a": 1}

    def test_config_fills_missing_keys_with_defaults(self, config):
        """测试缺省字段补齐"""
        assert config.get("ai.api_key_env") == "API_KEY"
        assert config.get("app.logs_dir") == "logs"

    def test_config_reload(self, temp_config_file):
        """测试重新加载配置"""
        config = Config(str(temp_config_file))
        assert config.get("quote.analysis_top_n") == 3

        temp_config_file.write_text(
            """
app:
  name: "updated_name"
quote:
  analysis_top_n: 5
""",
            encoding="utf-8",
        )

        config.reload()
        assert config.get("app.name") == "updated_name"
        assert config.get("quote.analysis_top_n") == 5
        assert config.get("quote.cities") == DEFAULT_CITIES

    def test_config_switches_file_on_new_path(self, temp_config_file, temp_dir):
        """测试传入新路径时重新加载"""
        Config(str(temp_config_file))
        other = temp_dir / "other.yaml"
        other.write_text('app:\n  name: "other"\n', encoding="utf-8")

        config = Config(str(other))
        assert config.get("app.name") == "other"

    def test_config_missing_file(self, temp_dir):
        """测试配置文件不存在"""
        config = Config(str(temp_dir / "nonexistent.yaml"))
        assert config.get("app.name") == "logistics-quote-engine"
        assert config.get("quote.default_origin") == "Shanghai"

    def test_config_invalid_values_raise(self, temp_dir):
        """测试非法配置值"""
        bad = temp_dir / "bad.yaml"
        bad.write_text('app:\n  log_level: "LOUD"\n', encoding="utf-8")

        with pytest.raises(ConfigError) as exc_info:
            Config(str(bad))
        assert exc_info.value.details == {"path": str(bad)}

    def test_config_invalid_yaml_raises(self, temp_dir):
        """测试YAML语法错误"""
        bad = temp_dir / "broken.yaml"
        bad.write_text("app: [unclosed\n", encoding="utf-8")

        with pytest.raises(ConfigError):
            Config(str(bad))


class TestConfigModels:
    """配置模型测试"""

    def test_app_config_defaults(self):
        """测试应用配置默认值"""
        config = AppConfig()
        assert config.name == "logistics-quote-engine"
        assert config.debug is False
        assert config.log_level == "INFO"

    def test_quote_config_defaults(self):
        """测试报价配置默认值"""
        config = QuoteConfig()
        assert config.currency == "CNY"
        assert config.cities == DEFAULT_CITIES
        assert config.analysis_top_n == 4

    def test_quote_config_validation(self):
        """测试报价配置验证"""
        config = QuoteConfig(cities=[" Shanghai ", "", "Wuhan"])
        assert config.cities == ["Shanghai", "Wuhan"]

        with pytest.raises(ValidationError):
            QuoteConfig(cities=["  "])

        with pytest.raises(ValidationError):
            QuoteConfig(analysis_top_n=0)

    def test_ai_config_provider_validation(self):
        """测试AI配置provider验证"""
        config = AIConfig(provider=Provider.OPENAI)
        assert config.provider == Provider.OPENAI

        with pytest.raises(ValidationError):
            AIConfig(provider="invalid")

    def test_ai_config_defaults(self):
        """测试AI配置默认值"""
        config = AIConfig()
        assert config.provider == Provider.GEMINI
        assert config.model == "gemini-2.5-flash"
        assert config.api_key is None
        assert config.api_key_env == "API_KEY"
        assert config.temperature == 0.4
        assert config.max_tokens == 600
        assert config.timeout == 30

    def test_config_model_log_level_validation(self):
        """测试日志级别验证"""
        for level in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            config = ConfigModel.from_dict({"app": {"log_level": level}})
            assert config.app.log_level == level

        with pytest.raises(ValidationError):
            ConfigModel.from_dict({"app": {"log_level": "INVALID"}})

    def test_config_model_default_cities_validation(self):
        """测试默认城市必须在城市列表中"""
        config = ConfigModel.from_dict(
            {"quote": {"cities": ["Jinan", "Wuhan"], "default_origin": "Jinan", "default_destination": "Wuhan"}}
        )
        assert config.quote.default_origin == "Jinan"

        with pytest.raises(ValidationError):
            ConfigModel.from_dict({"quote": {"cities": ["Jinan", "Wuhan"]}})

    def test_config_model_to_dict(self):
        """测试配置转换为字典"""
        config_dict = ConfigModel().to_dict()
        assert set(config_dict) == {"app", "quote", "ai"}
        assert config_dict["ai"]["provider"] == "gemini"


class TestEnvVariableResolution:
    """环境变量解析测试"""

    @pytest.fixture
    def config_file_with_env(self, temp_dir):
        """创建包含环境变量的配置文件"""
        config_file = temp_dir / "config_with_env.yaml"
        config_content = """
app:
  name: "test"
ai:
  api_key: "${TEST_API_KEY}"
  base_url: "${TEST_BASE_URL}"
"""
        config_file.write_text(config_content, encoding="utf-8")
        return config_file

    def test_env_variable_resolution(self, config_file_with_env, monkeypatch):
        """测试环境变量解析"""
        monkeypatch.setenv("TEST_API_KEY", "resolved_key")
        monkeypatch.setenv("TEST_BASE_URL", "https://resolved.url")

        config = Config(str(config_file_with_env))
        assert config.get("ai.api_key") == "resolved_key"
        assert config.get("ai.base_url") == "https://resolved.url"

    def test_env_variable_missing(self, config_file_with_env, monkeypatch):
        """测试缺失环境变量"""
        monkeypatch.delenv("TEST_API_KEY", raising=False)
        monkeypatch.delenv("TEST_BASE_URL", raising=False)

        config = Config(str(config_file_with_env))
        assert config.get("ai.api_key") is None
        assert config.get("ai.base_url") is None
