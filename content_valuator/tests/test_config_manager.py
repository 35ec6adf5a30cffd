"""ConfigManager tests"""

import os
import tempfile

import yaml

from content_valuator.utils.config_manager import ConfigManager


class TestConfigManagerLoad:
    """Config file loading."""

    def test_load_real_config(self, config_manager: ConfigManager) -> None:
        assert config_manager.get("valuation.max_value") == 500.0
        assert config_manager.get("valuation.min_value") == 0.5

    def test_load_rate_tables_file(self, config_manager: ConfigManager) -> None:
        tables = config_manager.get_file_config("rate_tables")
        assert "content_type_rates" in tables
        assert "actor_rates" in tables

    def test_logging_config_is_skipped(self, config_manager: ConfigManager) -> None:
        assert config_manager.get_file_config("logging_config") == {}

    def test_load_missing_directory(self) -> None:
        config = ConfigManager(config_dir="/nonexistent/path")
        assert config.get("anything") is None

    def test_load_empty_directory(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            config = ConfigManager(config_dir=tmpdir)
            assert config.get("anything") is None

    def test_broken_file_is_skipped(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            with open(os.path.join(tmpdir, "broken.yaml"), "w", encoding="utf-8") as f:
                f.write("key: [unclosed\n")
            with open(os.path.join(tmpdir, "good.yaml"), "w", encoding="utf-8") as f:
                yaml.dump({"section": {"value": 3}}, f)

            config = ConfigManager(config_dir=tmpdir)
            assert config.get("section.value") == 3
            assert config.get_file_config("broken") == {}


class TestConfigManagerGet:
    """Dot-notation access."""

    def test_get_nested_value(self, config_manager: ConfigManager) -> None:
        assert config_manager.get("portfolio.top_k") == 5

    def test_get_top_level(self, config_manager: ConfigManager) -> None:
        valuation = config_manager.get("valuation")
        assert isinstance(valuation, dict)
        assert "default_confidence" in valuation

    def test_get_missing_with_default(self, config_manager: ConfigManager) -> None:
        assert config_manager.get("valuation.nonexistent", 42) == 42

    def test_get_section(self, config_manager: ConfigManager) -> None:
        section = config_manager.get_section("licensing")
        assert section["high_value_threshold"] == 100.0

    def test_get_missing_section(self, config_manager: ConfigManager) -> None:
        assert config_manager.get_section("nonexistent") == {}

    def test_tmp_config(self, tmp_config_dir: str) -> None:
        config = ConfigManager(config_dir=tmp_config_dir)
        assert config.get("valuation.max_value") == 300.0
        assert config.config_dir == tmp_config_dir


class TestConfigManagerEnvOverride:
    """Environment variable overrides."""

    def test_env_override_parsed_as_number(self, config_manager: ConfigManager, monkeypatch) -> None:
        monkeypatch.setenv("CONTENT_VALUATOR_VALUATION_MAX_VALUE", "400")
        assert config_manager.get("valuation.max_value") == 400

    def test_env_override_boolean(self, config_manager: ConfigManager, monkeypatch) -> None:
        monkeypatch.setenv("CONTENT_VALUATOR_PIPELINE_TRACK_NON_COMMERCIAL", "true")
        assert config_manager.get("pipeline.track_non_commercial") is True

    def test_env_override_plain_string(self, config_manager: ConfigManager, monkeypatch) -> None:
        monkeypatch.setenv("CONTENT_VALUATOR_PORTFOLIO_STANDING_RECOMMENDATION", "watch closely")
        assert config_manager.get("portfolio.standing_recommendation") == "watch closely"

    def test_env_override_in_section(self, config_manager: ConfigManager, monkeypatch) -> None:
        monkeypatch.setenv("CONTENT_VALUATOR_VALUATION_MAX_VALUE", "400")
        section = config_manager.get_section("valuation")
        assert section["max_value"] == 400
        assert section["min_value"] == 0.5

    def test_env_override_in_nested_section(self, config_manager: ConfigManager, monkeypatch) -> None:
        monkeypatch.setenv("CONTENT_VALUATOR_CEILINGS_CONTENT_TYPE_IMAGE", "55")
        monkeypatch.setenv("CONTENT_VALUATOR_CEILINGS_CONTENT_TYPE_ARTICLE_LONG", "180")
        ceilings = config_manager.get_section("ceilings")
        assert ceilings["content_type"]["image"] == 55
        assert ceilings["content_type"]["article"]["long"] == 180
        assert ceilings["quality"][0] == {"below": 40, "cap": 20.0}

    def test_section_override_does_not_leak(self, config_manager: ConfigManager, monkeypatch) -> None:
        monkeypatch.setenv("CONTENT_VALUATOR_LICENSING_HIGH_VALUE_THRESHOLD", "250")
        assert config_manager.get_section("licensing")["high_value_threshold"] == 250
        monkeypatch.delenv("CONTENT_VALUATOR_LICENSING_HIGH_VALUE_THRESHOLD")
        assert config_manager.get_section("licensing")["high_value_threshold"] == 100.0
