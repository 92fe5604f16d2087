"""Tests for configuration loading."""

import pytest
import yaml

from textanalyzer.domain.exceptions import ConfigurationError
from textanalyzer.domain.services import DEFAULT_PATTERNS
from textanalyzer.infrastructure.config import ConfigLoader, TextAnalyzerConfig


class TestConfigModels:

    def test_defaults(self):
        config = TextAnalyzerConfig()

        assert config.parallel.max_workers is None
        assert config.parallel.grace_period_seconds == 60.0
        assert config.analysis.top_words == 20
        assert config.analysis.patterns == DEFAULT_PATTERNS
        assert config.analysis.include_sentence_count is False
        assert config.output.default_format == "console"
        assert config.logging.level == "WARNING"

    def test_to_yaml_round_trips(self):
        config = TextAnalyzerConfig()

        data = yaml.safe_load(config.to_yaml())

        assert TextAnalyzerConfig.model_validate(data) == config

    def test_extra_sections_are_forbidden(self):
        with pytest.raises(ValueError):
            TextAnalyzerConfig.model_validate({"llm": {}})

    def test_assignment_is_validated(self):
        config = TextAnalyzerConfig()

        config.parallel = {"max_workers": 2}

        assert config.parallel.max_workers == 2
        with pytest.raises(ValueError):
            config.parallel = {"max_workers": 0}

    @pytest.mark.parametrize("field, value", [
        ("max_workers", 500),
        ("grace_period_seconds", 99999.0),
    ])
    def test_section_assignment_is_validated(self, field, value):
        config = TextAnalyzerConfig()

        with pytest.raises(ValueError):
            setattr(config.parallel, field, value)


class TestConfigLoader:
    """Precedence: environment over file over defaults."""

    def test_defaults_when_no_file_exists(self):
        config = ConfigLoader.load()

        assert config == TextAnalyzerConfig()

    def test_loads_explicit_file(self, temp_dir):
        path = temp_dir / "custom.yaml"
        path.write_text(yaml.dump({
            "parallel": {"max_workers": 3, "grace_period_seconds": 1.5},
            "analysis": {"top_words": 5, "patterns": {"digits": r"\d+"}},
        }), encoding="utf-8")

        config = ConfigLoader.load(str(path))

        assert config.parallel.max_workers == 3
        assert config.parallel.grace_period_seconds == 1.5
        assert config.analysis.top_words == 5
        assert config.analysis.patterns == {"digits": r"\d+"}

    def test_uses_first_existing_default_path(self):
        ConfigLoader.DEFAULT_PATHS[1].parent.mkdir(parents=True)
        ConfigLoader.DEFAULT_PATHS[1].write_text("parallel:\n  max_workers: 7\n", encoding="utf-8")

        assert ConfigLoader.load().parallel.max_workers == 7

    def test_missing_explicit_file(self, temp_dir):
        with pytest.raises(ConfigurationError, match="not found"):
            ConfigLoader.load(str(temp_dir / "nope.yaml"))

    def test_empty_file_means_defaults(self, temp_dir):
        path = temp_dir / "empty.yaml"
        path.write_text("", encoding="utf-8")

        assert ConfigLoader.load(str(path)) == TextAnalyzerConfig()

    def test_non_mapping_file_rejected(self, temp_dir):
        path = temp_dir / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="mapping"):
            ConfigLoader.load(str(path))

    @pytest.mark.parametrize("content", [
        "analysis:\n  patterns:\n    broken: '('\n",
        "logging:\n  level: LOUD\n",
        "parallel:\n  max_workers: 0\n",
        "output:\n  default_format: xml\n",
    ])
    def test_invalid_values_rejected(self, temp_dir, content):
        path = temp_dir / "bad.yaml"
        path.write_text(content, encoding="utf-8")

        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            ConfigLoader.load(str(path))

    def test_environment_overrides_file(self, temp_dir, monkeypatch):
        path = temp_dir / "custom.yaml"
        path.write_text("parallel:\n  max_workers: 3\n", encoding="utf-8")
        monkeypatch.setenv("TEXTANALYZER_MAX_WORKERS", "6")
        monkeypatch.setenv("TEXTANALYZER_LOG_LEVEL", "debug")
        monkeypatch.setenv("TEXTANALYZER_GRACE_PERIOD", "2.5")

        config = ConfigLoader.load(str(path))

        assert config.parallel.max_workers == 6
        assert config.parallel.grace_period_seconds == 2.5
        assert config.logging.level == "DEBUG"

    def test_bad_environment_value(self, monkeypatch):
        monkeypatch.setenv("TEXTANALYZER_MAX_WORKERS", "many")

        with pytest.raises(ConfigurationError, match="TEXTANALYZER_MAX_WORKERS"):
            ConfigLoader.load()

    def test_create_default_config(self, temp_dir):
        target = temp_dir / "conf" / "textanalyzer.yaml"

        written = ConfigLoader.create_default_config(str(target))

        assert written == target
        assert ConfigLoader.load(str(target)) == TextAnalyzerConfig()

    def test_create_default_config_refuses_to_overwrite(self, temp_dir):
        target = temp_dir / "textanalyzer.yaml"
        target.write_text("{}", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="already exists"):
            ConfigLoader.create_default_config(str(target))

    def test_config_info(self, monkeypatch):
        ConfigLoader.DEFAULT_PATHS[0].write_text("{}", encoding="utf-8")
        monkeypatch.setenv("TEXTANALYZER_OUTPUT_FORMAT", "json")

        info = ConfigLoader.get_config_info()

        assert info["existing_configs"] == [str(ConfigLoader.DEFAULT_PATHS[0])]
        assert info["env_overrides"] == ["TEXTANALYZER_OUTPUT_FORMAT=json"]
        assert len(info["default_paths"]) == 2
