"""Configuration loading from YAML files and environment variables."""

import os
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

import yaml
from pydantic import ValidationError

from ...domain.exceptions import ConfigurationError
from .config_models import TextAnalyzerConfig


# Environment variable -> (config section, key, converter)
ENV_OVERRIDES: Dict[str, Tuple[str, str, Callable[[str], Any]]] = {
    "TEXTANALYZER_MAX_WORKERS": ("parallel", "max_workers", int),
    "TEXTANALYZER_GRACE_PERIOD": ("parallel", "grace_period_seconds", float),
    "TEXTANALYZER_LOG_LEVEL": ("logging", "level", str),
    "TEXTANALYZER_LOG_FILE": ("logging", "file", str),
    "TEXTANALYZER_OUTPUT_DIR": ("output", "output_directory", str),
    "TEXTANALYZER_OUTPUT_FORMAT": ("output", "default_format", str),
}


class ConfigLoader:
    """
    Loads configuration with the following precedence (highest first):

    1. ``TEXTANALYZER_*`` environment variables
    2. The explicit config file, or the first existing default location
    3. Built-in defaults
    """

    DEFAULT_PATHS = [
        Path("./textanalyzer.yaml"),
        Path.home() / ".textanalyzer" / "config.yaml",
    ]

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> TextAnalyzerConfig:
        """
        Load and validate configuration.

        Args:
            config_path: Optional explicit path to a YAML file

        Returns:
            Validated configuration

        Raises:
            ConfigurationError: If the file is missing, unreadable or invalid
        """
        data: Dict[str, Any] = {}

        if config_path:
            path = Path(config_path)
            if not path.exists():
                raise ConfigurationError(f"Configuration file not found: {path}")
            data = cls._read_yaml(path)
        else:
            for path in cls.DEFAULT_PATHS:
                if path.exists():
                    data = cls._read_yaml(path)
                    break

        cls._apply_env_overrides(data)

        try:
            return TextAnalyzerConfig.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

    @staticmethod
    def _read_yaml(path: Path) -> Dict[str, Any]:
        try:
            with open(path, "r", encoding="utf-8") as f:
                content = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Could not read configuration {path}: {e}") from e

        if content is None:
            return {}
        if not isinstance(content, dict):
            raise ConfigurationError(f"Configuration {path} must be a mapping")
        return content

    @staticmethod
    def _apply_env_overrides(data: Dict[str, Any]):
        for env_var, (section, key, convert) in ENV_OVERRIDES.items():
            raw = os.environ.get(env_var)
            if raw is None or raw == "":
                continue
            try:
                value = convert(raw)
            except ValueError as e:
                raise ConfigurationError(f"Invalid value for {env_var}: {raw!r}") from e
            data.setdefault(section, {})[key] = value

    @classmethod
    def create_default_config(cls, path: Optional[str] = None) -> Path:
        """
        Write the default configuration as YAML.

        Args:
            path: Target path (defaults to ./textanalyzer.yaml)

        Returns:
            Path of the written file

        Raises:
            ConfigurationError: If the file already exists
        """
        target = Path(path) if path else cls.DEFAULT_PATHS[0]
        if target.exists():
            raise ConfigurationError(f"Configuration file already exists: {target}")

        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(TextAnalyzerConfig().to_yaml(), encoding="utf-8")
        return target

    @classmethod
    def get_config_info(cls) -> Dict[str, List[str]]:
        """
        Describe where configuration comes from.

        Returns:
            Dictionary with existing_configs, env_overrides and default_paths
        """
        return {
            "existing_configs": [str(p) for p in cls.DEFAULT_PATHS if p.exists()],
            "env_overrides": [
                f"{name}={os.environ[name]}"
                for name in ENV_OVERRIDES
                if os.environ.get(name)
            ],
            "default_paths": [str(p) for p in cls.DEFAULT_PATHS],
        }
