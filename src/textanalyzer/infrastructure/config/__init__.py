"""Configuration infrastructure."""

from .config_models import (
    TextAnalyzerConfig,
    ParallelConfig,
    AnalysisConfig,
    OutputConfig,
    LoggingConfig,
)
from .config_loader import ConfigLoader

__all__ = [
    "TextAnalyzerConfig",
    "ParallelConfig",
    "AnalysisConfig",
    "OutputConfig",
    "LoggingConfig",
    "ConfigLoader",
]
