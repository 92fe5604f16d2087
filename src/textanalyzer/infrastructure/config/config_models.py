"""Configuration data models using Pydantic."""

import re
from typing import Dict, Optional
from pydantic import BaseModel, Field, field_validator, ConfigDict

from ...domain.services import DEFAULT_PATTERNS, DEFAULT_TOP_WORDS


REPORT_FORMATS = ("console", "json", "text")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_ROTATIONS = ("daily", "none")


class ParallelConfig(BaseModel):
    """Execution engine configuration."""
    model_config = ConfigDict(validate_assignment=True)

    max_workers: Optional[int] = Field(
        default=None,
        ge=1,
        le=64,
        description="Worker threads in the pool (defaults to the CPU count)"
    )
    grace_period_seconds: float = Field(
        default=60.0,
        ge=0.0,
        le=3600.0,
        description="Seconds shutdown waits for in-flight tasks before cancelling them"
    )


class AnalysisConfig(BaseModel):
    """Analysis set configuration."""
    model_config = ConfigDict(validate_assignment=True)

    top_words: int = Field(
        default=DEFAULT_TOP_WORDS,
        ge=1,
        le=1000,
        description="Number of most frequent words kept in the word count"
    )
    patterns: Dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_PATTERNS),
        description="Named regular expressions to extract (name -> regex)"
    )
    include_sentence_count: bool = Field(
        default=False,
        description="Also run the sentence count analysis"
    )

    @field_validator('patterns')
    @classmethod
    def validate_patterns(cls, v):
        """Ensure every configured pattern compiles."""
        for name, regex in v.items():
            if not name:
                raise ValueError("pattern names must not be empty")
            try:
                re.compile(regex)
            except re.error as e:
                raise ValueError(f"pattern {name!r} is not a valid regex: {e}")
        return v


def _one_of(value: str, allowed, what: str) -> str:
    if value not in allowed:
        raise ValueError(f"{what} must be one of {', '.join(allowed)}; got {value!r}")
    return value


class OutputConfig(BaseModel):
    """Where and how reports are shown."""
    model_config = ConfigDict(validate_assignment=True)

    default_format: str = Field(
        default="console",
        description="Report format when --format is not given (console, json, text)"
    )
    color: bool = Field(
        default=True,
        description="Use colors in console reports"
    )
    verbose: bool = Field(
        default=False,
        description="Print engine details while analyzing"
    )
    save_to_file: bool = Field(
        default=False,
        description="Also save every analyzed report as JSON"
    )
    output_directory: str = Field(
        default="./textanalyzer_reports",
        description="Directory for automatically saved reports"
    )

    @field_validator('default_format')
    @classmethod
    def check_format(cls, v):
        return _one_of(v.lower(), REPORT_FORMATS, "default_format")


class LoggingConfig(BaseModel):
    """Log level and destinations."""
    model_config = ConfigDict(validate_assignment=True)

    level: str = Field(
        default="WARNING",
        description="Minimum level that gets logged"
    )
    file: Optional[str] = Field(
        default=None,
        description="Log file path (no file logging when unset)"
    )
    console: bool = Field(
        default=True,
        description="Log to the console through Rich"
    )
    rotation: str = Field(
        default="daily",
        description="'daily' rotates the log file at midnight, 'none' keeps one file"
    )
    retention_days: int = Field(
        default=30,
        ge=1,
        le=365,
        description="Rotated log files kept"
    )

    @field_validator('level')
    @classmethod
    def check_level(cls, v):
        return _one_of(v.upper(), LOG_LEVELS, "level")

    @field_validator('rotation')
    @classmethod
    def check_rotation(cls, v):
        return _one_of(v.lower(), LOG_ROTATIONS, "rotation")


class TextAnalyzerConfig(BaseModel):
    """Root configuration, one section per component."""
    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    parallel: ParallelConfig = Field(default_factory=ParallelConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def to_yaml(self) -> str:
        """Dump the configuration as YAML, sections in declaration order."""
        import yaml
        return yaml.dump(self.model_dump(), default_flow_style=False, sort_keys=False)
