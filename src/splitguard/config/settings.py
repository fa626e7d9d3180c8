"""Configuration management for splitguard.

Strategy parameters are immutable once constructed. Settings can be
loaded from a YAML file or from environment variables; every field is
validated at construction and failures surface as ConfigurationError.
"""

from __future__ import annotations

import logging
import os
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from splitguard.core.errors import ConfigurationError

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class Environment(str, Enum):
    """Deployment environment types."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    PAPER = "paper"
    PRODUCTION = "production"


class _ValidatedModel(BaseModel):
    """Re-raises pydantic validation failures as ConfigurationError."""

    def __init__(self, **data: Any):
        try:
            super().__init__(**data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid {type(self).__name__}: {e}") from e


class AdverseSelectionConfig(_ValidatedModel):
    """Parameters of the adverse-selection strategy.

    Intervals are in milliseconds, the cooldown in seconds. Percentages are
    fractions (0.01 == 1%).
    """

    imbalance_threshold: float = Field(0.7, ge=0, le=1)
    window_size: int = Field(20, ge=2)
    price_impact_threshold: float = Field(0.001, ge=0)
    trade_size_threshold: float = Field(2.0, gt=0)  # multiple of mean trade size
    cooldown_period: float = Field(300.0, ge=0)  # seconds
    max_position_size: float = Field(1.0, gt=0)
    stop_loss_pct: float = Field(0.01, gt=0)
    take_profit_pct: float = Field(0.02, gt=0)
    max_splits: int = Field(5, ge=1)
    min_split_interval_ms: int = Field(500, gt=0)
    max_split_interval_ms: int = Field(3000, gt=0)
    size_variation_pct: float = Field(0.2, ge=0, lt=1)

    model_config = ConfigDict(extra="forbid", frozen=True)

    @model_validator(mode="after")
    def check_interval_bounds(self) -> AdverseSelectionConfig:
        if self.min_split_interval_ms > self.max_split_interval_ms:
            raise ValueError(
                f"min_split_interval_ms ({self.min_split_interval_ms}) exceeds "
                f"max_split_interval_ms ({self.max_split_interval_ms})"
            )
        return self

    @property
    def mid_split_interval_ms(self) -> int:
        return (self.min_split_interval_ms + self.max_split_interval_ms) // 2


class Settings(_ValidatedModel):
    """Top-level settings for a strategy process."""

    environment: Environment = Environment.DEVELOPMENT
    log_level: str = Field("INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    strategy_id: str = "adverse_selection"
    strategy: AdverseSelectionConfig = Field(default_factory=AdverseSelectionConfig)

    model_config = ConfigDict(extra="forbid")

    @classmethod
    def from_yaml(cls, path: Path) -> Settings:
        """Load settings from a YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"Expected a mapping in {path}, got {type(data).__name__}")
        return cls(**data)

    @classmethod
    def from_env(cls) -> Settings:
        """Load settings from SPLITGUARD_CONFIG, or from individual variables."""
        config_path = os.environ.get("SPLITGUARD_CONFIG")
        if config_path:
            return cls.from_yaml(Path(config_path))

        env = os.environ.get("SPLITGUARD_ENV", "development")
        try:
            environment = Environment(env)
        except ValueError as e:
            raise ConfigurationError(f"Unknown environment: {env}") from e
        return cls(
            environment=environment,
            log_level=os.environ.get("SPLITGUARD_LOG_LEVEL", "INFO").upper(),
        )

    def to_yaml(self, path: Path) -> None:
        """Save settings to a YAML file."""
        with open(path, "w") as f:
            yaml.safe_dump(self.model_dump(mode="json"), f, default_flow_style=False)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
