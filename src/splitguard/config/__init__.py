"""Configuration for splitguard strategies."""

from .settings import AdverseSelectionConfig, Environment, Settings, configure_logging

__all__ = [
    "AdverseSelectionConfig",
    "Environment",
    "Settings",
    "configure_logging",
]
