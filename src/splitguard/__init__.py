"""
splitguard - adverse-selection aware order splitting
"""

__version__ = "0.1.0"

__all__ = [
    "config",
    "core",
    "execution",
    "market",
    "monitoring",
    "regime",
    "risk",
    "strategies",
]
