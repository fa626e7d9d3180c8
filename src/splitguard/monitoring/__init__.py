from .metrics import Counter, Gauge, MetricsRegistry

__all__ = ["Counter", "Gauge", "MetricsRegistry"]
