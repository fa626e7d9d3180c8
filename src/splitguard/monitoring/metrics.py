from __future__ import annotations

"""Lightweight metrics registry (counters & gauges).

Values are kept in-process for cheap reads and mirrored into a
prometheus_client CollectorRegistry owned by the MetricsRegistry, so that
several strategy instances can expose metrics without name collisions.
"""

from dataclasses import dataclass, field
from threading import Lock
from typing import Dict

from prometheus_client import CollectorRegistry, Counter as PromCounter, Gauge as PromGauge, generate_latest


class Counter:
    def __init__(self, name: str, description: str = "", registry: CollectorRegistry | None = None):
        self.name = name
        self.description = description
        self._lock = Lock()
        self._value = 0.0
        self._prom = PromCounter(name, description or name, registry=registry)

    def inc(self, amount: float = 1.0) -> None:
        with self._lock:
            self._value += amount
            self._prom.inc(amount)

    @property
    def value(self) -> float:
        return self._value


class Gauge:
    def __init__(self, name: str, description: str = "", registry: CollectorRegistry | None = None):
        self.name = name
        self.description = description
        self._lock = Lock()
        self._value = 0.0
        self._prom = PromGauge(name, description or name, registry=registry)

    def set(self, value: float) -> None:
        with self._lock:
            self._value = float(value)
            self._prom.set(value)

    @property
    def value(self) -> float:
        return self._value


@dataclass
class MetricsRegistry:
    prefix: str = "splitguard"
    counters: Dict[str, Counter] = field(default_factory=dict)
    gauges: Dict[str, Gauge] = field(default_factory=dict)
    collector: CollectorRegistry = field(default_factory=CollectorRegistry)

    def _full_name(self, name: str) -> str:
        return f"{self.prefix}_{name}" if self.prefix else name

    def counter(self, name: str, description: str = "") -> Counter:
        if name not in self.counters:
            self.counters[name] = Counter(self._full_name(name), description, registry=self.collector)
        return self.counters[name]

    def gauge(self, name: str, description: str = "") -> Gauge:
        if name not in self.gauges:
            self.gauges[name] = Gauge(self._full_name(name), description, registry=self.collector)
        return self.gauges[name]

    def export(self) -> bytes:
        """Prometheus text exposition of everything in this registry."""
        return generate_latest(self.collector)
