"""
Shared metrics configuration for the Cedar policy boundary.
"""

from prometheus_client import Counter, Histogram, Info, CollectorRegistry
from typing import Dict, Any, Optional
import threading


class MetricsCollector:
    """Centralized metrics collector for boundary calls."""

    def __init__(self, service_name: str, registry: Optional[CollectorRegistry] = None):
        self.service_name = service_name
        self.registry = registry if registry is not None else CollectorRegistry()
        self._metrics: Dict[str, Any] = {}
        self._lock = threading.Lock()
        self._setup_metrics()

    def _setup_metrics(self):
        """Set up boundary metrics."""

        # Engine info
        self._metrics["engine_info"] = Info(
            "engine",
            "Policy engine information",
            registry=self.registry
        )

        # Call metrics
        self._metrics["boundary_calls_total"] = Counter(
            "boundary_calls_total",
            "Total boundary operation calls",
            ["operation", "code"],
            registry=self.registry
        )

        self._metrics["boundary_call_duration_seconds"] = Histogram(
            "boundary_call_duration_seconds",
            "Boundary operation duration in seconds",
            ["operation"],
            registry=self.registry
        )

        # Stage gate metrics
        self._metrics["boundary_stage_rejections_total"] = Counter(
            "boundary_stage_rejections_total",
            "Total inputs rejected by a stage gate",
            ["operation", "stage"],
            registry=self.registry
        )

        # Fault metrics
        self._metrics["boundary_contract_violations_total"] = Counter(
            "boundary_contract_violations_total",
            "Total engine failures on already gated input",
            ["operation"],
            registry=self.registry
        )

    def record_engine(self, engine: str, version: str):
        """Record the engine identity."""
        with self._lock:
            self._metrics["engine_info"].info({
                "service": self.service_name,
                "engine": engine,
                "version": version
            })

    def record_call(self, operation: str, code: int, duration: float):
        """Record one completed boundary call."""
        self._metrics["boundary_calls_total"].labels(
            operation=operation,
            code=str(code)
        ).inc()

        self._metrics["boundary_call_duration_seconds"].labels(
            operation=operation
        ).observe(duration)

    def record_rejection(self, operation: str, stage: str):
        """Record a stage gate rejection."""
        self._metrics["boundary_stage_rejections_total"].labels(
            operation=operation,
            stage=stage
        ).inc()

    def record_contract_violation(self, operation: str):
        """Record an engine fault."""
        self._metrics["boundary_contract_violations_total"].labels(operation=operation).inc()

    def sample_value(self, name: str, labels: Optional[Dict[str, str]] = None) -> Optional[float]:
        """Read the current value of a sample from this collector's registry."""
        return self.registry.get_sample_value(name, labels or {})


def get_metrics_collector(service_name: str, registry: Optional[CollectorRegistry] = None) -> MetricsCollector:
    """Get a metrics collector for a service."""
    return MetricsCollector(service_name, registry)
