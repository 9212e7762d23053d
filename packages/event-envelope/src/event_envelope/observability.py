from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Protocol

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest

from event_envelope.config import EventEnvelopeSettings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s correlation_id=%(correlation_id)s %(message)s"

_otel_configured = False
_logging_configured = False


class CorrelationIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "correlation_id", None):
            record.correlation_id = "-"
        return True


def configure_logging(level: str = "INFO") -> None:
    global _logging_configured
    if _logging_configured:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(CorrelationIdFilter())
    package_logger = logging.getLogger("event_envelope")
    package_logger.addHandler(handler)
    package_logger.setLevel(level.upper())
    _logging_configured = True


def configure_otel(service_name: str) -> None:
    global _otel_configured
    if _otel_configured:
        return
    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))
    trace.set_tracer_provider(provider)
    _otel_configured = True


@dataclass(frozen=True)
class EnvelopeBuildMetric:
    event_name: str
    outcome: str
    duration_ms: float


class EnvelopeMetricsCollector(Protocol):
    def observe(self, metric: EnvelopeBuildMetric) -> None: ...


class InMemoryEnvelopeMetricsCollector(EnvelopeMetricsCollector):
    def __init__(self) -> None:
        self._metrics: list[EnvelopeBuildMetric] = []

    def observe(self, metric: EnvelopeBuildMetric) -> None:
        self._metrics.append(metric)

    def snapshot(self) -> list[dict]:
        return [asdict(item) for item in self._metrics]


class PrometheusEnvelopeMetricsCollector(EnvelopeMetricsCollector):
    def __init__(self) -> None:
        self._registry = CollectorRegistry()
        self._envelope_counter = Counter(
            "event_envelopes_total",
            "Event envelope build attempts grouped by outcome",
            labelnames=("event_name", "outcome"),
            registry=self._registry,
        )
        self._duration_histogram = Histogram(
            "event_envelope_build_duration_ms",
            "Event envelope build duration in milliseconds",
            labelnames=("event_name",),
            buckets=(0.1, 0.25, 0.5, 1, 2.5, 5, 10, 25),
            registry=self._registry,
        )

    def observe(self, metric: EnvelopeBuildMetric) -> None:
        self._envelope_counter.labels(metric.event_name, metric.outcome).inc()
        self._duration_histogram.labels(metric.event_name).observe(metric.duration_ms)

    def render(self) -> str:
        return generate_latest(self._registry).decode("utf-8")


def setup_observability(settings: EventEnvelopeSettings) -> EnvelopeMetricsCollector | None:
    configure_logging(settings.LOG_LEVEL)
    if settings.OTEL_ENABLED:
        configure_otel(settings.SERVICE_NAME)
    if not settings.METRICS_ENABLED:
        return None
    return PrometheusEnvelopeMetricsCollector()
