"""Build validated, serialization-ready envelopes for a cloud event bus."""

from event_envelope.builder import EventBuilder, build_event
from event_envelope.clock import Clock, IdGenerator, SystemClock, UuidGenerator
from event_envelope.config import EventEnvelopeSettings, load_settings
from event_envelope.environment import (
    EnvironmentFacts,
    LambdaEnvironment,
    StaticEnvironmentFacts,
    load_environment_facts,
)
from event_envelope.errors import (
    EventEnvelopeError,
    MissingMetadataFields,
    MissingRequestContextFields,
    MissingRequiredInputs,
)
from event_envelope.models import Envelope, EventInput, MetadataConfig, RequestContext
from event_envelope.observability import (
    InMemoryEnvelopeMetricsCollector,
    PrometheusEnvelopeMetricsCollector,
    configure_logging,
    configure_otel,
    setup_observability,
)
from event_envelope.publishing import EnvelopePublisher, InMemoryEnvelopePublisher
from event_envelope.request_context import propagation_headers, request_context_from_api_gateway_event

__all__ = [
    "Clock",
    "Envelope",
    "EnvelopePublisher",
    "EnvironmentFacts",
    "EventBuilder",
    "EventEnvelopeError",
    "EventEnvelopeSettings",
    "EventInput",
    "IdGenerator",
    "InMemoryEnvelopeMetricsCollector",
    "InMemoryEnvelopePublisher",
    "LambdaEnvironment",
    "MetadataConfig",
    "MissingMetadataFields",
    "MissingRequestContextFields",
    "MissingRequiredInputs",
    "PrometheusEnvelopeMetricsCollector",
    "RequestContext",
    "StaticEnvironmentFacts",
    "SystemClock",
    "UuidGenerator",
    "build_event",
    "configure_logging",
    "configure_otel",
    "load_environment_facts",
    "load_settings",
    "propagation_headers",
    "request_context_from_api_gateway_event",
    "setup_observability",
]
