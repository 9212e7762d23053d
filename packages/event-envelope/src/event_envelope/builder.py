from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from datetime import datetime, timedelta, timezone
from time import perf_counter
from typing import Any

from opentelemetry import trace

from event_envelope.clock import Clock, IdGenerator, SystemClock, UuidGenerator
from event_envelope.environment import EnvironmentFacts, load_environment_facts
from event_envelope.errors import (
    EventEnvelopeError,
    MissingMetadataFields,
    MissingRequestContextFields,
    MissingRequiredInputs,
)
from event_envelope.models import Envelope, EventData, EventInput, MetadataConfig, RequestContext
from event_envelope.observability import EnvelopeBuildMetric, EnvelopeMetricsCollector

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

REQUIRED_METADATA_FIELDS = (
    ("version", "version"),
    ("domain", "domain"),
    ("system", "system"),
    ("service", "service"),
    ("team", "team"),
)
REQUIRED_REQUEST_CONTEXT_FIELDS = (
    ("account_id", "accountId"),
    ("resource_path", "resourcePath"),
    ("request_id", "requestId"),
    ("request_time_epoch", "requestTimeEpoch"),
    ("stage", "stage"),
)


class EventBuilder:
    """Build one event-bus envelope from event input, environment facts and request context.

    Validation and derivation both run in the constructor, so an instance
    only exists once its envelope is complete. ``get()`` never fails.

    Example::

        envelope = EventBuilder(event_input, LambdaEnvironment(), request_context).get()
        entries = [envelope.to_put_events_entry()]
    """

    def __init__(
        self,
        event_input: EventInput | Mapping[str, Any] | None,
        environment: EnvironmentFacts | None,
        request_context: RequestContext | Mapping[str, Any] | None = None,
        *,
        id_generator: IdGenerator | None = None,
        clock: Clock | None = None,
        metrics: EnvelopeMetricsCollector | None = None,
    ) -> None:
        self._id_generator = id_generator or UuidGenerator()
        self._clock = clock or SystemClock()
        self._metrics = metrics
        event_input = _coerce_event_input(event_input)
        request_context = _coerce_request_context(request_context)
        event_name = (event_input.event_name if event_input is not None else None) or "unknown"

        started = perf_counter()
        with tracer.start_as_current_span("event_envelope.build") as span:
            span.set_attribute("event.name", str(event_name))
            try:
                _validate_inputs(event_input, request_context)
                _validate_metadata(event_input.metadata_config)
                _validate_request_context(request_context)
            except EventEnvelopeError as exc:
                span.set_attribute("event_envelope.error", exc.code)
                logger.error(
                    "event_envelope_rejected",
                    extra={
                        "component": "event_envelope",
                        "event_name": str(event_name),
                        "error_code": exc.code,
                        "missing_fields": list(exc.missing),
                    },
                )
                self._observe(str(event_name), exc.code, started)
                raise
            if environment is None:
                environment = load_environment_facts()
            self._envelope = self._produce_envelope(event_input, environment, request_context)
            span.set_attribute("event.source", self._envelope.source)
            span.set_attribute("event.bus", self._envelope.bus_target)

        self._observe(self._envelope.detail_type, "built", started)
        logger.info(
            "event_envelope_built",
            extra={
                "component": "event_envelope",
                "event_name": self._envelope.detail_type,
                "source": self._envelope.source,
                "correlation_id": request_context.request_id,
            },
        )

    def get(self) -> Envelope:
        return self._envelope

    def _produce_envelope(
        self,
        event_input: EventInput,
        environment: EnvironmentFacts,
        request_context: RequestContext,
    ) -> Envelope:
        metadata_config = event_input.metadata_config
        metadata = self._produce_metadata(event_input, environment, request_context)
        source = ".".join(
            (
                str(metadata_config.domain).lower(),
                str(metadata_config.system).lower(),
                str(event_input.event_name).lower(),
            )
        )
        detail = json.dumps(
            {"metadata": metadata, "data": event_input.data},
            ensure_ascii=False,
            allow_nan=False,
            separators=(",", ":"),
        )
        return Envelope(
            bus_target=event_input.bus_target,
            source=source,
            detail_type=event_input.event_name,
            detail=detail,
        )

    def _produce_metadata(
        self,
        event_input: EventInput,
        environment: EnvironmentFacts,
        request_context: RequestContext,
    ) -> dict[str, Any]:
        timestamp, timestamp_human = self._capture_instant()
        metadata = event_input.metadata_config.to_dict()
        metadata.update(
            {
                "eventName": event_input.event_name,
                "id": self._id_generator.new_id(),
                "correlationId": request_context.request_id,
                "timestamp": timestamp,
                "timestampHuman": timestamp_human,
                "requestTimeEpoch": request_context.request_time_epoch,
                "lifecycleStage": request_context.stage,
                "resource": request_context.resource_path,
                "accountId": request_context.account_id,
                "region": _fact(environment, "region"),
                "runtime": _fact(environment, "runtime"),
                "functionName": _fact(environment, "function_name"),
                "functionMemorySize": _fact(environment, "function_memory_size"),
                "functionVersion": _fact(environment, "function_version"),
            }
        )
        if event_input.user:
            metadata["user"] = event_input.user
        return metadata

    def _capture_instant(self) -> tuple[str, str]:
        instant = self._clock.now()
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        epoch_millis = (instant - _EPOCH) // timedelta(milliseconds=1)
        truncated = _EPOCH + timedelta(milliseconds=epoch_millis)
        human = truncated.isoformat(timespec="milliseconds").replace("+00:00", "Z")
        return str(epoch_millis), human

    def _observe(self, event_name: str, outcome: str, started: float) -> None:
        if self._metrics is not None:
            self._metrics.observe(
                EnvelopeBuildMetric(
                    event_name=event_name,
                    outcome=outcome,
                    duration_ms=(perf_counter() - started) * 1000.0,
                )
            )


def build_event(
    event_name: str,
    *,
    bus_target: str,
    data: EventData,
    metadata_config: MetadataConfig | Mapping[str, Any],
    request_context: RequestContext | Mapping[str, Any] | None,
    environment: EnvironmentFacts | None = None,
    user: str | None = None,
    id_generator: IdGenerator | None = None,
    clock: Clock | None = None,
    metrics: EnvelopeMetricsCollector | None = None,
) -> Envelope:
    event_input = EventInput(
        event_name=event_name,
        bus_target=bus_target,
        data=data,
        metadata_config=metadata_config,
        user=user,
    )
    return EventBuilder(
        event_input,
        environment,
        request_context,
        id_generator=id_generator,
        clock=clock,
        metrics=metrics,
    ).get()


def _coerce_event_input(event_input: EventInput | Mapping[str, Any] | None) -> EventInput | None:
    if isinstance(event_input, Mapping):
        return EventInput.from_mapping(event_input)
    if event_input is not None and isinstance(event_input.metadata_config, Mapping):
        return EventInput(
            event_name=event_input.event_name,
            bus_target=event_input.bus_target,
            data=event_input.data,
            metadata_config=MetadataConfig.from_mapping(event_input.metadata_config),
            user=event_input.user,
        )
    return event_input


def _coerce_request_context(
    request_context: RequestContext | Mapping[str, Any] | None,
) -> RequestContext | None:
    if isinstance(request_context, Mapping):
        return RequestContext.from_mapping(request_context)
    return request_context


def _validate_inputs(event_input: EventInput | None, request_context: RequestContext | None) -> None:
    missing: list[str] = []
    if event_input is None:
        missing.extend(["eventName", "busTarget", "data", "metadataConfig"])
    else:
        if not event_input.event_name:
            missing.append("eventName")
        if not event_input.bus_target:
            missing.append("busTarget")
        # an empty object is still data
        if event_input.data is None or event_input.data == "":
            missing.append("data")
        if event_input.metadata_config is None:
            missing.append("metadataConfig")
    if request_context is None:
        missing.append("requestContext")
    if missing:
        raise MissingRequiredInputs(tuple(missing))


def _validate_metadata(metadata_config: MetadataConfig) -> None:
    # falsy counts as missing, version=0 included
    missing = tuple(wire for attr, wire in REQUIRED_METADATA_FIELDS if not getattr(metadata_config, attr))
    if missing:
        raise MissingMetadataFields(missing)


def _validate_request_context(request_context: RequestContext) -> None:
    missing = tuple(wire for attr, wire in REQUIRED_REQUEST_CONTEXT_FIELDS if not getattr(request_context, attr))
    if missing:
        raise MissingRequestContextFields(missing)


def _fact(environment: EnvironmentFacts, name: str) -> str:
    value = getattr(environment, name, None)
    return str(value) if value else ""
