from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class EventEnvelopeSettings(BaseSettings):
    model_config = SettingsConfigDict(extra="ignore")

    SERVICE_NAME: str = "event-envelope"
    LOG_LEVEL: str = "INFO"
    OTEL_ENABLED: bool = True
    METRICS_ENABLED: bool = True


def load_settings(service_name: str) -> EventEnvelopeSettings:
    return EventEnvelopeSettings(SERVICE_NAME=service_name)
