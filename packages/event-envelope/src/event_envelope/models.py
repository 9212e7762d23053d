from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal, Union

EventType = Literal["DomainEvent", "IntegrationEvent"]
Jurisdiction = Literal["eu", "us", "cn", "apj"]
DataSensitivity = Literal["public", "sensitive", "proprietary", "secret"]
EventData = Union[dict[str, Any], str]


@dataclass(frozen=True)
class MetadataConfig:
    """Static ownership and classification metadata shared by a service's events."""

    version: int
    domain: str
    system: str
    service: str
    team: str
    event_type: EventType | None = None
    host_platform: str | None = None
    owner: str | None = None
    jurisdiction: Jurisdiction | None = None
    tags: tuple[str, ...] | None = None
    data_sensitivity: DataSensitivity | None = None
    # None renders nothing and reads as false
    error: bool | None = None

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> MetadataConfig:
        tags = raw.get("tags")
        return cls(
            version=raw.get("version"),
            domain=raw.get("domain"),
            system=raw.get("system"),
            service=raw.get("service"),
            team=raw.get("team"),
            event_type=raw.get("eventType"),
            host_platform=raw.get("hostPlatform"),
            owner=raw.get("owner"),
            jurisdiction=raw.get("jurisdiction"),
            tags=tuple(tags) if tags is not None else None,
            data_sensitivity=raw.get("dataSensitivity"),
            error=raw.get("error"),
        )

    def to_dict(self) -> dict[str, Any]:
        rendered: dict[str, Any] = {
            "version": self.version,
            "domain": self.domain,
            "system": self.system,
            "service": self.service,
            "team": self.team,
            "eventType": self.event_type,
            "hostPlatform": self.host_platform,
            "owner": self.owner,
            "jurisdiction": self.jurisdiction,
            "tags": list(self.tags) if self.tags is not None else None,
            "dataSensitivity": self.data_sensitivity,
            "error": self.error,
        }
        return {key: value for key, value in rendered.items() if value is not None}


@dataclass(frozen=True)
class EventInput:
    event_name: str
    bus_target: str
    data: EventData
    metadata_config: MetadataConfig
    user: str | None = None

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> EventInput:
        metadata_config = raw.get("metadataConfig")
        if isinstance(metadata_config, Mapping):
            metadata_config = MetadataConfig.from_mapping(metadata_config)
        return cls(
            event_name=raw.get("eventName"),
            bus_target=raw.get("busTarget"),
            data=raw.get("data"),
            metadata_config=metadata_config,
            user=raw.get("user"),
        )


@dataclass(frozen=True)
class RequestContext:
    """Identity and timing of the call that caused the event.

    ``request_id`` and ``request_time_epoch`` belong to the first call of a
    call chain and must be handed on unchanged to every downstream hop.
    """

    account_id: str
    resource_path: str
    request_id: str
    request_time_epoch: int
    stage: str

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> RequestContext:
        return cls(
            account_id=raw.get("accountId"),
            resource_path=raw.get("resourcePath"),
            request_id=raw.get("requestId"),
            request_time_epoch=raw.get("requestTimeEpoch"),
            stage=raw.get("stage"),
        )


@dataclass(frozen=True)
class Envelope:
    bus_target: str
    source: str
    detail_type: str
    detail: str

    def detail_dict(self) -> dict[str, Any]:
        return json.loads(self.detail)

    def to_put_events_entry(self) -> dict[str, str]:
        return {
            "EventBusName": self.bus_target,
            "Source": self.source,
            "DetailType": self.detail_type,
            "Detail": self.detail,
        }
