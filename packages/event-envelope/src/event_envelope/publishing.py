from __future__ import annotations

from abc import ABC, abstractmethod
from collections import defaultdict

from event_envelope.models import Envelope


class EnvelopePublisher(ABC):
    @abstractmethod
    async def publish(self, envelope: Envelope) -> None:
        raise NotImplementedError


class InMemoryEnvelopePublisher(EnvelopePublisher):
    def __init__(self) -> None:
        self.published: dict[str, list[Envelope]] = defaultdict(list)

    async def publish(self, envelope: Envelope) -> None:
        self.published[envelope.bus_target].append(envelope)
