from __future__ import annotations


class EventEnvelopeError(Exception):
    """Base envelope construction error."""

    code = "event_envelope_error"
    default_message = "Event envelope could not be built"

    def __init__(self, missing: tuple[str, ...] = ()) -> None:
        self.missing = tuple(missing)
        message = self.default_message
        if self.missing:
            message = f"{message}: {', '.join(self.missing)}"
        super().__init__(message)


class MissingRequiredInputs(EventEnvelopeError):
    """Raised when the event input or the request context is incomplete."""

    code = "missing_required_inputs"
    default_message = "Missing required fields to create the event"


class MissingMetadataFields(EventEnvelopeError):
    """Raised when the metadata configuration lacks a required field."""

    code = "missing_metadata_fields"
    default_message = "Missing required fields to produce metadata"


class MissingRequestContextFields(EventEnvelopeError):
    """Raised when the request context lacks a required field."""

    code = "missing_request_context_fields"
    default_message = "Missing required request context fields to produce metadata"
