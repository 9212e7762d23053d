from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from event_envelope.models import Envelope, RequestContext

CORRELATION_ID_HEADER = "x-correlation-id"
REQUEST_TIME_EPOCH_HEADER = "x-request-time-epoch"


def request_context_from_api_gateway_event(event: Mapping[str, Any]) -> RequestContext | None:
    """Read the request context of an API Gateway proxy event.

    A correlation id or request time forwarded by an upstream caller takes
    precedence over the values API Gateway generated for this hop, so the
    whole call chain keeps the identity of its first request.
    """
    raw_context = event.get("requestContext")
    if raw_context is None:
        return None
    headers = {str(key).lower(): value for key, value in (event.get("headers") or {}).items()}

    request_id = headers.get(CORRELATION_ID_HEADER) or raw_context.get("requestId")
    request_time_epoch = raw_context.get("requestTimeEpoch")
    forwarded_epoch = headers.get(REQUEST_TIME_EPOCH_HEADER)
    if forwarded_epoch:
        try:
            request_time_epoch = int(forwarded_epoch)
        except (TypeError, ValueError):
            request_time_epoch = raw_context.get("requestTimeEpoch")

    return RequestContext(
        account_id=raw_context.get("accountId"),
        resource_path=raw_context.get("resourcePath"),
        request_id=request_id,
        request_time_epoch=request_time_epoch,
        stage=raw_context.get("stage"),
    )


def propagation_headers(origin: RequestContext | Envelope) -> dict[str, str]:
    if isinstance(origin, Envelope):
        metadata = origin.detail_dict()["metadata"]
        correlation_id = metadata["correlationId"]
        request_time_epoch = metadata["requestTimeEpoch"]
    else:
        correlation_id = origin.request_id
        request_time_epoch = origin.request_time_epoch
    return {
        CORRELATION_ID_HEADER: str(correlation_id),
        REQUEST_TIME_EPOCH_HEADER: str(request_time_epoch),
    }
