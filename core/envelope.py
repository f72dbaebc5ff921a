"""Uniform success/error response envelopes for gateway routes."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from utils.exceptions import GatewayError


UNKNOWN_ID = "unknown"


@dataclass(frozen=True)
class RequestContext:
    """Trace identifiers carried from the inbound request."""

    correlation_id: str = UNKNOWN_ID
    request_id: str = UNKNOWN_ID

    @classmethod
    def from_values(cls, correlation_id: Any = None, request_id: Any = None) -> "RequestContext":
        return cls(
            correlation_id=str(correlation_id or "").strip() or UNKNOWN_ID,
            request_id=str(request_id or "").strip() or UNKNOWN_ID,
        )


class ResponseMeta(BaseModel):
    """Envelope metadata; extra keys (provider, count, ...) are allowed."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    correlation_id: str = UNKNOWN_ID
    request_id: str = UNKNOWN_ID
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat(timespec="milliseconds"))


class ErrorBody(BaseModel):
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None


class SuccessEnvelope(BaseModel):
    success: Literal[True] = True
    data: Any = None
    meta: ResponseMeta


class ErrorEnvelope(BaseModel):
    success: Literal[False] = False
    error: ErrorBody
    meta: ResponseMeta


def build_meta(context: Optional[RequestContext] = None, **extra: Any) -> ResponseMeta:
    ctx = context or RequestContext()
    return ResponseMeta(
        correlation_id=ctx.correlation_id or UNKNOWN_ID,
        request_id=ctx.request_id or UNKNOWN_ID,
        **extra,
    )


def _dump(model: BaseModel) -> Dict[str, Any]:
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


def success_envelope(data: Any, context: Optional[RequestContext] = None, **meta: Any) -> Dict[str, Any]:
    """Wrap a JSON-ready payload as ``{success: true, data, meta}``."""
    envelope = SuccessEnvelope(data=data, meta=build_meta(context, **meta))
    body = _dump(envelope)
    # exclude_none must not strip a legitimately null payload
    body["data"] = data
    return body


def error_envelope(error: GatewayError, context: Optional[RequestContext] = None, **meta: Any) -> Dict[str, Any]:
    """Wrap a GatewayError as ``{success: false, error: {code, message, details?}, meta}``."""
    envelope = ErrorEnvelope(
        error=ErrorBody(**error.to_error_body()),
        meta=build_meta(context, **meta),
    )
    return _dump(envelope)
