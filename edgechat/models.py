"""Shared Pydantic data models for edgechat."""

from __future__ import annotations

import json
import math
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from edgechat.dispatch.cors import cors_headers

JSON_CONTENT_TYPE = "application/json"
HTML_CONTENT_TYPE = "text/html"
TEXT_CONTENT_TYPE = "text/plain"


def iso_timestamp(moment: datetime) -> str:
    """Format as ISO-8601 UTC with milliseconds and a Z suffix."""
    return moment.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _reject_constant(token: str) -> float:
    raise ValueError(f"Non-standard JSON constant: {token}")


def _finite_float(token: str) -> float:
    value = float(token)
    if not math.isfinite(value):
        raise ValueError(f"JSON number out of range: {token}")
    return value


def loads_json(raw: bytes | None) -> Any:
    """Decode a request body as strict RFC 8259 JSON.

    Raises ValueError for empty, undecodable or malformed bodies, including
    the NaN and Infinity tokens and numbers too large for a float.
    """
    return json.loads(raw or b"", parse_constant=_reject_constant, parse_float=_finite_float)


# --- Request ---


class RequestDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    method: str
    path: str
    headers: dict[str, str] = Field(default_factory=dict)
    raw_body: bytes | None = None

    @field_validator("method")
    @classmethod
    def _upper_method(cls, value: str) -> str:
        return value.upper()


class IntentRule(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    phrases: list[str] = Field(min_length=1)
    description: str = ""


class ChatRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str = Field(min_length=1)
    model: str = "gpt-5-nano"


# --- Replies ---


class ChatReply(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str
    model: str
    timestamp: str  # ISO8601
    note: str


class WebhookReply(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: str = "received"
    message: str = "Webhook processed successfully"
    timestamp: str  # ISO8601
    data: Any = None


# --- Response ---


class ResponseDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: int = Field(ge=100, le=599)
    headers: dict[str, str]
    body: str = ""

    @classmethod
    def for_json(cls, payload: object, status: int = 200) -> ResponseDescriptor:
        headers = {"Content-Type": JSON_CONTENT_TYPE, **cors_headers()}
        return cls(
            status=status,
            headers=headers,
            body=json.dumps(payload, ensure_ascii=False, allow_nan=False),
        )

    @classmethod
    def for_html(cls, document: str, status: int = 200) -> ResponseDescriptor:
        headers = {"Content-Type": HTML_CONTENT_TYPE, **cors_headers()}
        return cls(status=status, headers=headers, body=document)

    @classmethod
    def for_text(cls, text: str, status: int) -> ResponseDescriptor:
        headers = {"Content-Type": TEXT_CONTENT_TYPE, **cors_headers()}
        return cls(status=status, headers=headers, body=text)

    @classmethod
    def empty(cls, status: int = 204, preflight: bool = False) -> ResponseDescriptor:
        return cls(status=status, headers=cors_headers(preflight=preflight))


# --- Access log ---


def _now_iso() -> str:
    return iso_timestamp(datetime.now(UTC))


class AccessEvent(BaseModel):
    timestamp: str = Field(default_factory=_now_iso)
    method: str
    path: str
    status: int
    route: str | None = None
    duration_ms: int = Field(ge=0)
