"""Shared test fixtures for edgechat."""

from __future__ import annotations

import json
from datetime import UTC, datetime

import pytest

from edgechat.chat.responder import ChatResponder
from edgechat.clock import Clock, fixed_clock
from edgechat.dispatch.router import Dispatcher
from edgechat.models import RequestDescriptor
from edgechat.webhook.responder import WebhookResponder

# Thursday of a leap-year February
FIXED_NOW = datetime(2024, 2, 15, 9, 30, 45, tzinfo=UTC)
FIXED_TIMESTAMP = "2024-02-15T09:30:45.000Z"


@pytest.fixture
def clock() -> Clock:
    return fixed_clock(FIXED_NOW)


@pytest.fixture
def chat_responder(clock: Clock) -> ChatResponder:
    return ChatResponder(clock=clock)


@pytest.fixture
def webhook_responder(clock: Clock) -> WebhookResponder:
    return WebhookResponder(clock=clock)


@pytest.fixture
def dispatcher(chat_responder: ChatResponder, webhook_responder: WebhookResponder) -> Dispatcher:
    return Dispatcher(chat=chat_responder, webhook=webhook_responder)


# --- Factory functions for test data ---


def make_request(method: str = "GET", path: str = "/", body: object = None, **kwargs) -> RequestDescriptor:
    """Factory for RequestDescriptor; non-bytes bodies are JSON-encoded."""
    raw_body: bytes | None
    if body is None or isinstance(body, bytes):
        raw_body = body
    else:
        raw_body = json.dumps(body).encode()
    return RequestDescriptor(method=method, path=path, raw_body=raw_body, **kwargs)
