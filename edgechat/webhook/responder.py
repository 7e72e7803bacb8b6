"""Webhook echo responder for POST /api/webhook."""

from __future__ import annotations

import json
import logging

from edgechat.clock import Clock, system_clock
from edgechat.errors import MalformedInputError
from edgechat.models import ResponseDescriptor, WebhookReply, iso_timestamp, loads_json

logger = logging.getLogger(__name__)


class WebhookResponder:
    """Accepts any JSON payload and echoes it back unchanged."""

    def __init__(self, clock: Clock = system_clock) -> None:
        self._clock = clock

    def respond(self, raw_body: bytes | None) -> ResponseDescriptor:
        try:
            payload = loads_json(raw_body)
        except ValueError as exc:
            raise MalformedInputError("Invalid webhook data") from exc

        logger.info("Webhook received: %s", json.dumps(payload, ensure_ascii=False))

        reply = WebhookReply(timestamp=iso_timestamp(self._clock()), data=payload)
        return ResponseDescriptor.for_json(reply.model_dump())
