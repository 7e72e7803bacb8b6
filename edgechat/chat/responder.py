"""Mock chat responder for POST /api/chat."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from zoneinfo import ZoneInfo

from edgechat.chat.intents import DEFAULT_INTENTS, Intent, IntentContext, compose_reply
from edgechat.clock import Clock, system_clock
from edgechat.errors import MalformedInputError, MissingFieldError
from edgechat.models import ChatReply, ChatRequest, ResponseDescriptor, iso_timestamp, loads_json

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-5-nano"
DEFAULT_NOTE = (
    "This is a mock response generated at the edge. "
    "No language model was called."
)


class ChatResponder:
    """Answers chat messages from the intent table instead of a model."""

    def __init__(
        self,
        intents: Sequence[Intent] = DEFAULT_INTENTS,
        clock: Clock = system_clock,
        default_model: str = DEFAULT_MODEL,
        timezone: str = "UTC",
        note: str = DEFAULT_NOTE,
    ) -> None:
        self._intents = tuple(intents)
        self._clock = clock
        self._default_model = default_model
        self._zone = ZoneInfo(timezone)
        self._note = note

    def parse(self, raw_body: bytes | None) -> ChatRequest:
        """Parse and validate a chat request body.

        Raises MalformedInputError for bodies that are not strict JSON and
        MissingFieldError when ``message`` is absent, empty or not a string.
        """
        try:
            data = loads_json(raw_body)
        except ValueError as exc:
            raise MalformedInputError("Invalid JSON") from exc

        if not isinstance(data, dict):
            raise MissingFieldError("Message is required")
        message = data.get("message")
        if not isinstance(message, str) or not message:
            raise MissingFieldError("Message is required")

        model = data.get("model")
        if not isinstance(model, str) or not model:
            model = self._default_model
        return ChatRequest(message=message, model=model)

    def respond(self, raw_body: bytes | None) -> ResponseDescriptor:
        request = self.parse(raw_body)
        now = self._clock()
        context = IntentContext(
            message=request.message,
            model=request.model,
            now=now.astimezone(self._zone),
        )
        reply = ChatReply(
            message=compose_reply(self._intents, context),
            model=request.model,
            timestamp=iso_timestamp(now),
            note=self._note,
        )
        logger.debug("Chat reply for model %s", request.model)
        return ResponseDescriptor.for_json(reply.model_dump())
