"""FastAPI host adapter for the request dispatcher."""

from __future__ import annotations

import logging
import os
import time
from collections.abc import Sequence

from fastapi import FastAPI, Request, Response

from edgechat.access.logger import AccessLogger
from edgechat.chat.intents import DEFAULT_INTENTS, Intent, load_intents_from_file
from edgechat.chat.responder import DEFAULT_MODEL, DEFAULT_NOTE, ChatResponder
from edgechat.dispatch.router import Dispatcher
from edgechat.models import AccessEvent, RequestDescriptor
from edgechat.webhook.responder import WebhookResponder

logger = logging.getLogger(__name__)

METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]


def create_app_from_env() -> FastAPI:
    """Factory for uvicorn --factory: reads config from environment variables."""
    default_model = os.environ.get("EDGECHAT_DEFAULT_MODEL", DEFAULT_MODEL)
    timezone = os.environ.get("EDGECHAT_TIMEZONE", "UTC")
    note = os.environ.get("EDGECHAT_NOTE", DEFAULT_NOTE)
    access_log = os.environ.get("ACCESS_LOG_PATH")

    chat = ChatResponder(
        intents=_load_intents(),
        default_model=default_model,
        timezone=timezone,
        note=note,
    )
    dispatcher = Dispatcher(chat=chat, webhook=WebhookResponder())
    access_logger = AccessLogger.from_env(access_log) if access_log else None
    return create_app(dispatcher, access_logger)


def _load_intents() -> Sequence[Intent]:
    rules_path = os.environ.get("INTENT_RULES_PATH", "config/intents.json")
    if not os.path.exists(rules_path):
        logger.warning("Intent rules not found at %s, using built-in intents", rules_path)
        return DEFAULT_INTENTS
    return load_intents_from_file(rules_path)


def create_app(
    dispatcher: Dispatcher | None = None,
    access_logger: AccessLogger | None = None,
) -> FastAPI:
    """Create the FastAPI app that hands every request to the dispatcher."""
    app = FastAPI(docs_url=None, redoc_url=None, openapi_url=None)
    dispatcher = dispatcher or Dispatcher()

    @app.api_route("/{path:path}", methods=METHODS)
    async def dispatch(request: Request, path: str) -> Response:
        started = time.monotonic()
        body = await request.body()
        descriptor = RequestDescriptor(
            method=request.method,
            path=request.url.path,
            headers={k.lower(): v for k, v in request.headers.items()},
            raw_body=body or None,
        )
        result = dispatcher.dispatch(descriptor)

        if access_logger:
            route = dispatcher.match(descriptor)
            access_logger.log(AccessEvent(
                method=descriptor.method,
                path=descriptor.path,
                status=result.status,
                route=route.name if route else None,
                duration_ms=int((time.monotonic() - started) * 1000),
            ))

        return Response(
            content=result.body.encode("utf-8"),
            status_code=result.status,
            headers=result.headers,
        )

    return app
