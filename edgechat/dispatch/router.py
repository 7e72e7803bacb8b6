"""Request dispatcher: maps a RequestDescriptor to exactly one ResponseDescriptor.

Routes are checked in order and the first match wins. Responder failures
arrive as RequestError and are turned into their error responses here, so
``dispatch`` never raises.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from edgechat.chat.responder import ChatResponder
from edgechat.dispatch.pages import index_html
from edgechat.errors import MethodNotAllowedError, RequestError
from edgechat.models import RequestDescriptor, ResponseDescriptor
from edgechat.webhook.responder import WebhookResponder

logger = logging.getLogger(__name__)

Handler = Callable[[RequestDescriptor], ResponseDescriptor]


@dataclass(frozen=True)
class Route:
    name: str
    methods: frozenset[str]
    paths: frozenset[str] | None  # None matches any path
    handler: Handler

    def matches(self, request: RequestDescriptor) -> bool:
        if request.method not in self.methods:
            return False
        return self.paths is None or request.path in self.paths


class Dispatcher:
    """Routes requests to the page, chat, webhook and preflight handlers."""

    def __init__(
        self,
        chat: ChatResponder | None = None,
        webhook: WebhookResponder | None = None,
        page_html: str | None = None,
    ) -> None:
        self._chat = chat or ChatResponder()
        self._webhook = webhook or WebhookResponder()
        self._page_html = page_html
        self.routes: tuple[Route, ...] = (
            Route("preflight", frozenset({"OPTIONS"}), None, self._preflight),
            Route("page", frozenset({"GET"}), frozenset({"/", "/index.html"}), self._page),
            Route("chat", frozenset({"POST"}), frozenset({"/api/chat"}), self._chat_post),
            Route("webhook", frozenset({"POST"}), frozenset({"/api/webhook"}), self._webhook_post),
            Route("chat_get", frozenset({"GET"}), frozenset({"/api/chat"}), self._chat_get),
        )

    def match(self, request: RequestDescriptor) -> Route | None:
        for route in self.routes:
            if route.matches(request):
                return route
        return None

    def dispatch(self, request: RequestDescriptor) -> ResponseDescriptor:
        route = self.match(request)
        if route is None:
            return ResponseDescriptor.for_text("Not Found", status=404)
        try:
            return route.handler(request)
        except RequestError as exc:
            return ResponseDescriptor.for_json(exc.payload, status=exc.status)
        except Exception:
            logger.exception("Unhandled error in %s route for %s %s",
                             route.name, request.method, request.path)
            return ResponseDescriptor.for_json({"error": "Internal server error"}, status=500)

    # --- Handlers ---

    def _preflight(self, request: RequestDescriptor) -> ResponseDescriptor:
        return ResponseDescriptor.empty(status=204, preflight=True)

    def _page(self, request: RequestDescriptor) -> ResponseDescriptor:
        document = self._page_html if self._page_html is not None else index_html()
        return ResponseDescriptor.for_html(document)

    def _chat_post(self, request: RequestDescriptor) -> ResponseDescriptor:
        return self._chat.respond(request.raw_body)

    def _webhook_post(self, request: RequestDescriptor) -> ResponseDescriptor:
        return self._webhook.respond(request.raw_body)

    def _chat_get(self, request: RequestDescriptor) -> ResponseDescriptor:
        raise MethodNotAllowedError()
