"""Tests for the request dispatcher routing table."""

from __future__ import annotations

import json
from unittest.mock import MagicMock

import pytest

from edgechat.chat.intents import GREETING_REPLY
from edgechat.chat.responder import ChatResponder
from edgechat.dispatch.router import Dispatcher
from tests.conftest import make_request


class TestPreflight:
    @pytest.mark.parametrize("path", ["/", "/api/chat", "/api/webhook", "/anything/else"])
    def test_options_any_path(self, dispatcher: Dispatcher, path: str) -> None:
        resp = dispatcher.dispatch(make_request("OPTIONS", path))
        assert resp.status == 204
        assert resp.body == ""
        assert resp.headers == {
            "Access-Control-Allow-Origin": "*",
            "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
            "Access-Control-Allow-Headers": "Content-Type, Authorization",
        }

    def test_lowercase_method_normalized(self, dispatcher: Dispatcher) -> None:
        resp = dispatcher.dispatch(make_request("options", "/api/chat"))
        assert resp.status == 204


class TestPage:
    @pytest.mark.parametrize("path", ["/", "/index.html"])
    def test_serves_html(self, dispatcher: Dispatcher, path: str) -> None:
        resp = dispatcher.dispatch(make_request("GET", path))
        assert resp.status == 200
        assert resp.headers["Content-Type"] == "text/html"
        assert resp.headers["Access-Control-Allow-Origin"] == "*"
        assert "AI Chat Interface" in resp.body

    def test_page_override(self) -> None:
        dispatcher = Dispatcher(page_html="<p>hi</p>")
        assert dispatcher.dispatch(make_request("GET", "/")).body == "<p>hi</p>"

    def test_post_to_root_not_found(self, dispatcher: Dispatcher) -> None:
        assert dispatcher.dispatch(make_request("POST", "/")).status == 404


class TestChatRoute:
    def test_greeting_scenario(self, dispatcher: Dispatcher) -> None:
        resp = dispatcher.dispatch(make_request(
            "POST", "/api/chat", {"message": "xin chào", "model": "gpt-5-nano"},
        ))
        assert resp.status == 200
        body = json.loads(resp.body)
        assert body["message"] == GREETING_REPLY
        assert body["model"] == "gpt-5-nano"

    @pytest.mark.parametrize("model", ["gpt-5-nano", "gpt-5", "gpt-4o", "custom/model-1"])
    def test_model_echoed(self, dispatcher: Dispatcher, model: str) -> None:
        resp = dispatcher.dispatch(make_request("POST", "/api/chat", {"message": "x", "model": model}))
        assert resp.status == 200
        assert json.loads(resp.body)["model"] == model

    def test_missing_message(self, dispatcher: Dispatcher) -> None:
        resp = dispatcher.dispatch(make_request("POST", "/api/chat", {"model": "gpt-5"}))
        assert resp.status == 400
        assert json.loads(resp.body) == {"error": "Message is required"}
        assert resp.headers["Access-Control-Allow-Origin"] == "*"

    def test_invalid_json(self, dispatcher: Dispatcher) -> None:
        resp = dispatcher.dispatch(make_request("POST", "/api/chat", b"{oops"))
        assert resp.status == 400
        assert json.loads(resp.body) == {"error": "Invalid JSON"}
        assert resp.headers["Content-Type"] == "application/json"

    def test_nan_body_rejected(self, dispatcher: Dispatcher) -> None:
        resp = dispatcher.dispatch(make_request("POST", "/api/chat", b'{"message": "hi", "x": NaN}'))
        assert resp.status == 400
        assert json.loads(resp.body) == {"error": "Invalid JSON"}

    def test_get_not_allowed(self, dispatcher: Dispatcher) -> None:
        resp = dispatcher.dispatch(make_request("GET", "/api/chat"))
        assert resp.status == 405
        body = json.loads(resp.body)
        assert "error" in body
        assert "POST" in body["message"]
        assert resp.headers["Access-Control-Allow-Origin"] == "*"


class TestWebhookRoute:
    def test_round_trip(self, dispatcher: Dispatcher) -> None:
        resp = dispatcher.dispatch(make_request("POST", "/api/webhook", b'{"a":1}'))
        assert resp.status == 200
        assert json.loads(resp.body)["data"] == {"a": 1}

    def test_invalid_json(self, dispatcher: Dispatcher) -> None:
        resp = dispatcher.dispatch(make_request("POST", "/api/webhook", b"<xml/>"))
        assert resp.status == 400
        assert json.loads(resp.body) == {"error": "Invalid webhook data"}

    @pytest.mark.parametrize("constant", ["NaN", "Infinity", "-Infinity"])
    def test_non_standard_constants_rejected(self, dispatcher: Dispatcher, constant: str) -> None:
        raw = f'{{"message": "hi", "x": {constant}}}'.encode()
        resp = dispatcher.dispatch(make_request("POST", "/api/webhook", raw))
        assert resp.status == 400
        assert json.loads(resp.body) == {"error": "Invalid webhook data"}
        assert "Infinity" not in resp.body

    def test_get_not_found(self, dispatcher: Dispatcher) -> None:
        assert dispatcher.dispatch(make_request("GET", "/api/webhook")).status == 404


class TestNotFound:
    @pytest.mark.parametrize(
        ("method", "path"),
        [("GET", "/unknown"), ("POST", "/api/chat/"), ("DELETE", "/api/chat"), ("PUT", "/")],
    )
    def test_unmatched(self, dispatcher: Dispatcher, method: str, path: str) -> None:
        resp = dispatcher.dispatch(make_request(method, path))
        assert resp.status == 404
        assert resp.body == "Not Found"
        assert resp.headers["Access-Control-Allow-Origin"] == "*"
        assert resp.headers["Content-Type"] == "text/plain"


class TestMatch:
    def test_route_names(self, dispatcher: Dispatcher) -> None:
        assert dispatcher.match(make_request("OPTIONS", "/x")).name == "preflight"
        assert dispatcher.match(make_request("GET", "/")).name == "page"
        assert dispatcher.match(make_request("POST", "/api/chat")).name == "chat"
        assert dispatcher.match(make_request("POST", "/api/webhook")).name == "webhook"
        assert dispatcher.match(make_request("GET", "/api/chat")).name == "chat_get"
        assert dispatcher.match(make_request("GET", "/nope")) is None


class TestFailureContainment:
    def test_unexpected_error_becomes_500(self) -> None:
        chat = MagicMock(spec=ChatResponder)
        chat.respond.side_effect = RuntimeError("boom")
        dispatcher = Dispatcher(chat=chat)

        resp = dispatcher.dispatch(make_request("POST", "/api/chat", {"message": "x"}))
        assert resp.status == 500
        assert json.loads(resp.body) == {"error": "Internal server error"}
        assert resp.headers["Access-Control-Allow-Origin"] == "*"

    def test_unexpected_error_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        chat = MagicMock(spec=ChatResponder)
        chat.respond.side_effect = RuntimeError("boom")
        dispatcher = Dispatcher(chat=chat)

        dispatcher.dispatch(make_request("POST", "/api/chat", {"message": "x"}))
        assert "Unhandled error in chat route" in caplog.text
