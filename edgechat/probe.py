"""Smoke scenarios run against a live edgechat deployment."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import httpx

from edgechat.chat.intents import GREETING_REPLY

logger = logging.getLogger(__name__)

Check = Callable[[httpx.Response], bool]


@dataclass(frozen=True)
class ProbeCase:
    name: str
    method: str
    path: str
    expected_status: int
    body: Any = None
    check: Check | None = None


@dataclass(frozen=True)
class ProbeResult:
    case: ProbeCase
    passed: bool
    status: int | None
    detail: str


def _message_contains(fragment: str) -> Check:
    def _check(resp: httpx.Response) -> bool:
        return fragment in resp.json().get("message", "")

    return _check


def _chat(name: str, message: str, fragment: str) -> ProbeCase:
    return ProbeCase(
        name=name,
        method="POST",
        path="/api/chat",
        expected_status=200,
        body={"message": message, "model": "gpt-5-nano"},
        check=_message_contains(fragment),
    )


_WEBHOOK_PAYLOAD = {"message": "Webhook probe", "model": "gpt-5-nano", "n": 1}

DEFAULT_CASES: tuple[ProbeCase, ...] = (
    ProbeCase("page", "GET", "/", 200,
              check=lambda r: "AI Chat Interface" in r.text),
    ProbeCase("preflight", "OPTIONS", "/api/chat", 204,
              check=lambda r: r.headers.get("access-control-allow-origin") == "*"),
    _chat("weekday", "hôm nay là thứ mấy", "Hôm nay là"),
    _chat("days in month", "tháng này có bao nhiêu ngày", "Tháng"),
    _chat("time", "mấy giờ rồi", "Bây giờ là"),
    _chat("greeting", "xin chào", GREETING_REPLY),
    _chat("help", "bạn có thể giúp tôi không", "Tôi có thể giúp bạn"),
    _chat("weather", "thời tiết hôm nay thế nào", "Tôi không thể cung cấp thông tin thời tiết"),
    _chat("math", "bạn có thể tính toán không", "Tôi có thể giúp với các phép tính"),
    _chat("general", "tôi muốn biết thông tin về AI", "Tôi đã nhận được tin nhắn của bạn"),
    ProbeCase("missing message", "POST", "/api/chat", 400, body={"model": "gpt-5-nano"},
              check=lambda r: r.json().get("error") == "Message is required"),
    ProbeCase("chat via GET", "GET", "/api/chat", 405,
              check=lambda r: "error" in r.json()),
    ProbeCase("webhook echo", "POST", "/api/webhook", 200, body=_WEBHOOK_PAYLOAD,
              check=lambda r: r.json().get("data") == _WEBHOOK_PAYLOAD),
    ProbeCase("unknown path", "GET", "/unknown", 404),
)


def run_case(client: httpx.Client, case: ProbeCase) -> ProbeResult:
    try:
        resp = client.request(case.method, case.path, json=case.body)
    except httpx.HTTPError as exc:
        return ProbeResult(case, False, None, f"request failed: {exc}")

    if resp.status_code != case.expected_status:
        return ProbeResult(
            case, False, resp.status_code,
            f"expected {case.expected_status}, got {resp.status_code}",
        )
    if case.check is not None:
        try:
            ok = case.check(resp)
        except ValueError:  # non-JSON body
            ok = False
        if not ok:
            return ProbeResult(case, False, resp.status_code, f"unexpected body: {resp.text[:200]}")
    return ProbeResult(case, True, resp.status_code, "ok")


def run_probe(
    client: httpx.Client, cases: tuple[ProbeCase, ...] = DEFAULT_CASES,
) -> list[ProbeResult]:
    results = [run_case(client, case) for case in cases]
    failed = [r.case.name for r in results if not r.passed]
    if failed:
        logger.warning("Probe failures: %s", ", ".join(failed))
    return results
