"""Ordered intent table for the mock chat endpoint.

Each intent is a set of lower-case phrases plus a responder. The first
intent with a phrase found as whole words in the normalized message wins.
Date and time replies are computed from the supplied ``now``; nothing here
calls a model.
"""

from __future__ import annotations

import json
import re
import unicodedata
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta
from pathlib import Path

from edgechat.models import IntentRule

WEEKDAYS = (
    "thứ hai",
    "thứ ba",
    "thứ tư",
    "thứ năm",
    "thứ sáu",
    "thứ bảy",
    "chủ nhật",
)

WEATHER_REPLY = (
    "Tôi không thể cung cấp thông tin thời tiết thời gian thực. "
    "Bạn có thể xem ứng dụng hoặc trang web dự báo thời tiết."
)
GREETING_REPLY = "Xin chào! Tôi có thể giúp gì cho bạn?"
HELP_REPLY = (
    "Tôi có thể giúp bạn trả lời các câu hỏi về ngày tháng, thời gian "
    "và nhiều chủ đề khác. Bạn cần hỗ trợ gì?"
)
MATH_REPLY = (
    "Tôi có thể giúp với các phép tính đơn giản. "
    "Vui lòng hỏi cụ thể hơn, ví dụ: 2 + 2 bằng mấy?"
)


@dataclass(frozen=True)
class IntentContext:
    """Inputs available to a responder."""

    message: str
    model: str
    now: datetime


Responder = Callable[[IntentContext], str]


def normalize(text: str) -> str:
    return unicodedata.normalize("NFC", text).lower()


@dataclass(frozen=True)
class Intent:
    name: str
    phrases: tuple[str, ...]
    responder: Responder
    pattern: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        # Whole words only: "math" does not match inside "aftermath"
        alternatives = "|".join(re.escape(p) for p in self.phrases)
        object.__setattr__(self, "pattern", re.compile(rf"(?<!\w)(?:{alternatives})(?!\w)"))

    def matches(self, normalized_message: str) -> bool:
        return bool(self.phrases) and self.pattern.search(normalized_message) is not None

    def reply(self, context: IntentContext) -> str:
        return self.responder(context)


def days_in_month(year: int, month: int) -> int:
    """Day-of-month of the day before the first of the next month."""
    first_of_next = date(year + month // 12, month % 12 + 1, 1)
    return (first_of_next - timedelta(days=1)).day


# --- Responders ---


def weekday_reply(ctx: IntentContext) -> str:
    now = ctx.now
    return (
        f"Hôm nay là {WEEKDAYS[now.weekday()]}, "
        f"ngày {now.day} tháng {now.month} năm {now.year}"
    )


def days_in_month_reply(ctx: IntentContext) -> str:
    now = ctx.now
    return f"Tháng {now.month} có {days_in_month(now.year, now.month)} ngày"


def time_reply(ctx: IntentContext) -> str:
    return f"Bây giờ là {ctx.now.strftime('%H:%M:%S')}"


def _fixed(text: str) -> Responder:
    def _reply(ctx: IntentContext) -> str:
        return text

    return _reply


def fallback_reply(ctx: IntentContext) -> str:
    return (
        f'Tôi đã nhận được tin nhắn của bạn: "{ctx.message}". '
        f"Đây là phản hồi mô phỏng, bản triển khai thực tế sẽ gọi mô hình {ctx.model}."
    )


def _intent(name: str, phrases: Iterable[str], responder: Responder) -> Intent:
    return Intent(name, tuple(normalize(p) for p in phrases), responder)


# Order matters: "tháng này có bao nhiêu ngày" must not hit the weekday
# intent, and "thời tiết hôm nay" must not hit either date intent.
DEFAULT_INTENTS: tuple[Intent, ...] = (
    _intent("weekday", ("thứ mấy", "hôm nay là ngày", "ngày mấy", "what day"), weekday_reply),
    _intent("days_in_month", ("bao nhiêu ngày", "how many days"), days_in_month_reply),
    _intent("time", ("mấy giờ", "what time"), time_reply),
    _intent("weather", ("thời tiết", "weather"), _fixed(WEATHER_REPLY)),
    _intent("greeting", ("xin chào", "chào bạn", "hello"), _fixed(GREETING_REPLY)),
    _intent("help", ("giúp", "hỗ trợ", "help"), _fixed(HELP_REPLY)),
    _intent(
        "math",
        (
            "tính toán", "phép tính", "bằng mấy", "bằng bao nhiêu",
            "phép cộng", "phép trừ", "phép nhân", "phép chia", "calculate", "math",
        ),
        _fixed(MATH_REPLY),
    ),
)


def match_intent(intents: Sequence[Intent], message: str) -> Intent | None:
    """Return the first intent matching ``message``, or None."""
    normalized = normalize(message)
    for intent in intents:
        if intent.matches(normalized):
            return intent
    return None


def compose_reply(intents: Sequence[Intent], context: IntentContext) -> str:
    intent = match_intent(intents, context.message)
    if intent is None:
        return fallback_reply(context)
    return intent.reply(context)


def load_intents_from_file(
    path: str, base: Sequence[Intent] = DEFAULT_INTENTS,
) -> list[Intent]:
    """Load intent phrases from a JSON rules file.

    The file lists ``{"name", "phrases"}`` entries in match order. Names
    must refer to an intent in ``base``; intents omitted from the file are
    disabled.
    """
    rules_path = Path(path)
    if not rules_path.exists():
        raise FileNotFoundError(f"Intent rules file not found: {path}")
    raw = json.loads(rules_path.read_text(encoding="utf-8"))
    rules = [IntentRule.model_validate(r) for r in raw]

    known = {intent.name: intent for intent in base}
    intents: list[Intent] = []
    for rule in rules:
        if rule.name not in known:
            raise ValueError(f"Unknown intent in {path}: {rule.name}")
        phrases = tuple(normalize(p) for p in rule.phrases)
        intents.append(replace(known[rule.name], phrases=phrases))
    return intents
