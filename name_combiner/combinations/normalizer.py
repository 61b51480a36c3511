"""
Turns the raw text of a model reply into canonical, bounded GeneratedName items.

Decoding happens in two stages. `decode_candidates` is strict: the text must be
a JSON array, otherwise MalformedReply is raised. `normalize_candidates` is
lenient: every element is coerced into a GeneratedName and never rejected, so
a garbled item only degrades its own values.

Coercion rules for element fields:

    to_text                         to_number
    absent   -> "undefined"         absent   -> nan
    string   -> itself              number   -> itself
    int      -> "12345"             true     -> 1.0, false -> 0.0
    float    -> "4" / "0.00001"     null     -> 0.0
                / "1e-7" / "1e+21"
    bool     -> "true" / "false"    string   -> numeric literal value, "" -> 0.0, else nan
    null     -> "null"              array    -> nan
    array/object -> compact JSON    object   -> nan

Scores are clamped to [0.0, 5.0] (nan becomes 0.0) and rounded to one decimal
with floor(x * 10 + 0.5) / 10.
"""

import json
import math
import re
from decimal import Decimal
from typing import Any, Iterable

from loguru import logger

from name_combiner.errors import MalformedReply

from .models import GeneratedName

MIN_GOODNESS: float = 0.0
MAX_GOODNESS: float = 5.0

ABSENT: Any = object()

DECIMAL_LITERAL = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$", re.ASCII)
RADIX_LITERAL = re.compile(r"^0([xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)$")
INFINITY_LITERAL = re.compile(r"^[+-]?Infinity$")


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def to_text(value: Any = ABSENT) -> str:
    if value is ABSENT:
        return "undefined"
    if isinstance(value, str):
        return value
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _float_to_text(value)
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _float_to_text(value: float) -> str:
    """Shortest round-trip digits, laid out in fixed notation for 1e-7 <= |x| < 1e21, else exponent notation."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"

    sign: str = "-" if value < 0 else ""
    _, digit_tuple, exponent = Decimal(repr(abs(value))).as_tuple()
    digits: str = "".join(str(d) for d in digit_tuple).rstrip("0")
    exponent += len(digit_tuple) - len(digits)

    # value == 0.<digits> * 10 ** point
    point: int = exponent + len(digits)
    if len(digits) <= point <= 21:
        return sign + digits + "0" * (point - len(digits))
    if 0 < point <= 21:
        return sign + digits[:point] + "." + digits[point:]
    if -6 < point <= 0:
        return sign + "0." + "0" * -point + digits

    power: int = point - 1
    mantissa: str = digits if len(digits) == 1 else f"{digits[0]}.{digits[1:]}"
    return f"{sign}{mantissa}e{'+' if power >= 0 else '-'}{abs(power)}"


def _int_to_float(value: int) -> float:
    try:
        return float(value)
    except OverflowError:
        return math.inf if value > 0 else -math.inf


def _parse_numeric_text(text: str) -> float:
    text = text.strip()
    if not text:
        return 0.0
    if DECIMAL_LITERAL.match(text):
        return float(text)
    if INFINITY_LITERAL.match(text):
        return -math.inf if text.startswith("-") else math.inf
    if RADIX_LITERAL.match(text):
        return _int_to_float(int(text, 0))
    return math.nan


def to_number(value: Any = ABSENT) -> float:
    if value is ABSENT:
        return math.nan
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, int):
        return _int_to_float(value)
    if isinstance(value, float):
        return value
    if isinstance(value, str):
        return _parse_numeric_text(value)
    return math.nan


def clamp_goodness(value: float) -> float:
    if math.isnan(value):
        return MIN_GOODNESS
    return min(MAX_GOODNESS, max(MIN_GOODNESS, value))


def round_goodness(value: float) -> float:
    return math.floor(value * 10 + 0.5) / 10


def decode_candidates(raw_text: str) -> list[Any]:
    """Parse raw model text, requiring a JSON array at the top level"""
    try:
        data: Any = json.loads(raw_text, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as e:
        logger.warning(f"Model reply is not valid JSON: {type(e).__name__}: {e}")
        raise MalformedReply() from e

    if not isinstance(data, list):
        logger.warning(f"Model reply is JSON but not a list: {type(data).__name__}")
        raise MalformedReply()

    return data


def normalize_candidate(item: Any) -> GeneratedName:
    fields: dict[str, Any] = item if isinstance(item, dict) else {}
    goodness: float = to_number(fields.get("goodness", ABSENT))
    return GeneratedName(
        name=to_text(fields.get("name", ABSENT)),
        goodness=round_goodness(clamp_goodness(goodness)),
    )


def normalize_candidates(items: Iterable[Any]) -> list[GeneratedName]:
    return [normalize_candidate(item) for item in items]


def parse_name_combinations(raw_text: str) -> list[GeneratedName]:
    """Decode and normalize a raw model reply. Raises MalformedReply only."""
    return normalize_candidates(decode_candidates(raw_text))
