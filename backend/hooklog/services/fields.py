import math
from collections.abc import Mapping
from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

UNKNOWN_TIME = "Unknown time"
TIME_FORMAT = "%Y-%m-%d %H:%M:%S"

_CENTS = Decimal("0.01")


class InvalidTimestamp(ValueError):
    pass


def pluck(payload: Any, path: str, default: Any = None) -> Any:
    """
    Walk ``path`` (dot separated) through nested mappings and lists.

    Returns ``default`` as soon as a link is missing, ``None`` or not a
    container. Integer segments index into lists.
    """
    current = payload
    for key in path.split("."):
        if isinstance(current, Mapping):
            current = current.get(key)
        elif isinstance(current, (list, tuple)):
            try:
                current = current[int(key)]
            except (ValueError, IndexError):
                return default
        else:
            return default
        if current is None:
            return default
    return current


def is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def format_price(value: Any) -> str:
    """Minor currency units (cents) to a two decimal string, "0.00" if not numeric."""
    if not is_number(value):
        return "0.00"
    try:
        amount = Decimal(str(value)) / 100
        # adding zero drops the sign of a negative zero
        return str(amount.quantize(_CENTS, rounding=ROUND_HALF_UP) + 0)
    except InvalidOperation:
        # beyond decimal precision, float formatting is close enough
        return f"{value / 100:.2f}"


def parse_timestamp(value: Any) -> datetime:
    """
    Numbers are epoch milliseconds, strings are ISO 8601 (a trailing ``Z``
    and ``+0200`` style offsets are accepted). Naive values are taken as UTC.
    """
    if is_number(value):
        try:
            return datetime.fromtimestamp(value / 1000, tz=UTC)
        except (OverflowError, OSError, ValueError) as e:
            raise InvalidTimestamp(f"Timestamp out of range: {value!r}") from e

    if not isinstance(value, str) or not value.strip():
        raise InvalidTimestamp(f"Not a timestamp: {value!r}")

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    elif len(text) > 5 and text[-5] in "+-" and text[-4:].isdigit() and "T" in text:
        # -0400 -> -04:00
        text = f"{text[:-2]}:{text[-2:]}"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise InvalidTimestamp(f"Invalid timestamp: {value!r}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def format_timestamp(value: Any) -> str:
    return parse_timestamp(value).strftime(TIME_FORMAT)


def label_for(code: Any, labels: Mapping[int, str], unknown: str) -> str:
    """Look ``code`` up in ``labels``; unknown codes render through ``unknown``."""
    if is_number(code) and code in labels:
        return labels[code]
    return unknown.format(code="Unknown" if code is None else code)
