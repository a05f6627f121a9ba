from collections.abc import Callable
from typing import Any

from pydantic import ValidationError

from hooklog.core.logs import EventLog
from hooklog.schemas.ingest import WebhookEvent
from hooklog.services.fields import InvalidTimestamp, format_timestamp
from hooklog.services.formatters import (
    format_client_created,
    format_payment_status,
    format_visit_status,
)

SEPARATOR = "=" * 50

Formatter = Callable[[Any, EventLog], None]

FORMATTERS: dict[str, Formatter] = {
    "client_visit_status": format_visit_status,
    "payment_status": format_payment_status,
    "client_created": format_client_created,
}


class InvalidWebhookFormat(Exception):
    pass


def dispatch_event(event: WebhookEvent, log: EventLog) -> None:
    """Log one event through the formatter registered for its tag."""
    if event.fired_at is not None:
        try:
            log.info(f"Fired at: {format_timestamp(event.fired_at)}")
        except InvalidTimestamp as e:
            log.warning(f"Could not parse firedAt: {e}")

    formatter = FORMATTERS.get(event.event) if isinstance(event.event, str) else None
    if formatter is None:
        log.info(f"Unknown event type: {event.event}")
    else:
        formatter(event.data, log)

    log.info(SEPARATOR)


def process_batch(payload: Any, log: EventLog) -> int:
    """
    Dispatch every element of the envelope in order.

    Malformed elements are skipped with a warning but still counted; the
    return value is always the envelope length.
    """
    if not isinstance(payload, list):
        raise InvalidWebhookFormat("Webhook payload must be an array of events")

    for index, raw in enumerate(payload):
        try:
            event = WebhookEvent.model_validate(raw)
        except ValidationError:
            log.warning(f"Skipping malformed event at index {index}: missing event or data")
            continue
        dispatch_event(event, log)

    return len(payload)
