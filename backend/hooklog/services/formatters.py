"""
Formatters turning one event payload into readable log lines.

Each formatter takes the raw ``data`` value of a webhook event and an
``EventLog``. Missing fields fall back to placeholders; a payload of the
wrong shape is reported with a warning and produces no lines.
"""

from collections.abc import Mapping
from typing import Any

from hooklog.core.logs import EventLog
from hooklog.schemas.ingest import ClientRecord, PaymentRecord, VisitRecord
from hooklog.services.fields import (
    UNKNOWN_TIME,
    InvalidTimestamp,
    format_price,
    format_timestamp,
    is_number,
    label_for,
    pluck,
)

VISIT_STATUSES = {
    0: "Booked",
    1: "Checked-in",
    2: "Completed",
}

ORDER_STATUSES = {
    0: "Payment Initiated",
    1: "Payment Completed",
}
ORDER_COMPLETED = 1

AGREEMENTS = (
    ("termsOfUse", "Terms of Use"),
    ("privacyPolicy", "Privacy Policy"),
    ("newsletter", "Newsletter"),
)

DEFAULT_CURRENCY = "PLN"


def _full_name(record: Any, prefix: str) -> str:
    first = pluck(record, f"{prefix}.firstName", "Unknown")
    last = pluck(record, f"{prefix}.lastName", "User")
    return f"{first} {last}"


def format_visit_status(data: list[VisitRecord], log: EventLog) -> None:
    if not isinstance(data, list) or not data:
        log.warning("Visit status event has no visit records")
        return

    visit = data[0]
    name = _full_name(visit, "client")
    service = pluck(visit, "service.name", "Unknown Service")

    starts_at = pluck(visit, "startsAt")
    start_time = UNKNOWN_TIME
    if starts_at is not None:
        try:
            start_time = format_timestamp(starts_at)
        except InvalidTimestamp as e:
            log.warning(f"Could not parse visit start time: {e}")

    status = label_for(pluck(visit, "status"), VISIT_STATUSES, "Status {code}")
    pricing = pluck(visit, "pricingOption.name", "No pricing info")
    remaining = pluck(visit, "pricingOption.remainingVisits")

    log.info(f"Visit: {name} - {service} at {start_time}")
    status_line = f"Status: {status} | Pricing: {pricing}"
    if remaining is not None:
        status_line += f" | Remaining visits: {remaining}"
    log.info(status_line)

    if pluck(visit, "isWaitingList"):
        position = pluck(visit, "waitingListPosition", "Unknown")
        log.info(f"Waiting list position: {position}")


def _format_items(items: Any, currency: str) -> str:
    if not isinstance(items, list) or not items:
        return "No items"
    rendered = []
    for item in items:
        item_name = pluck(item, "name", "Unknown item")
        item_price = format_price(pluck(item, "price"))
        item_currency = pluck(item, "currency", currency)
        rendered.append(f"{item_name} ({item_price} {item_currency})")
    return ", ".join(rendered)


def format_payment_status(data: PaymentRecord, log: EventLog) -> None:
    if not isinstance(data, Mapping):
        log.warning("Payment status event payload is not an object")
        return

    name = _full_name(data, "user")
    email = pluck(data, "user.email", "No email")
    order_id = pluck(data, "orderId", "No order ID")
    gateway = pluck(data, "paymentGateway", "Unknown gateway")
    order_status = pluck(data, "orderStatus")
    status = label_for(order_status, ORDER_STATUSES, "Payment Status {code}")

    log.info(f"{status}: {name} ({email})")
    log.info(f"Gateway: {gateway} | Order: {order_id}")

    purchase = pluck(data, "purchase")
    completed = is_number(order_status) and order_status == ORDER_COMPLETED
    if not isinstance(purchase, Mapping) or not completed:
        return

    currency = pluck(purchase, "currency", DEFAULT_CURRENCY)
    total = format_price(pluck(purchase, "totalPrice"))
    items = _format_items(pluck(purchase, "items"), currency)
    log.info(f"Total: {total} {currency} | Items: {items}")

    discount = pluck(purchase, "discountAmount")
    if is_number(discount) and discount > 0:
        log.info(f"Discount: {format_price(discount)} {currency}")


def format_client_created(data: ClientRecord, log: EventLog) -> None:
    if not isinstance(data, Mapping):
        log.warning("Client created event payload is not an object")
        return

    name = _full_name(data, "client")
    email = pluck(data, "client.email", "No email")
    phone = pluck(data, "client.phone.primaryPhone", "No phone")
    uuid = pluck(data, "client.uuid", "No UUID")

    log.info(f"New client registered: {name}")
    log.info(f"Contact: {email} | Phone: {phone}")
    log.info(f"Client ID: {uuid}")

    agreements = pluck(data, "client.agreements")
    if isinstance(agreements, Mapping):
        accepted = [label for key, label in AGREEMENTS if agreements.get(key)]
        log.info(f"Agreements: {', '.join(accepted) if accepted else 'None'}")
