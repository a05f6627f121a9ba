import os
import tempfile
from typing import Iterator

import pytest
from fastapi.testclient import TestClient

# Set test environment variables
os.environ.update(
    {
        "PORT": "3000",
        "LOG_LEVEL": "DEBUG",
        "LOG_FILE": os.path.join(tempfile.gettempdir(), "hooklog-tests", "webhooks.log"),
    }
)

from hooklog.core.config import get_settings
from hooklog.core.logs import get_event_log

# Import app modules after setting environment variables
from hooklog.main import app


class RecordingLog:
    """EventLog double keeping every emitted line in order."""

    def __init__(self):
        self.records: list[tuple[str, str]] = []

    def info(self, msg, *args, **kwargs):
        self.records.append(("INFO", msg))

    def warning(self, msg, *args, **kwargs):
        self.records.append(("WARNING", msg))

    def error(self, msg, *args, **kwargs):
        self.records.append(("ERROR", msg))

    @property
    def lines(self) -> list[str]:
        return [msg for level, msg in self.records if level == "INFO"]

    @property
    def warnings(self) -> list[str]:
        return [msg for level, msg in self.records if level == "WARNING"]


@pytest.fixture
def log() -> RecordingLog:
    return RecordingLog()


@pytest.fixture
def settings():
    return get_settings()


@pytest.fixture
def client(log) -> Iterator[TestClient]:
    """Test client whose event log is replaced by a recorder."""
    app.dependency_overrides[get_event_log] = lambda: log
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def visit_event():
    return {
        "event": "client_visit_status",
        "firedAt": "2024-05-01T08:30:00Z",
        "data": [
            {
                "client": {"firstName": "Anna", "lastName": "Nowak"},
                "service": {"name": "Yoga Flow"},
                "startsAt": "2024-05-02T18:00:00Z",
                "status": 1,
                "pricingOption": {"name": "10 Entry Pass", "remainingVisits": 7},
            }
        ],
    }


@pytest.fixture
def payment_event():
    return {
        "event": "payment_status",
        "data": {
            "user": {"firstName": "Jan", "lastName": "Kowalski", "email": "jan@example.com"},
            "orderId": "ORD-991",
            "paymentGateway": "Przelewy24",
            "orderStatus": 1,
            "purchase": {
                "totalPrice": 12000,
                "currency": "PLN",
                "items": [{"name": "Monthly Pass", "price": 12000}],
            },
        },
    }


@pytest.fixture
def client_event():
    return {
        "event": "client_created",
        "data": {
            "client": {
                "firstName": "Ola",
                "lastName": "Wiśniewska",
                "email": "ola@example.com",
                "phone": {"primaryPhone": "+48 600 100 200"},
                "uuid": "3f1c2a9e-0b7d-4c55-9a0e-2b8f5d6c7e10",
            }
        },
    }
