import pytest
from fastapi.testclient import TestClient

from taxi_relay.config import Settings
from taxi_relay.main import create_app

FIXED_NOW = 1760000000.0
FCM_RESPONSE = {"name": "projects/olah-taxi/messages/0:1760000000%abc"}


class FakeDispatcher:
    """Records payloads and answers like FCM, or raises ``error`` when set."""

    def __init__(self, response=None, error=None):
        self.response = response if response is not None else FCM_RESPONSE
        self.error = error
        self.payloads = []

    async def dispatch(self, payload):
        self.payloads.append(payload)
        if self.error is not None:
            raise self.error
        return self.response


def auth_headers(key="abc", timestamp=FIXED_NOW):
    return {"x-api-key": key, "x-timestamp": str(int(timestamp))}


@pytest.fixture
def settings():
    return Settings(api_keys="abc,def", notification_timezone="UTC", _env_file=None)


@pytest.fixture
def dispatcher():
    return FakeDispatcher()


@pytest.fixture
def client(settings, dispatcher):
    app = create_app(settings, dispatcher=dispatcher, clock=lambda: FIXED_NOW)
    return TestClient(app)
