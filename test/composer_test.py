from datetime import datetime, timezone

import pytest

from taxi_relay.errors import InvalidFormat, MissingField
from taxi_relay.notifications import DeviceRequest, NotificationComposer

NOW = datetime(2025, 10, 9, 8, 53, 20, tzinfo=timezone.utc)


@pytest.fixture
def request_():
    return DeviceRequest.from_body({"serial": "D1", "location": "Gate1", "type": "sedan"})


def test_compose(request_):
    payload = NotificationComposer("UTC").compose(request_, NOW)
    assert payload.title == "🚕 طلب سيارة نوع sedan"
    assert payload.body == "الجهاز ذو الرقم D1 المركب بمكان Gate1 طلب سيارة sedan في 2025/10/09 08:53:20"
    assert payload.data == {
        "serial": "D1",
        "location": "Gate1",
        "type": "sedan",
        "time": "2025/10/09 08:53:20",
    }


def test_compose_is_deterministic(request_):
    composer = NotificationComposer("UTC")
    assert composer.compose(request_, NOW) == composer.compose(request_, NOW)


def test_time_rendered_in_configured_timezone(request_):
    payload = NotificationComposer("Asia/Tokyo").compose(request_, NOW)
    assert payload.data["time"] == "2025/10/09 17:53:20"
    assert payload.body.endswith("2025/10/09 17:53:20")


def test_naive_time_treated_as_utc(request_):
    payload = NotificationComposer("UTC").compose(request_, NOW.replace(tzinfo=None))
    assert payload.data["time"] == "2025/10/09 08:53:20"


def test_to_message(request_):
    message = NotificationComposer("UTC").compose(request_, NOW).to_message("requests")
    assert message["topic"] == "requests"
    assert set(message["notification"]) == {"title", "body"}
    assert message["data"]["serial"] == "D1"


def test_device_request_from_body():
    device_request = DeviceRequest.from_body({"serial": "D1", "location": "Gate1", "type": "sedan", "extra": 1})
    assert device_request.device_id == "D1"
    assert device_request.location == "Gate1"
    assert device_request.request_type == "sedan"


@pytest.mark.parametrize("body", [
    {"location": "Gate1", "type": "sedan"},
    {"serial": "D1", "location": "", "type": "sedan"},
    {"serial": "D1", "location": "Gate1", "type": None},
    {},
    None,
    ["D1", "Gate1", "sedan"],
])
def test_device_request_missing_fields(body):
    with pytest.raises(MissingField):
        DeviceRequest.from_body(body)


def test_device_request_wrong_type():
    with pytest.raises(InvalidFormat):
        DeviceRequest.from_body({"serial": "D1", "location": {"lat": 1}, "type": "sedan"})
