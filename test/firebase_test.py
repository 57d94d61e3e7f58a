import asyncio
import json

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from taxi_relay.config import Settings
from taxi_relay.firebase import build_dispatcher, load_service_account, resolve_project_id


@pytest.fixture(scope="module")
def service_account_info():
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_key = key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    ).decode()
    return {
        "type": "service_account",
        "project_id": "olah",
        "private_key_id": "0123456789abcdef",
        "private_key": private_key,
        "client_email": "relay@olah.iam.gserviceaccount.com",
        "client_id": "1234567890",
        "token_uri": "https://oauth2.googleapis.com/token",
    }


def make_settings(**kwargs):
    return Settings(api_keys="abc", _env_file=None, **kwargs)


def test_load_from_secret(service_account_info):
    cred = load_service_account(make_settings(firebase_secret=json.dumps(service_account_info)))
    assert cred.project_id == "olah"
    assert cred.service_account_email == "relay@olah.iam.gserviceaccount.com"


def test_load_from_double_encoded_secret(service_account_info):
    secret = json.dumps(json.dumps(service_account_info))
    cred = load_service_account(make_settings(firebase_secret=secret))
    assert cred.project_id == "olah"


def test_load_from_file(tmp_path, service_account_info):
    path = tmp_path / "service-account.json"
    path.write_text(json.dumps(service_account_info))
    cred = load_service_account(make_settings(firebase_credentials_file=str(path)))
    assert cred.project_id == "olah"
    assert cred.service_account_email == "relay@olah.iam.gserviceaccount.com"


def test_secret_takes_precedence_over_file(tmp_path, service_account_info):
    path = tmp_path / "service-account.json"
    path.write_text(json.dumps({**service_account_info, "project_id": "from-file"}))
    settings = make_settings(firebase_secret=json.dumps(service_account_info), firebase_credentials_file=str(path))
    assert load_service_account(settings).project_id == "olah"


def test_resolve_project_id(service_account_info):
    cred = load_service_account(make_settings(firebase_secret=json.dumps(service_account_info)))
    assert resolve_project_id(make_settings(), cred) == "olah"
    assert resolve_project_id(make_settings(fcm_project_id="olah-staging"), cred) == "olah-staging"


def test_resolve_project_id_missing(service_account_info):
    info = {k: v for k, v in service_account_info.items() if k != "project_id"}
    cred = load_service_account(make_settings(firebase_secret=json.dumps(info)))
    with pytest.raises(ValueError, match="FCM_PROJECT_ID"):
        resolve_project_id(make_settings(), cred)
    assert resolve_project_id(make_settings(fcm_project_id="olah"), cred) == "olah"


def test_build_dispatcher(service_account_info):
    settings = make_settings(firebase_secret=json.dumps(json.dumps(service_account_info)))
    dispatcher = build_dispatcher(settings)
    try:
        assert dispatcher.send_url == "https://fcm.googleapis.com/v1/projects/olah/messages:send"
        assert dispatcher.topic == "requests"
        assert dispatcher.timeout == settings.send_timeout
        assert dispatcher.token_provider.timeout == settings.token_exchange_timeout
    finally:
        asyncio.run(dispatcher.aclose())


def test_build_dispatcher_with_overrides(service_account_info):
    settings = make_settings(
        firebase_secret=json.dumps(service_account_info),
        fcm_project_id="olah-staging",
        fcm_topic="night-shift",
        fcm_base_url="http://fcm.local/",
    )
    dispatcher = build_dispatcher(settings)
    try:
        assert dispatcher.send_url == "http://fcm.local/v1/projects/olah-staging/messages:send"
        assert dispatcher.topic == "night-shift"
    finally:
        asyncio.run(dispatcher.aclose())
