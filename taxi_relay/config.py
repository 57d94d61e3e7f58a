from functools import lru_cache
from typing import Optional, Set

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration settings for the taxi request relay"""

    # Application settings
    service_name: str = "taxi-relay"
    log_level: str = "INFO"
    environment: str = "DEV"
    path_prefix: str = ''
    host: str = "0.0.0.0"
    port: int = 3000

    # Device authentication
    api_keys: str
    allowed_window_sec: float = 60  # seconds

    # Firebase service account
    firebase_secret: Optional[str] = None
    firebase_credentials_file: str = "service-account.json"
    fcm_project_id: Optional[str] = None

    # FCM delivery settings
    fcm_base_url: str = "https://fcm.googleapis.com"
    fcm_topic: str = "requests"
    token_exchange_timeout: float = 5  # seconds
    send_timeout: float = 10  # seconds
    token_refresh_margin: float = 300  # refresh this many seconds before expiry

    # Notification rendering
    notification_timezone: str = "Asia/Damascus"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @field_validator("api_keys")
    @classmethod
    def _require_api_keys(cls, value: str) -> str:
        if not parse_api_keys(value):
            raise ValueError("API_KEYS is empty. Set a comma separated list of device keys.")
        return value

    @field_validator("environment")
    @classmethod
    def _check_environment(cls, value: str) -> str:
        env = value.upper()
        if env not in ['DEV', 'PROD']:
            raise ValueError("ENVIRONMENT must be either 'DEV' or 'PROD'")
        return env

    @property
    def api_key_set(self) -> Set[str]:
        return parse_api_keys(self.api_keys)

    def is_prod_environment(self) -> bool:
        return self.environment == 'PROD'


def parse_api_keys(raw: str) -> Set[str]:
    return {key.strip() for key in raw.split(",") if key.strip()}


@lru_cache()
def get_settings() -> Settings:
    return Settings()


def get_prefix(path_prefix: str, api_version: str = '') -> str:
    if not path_prefix.startswith('/'):
        path_prefix = f'/{path_prefix}'
    if path_prefix.endswith('/'):
        path_prefix = path_prefix.rstrip('/')
    return f'{path_prefix}{api_version}'
