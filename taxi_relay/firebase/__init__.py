import httpx

from .dispatcher import Dispatcher, FcmDispatcher
from .firebase import load_service_account, resolve_project_id
from .token_provider import AccessTokenProvider
from ..config import Settings


def build_dispatcher(settings: Settings) -> FcmDispatcher:
    cred = load_service_account(settings)
    token_provider = AccessTokenProvider(
        cred,
        timeout=settings.token_exchange_timeout,
        refresh_margin=settings.token_refresh_margin,
    )
    return FcmDispatcher(
        token_provider,
        project_id=resolve_project_id(settings, cred),
        http_client=httpx.AsyncClient(),
        topic=settings.fcm_topic,
        base_url=settings.fcm_base_url,
        timeout=settings.send_timeout,
    )


__all__ = [
    "AccessTokenProvider",
    "Dispatcher",
    "FcmDispatcher",
    "build_dispatcher",
    "load_service_account",
    "resolve_project_id",
]
