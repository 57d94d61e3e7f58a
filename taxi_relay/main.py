import logging
import time
from typing import Callable, Optional

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from .auth import AuthGate, CredentialStore
from .blocklist import BlockList, InMemoryBlockList
from .config import Settings, get_prefix, get_settings
from .errors import RelayError
from .firebase import Dispatcher, build_dispatcher
from .notifications import NotificationComposer
from .routers import all_router
from .service import RelayService

logger = logging.getLogger(__name__)

LIVENESS_MESSAGE = "OLAH bestel taxi server running ✅"


def create_app(settings: Optional[Settings] = None,
               dispatcher: Optional[Dispatcher] = None,
               block_list: Optional[BlockList] = None,
               clock: Callable[[], float] = time.time) -> FastAPI:
    """
    Build the relay application.

    Collaborators default to the production ones built from ``settings``;
    tests pass fakes for the dispatcher, block list and clock.
    """
    settings = settings or get_settings()
    credentials = CredentialStore(settings.api_key_set)
    dispatcher = dispatcher or build_dispatcher(settings)

    relay_service = RelayService(
        auth_gate=AuthGate(credentials, window=settings.allowed_window_sec, clock=clock),
        block_list=block_list if block_list is not None else InMemoryBlockList(),
        composer=NotificationComposer(settings.notification_timezone),
        dispatcher=dispatcher,
        clock=clock,
    )

    prefix = get_prefix(settings.path_prefix)
    logger.info(f"Start HTTP server with prefix: {prefix!r}, {len(credentials)} API key(s), "
                f"replay window {settings.allowed_window_sec}s")

    app = FastAPI(root_path=prefix, title="Taxi Request Relay", version="1.0.0")
    app.state.settings = settings
    app.state.relay_service = relay_service

    @app.exception_handler(RelayError)
    async def relay_error_handler(request: Request, exc: RelayError):
        return PlainTextResponse(exc.detail, status_code=exc.status_code)

    @app.get("/", response_class=PlainTextResponse, tags=["Health"])
    async def liveness():
        return LIVENESS_MESSAGE

    for router in all_router:
        app.include_router(router)

    @app.on_event("shutdown")
    async def shutdown_event():
        aclose = getattr(dispatcher, "aclose", None)
        if aclose is not None:
            await aclose()
            logger.info("Closed FCM HTTP client")

    return app
