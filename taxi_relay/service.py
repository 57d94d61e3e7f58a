import logging
import time
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from .auth import AuthGate
from .blocklist import BlockList, validate_block_list
from .errors import DeviceBlocked, DispatchError, InvalidFormat
from .firebase.dispatcher import Dispatcher
from .notifications import DeviceRequest, NotificationComposer

logger = logging.getLogger(__name__)


class RelayService:
    """
    Relays authenticated device requests to FCM.

    Each request goes through field validation, the auth gate, the block
    list check, composition and a single dispatch attempt. Every rejection
    is raised as a RelayError subclass carrying its HTTP status.
    """

    def __init__(self,
                 auth_gate: AuthGate,
                 block_list: BlockList,
                 composer: NotificationComposer,
                 dispatcher: Dispatcher,
                 clock: Callable[[], float] = time.time):
        self.auth_gate = auth_gate
        self.block_list = block_list
        self.composer = composer
        self.dispatcher = dispatcher
        self.clock = clock

    async def handle_request(self,
                             api_key: Optional[str],
                             timestamp: Optional[str],
                             body: Any) -> Dict[str, Any]:
        """
        Validate a device request and forward it as a topic notification.

        Args:
            api_key: The ``x-api-key`` header
            timestamp: The ``x-timestamp`` header
            body: The decoded JSON body, expected to hold serial, location and type

        Returns:
            dict: ``{"ok": True, "fcm": <FCM response>}``

        Raises:
            MissingField, InvalidFormat: 400
            MissingCredential, MalformedTimestamp: 400
            UnknownKey, StaleTimestamp: 401
            DeviceBlocked: 403
            AuthExchangeFailure, BackendRejected: 500
        """
        device_request = DeviceRequest.from_body(body)

        decision = self.auth_gate.admit(api_key, timestamp)
        if not decision.allowed:
            raise decision.reason

        if self.block_list.is_blocked(device_request.device_id):
            logger.warning(f"Device {device_request.device_id} is blocked, request rejected")
            raise DeviceBlocked(f"Device {device_request.device_id} is blocked")

        now = datetime.fromtimestamp(self.clock(), tz=timezone.utc)
        payload = self.composer.compose(device_request, now)

        try:
            result = await self.dispatcher.dispatch(payload)
        except DispatchError as e:
            logger.error(f"Dispatch failed for device {device_request.device_id}: "
                         f"{type(e).__name__}: {str(e)}")
            raise

        logger.info(f"Relayed {device_request.request_type} request from device "
                    f"{device_request.device_id} at {device_request.location}")
        return {"ok": True, "fcm": result}

    def handle_block_list_update(self, body: Any) -> None:
        """
        Replace the whole block list with ``body["list"]``.

        Raises:
            InvalidFormat: If the body is not an object whose ``list`` is a list of strings
        """
        if not isinstance(body, dict):
            raise InvalidFormat("Block list update body is not an object")
        self.block_list.replace(list(validate_block_list(body.get("list"))))
