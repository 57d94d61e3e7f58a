import logging
from typing import Any, Dict, Protocol

import httpx

from .token_provider import AccessTokenProvider
from ..errors import BackendRejected
from ..notifications.schemas import NotificationPayload

logger = logging.getLogger(__name__)


class Dispatcher(Protocol):
    async def dispatch(self, payload: NotificationPayload) -> Dict[str, Any]:
        ...


class FcmDispatcher:
    """Sends notifications to an FCM topic through the HTTP v1 API. One attempt per call."""

    def __init__(self,
                 token_provider: AccessTokenProvider,
                 project_id: str,
                 http_client: httpx.AsyncClient,
                 topic: str = "requests",
                 base_url: str = "https://fcm.googleapis.com",
                 timeout: float = 10):
        self.token_provider = token_provider
        self.project_id = project_id
        self.http_client = http_client
        self.topic = topic
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout

    @property
    def send_url(self) -> str:
        return f"{self.base_url}/v1/projects/{self.project_id}/messages:send"

    async def dispatch(self, payload: NotificationPayload) -> Dict[str, Any]:
        """
        Exchange credentials for an access token and send the payload.

        Args:
            payload: The composed notification

        Returns:
            The decoded FCM response body

        Raises:
            AuthExchangeFailure: If no access token could be obtained
            BackendRejected: If FCM answers with a non-2xx status or a body
                that is not JSON, or the send fails or times out
        """
        token = await self.token_provider.get_token()
        message = {"message": payload.to_message(self.topic)}

        try:
            response = await self.http_client.post(
                self.send_url,
                json=message,
                headers={"Authorization": f"Bearer {token}"},
                timeout=self.timeout,
            )
        except httpx.TimeoutException as e:
            raise BackendRejected(f"FCM send timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            raise BackendRejected(f"FCM send failed: {str(e)}") from e

        if response.status_code == 401:
            # Token was revoked or expired early, exchange again next time
            self.token_provider.invalidate()

        if not response.is_success:
            raise BackendRejected(
                f"FCM rejected message with status {response.status_code}: {response.text}",
                status=response.status_code,
                body=response.text,
            )

        try:
            result = response.json()
        except ValueError as e:
            raise BackendRejected(
                f"FCM returned a non-JSON body: {response.text}",
                status=response.status_code,
                body=response.text,
            ) from e

        logger.info(f"FCM response: {result}")
        return result

    async def aclose(self) -> None:
        await self.http_client.aclose()
