import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Callable, Optional

from firebase_admin import credentials

from ..errors import AuthExchangeFailure

logger = logging.getLogger(__name__)


class AccessTokenProvider:
    """
    Exchanges the service account for short-lived OAuth2 access tokens.

    Tokens are cached until ``refresh_margin`` seconds before they expire.
    Refreshes are single-flight: concurrent callers that find the cache stale
    wait on one exchange instead of each starting their own.
    """

    def __init__(self,
                 credential: credentials.Base,
                 timeout: float = 5,
                 refresh_margin: float = 300,
                 clock: Callable[[], float] = time.time):
        self.credential = credential
        self.timeout = timeout
        self.refresh_margin = refresh_margin
        self.clock = clock
        self._token: Optional[str] = None
        self._expires_at: float = 0.0
        self._lock = asyncio.Lock()
        self._pending: Optional[asyncio.Future] = None
        self.exchange_count = 0

    def _is_fresh(self) -> bool:
        return self._token is not None and self.clock() < self._expires_at - self.refresh_margin

    async def get_token(self) -> str:
        """
        Return a valid access token, exchanging the service account if needed.

        Raises:
            AuthExchangeFailure: If the exchange fails or exceeds the timeout
        """
        if self._is_fresh():
            return self._token

        async with self._lock:
            # Another caller may have refreshed while we waited for the lock
            if self._is_fresh():
                return self._token

            token_info = await self._exchange()
            self._token = token_info.access_token
            self._expires_at = _expiry_timestamp(token_info.expiry)
            return self._token

    def invalidate(self) -> None:
        self._token = None
        self._expires_at = 0.0

    async def _exchange(self) -> credentials.AccessTokenInfo:
        # An exchange that outlived an earlier timeout is joined, not duplicated
        if self._pending is None:
            self.exchange_count += 1
            logger.debug(f"Starting token exchange #{self.exchange_count}")
            # get_access_token() does blocking HTTP, keep it off the event loop
            self._pending = asyncio.ensure_future(asyncio.to_thread(self.credential.get_access_token))
            self._pending.add_done_callback(_retrieve_exception)

        try:
            token_info = await asyncio.wait_for(asyncio.shield(self._pending), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            if self._pending.done():
                self._pending = None
            raise AuthExchangeFailure(f"Token exchange timed out after {self.timeout}s") from e
        except Exception as e:
            self._pending = None
            raise AuthExchangeFailure(f"Token exchange failed: {str(e)}") from e

        self._pending = None
        if not token_info.access_token:
            raise AuthExchangeFailure("Token exchange returned no access token")
        logger.debug(f"Obtained access token expiring at {token_info.expiry}")
        return token_info


def _retrieve_exception(future: asyncio.Future) -> None:
    # Mark late failures as seen when no caller is awaiting them any more
    if not future.cancelled():
        future.exception()


def _expiry_timestamp(expiry: Optional[datetime]) -> float:
    # google-auth reports expiry as a naive UTC datetime
    if expiry is None:
        return 0.0
    if expiry.tzinfo is None:
        expiry = expiry.replace(tzinfo=timezone.utc)
    return expiry.timestamp()
