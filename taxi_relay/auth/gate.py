import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from .credentials import CredentialStore
from .replay import check_freshness, parse_timestamp
from ..errors import AuthError, MissingCredential, UnknownKey

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Decision:
    """Outcome of an admission check. ``reason`` is set only on rejection."""
    reason: Optional[AuthError] = None

    @property
    def allowed(self) -> bool:
        return self.reason is None


ALLOW = Decision()


class AuthGate:
    """
    Admission check for device requests: a known API key plus a timestamp
    within the replay window.

    Stateless apart from reading the credential store and the clock, so it
    is safe to share between concurrent requests.
    """

    def __init__(self,
                 credentials: CredentialStore,
                 window: float = 60,
                 clock: Callable[[], float] = time.time):
        self.credentials = credentials
        self.window = window
        self.clock = clock

    def admit(self, presented_key: Optional[str], presented_timestamp: Optional[str]) -> Decision:
        """
        Decide whether a request carrying these auth headers may proceed.

        Args:
            presented_key: Value of the ``x-api-key`` header
            presented_timestamp: Value of the ``x-timestamp`` header, seconds since epoch

        Returns:
            ALLOW, or a Decision whose reason is one of MissingCredential,
            UnknownKey, MalformedTimestamp or StaleTimestamp
        """
        try:
            self.verify(presented_key, presented_timestamp)
        except AuthError as e:
            logger.info(f"Rejected device credentials: {type(e).__name__}: {e}")
            return Decision(reason=e)
        return ALLOW

    def verify(self, presented_key: Optional[str], presented_timestamp: Optional[str]) -> None:
        """Same check as admit(), raising the rejection instead of returning it."""
        if not presented_key or not presented_timestamp:
            raise MissingCredential()
        if presented_key not in self.credentials:
            raise UnknownKey()

        timestamp = parse_timestamp(presented_timestamp)
        check_freshness(timestamp, self.clock(), self.window)
