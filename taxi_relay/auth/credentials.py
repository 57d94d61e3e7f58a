import hmac
from typing import Iterable


class CredentialStore:
    """Read-only set of device API keys."""

    def __init__(self, keys: Iterable[str]):
        self._keys = frozenset(keys)
        if not self._keys:
            raise ValueError("CredentialStore needs at least one API key")

    def __contains__(self, presented: str) -> bool:
        # Compare against every key so timing does not reveal which one matched.
        presented_bytes = presented.encode("utf-8")
        found = False
        for key in self._keys:
            if hmac.compare_digest(presented_bytes, key.encode("utf-8")):
                found = True
        return found

    def __len__(self) -> int:
        return len(self._keys)
