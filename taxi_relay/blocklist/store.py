import logging
from typing import Any, Iterable, List, Protocol, Tuple

from ..errors import InvalidFormat

logger = logging.getLogger(__name__)


class BlockList(Protocol):
    """Device identifiers whose requests are administratively rejected."""

    def is_blocked(self, device_id: str) -> bool:
        ...

    def replace(self, new_list: Iterable[str]) -> None:
        ...


class InMemoryBlockList:
    """
    Block list held in process memory.

    The entries live in an immutable tuple that replace() swaps in a single
    assignment, so a request sees either the old list or the new one, never a
    mix of both. Nothing survives a restart.
    """

    def __init__(self, initial: Iterable[str] = ()):
        self._entries: Tuple[str, ...] = ()
        if initial:
            self.replace(list(initial))

    def is_blocked(self, device_id: str) -> bool:
        return device_id in self._entries

    def replace(self, new_list: Any) -> None:
        entries = validate_block_list(new_list)
        self._entries = entries
        logger.info(f"Blocked list updated: {self.snapshot()}")

    def snapshot(self) -> List[str]:
        return list(self._entries)


def validate_block_list(new_list: Any) -> Tuple[str, ...]:
    """Return ``new_list`` as a tuple, or raise InvalidFormat unless it is a list of strings."""
    if not isinstance(new_list, (list, tuple)):
        raise InvalidFormat(f"Expected a list of device ids, got {type(new_list).__name__}")
    for entry in new_list:
        if not isinstance(entry, str):
            raise InvalidFormat(f"Device id {entry!r} is not a string")
    return tuple(new_list)
