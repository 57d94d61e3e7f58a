from .store import BlockList, InMemoryBlockList, validate_block_list

__all__ = ["BlockList", "InMemoryBlockList", "validate_block_list"]
