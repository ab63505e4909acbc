"""Exceptions raised by the cache core.

- InvalidConfiguration: a cache geometry that cannot be built
- InvalidAddress: an access outside [0, array_size)

InvalidAddress is also an IndexError so callers that already guard memory
reads with `except IndexError` keep working.
"""
from typing import Optional


class CacheSimulationError(ValueError):
    """Base class for every error raised by the simulator."""


class InvalidConfiguration(CacheSimulationError):
    def __init__(self, message: str, field: Optional[str] = None, value=None):
        super().__init__(message)
        self.field = field
        self.value = value


class InvalidAddress(CacheSimulationError, IndexError):
    def __init__(self, address, array_size: int):
        super().__init__(f"address {address!r} out of range [0, {array_size - 1}]")
        self.address = address
        self.array_size = array_size


__all__ = ["CacheSimulationError", "InvalidConfiguration", "InvalidAddress"]
