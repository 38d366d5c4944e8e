# cauldron_indexer/core/errors.py

from typing import Optional


class IndexerError(Exception):
    """Base class for every error raised by the indexer"""


class ConfigurationError(IndexerError):
    pass


class UnknownEntityKindError(IndexerError):
    pass


class ResolutionError(IndexerError):
    """A read-only contract call failed or reverted"""

    def __init__(self, address: str, call: str, message: Optional[str] = None):
        self.address = address
        self.call = call
        detail = f": {message}" if message else ""
        super().__init__(f"Contract call {call} failed on {address}{detail}")


class EventOrderError(IndexerError):
    """An event arrived at or before the last processed log position"""

    def __init__(self, network: str, position: tuple, last_position: tuple):
        self.network = network
        self.position = position
        self.last_position = last_position
        super().__init__(
            f"Out of order event on {network}: {position} is not after {last_position}"
        )


class ServiceResolutionError(ConfigurationError):
    """The container could not build a requested service"""
