"""
Capability interface for media engines.

The merge flow only needs five operations from an engine: load it, put a
named buffer into its file system, run a command, read a named buffer back,
and release it. Any engine offering these can back a merge session.
"""
from abc import ABC, abstractmethod
from typing import List


class MediaEngine(ABC):

    @abstractmethod
    async def load(self, **locators) -> None:
        """Initialize the engine from its resource locators."""

    @abstractmethod
    async def write_file(self, name: str, data: bytes) -> None:
        ...

    @abstractmethod
    async def exec(self, args: List[str]) -> None:
        """Run one engine command. Raises MixExecutionError on failure."""

    @abstractmethod
    async def read_file(self, name: str) -> bytes:
        ...

    @abstractmethod
    def terminate(self) -> None:
        """Release every resource held by the engine."""
