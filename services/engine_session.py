"""
Owned, lazily loaded media engine handle.

Lifecycle: uninitialized -> loading -> ready -> in_use -> ready, or
loading -> failed. A failed session stays failed until reset().
"""
import asyncio
import importlib
import logging
from contextlib import asynccontextmanager
from enum import Enum
from typing import Callable, Optional

from services.media_engine import MediaEngine
from utils.errors import EngineBusyError, EngineLoadError

logger = logging.getLogger(__name__)

DEFAULT_ENGINE = "services.ffmpeg_engine:FFmpegEngine"


class EngineState(str, Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
    IN_USE = "in_use"
    FAILED = "failed"


def import_engine(spec: str) -> Callable[[], MediaEngine]:
    """Resolve a ``module:Class`` engine reference."""
    module_name, _, attr = spec.partition(":")
    try:
        module = importlib.import_module(module_name)
        return getattr(module, attr)
    except (ImportError, AttributeError) as e:
        raise EngineLoadError(f"Could not import engine {spec}: {e}") from e


class EngineSession:
    """
    Holds at most one engine instance.

    The engine is resolved and loaded at first use; callers arriving while a
    load is running wait for it and share its outcome. Cancelling the task
    that drives the load puts the session back to uninitialized.
    """

    def __init__(self, engine_factory: Optional[Callable[[], MediaEngine]] = None, **locators):
        self._engine_factory = engine_factory
        self._locators = locators
        self._engine: Optional[MediaEngine] = None
        self._state = EngineState.UNINITIALIZED
        self._error: Optional[BaseException] = None
        self._lock = asyncio.Lock()

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def error(self) -> Optional[BaseException]:
        return self._error

    @property
    def is_ready(self) -> bool:
        return self._state in (EngineState.READY, EngineState.IN_USE)

    def _raise_if_failed(self):
        if self._state is EngineState.FAILED:
            raise EngineLoadError(str(self._error))

    async def ensure_loaded(self) -> MediaEngine:
        if self.is_ready:
            return self._engine
        self._raise_if_failed()

        async with self._lock:
            if self.is_ready:
                return self._engine
            self._raise_if_failed()

            self._state = EngineState.LOADING
            engine = None
            try:
                factory = self._engine_factory or import_engine(DEFAULT_ENGINE)
                engine = factory()
                await engine.load(**self._locators)
            except asyncio.CancelledError:
                logger.info("Engine load cancelled")
                if engine is not None:
                    engine.terminate()
                self._state = EngineState.UNINITIALIZED
                raise
            except Exception as e:
                logger.error(f"Error loading engine: {e}")
                if engine is not None:
                    engine.terminate()
                self._error = e
                self._state = EngineState.FAILED
                if isinstance(e, EngineLoadError):
                    raise
                raise EngineLoadError(str(e)) from e

            self._engine = engine
            self._state = EngineState.READY
            return engine

    @asynccontextmanager
    async def acquire(self):
        """Exclusive use of the loaded engine for one merge."""
        engine = await self.ensure_loaded()
        if self._state is EngineState.IN_USE:
            raise EngineBusyError("A merge is already in progress")

        self._state = EngineState.IN_USE
        try:
            yield engine
        finally:
            if self._state is EngineState.IN_USE:
                self._state = EngineState.READY

    async def release(self) -> None:
        async with self._lock:
            if self._engine is not None:
                self._engine.terminate()
            self._engine = None
            self._error = None
            self._state = EngineState.UNINITIALIZED

    async def reset(self) -> None:
        """Clear a failed load so the next use tries again."""
        await self.release()
