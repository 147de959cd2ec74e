"""Background task that periodically sweeps expired records."""

import asyncio
import logging
from typing import Optional

from .engine import SessionCacheEngine

logger = logging.getLogger(__name__)

DEFAULT_CLEANUP_INTERVAL = 300


class CleanupTask:
    """
    Cancelable periodic cleanup loop.

    Usage:
        async with CleanupTask(engine, interval=300):
            ...  # engine is swept every 5 minutes until the block exits
    """

    def __init__(self, engine: SessionCacheEngine, interval: float = DEFAULT_CLEANUP_INTERVAL):
        if interval <= 0:
            raise ValueError(f"cleanup interval must be positive, got {interval}")
        self.engine = engine
        self.interval = interval
        self._stop = asyncio.Event()
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start the loop on the running event loop. No-op if already running."""
        if self.running:
            return
        self._stop.clear()
        self._task = asyncio.create_task(self._run(), name="rauth-session-cleanup")
        logger.info(f"Session cleanup scheduled every {self.interval}s")

    async def stop(self) -> None:
        """Signal the loop to exit and wait for it."""
        if self._task is None:
            return
        self._stop.set()
        try:
            await self._task
        finally:
            self._task = None
        logger.info("Session cleanup stopped")

    async def _run(self) -> None:
        while not self._stop.is_set():
            try:
                await asyncio.wait_for(self._stop.wait(), timeout=self.interval)
                break
            except asyncio.TimeoutError:
                pass

            try:
                await self.engine.cleanup()
            except Exception as e:
                logger.error(f"Session cleanup cycle failed: {e}")

    async def __aenter__(self) -> "CleanupTask":
        self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()
