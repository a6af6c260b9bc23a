"""
Recurring background work on the event loop.
"""
import asyncio
from typing import Optional


class PeriodicTask:
    """Runs run_once() every interval_seconds until stopped."""

    name = "periodic task"

    def __init__(self, interval_seconds: float):
        self.interval_seconds = interval_seconds
        self._task: Optional[asyncio.Task] = None

    async def run_once(self):
        raise NotImplementedError

    def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._run())

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                await self.run_once()
            except Exception as e:
                print(f"❌ {self.name} failed: {e}")

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()
