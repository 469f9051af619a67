"""
Periodic clock that gives the Challenger a chance to interrupt the Lead's turn.
"""
import asyncio
import logging
import random
from typing import Awaitable, Callable, Optional, Sequence

from ..config import TURN_CLOCK_INTERVAL_SECONDS, INTERRUPTION_THRESHOLD, MIN_INTERRUPT_TRANSCRIPT_CHARS
from .prompts import PanelPrompts

logger = logging.getLogger("turn_clock")

TickHandler = Callable[[], Awaitable[None]]


class InterruptionPolicy:
    """Coin flip plus a near-silence guard, drawn once per eligible tick."""

    def __init__(self,
                 rng: random.Random,
                 threshold: float = INTERRUPTION_THRESHOLD,
                 min_chars: int = MIN_INTERRUPT_TRANSCRIPT_CHARS,
                 catalog: Optional[Sequence[str]] = None):
        self.rng = rng
        self.threshold = threshold
        self.min_chars = min_chars
        self.catalog = list(catalog or PanelPrompts.fallback_messages()["interruptions"])

    def should_interrupt(self, interim_transcript: str) -> bool:
        r = self.rng.random()
        spoken = len(interim_transcript.strip())
        fire = r > self.threshold and spoken > self.min_chars
        logger.debug(f"Interruption draw {r:.3f} with {spoken} chars spoken: {'fire' if fire else 'hold'}")
        return fire

    def pick_message(self) -> str:
        return self.rng.choice(self.catalog)


class TurnClock:
    """
    Repeating timer running as its own asyncio task.

    It does not wait for anything else the panel is doing; the tick handler
    decides whether the current state allows an interruption. Stopping the
    clock is the only cancellation the panel performs.
    """

    def __init__(self, on_tick: TickHandler, interval: float = TURN_CLOCK_INTERVAL_SECONDS):
        self.on_tick = on_tick
        self.interval = interval
        self.ticks = 0
        self._task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start ticking. Must be called from inside a running event loop."""
        if self.is_running:
            return
        self._task = asyncio.create_task(self._run(), name="panel-turn-clock")
        logger.debug(f"Turn clock started ({self.interval}s interval)")

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None
            logger.debug(f"Turn clock stopped after {self.ticks} ticks")

    async def tick(self) -> None:
        """Run one tick now."""
        self.ticks += 1
        await self.on_tick()

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                await self.tick()
            except Exception as e:
                # A bad tick must not kill the clock for the rest of the session
                logger.error(f"Turn clock tick failed: {e}")
