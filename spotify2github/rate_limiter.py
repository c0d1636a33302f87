"""
Fixed-interval request pacing.
"""

import asyncio
from dataclasses import dataclass


@dataclass(frozen=True)
class PacingConfig:
    """Delays in seconds. A delay of 0 disables that pause."""

    mutation_delay: float = 0.1
    playlist_delay: float = 0.5
    show_delay: float = 0.5
    phase_delay: float = 1.0


class Pacer:
    """
    Keeps request cadence under Spotify's rolling 30 second rate-limit window.

    Notes:
    - Pacing is preventive only: there is no reactive backoff or retry.
    - Every pause is a suspension point on `asyncio.sleep`.
    """

    def __init__(self, config: PacingConfig = PacingConfig()):
        self.config = config

    async def _pause(self, seconds: float):
        if seconds > 0:
            await asyncio.sleep(seconds)

    async def after_mutation(self):
        """Pause after one batched playlist add/remove call."""
        await self._pause(self.config.mutation_delay)

    async def after_playlist(self):
        """Pause after fetching one playlist's full detail."""
        await self._pause(self.config.playlist_delay)

    async def after_show(self):
        """Pause after fetching one show's full detail."""
        await self._pause(self.config.show_delay)

    async def between_phases(self):
        """Pause between two major export phases."""
        await self._pause(self.config.phase_delay)
