"""Pending role-offer registry.

One offer per user. An offer leaves the registry exactly once, through
``resolve``; the confirm, decline and timeout paths all go through it, and
the pop happens before anything is awaited, so whichever path gets there
first wins and the others see a miss.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Optional

import discord

logger = logging.getLogger(__name__)

TimeoutCallback = Callable[["PendingAssignment"], Awaitable[None]]


@dataclass
class PendingAssignment:
    """A role offer waiting for the user's answer."""

    user_id: int
    guild: discord.Guild
    minecraft_username: str
    prompt: discord.Message
    view: Optional[discord.ui.View] = field(default=None, repr=False)
    timer: Optional[asyncio.Task] = field(default=None, repr=False)


class PendingAssignmentRegistry:
    """Process-scoped map of user ID to pending role offer"""

    def __init__(self, timeout: float = 120.0):
        self.timeout = timeout
        self._pending: dict[int, PendingAssignment] = {}

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._pending

    def __len__(self) -> int:
        return len(self._pending)

    def get(self, user_id: int) -> Optional[PendingAssignment]:
        return self._pending.get(user_id)

    def offer(self, assignment: PendingAssignment, on_timeout: TimeoutCallback) -> bool:
        """Register an offer and start its deadline.

        Returns False, leaving the live offer untouched, if the user already
        has one.
        """
        if assignment.user_id in self._pending:
            logger.info(f"Role offer for {assignment.user_id} rejected: one is already pending")
            return False

        self._pending[assignment.user_id] = assignment
        assignment.timer = asyncio.create_task(
            self._expire(assignment, on_timeout),
            name=f"role-offer-timeout-{assignment.user_id}",
        )
        return True

    def resolve(self, user_id: int) -> Optional[PendingAssignment]:
        """Remove a user's offer and cancel its timer.

        Returns None if there is no live offer (already resolved or never made).
        """
        assignment = self._pending.pop(user_id, None)
        if assignment is None:
            return None

        timer = assignment.timer
        if timer is not None and timer is not asyncio.current_task():
            timer.cancel()
        return assignment

    async def _expire(self, assignment: PendingAssignment, on_timeout: TimeoutCallback) -> None:
        await asyncio.sleep(self.timeout)

        # The slot may now hold a newer offer for the same user
        if self._pending.get(assignment.user_id) is not assignment:
            return
        self.resolve(assignment.user_id)

        try:
            await on_timeout(assignment)
        except Exception as e:
            logger.exception(f"Error handling role offer timeout for {assignment.user_id}: {e}")

    async def clear(self) -> None:
        """Drop every pending offer and cancel its timer."""
        timers = [a.timer for a in self._pending.values() if a.timer is not None]
        self._pending.clear()
        for timer in timers:
            timer.cancel()
        if timers:
            await asyncio.gather(*timers, return_exceptions=True)
            logger.info(f"Cleared {len(timers)} pending role offer(s)")
