"""Bump confirmation detection and attribution.

Bump services answer a ``/bump`` slash command with a confirmation message
that does not say who bumped. The human is recovered from recent channel
history: Discord attaches the invoking user to every message sent in reply to
a slash command, so the newest message carrying ``/bump`` interaction metadata
names the bumper.
"""

import logging
from collections.abc import Iterable
from typing import Optional

import discord

from .constants import BUMP_COMMAND_NAME, BUMP_CONFIRM_PATTERNS, KNOWN_BUMP_SERVICES

logger = logging.getLogger(__name__)


class BumpCorrelator:
    """Detects bump confirmations in one channel and resolves who bumped.

    Security features:
    - Only messages from allow-listed service accounts are inspected
    - Messages outside the monitored channel are ignored
    """

    def __init__(
        self,
        channel_id: int,
        service_ids: Iterable[int] = KNOWN_BUMP_SERVICES,
        history_window: int = 10,
        command_name: str = BUMP_COMMAND_NAME,
    ):
        self.channel_id = channel_id
        self.service_ids = frozenset(service_ids)
        self.history_window = history_window
        self.command_name = command_name

    def is_monitored(self, channel_id: Optional[int]) -> bool:
        return channel_id == self.channel_id

    def is_bump_service(self, author: discord.abc.User) -> bool:
        return author.id in self.service_ids

    @staticmethod
    def message_text(message: discord.Message) -> str:
        """Collect the visible text of a message: content plus embed titles and descriptions."""
        parts = [message.content or ""]
        for embed in message.embeds:
            parts.append(embed.title or "")
            parts.append(embed.description or "")
        return " ".join(parts)

    @staticmethod
    def matches_confirmation(text: str) -> bool:
        return any(pattern.search(text) for pattern in BUMP_CONFIRM_PATTERNS)

    def is_confirmation(self, message: discord.Message) -> bool:
        """Check if message is a bump confirmation from a known service.

        Args:
            message: Discord message to check

        Returns:
            True if the author is a bump service and the text matches a pattern
        """
        if not self.is_monitored(message.channel.id):
            return False
        if not self.is_bump_service(message.author):
            return False
        return self.matches_confirmation(self.message_text(message))

    def invoker_of(self, message: discord.Message) -> Optional[discord.abc.User]:
        """Return the user who ran the bump command this message answers, if any."""
        interaction = message.interaction
        if interaction is None or interaction.name != self.command_name:
            return None
        return interaction.user

    async def resolve_invoker(self, message: discord.Message) -> Optional[discord.abc.User]:
        """Find the bumper behind a confirmation.

        Scans the last ``history_window`` messages of the channel in the order
        Discord returns them (newest first) and takes the first ``/bump``
        invocation. Returns None when the bump cannot be attributed.
        """
        async for recent in message.channel.history(limit=self.history_window):
            user = self.invoker_of(recent)
            if user is not None:
                return user

        logger.info(
            f"[BUMP_DETECT] Unattributed bump from {message.author} "
            f"(no /{self.command_name} in last {self.history_window} messages)"
        )
        return None
