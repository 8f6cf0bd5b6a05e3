"""Bump workflow events.

Discord delivers messages, slash commands, button presses and modal
submissions through different callbacks. The cog turns each one into one of
these variants before handing it to the workflow.
"""

from dataclasses import dataclass
from typing import Optional, Union

import discord


@dataclass(frozen=True)
class DirectInvocation:
    """A human ran the bump command through this bot."""

    user: discord.abc.User


@dataclass(frozen=True)
class ServiceConfirmation:
    """A message from a bump service that may confirm a bump."""

    message: discord.Message


@dataclass(frozen=True)
class UserCommand:
    """``!minecraft <username>`` typed in the bump channel."""

    message: discord.Message
    username: Optional[str]


@dataclass(frozen=True)
class ButtonChoice:
    """A yes/no answer to a role offer."""

    interaction: discord.Interaction
    confirmed: bool


@dataclass(frozen=True)
class ModalSubmission:
    """A username submitted through the ``/minecraft`` form."""

    interaction: discord.Interaction
    username: str


BumpEvent = Union[DirectInvocation, ServiceConfirmation, UserCommand, ButtonChoice, ModalSubmission]
