"""Bump reward constants."""

import re

import discord

# Known bump service bots
DISBOARD_BOT_ID = 302050872383242240
BUMPLY_BOT_ID = 716390085896962058
SERVERHOUND_BOT_ID = 450100127256936458
CUSTOM_BUMP_BOT_ID = 1382299188095746088

KNOWN_BUMP_SERVICES = frozenset(
    {DISBOARD_BOT_ID, BUMPLY_BOT_ID, SERVERHOUND_BOT_ID, CUSTOM_BUMP_BOT_ID}
)

# Matched case-insensitively against message content and embed title/description
BUMP_CONFIRM_PATTERNS = (
    re.compile(r"bump done|bumped|bump successful", re.IGNORECASE),
    re.compile(r"server bumped", re.IGNORECASE),
    re.compile(r"bump complete", re.IGNORECASE),
    re.compile(r"successfully bumped", re.IGNORECASE),
)

BUMP_COMMAND_NAME = "bump"

# Role offer buttons
CONFIRM_ROLE_ID = "confirm_role_assignment"
DECLINE_ROLE_ID = "decline_role_assignment"

# Auto-delete delays (seconds)
USERNAME_PROMPT_LIFETIME = 120
ERROR_REPLY_LIFETIME = 30
SUCCESS_REPLY_LIFETIME = 60

# Rewards
HIDDEN_USERNAME = "***Hidden***"
REWARD_SUMMARY = "• 1x Balanced Crate Key\n• 3 minutes Temp Fly"

# Theme
SUCCESS_COLOR = discord.Color.from_str("#00FF00")
PROMPT_COLOR = discord.Color.from_str("#FFA500")
ERROR_COLOR = discord.Color.from_str("#FF0000")
DECLINED_COLOR = discord.Color.from_str("#808080")
TIMEOUT_COLOR = discord.Color.from_str("#FF6B6B")
