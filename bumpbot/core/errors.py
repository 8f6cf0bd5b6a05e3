"""Error taxonomy for the bump reward bot"""


class BumpBotError(Exception):
    """Base class for errors raised by the bot"""


class ValidationError(BumpBotError):
    """A submitted Minecraft username failed the lexical rule"""

    def __init__(self, username: str):
        super().__init__(f"Invalid Minecraft username: {username!r}")
        self.username = username


class StoreError(BumpBotError):
    """The identity store (NocoDB) could not complete a request"""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class PlatformError(BumpBotError):
    """A Discord call failed (missing channel/role, permissions, deleted message)"""
