"""Database module for the bump reward bot."""

from .identity_store import IdentityStore, UserRecord

__all__ = ["IdentityStore", "UserRecord"]
