"""NocoDB identity store client.

Links Discord users to their Minecraft usernames. Rows live in a single
NocoDB table accessed through the v2 records API:

  - GET   /api/v2/tables/{table}/records?where=(discord_id,eq,<id>)
  - POST  /api/v2/tables/{table}/records
  - PATCH /api/v2/tables/{table}/records   (row selected by ``Id`` in the body)

Every call is a fresh request with a bounded timeout. Nothing is cached and
nothing is retried; failures surface as ``StoreError``.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

import httpx

from ..core.errors import StoreError

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


@dataclass
class UserRecord:
    """A Discord user linked to a Minecraft account."""

    record_id: int
    discord_id: str
    discord_username: Optional[str] = None
    minecraft_username: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "UserRecord":
        return cls(
            record_id=row.get("Id") or row.get("id"),  # type: ignore[arg-type]
            discord_id=str(row.get("discord_id", "")),
            discord_username=row.get("discord_username"),
            minecraft_username=row.get("minecraft_username"),
            created_at=_parse_timestamp(row.get("created_at")),
            updated_at=_parse_timestamp(row.get("updated_at")),
        )


class IdentityStore:
    """Client for the NocoDB users table"""

    def __init__(
        self,
        base_url: str,
        api_token: str,
        table_id: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.table_id = table_id
        self._configured = bool(base_url and api_token and table_id)

        # Shared HTTP client, reuses TCP connections across requests
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            headers={"xc-token": api_token, "Content-Type": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    async def close(self) -> None:
        """Close the shared HTTP client. Call on shutdown."""
        await self._http.aclose()

    @property
    def is_configured(self) -> bool:
        """Check if NocoDB is configured"""
        return self._configured

    @property
    def records_path(self) -> str:
        return f"/api/v2/tables/{self.table_id}/records"

    async def _request(self, method: str, **kwargs: Any) -> dict[str, Any]:
        """Send a request to the records endpoint and decode the JSON body"""
        if not self._configured:
            raise StoreError("NocoDB is not configured")

        try:
            response = await self._http.request(method, self.records_path, **kwargs)
        except httpx.TimeoutException as e:
            logger.error(f"NocoDB {method} timed out")
            raise StoreError("NocoDB request timed out") from e
        except httpx.HTTPError as e:
            logger.error(f"NocoDB {method} failed: {e}")
            raise StoreError(f"NocoDB request failed: {e}") from e

        if response.status_code >= 400:
            logger.error(f"NocoDB {method} returned {response.status_code}: {response.text}")
            raise StoreError(
                f"NocoDB returned HTTP {response.status_code}", status_code=response.status_code
            )

        try:
            data: dict[str, Any] = response.json()
        except ValueError as e:
            raise StoreError("NocoDB returned a non-JSON body") from e
        return data

    async def find_by_discord_id(self, discord_id: int | str) -> Optional[UserRecord]:
        """Get the record linked to a Discord user, or None when absent."""
        data = await self._request("GET", params={"where": f"(discord_id,eq,{discord_id})"})
        rows = data.get("list") or []
        if not rows:
            return None
        return UserRecord.from_row(rows[0])

    async def create(
        self, discord_id: int | str, discord_username: str, minecraft_username: str
    ) -> UserRecord:
        """Insert a new user row."""
        now = _utcnow()
        payload = {
            "discord_id": str(discord_id),
            "discord_username": discord_username,
            "minecraft_username": minecraft_username,
            "created_at": now.isoformat(),
        }
        data = await self._request("POST", json=payload)
        return UserRecord(
            record_id=data.get("Id") or data.get("id"),  # type: ignore[arg-type]
            discord_id=str(discord_id),
            discord_username=discord_username,
            minecraft_username=minecraft_username,
            created_at=now,
        )

    async def update(self, record: UserRecord, minecraft_username: str) -> UserRecord:
        """Overwrite the Minecraft username of an existing row."""
        now = _utcnow()
        payload = {
            "Id": record.record_id,
            "minecraft_username": minecraft_username,
            "updated_at": now.isoformat(),
        }
        await self._request("PATCH", json=payload)
        return UserRecord(
            record_id=record.record_id,
            discord_id=record.discord_id,
            discord_username=record.discord_username,
            minecraft_username=minecraft_username,
            created_at=record.created_at,
            updated_at=now,
        )

    async def register(
        self, discord_id: int | str, discord_username: str, minecraft_username: str
    ) -> tuple[UserRecord, bool]:
        """Create or update a user's link.

        Returns:
            Tuple of (record, created) where created is False for an update
        """
        existing = await self.find_by_discord_id(discord_id)
        if existing is not None:
            return await self.update(existing, minecraft_username), False
        return await self.create(discord_id, discord_username, minecraft_username), True
