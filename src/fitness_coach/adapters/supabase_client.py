"""Lazily created Supabase client and query helpers."""

from dataclasses import dataclass, field

import httpx
from supabase import Client, PostgrestAPIError, create_client

from fitness_coach.domain.errors import ConfigurationError, PersistenceError


@dataclass
class LazySupabaseClient:
    """Creates the Supabase client on first table access.

    Missing credentials surface as ConfigurationError per request instead of
    failing application startup.
    """

    url: str | None
    service_key: str | None
    _client: Client | None = field(default=None, init=False, repr=False)

    def table(self, name: str):  # type: ignore[no-untyped-def]
        """Return a query builder for a table."""
        return self.get().table(name)

    def get(self) -> Client:
        """Return the underlying client, creating it if needed."""
        if self._client is None:
            if not self.url or not self.service_key:
                raise ConfigurationError("Supabase credentials not configured")
            self._client = create_client(self.url, self.service_key)
        return self._client


def execute(query, action: str):  # type: ignore[no-untyped-def]
    """Execute a query, translating client failures into PersistenceError."""
    try:
        return query.execute()
    except (PostgrestAPIError, httpx.HTTPError) as exc:
        raise PersistenceError(f"Failed to {action}", details=str(exc)) from exc
