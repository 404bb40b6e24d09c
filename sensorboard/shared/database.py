"""Realtime database client over the Firebase REST API."""

import asyncio
import json
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Dict, Iterable, Optional, Tuple
from urllib.parse import quote

import aiohttp

from .config import FirebaseConfig
from .errors import DatabaseError

logger = logging.getLogger(__name__)

# Firebase streams never finish on their own
NO_TIMEOUT = aiohttp.ClientTimeout(total=None, sock_read=None)


@dataclass(frozen=True)
class Query:
    """A "last N children ordered by a field" query against one node."""
    path: str
    limit: Optional[int] = None
    order_by: str = "timestamp"

    def params(self) -> Dict[str, str]:
        """REST query parameters; orderBy must be a JSON string literal."""
        if self.limit is None:
            return {}
        return {
            "orderBy": json.dumps(self.order_by),
            "limitToLast": str(self.limit),
        }


class RealtimeDatabase:
    """Async client for reading and deleting nodes in the realtime database.

    Authenticates with a legacy database secret passed as the ``auth`` query
    parameter. Use as an async context manager, or call ``close()`` when done.
    """

    def __init__(self, config: FirebaseConfig, session: Optional[aiohttp.ClientSession] = None):
        """Initialize the client.

        Args:
            config: Database endpoint and token.
            session: Optional shared aiohttp session. Sessions passed in are
                not closed by this client.
        """
        self.config = config
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> "RealtimeDatabase":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def _get_session(self) -> aiohttp.ClientSession:
        """Get or create the HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=NO_TIMEOUT)
            self._owns_session = True
        return self._session

    def url_for(self, path: str) -> str:
        """Build the REST URL for a database path."""
        segments = [quote(s, safe="") for s in path.strip("/").split("/") if s]
        return f"{self.config.database_url}/{'/'.join(segments)}.json"

    def _params(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        params = {"auth": self.config.auth_token}
        if extra:
            params.update(extra)
        return params

    async def _request(self, method: str, path: str, params: Optional[Dict[str, str]] = None) -> Any:
        session = self._get_session()
        try:
            async with session.request(method, self.url_for(path), params=self._params(params)) as resp:
                if resp.status >= 400:
                    body = await resp.text(errors="replace")
                    raise DatabaseError(
                        f"{method} {path} failed with HTTP {resp.status}: {body.strip()}",
                        path=path,
                        status=resp.status,
                    )
                try:
                    return await resp.json(content_type=None)
                except ValueError as e:
                    raise DatabaseError(
                        f"{method} {path} returned invalid JSON: {e}",
                        path=path,
                        status=resp.status,
                    ) from e
        except aiohttp.ClientError as e:
            raise DatabaseError(f"{method} {path} failed: {e}", path=path) from e

    async def get(self, path: str) -> Any:
        """Fetch a node. Returns None when the node doesn't exist."""
        return await self._request("GET", path)

    async def delete(self, path: str) -> None:
        """Delete a node. Deleting a missing node succeeds."""
        await self._request("DELETE", path)

    async def fetch(self, query: Query) -> Dict[str, Any]:
        """Run a query and return its children keyed by child key."""
        data = await self._request("GET", query.path, query.params())
        if not isinstance(data, dict):
            return {}
        return data

    async def query_last(self, path: str, limit: int, order_by: str = "timestamp") -> Dict[str, Any]:
        """Fetch the last ``limit`` children of ``path`` ordered by ``order_by``."""
        return await self.fetch(Query(path=path, limit=limit, order_by=order_by))

    @asynccontextmanager
    async def open_stream(self, path: str) -> AsyncIterator[aiohttp.ClientResponse]:
        """Open the server-sent event stream for a node."""
        session = self._get_session()
        try:
            async with session.get(
                self.url_for(path),
                params=self._params(),
                headers={"Accept": "text/event-stream"},
            ) as resp:
                if resp.status >= 400:
                    body = await resp.text(errors="replace")
                    raise DatabaseError(
                        f"stream {path} failed with HTTP {resp.status}: {body.strip()}",
                        path=path,
                        status=resp.status,
                    )
                yield resp
        except aiohttp.ClientError as e:
            raise DatabaseError(f"stream {path} failed: {e}", path=path) from e

    def subscribe(self, query: Query) -> "Subscription":
        """Subscribe to full snapshots of a query. See ``Subscription``."""
        return Subscription(self, query)

    async def close(self) -> None:
        """Close the HTTP session if this client created it."""
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
        self._session = None


async def parse_event_stream(lines: Any) -> AsyncIterator[Tuple[str, Any]]:
    """Parse server-sent events into ``(event, data)`` pairs.

    Args:
        lines: Async iterable of raw byte lines, e.g. ``response.content``.

    Yields:
        Event name and decoded JSON data (None for empty or non-JSON data).
    """
    event = None
    data_lines = []

    async for raw in lines:
        line = raw.decode("utf-8", errors="replace").rstrip("\r\n")

        if not line:
            if event is not None:
                yield event, _decode_data(data_lines)
            event = None
            data_lines = []
            continue

        if line.startswith(":"):
            continue

        field, _, value = line.partition(":")
        value = value[1:] if value.startswith(" ") else value
        if field == "event":
            event = value
        elif field == "data":
            data_lines.append(value)

    if event is not None:
        yield event, _decode_data(data_lines)


def _decode_data(data_lines: Iterable[str]) -> Any:
    payload = "\n".join(data_lines)
    if not payload:
        return None
    try:
        return json.loads(payload)
    except json.JSONDecodeError:
        return None


class Subscription:
    """Lazy, unbounded sequence of full query snapshots.

    Each change event on the node triggers a fresh fetch of the whole query,
    so every yielded value is a complete replacement for the previous one.
    ``cancel()`` stops delivery; iteration then ends without error.

    Raises:
        DatabaseError: If the stream fails or the server cancels it
            (``cancel`` or ``auth_revoked`` events).
    """

    CHANGE_EVENTS = ("put", "patch")
    TERMINAL_EVENTS = ("cancel", "auth_revoked")

    def __init__(self, db: RealtimeDatabase, query: Query):
        self.db = db
        self.query = query
        self._cancelled = False
        self._response: Optional[aiohttp.ClientResponse] = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        """Stop delivery and drop the open stream, if any."""
        self._cancelled = True
        if self._response is not None:
            self._response.close()

    def __aiter__(self) -> AsyncIterator[Dict[str, Any]]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[Dict[str, Any]]:
        if self._cancelled:
            return

        try:
            async with self.db.open_stream(self.query.path) as resp:
                self._response = resp
                async for event, data in parse_event_stream(resp.content):
                    if self._cancelled:
                        return
                    if event in self.CHANGE_EVENTS:
                        snapshot = await self.db.fetch(self.query)
                        if self._cancelled:
                            return
                        yield snapshot
                        if self._cancelled:
                            return
                    elif event in self.TERMINAL_EVENTS:
                        raise DatabaseError(
                            f"stream {self.query.path} ended by server: {event}",
                            path=self.query.path,
                        )
        except DatabaseError:
            if self._cancelled:
                return
            raise
        except (aiohttp.ClientError, asyncio.IncompleteReadError) as e:
            if self._cancelled:
                return
            raise DatabaseError(f"stream {self.query.path} broke: {e!r}", path=self.query.path) from e
        finally:
            self._response = None
