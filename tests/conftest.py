"""Shared fixtures: an in-memory database and a fake Firebase REST server."""

import json
from typing import Any, Dict, List, Optional, Set

from aiohttp import web

from sensorboard.shared.errors import DatabaseError

NOW_MS = 1_700_000_000_000
SECOND = 1000
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE
DAY = 24 * HOUR

AUTH_TOKEN = "secret-token"


class FakeDatabase:
    """In-memory stand-in for RealtimeDatabase keyed by category path."""

    def __init__(self, nodes: Optional[Dict[str, Dict[str, Any]]] = None):
        self.nodes: Dict[str, Dict[str, Any]] = nodes or {}
        self.fail_get: Set[str] = set()
        self.fail_delete: Set[str] = set()
        self.deleted: List[str] = []

    async def get(self, path: str) -> Any:
        if path in self.fail_get:
            raise DatabaseError(f"GET {path} failed", path=path, status=500)
        node = self.nodes.get(path)
        return dict(node) if node else None

    async def delete(self, path: str) -> None:
        if path in self.fail_delete:
            raise DatabaseError(f"DELETE {path} failed", path=path, status=500)
        parent, _, key = path.rpartition("/")
        self.nodes.get(parent, {}).pop(key, None)
        self.deleted.append(path)


def _split(path: str):
    parent, _, key = path.rpartition("/")
    return parent, key


def make_firebase_app(
    store: Dict[str, Dict[str, Any]],
    events: Optional[List[str]] = None,
    stream_body: Optional[bytes] = None,
    bad_gets: int = 0,
) -> web.Application:
    """Minimal Firebase REST emulation over a {category_path: children} store.

    Supports GET (with orderBy/limitToLast), DELETE and the event stream,
    which replays ``events`` (event names) and then closes. ``stream_body``
    is written raw ahead of the events, and the first ``bad_gets`` GETs
    answer with an HTML gateway page instead of JSON.
    """
    requests: List[str] = []
    remaining_bad = [bad_gets]

    async def handler(request: web.Request) -> web.StreamResponse:
        requests.append(f"{request.method} {request.path}")
        if request.query.get("auth") != AUTH_TOKEN:
            return web.json_response({"error": "Permission denied"}, status=401)

        path = request.path.strip("/")
        if not path.endswith(".json"):
            return web.json_response({"error": "bad path"}, status=400)
        path = path[: -len(".json")]

        if request.headers.get("Accept") == "text/event-stream":
            resp = web.StreamResponse(headers={"Content-Type": "text/event-stream"})
            await resp.prepare(request)
            if stream_body is not None:
                await resp.write(stream_body)
            for event in events or []:
                payload = json.dumps({"path": "/", "data": None})
                await resp.write(f"event: {event}\ndata: {payload}\n\n".encode())
            return resp

        if request.method == "GET" and remaining_bad[0] > 0:
            remaining_bad[0] -= 1
            return web.Response(text="<html>gateway</html>", content_type="text/html")

        if request.method == "DELETE":
            if path in store:
                store.pop(path)
            else:
                parent, key = _split(path)
                store.get(parent, {}).pop(key, None)
            return web.json_response(None)

        if path in store:
            node = store[path]
        else:
            parent, key = _split(path)
            node = store.get(parent, {}).get(key)

        if node is None:
            return web.json_response(None)

        if "limitToLast" in request.query and isinstance(node, dict):
            assert request.query["orderBy"] == '"timestamp"'
            limit = int(request.query["limitToLast"])
            ordered = sorted(node.items(), key=lambda kv: kv[1].get("timestamp", 0))
            node = dict(ordered[-limit:])

        return web.json_response(node)

    app = web.Application()
    app["requests"] = requests
    app.router.add_route("*", "/{tail:.*}", handler)
    return app
