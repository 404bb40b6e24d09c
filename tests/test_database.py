import asyncio

import pytest
from aiohttp import test_utils

from sensorboard.shared.config import FirebaseConfig
from sensorboard.shared.database import Query, RealtimeDatabase, parse_event_stream
from sensorboard.shared.errors import DatabaseError

from conftest import AUTH_TOKEN, make_firebase_app


def _store():
    return {
        "sensors/light": {
            "-c": {"timestamp": 300, "value": 3000},
            "-a": {"timestamp": 100, "value": 1000},
            "-b": {"timestamp": 200, "value": 2000},
        },
    }


def _config(server, token=AUTH_TOKEN):
    return FirebaseConfig(database_url=str(server.make_url("/")), auth_token=token)


async def _lines(*chunks):
    for chunk in chunks:
        yield chunk


def test_query_params():
    assert Query("sensors/light").params() == {}
    assert Query("sensors/light", limit=20).params() == {"orderBy": '"timestamp"', "limitToLast": "20"}


def test_url_for_strips_slashes():
    db = RealtimeDatabase(FirebaseConfig("https://x.firebaseio.com/", "t"))
    assert db.url_for("/sensors/soil-moisture/") == "https://x.firebaseio.com/sensors/soil-moisture.json"
    assert db.url_for("sensors/light/-Nabc_1") == "https://x.firebaseio.com/sensors/light/-Nabc_1.json"


@pytest.mark.asyncio
async def test_parse_event_stream():
    events = [
        e async for e in parse_event_stream(_lines(
            b": comment\n",
            b"event: put\n",
            b'data: {"path": "/", "data": {"a": 1}}\n',
            b"\n",
            b"event: keep-alive\n",
            b"data: null\n",
            b"\n",
            b"event: cancel\n",
            b"data: not json\n",
        ))
    ]
    assert events == [
        ("put", {"path": "/", "data": {"a": 1}}),
        ("keep-alive", None),
        ("cancel", None),
    ]


@pytest.mark.asyncio
async def test_get_delete_and_query():
    store = _store()
    async with test_utils.TestServer(make_firebase_app(store)) as server:
        async with RealtimeDatabase(_config(server)) as db:
            light = await db.get("sensors/light")
            assert set(light) == {"-a", "-b", "-c"}

            assert await db.get("sensors/gas") is None

            last_two = await db.query_last("sensors/light", limit=2)
            assert set(last_two) == {"-b", "-c"}

            await db.delete("sensors/light/-a")
            await db.delete("sensors/light/-missing")
            assert set(store["sensors/light"]) == {"-b", "-c"}

            assert await db.fetch(Query("sensors/gas", limit=5)) == {}


@pytest.mark.asyncio
async def test_http_error_raises_database_error():
    async with test_utils.TestServer(make_firebase_app(_store())) as server:
        async with RealtimeDatabase(_config(server, token="wrong")) as db:
            with pytest.raises(DatabaseError) as excinfo:
                await db.get("sensors/light")
    assert excinfo.value.status == 401
    assert excinfo.value.path == "sensors/light"


@pytest.mark.asyncio
async def test_connection_error_raises_database_error():
    db = RealtimeDatabase(FirebaseConfig("http://127.0.0.1:9", "t"))
    try:
        with pytest.raises(DatabaseError):
            await db.get("sensors/light")
    finally:
        await db.close()


@pytest.mark.asyncio
async def test_subscription_yields_full_snapshots():
    store = _store()
    app = make_firebase_app(store, events=["put", "keep-alive", "patch"])
    snapshots = []

    async with test_utils.TestServer(app) as server:
        async with RealtimeDatabase(_config(server)) as db:
            async for snapshot in db.subscribe(Query("sensors/light", limit=2)):
                snapshots.append(snapshot)
                store["sensors/light"]["-d"] = {"timestamp": 400, "value": 4000}

    assert [set(s) for s in snapshots] == [{"-b", "-c"}, {"-c", "-d"}]


@pytest.mark.asyncio
async def test_subscription_server_cancel_raises():
    app = make_firebase_app(_store(), events=["put", "cancel"])
    snapshots = []

    async with test_utils.TestServer(app) as server:
        async with RealtimeDatabase(_config(server)) as db:
            with pytest.raises(DatabaseError):
                async for snapshot in db.subscribe(Query("sensors/light", limit=20)):
                    snapshots.append(snapshot)

    assert len(snapshots) == 1


@pytest.mark.asyncio
async def test_subscription_cancel_stops_delivery():
    app = make_firebase_app(_store(), events=["put", "patch", "put"])
    snapshots = []

    async with test_utils.TestServer(app) as server:
        async with RealtimeDatabase(_config(server)) as db:
            subscription = db.subscribe(Query("sensors/light", limit=20))
            async for snapshot in subscription:
                snapshots.append(snapshot)
                subscription.cancel()

            assert subscription.cancelled
            assert [s async for s in subscription] == []

    assert len(snapshots) == 1


@pytest.mark.asyncio
async def test_parse_event_stream_replaces_invalid_utf8():
    events = [e async for e in parse_event_stream(_lines(b"event: put\n", b'data: {"\xff"}\n', b"\n"))]
    assert events == [("put", None)]


@pytest.mark.asyncio
async def test_non_json_body_raises_database_error():
    async with test_utils.TestServer(make_firebase_app(_store(), bad_gets=1)) as server:
        async with RealtimeDatabase(_config(server)) as db:
            with pytest.raises(DatabaseError) as excinfo:
                await db.get("sensors/light")
            assert excinfo.value.status == 200
            assert excinfo.value.path == "sensors/light"

            assert set(await db.get("sensors/light")) == {"-a", "-b", "-c"}


@pytest.mark.asyncio
async def test_subscription_survives_invalid_utf8_event():
    app = make_firebase_app(_store(), stream_body=b'event: put\ndata: {"\xff"}\n\n')
    snapshots = []

    async with test_utils.TestServer(app) as server:
        async with RealtimeDatabase(_config(server)) as db:
            async for snapshot in db.subscribe(Query("sensors/light", limit=20)):
                snapshots.append(snapshot)

    assert [set(s) for s in snapshots] == [{"-a", "-b", "-c"}]


@pytest.mark.asyncio
async def test_subscription_truncated_stream_raises_database_error(monkeypatch):
    async def truncated(lines):
        raise asyncio.IncompleteReadError(b"event: pu", None)
        yield  # pragma: no cover

    monkeypatch.setattr("sensorboard.shared.database.parse_event_stream", truncated)

    async with test_utils.TestServer(make_firebase_app(_store())) as server:
        async with RealtimeDatabase(_config(server)) as db:
            with pytest.raises(DatabaseError) as excinfo:
                async for _ in db.subscribe(Query("sensors/light", limit=20)):
                    pass

    assert excinfo.value.path == "sensors/light"
