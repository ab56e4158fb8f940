"""Content Resolver Routes — tests for the HTTP surface over PetProvider.

Tests cover:
    - insert/query/update/delete/type round trips through JSON
    - error envelopes: 400 UNSUPPORTED_RESOURCE, MISSING_FIELD, INVALID_VALUE,
      REQUEST_VALIDATION_ERROR; 503 STORAGE_FAILURE; 500 INTERNAL_ERROR
    - change stream: subscribed event, then one change event per notification
    - health and readiness probes, including the pets table and provider wiring
"""

import asyncio
import json

import pytest

from pet_provider.core.errors import StorageFailureError
from pet_provider.main import app
from pet_provider.services.pet_provider import PetProvider

PETS_URI = "content://com.example.android.pets/pets"
TOTO = {"name": "Toto", "breed": "Terrier", "gender": 1, "weight": 7}


async def _insert(client, values=TOTO) -> str:
    res = await client.post(
        "/api/v1/resolver/insert", json={"uri": PETS_URI, "values": values},
    )
    assert res.status_code == 201
    return res.json()["uri"]


# ─── CRUD ────────────────────────────────────────────────────────

async def test_insert_returns_201_with_item_uri(client):
    uri = await _insert(client)
    assert uri.startswith(f"{PETS_URI}/")
    assert uri.rsplit("/", 1)[1].isdigit()


async def test_query_collection(client):
    await _insert(client)
    await _insert(client, {"name": "Binx", "gender": 2, "weight": 4})

    res = await client.post("/api/v1/resolver/query", json={
        "uri": PETS_URI,
        "projection": ["name", "weight"],
        "sort_order": "weight ASC",
    })

    assert res.status_code == 200
    body = res.json()
    assert body["notification_uri"] == PETS_URI
    assert body["columns"] == ["name", "weight"]
    assert body["rows"] == [
        {"name": "Binx", "weight": 4}, {"name": "Toto", "weight": 7},
    ]
    assert body["count"] == 2


async def test_query_with_in_predicate(client):
    await _insert(client)
    await _insert(client, {"name": "Binx", "gender": 2})
    await _insert(client, {"name": "Rex", "gender": 0})

    res = await client.post("/api/v1/resolver/query", json={
        "uri": PETS_URI,
        "selection": [{"column": "gender", "op": "in", "value": [0, 2]}],
        "sort_order": "name",
    })

    assert [row["name"] for row in res.json()["rows"]] == ["Binx", "Rex"]


async def test_update_item(client):
    uri = await _insert(client)

    res = await client.post(
        "/api/v1/resolver/update", json={"uri": uri, "values": {"weight": 8}},
    )
    assert res.json() == {"uri": uri, "rows_affected": 1}

    row = (await client.post(
        "/api/v1/resolver/query", json={"uri": uri},
    )).json()["rows"][0]
    assert row["weight"] == 8
    assert row["breed"] == "Terrier"


async def test_update_with_no_values_affects_nothing(client):
    uri = await _insert(client)
    res = await client.post("/api/v1/resolver/update", json={"uri": uri})
    assert res.json()["rows_affected"] == 0


async def test_delete_item_then_missing(client):
    uri = await _insert(client)

    first = await client.post("/api/v1/resolver/delete", json={"uri": uri})
    second = await client.post("/api/v1/resolver/delete", json={"uri": uri})

    assert first.json()["rows_affected"] == 1
    assert second.json()["rows_affected"] == 0


async def test_delete_collection_with_selection(client):
    await _insert(client)
    await _insert(client, {"name": "Binx", "gender": 2})

    res = await client.post("/api/v1/resolver/delete", json={
        "uri": PETS_URI,
        "selection": [{"column": "gender", "value": 2}],
    })

    assert res.json()["rows_affected"] == 1


@pytest.mark.parametrize("uri, kind, mime", [
    (PETS_URI, "collection", "vnd.android.cursor.dir/com.example.android.pets/pets"),
    (f"{PETS_URI}/3", "item", "vnd.android.cursor.item/com.example.android.pets/pets"),
])
async def test_get_type(client, uri, kind, mime):
    res = await client.get("/api/v1/resolver/type", params={"uri": uri})
    assert res.status_code == 200
    assert res.json() == {"uri": uri, "kind": kind, "mime_type": mime}


# ─── error envelopes ─────────────────────────────────────────────

async def test_unsupported_uri_returns_400(client):
    res = await client.get(
        "/api/v1/resolver/type",
        params={"uri": "content://com.example.android.pets/staff"},
    )
    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "UNSUPPORTED_RESOURCE"
    assert error["retryable"] is False
    assert error["context"]["uri"] == "content://com.example.android.pets/staff"


async def test_insert_on_item_uri_returns_400(client):
    res = await client.post("/api/v1/resolver/insert", json={
        "uri": f"{PETS_URI}/1", "values": TOTO,
    })
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "UNSUPPORTED_RESOURCE"


async def test_missing_name_returns_field_in_envelope(client):
    res = await client.post("/api/v1/resolver/insert", json={
        "uri": PETS_URI, "values": {"gender": 1},
    })
    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "MISSING_FIELD"
    assert error["field"] == "name"
    assert error["message"] == "Pet requires a name"


async def test_invalid_weight_returns_invalid_value(client):
    uri = await _insert(client)
    res = await client.post("/api/v1/resolver/update", json={
        "uri": uri, "values": {"weight": -1},
    })
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_VALUE"
    assert res.json()["error"]["field"] == "weight"


async def test_malformed_body_returns_request_validation_error(client):
    res = await client.post("/api/v1/resolver/insert", json={"uri": PETS_URI})
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "REQUEST_VALIDATION_ERROR"


async def test_unknown_operator_rejected_by_schema(client):
    res = await client.post("/api/v1/resolver/query", json={
        "uri": PETS_URI,
        "selection": [{"column": "name", "op": "regexp", "value": "T.*"}],
    })
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "REQUEST_VALIDATION_ERROR"


async def test_storage_failure_returns_503(client, notifier):
    class _BrokenStorage:
        async def query_rows(self, *args):
            raise StorageFailureError("disk I/O error", "query")

    app.state.provider = PetProvider(_BrokenStorage(), notifier)

    res = await client.post("/api/v1/resolver/query", json={"uri": PETS_URI})

    assert res.status_code == 503
    error = res.json()["error"]
    assert error["code"] == "STORAGE_FAILURE"
    assert error["context"]["operation"] == "query"


# ─── change stream ───────────────────────────────────────────────

async def _wait_for_observers(notifier, count: int) -> None:
    for _ in range(200):
        if notifier.observer_count >= count:
            return
        await asyncio.sleep(0.01)
    raise AssertionError("change stream never subscribed")


def _events(body: str) -> list[dict]:
    return [
        json.loads(line[len("data: "):])
        for line in body.splitlines() if line.startswith("data: ")
    ]


async def test_change_stream_emits_insert_notification(client, notifier):
    stream = asyncio.create_task(client.get(
        "/api/v1/resolver/changes", params={"uri": PETS_URI, "limit": 1},
    ))
    await _wait_for_observers(notifier, 1)

    await _insert(client)
    res = await asyncio.wait_for(stream, timeout=5)

    assert res.status_code == 200
    assert res.headers["content-type"].startswith("text/event-stream")
    assert _events(res.text) == [
        {"type": "subscribed", "data": {"uri": PETS_URI}},
        {"type": "change", "data": {"uri": PETS_URI}},
    ]
    assert notifier.observer_count == 0


async def test_change_stream_on_collection_hears_item_updates(client, notifier):
    uri = await _insert(client)
    stream = asyncio.create_task(client.get(
        "/api/v1/resolver/changes", params={"uri": PETS_URI, "limit": 1},
    ))
    await _wait_for_observers(notifier, 1)

    await client.post(
        "/api/v1/resolver/update", json={"uri": uri, "values": {"weight": 9}},
    )
    res = await asyncio.wait_for(stream, timeout=5)

    assert _events(res.text)[-1] == {"type": "change", "data": {"uri": uri}}


async def test_change_stream_rejects_malformed_uri(client, notifier):
    res = await client.get("/api/v1/resolver/changes", params={"uri": "content://"})
    assert res.status_code == 400
    assert notifier.observer_count == 0


# ─── health ──────────────────────────────────────────────────────

async def test_liveness(client):
    res = await client.get("/api/v1/health/")
    assert res.status_code == 200
    assert res.json()["service"] == "pet-provider-api"


async def test_readiness_with_database(client):
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 200
    assert res.json()["checks"]["database"] == "healthy"
    assert res.json()["checks"]["pets_table"] == "healthy"
    assert res.json()["checks"]["provider"] == "healthy"


async def test_readiness_reports_missing_table(client):
    from sqlalchemy.ext.asyncio import create_async_engine

    import pet_provider.infrastructure.database as db_module
    from pet_provider.infrastructure.database import DatabaseSessionManager

    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    db_module.db_manager = DatabaseSessionManager(engine=engine)
    try:
        res = await client.get("/api/v1/health/ready")
    finally:
        await engine.dispose()

    assert res.status_code == 503
    body = res.json()
    assert body["failed"] == ["pets_table"]
    assert body["checks"]["database"] == "healthy"
    assert body["checks"]["pets_table"] == "missing"


async def test_readiness_reports_unwired_provider(client):
    app.state.provider = None
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 503
    assert res.json()["failed"] == ["provider"]


# ─── envelopes from the global handlers ──────────────────────────

async def test_request_validation_details_name_body_fields(client):
    res = await client.post("/api/v1/resolver/query", json={
        "uri": PETS_URI,
        "selection": [{"column": "name", "op": "regexp"}],
    })
    error = res.json()["error"]
    assert error["category"] == "validation"
    assert error["retryable"] is False
    assert error["context"]["operation"] == "query"
    assert [d["field"] for d in error["details"]] == ["selection.0.op"]


async def test_unexpected_error_uses_internal_envelope(provider, notifier):
    from httpx import ASGITransport, AsyncClient

    class _ExplodingStorage:
        async def query_rows(self, *args):
            raise RuntimeError("secret connection string")

    app.state.provider = PetProvider(_ExplodingStorage(), notifier)
    try:
        async with AsyncClient(
            transport=ASGITransport(app=app, raise_app_exceptions=False),
            base_url="http://test",
        ) as c:
            res = await c.post("/api/v1/resolver/query", json={"uri": PETS_URI})
    finally:
        del app.state.provider

    assert res.status_code == 500
    error = res.json()["error"]
    assert error["code"] == "INTERNAL_ERROR"
    assert error["category"] == "internal"
    assert "secret" not in res.text


async def test_query_item_key_beyond_integer_range_is_empty(client):
    await _insert(client)
    res = await client.post("/api/v1/resolver/query", json={
        "uri": f"{PETS_URI}/99999999999999999999",
    })
    assert res.status_code == 200
    assert res.json()["count"] == 0


async def test_insert_oversized_weight_is_invalid_value(client):
    res = await client.post("/api/v1/resolver/insert", json={
        "uri": PETS_URI,
        "values": {"name": "Big", "gender": 1, "weight": 10**20},
    })
    assert res.status_code == 400
    assert res.json()["error"]["field"] == "weight"
