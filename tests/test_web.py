import asyncio
from decimal import Decimal

import pytest
from aiohttp.test_utils import TestClient, TestServer

from app.db import init_engine
from app.services import store
from app.services.assignment import Assignment
from app.services.rate_limit import RateLimiter
from app.web import create_app


@pytest.fixture
def saved_group(database):
    return store.save(
        store.StoredGroup(
            record_id="rec0000000000001",
            url_id="office-party",
            name="Office Party",
            budget=Decimal("25"),
            assignments=(
                Assignment("pa", "Alice", "pb", "Bob", "secret-a"),
                Assignment("pb", "Bob", "pa", "Alice", "secret-b"),
            ),
        )
    )


def fetch(paths, limiter=None):
    async def run():
        responses = []
        async with TestClient(TestServer(create_app(limiter))) as client:
            for path in paths:
                response = await client.get(path)
                responses.append((response.status, await response.json()))
        return responses

    return asyncio.run(run())


def test_reveal_route_returns_match(saved_group):
    [(status, body)] = fetch(["/reveal/office-party/rec0000000000001/pa/secret-a"])
    assert status == 200
    assert body == {"group_name": "Office Party", "giver": "Alice", "receiver": "Bob", "budget": "25.00"}


def test_reveal_route_wrong_key(saved_group):
    [(status, body)] = fetch(["/reveal/office-party/rec0000000000001/pa/secret-b"])
    assert status == 404
    assert body["error"] == "invalid_key"
    assert "Bob" not in body["message"]


def test_reveal_route_unknown_group(saved_group):
    [(status, body)] = fetch(["/reveal/family/rec0000000000001/pa/secret-a"])
    assert status == 404
    assert body["error"] == "not_found"


def test_reveal_route_store_unavailable(tmp_path):
    init_engine(f"sqlite+pysqlite:///{tmp_path / 'missing' / 'santa.db'}")
    [(status, body)] = fetch(["/reveal/office-party/rec0000000000001/pa/secret-a"])
    assert status == 503
    assert body["error"] == "store_unavailable"


def test_reveal_route_is_rate_limited(saved_group):
    limiter = RateLimiter(max_calls=2, period_seconds=60)
    path = "/reveal/office-party/rec0000000000001/pa/secret-b"
    responses = fetch([path, path, path], limiter)
    assert [status for status, _ in responses] == [404, 404, 429]
    assert responses[-1][1]["error"] == "rate_limited"
