"""Tests for the Redis adapter against fakeredis."""

import pytest

fakeredis = pytest.importorskip("fakeredis")

from endb.adapters.redis import RedisAdapter  # noqa: E402
from endb.core.errors import StorageError  # noqa: E402


@pytest.fixture
def client():
    return fakeredis.FakeAsyncRedis(decode_responses=True)


@pytest.mark.asyncio
async def test_set_tracks_key_in_namespace_index(client):
    store = RedisAdapter(namespace="ns", client=client)
    await store.set("ns:a", "1")

    assert await client.get("ns:a") == "1"
    assert await client.smembers("endb.index.ns") == {"ns:a"}


@pytest.mark.asyncio
async def test_delete_removes_from_index(client):
    store = RedisAdapter(namespace="ns", client=client)
    await store.set("ns:a", "1")

    assert await store.delete("ns:a") is True
    assert await store.delete("ns:a") is False
    assert await client.smembers("endb.index.ns") == set()


@pytest.mark.asyncio
async def test_clear_removes_keys_and_index(client):
    store = RedisAdapter(namespace="ns", client=client)
    await store.set("ns:a", "1")
    await store.set("ns:b", "2")
    await client.set("unrelated", "x")

    await store.clear()

    assert await client.exists("ns:a", "ns:b", "endb.index.ns") == 0
    assert await client.get("unrelated") == "x"


@pytest.mark.asyncio
async def test_clear_empty_namespace(client):
    store = RedisAdapter(namespace="ns", client=client)
    await store.clear()
    assert await store.all() == []


@pytest.mark.asyncio
async def test_all_skips_stale_index_entries(client):
    store = RedisAdapter(namespace="ns", client=client)
    await store.set("ns:a", "1")
    await store.set("ns:b", "2")
    await client.delete("ns:b")  # removed behind endb's back

    assert await store.all() == [("ns:a", "1")]


@pytest.mark.asyncio
async def test_unreachable_server_raises_storage_error():
    store = RedisAdapter(uri="redis://127.0.0.1:1")
    with pytest.raises(StorageError):
        await store.get("ns:a")


def test_index_key_never_contains_separator():
    assert RedisAdapter(namespace="a:b").index_key == "endb.index.a%3Ab"


@pytest.mark.asyncio
async def test_user_key_cannot_overwrite_another_index(client):
    default = RedisAdapter(namespace="endb", client=client)
    other = RedisAdapter(namespace="namespace", client=client)
    await default.set("endb:a", "1")
    await other.set("namespace:endb", "2")
    await other.set(f"namespace:{default.index_key}", "3")

    assert await default.all() == [("endb:a", "1")]
    await default.set("endb:b", "4")
    await default.clear()
    assert await default.all() == []
    assert len(await other.all()) == 2
