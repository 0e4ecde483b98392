"""Shared test fixtures for endb."""

import os

import pytest
import pytest_asyncio

from endb import Endb
from endb.adapters.memory import MemoryAdapter
from endb.core.bus import EventBus
from endb.core.registry import AdapterRegistry


# Backends that need a running service are enabled by the same variables
# the docker-compose test setup exports.
def _network_uris() -> dict[str, str | None]:
    return {
        "postgres": (
            f"postgresql://postgres:{os.environ.get('POSTGRES_PASSWORD', 'endb')}"
            f"@{os.environ['POSTGRES_HOST']}:5432/endb_test"
            if os.environ.get("POSTGRES_HOST")
            else None
        ),
        "mysql": (
            f"mysql://mysql:{os.environ.get('MYSQL_PASSWORD', 'endb')}"
            f"@{os.environ['MYSQL_HOST']}:3306/endb_test"
            if os.environ.get("MYSQL_HOST")
            else None
        ),
        "mongodb": (
            f"mongodb://{os.environ['MONGO_HOST']}:27017/endb_test"
            if os.environ.get("MONGO_HOST")
            else None
        ),
    }


BACKENDS = ["memory", "sqlite", "redis", "leveldb", "postgres", "mysql", "mongodb"]


@pytest.fixture
def bus():
    """Create a fresh event bus."""
    return EventBus()


@pytest.fixture
def registry():
    """Create a fresh adapter registry with the default table."""
    return AdapterRegistry()


@pytest.fixture
def db():
    """An in-memory Endb instance."""
    return Endb()


@pytest_asyncio.fixture(params=BACKENDS)
async def make_db(request, tmp_path):
    """
    Factory building Endb instances on one backend.

    Every instance created by one test shares the same physical store,
    so namespaces can be checked against each other.
    """
    backend = request.param
    created: list[Endb] = []

    level_handle = None

    if backend == "memory":
        shared: dict[str, str] = {}

        def build(**options):
            return Endb(store=MemoryAdapter(data=shared), **options)

    elif backend == "sqlite":
        uri = f"sqlite://{tmp_path / 'test.sqlite'}"

        def build(**options):
            return Endb(uri, busy_timeout=30000, **options)

    elif backend == "redis":
        fakeredis = pytest.importorskip("fakeredis")
        from endb.adapters.redis import RedisAdapter

        server = fakeredis.FakeServer()

        def build(**options):
            client = fakeredis.FakeAsyncRedis(server=server, decode_responses=True)
            return Endb(store=RedisAdapter(client=client), **options)

    elif backend == "leveldb":
        plyvel = pytest.importorskip("plyvel")
        from endb.adapters.leveldb import LevelDBAdapter

        # LevelDB allows a single open handle per directory
        level_handle = plyvel.DB(str(tmp_path / "level"), create_if_missing=True)

        def build(**options):
            return Endb(store=LevelDBAdapter(db=level_handle), **options)

    else:
        uri = _network_uris()[backend]
        if uri is None:
            pytest.skip(f"{backend} service not configured")

        def build(**options):
            return Endb(uri, **options)

    def factory(**options) -> Endb:
        instance = build(**options)
        created.append(instance)
        return instance

    yield factory

    for instance in created:
        if backend in ("postgres", "mysql", "mongodb"):
            await instance.clear()
        await instance.close()
    if level_handle is not None:
        level_handle.close()
