"""Tests for cache adapters.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

import fnmatch
import hashlib
import os

import pytest

from roadbench_core.exceptions import BackendOpenError, BackendOperationError
from roadbench_core.profile.value_profile import ValueProfile
from roadbench_core.store.backend import AdapterConfig
from roadbench_core.store.file import FileAdapter
from roadbench_core.store.memory import BoundedLRUCache, MemoryAdapter
from roadbench_core.store.mmap import LMDBAdapter
from roadbench_core.store.redis import RedisAdapter
from roadbench_core.store.registry import AdapterRegistry, get_registry, resolve_adapter
from roadbench_core.workload.dataset import Dataset
from roadbench_core.workload.driver import WorkloadDriver, WorkloadKind

LOCAL_BACKENDS = ["memory", "file", "diskcache", "lmdb", "dbm", "leveldb"]
PROFILE = ValueProfile.for_lines(3)


def open_backend(name, root, entry_count=100, profile=PROFILE, **options):
    adapter_cls = resolve_adapter(name)
    for module in adapter_cls.requires:
        pytest.importorskip(module)
    config = adapter_cls.config_class.for_trial(root, entry_count, profile, **options)
    return adapter_cls.open(config)


def files_under(path):
    found = []
    for root, _, files in os.walk(path):
        found.extend(os.path.join(root, name) for name in files)
    return found


@pytest.fixture(params=LOCAL_BACKENDS)
def adapter(request, tmp_path):
    root = tmp_path / request.param
    root.mkdir()
    handle = open_backend(request.param, root)
    yield handle
    handle.close()


class TestAdapterContract:
    """Contract tests run against every local backend."""

    def test_round_trip(self, adapter):
        """Test put then get returns the value."""
        value = PROFILE.value_for_index(1)
        adapter.put("key_1", value)
        adapter.commit()
        assert adapter.get("key_1") == value

    def test_miss_is_none(self, adapter):
        """Test absent keys read as None."""
        assert adapter.get("key_missing") is None

    def test_last_write_wins(self, adapter):
        """Test overwrite is visible before and after commit."""
        adapter.put("key_0", "first")
        adapter.put("key_0", "second")
        assert adapter.get("key_0") == "second"
        adapter.commit()
        assert adapter.get("key_0") == "second"

    def test_many_entries(self, adapter):
        """Test a batch of entries round-trips."""
        for i in range(200):
            adapter.put(f"key_{i}", PROFILE.value_for_index(i))
        adapter.commit()
        for i in range(200):
            assert adapter.get(f"key_{i}") == PROFILE.value_for_index(i)

    def test_storage_stays_under_root(self, adapter):
        """Test reported paths live under the assigned root."""
        adapter.put("key_0", "value")
        adapter.commit()
        root = adapter.config.storage_root.resolve()
        for path in adapter.storage_paths():
            assert path.resolve() == root or root in path.resolve().parents

    def test_persistent_flag_matches_paths(self, adapter):
        """Test only persistent backends report storage."""
        if adapter.persistent:
            assert adapter.storage_paths()
        else:
            assert adapter.storage_paths() == []

    def test_close_idempotent(self, adapter):
        """Test close twice."""
        adapter.close()
        adapter.close()
        assert adapter.closed

    def test_operations_after_close(self, adapter):
        """Test closed adapters reject operations."""
        adapter.close()
        with pytest.raises(BackendOperationError) as exc_info:
            adapter.put("key_0", "value")
        assert exc_info.value.backend == adapter.name
        assert exc_info.value.operation == "put"
        with pytest.raises(BackendOperationError):
            adapter.get("key_0")

    def test_paths_reported_after_close(self, adapter):
        """Test storage paths remain known after close."""
        before = adapter.storage_paths()
        adapter.close()
        assert adapter.storage_paths() == before


class TestOpenFailures:
    """Tests for BackendOpenError translation."""

    def test_bad_hash_algorithm(self, tmp_path):
        """Test file adapter rejects an unknown hash."""
        with pytest.raises(BackendOpenError) as exc_info:
            open_backend("file", tmp_path, hash_algorithm="no-such-hash")
        assert exc_info.value.backend == "file"

    def test_dbm_missing_root(self, tmp_path):
        """Test dbm cannot create files in a missing directory."""
        with pytest.raises(BackendOpenError):
            open_backend("dbm", tmp_path / "missing" / "deeper")

    def test_unknown_codec(self, tmp_path):
        """Test unknown codec fails at open."""
        with pytest.raises(BackendOpenError):
            FileAdapter.open(AdapterConfig(storage_root=tmp_path, codec="nope"))

    def test_original_error_chained(self, tmp_path):
        """Test the engine error is kept as the cause."""
        with pytest.raises(BackendOpenError) as exc_info:
            open_backend("file", tmp_path, hash_algorithm="no-such-hash")
        assert exc_info.value.__cause__ is not None

    def test_half_open_engine_released(self, tmp_path):
        """Test resources acquired before an open failure are released."""
        released = []

        class HalfOpenAdapter(MemoryAdapter):
            name = "half_open"

            def _open(self):
                super()._open()
                raise OSError("second step failed")

            def _close(self):
                released.append(self._cache is not None)
                super()._close()

        with pytest.raises(BackendOpenError):
            HalfOpenAdapter.open(AdapterConfig(storage_root=tmp_path))
        assert released == [True]

    def test_release_failure_keeps_open_error(self, tmp_path):
        """Test a failing release does not replace the open error."""

        class StuckAdapter(MemoryAdapter):
            name = "stuck"

            def _open(self):
                raise OSError("cannot start")

            def _close(self):
                raise RuntimeError("cannot release")

        with pytest.raises(BackendOpenError) as exc_info:
            StuckAdapter.open(AdapterConfig(storage_root=tmp_path))
        assert "cannot start" in str(exc_info.value)

    def test_redis_pool_released_when_ping_fails(self, tmp_path, monkeypatch):
        """Test the redis pool is disconnected when the server is unreachable."""

        class DeadPool:
            disconnected = False

            def disconnect(self):
                DeadPool.disconnected = True

        class DeadClient(FakeRedis):
            def ping(self):
                raise ConnectionError("connection refused")

            def scan(self, cursor, match=None, count=None):
                raise ConnectionError("connection refused")

        def connect(self):
            self._pool = DeadPool()
            return DeadClient()

        monkeypatch.setattr(RedisAdapter, "_connect", connect)
        with pytest.raises(BackendOpenError):
            RedisAdapter.open(RedisAdapter.config_class.for_trial(tmp_path, 10, PROFILE))
        assert DeadPool.disconnected


class TestCodecSelection:
    """Tests for codec handling per engine."""

    @pytest.mark.parametrize("name", ["memory", "diskcache"])
    def test_native_engines_reject_codec(self, tmp_path, name):
        """Test engines storing str values refuse a codec they would ignore."""
        with pytest.raises(BackendOpenError) as exc_info:
            open_backend(name, tmp_path, codec="pickle")
        assert "natively" in str(exc_info.value)

    @pytest.mark.parametrize("name", ["file", "dbm", "lmdb"])
    def test_byte_engines_use_codec(self, tmp_path, name):
        """Test byte-oriented engines round-trip through a non-default codec."""
        handle = open_backend(name, tmp_path, codec="pickle")
        handle.put("key_0", "value")
        handle.commit()
        assert handle.get("key_0") == "value"
        handle.close()


class TestOperationFailures:
    """Tests for BackendOperationError translation."""

    def test_engine_error_wrapped(self, tmp_path, monkeypatch):
        """Test engine exceptions surface as BackendOperationError."""
        handle = open_backend("memory", tmp_path)

        def broken(key, value):
            raise RuntimeError("disk full")

        monkeypatch.setattr(handle, "_put", broken)
        with pytest.raises(BackendOperationError) as exc_info:
            handle.put("key_3", "value")
        assert exc_info.value.key == "key_3"
        assert "disk full" in str(exc_info.value)
        handle.close()


class TestBoundedLRUCache:
    """Tests for the in-process bounded map."""

    def test_eviction(self):
        """Test LRU entry evicted at capacity."""
        cache = BoundedLRUCache(max_size=2)
        cache.put("a", "1")
        cache.put("b", "2")
        cache.get("a")
        cache.put("c", "3")

        assert cache.get("b") is None
        assert cache.get("a") == "1"
        assert cache.evictions == 1
        assert len(cache) == 2

    def test_peek_lru(self):
        """Test LRU peek follows access order."""
        cache = BoundedLRUCache(max_size=3)
        cache.put("a", "1")
        cache.put("b", "2")
        assert cache.peek_lru() == "a"
        cache.get("a")
        assert cache.peek_lru() == "b"

    def test_invalid_size(self):
        """Test non-positive bound rejected."""
        with pytest.raises(ValueError):
            BoundedLRUCache(max_size=0)

    def test_adapter_bound(self, tmp_path):
        """Test memory adapter holds twice the entry count."""
        handle = open_backend("memory", tmp_path, entry_count=50)
        assert handle._cache.max_size == 100
        for i in range(100):
            handle.put(f"key_{i}", "v")
        assert handle.get("key_0") == "v"
        handle.close()


class TestFileAdapter:
    """Tests for the sharded file layout."""

    def test_two_level_shards(self, tmp_path):
        """Test entry file sits two shard levels below the base path."""
        handle = open_backend("file", tmp_path)
        handle.put("key_42", "value")

        digest = hashlib.sha256(b"key_42").hexdigest()
        expected = handle.base_path / digest[:2] / digest[2:4] / digest
        assert expected.is_file()
        assert handle.disk_usage() == len(b"value")
        handle.close()

    def test_no_temp_files_left(self, tmp_path):
        """Test atomic writes leave no temp files."""
        handle = open_backend("file", tmp_path)
        for i in range(20):
            handle.put(f"key_{i}", "value")
        assert not [f for f in files_under(tmp_path) if f.endswith(".tmp")]
        handle.close()


class FlakyTxn:
    """Write transaction wrapper failing the put of one key."""

    def __init__(self, txn, fail_key, error):
        self._txn = txn
        self._fail_key = fail_key
        self._error = error

    def put(self, key, value):
        if key == self._fail_key:
            raise self._error
        return self._txn.put(key, value)

    def __getattr__(self, name):
        return getattr(self._txn, name)


class FlakyEnv:
    """LMDB environment wrapper handing out FlakyTxn write transactions."""

    def __init__(self, env, fail_key, error):
        self._env = env
        self._fail_key = fail_key
        self._error = error

    def begin(self, write=False):
        txn = self._env.begin(write=write)
        if write:
            return FlakyTxn(txn, self._fail_key, self._error)
        return txn

    def __getattr__(self, name):
        return getattr(self._env, name)


class TestLMDBAdapter:
    """Tests for the memory-mapped adapter."""

    def test_reads_see_uncommitted_writes(self, tmp_path):
        """Test get inside the open write transaction."""
        handle = open_backend("lmdb", tmp_path)
        handle.put("key_0", "pending")
        assert handle.get("key_0") == "pending"
        handle.commit()
        assert handle.entry_count() == 1
        handle.close()

    def test_repeated_write_passes(self, tmp_path):
        """Test back-to-back full rewrites of large values fit the map."""
        profile = ValueProfile.for_lines(1000)
        data = Dataset.build(1000, profile)
        handle = open_backend("lmdb", tmp_path, entry_count=1000, profile=profile)
        driver = WorkloadDriver()

        for _ in range(6):
            assert driver.run(handle, data, WorkloadKind.WRITE).committed
        assert driver.run(handle, data, WorkloadKind.MIXED).misses == 0
        assert driver.run(handle, data, WorkloadKind.READ).misses == 0
        handle.close()

    def test_failed_put_keeps_handle_usable(self, tmp_path):
        """Test a failed pass aborts its transaction and later passes work."""
        lmdb = pytest.importorskip("lmdb")
        data = Dataset.build(10, PROFILE)
        handle = open_backend("lmdb", tmp_path, entry_count=10)
        driver = WorkloadDriver()
        driver.run(handle, data, WorkloadKind.WRITE)

        handle._env = FlakyEnv(handle._env, b"key_3", lmdb.Error("mdb_put: write rejected"))
        with pytest.raises(BackendOperationError) as exc_info:
            driver.run(handle, data, WorkloadKind.WRITE)
        assert exc_info.value.key == "key_3"
        assert handle._txn is None

        result = driver.run(handle, data, WorkloadKind.READ)
        assert result.misses == 0
        assert handle.get("key_0") == data.value(0)
        handle.close()
        assert handle.closed

    def test_map_full_grows_map(self, tmp_path):
        """Test running out of map space doubles the map for the next pass."""
        lmdb = pytest.importorskip("lmdb")
        data = Dataset.build(10, PROFILE)
        handle = open_backend("lmdb", tmp_path, entry_count=10)
        before = handle._env.info()["map_size"]

        handle._env = FlakyEnv(handle._env, b"key_5", lmdb.MapFullError("mdb_put: MDB_MAP_FULL"))
        with pytest.raises(BackendOperationError):
            WorkloadDriver().run(handle, data, WorkloadKind.WRITE)

        assert handle._env.info()["map_size"] == before * 2
        assert WorkloadDriver().run(handle, data, WorkloadKind.READ).misses == 10
        handle.close()

    def test_map_size_floor(self, tmp_path):
        """Test small trials get the minimum map size."""
        config = LMDBAdapter.config_class.for_trial(tmp_path, 10, PROFILE)
        assert LMDBAdapter(config).map_size() == config.min_map_size

    def test_map_size_scales(self, tmp_path):
        """Test large trials get a proportional map."""
        profile = ValueProfile.for_lines(1000)
        config = LMDBAdapter.config_class.for_trial(tmp_path, 100000, profile)
        assert LMDBAdapter(config).map_size() > config.estimated_bytes


class FakeRedis:
    """In-process stand-in for a redis client."""

    def __init__(self):
        self.data = {}

    def ping(self):
        return True

    def set(self, key, value):
        self.data[key] = value

    def get(self, key):
        return self.data.get(key)

    def scan(self, cursor, match=None, count=None):
        return 0, [k for k in self.data if fnmatch.fnmatch(k, match)]

    def delete(self, *keys):
        return sum(1 for k in keys if self.data.pop(k, None) is not None)


class TestRedisAdapter:
    """Tests for the redis adapter against a fake client."""

    @pytest.fixture
    def fake(self, monkeypatch):
        client = FakeRedis()
        monkeypatch.setattr(RedisAdapter, "_connect", lambda self: client)
        return client

    def test_round_trip(self, tmp_path, fake):
        """Test put/get through the prefix."""
        handle = RedisAdapter.open(RedisAdapter.config_class.for_trial(tmp_path, 10, PROFILE))
        handle.put("key_1", "value")
        assert handle.get("key_1") == "value"
        assert f"{handle.key_prefix}key_1" in fake.data
        assert handle.key_prefix == f"roadbench:{tmp_path.name}:"
        handle.close()

    def test_close_clears_own_prefix(self, tmp_path, fake):
        """Test close removes only this adapter's keys."""
        fake.data["other:key"] = b"keep"
        handle = RedisAdapter.open(RedisAdapter.config_class.for_trial(tmp_path, 10, PROFILE))
        for i in range(5):
            handle.put(f"key_{i}", "value")
        handle.close()
        assert fake.data == {"other:key": b"keep"}

    def test_opt_in(self):
        """Test redis is excluded from default backend selection."""
        assert RedisAdapter.default_enabled is False
        assert "redis" not in get_registry().available()
        assert RedisAdapter.persistent is False


class TestAdapterRegistry:
    """Tests for adapter lookup."""

    def test_builtin_names(self):
        """Test every variant is registered."""
        names = set(get_registry().list_names())
        assert {"memory", "file", "diskcache", "lmdb", "dbm", "leveldb", "redis"} <= names

    def test_resolve(self):
        """Test names and classes both resolve."""
        assert resolve_adapter("memory") is MemoryAdapter
        assert resolve_adapter(FileAdapter) is FileAdapter

    def test_unknown(self):
        """Test unknown backend raises KeyError."""
        with pytest.raises(KeyError):
            resolve_adapter("chronicle")

    def test_register_custom(self):
        """Test a new backend only needs registering."""

        class EchoAdapter(MemoryAdapter):
            name = "echo"

        registry = AdapterRegistry()
        registry.register(EchoAdapter)
        assert registry.get("echo") is EchoAdapter
        assert "echo" in registry

    def test_available_always_has_stdlib_backends(self):
        """Test backends without third-party requirements are available."""
        available = get_registry().available()
        assert {"memory", "file", "dbm"} <= set(available)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
