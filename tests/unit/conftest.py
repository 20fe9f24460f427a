"""Shared fixtures: in-memory doubles of the data access objects

The doubles honour the DAO contracts (atomic counter, insert-only mapping
store, expiring cache) without a Redis server, so service-level tests can
exercise real collaboration paths. Each double can be switched into an
"unreachable" mode that raises DataStoreError like a Redis DAO would.
"""

import threading

import pytest

from briefly.dao.base import MappingBaseDAO, ResolutionCacheBaseDAO, SequenceBaseDAO
from briefly.dao.cache import CacheKeySchema
from briefly.dao.exceptions import DataStoreError, MappingAlreadyExistsError
from briefly.models import UrlMappingModel
from briefly.services import RandomCodeStrategy, SequenceAllocator, SequenceStrategy, ShortenerService
from briefly.utils.config import ShortenerConfig
from briefly.utils.encoder import Base62Codec


class InMemorySequenceDAO(SequenceBaseDAO):
    def __init__(self, start: int = 0):
        self.value = start
        self.unreachable = False
        self._lock = threading.Lock()

    def increment_and_get(self, **kwargs) -> int:
        if self.unreachable:
            raise DataStoreError("Can't connect to Redis at redis.test:6379/0.")
        with self._lock:
            self.value += 1
            return self.value

    def current(self, **kwargs) -> int:
        if self.unreachable:
            raise DataStoreError("Can't connect to Redis at redis.test:6379/0.")
        return self.value


class InMemoryMappingDAO(MappingBaseDAO):
    def __init__(self):
        self.by_sequence_id: dict[int, UrlMappingModel] = {}
        self.by_shortcode: dict[str, UrlMappingModel] = {}
        self.by_long_url: dict[str, UrlMappingModel] = {}
        self.unreachable = False
        self.save_calls = 0
        self._lock = threading.Lock()

    def _check(self):
        if self.unreachable:
            raise DataStoreError("Can't connect to Redis at redis.test:6379/0.")

    def find_by_long_url(self, long_url: str, **kwargs) -> UrlMappingModel | None:
        self._check()
        return self.by_long_url.get(long_url)

    def find_by_sequence_id(self, sequence_id: int, **kwargs) -> UrlMappingModel | None:
        self._check()
        return self.by_sequence_id.get(sequence_id)

    def find_by_shortcode(self, shortcode: str, **kwargs) -> UrlMappingModel | None:
        self._check()
        return self.by_shortcode.get(shortcode)

    def save(self, mapping: UrlMappingModel, **kwargs) -> 'InMemoryMappingDAO':
        self._check()
        with self._lock:
            self.save_calls += 1
            if mapping.long_url in self.by_long_url:
                raise MappingAlreadyExistsError(f"Long URL '{mapping.long_url}' is already mapped.")
            if mapping.sequence_id is not None:
                if mapping.sequence_id in self.by_sequence_id:
                    raise MappingAlreadyExistsError(f"Mapping '{mapping.ref}' already exists.")
                self.by_sequence_id[mapping.sequence_id] = mapping
            else:
                if mapping.shortcode in self.by_shortcode:
                    raise MappingAlreadyExistsError(f"Mapping '{mapping.ref}' already exists.")
                self.by_shortcode[mapping.shortcode] = mapping
            self.by_long_url[mapping.long_url] = mapping
        return self

    def __len__(self) -> int:
        return len(self.by_sequence_id) + len(self.by_shortcode)


class InMemoryResolutionCache(ResolutionCacheBaseDAO):
    """Dict-backed cache; `ttls` records the last TTL applied to each key."""

    def __init__(self, prefix: str | None = None):
        self.keys = CacheKeySchema(prefix=prefix)
        self.entries: dict[str, str] = {}
        self.ttls: dict[str, int] = {}
        self.unreachable = False
        self._lock = threading.Lock()

    def _check(self):
        if self.unreachable:
            raise DataStoreError("Can't connect to Redis at cache.test:6379/0.")

    def get(self, key: str, **kwargs) -> str | None:
        self._check()
        return self.entries.get(key)

    def set(self, key: str, value: str, ttl: int, **kwargs) -> 'InMemoryResolutionCache':
        self._check()
        with self._lock:
            self.entries[key] = value
            self.ttls[key] = ttl
        return self

    def expire(self, key: str, ttl: int, **kwargs) -> bool:
        self._check()
        with self._lock:
            if key not in self.entries:
                return False
            self.ttls[key] = ttl
            return True

    def evict(self, key: str) -> None:
        self.entries.pop(key, None)
        self.ttls.pop(key, None)

    def clear(self) -> None:
        self.entries.clear()
        self.ttls.clear()


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def app_prefix() -> str:
    return 'testapp:test'


@pytest.fixture
def config() -> ShortenerConfig:
    return ShortenerConfig(short_url_prefix='http://short.ly/', cache_ttl=60)


@pytest.fixture
def codec() -> Base62Codec:
    return Base62Codec()


@pytest.fixture
def sequence_dao() -> InMemorySequenceDAO:
    return InMemorySequenceDAO()


@pytest.fixture
def store() -> InMemoryMappingDAO:
    return InMemoryMappingDAO()


@pytest.fixture
def cache(app_prefix) -> InMemoryResolutionCache:
    return InMemoryResolutionCache(prefix=app_prefix)


@pytest.fixture
def allocator(sequence_dao) -> SequenceAllocator:
    return SequenceAllocator(sequence_dao)


@pytest.fixture
def sequence_strategy(store, codec, allocator) -> SequenceStrategy:
    return SequenceStrategy(store, codec, allocator)


@pytest.fixture
def random_strategy(store, codec) -> RandomCodeStrategy:
    return RandomCodeStrategy(store, codec, length=7)


@pytest.fixture
def service(config, sequence_strategy, store, cache) -> ShortenerService:
    return ShortenerService(config=config, strategy=sequence_strategy, store=store, cache=cache)
