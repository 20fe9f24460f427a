"""DAO for the resolution cache backed by Redis

Responsibilities:
    - Read cached values (long url <-> sequence id / shortcode)
    - Write cached values with a TTL
    - Slide the TTL of entries on read

Classes:
    ResolutionCacheRedisDAO:
        Concrete ResolutionCacheBaseDAO using RedisClientMixin for client setup
        and CacheKeySchema for key generation.

Example:
    >>> dao = ResolutionCacheRedisDAO(prefix="briefly:dev")
    >>> key = dao.keys.ref_key('sequence', '1')
    >>> dao.set(key, 'https://example.com/a', ttl=60)
    <ResolutionCacheRedisDAO>
    >>> dao.get(key)
    'https://example.com/a'
    >>> dao.expire(key, ttl=60)
    True
"""

from beartype import beartype

from briefly.dao.base import ResolutionCacheBaseDAO
from briefly.dao.cache.cache_key_schema import CacheKeySchema
from briefly.dao.redis.mixins import RedisClientMixin
from briefly.dao.redis.helpers import handle_redis_error


class ResolutionCacheRedisDAO(RedisClientMixin, ResolutionCacheBaseDAO):
    """Redis-backed expiring key-value cache

    Attributes (via mixins):
        redis (redis.Redis):
            Redis client used to communicate with the cache.
        keys (CacheKeySchema):
            Key schema helper for generating namespaced cache keys.
    """

    key_schema = CacheKeySchema

    @handle_redis_error
    @beartype
    def get(self, key: str, **kwargs) -> str | None:
        return self.redis.get(key)

    @handle_redis_error
    @beartype
    def set(self, key: str, value: str, ttl: int, **kwargs) -> 'ResolutionCacheRedisDAO':
        self.redis.set(key, value, ex=ttl)
        return self

    @handle_redis_error
    @beartype
    def expire(self, key: str, ttl: int, **kwargs) -> bool:
        return bool(self.redis.expire(key, ttl))
