from briefly.dao.cache.cache_key_schema import CacheKeySchema
from briefly.dao.cache.resolution_cache_dao import ResolutionCacheRedisDAO

__all__ = [
    'CacheKeySchema',
    'ResolutionCacheRedisDAO',
]
