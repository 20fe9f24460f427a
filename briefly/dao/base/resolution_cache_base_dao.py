"""Abstract base class for the resolution cache.

The resolution cache is an expiring key-value store shadowing the durable
mapping store in both directions:

    <long url>          -> <sequence id or shortcode>
    <sequence id/code>  -> <long url>

Entries are advisory. A missing entry never means the mapping does not
exist, only that the durable store must be consulted.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from briefly.dao.cache.cache_key_schema import CacheKeySchema


class ResolutionCacheBaseDAO(ABC):
    """Interface for resolution cache DAOs.

    Attributes:
        keys (CacheKeySchema):
            Key schema helper shared by all implementations, so callers can
            build key names without knowing the backing store.

    Methods:
        get(key: str) -> str | None
        set(key: str, value: str, ttl: int) -> ResolutionCacheBaseDAO
        expire(key: str, ttl: int) -> bool
    """

    keys: 'CacheKeySchema'

    @abstractmethod
    def get(self, key: str, **kwargs) -> str | None:
        """Return the cached value, or None on miss.

        Raises:
            DataStoreError:
                If the cache is unreachable.
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str, ttl: int, **kwargs) -> 'ResolutionCacheBaseDAO':
        """Store a value that expires after `ttl` seconds.

        Raises:
            DataStoreError:
                If the cache is unreachable.
        """
        pass

    @abstractmethod
    def expire(self, key: str, ttl: int, **kwargs) -> bool:
        """Reset the TTL of an existing entry without changing its value.

        Returns:
            bool: True if the entry existed and its TTL was reset.

        Raises:
            DataStoreError:
                If the cache is unreachable.
        """
        pass
