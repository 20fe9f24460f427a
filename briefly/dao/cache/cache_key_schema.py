import functools
from collections.abc import Callable

from briefly.models import AllocationStrategy
from briefly.utils.helpers import url_digest


__all__ = ['CacheKeySchema']  # hide internal decorator prefix_key from imports


def prefix_key(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> str:
        key = func(self, *args, **kwargs)
        return f'{self.prefix}:{key}' if self.prefix is not None else key

    return wrapper


class CacheKeySchema:
    """Provide standardized Redis keys for the resolution cache.

    An optional prefix can be provided to namespace all generated keys.
    It is highly encouraged to set a custom prefix for each app and environment,
    e.g. "briefly:prod" or "briefly:dev".

    Every mapping is shadowed under two keys:
        cache:<prefix>:resolve:url:<seq|code>:<url digest>   -> sequence id / shortcode
        cache:<prefix>:resolve:<seq|code>:<ref>              -> long url

    Both keys carry the allocation scheme of the cached ref, so a sequence id
    is never read back as a random code (or the reverse) once the active
    strategy changes.

    NOTE: this class mirrors RedisKeySchema, but cache keys live in their own
    'cache:' namespace so the cache can be flushed without touching mappings.
    """

    REF_NAMESPACES = {
        AllocationStrategy.SEQUENCE: 'seq',
        AllocationStrategy.RANDOM: 'code',
    }

    def __init__(self, prefix: str | None = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')

        self.prefix = f'cache:{prefix}' if prefix is not None else 'cache'

    @prefix_key
    def long_url_key(self, strategy: AllocationStrategy, long_url: str) -> str:
        return f'resolve:url:{self._namespace(strategy)}:{url_digest(long_url)}'

    @prefix_key
    def ref_key(self, strategy: AllocationStrategy, ref: str) -> str:
        return f'resolve:{self._namespace(strategy)}:{ref}'

    def _namespace(self, strategy: AllocationStrategy) -> str:
        return self.REF_NAMESPACES[AllocationStrategy(strategy)]
