import functools
from collections.abc import Callable

from briefly.utils.helpers import url_digest


__all__ = ['RedisKeySchema']  # hide internal decorator prefix_key from imports


def prefix_key(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> str:
        key = func(self, *args, **kwargs)
        return f'{self.prefix}:{key}' if self.prefix is not None else key

    return wrapper


class RedisKeySchema:
    """Provide standardized Redis keys for the durable mapping store.

    An optional prefix can be provided to namespace all generated keys.
    It is highly encouraged to set a custom prefix for each app and environment,
    e.g. "briefly:prod" or "briefly:dev".

    Long URLs are addressed by their digest (see url_digest()), so key names
    stay bounded in size.
    """

    def __init__(self, prefix: str | None = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')

        self.prefix = prefix

    @prefix_key
    def sequence_mapping_key(self, sequence_id: int) -> str:
        return f'mappings:seq:{int(sequence_id)}'

    @prefix_key
    def shortcode_mapping_key(self, shortcode: str) -> str:
        return f'mappings:code:{shortcode}'

    @prefix_key
    def long_url_index_key(self, long_url: str) -> str:
        return f'mappings:url:{url_digest(long_url)}'

    @prefix_key
    def counter_key(self) -> str:
        return 'mappings:counter'
