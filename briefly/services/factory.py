"""Wire Redis-backed collaborators into a ShortenerService

Example:
    >>> service = build_shortener_service()
    >>> service.strategy.kind
    <AllocationStrategy.SEQUENCE: 'sequence'>
"""

import logging
from typing import Optional

import redis

from briefly.dao.cache import ResolutionCacheRedisDAO
from briefly.dao.exceptions import DataStoreError
from briefly.dao.redis import MappingRedisDAO, SequenceRedisDAO, connect_redis
from briefly.exceptions import StoreUnavailableError
from briefly.models import AllocationStrategy
from briefly.services.allocator import SequenceAllocator
from briefly.services.shortener import ShortenerService
from briefly.services.strategies import CodeStrategy, RandomCodeStrategy, SequenceStrategy
from briefly.utils.config import ShortenerConfig, app_prefix, load_config, redis_config
from briefly.utils.encoder import Base62Codec


logger = logging.getLogger(__name__)


def build_shortener_service(
    config: Optional[ShortenerConfig] = None,
    redis_client: Optional[redis.Redis] = None,
    prefix: Optional[str] = None,
) -> ShortenerService:
    """Build a ShortenerService backed by Redis

    The mapping store, the sequence counter and the resolution cache share one
    Redis client (one connection pool), each under its own key namespace.
    Redis is PINGed once, by the mapping store. Later cache or counter
    failures surface per request.

    Args:
        config (Optional[ShortenerConfig]):
            Engine settings. Loaded with load_config() if None.
        redis_client (Optional[redis.Redis]):
            Pre-initialized Redis client. If None, one is created from redis_config().
        prefix (Optional[str]):
            Key namespace. Defaults to app_prefix().

    Returns:
        ShortenerService: Ready-to-use service.

    Raises:
        StoreUnavailableError:
            If Redis is unreachable.
        ConfigurationError:
            If settings cannot be loaded.
    """
    config = config or load_config()
    prefix = prefix if prefix is not None else app_prefix()
    redis_client = redis_client if redis_client is not None else connect_redis(**redis_config())

    try:
        store = MappingRedisDAO(redis_client=redis_client, prefix=prefix)
    except DataStoreError as e:
        raise StoreUnavailableError('Mapping store is unavailable.') from e

    cache = ResolutionCacheRedisDAO(redis_client=redis_client, prefix=prefix, healthcheck=False)

    codec = Base62Codec(config.alphabet)
    strategy: CodeStrategy
    if config.strategy is AllocationStrategy.SEQUENCE:
        sequence_dao = SequenceRedisDAO(redis_client=redis_client, prefix=prefix, healthcheck=False)
        strategy = SequenceStrategy(store, codec, SequenceAllocator(sequence_dao))
    else:
        strategy = RandomCodeStrategy(store, codec, config.random_code_length)

    logger.debug('Built shortener service.', extra={'strategy': strategy.kind.value, 'prefix': prefix})
    return ShortenerService(config=config, strategy=strategy, store=store, cache=cache)
