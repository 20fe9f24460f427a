"""Shared Redis client plumbing for Redis-backed DAOs

Every Redis DAO in briefly (mapping store, sequence counter, resolution
cache) is built the same way:

    - reuse a client handed in by the caller, or connect with `redis_*` kwargs
      (see briefly.utils.config.redis_config);
    - build key names with the class-level `key_schema` under an optional prefix;
    - PING once (unless healthcheck=False) so a misconfigured endpoint fails at startup, not mid-request.

Example:
    >>> class SequenceRedisDAO(RedisClientMixin, SequenceBaseDAO):
    ...     pass
    ...
    >>> dao = SequenceRedisDAO(redis_host='redis.internal', prefix='briefly:prod')
    >>> dao.keys.counter_key()
    'briefly:prod:mappings:counter'
"""

from typing import Optional

import redis

from briefly.dao.redis.redis_key_schema import RedisKeySchema
from briefly.dao.redis.helpers import REDIS_UNAVAILABLE_ERRORS, redis_location
from briefly.dao.exceptions import DataStoreError


def connect_redis(
    redis_host: Optional[str] = 'localhost',
    redis_port: Optional[int] = 6379,
    redis_db: Optional[int] = 0,
    redis_username: Optional[str] = None,
    redis_password: Optional[str] = None,
    redis_socket_timeout: Optional[float] = 5.0,
) -> redis.Redis:
    """Create a Redis client from `redis_*` keyword arguments (see redis_config())

    Example:
        >>> client = connect_redis(redis_host='redis.internal', redis_port=6380)
        >>> client.connection_pool.connection_kwargs['port']
        6380
    """
    return redis.Redis(
        host=redis_host,
        port=int(redis_port),
        db=int(redis_db),
        decode_responses=True,
        username=redis_username,
        password=redis_password,
        socket_timeout=redis_socket_timeout,
    )


class RedisClientMixin:
    """Attach a Redis client and a key schema to a DAO.

    Subclasses override `key_schema` to pick their key namespace
    (RedisKeySchema for mappings, CacheKeySchema for the resolution cache).

    Attributes:
        redis (redis.Redis):
            Client used for every command. Responses are decoded to str.
        keys:
            Instance of `key_schema` bound to the DAO prefix.
    """

    key_schema = RedisKeySchema

    def __init__(
        self,
        redis_host: Optional[str] = 'localhost',
        redis_port: Optional[int] = 6379,
        redis_db: Optional[int] = 0,
        redis_username: Optional[str] = None,
        redis_password: Optional[str] = None,
        redis_socket_timeout: Optional[float] = 5.0,
        redis_client: Optional[redis.Redis] = None,
        prefix: Optional[str] = None,
        healthcheck: bool = True,
    ):
        """
        Args:
            redis_host, redis_port, redis_db, redis_username, redis_password:
                Connection parameters, ignored when `redis_client` is given.
            redis_socket_timeout (Optional[float]):
                Seconds to wait on a Redis command before giving up.
            redis_client (Optional[redis.Redis]):
                Pre-initialized client, shared between DAOs by the service factory.
            prefix (Optional[str]):
                Key namespace, e.g. 'briefly:prod'.
            healthcheck (bool):
                PING Redis on construction. Defaults to True.

        Raises:
            DataStoreError:
                If the healthcheck PING fails.
        """
        self.redis = redis_client if redis_client is not None else connect_redis(
            redis_host=redis_host,
            redis_port=redis_port,
            redis_db=redis_db,
            redis_username=redis_username,
            redis_password=redis_password,
            redis_socket_timeout=redis_socket_timeout,
        )
        self.keys = self.key_schema(prefix=prefix)

        if healthcheck:
            self._healthcheck()

    def _healthcheck(self, raise_error: bool = True) -> bool:
        """PING Redis; True if it answered

        With raise_error=False an unreachable Redis yields False instead of
        DataStoreError.
        """
        try:
            self.redis.ping()
        except REDIS_UNAVAILABLE_ERRORS as e:
            if not raise_error:
                return False
            raise DataStoreError(
                f"Can't connect to Redis at {redis_location(self.redis)}. Check the provided configuration parameters."
            ) from e
        return True
