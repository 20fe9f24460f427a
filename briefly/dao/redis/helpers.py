import functools
import redis

from briefly.dao.exceptions import DataStoreError


__all__ = ['handle_redis_connection_error', 'handle_redis_error', 'redis_location', 'REDIS_UNAVAILABLE_ERRORS']

# Failures meaning "Redis could not serve the command", as opposed to bad input.
# ReadOnlyError (failover to a replica), OutOfMemoryError (maxmemory with noeviction)
# and ClusterDownError are ResponseError subclasses, so they must be listed explicitly.
REDIS_UNAVAILABLE_ERRORS = (
    redis.exceptions.ConnectionError,
    redis.exceptions.TimeoutError,
    redis.exceptions.BusyLoadingError,
    redis.exceptions.ReadOnlyError,
    redis.exceptions.OutOfMemoryError,
    redis.exceptions.ClusterDownError,
)


def redis_location(client: redis.Redis) -> str:
    info = client.connection_pool.connection_kwargs
    return f"{info.get('host')}:{info.get('port')}/{info.get('db')}"


def handle_redis_connection_error[F](method: F) -> F:
    """Wrap Redis-interacting DAO methods to handle connection errors

    Args:
        method (Callable[..., Any]):
            DAO method performing Redis operations which may raise
            any of REDIS_UNAVAILABLE_ERRORS.

    Returns:
        Callable[..., Any]:
            Wrapped method which raises DataStoreError when Redis cannot serve the command.

    Example:
        >>> @handle_redis_connection_error
        ... def current(self):
        ...     return self.redis.get('counter')
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except REDIS_UNAVAILABLE_ERRORS as e:
            raise DataStoreError(f"Can't connect to Redis at {redis_location(self.redis)}.") from e

    return wrapper


def handle_redis_error[F](method: F) -> F:
    """Wrap DAO methods for which any Redis failure means the backend is unusable

    Used by the resolution cache (every failure is advisory) and the sequence
    counter (an INCR rejected with a ResponseError, e.g. a non-integer counter
    value, is an allocator failure). Connectivity errors keep the message of
    handle_redis_connection_error().

    Example:
        >>> @handle_redis_error
        ... def increment_and_get(self):
        ...     return self.redis.incr('counter')
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except REDIS_UNAVAILABLE_ERRORS as e:
            raise DataStoreError(f"Can't connect to Redis at {redis_location(self.redis)}.") from e
        except redis.exceptions.RedisError as e:
            raise DataStoreError(f'Redis at {redis_location(self.redis)} rejected the command: {e}') from e

    return wrapper
