"""Redis-backed counter for the sequence allocator

Redis executes commands on a single thread, so INCR is atomic across every
client connected to the same Redis primary, regardless of how many processes
or hosts allocate ids concurrently.

Example:
    >>> dao = SequenceRedisDAO(prefix="briefly:dev")
    >>> dao.increment_and_get()
    1
    >>> dao.increment_and_get()
    2
    >>> dao.current()
    2
"""

from briefly.dao.base import SequenceBaseDAO
from briefly.dao.redis.mixins import RedisClientMixin
from briefly.dao.redis.helpers import handle_redis_error


class SequenceRedisDAO(RedisClientMixin, SequenceBaseDAO):
    """Global sequence counter stored at <prefix>:mappings:counter"""

    @handle_redis_error
    def increment_and_get(self, **kwargs) -> int:
        return int(self.redis.incr(self.keys.counter_key()))

    @handle_redis_error
    def current(self, **kwargs) -> int:
        value = self.redis.get(self.keys.counter_key())
        return int(value) if value is not None else 0
