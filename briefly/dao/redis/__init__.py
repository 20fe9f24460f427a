from briefly.dao.redis.redis_key_schema import RedisKeySchema
from briefly.dao.redis.mixins import RedisClientMixin, connect_redis
from briefly.dao.redis.mapping_redis_dao import MappingRedisDAO
from briefly.dao.redis.sequence_redis_dao import SequenceRedisDAO


__all__ = [
    'RedisKeySchema',
    'RedisClientMixin',
    'connect_redis',
    'MappingRedisDAO',
    'SequenceRedisDAO',
]
