"""Unit tests for Redis-based mixins.

Test coverage includes:
    1. Initialization and configuration
       - Ensures correct initialization with or without a Redis client.
       - Confirms invalid Redis configuration raises DataStoreError.
       - Confirms subclasses pick their own key schema.
    2. Healthcheck behavior
       - Healthcheck pings Redis.
       - Missed pong from Redis raises error, or returns False on request.
"""

from unittest.mock import MagicMock, patch

import pytest
import redis

from briefly.dao.cache import CacheKeySchema, ResolutionCacheRedisDAO
from briefly.dao.exceptions import DataStoreError
from briefly.dao.redis import RedisKeySchema
from briefly.dao.redis.mixins import RedisClientMixin


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def redis_client():
    _redis_client = MagicMock(
        spec=redis.Redis, connection_pool=MagicMock(spec=redis.ConnectionPool, connection_kwargs={'host': 'redis', 'port': 6379, 'db': 0})
    )
    _redis_client.ping.return_value = True
    return _redis_client


# -------------------------------
# 1. Initialization and configuration
# -------------------------------


def test_initialize_without_redis_client():
    """Ensure DAO creates a Redis client when none is provided."""
    redis_config = {
        'redis_host': 'redis',
        'redis_port': 6379,
        'redis_db': 0,
        'redis_username': 'default',
        'redis_password': 'password',
    }

    with patch('briefly.dao.redis.mixins.redis.Redis', autospec=True) as redis_mock:
        redis_mock_instance = redis_mock.return_value
        mixin = RedisClientMixin(**redis_config, prefix='testapp:test')

        redis_mock.assert_called_once_with(
            host='redis',
            port=6379,
            db=0,
            decode_responses=True,
            username='default',
            password='password',
            socket_timeout=5.0,
        )
        redis_mock_instance.ping.assert_called_once()
        assert mixin.redis is redis_mock_instance
        assert isinstance(mixin.keys, RedisKeySchema)
        assert mixin.keys.prefix == 'testapp:test'


def test_initialize_with_redis_client(redis_client):
    """Ensure DAO correctly uses a pre-initialized Redis client."""
    mixin = RedisClientMixin(redis_client=redis_client, prefix='testapp:test')
    assert mixin.redis is redis_client


def test_initialize_without_healthcheck(redis_client):
    RedisClientMixin(redis_client=redis_client, healthcheck=False)
    redis_client.ping.assert_not_called()


def test_initialize_with_invalid_redis_config():
    """Ensure invalid Redis config raises DataStoreError."""
    exception_message = "Can't connect to Redis at 203.0.113.1:18000/5. Check the provided configuration parameters."

    with patch('briefly.dao.redis.mixins.redis.Redis', autospec=True) as redis_mock:
        redis_mock_instance = redis_mock.return_value
        redis_mock_instance.ping.side_effect = redis.exceptions.ConnectionError('Connection error')
        redis_mock_instance.connection_pool = MagicMock(connection_kwargs={'host': '203.0.113.1', 'port': 18000, 'db': 5})

        with pytest.raises(DataStoreError, match=exception_message):
            RedisClientMixin(redis_host='203.0.113.1', redis_port=18000, redis_db=5)


def test_subclass_key_schema(redis_client):
    dao = ResolutionCacheRedisDAO(redis_client=redis_client, prefix='testapp:test')
    assert isinstance(dao.keys, CacheKeySchema)
    assert dao.keys.prefix == 'cache:testapp:test'


# -------------------------------
# 2. Healthcheck behavior
# -------------------------------


def test_healthcheck(redis_client):
    mixin = RedisClientMixin(redis_client=redis_client, healthcheck=False)
    assert mixin._healthcheck() is True
    redis_client.ping.assert_called_once()


@pytest.mark.parametrize('error', [redis.exceptions.ConnectionError('down'), redis.exceptions.TimeoutError('slow')])
def test_healthcheck_failure(redis_client, error):
    mixin = RedisClientMixin(redis_client=redis_client, healthcheck=False)
    redis_client.ping.side_effect = error

    with pytest.raises(DataStoreError, match="Can't connect to Redis at redis:6379/0."):
        mixin._healthcheck()
    assert mixin._healthcheck(raise_error=False) is False
