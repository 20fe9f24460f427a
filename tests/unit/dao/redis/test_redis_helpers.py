"""Unit tests for the handle_redis_connection_error and handle_redis_error decorators.

This test suite verifies that the decorators properly handle Redis
failures and preserves the original method's behavior.

Test coverage includes:
    1. Normal function execution
       - Ensures the wrapped method executes and returns its result.
    2. Connection error handling
       - Ensures Redis connectivity errors (including read-only replicas, maxmemory
         and cluster-down replies) are converted into DataStoreError.
       - Ensures other Redis errors propagate unchanged, unless handle_redis_error is used.
    3. Function metadata preservation
       - Confirms functools.wraps preserves the original function's name and docstring.
"""

import pytest
import redis
from unittest.mock import MagicMock

from briefly.dao.redis.helpers import handle_redis_connection_error, handle_redis_error, redis_location
from briefly.dao.exceptions import DataStoreError


class DummyDAO:
    def __init__(self, error=None):
        self.error = error
        self.redis = MagicMock()
        self.redis.connection_pool.connection_kwargs = {
            'host': 'localhost',
            'port': 6379,
            'db': 0,
        }

    @handle_redis_connection_error
    def incr(self):
        if self.error is not None:
            raise self.error
        return 1

    @handle_redis_error
    def get(self):
        if self.error is not None:
            raise self.error
        return 'value'


# -------------------------------
# 1. Normal execution
# -------------------------------


def test_decorator_allows_normal_execution():
    """Ensure the wrapped function executes normally when no error occurs."""
    assert DummyDAO().incr() == 1


def test_redis_location():
    assert redis_location(DummyDAO().redis) == 'localhost:6379/0'


# -------------------------------
# 2. Connection error handling
# -------------------------------


@pytest.mark.parametrize(
    'error',
    [
        redis.exceptions.ConnectionError('Cannot connect'),
        redis.exceptions.TimeoutError('Timed out'),
        redis.exceptions.BusyLoadingError('Loading dataset'),
        redis.exceptions.ReadOnlyError("READONLY You can't write against a read only replica."),
        redis.exceptions.OutOfMemoryError("OOM command not allowed when used memory > 'maxmemory'."),
        redis.exceptions.ClusterDownError('CLUSTERDOWN The cluster is down'),
    ],
)
def test_decorator_transforms_redis_connectivity_errors(error):
    """Ensure Redis connectivity errors are re-raised as DataStoreError."""
    with pytest.raises(DataStoreError, match="Can't connect to Redis at localhost:6379/0."):
        DummyDAO(error).incr()


def test_decorator_propagates_other_redis_errors():
    with pytest.raises(redis.exceptions.ResponseError):
        DummyDAO(redis.exceptions.ResponseError('value is not an integer or out of range')).incr()


def test_redis_error_decorator_keeps_connectivity_message():
    with pytest.raises(DataStoreError, match="Can't connect to Redis at localhost:6379/0."):
        DummyDAO(redis.exceptions.TimeoutError('Timed out')).get()


@pytest.mark.parametrize(
    'error',
    [
        redis.exceptions.ResponseError('value is not an integer or out of range'),
        redis.exceptions.ResponseError('WRONGTYPE Operation against a key holding the wrong kind of value'),
        redis.exceptions.RedisError('Unexpected failure'),
    ],
)
def test_redis_error_decorator_transforms_any_redis_error(error):
    with pytest.raises(DataStoreError, match='Redis at localhost:6379/0 rejected the command') as exc_info:
        DummyDAO(error).get()

    assert exc_info.value.__cause__ is error


def test_redis_error_decorator_allows_normal_execution():
    assert DummyDAO().get() == 'value'


# -------------------------------
# 3. Function metadata preservation
# -------------------------------


def test_decorator_preserves_function_metadata():
    """Ensure function name and docstring are preserved via functools.wraps."""

    @handle_redis_connection_error
    def sample_function():
        """This is a sample docstring."""
        return 'OK'

    assert sample_function.__name__ == 'sample_function'
    assert 'sample docstring' in sample_function.__doc__
