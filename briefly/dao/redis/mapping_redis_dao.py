"""Data Access Object (DAO) implementation of the durable mapping store in Redis

This module provides a Redis-based implementation of MappingBaseDAO. Redis is
expected to run with persistence enabled (AOF/RDB) when used as the durable store.

Data layout (no TTL applied, mappings never expire):
    <prefix>:mappings:seq:<sequence id>   -> HASH {long_url, created_at}
    <prefix>:mappings:code:<shortcode>    -> HASH {long_url, created_at}
    <prefix>:mappings:url:<url digest>    -> HASH {long_url, sequence_id | shortcode, created_at}

Classes:
    MappingRedisDAO:
        DAO for storing and retrieving UrlMappingModel in a Redis datastore.

Example:
    >>> from briefly.models import UrlMappingModel
    >>> from briefly.dao.redis import MappingRedisDAO

    >>> dao = MappingRedisDAO(prefix="briefly:dev")
    >>> dao.save(UrlMappingModel(long_url="https://example.com/page", sequence_id=42))
    <MappingRedisDAO>

    >>> dao.find_by_sequence_id(42).long_url
    'https://example.com/page'
    >>> dao.find_by_long_url("https://example.com/page").sequence_id
    42
"""

import logging
from datetime import datetime, UTC

import redis
from beartype import beartype

from briefly.models import UrlMappingModel
from briefly.dao.base import MappingBaseDAO
from briefly.dao.redis.mixins import RedisClientMixin
from briefly.dao.redis.helpers import handle_redis_connection_error
from briefly.dao.exceptions import MappingAlreadyExistsError


logger = logging.getLogger(__name__)


class MappingRedisDAO(RedisClientMixin, MappingBaseDAO):
    """Redis-based Data Access Object (DAO) for the durable mapping store

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    Methods:
        find_by_long_url(long_url: str) -> UrlMappingModel | None
        find_by_sequence_id(sequence_id: int) -> UrlMappingModel | None
        find_by_shortcode(shortcode: str) -> UrlMappingModel | None
        save(mapping: UrlMappingModel) -> MappingRedisDAO
            Raises MappingAlreadyExistsError when the sequence id, shortcode or long URL is taken.

        All methods raise DataStoreError on connectivity issues with Redis.
    """

    @handle_redis_connection_error
    @beartype
    def find_by_long_url(self, long_url: str, **kwargs) -> UrlMappingModel | None:
        record = self.redis.hgetall(self.keys.long_url_index_key(long_url))
        if not record:
            return None

        # Keys are digests, so confirm the stored URL is the requested one
        if record.get('long_url') != long_url:
            logger.warning(
                'Long URL digest collision in mapping store. Treating as a miss.',
                extra={'requestedUrl': long_url, 'storedUrl': record.get('long_url')},
            )
            return None

        sequence_id = record.get('sequence_id')
        return UrlMappingModel(
            long_url=long_url,
            sequence_id=int(sequence_id) if sequence_id is not None else None,
            shortcode=record.get('shortcode'),
            created_at=self._parse_timestamp(record.get('created_at')),
        )

    @handle_redis_connection_error
    @beartype
    def find_by_sequence_id(self, sequence_id: int, **kwargs) -> UrlMappingModel | None:
        record = self.redis.hgetall(self.keys.sequence_mapping_key(sequence_id))
        if not record:
            return None

        return UrlMappingModel(
            long_url=record['long_url'],
            sequence_id=sequence_id,
            created_at=self._parse_timestamp(record.get('created_at')),
        )

    @handle_redis_connection_error
    @beartype
    def find_by_shortcode(self, shortcode: str, **kwargs) -> UrlMappingModel | None:
        record = self.redis.hgetall(self.keys.shortcode_mapping_key(shortcode))
        if not record:
            return None

        return UrlMappingModel(
            long_url=record['long_url'],
            shortcode=shortcode,
            created_at=self._parse_timestamp(record.get('created_at')),
        )

    @handle_redis_connection_error
    @beartype
    def save(self, mapping: UrlMappingModel, **kwargs) -> 'MappingRedisDAO':
        """Insert a mapping record and its long URL index entry

        Both hashes are written in one MULTI/EXEC transaction guarded by WATCH
        on the primary key and the long URL index, so a mapping is either fully
        recorded or not at all, two writers can never both claim the same
        sequence id or shortcode, and two writers can never both record the
        same long URL:

            (writer 1): WATCH <prefix>:mappings:code:abc1234 <prefix>:mappings:url:<digest>
                        EXISTS, HGET long_url                  => 0, nil
            (writer 2): WATCH, EXISTS, HGET, MULTI, HSET ..., EXEC  => OK
            (writer 1): MULTI, HSET ..., EXEC                  => aborted (WatchError)

        The index entry of a different long URL sharing the digest is
        overwritten, as find_by_long_url() already treats it as a miss.

        Args:
            mapping (UrlMappingModel):
                Mapping to record. `created_at` defaults to now (UTC).
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            MappingRedisDAO: self (for method chaining)

        Raises:
            MappingAlreadyExistsError:
                If the sequence id or shortcode is already recorded, or the
                long URL is already mapped.
            DataStoreError:
                If a Redis connection issue occurs during the transaction.
        """
        if mapping.sequence_id is not None:
            primary_key = self.keys.sequence_mapping_key(mapping.sequence_id)
            ref_field = {'sequence_id': str(mapping.sequence_id)}
        else:
            primary_key = self.keys.shortcode_mapping_key(mapping.shortcode)
            ref_field = {'shortcode': mapping.shortcode}
        index_key = self.keys.long_url_index_key(mapping.long_url)

        created_at = (mapping.created_at or datetime.now(UTC)).isoformat()
        record = {'long_url': mapping.long_url, 'created_at': created_at}

        try:
            with self.redis.pipeline(transaction=True) as pipe:
                pipe.watch(primary_key, index_key)
                if pipe.exists(primary_key):
                    pipe.unwatch()
                    raise MappingAlreadyExistsError(f"Mapping '{mapping.ref}' already exists.")
                if pipe.hget(index_key, 'long_url') == mapping.long_url:
                    pipe.unwatch()
                    raise MappingAlreadyExistsError(f"Long URL '{mapping.long_url}' is already mapped.")
                pipe.multi()
                pipe.hset(primary_key, mapping=record)
                pipe.hset(index_key, mapping={**record, **ref_field})
                pipe.execute()
        except redis.exceptions.WatchError as e:
            raise MappingAlreadyExistsError(f"Mapping '{mapping.ref}' was claimed by a concurrent writer.") from e

        return self

    @staticmethod
    def _parse_timestamp(value: str | None) -> datetime | None:
        return datetime.fromisoformat(value) if value else None
