"""Shortening / resolution orchestrator

This module coordinates the code encoder, the sequence allocator, the
resolution cache and the durable mapping store to answer the two public
operations of the engine.

shorten(long_url):
    - Step 1: Validate the long URL (syntax only)
    - Step 2: Cache lookup by long URL (refresh TTL on hit)
    - Step 3: Store lookup by long URL (write through to cache on hit)
    - Step 4: Allocate a new sequence id / random code
    - Step 5: Persist the mapping, then populate the cache (best effort)
    - Step 6: Return prefix + shortcode

resolve(shortcode):
    - Step 1: Cache lookup by sequence id / code (refresh TTL on hit)
    - Step 2: Store lookup (write through to cache on hit)
    - Step 3: Return None when no mapping exists

Failure semantics:
    - Store and allocator failures abort the request (StoreUnavailableError,
      AllocatorUnavailableError).
    - Cache failures are logged and the request continues against the store.

Example:
    >>> from briefly.services import build_shortener_service
    >>> from briefly.utils.config import ShortenerConfig
    >>> service = build_shortener_service(ShortenerConfig(short_url_prefix='http://short.ly/'))
    >>> service.shorten('https://example.com/a').short_url
    'http://short.ly/1'
    >>> service.resolve('1')
    'https://example.com/a'
"""

import logging
from typing import Any, Optional
from collections.abc import Callable

from briefly.dao.base import MappingBaseDAO, ResolutionCacheBaseDAO
from briefly.dao.exceptions import DataStoreError, MappingAlreadyExistsError
from briefly.exceptions import CollisionRetryExhaustedError, InvalidCodeFormatError, StoreUnavailableError
from briefly.models import ShortenResult, UrlMappingModel
from briefly.services.strategies import CodeStrategy
from briefly.utils.config import ShortenerConfig
from briefly.utils.helpers import get_short_url
from briefly.utils.validators import validate_long_url


logger = logging.getLogger(__name__)


class ShortenerService:
    """Answer shorten and resolve requests

    Instances hold no per-request state and may be shared between threads.

    Attributes:
        config (ShortenerConfig):
            Engine settings (prefix, cache TTL, retry cap, ...).
        strategy (CodeStrategy):
            Active allocation strategy.
        store (MappingBaseDAO):
            Authoritative mapping store.
        cache (Optional[ResolutionCacheBaseDAO]):
            Advisory resolution cache. None runs the engine store-only.
    """

    def __init__(
        self,
        config: ShortenerConfig,
        strategy: CodeStrategy,
        store: MappingBaseDAO,
        cache: Optional[ResolutionCacheBaseDAO] = None,
    ):
        self.config = config
        self.strategy = strategy
        self.store = store
        self.cache = cache

    def shorten(self, long_url: str) -> ShortenResult:
        """Return the short URL of a long URL, allocating one on first use

        Shortening is idempotent: a long URL already recorded in the store
        always gets its existing shortcode back.

        Args:
            long_url (str):
                Well-formed absolute http(s) URL.

        Returns:
            ShortenResult: short URL, shortcode, and whether it was newly created.

        Raises:
            InvalidLongUrlError:
                If the URL is malformed. Nothing is allocated.
            AllocatorUnavailableError:
                If no sequence id can be allocated.
            StoreUnavailableError:
                If the mapping store cannot be read or written.
            CollisionRetryExhaustedError:
                If the random-code scheme found no unused code within the retry cap.
        """
        # 1- Validate long URL
        validate_long_url(long_url)

        # 2- Cache lookup by long URL
        ref = self._cache_get(self._long_url_key(long_url))
        if ref is not None:
            try:
                shortcode = self.strategy.shortcode_for_ref(ref)
            except (ValueError, InvalidCodeFormatError):
                logger.warning('Unusable ref in resolution cache. Ignoring cache entry.', extra={'ref': ref})
            else:
                logger.debug('Resolution cache hit for long URL.', extra={'shortcode': shortcode})
                return self._result(long_url, shortcode, created=False)

        # 3- Store lookup by long URL
        mapping = self._store_call(self.store.find_by_long_url, long_url)
        if mapping is not None:
            logger.debug('Mapping store hit for long URL.', extra={'ref': mapping.ref})
            self._populate_cache(mapping)
            return self._result(long_url, self.strategy.shortcode_for(mapping), created=False)

        # 4/5- Allocate and persist a new mapping, then populate the cache
        mapping, created = self._allocate(long_url)
        self._populate_cache(mapping)

        # 6- Return prefix + shortcode
        shortcode = self.strategy.shortcode_for(mapping)
        if created:
            logger.info('Allocated new mapping.', extra={'ref': mapping.ref, 'shortcode': shortcode, 'strategy': mapping.strategy.value})
        return self._result(long_url, shortcode, created=created)

    def resolve(self, shortcode: str) -> str | None:
        """Return the long URL behind a shortcode

        Args:
            shortcode (str):
                Shortcode as handed out by shorten().

        Returns:
            str | None: The long URL, or None if no mapping exists.

        Raises:
            InvalidCodeFormatError:
                If the shortcode contains characters outside the alphabet.
            StoreUnavailableError:
                If the mapping store cannot be read.
        """
        ref = self.strategy.ref_for_shortcode(shortcode)

        # 1- Cache lookup by ref
        long_url = self._cache_get(self._ref_key(ref))
        if long_url is not None:
            logger.debug('Resolution cache hit for shortcode.', extra={'shortcode': shortcode})
            return long_url

        # 2- Store lookup by ref
        mapping = self._store_call(self.strategy.find_by_ref, ref)
        if mapping is None:
            # 3- Not found is a normal outcome
            logger.info('No mapping found for shortcode.', extra={'shortcode': shortcode})
            return None

        logger.debug('Mapping store hit for shortcode.', extra={'shortcode': shortcode})
        self._populate_cache(mapping)
        return mapping.long_url

    def _allocate(self, long_url: str) -> tuple[UrlMappingModel, bool]:
        """Allocate a mapping and persist it

        The sequence scheme needs exactly one attempt. The random scheme
        retries on collisions (found by lookup, or by a concurrent insert of
        the same code) up to `max_collision_retries` attempts in total. No
        lock is held across attempts.

        When a save conflicts because a concurrent request recorded the same
        long URL first, that request's mapping is returned instead, so a long
        URL never ends up with two shortcodes.

        Returns:
            tuple[UrlMappingModel, bool]: The mapping, and False if it was
                recorded by a concurrent request.
        """
        attempts = self.config.max_collision_retries if self.strategy.checks_collisions else 1

        for attempt in range(1, attempts + 1):
            mapping = self.strategy.new_mapping(long_url)

            if self.strategy.checks_collisions and self._store_call(self.strategy.find_by_ref, mapping.ref) is not None:
                logger.info('Shortcode collision. Retrying.', extra={'shortcode': mapping.ref, 'attempt': attempt})
                continue

            try:
                self._store_call(self.store.save, mapping)
            except MappingAlreadyExistsError as e:
                winner = self._store_call(self.store.find_by_long_url, long_url)
                if winner is not None:
                    logger.info('Long URL recorded by a concurrent writer. Reusing its mapping.', extra={'ref': winner.ref, 'discardedRef': mapping.ref})
                    return winner, False
                if not self.strategy.checks_collisions:
                    logger.error('Allocated sequence id is already recorded in the mapping store.', extra={'ref': mapping.ref})
                    raise StoreUnavailableError(f'Sequence id {mapping.ref} is already recorded; the counter is behind the store.') from e
                logger.info('Shortcode claimed by a concurrent writer. Retrying.', extra={'shortcode': mapping.ref, 'attempt': attempt})
                continue

            return mapping, True

        logger.error('No unused shortcode found within the retry cap.', extra={'attempts': attempts})
        raise CollisionRetryExhaustedError(f'No unused shortcode found after {attempts} attempts.')

    def _populate_cache(self, mapping: UrlMappingModel) -> None:
        """Write a mapping through to the cache under both of its keys (best effort)"""
        if self.cache is None:
            return
        self._cache_set(self.cache.keys.long_url_key(mapping.strategy, mapping.long_url), mapping.ref)
        self._cache_set(self.cache.keys.ref_key(mapping.strategy, mapping.ref), mapping.long_url)

    def _cache_get(self, key: str | None) -> str | None:
        """Read a cache entry and slide its TTL on hit; None on miss or cache failure"""
        if self.cache is None or key is None:
            return None
        try:
            value = self.cache.get(key)
            if value is not None:
                self.cache.expire(key, self.config.cache_ttl)
        except DataStoreError:
            logger.warning('Resolution cache unavailable. Falling back to the mapping store.', exc_info=True, extra={'cacheKey': key})
            return None
        return value

    def _cache_set(self, key: str, value: str) -> None:
        try:
            self.cache.set(key, value, self.config.cache_ttl)
        except DataStoreError:
            logger.warning('Resolution cache unavailable. Skipping cache write.', exc_info=True, extra={'cacheKey': key})

    def _long_url_key(self, long_url: str) -> str | None:
        return self.cache.keys.long_url_key(self.strategy.kind, long_url) if self.cache is not None else None

    def _ref_key(self, ref: str) -> str | None:
        return self.cache.keys.ref_key(self.strategy.kind, ref) if self.cache is not None else None

    def _store_call(self, method: Callable[..., Any], *args, **kwargs) -> Any:
        try:
            return method(*args, **kwargs)
        except DataStoreError as e:
            logger.error('Mapping store unavailable.', exc_info=True, extra={'operation': getattr(method, '__name__', repr(method))})
            raise StoreUnavailableError('Mapping store is unavailable.') from e

    def _result(self, long_url: str, shortcode: str, created: bool) -> ShortenResult:
        return ShortenResult(
            short_url=get_short_url(self.config.short_url_prefix, shortcode),
            shortcode=shortcode,
            long_url=long_url,
            created=created,
        )
