"""Sequence allocator

Hands out globally unique, strictly increasing sequence ids, one per new
long URL. All coordination is delegated to the shared counter behind
SequenceBaseDAO (Redis INCR in production): this is the single
synchronization point of the engine, valid across threads, processes and
service instances alike.

Example:
    >>> from briefly.dao.redis import SequenceRedisDAO
    >>> allocator = SequenceAllocator(SequenceRedisDAO(prefix='briefly:dev'))
    >>> allocator.next()
    1
    >>> allocator.next()
    2
"""

import logging

from briefly.dao.base import SequenceBaseDAO
from briefly.dao.exceptions import DataStoreError
from briefly.exceptions import AllocatorUnavailableError


logger = logging.getLogger(__name__)


class SequenceAllocator:
    """Allocate sequence ids from a shared atomic counter

    Gaps are possible (an id allocated for a request that later fails is
    never handed out again). Duplicates are not.

    Attributes:
        sequence_dao (SequenceBaseDAO):
            Shared counter storage.
    """

    def __init__(self, sequence_dao: SequenceBaseDAO):
        self.sequence_dao = sequence_dao

    def next(self) -> int:
        """Allocate the next sequence id

        Returns:
            int: A positive id, greater than every id previously returned by
                 any allocator sharing the same counter.

        Raises:
            AllocatorUnavailableError:
                If the counter storage is unreachable or returns an unusable value.
                No id is fabricated in that case.
        """
        try:
            sequence_id = self.sequence_dao.increment_and_get()
        except DataStoreError as e:
            logger.error('Sequence counter unreachable. Cannot allocate a sequence id.', exc_info=True)
            raise AllocatorUnavailableError('Sequence counter storage is unavailable.') from e

        # A non-positive value means the counter key holds garbage or was reset below zero
        if isinstance(sequence_id, bool) or not isinstance(sequence_id, int) or sequence_id < 1:
            logger.error('Sequence counter returned an unusable value.', extra={'sequenceId': repr(sequence_id)})
            raise AllocatorUnavailableError(f'Sequence counter returned an unusable value: {sequence_id!r}.')

        logger.debug('Allocated sequence id %s.', sequence_id)
        return sequence_id
