from abc import ABC, abstractmethod


class SequenceBaseDAO(ABC):
    """Interface for the shared counter backing the sequence allocator.

    Implementations must increment atomically across every process and host
    that shares the backing store (e.g. Redis INCR, or a counter table updated
    with compare-and-swap). An in-process counter does not satisfy this contract.
    """

    @abstractmethod
    def increment_and_get(self, **kwargs) -> int:
        """Atomically increment the counter and return the new value.

        Returns:
            int: The incremented counter value (first call returns 1).

        Raises:
            DataStoreError:
                If the counter storage is unreachable.
        """
        pass

    @abstractmethod
    def current(self, **kwargs) -> int:
        """Return the current counter value without incrementing (0 if never used).

        Raises:
            DataStoreError:
                If the counter storage is unreachable.
        """
        pass
