"""Abstract base class for durable mapping store data access objects (DAOs).

This class establishes a consistent contract for the authoritative long URL
mapping store, regardless of the underlying storage mechanism (e.g., Redis,
DynamoDB, PostgreSQL).

Responsibilities:
    - Look up mappings by long URL, by sequence id, or by shortcode.
    - Insert new mappings as a single atomic record write.
    - Standardize error handling across multiple data store implementations.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from briefly.models import UrlMappingModel
        >>> from briefly.dao.redis import MappingRedisDAO

        >>> dao = MappingRedisDAO(...)

        >>> dao.save(UrlMappingModel(long_url='https://example.com/a', sequence_id=1))

        >>> dao.find_by_sequence_id(1).long_url
        'https://example.com/a'

        >>> dao.find_by_long_url('https://example.com/a').sequence_id
        1

        >>> dao.find_by_shortcode('nope') is None
        True
"""

from abc import ABC, abstractmethod

from briefly.models import UrlMappingModel


class MappingBaseDAO(ABC):
    """Interface for durable mapping store DAOs.

    Methods:
        find_by_long_url(long_url: str) -> UrlMappingModel | None:
            Retrieve the mapping recorded for a long URL.

        find_by_sequence_id(sequence_id: int) -> UrlMappingModel | None:
            Retrieve the mapping recorded under a sequence id.

        find_by_shortcode(shortcode: str) -> UrlMappingModel | None:
            Retrieve the mapping recorded under a random shortcode.

        save(mapping: UrlMappingModel) -> MappingBaseDAO:
            Insert a new mapping.

    NOTE:
        - Callers must check find_by_long_url() before save(). save() only
          guards against a concurrent writer recording the same long URL
          between that check and the insert.
        - Every method raises DataStoreError on connection or I/O failure.
    """

    @abstractmethod
    def find_by_long_url(self, long_url: str, **kwargs) -> UrlMappingModel | None:
        """Retrieve the mapping recorded for a long URL.

        Args:
            long_url (str):
                The exact long URL to look up.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            UrlMappingModel | None: The mapping if found, otherwise None.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def find_by_sequence_id(self, sequence_id: int, **kwargs) -> UrlMappingModel | None:
        """Retrieve the mapping recorded under a sequence id.

        Returns:
            UrlMappingModel | None: The mapping if found, otherwise None.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def find_by_shortcode(self, shortcode: str, **kwargs) -> UrlMappingModel | None:
        """Retrieve the mapping recorded under a random shortcode.

        Returns:
            UrlMappingModel | None: The mapping if found, otherwise None.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def save(self, mapping: UrlMappingModel, **kwargs) -> 'MappingBaseDAO':
        """Insert a new mapping into the data store.

        The write either fully succeeds or leaves no trace of the mapping.

        Args:
            mapping (UrlMappingModel):
                The mapping to insert.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            MappingBaseDAO: self (for method chaining)

        Raises:
            MappingAlreadyExistsError:
                If a mapping with the same sequence id or shortcode already exists,
                or the long URL was recorded concurrently.

            DataStoreError:
                If there is an error in the data store.
        """
        pass
