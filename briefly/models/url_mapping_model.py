from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Optional


class AllocationStrategy(StrEnum):
    """Shortcode allocation scheme used by a service instance.

    SEQUENCE:
        Shortcode is the base62 encoding of a globally unique sequence id.
    RANDOM:
        Shortcode is drawn at random and checked against the store (legacy).
    """

    SEQUENCE = 'sequence'
    RANDOM = 'random'


@dataclass(frozen=True)
class UrlMappingModel:
    """Represent a long URL to shortcode mapping record.

    Exactly one of `sequence_id` (SEQUENCE scheme) or `shortcode` (RANDOM scheme)
    identifies the record.

    Attributes:
        long_url (str):
            The original long URL.
        sequence_id (Optional[int]):
            Unique sequence id allocated for the long URL.
        shortcode (Optional[str]):
            Randomly drawn shortcode for the long URL.
        created_at (Optional[datetime]):
            Moment the mapping was first recorded (UTC).

    Example:
        >>> mapping = UrlMappingModel(long_url='https://example.com/a', sequence_id=1)
        >>> mapping.strategy
        <AllocationStrategy.SEQUENCE: 'sequence'>
        >>> mapping.ref
        '1'
    """

    long_url: str
    sequence_id: Optional[int] = None
    shortcode: Optional[str] = None
    created_at: Optional[datetime] = None

    def __post_init__(self):
        if (self.sequence_id is None) == (self.shortcode is None):
            raise ValueError('Exactly one of sequence_id or shortcode must be set.')
        if self.sequence_id is not None and self.sequence_id < 0:
            raise ValueError(f'Sequence id must be non-negative (given value: {self.sequence_id}).')

    @property
    def strategy(self) -> AllocationStrategy:
        return AllocationStrategy.SEQUENCE if self.sequence_id is not None else AllocationStrategy.RANDOM

    @property
    def ref(self) -> str:
        """String reference of the record, as stored in cache values."""
        return str(self.sequence_id) if self.sequence_id is not None else self.shortcode


@dataclass(frozen=True)
class ShortenResult:
    """Outcome of a shorten request.

    Attributes:
        short_url (str):
            Prefix + shortcode, e.g. 'http://short.ly/1'.
        shortcode (str):
            The shortcode alone.
        long_url (str):
            The long URL that was shortened.
        created (bool):
            True if a new mapping was allocated, False if an existing one was returned.
    """

    short_url: str
    shortcode: str
    long_url: str
    created: bool = False
