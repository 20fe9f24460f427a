"""Shortcode allocation strategies

Exactly one strategy is active per service instance, selected by
`ShortenerConfig.strategy`:

    SequenceStrategy (AllocationStrategy.SEQUENCE):
        shortcode = base62(sequence id). Unique by construction, never collides.

    RandomCodeStrategy (AllocationStrategy.RANDOM):
        shortcode = random fixed-length code. The caller checks candidates
        against the store and retries a bounded number of times.

Both strategies translate between three representations of a mapping:

    shortcode   - what clients see, e.g. 'Gh7'
    ref         - what the cache stores and the store is keyed by,
                  e.g. '230895' (sequence id) or 'Gh71WPT' (random code)
    mapping     - the UrlMappingModel record
"""

from abc import ABC, abstractmethod
from datetime import datetime, UTC

from briefly.dao.base import MappingBaseDAO
from briefly.exceptions import InvalidCodeFormatError
from briefly.models import AllocationStrategy, UrlMappingModel
from briefly.services.allocator import SequenceAllocator
from briefly.utils.encoder import Base62Codec, generate_random_code


class CodeStrategy(ABC):
    """Common interface of allocation strategies.

    Attributes:
        kind (AllocationStrategy):
            Tag of the variant.
        checks_collisions (bool):
            True if new candidates must be checked against the store.
        store (MappingBaseDAO):
            Durable mapping store used for reference lookups.
        codec (Base62Codec):
            Shortcode encoder.
    """

    kind: AllocationStrategy
    checks_collisions: bool = False

    def __init__(self, store: MappingBaseDAO, codec: Base62Codec):
        self.store = store
        self.codec = codec

    @abstractmethod
    def new_mapping(self, long_url: str) -> UrlMappingModel:
        """Build a candidate mapping for a long URL not yet in the store."""
        pass

    @abstractmethod
    def ref_for_shortcode(self, shortcode: str) -> str:
        """Translate a client-supplied shortcode into a ref.

        Raises:
            InvalidCodeFormatError: If the shortcode cannot belong to this scheme.
        """
        pass

    @abstractmethod
    def shortcode_for_ref(self, ref: str) -> str:
        """Translate a cached ref back into a shortcode.

        Raises:
            ValueError: If the ref cannot belong to this scheme.
        """
        pass

    @abstractmethod
    def find_by_ref(self, ref: str) -> UrlMappingModel | None:
        """Look up a mapping in the store by ref."""
        pass

    def shortcode_for(self, mapping: UrlMappingModel) -> str:
        # records written under the other scheme keep their own shortcode
        if mapping.sequence_id is not None:
            return self.codec.encode(mapping.sequence_id)
        return mapping.shortcode


class SequenceStrategy(CodeStrategy):
    kind = AllocationStrategy.SEQUENCE
    checks_collisions = False

    def __init__(self, store: MappingBaseDAO, codec: Base62Codec, allocator: SequenceAllocator):
        super().__init__(store, codec)
        self.allocator = allocator

    def new_mapping(self, long_url: str) -> UrlMappingModel:
        return UrlMappingModel(long_url=long_url, sequence_id=self.allocator.next(), created_at=datetime.now(UTC))

    def ref_for_shortcode(self, shortcode: str) -> str:
        return str(self.codec.decode(shortcode))

    def shortcode_for_ref(self, ref: str) -> str:
        if not ref.isdigit():
            raise ValueError(f'Sequence ref must be a decimal integer (given value: {ref!r}).')
        return self.codec.encode(int(ref))

    def find_by_ref(self, ref: str) -> UrlMappingModel | None:
        return self.store.find_by_sequence_id(int(ref))


class RandomCodeStrategy(CodeStrategy):
    """Legacy scheme drawing random codes

    Collision handling lives in the caller: every candidate is checked with
    find_by_ref() and the loop is capped by `max_collision_retries`.
    """

    kind = AllocationStrategy.RANDOM
    checks_collisions = True

    def __init__(self, store: MappingBaseDAO, codec: Base62Codec, length: int):
        super().__init__(store, codec)
        self.length = length

    def new_mapping(self, long_url: str) -> UrlMappingModel:
        shortcode = generate_random_code(self.length, self.codec.alphabet)
        return UrlMappingModel(long_url=long_url, shortcode=shortcode, created_at=datetime.now(UTC))

    def ref_for_shortcode(self, shortcode: str) -> str:
        if not isinstance(shortcode, str) or not shortcode:
            raise InvalidCodeFormatError(f'Shortcode must be a non-empty string (given value: {shortcode!r}).')
        if any(character not in self.codec.alphabet for character in shortcode):
            raise InvalidCodeFormatError(f"Shortcode '{shortcode}' contains characters outside the alphabet.")
        return shortcode

    def shortcode_for_ref(self, ref: str) -> str:
        return self.ref_for_shortcode(ref)

    def find_by_ref(self, ref: str) -> UrlMappingModel | None:
        return self.store.find_by_shortcode(ref)
