"""Shortcode encoding utilities

This module maps sequence ids to compact shortcodes and back, and draws
random candidate shortcodes for the legacy random-code allocation scheme.

Classes:
    Base62Codec(alphabet=Defaults.ALPHABET):
        Bijective encoder between non-negative integers and shortcodes.

Functions:
    generate_random_code(length=7, alphabet=Defaults.ALPHABET) -> str:
        Draw a random shortcode of fixed length.

Example:
    >>> from briefly.utils.encoder import Base62Codec
    >>> codec = Base62Codec()
    >>> codec.encode(61)
    'Z'
    >>> codec.encode(62)
    '10'
    >>> codec.decode('10')
    62
"""

import secrets

from briefly.constants import Defaults
from briefly.exceptions import InvalidCodeFormatError


class Base62Codec:
    """Bijective positional encoder over a fixed alphabet

    The alphabet size is the numeric base (62 for the default `[0-9a-zA-Z]`).
    The first alphabet character plays the role of the zero digit, so:

    - 0 encodes to a single zero digit;
    - every other id encodes without leading zero digits;
    - decode() rejects codes with a leading zero digit (except the single-digit
      code for 0), so every id has exactly one accepted code.

    Code length grows by one each time the id crosses a power of the base,
    i.e. larger ids never produce shorter codes.

    Attributes:
        alphabet (str):
            Ordered code characters; index in the string is the digit value.
        base (int):
            Alphabet size.
    """

    def __init__(self, alphabet: str = Defaults.ALPHABET):
        if not isinstance(alphabet, str):
            raise TypeError(f'Alphabet must be of type string (given type: {type(alphabet)}).')
        if len(alphabet) < 2:
            raise ValueError(f'Alphabet must contain at least 2 characters (given value: {alphabet!r}).')
        if len(set(alphabet)) != len(alphabet):
            raise ValueError(f'Alphabet characters must be unique (given value: {alphabet!r}).')

        self.alphabet = alphabet
        self.base = len(alphabet)
        self._digits = {character: value for value, character in enumerate(alphabet)}

    def encode(self, sequence_id: int) -> str:
        """Encode a non-negative integer into a shortcode

        Args:
            sequence_id (int):
                Non-negative integer to encode. No upper bound.

        Returns:
            str: The shortcode, most significant digit first.

        Raises:
            TypeError: If sequence_id is not an integer.
            ValueError: If sequence_id is negative.

        Example:
            >>> Base62Codec().encode(12345)
            '3d7'
        """
        # bool is an int subclass, but True/False are never valid ids
        if not isinstance(sequence_id, int) or isinstance(sequence_id, bool):
            raise TypeError(f'Sequence id must be of type integer (given type: {type(sequence_id)}).')
        if sequence_id < 0:
            raise ValueError(f'Sequence id must be a non-negative integer (given value: {sequence_id}).')

        if sequence_id == 0:
            return self.alphabet[0]

        digits = []
        while sequence_id:
            sequence_id, remainder = divmod(sequence_id, self.base)
            digits.append(self.alphabet[remainder])
        return ''.join(reversed(digits))

    def decode(self, code: str) -> int:
        """Decode a shortcode back into its integer

        Args:
            code (str):
                Shortcode produced by encode().

        Returns:
            int: The decoded integer.

        Raises:
            InvalidCodeFormatError:
                If the code is empty, not a string, contains characters outside
                the alphabet, or carries a leading zero digit.

        Example:
            >>> Base62Codec().decode('3d7')
            12345
        """
        if not isinstance(code, str) or not code:
            raise InvalidCodeFormatError(f'Shortcode must be a non-empty string (given value: {code!r}).')

        invalid = sorted({character for character in code if character not in self._digits})
        if invalid:
            raise InvalidCodeFormatError(f"Shortcode '{code}' contains characters outside the alphabet: {''.join(invalid)!r}.")
        if len(code) > 1 and code[0] == self.alphabet[0]:
            raise InvalidCodeFormatError(f"Shortcode '{code}' has a leading zero digit '{self.alphabet[0]}'.")

        value = 0
        for character in code:
            value = value * self.base + self._digits[character]
        return value

    def is_valid(self, code: str) -> bool:
        """True if decode() accepts the code."""
        try:
            self.decode(code)
        except InvalidCodeFormatError:
            return False
        return True


def generate_random_code(length: int = Defaults.RANDOM_CODE_LENGTH, alphabet: str = Defaults.ALPHABET) -> str:
    """Draw a random fixed-length shortcode

    Uses the `secrets` CSPRNG so candidates are not predictable from earlier
    ones. With the default settings the code space holds 62**7 (~3.5e12) codes.

    Args:
        length (int):
            Number of characters. Defaults to 7.
        alphabet (str):
            Characters to draw from. Defaults to base62.

    Returns:
        str: Random shortcode.

    Raises:
        ValueError: If length is not positive or the alphabet is empty.

    Example:
        >>> len(generate_random_code(7))
        7
    """
    if length < 1:
        raise ValueError(f'Code length must be a positive integer (given value: {length}).')
    if not alphabet:
        raise ValueError('Alphabet must be a non-empty string.')

    return ''.join(secrets.choice(alphabet) for _ in range(length))
