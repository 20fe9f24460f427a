"""Syntactic validation of long URLs

Only the shape of the URL is checked. URLs are never dereferenced.

Functions:
    is_valid_long_url(long_url) -> bool
        True if the URL is a well-formed absolute http(s) URL.
    validate_long_url(long_url) -> str
        Return the URL unchanged or raise InvalidLongUrlError.

Example:
    >>> is_valid_long_url('https://example.com/a')
    True
    >>> is_valid_long_url('not a url')
    False
"""

import urllib.parse

from briefly.constants import Defaults
from briefly.exceptions import InvalidLongUrlError


ALLOWED_SCHEMES = frozenset({'http', 'https'})


def _reason_invalid(long_url) -> str | None:
    if not isinstance(long_url, str) or not long_url:
        return 'URL must be a non-empty string'
    if len(long_url) > Defaults.MAX_LONG_URL_LENGTH:
        return f'URL is too long (max {Defaults.MAX_LONG_URL_LENGTH} characters)'
    if any(character.isspace() for character in long_url):
        return 'URL must not contain whitespace'

    try:
        components = urllib.parse.urlsplit(long_url)
        # accessing .port validates the port number
        components.port
    except ValueError as e:
        return f'URL cannot be parsed ({e})'

    if components.scheme.lower() not in ALLOWED_SCHEMES:
        return 'URL must use the http or https scheme'
    if not components.hostname:
        return 'URL must have a host'
    return None


def is_valid_long_url(long_url) -> bool:
    return _reason_invalid(long_url) is None


def validate_long_url(long_url) -> str:
    """Return long_url if it is well-formed, else raise InvalidLongUrlError

    Raises:
        InvalidLongUrlError:
            With the reason of the failed check in the message.
    """
    reason = _reason_invalid(long_url)
    if reason is not None:
        raise InvalidLongUrlError(f'Invalid long URL {long_url!r}: {reason}.')
    return long_url
