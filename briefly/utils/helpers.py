"""Helper utilities shared by the engine and its request adapters.

Functions:
    url_digest(long_url: str) -> str
        Fixed-size digest of a long URL, used to build bounded key names
    get_short_url(prefix: str, shortcode: str) -> str
        Get string representation of short URL for a given shortcode
    require_environment(*names: str) -> Callable
        Decorator: Ensure required environment variables are present
    guarantee_500_response(handler: Callable) -> Callable
        Decorator: Turn unexpected Lambda handler exceptions into HTTP 500

Example:
    >>> from briefly.utils.helpers import get_short_url
    >>> get_short_url('http://short.ly/', '1')
    'http://short.ly/1'
"""

import os
import json
import logging
import functools
from collections.abc import Callable

import xxhash

from briefly.types import LambdaEvent, LambdaContext, LambdaResponse
from briefly.constants import UNKNOWN_INTERNAL_SERVER_ERROR
from briefly.exceptions import MissingEnvironmentVariableError


logger = logging.getLogger(__name__)


def url_digest(long_url: str) -> str:
    """Return a 128-bit hex digest of a long URL

    Long URLs may be thousands of characters long, so they are never used
    as key names directly.

    Args:
        long_url (str): URL to digest.

    Returns:
        str: 32-character hexadecimal xxh3 digest.

    Example:
        >>> len(url_digest('https://example.com/a'))
        32
    """
    return xxhash.xxh3_128_hexdigest(long_url.encode('utf-8'))


def get_short_url(prefix: str, shortcode: str) -> str:
    """Get string representation of shortened URL

    The prefix is used verbatim, so it must carry its own trailing separator.

    Args:
        prefix (str): short URL prefix, e.g. 'http://short.ly/'
        shortcode (str): shortcode

    Returns:
        str: short url string representation
    """
    return f'{prefix}{shortcode}'


def require_environment(*names: str) -> Callable:
    """Decorator ensuring required environment variables are present.

    Args:
        *names (str):
            Names of required environment variables.

    Raises:
        MissingEnvironmentVariableError:
            If any required environment variable is missing or empty.

    Example:
        >>> @require_environment('REDIS_HOST')
        ... def connect():
        ...     pass
        >>> connect()
        MissingEnvironmentVariableError: Missing required environment variables: 'REDIS_HOST'
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            missing = [name for name in names if not os.environ.get(name)]
            if missing:
                missing_list = ', '.join(f"'{name}'" for name in missing)
                raise MissingEnvironmentVariableError(f'Missing required environment variables: {missing_list}')
            return func(*args, **kwargs)

        return wrapper

    return decorator


def guarantee_500_response(handler: Callable[[LambdaEvent, LambdaContext], LambdaResponse]) -> Callable[[LambdaEvent, LambdaContext], LambdaResponse]:
    """Decorator: respond with HTTP 500 when a Lambda handler raises unexpectedly

    The exception is logged with its traceback. The client only receives a
    generic message and an error code.
    """

    @functools.wraps(handler)
    def wrapper(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
        try:
            return handler(event, context)
        except Exception:
            logger.exception('Unhandled exception in Lambda handler. Responding with 500.', extra={'event': UNKNOWN_INTERNAL_SERVER_ERROR})
            return {
                'statusCode': 500,
                'body': json.dumps(
                    {
                        'message': 'Internal Server Error',
                        'errorCode': UNKNOWN_INTERNAL_SERVER_ERROR,
                    }
                ),
            }

    return wrapper
