import string
from enum import StrEnum


class TTL:
    """TTL durations in seconds."""

    # Sliding expiration window for resolution cache entries
    DEFAULT_CACHE = 60


class Defaults:
    """Default engine settings."""

    SHORT_URL_PREFIX = 'http://localhost:3000/'
    # base62 ordered so that small ids map to digits, e.g. 1 -> '1'
    ALPHABET = string.digits + string.ascii_lowercase + string.ascii_uppercase
    STRATEGY = 'sequence'
    MAX_COLLISION_RETRIES = 10
    RANDOM_CODE_LENGTH = 7
    MAX_LONG_URL_LENGTH = 2048


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        AWS_SAM_LOCAL = 'AWS_SAM_LOCAL'
        LOG_LEVEL = 'LOG_LEVEL'

    class Shortener(StrEnum):
        SHORT_URL_PREFIX = 'SHORT_URL_PREFIX'
        CACHE_TTL = 'CACHE_TTL'
        CODE_ALPHABET = 'CODE_ALPHABET'
        ALLOCATION_STRATEGY = 'ALLOCATION_STRATEGY'
        MAX_COLLISION_RETRIES = 'MAX_COLLISION_RETRIES'
        RANDOM_CODE_LENGTH = 'RANDOM_CODE_LENGTH'

    class Redis(StrEnum):
        HOST = 'REDIS_HOST'
        PORT = 'REDIS_PORT'
        DB = 'REDIS_DB'
        USERNAME = 'REDIS_USERNAME'
        PASSWORD = 'REDIS_PASSWORD'  # noqa: S105

    class SSM(StrEnum):
        # Parameter Store path holding shortener settings, e.g. /briefly/dev/
        PARAMETER_PATH = 'SSM_PARAMETER_PATH'

    class LocalStack(StrEnum):
        ENDPOINT = 'LOCALSTACK_ENDPOINT'  # usually http://localstack:4566


# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
