"""Utility functions for engine configuration management.

Settings are read from environment variables. When `SSM_PARAMETER_PATH` is
set, parameters stored under that path in **AWS SSM Parameter Store**
override the environment. The last path segment of each parameter selects
the setting it overrides:

    /briefly/dev/short_url_prefix        -> short_url_prefix
    /briefly/dev/cache_ttl               -> cache_ttl
    /briefly/dev/code_alphabet           -> alphabet
    /briefly/dev/allocation_strategy     -> strategy
    /briefly/dev/max_collision_retries   -> max_collision_retries
    /briefly/dev/random_code_length      -> random_code_length

Functions:
    app_env() -> str
        Return the current application environment (`APP_ENV`) value,
        defaulting to `'local'`.

    app_name() -> str | None
        Return the application name (`APP_NAME`), or None if not set.

    app_prefix() -> str | None
        Return application prefix for DAOs, or None if `APP_NAME` is not set.

    load_config(ssm_client=None) -> ShortenerConfig
        Build validated engine settings from the environment and SSM.

    redis_config() -> dict
        Return `redis_*` keyword arguments for Redis-backed DAOs.

Example:
    >>> from briefly.utils.config import load_config
    >>> config = load_config()
    >>> config.cache_ttl
    60
"""

import os
import logging
from dataclasses import dataclass
from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from briefly.constants import ENV, TTL, Defaults
from briefly.exceptions import BadConfigurationError, ConfigurationError
from briefly.models import AllocationStrategy
from briefly.types import SSMClient
from briefly.utils.helpers import require_environment
from briefly.utils.runtime import running_locally


logger = logging.getLogger(__name__)

# SSM parameter name -> ShortenerConfig field
SSM_SETTINGS = {
    'short_url_prefix': 'short_url_prefix',
    'cache_ttl': 'cache_ttl',
    'code_alphabet': 'alphabet',
    'allocation_strategy': 'strategy',
    'max_collision_retries': 'max_collision_retries',
    'random_code_length': 'random_code_length',
}

# environment variable -> ShortenerConfig field
ENV_SETTINGS = {
    ENV.Shortener.SHORT_URL_PREFIX: 'short_url_prefix',
    ENV.Shortener.CACHE_TTL: 'cache_ttl',
    ENV.Shortener.CODE_ALPHABET: 'alphabet',
    ENV.Shortener.ALLOCATION_STRATEGY: 'strategy',
    ENV.Shortener.MAX_COLLISION_RETRIES: 'max_collision_retries',
    ENV.Shortener.RANDOM_CODE_LENGTH: 'random_code_length',
}

INTEGER_SETTINGS = frozenset({'cache_ttl', 'max_collision_retries', 'random_code_length'})


@dataclass(frozen=True)
class ShortenerConfig:
    """Settings the engine depends on.

    Attributes:
        short_url_prefix (str):
            Prefix prepended to shortcodes, e.g. 'http://short.ly/'.
        cache_ttl (int):
            Sliding TTL of resolution cache entries, in seconds.
        alphabet (str):
            Shortcode alphabet. Its length is the encoding base.
        strategy (AllocationStrategy):
            Active allocation scheme.
        max_collision_retries (int):
            Attempt cap for the random-code scheme.
        random_code_length (int):
            Length of random shortcodes.

    Raises:
        BadConfigurationError:
            If any value is out of range.
    """

    short_url_prefix: str = Defaults.SHORT_URL_PREFIX
    cache_ttl: int = TTL.DEFAULT_CACHE
    alphabet: str = Defaults.ALPHABET
    strategy: AllocationStrategy = AllocationStrategy(Defaults.STRATEGY)
    max_collision_retries: int = Defaults.MAX_COLLISION_RETRIES
    random_code_length: int = Defaults.RANDOM_CODE_LENGTH

    def __post_init__(self):
        if not self.short_url_prefix:
            raise BadConfigurationError('Short URL prefix must be a non-empty string.')
        for name in INTEGER_SETTINGS:
            value = getattr(self, name)
            if not isinstance(value, int) or value < 1:
                raise BadConfigurationError(f'{name} must be a positive integer (given value: {value!r}).')
        if len(self.alphabet) < 2 or len(set(self.alphabet)) != len(self.alphabet):
            raise BadConfigurationError(f'Alphabet must contain at least 2 unique characters (given value: {self.alphabet!r}).')
        try:
            # accept plain strings, e.g. from environment variables
            object.__setattr__(self, 'strategy', AllocationStrategy(self.strategy))
        except ValueError as e:
            choices = ', '.join(repr(s.value) for s in AllocationStrategy)
            raise BadConfigurationError(f'Unknown allocation strategy {self.strategy!r} (expected one of {choices}).') from e


def app_env() -> str:
    """Return the current application environment by reading 'APP_ENV'

    Returns:
        str:
            Value of `APP_ENV` environment variable, `'local'` by default.
    """
    return os.environ.get(ENV.App.APP_ENV, 'local').lower()


def app_name() -> str | None:
    return os.environ.get(ENV.App.APP_NAME)


def app_prefix() -> str | None:
    """Return application prefix for DAOs

    Returns:
        str: app prefix as <app name>:<app env>.
             None if APP_NAME is not set.

    Example:
        >>> os.environ['APP_NAME'] = 'briefly'
        >>> os.environ['APP_ENV'] = 'local'
        >>> app_prefix()
        'briefly:local'
    """
    return None if app_name() is None else f'{app_name()}:{app_env()}'


def _coerce(settings: dict[str, str], source: str) -> dict[str, Any]:
    coerced = {}
    for name, raw in settings.items():
        if name in INTEGER_SETTINGS:
            try:
                coerced[name] = int(raw)
            except (TypeError, ValueError) as e:
                raise BadConfigurationError(f'{name} from {source} must be an integer (given value: {raw!r}).') from e
        else:
            coerced[name] = raw
    return coerced


def _env_settings() -> dict[str, Any]:
    settings = {field: os.environ[name] for name, field in ENV_SETTINGS.items() if os.environ.get(name)}
    return _coerce(settings, 'environment')


def _ssm_settings(path: str, ssm_client: Optional[SSMClient] = None) -> dict[str, Any]:
    """Fetch shortener settings stored under an SSM Parameter Store path

    Unknown parameter names under the path are ignored.

    Raises:
        ConfigurationError:
            On AWS SSM API failures or malformed responses.
        BadConfigurationError:
            If an integer setting cannot be parsed.
    """
    # fmt: off
    ssm_client_kwargs = {
        'endpoint_url': os.environ.get(ENV.LocalStack.ENDPOINT, 'http://localhost:4566'),
    } if running_locally() else {}
    # fmt: on
    ssm = ssm_client or boto3.client('ssm', **ssm_client_kwargs)

    settings = {}
    try:
        paginator = ssm.get_paginator('get_parameters_by_path')
        for page in paginator.paginate(Path=path, Recursive=False, WithDecryption=True):
            for parameter in page['Parameters']:
                name = parameter['Name'].rstrip('/').rsplit('/', 1)[-1]
                if name in SSM_SETTINGS:
                    settings[SSM_SETTINGS[name]] = parameter['Value']
    except (BotoCoreError, ClientError) as e:
        raise ConfigurationError(f"Can't load settings from SSM path '{path}'.") from e
    except KeyError as e:
        raise ConfigurationError('Malformed SSM get_parameters_by_path response') from e

    logger.debug('Loaded settings from SSM.', extra={'ssmPath': path, 'settings': sorted(settings)})
    return _coerce(settings, 'SSM')


def load_config(ssm_client: Optional[SSMClient] = None) -> ShortenerConfig:
    """Build engine settings from the environment (and SSM, if configured)

    Precedence: SSM parameters > environment variables > defaults.

    Args:
        ssm_client (Optional[SSMClient]):
            Optional boto3 SSM client to reuse (useful in tests).

    Returns:
        ShortenerConfig: Validated settings.

    Raises:
        BadConfigurationError:
            If any setting is invalid.
        ConfigurationError:
            If SSM cannot be read.
    """
    settings = _env_settings()

    ssm_path = os.environ.get(ENV.SSM.PARAMETER_PATH)
    if ssm_path:
        settings.update(_ssm_settings(ssm_path, ssm_client=ssm_client))

    return ShortenerConfig(**settings)


@require_environment(ENV.Redis.HOST)
def redis_config() -> dict[str, Any]:
    """Return Redis connection keyword arguments for Redis-backed DAOs

    Returns:
        dict: keys `redis_host`, `redis_port`, `redis_db`, `redis_username`, `redis_password`.

    Raises:
        MissingEnvironmentVariableError:
            If REDIS_HOST is not set.
        BadConfigurationError:
            If REDIS_PORT or REDIS_DB is not an integer.

    Example:
        >>> os.environ['REDIS_HOST'] = 'redis.internal'
        >>> redis_config()['redis_host']
        'redis.internal'
    """
    port = os.environ.get(ENV.Redis.PORT, '6379')
    db = os.environ.get(ENV.Redis.DB, '0')
    try:
        port, db = int(port), int(db)
    except ValueError as e:
        raise BadConfigurationError(f'Invalid Redis port/db values: port={port!r} db={db!r}') from e

    return {
        'redis_host': os.environ[ENV.Redis.HOST],
        'redis_port': port,
        'redis_db': db,
        'redis_username': os.environ.get(ENV.Redis.USERNAME),
        'redis_password': os.environ.get(ENV.Redis.PASSWORD),
    }
