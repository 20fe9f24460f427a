from briefly.utils.config import ShortenerConfig, app_env, app_name, app_prefix, load_config, redis_config
from briefly.utils.encoder import Base62Codec, generate_random_code
from briefly.utils.helpers import url_digest, get_short_url, require_environment, guarantee_500_response
from briefly.utils.logging import initialize_logging
from briefly.utils.validators import is_valid_long_url, validate_long_url


__all__ = [
    'Base62Codec',
    'generate_random_code',
    'ShortenerConfig',
    'app_env',
    'app_name',
    'app_prefix',
    'load_config',
    'redis_config',
    'url_digest',
    'get_short_url',
    'require_environment',
    'guarantee_500_response',
    'initialize_logging',
    'is_valid_long_url',
    'validate_long_url',
]
