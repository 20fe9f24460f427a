class BrieflyError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:briefly_error'
    retryable = False


class InvalidLongUrlError(BrieflyError):
    """Raised when a long URL is not a well-formed http(s) URL."""

    error_code = 'request:invalid_long_url'


class InvalidCodeFormatError(BrieflyError):
    """Raised when a shortcode contains characters outside the code alphabet."""

    error_code = 'request:invalid_code_format'


class CollisionRetryExhaustedError(BrieflyError):
    """Raised when no unused random shortcode was found within the retry cap."""

    error_code = 'app:collision_retry_exhausted'


class InfrastructureError(BrieflyError):
    """Base exception for failures of external collaborators."""

    error_code = 'infra:infrastructure_error'
    retryable = True


class AllocatorUnavailableError(InfrastructureError):
    """Raised when the sequence counter storage cannot hand out an id."""

    error_code = 'infra:allocator_unavailable'


class StoreUnavailableError(InfrastructureError):
    """Raised when the durable mapping store cannot be read or written."""

    error_code = 'infra:store_unavailable'


class ConfigurationError(BrieflyError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class MissingEnvironmentVariableError(ConfigurationError, KeyError):
    """Raised when a required environment variable is missing."""

    error_code = 'config:missing_environment_variable_error'


class BadConfigurationError(ConfigurationError, ValueError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'
