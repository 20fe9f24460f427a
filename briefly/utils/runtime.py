"""Runtime utilities

Functions:
    running_locally() -> bool:
        True if the engine runs on a developer machine (APP_ENV=local or SAM local).

Example:
    >>> from briefly.utils.runtime import running_locally
    >>> os.environ['APP_ENV'] = 'local'
    >>> running_locally()
    True
    >>> os.environ['APP_ENV'] = 'dev'
    >>> running_locally()
    False
"""

import os

from briefly.constants import ENV


def running_locally() -> bool:
    env = os.getenv(ENV.App.APP_ENV, '').lower()
    return env == 'local' or os.getenv(ENV.App.AWS_SAM_LOCAL) == 'true'
