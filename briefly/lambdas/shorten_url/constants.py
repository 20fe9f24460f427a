# Log event / error codes
INVALID_JSON_BODY = 'INVALID_JSON_BODY'
MISSING_LONG_URL = 'MISSING_LONG_URL'
INVALID_LONG_URL = 'INVALID_LONG_URL'
SHORTEN_SUCCESS = 'SHORTEN_SUCCESS'
BACKEND_UNAVAILABLE = 'BACKEND_UNAVAILABLE'

# Seconds clients should wait before retrying after a 503
RETRY_AFTER_SECONDS = 1
