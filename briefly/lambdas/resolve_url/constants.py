# Log event / error codes
MISSING_SHORTCODE = 'MISSING_SHORTCODE'
INVALID_SHORTCODE = 'INVALID_SHORTCODE'
SHORT_URL_NOT_FOUND = 'SHORT_URL_NOT_FOUND'
REDIRECT_SUCCESS = 'REDIRECT_SUCCESS'
BACKEND_UNAVAILABLE = 'BACKEND_UNAVAILABLE'

# Seconds clients should wait before retrying after a 503
RETRY_AFTER_SECONDS = 1
