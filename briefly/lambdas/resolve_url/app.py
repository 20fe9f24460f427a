import logging

from briefly.types import LambdaEvent, LambdaContext, LambdaResponse
from briefly.exceptions import ConfigurationError, InfrastructureError, InvalidCodeFormatError
from briefly.services import ShortenerService, build_shortener_service
from briefly.utils import initialize_logging, guarantee_500_response
from briefly.lambdas.responses import response_302, response_400, response_404, response_500, response_503
from briefly.lambdas.resolve_url.constants import (
    MISSING_SHORTCODE,
    INVALID_SHORTCODE,
    SHORT_URL_NOT_FOUND,
    REDIRECT_SUCCESS,
    BACKEND_UNAVAILABLE,
    RETRY_AFTER_SECONDS,
)


initialize_logging()
logger = logging.getLogger(__name__)

# Reused across invocations of a warm Lambda container
_service: ShortenerService | None = None


def get_shortener_service() -> ShortenerService:
    """Build the shortener service on first use and keep it for later invocations"""
    global _service
    if _service is None:
        _service = build_shortener_service()
    return _service


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to redirect short URLs

    This Lambda handler follows this procedure to redirect URLs:
    - Step 1: Extract shortcode from request path
    - Step 2: Get the shortener service (built once per warm container)
    - Step 3: Resolve the shortcode to its long URL
    - Step 4: Redirect client to the long URL

    HTTP responses:
        302: Successful redirect
            headers:
                Location: long URL
        400: Missing shortcode, or shortcode with characters outside the alphabet
        404: No mapping exists for the shortcode
        500: Internal server error
        503: Mapping store unavailable
            headers:
                Retry-After: seconds to wait before retrying

    Example:
        >>> event = {'pathParameters': {'shortcode': '1'}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        302
        >>> response['headers']['Location']
        'https://example.com/a'
    """
    # 1- Extract shortcode from request's path
    shortcode = (event.get('pathParameters') or {}).get('shortcode')
    if not shortcode:
        logger.info('Missing "shortcode" in path. Responding with 400.', extra={'event': MISSING_SHORTCODE})
        return response_400(message="missing 'shortcode' in path", error_code=MISSING_SHORTCODE)

    # 2- Get the shortener service
    try:
        service = get_shortener_service()
    except ConfigurationError:
        logger.exception('Failed to load configuration for resolve URL function. Responding with 500.')
        return response_500()
    except InfrastructureError as e:
        logger.error('Backend unavailable. Responding with 503.', extra={'event': BACKEND_UNAVAILABLE, 'errorCode': e.error_code})
        return response_503(retry_after=RETRY_AFTER_SECONDS, error_code=e.error_code)

    # 3- Resolve shortcode
    try:
        long_url = service.resolve(shortcode)
    except InvalidCodeFormatError:
        logger.info('Malformed shortcode. Responding with 400.', extra={'shortcode': shortcode, 'event': INVALID_SHORTCODE})
        return response_400(message=f"invalid shortcode '{shortcode}'", error_code=INVALID_SHORTCODE)
    except InfrastructureError as e:
        logger.error('Backend unavailable. Responding with 503.', extra={'event': BACKEND_UNAVAILABLE, 'errorCode': e.error_code})
        return response_503(retry_after=RETRY_AFTER_SECONDS, error_code=e.error_code)

    if long_url is None:
        logger.info('Short URL not found. Responding with 404.', extra={'shortcode': shortcode, 'event': SHORT_URL_NOT_FOUND})
        return response_404(message=f"short url '{shortcode}' doesn't exist", error_code=SHORT_URL_NOT_FOUND)

    # 4- Redirect client to long URL
    logger.info('Redirecting client to long URL. Responding with 302.', extra={'shortcode': shortcode, 'event': REDIRECT_SUCCESS})
    return response_302(location=long_url)
