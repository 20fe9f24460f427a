import json
import logging

from briefly.types import LambdaEvent, LambdaContext, LambdaResponse
from briefly.exceptions import CollisionRetryExhaustedError, ConfigurationError, InfrastructureError, InvalidLongUrlError
from briefly.services import ShortenerService, build_shortener_service
from briefly.utils import initialize_logging, guarantee_500_response
from briefly.lambdas.responses import response_200, response_400, response_500, response_503
from briefly.lambdas.shorten_url.constants import (
    INVALID_JSON_BODY,
    MISSING_LONG_URL,
    INVALID_LONG_URL,
    SHORTEN_SUCCESS,
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
    """Handle incoming API Gateway requests to shorten URLs

    This Lambda handler follows this procedure to shorten URLs:
    - Step 1: Extract long URL from request body
    - Step 2: Get the shortener service (built once per warm container)
    - Step 3: Shorten (idempotent: known long URLs keep their shortcode)
    - Step 4: Respond to user with 200 success

    HTTP responses:
        200: Successful URL shortening
            short_url: short url (prefix + shortcode)
            shortcode: shortcode alone
            long_url: original url (provided in request)
            created: False if the long URL had already been shortened
        400: Bad client request
            message: indicate cause of bad request (invalid JSON, missing or malformed long_url)
        500: Internal server error
        503: Mapping store / sequence counter unavailable, or no free random code found
            headers:
                Retry-After: seconds to wait before retrying

    Args:
        event (LambdaEvent):
            API Gateway event payload in Lambda Proxy format.
        context (LambdaContext):
            AWS Lambda context object containing runtime information.

    Returns:
        LambdaResponse:
            JSON-serializable response following API Gateway Lambda Proxy
            output format.

    Example:
        >>> event = {'body': '{"long_url": "https://example.com/a"}'}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        200
        >>> json.loads(response['body'])['short_url']
        'http://short.ly/1'
    """
    # 1- Extract long URL from request body
    try:
        request_body = json.loads(event.get('body') or '{}')
    except json.JSONDecodeError:
        logger.info('Invalid JSON body. Responding with 400.', extra={'event': INVALID_JSON_BODY})
        return response_400(message='invalid JSON body', error_code=INVALID_JSON_BODY)

    long_url = request_body.get('long_url') if isinstance(request_body, dict) else None
    if not long_url:
        logger.info("Missing 'long_url' in body. Responding with 400.", extra={'event': MISSING_LONG_URL})
        return response_400(message="missing 'long_url' in JSON body", error_code=MISSING_LONG_URL)

    # 2- Get the shortener service
    try:
        service = get_shortener_service()
    except ConfigurationError:
        logger.exception('Failed to load configuration for shorten URL function. Responding with 500.')
        return response_500()
    except InfrastructureError as e:
        logger.error('Backend unavailable. Responding with 503.', extra={'event': BACKEND_UNAVAILABLE, 'errorCode': e.error_code})
        return response_503(retry_after=RETRY_AFTER_SECONDS, error_code=e.error_code)

    # 3- Shorten
    try:
        result = service.shorten(long_url)
    except InvalidLongUrlError as e:
        logger.info('Malformed long URL. Responding with 400.', extra={'event': INVALID_LONG_URL})
        return response_400(message=str(e), error_code=INVALID_LONG_URL)
    except (InfrastructureError, CollisionRetryExhaustedError) as e:
        logger.error('Backend unavailable. Responding with 503.', extra={'event': BACKEND_UNAVAILABLE, 'errorCode': e.error_code})
        return response_503(retry_after=RETRY_AFTER_SECONDS, error_code=e.error_code)

    # 4- Return successful response to user
    logger.info(
        'Shortened long URL. Responding with 200.',
        extra={'event': SHORTEN_SUCCESS, 'shortcode': result.shortcode, 'created': result.created},
    )
    return response_200(
        {
            'short_url': result.short_url,
            'shortcode': result.shortcode,
            'long_url': result.long_url,
            'created': result.created,
        }
    )
