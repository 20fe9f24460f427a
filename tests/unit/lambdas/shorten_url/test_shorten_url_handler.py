import json
from unittest.mock import MagicMock

import pytest
from pytest import MonkeyPatch

from briefly.exceptions import (
    AllocatorUnavailableError,
    BadConfigurationError,
    CollisionRetryExhaustedError,
    StoreUnavailableError,
)
from briefly.lambdas.shorten_url import app
from briefly.services import ShortenerService


def make_event(body) -> dict:
    return {
        'resource': '/v1/shorten',
        'httpMethod': 'POST',
        'path': '/v1/shorten',
        'body': body if body is None or isinstance(body, str) else json.dumps(body),
        'requestContext': {'domainName': 'testhost:1000', 'stage': 'test'},
    }


class TestShortenUrlHandler:

    @pytest.fixture(autouse=True)
    def setup(self, monkeypatch: MonkeyPatch, service: ShortenerService, sequence_dao) -> None:
        # Patch Lambda dependencies
        monkeypatch.setattr(app, 'build_shortener_service', lambda *a, **kw: service)
        monkeypatch.setattr(app, '_service', None)

        self.monkeypatch = monkeypatch
        self.service = service
        self.sequence_dao = sequence_dao

    def test_lambda_handler(self) -> None:
        response = app.lambda_handler(make_event({'long_url': 'https://example.com/a'}), None)
        body = json.loads(response['body'])

        assert response['statusCode'] == 200
        assert response['headers']['Content-Type'] == 'application/json'
        assert body == {
            'short_url': 'http://short.ly/1',
            'shortcode': '1',
            'long_url': 'https://example.com/a',
            'created': True,
        }

    def test_lambda_handler_is_idempotent(self) -> None:
        event = make_event({'long_url': 'https://example.com/a'})

        first = json.loads(app.lambda_handler(event, None)['body'])
        second = json.loads(app.lambda_handler(event, None)['body'])

        assert second['short_url'] == first['short_url']
        assert second['created'] is False
        assert self.sequence_dao.current() == 1

    def test_lambda_handler_reuses_service_across_invocations(self) -> None:
        builds = []

        def build_shortener_service():
            builds.append(self.service)
            return self.service

        self.monkeypatch.setattr(app, 'build_shortener_service', build_shortener_service)

        app.lambda_handler(make_event({'long_url': 'https://example.com/a'}), None)
        app.lambda_handler(make_event({'long_url': 'https://example.com/b'}), None)

        assert len(builds) == 1

    def test_lambda_handler_retries_service_build_after_failure(self) -> None:
        outcomes = [StoreUnavailableError('Mapping store is unavailable.'), self.service]

        def build_shortener_service():
            outcome = outcomes.pop(0)
            if isinstance(outcome, Exception):
                raise outcome
            return outcome

        self.monkeypatch.setattr(app, 'build_shortener_service', build_shortener_service)
        event = make_event({'long_url': 'https://example.com/a'})

        assert app.lambda_handler(event, None)['statusCode'] == 503
        assert app.lambda_handler(event, None)['statusCode'] == 200

    def test_lambda_handler_with_invalid_json(self) -> None:
        response = app.lambda_handler(make_event('{not json'), None)
        body = json.loads(response['body'])

        assert response['statusCode'] == 400
        assert body == {'message': 'Bad Request (invalid JSON body)', 'errorCode': 'INVALID_JSON_BODY'}

    @pytest.mark.parametrize('body', [None, '"just a string"', {}, {'url': 'https://example.com/a'}, {'long_url': ''}])
    def test_lambda_handler_with_missing_long_url(self, body) -> None:
        response = app.lambda_handler(make_event(body), None)
        body = json.loads(response['body'])

        assert response['statusCode'] == 400
        assert body['message'] == "Bad Request (missing 'long_url' in JSON body)"
        assert body['errorCode'] == 'MISSING_LONG_URL'

    def test_lambda_handler_with_malformed_long_url(self) -> None:
        response = app.lambda_handler(make_event({'long_url': 'not a url'}), None)
        body = json.loads(response['body'])

        assert response['statusCode'] == 400
        assert body['errorCode'] == 'INVALID_LONG_URL'
        assert 'not a url' in body['message']
        assert self.sequence_dao.current() == 0

    @pytest.mark.parametrize(
        'error',
        [
            StoreUnavailableError('Mapping store is unavailable.'),
            AllocatorUnavailableError('Sequence counter storage is unavailable.'),
            CollisionRetryExhaustedError('No unused shortcode found after 10 attempts.'),
        ],
    )
    def test_lambda_handler_with_unavailable_backend(self, error) -> None:
        service = MagicMock(spec=ShortenerService)
        service.shorten.side_effect = error
        self.monkeypatch.setattr(app, 'build_shortener_service', lambda *a, **kw: service)

        response = app.lambda_handler(make_event({'long_url': 'https://example.com/a'}), None)
        body = json.loads(response['body'])

        assert response['statusCode'] == 503
        assert response['headers']['Retry-After'] == '1'
        assert body == {'message': 'Service Unavailable', 'errorCode': error.error_code}

    def test_lambda_handler_with_unavailable_backend_at_startup(self) -> None:
        def build_shortener_service():
            raise StoreUnavailableError('Mapping store is unavailable.')

        self.monkeypatch.setattr(app, 'build_shortener_service', build_shortener_service)

        response = app.lambda_handler(make_event({'long_url': 'https://example.com/a'}), None)

        assert response['statusCode'] == 503
        assert json.loads(response['body'])['errorCode'] == 'infra:store_unavailable'

    def test_lambda_handler_with_bad_configuration(self) -> None:
        def build_shortener_service():
            raise BadConfigurationError('cache_ttl must be a positive integer (given value: 0).')

        self.monkeypatch.setattr(app, 'build_shortener_service', build_shortener_service)

        response = app.lambda_handler(make_event({'long_url': 'https://example.com/a'}), None)

        assert response['statusCode'] == 500
        assert json.loads(response['body']) == {'message': 'Internal Server Error'}

    def test_lambda_handler_with_unexpected_error(self) -> None:
        service = MagicMock(spec=ShortenerService)
        service.shorten.side_effect = RuntimeError('boom')
        self.monkeypatch.setattr(app, 'build_shortener_service', lambda *a, **kw: service)

        response = app.lambda_handler(make_event({'long_url': 'https://example.com/a'}), None)

        assert response['statusCode'] == 500
        assert json.loads(response['body'])['errorCode'] == 'UNKNOWN_INTERNAL_SERVER_ERROR'
