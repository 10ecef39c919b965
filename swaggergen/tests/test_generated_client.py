"""Tests that import a generated client package and exercise its runtime.

The package is generated once per module from the users fixture document
and driven through httpx.MockTransport, so no network access is needed.
"""

import gzip
import importlib
import json
import sys
import time

import httpx
import pytest

from swaggergen.codegen.codegen import Codegen
from swaggergen.config import GenerationOptions

from .fixtures import USERS_SPEC

PACKAGE = 'users_client'
BASE_URL = 'https://users.example.com'


@pytest.fixture(scope='module')
def client_pkg(tmp_path_factory):
    root = tmp_path_factory.mktemp('generated')
    spec_path = root / 'users.json'
    spec_path.write_text(json.dumps(USERS_SPEC))

    Codegen(GenerationOptions(input=str(spec_path), output=str(root / PACKAGE))).generate()

    sys.path.insert(0, str(root))
    try:
        yield importlib.import_module(PACKAGE)
    finally:
        sys.path.remove(str(root))
        for name in [m for m in sys.modules if m == PACKAGE or m.startswith(f'{PACKAGE}.')]:
            del sys.modules[name]


@pytest.fixture
def api(client_pkg):
    """The generated package with its shared configuration reset."""
    config = client_pkg.api_config
    config.base_url = BASE_URL
    config.timeout_ms = 30000
    config.enable_logging = False
    config.client = None
    config.token_provider = lambda: None
    config.request_interceptors.clear()
    config.response_interceptors.clear()
    config.error_handlers.clear()
    return client_pkg


class Recorder:
    """MockTransport handler recording every request it answers."""

    def __init__(self, response=None, error=None):
        self.requests = []
        self.response = response or httpx.Response(200, json={'ok': True})
        self.error = error

    def __call__(self, request):
        self.requests.append(request)
        if self.error is not None:
            raise self.error(f'{self.error.__name__} raised', request=request)
        # A fresh response per request; the client closes the one it receives
        return httpx.Response(
            self.response.status_code,
            headers=self.response.headers,
            content=self.response.content,
        )

    def client(self):
        return httpx.Client(transport=httpx.MockTransport(self))

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


class TestPathAndQuery:
    """Tests for URL construction."""

    def test_path_params_are_encoded(self, api):
        recorder = Recorder()
        api.users_service.users_by_id(params={'id': 'a b/c'}, config={'client': recorder.client()})

        assert recorder.last.method == 'GET'
        assert recorder.last.url.raw_path == b'/api/v1/users/a%20b%2Fc'
        assert recorder.last.url.host == 'users.example.com'

    def test_renamed_placeholders(self, api):
        recorder = Recorder()
        api.services.users.get_user_post(
            params={'id': 7, 'post_id': 9}, config={'client': recorder.client()}
        )
        assert recorder.last.url.path == '/api/v1/users/7/posts/9'

    def test_missing_path_param_raises(self, api):
        with pytest.raises(ValueError, match='id'):
            api.services.users.users_by_id(params={}, config={'client': Recorder().client()})

    def test_query_lists_repeat_and_empties_are_omitted(self, api):
        recorder = Recorder()
        api.services.users.users(
            query={'tag': ['a', 'b'], 'empty': '', 'none': None, 'limit': 10},
            config={'client': recorder.client()},
        )
        assert recorder.last.url.params.multi_items() == [
            ('tag', 'a'),
            ('tag', 'b'),
            ('limit', '10'),
        ]

    def test_base_url_override(self, api):
        recorder = Recorder()
        api.services.default.status(
            config={'client': recorder.client(), 'base_url': 'http://localhost:8080/root/'}
        )
        assert str(recorder.last.url) == 'http://localhost:8080/root/status'


class TestHeadersAndBody:
    """Tests for headers, auth and request bodies."""

    def test_default_and_auth_headers(self, api):
        api.set_token_provider(lambda: 'secret')
        recorder = Recorder()

        api.services.users.users(config={'client': recorder.client()})

        assert recorder.last.headers['authorization'] == 'Bearer secret'
        assert recorder.last.headers['accept'] == 'application/json, text/plain, */*'

    def test_caller_headers_win(self, api):
        api.set_token_provider(lambda: 'secret')
        recorder = Recorder()

        api.services.users.users(
            headers={'Authorization': 'Bearer caller', 'X-Trace': '1'},
            config={'client': recorder.client()},
        )

        assert recorder.last.headers['authorization'] == 'Bearer caller'
        assert recorder.last.headers['x-trace'] == '1'

    def test_no_token_no_authorization(self, api):
        recorder = Recorder()
        api.services.users.users(config={'client': recorder.client()})
        assert 'authorization' not in recorder.last.headers

    def test_env_token_provider(self, api, monkeypatch):
        monkeypatch.setenv('API_TOKEN', 'from-env')
        config = api.ApiConfig(base_url=BASE_URL)
        assert api.auth_header(config) == {'Authorization': 'Bearer from-env'}

        monkeypatch.delenv('API_TOKEN')
        assert api.auth_header(config) == {}

    def test_json_body_for_post(self, api):
        recorder = Recorder(httpx.Response(201, json={'id': 1}))

        result = api.services.users.create_users(
            body={'name': 'Ada'}, config={'client': recorder.client()}
        )

        assert result == {'id': 1}
        assert recorder.last.method == 'POST'
        assert json.loads(recorder.last.content) == {'name': 'Ada'}

    def test_raw_body(self, api):
        recorder = Recorder()
        api.services.users.update_users_by_id(
            params={'id': 1}, body=b'\x00\x01', config={'client': recorder.client()}
        )
        assert recorder.last.content == b'\x00\x01'

    def test_body_ignored_for_get_and_empty_body_not_sent(self, api):
        recorder = Recorder()
        api.services.users.users(body={'x': 1}, config={'client': recorder.client()})
        api.services.users.create_users(body={}, config={'client': recorder.client()})

        assert [r.content for r in recorder.requests] == [b'', b'']


class TestResponses:
    """Tests for response decoding and failures."""

    @pytest.mark.parametrize(
        'response,expected',
        [
            (httpx.Response(200, json=[1, 2]), [1, 2]),
            (
                httpx.Response(
                    200, content=b'{"a": 1}', headers={'content-type': 'application/problem+json'}
                ),
                {'a': 1},
            ),
            (httpx.Response(200, text='pong'), 'pong'),
            (
                httpx.Response(
                    200, content=b'\x89PNG', headers={'content-type': 'image/png'}
                ),
                b'\x89PNG',
            ),
            (
                httpx.Response(
                    200, content=b'not json', headers={'content-type': 'application/json'}
                ),
                'not json',
            ),
            (httpx.Response(204), None),
        ],
    )
    def test_decoding_by_content_type(self, api, response, expected):
        recorder = Recorder(response)
        assert api.services.default.status(config={'client': recorder.client()}) == expected

    def test_error_status_raises_api_error(self, api):
        recorder = Recorder(httpx.Response(404, json={'detail': 'missing'}))

        with pytest.raises(api.ApiError) as exc_info:
            api.services.users.users_by_id(params={'id': 1}, config={'client': recorder.client()})

        error = exc_info.value
        assert error.status == 404
        assert error.body == {'detail': 'missing'}
        assert error.error_type is api.ApiErrorType.NOT_FOUND_ERROR

    @pytest.mark.parametrize(
        'status,error_type',
        [
            (400, 'VALIDATION_ERROR'),
            (401, 'AUTHENTICATION_ERROR'),
            (403, 'AUTHORIZATION_ERROR'),
            (409, 'UNKNOWN_ERROR'),
            (503, 'SERVER_ERROR'),
        ],
    )
    def test_error_classification(self, api, status, error_type):
        recorder = Recorder(httpx.Response(status))
        with pytest.raises(api.ApiError) as exc_info:
            api.services.default.status(config={'client': recorder.client()})
        assert exc_info.value.error_type.value == error_type
        assert exc_info.value.body is None

    def test_timeout_raises_timeout_error(self, api):
        recorder = Recorder(error=httpx.ReadTimeout)

        with pytest.raises(api.ApiTimeoutError) as exc_info:
            api.services.default.status(config={'client': recorder.client(), 'timeout_ms': 1500})

        assert exc_info.value.error_type is api.ApiErrorType.TIMEOUT_ERROR
        assert exc_info.value.status is None
        assert '1500 ms' in str(exc_info.value)
        assert recorder.last.extensions['timeout']['read'] == 1.5

    def test_slow_body_is_cut_off_at_the_deadline(self, api):
        """Test that a body trickling in under the per-read timeout still times out."""

        def drip():
            for _ in range(20):
                time.sleep(0.05)
                yield b'a'

        def handler(request):
            return httpx.Response(200, content=drip(), headers={'content-type': 'text/plain'})

        client = httpx.Client(transport=httpx.MockTransport(handler))
        started = time.monotonic()

        with pytest.raises(api.ApiTimeoutError) as exc_info:
            api.services.default.status(config={'client': client, 'timeout_ms': 200})

        assert time.monotonic() - started < 0.9
        assert exc_info.value.error_type is api.ApiErrorType.TIMEOUT_ERROR
        assert f'GET {BASE_URL}/status' in str(exc_info.value)

    def test_streamed_body_within_deadline(self, api):
        def handler(request):
            return httpx.Response(
                200,
                content=iter([b'po', b'ng']),
                headers={'content-type': 'text/plain'},
            )

        client = httpx.Client(transport=httpx.MockTransport(handler))
        assert api.services.default.status(config={'client': client}) == 'pong'

    def test_compressed_body_is_decoded_once(self, api):
        def handler(request):
            return httpx.Response(
                200,
                content=iter([gzip.compress(b'{"ok": true}')]),
                headers={'content-type': 'application/json', 'content-encoding': 'gzip'},
            )

        client = httpx.Client(transport=httpx.MockTransport(handler))
        assert api.services.default.status(config={'client': client}) == {'ok': True}

    def test_network_failure_raises_api_error(self, api):
        recorder = Recorder(error=httpx.ConnectError)

        with pytest.raises(api.ApiError) as exc_info:
            api.services.default.status(config={'client': recorder.client()})

        assert not isinstance(exc_info.value, api.ApiTimeoutError)
        assert exc_info.value.error_type is api.ApiErrorType.NETWORK_ERROR


class TestConfiguration:
    """Tests for interceptors, shared clients and the service index."""

    def test_request_interceptors_run_in_order(self, api):
        recorder = Recorder()

        @api.api_config.add_request_interceptor
        def first(request):
            request['headers']['X-Order'] = 'first'
            return request

        @api.api_config.add_request_interceptor
        def second(request):
            request['headers']['X-Order'] += ',second'

        api.services.users.users(config={'client': recorder.client()})

        assert recorder.last.headers['x-order'] == 'first,second'

    def test_response_interceptor_replaces_response(self, api):
        recorder = Recorder(httpx.Response(200, json={'v': 1}))
        api.api_config.add_response_interceptor(
            lambda response: httpx.Response(200, json={'v': 2})
        )

        assert api.services.default.status(config={'client': recorder.client()}) == {'v': 2}

    def test_shared_client_on_config(self, api):
        recorder = Recorder()
        api.api_config.client = recorder.client()

        api.services.default.status()

        assert len(recorder.requests) == 1

    def test_logging(self, api, caplog):
        api.api_config.enable_logging = True
        recorder = Recorder()

        with caplog.at_level('INFO', logger=f'{PACKAGE}.client'):
            api.services.default.status(config={'client': recorder.client()})

        assert f'-> GET {BASE_URL}/status' in caplog.text
        assert f'<- GET {BASE_URL}/status 200' in caplog.text

    def test_error_handlers_dispatch_by_type(self, api):
        """Test that a failure reaches the handler registered for its type."""
        handled = []

        def not_found(error):
            handled.append(error.status)
            return 'fallback'

        api.api_config.add_error_handler(api.ApiErrorType.NOT_FOUND_ERROR, not_found)
        recorder = Recorder(httpx.Response(404))
        with pytest.raises(api.ApiError) as exc_info:
            api.services.users.users_by_id(params={'id': 1}, config={'client': recorder.client()})

        assert api.api_config.handle_error(exc_info.value) == 'fallback'
        assert handled == [404]

    def test_unhandled_error_type_is_returned(self, api):
        error = api.ApiError('boom', status=500)
        assert api.api_config.handle_error(error) is error

    def test_service_index(self, api):
        assert api.get_available_services() == ['users', 'admin', 'default']
        assert api.API_SERVICES['admin'] is api.services.admin
        assert api.admin_service.create_users is api.services.admin.create_users
