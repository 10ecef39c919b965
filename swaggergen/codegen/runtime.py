"""Builders for the support modules shared by every generated group module.

Each ``build_*`` function returns the statement list of one generated module:

- ``client.py``: the request runtime implementing the call contract
- ``config/api_config.py``: ``ApiConfig`` and the interceptor chain
- ``config/errors.py``: ``ApiError`` and its classification
- ``config/__init__.py``: configuration re-exports
- ``auth_header.py``: the bearer authorization header helper

The generated code only depends on httpx and the standard library.
"""

import ast

from swaggergen.codegen.ast_utils import (
    ImportCollector,
    _all,
    _argument,
    _assign,
    _attr,
    _call,
    _class,
    _const,
    _dict,
    _docstring,
    _expr,
    _fstring,
    _func,
    _if,
    _keyword,
    _name,
    _return,
    _subscript,
    _tuple,
)
from swaggergen.codegen.types import EmitOptions, HttpMethod

__all__ = [
    'BASE_URL_ENV',
    'TOKEN_ENV',
    'DEFAULT_HEADERS',
    'ERROR_TYPES',
    'build_api_config_module',
    'build_auth_header_module',
    'build_client_module',
    'build_config_init_module',
    'build_errors_module',
]

BASE_URL_ENV = 'API_BASE_URL'
TOKEN_ENV = 'API_TOKEN'

DEFAULT_HEADERS = {'Accept': 'application/json, text/plain, */*'}

ERROR_TYPES = (
    'NETWORK_ERROR',
    'TIMEOUT_ERROR',
    'VALIDATION_ERROR',
    'AUTHENTICATION_ERROR',
    'AUTHORIZATION_ERROR',
    'NOT_FOUND_ERROR',
    'SERVER_ERROR',
    'UNKNOWN_ERROR',
)

STATUS_ERROR_TYPES = {
    400: 'VALIDATION_ERROR',
    401: 'AUTHENTICATION_ERROR',
    403: 'AUTHORIZATION_ERROR',
    404: 'NOT_FOUND_ERROR',
    408: 'TIMEOUT_ERROR',
}

# Media types decoded as text besides text/*
TEXT_MEDIA_TYPES = (
    'application/javascript',
    'application/xml',
    'application/x-www-form-urlencoded',
)

REQUEST_OPTIONS = ('body', 'params', 'query', 'headers', 'config')


def _compare(left: ast.expr, op: ast.cmpop, right: ast.expr) -> ast.Compare:
    return ast.Compare(left=left, ops=[op], comparators=[right])


def _is_none(value: ast.expr) -> ast.Compare:
    return _compare(value, ast.Is(), _const(None))


def _or(*values: ast.expr) -> ast.BoolOp:
    return ast.BoolOp(op=ast.Or(), values=list(values))


def _and(*values: ast.expr) -> ast.BoolOp:
    return ast.BoolOp(op=ast.And(), values=list(values))


def _not(value: ast.expr) -> ast.UnaryOp:
    return ast.UnaryOp(op=ast.Not(), operand=value)


def _get(mapping: str, key: str, default: ast.expr) -> ast.Call:
    return _call(_attr(mapping, 'get'), [_const(key), default])


def _isinstance(value: ast.expr, *types: str) -> ast.Call:
    type_expr = _name(types[0]) if len(types) == 1 else _tuple([_name(t) for t in types])
    return _call(_name('isinstance'), [value, type_expr])


def _kwonly_none(names: tuple[str, ...]) -> tuple[list[ast.arg], list[ast.expr]]:
    return [_argument(name) for name in names], [_const(None) for _ in names]


# =============================================================================
# config/errors.py
# =============================================================================


def build_errors_module() -> list[ast.stmt]:
    """Build ``config/errors.py``."""
    error_type_enum = _class(
        'ApiErrorType',
        [_name('str'), _name('Enum')],
        [_docstring('Category of a failed API call.')]
        + [_assign(_name(name), _const(name)) for name in ERROR_TYPES],
    )

    status_map = _assign(
        _name('STATUS_ERROR_TYPES'),
        _dict(
            (_const(status), _attr('ApiErrorType', error_type))
            for status, error_type in STATUS_ERROR_TYPES.items()
        ),
    )

    # def error_type_for_status(status):
    classify = _func(
        'error_type_for_status',
        [_argument('status')],
        [
            _docstring('Classify an HTTP status; no status means the request never got an answer.'),
            _if(
                _is_none(_name('status')),
                [_return(_attr('ApiErrorType', 'NETWORK_ERROR'))],
            ),
            _if(
                _compare(_name('status'), ast.GtE(), _const(500)),
                [_return(_attr('ApiErrorType', 'SERVER_ERROR'))],
            ),
            _return(
                _call(
                    _attr('STATUS_ERROR_TYPES', 'get'),
                    [_name('status'), _attr('ApiErrorType', 'UNKNOWN_ERROR')],
                )
            ),
        ],
    )

    api_error = _class(
        'ApiError',
        [_name('Exception')],
        [
            _docstring(
                'Raised for every failed API call.\n\n'
                'Attributes:\n'
                '    status: HTTP status code, or None when no response was received.\n'
                '    body: Decoded response body, if any.\n'
                '    error_type: The ApiErrorType of the failure.\n',
                indent=4,
            ),
            _func(
                '__init__',
                [
                    _argument('self'),
                    _argument('message'),
                    _argument('status'),
                    _argument('body'),
                    _argument('error_type'),
                ],
                [
                    _expr(
                        _call(
                            _attr(_call(_name('super')), '__init__'), [_name('message')]
                        )
                    ),
                    _assign(_attr('self', 'message'), _name('message')),
                    _assign(_attr('self', 'status'), _name('status')),
                    _assign(_attr('self', 'body'), _name('body')),
                    _assign(
                        _attr('self', 'error_type'),
                        _or(
                            _name('error_type'),
                            _call(_name('error_type_for_status'), [_name('status')]),
                        ),
                    ),
                ],
                defaults=[_const(None), _const(None), _const(None)],
            ),
        ],
    )

    timeout_error = _class(
        'ApiTimeoutError',
        [_name('ApiError')],
        [
            _docstring('Raised when a call exceeds its deadline and is cancelled.'),
            _func(
                '__init__',
                [_argument('self'), _argument('message')],
                [
                    _expr(
                        _call(
                            _attr(_call(_name('super')), '__init__'),
                            [_name('message')],
                            [
                                _keyword(
                                    'error_type', _attr('ApiErrorType', 'TIMEOUT_ERROR')
                                )
                            ],
                        )
                    )
                ],
            ),
        ],
    )

    imports = ImportCollector()
    imports.add_import('enum', 'Enum')

    return [
        _docstring('Error types raised by the generated API client.'),
        *imports.to_ast(),
        _all(['ApiError', 'ApiErrorType', 'ApiTimeoutError', 'error_type_for_status']),
        error_type_enum,
        status_map,
        classify,
        api_error,
        timeout_error,
    ]


# =============================================================================
# config/api_config.py
# =============================================================================


def _add_interceptor_method(kind: str) -> ast.FunctionDef:
    # def add_<kind>_interceptor(self, interceptor):
    #     self.<kind>_interceptors.append(interceptor)
    #     return interceptor
    return _func(
        f'add_{kind}_interceptor',
        [_argument('self'), _argument('interceptor')],
        [
            _docstring(f'Register an interceptor at the end of the {kind} chain.'),
            _expr(
                _call(
                    _attr(_attr('self', f'{kind}_interceptors'), 'append'),
                    [_name('interceptor')],
                )
            ),
            _return(_name('interceptor')),
        ],
    )


def _apply_interceptors_method(kind: str) -> ast.FunctionDef:
    # def apply_<kind>_interceptors(self, value):
    #     return reduce(_apply_interceptor, self.<kind>_interceptors, value)
    return _func(
        f'apply_{kind}_interceptors',
        [_argument('self'), _argument(kind)],
        [
            _return(
                _call(
                    _name('reduce'),
                    [
                        _name('_apply_interceptor'),
                        _attr('self', f'{kind}_interceptors'),
                        _name(kind),
                    ],
                )
            )
        ],
    )


def _error_handler_methods() -> list[ast.FunctionDef]:
    # def add_error_handler(self, error_type, handler):
    #     self.error_handlers[error_type] = handler
    #     return handler
    add_handler = _func(
        'add_error_handler',
        [_argument('self'), _argument('error_type'), _argument('handler')],
        [
            _docstring('Register the handler that handle_error calls for one ApiErrorType.'),
            _assign(
                _subscript(_attr('self', 'error_handlers'), _name('error_type')),
                _name('handler'),
            ),
            _return(_name('handler')),
        ],
    )

    # def handle_error(self, error):
    #     handler = self.error_handlers.get(error.error_type)
    #     if handler is None:
    #         return error
    #     return handler(error)
    handle = _func(
        'handle_error',
        [_argument('self'), _argument('error')],
        [
            _docstring(
                "Dispatch an ApiError to the handler registered for its type.\n\n"
                "Returns the handler's result, or the error itself when no handler\n"
                'is registered for its type.\n',
                indent=4,
            ),
            _assign(
                _name('handler'),
                _call(
                    _attr(_attr('self', 'error_handlers'), 'get'),
                    [_attr('error', 'error_type')],
                ),
            ),
            _if(_is_none(_name('handler')), [_return(_name('error'))]),
            _return(_call(_name('handler'), [_name('error')])),
        ],
    )
    return [add_handler, handle]


def build_api_config_module(options: EmitOptions) -> list[ast.stmt]:
    """Build ``config/api_config.py`` with the options baked in as defaults."""
    apply_interceptor = _func(
        '_apply_interceptor',
        [_argument('value'), _argument('interceptor')],
        [
            _assign(_name('result'), _call(_name('interceptor'), [_name('value')])),
            _return(
                ast.IfExp(
                    test=_is_none(_name('result')),
                    body=_name('value'),
                    orelse=_name('result'),
                )
            ),
        ],
    )

    env_token = _func(
        'env_token',
        [],
        [
            _docstring(f'Default token provider: the {TOKEN_ENV} environment variable.'),
            _return(
                _call(_attr(_attr('os', 'environ'), 'get'), [_const(TOKEN_ENV)])
            ),
        ],
    )

    init_args = [
        'base_url',
        'timeout_ms',
        'retries',
        'enable_logging',
        'default_headers',
    ]
    init = _func(
        '__init__',
        [_argument('self')] + [_argument(name) for name in init_args],
        [
            *[_assign(_attr('self', name), _name(name)) for name in init_args[:-1]],
            # self.default_headers = dict(default_headers or {})
            _assign(
                _attr('self', 'default_headers'),
                _call(_name('dict'), [_or(_name('default_headers'), _dict([]))]),
            ),
            _assign(_attr('self', 'client'), _const(None)),
            _assign(_attr('self', 'token_provider'), _name('env_token')),
            _assign(_attr('self', 'request_interceptors'), ast.List(elts=[], ctx=ast.Load())),
            _assign(_attr('self', 'response_interceptors'), ast.List(elts=[], ctx=ast.Load())),
            _assign(_attr('self', 'error_handlers'), _dict([])),
        ],
        defaults=[_const(30000), _const(3), _const(False), _const(None)],
    )

    api_config_class = _class(
        'ApiConfig',
        [],
        [
            _docstring(
                'Settings shared by every generated operation.\n\n'
                'Interceptors run in registration order. Each one receives the\n'
                'current value and returns a replacement, or None to pass the\n'
                'value through unchanged. Request interceptors receive the keyword\n'
                'arguments of httpx.Client.request; response interceptors receive\n'
                'the httpx.Response.\n\n'
                'Set ``client`` to an httpx.Client to reuse one connection pool,\n'
                'and ``token_provider`` to a callable returning the bearer token.\n'
                'Handlers registered with ``add_error_handler`` are looked up by\n'
                'ApiErrorType when a caller passes a failure to ``handle_error``.\n',
                indent=4,
            ),
            init,
            _add_interceptor_method('request'),
            _add_interceptor_method('response'),
            _apply_interceptors_method('request'),
            _apply_interceptors_method('response'),
            *_error_handler_methods(),
        ],
    )

    instance = _assign(
        _name('api_config'),
        _call(
            _name('ApiConfig'),
            keywords=[
                _keyword(
                    'base_url',
                    _call(
                        _attr(_attr('os', 'environ'), 'get'),
                        [_const(BASE_URL_ENV), _const(options.base_url)],
                    ),
                ),
                _keyword('timeout_ms', _const(options.timeout_ms)),
                _keyword('retries', _const(options.retries)),
                _keyword('enable_logging', _const(options.enable_logging)),
                _keyword(
                    'default_headers',
                    _dict((_const(k), _const(v)) for k, v in DEFAULT_HEADERS.items()),
                ),
            ],
        ),
    )

    imports = ImportCollector()
    imports.add_module('os')
    imports.add_import('functools', 'reduce')

    return [
        _docstring(f'Runtime configuration for the {options.title} client.'),
        *imports.to_ast(),
        _all(['ApiConfig', 'api_config', 'env_token']),
        apply_interceptor,
        env_token,
        api_config_class,
        instance,
    ]


def build_config_init_module() -> list[ast.stmt]:
    """Build ``config/__init__.py``."""
    imports = ImportCollector()
    imports.add_imports(
        {
            '.api_config': {'ApiConfig', 'api_config'},
            '.errors': {'ApiError', 'ApiErrorType', 'ApiTimeoutError', 'error_type_for_status'},
        }
    )
    return [
        _docstring('Configuration and error types of the generated client.'),
        *imports.to_ast(),
        _all(
            [
                'ApiConfig',
                'ApiError',
                'ApiErrorType',
                'ApiTimeoutError',
                'api_config',
                'error_type_for_status',
            ]
        ),
    ]


# =============================================================================
# auth_header.py
# =============================================================================


def build_auth_header_module() -> list[ast.stmt]:
    """Build ``auth_header.py``."""
    # def auth_header(config=api_config):
    auth_header = _func(
        'auth_header',
        [_argument('config')],
        [
            _docstring(
                'Return the Authorization header for the current token.\n\n'
                'The token comes from ``config.token_provider``; without a token\n'
                'the result is empty and no Authorization header is sent.\n',
                indent=4,
            ),
            _assign(_name('provider'), _attr('config', 'token_provider')),
            _assign(
                _name('token'),
                ast.IfExp(
                    test=_compare(_name('provider'), ast.IsNot(), _const(None)),
                    body=_call(_name('provider')),
                    orelse=_const(None),
                ),
            ),
            _if(
                _name('token'),
                [
                    _return(
                        _dict([(_const('Authorization'), _fstring('Bearer ', _name('token')))])
                    )
                ],
            ),
            _return(_dict([])),
        ],
        defaults=[_name('api_config')],
    )

    set_provider = _func(
        'set_token_provider',
        [_argument('provider'), _argument('config')],
        [
            _docstring('Use ``provider`` to look up the bearer token for every request.'),
            _assign(_attr('config', 'token_provider'), _name('provider')),
        ],
        defaults=[_name('api_config')],
    )

    imports = ImportCollector()
    imports.add_import('.config.api_config', 'api_config')

    return [
        _docstring('Authorization header helper for the generated client.'),
        *imports.to_ast(),
        _all(['auth_header', 'set_token_provider']),
        auth_header,
        set_provider,
    ]


# =============================================================================
# client.py
# =============================================================================


def _build_path_fn() -> ast.FunctionDef:
    # def substitute(match):
    #     name = match.group(1)
    #     if name not in params:
    #         raise ValueError(f'Missing path parameter {name!r} for {template}')
    #     return quote(str(params[name]), safe='')
    substitute = _func(
        'substitute',
        [_argument('match')],
        [
            _assign(_name('name'), _call(_attr('match', 'group'), [_const(1)])),
            _if(
                _compare(_name('name'), ast.NotIn(), _name('params')),
                [
                    ast.Raise(
                        exc=_call(
                            _name('ValueError'),
                            [
                                _fstring(
                                    'Missing path parameter ',
                                    (_name('name'), 'r'),
                                    ' for ',
                                    _name('template'),
                                )
                            ],
                        ),
                        cause=None,
                    )
                ],
            ),
            _return(
                _call(
                    _name('quote'),
                    [_call(_name('str'), [_subscript('params', _name('name'))])],
                    [_keyword('safe', _const(''))],
                )
            ),
        ],
    )

    return _func(
        'build_path',
        [_argument('template'), _argument('params')],
        [
            _docstring(
                'Substitute every placeholder in the template with its URL-encoded value.'
            ),
            substitute,
            _return(
                _call(
                    _attr('PLACEHOLDER_PATTERN', 'sub'),
                    [_name('substitute'), _name('template')],
                )
            ),
        ],
    )


def _build_query_fn() -> ast.FunctionDef:
    # for key, value in query.items():
    #     values = value if isinstance(value, (list, tuple)) else [value]
    #     for item in values:
    #         if item is None or item == '':
    #             continue
    #         items.append((key, item))
    inner_loop = ast.For(
        target=_name('item'),
        iter=_name('values'),
        body=[
            _if(
                _or(
                    _is_none(_name('item')),
                    _compare(_name('item'), ast.Eq(), _const('')),
                ),
                [ast.Continue()],
            ),
            _expr(
                _call(
                    _attr('items', 'append'),
                    [_tuple([_name('key'), _name('item')])],
                )
            ),
        ],
        orelse=[],
    )

    outer_loop = ast.For(
        target=_tuple([_name('key'), _name('value')]),
        iter=_call(_attr('query', 'items')),
        body=[
            _assign(
                _name('values'),
                ast.IfExp(
                    test=_isinstance(_name('value'), 'list', 'tuple'),
                    body=_name('value'),
                    orelse=ast.List(elts=[_name('value')], ctx=ast.Load()),
                ),
            ),
            inner_loop,
        ],
        orelse=[],
    )

    return _func(
        'build_query',
        [_argument('query')],
        [
            _docstring(
                'Flatten query options into (key, value) pairs.\n\n'
                'List values repeat the key; None and empty-string values are omitted.\n',
                indent=4,
            ),
            _assign(_name('items'), ast.List(elts=[], ctx=ast.Load())),
            outer_loop,
            _return(_name('items')),
        ],
    )


def _build_body_kind_fn() -> ast.FunctionDef:
    media_type = _call(
        _attr(
            _call(
                _attr(
                    _subscript(
                        _call(
                            _attr('content_type', 'split'), [_const(';'), _const(1)]
                        ),
                        _const(0),
                    ),
                    'strip',
                )
            ),
            'lower',
        )
    )

    is_json = _or(
        _compare(_name('media_type'), ast.Eq(), _const('application/json')),
        _compare(_name('media_type'), ast.Eq(), _const('text/json')),
        _call(_attr('media_type', 'endswith'), [_const('+json')]),
    )
    is_text = _or(
        _call(_attr('media_type', 'startswith'), [_const('text/')]),
        _compare(_name('media_type'), ast.In(), _name('TEXT_MEDIA_TYPES')),
        _call(_attr('media_type', 'endswith'), [_const('+xml')]),
    )

    return _func(
        'body_kind',
        [_argument('content_type')],
        [
            _docstring('Map a Content-Type header to the BodyKind used to decode it.'),
            _assign(_name('media_type'), media_type),
            _if(is_json, [_return(_attr('BodyKind', 'JSON'))]),
            _if(is_text, [_return(_attr('BodyKind', 'TEXT'))]),
            _return(_attr('BodyKind', 'BINARY')),
        ],
    )


def _build_decode_body_fn() -> ast.FunctionDef:
    decode_json = ast.Try(
        body=[_return(_call(_attr('response', 'json')))],
        handlers=[
            ast.ExceptHandler(
                type=_name('ValueError'),
                name=None,
                body=[_return(_attr('response', 'text'))],
            )
        ],
        orelse=[],
        finalbody=[],
    )

    return _func(
        'decode_body',
        [_argument('response')],
        [
            _docstring(
                'Decode a response body by its declared content type.\n\n'
                'JSON becomes Python objects, text becomes str, anything else is\n'
                'returned as bytes. An empty body decodes to None.\n',
                indent=4,
            ),
            _if(_not(_attr('response', 'content')), [_return(_const(None))]),
            _assign(
                _name('kind'),
                _call(
                    _name('body_kind'),
                    [
                        _call(
                            _attr(_attr('response', 'headers'), 'get'),
                            [_const('content-type'), _const('')],
                        )
                    ],
                ),
            ),
            _if(
                _compare(_name('kind'), ast.Is(), _attr('BodyKind', 'JSON')),
                [decode_json],
            ),
            _if(
                _compare(_name('kind'), ast.Is(), _attr('BodyKind', 'TEXT')),
                [_return(_attr('response', 'text'))],
            ),
            _return(_attr('response', 'content')),
        ],
    )


def _deadline_check() -> ast.If:
    # if time.monotonic() > deadline:
    #     raise ApiTimeoutError(f"Deadline exceeded: {outgoing['method']} {outgoing['url']}")
    return _if(
        _compare(
            _call(_attr('time', 'monotonic')), ast.Gt(), _name('deadline')
        ),
        [
            ast.Raise(
                exc=_call(
                    _name('ApiTimeoutError'),
                    [
                        _fstring(
                            'Deadline exceeded: ',
                            _subscript('outgoing', _const('method')),
                            ' ',
                            _subscript('outgoing', _const('url')),
                        )
                    ],
                ),
                cause=None,
            )
        ],
    )


def _build_read_fn() -> ast.FunctionDef:
    # with client.stream(**outgoing) as response:
    #     <deadline check>
    #     for chunk in response.iter_bytes():
    #         chunks.append(chunk)
    #         <deadline check>
    # headers = response.headers.copy()
    # for name in DECODED_HEADERS:
    #     headers.pop(name, None)
    # return Response(response.status_code, headers=headers, content=b''.join(chunks),
    #                 request=response.request)
    read_loop = ast.For(
        target=_name('chunk'),
        iter=_call(_attr('response', 'iter_bytes')),
        body=[
            _expr(_call(_attr('chunks', 'append'), [_name('chunk')])),
            _deadline_check(),
        ],
        orelse=[],
    )

    stream = ast.With(
        items=[
            ast.withitem(
                context_expr=_call(
                    _attr('client', 'stream'),
                    keywords=[_keyword(None, _name('outgoing'))],
                ),
                optional_vars=ast.Name(id='response', ctx=ast.Store()),
            )
        ],
        body=[_deadline_check(), read_loop],
    )

    strip_headers = ast.For(
        target=_name('name'),
        iter=_name('DECODED_HEADERS'),
        body=[_expr(_call(_attr('headers', 'pop'), [_name('name'), _const(None)]))],
        orelse=[],
    )

    return _func(
        'read_within',
        [_argument('client'), _argument('outgoing'), _argument('deadline')],
        [
            _docstring(
                'Send the request and read its body, giving up once the deadline passes.\n\n'
                'The deadline is checked after the headers and after every body chunk,\n'
                'so a server that keeps trickling bytes cannot hold the call open.\n',
                indent=4,
            ),
            _assign(_name('chunks'), ast.List(elts=[], ctx=ast.Load())),
            stream,
            _assign(_name('headers'), _call(_attr(_attr('response', 'headers'), 'copy'))),
            strip_headers,
            _return(
                _call(
                    _name('Response'),
                    [_attr('response', 'status_code')],
                    [
                        _keyword('headers', _name('headers')),
                        _keyword(
                            'content',
                            _call(_attr(_const(b''), 'join'), [_name('chunks')]),
                        ),
                        _keyword('request', _attr('response', 'request')),
                    ],
                )
            ),
        ],
    )


def _build_send_fn() -> ast.FunctionDef:
    # if client is not None:
    #     return read_within(client, outgoing, deadline)
    # with Client(transport=HTTPTransport(retries=retries)) as owned:
    #     return read_within(owned, outgoing, deadline)
    return _func(
        'send',
        [
            _argument('client'),
            _argument('outgoing'),
            _argument('retries'),
            _argument('deadline'),
        ],
        [
            _if(
                _compare(_name('client'), ast.IsNot(), _const(None)),
                [
                    _return(
                        _call(
                            _name('read_within'),
                            [_name('client'), _name('outgoing'), _name('deadline')],
                        )
                    )
                ],
            ),
            ast.With(
                items=[
                    ast.withitem(
                        context_expr=_call(
                            _name('Client'),
                            keywords=[
                                _keyword(
                                    'transport',
                                    _call(
                                        _name('HTTPTransport'),
                                        keywords=[_keyword('retries', _name('retries'))],
                                    ),
                                )
                            ],
                        ),
                        optional_vars=ast.Name(id='owned', ctx=ast.Store()),
                    )
                ],
                body=[
                    _return(
                        _call(
                            _name('read_within'),
                            [_name('owned'), _name('outgoing'), _name('deadline')],
                        )
                    )
                ],
            ),
        ],
    )


def _build_request_fn() -> ast.FunctionDef:
    kwonlyargs, kw_defaults = _kwonly_none(REQUEST_OPTIONS)

    log_request = _if(
        _attr('api_config', 'enable_logging'),
        [
            _expr(
                _call(
                    _attr('logger', 'info'),
                    [
                        _const('-> %s %s'),
                        _subscript('outgoing', _const('method')),
                        _subscript('outgoing', _const('url')),
                    ],
                )
            )
        ],
    )

    log_response = _if(
        _attr('api_config', 'enable_logging'),
        [
            _expr(
                _call(
                    _attr('logger', 'info'),
                    [
                        _const('<- %s %s %s'),
                        _name('method'),
                        _name('url'),
                        _attr('response', 'status_code'),
                    ],
                )
            )
        ],
    )

    # body is sent as raw content for bytes/str and as JSON otherwise
    attach_body = _if(
        _and(
            _compare(_name('method'), ast.In(), _name('BODY_METHODS')),
            _name('body'),
        ),
        [
            _if(
                _isinstance(_name('body'), 'bytes', 'str'),
                [_assign(_subscript('outgoing', _const('content')), _name('body'))],
                [_assign(_subscript('outgoing', _const('json')), _name('body'))],
            )
        ],
    )

    send_call = _try_send()

    raise_on_failure = _if(
        _not(_attr('response', 'is_success')),
        [
            ast.Raise(
                exc=_call(
                    _name('ApiError'),
                    [
                        _fstring(
                            'HTTP ',
                            _attr('response', 'status_code'),
                            ': ',
                            _name('method'),
                            ' ',
                            _name('url'),
                        )
                    ],
                    [
                        _keyword('status', _attr('response', 'status_code')),
                        _keyword('body', _name('data')),
                    ],
                ),
                cause=None,
            )
        ],
    )

    body = [
        _docstring(
            'Send one API request and return the decoded response body.\n\n'
            'Args:\n'
            '    method: HTTP method.\n'
            '    template: Route template with ``{name}`` placeholders.\n'
            '    body: Payload for POST, PUT and PATCH requests.\n'
            '    params: Values for the route placeholders.\n'
            '    query: Query string values.\n'
            '    headers: Headers merged over the defaults; these win on conflict.\n'
            '    config: Per-call overrides: ``base_url``, ``timeout_ms``, ``client``.\n\n'
            'Raises:\n'
            '    ApiTimeoutError: If the call exceeds its deadline.\n'
            '    ApiError: On a network failure or a non-success status.\n',
            indent=4,
        ),
        _assign(_name('overrides'), _or(_name('config'), _dict([]))),
        _assign(
            _name('base_url'),
            _get('overrides', 'base_url', _attr('api_config', 'base_url')),
        ),
        _assign(
            _name('timeout_ms'),
            _get('overrides', 'timeout_ms', _attr('api_config', 'timeout_ms')),
        ),
        # url = base_url.rstrip('/') + build_path(template, params or {})
        _assign(
            _name('url'),
            ast.BinOp(
                left=_call(_attr('base_url', 'rstrip'), [_const('/')]),
                op=ast.Add(),
                right=_call(
                    _name('build_path'),
                    [_name('template'), _or(_name('params'), _dict([]))],
                ),
            ),
        ),
        # headers defaults < auth header < caller headers
        _assign(
            _name('merged_headers'),
            _dict(
                [
                    (None, _attr('api_config', 'default_headers')),
                    (None, _call(_name('auth_header'), [_name('api_config')])),
                    (None, _or(_name('headers'), _dict([]))),
                ]
            ),
        ),
        _assign(
            _name('outgoing'),
            _dict(
                [
                    (_const('method'), _name('method')),
                    (_const('url'), _name('url')),
                    (_const('headers'), _name('merged_headers')),
                    (
                        _const('params'),
                        _call(_name('build_query'), [_or(_name('query'), _dict([]))]),
                    ),
                    (
                        _const('timeout'),
                        ast.BinOp(left=_name('timeout_ms'), op=ast.Div(), right=_const(1000)),
                    ),
                ]
            ),
        ),
        attach_body,
        _assign(
            _name('outgoing'),
            _call(_attr('api_config', 'apply_request_interceptors'), [_name('outgoing')]),
        ),
        log_request,
        # deadline = time.monotonic() + timeout_ms / 1000
        _assign(
            _name('deadline'),
            ast.BinOp(
                left=_call(_attr('time', 'monotonic')),
                op=ast.Add(),
                right=ast.BinOp(left=_name('timeout_ms'), op=ast.Div(), right=_const(1000)),
            ),
        ),
        send_call,
        _assign(
            _name('response'),
            _call(_attr('api_config', 'apply_response_interceptors'), [_name('response')]),
        ),
        log_response,
        _assign(_name('data'), _call(_name('decode_body'), [_name('response')])),
        raise_on_failure,
        _return(_name('data')),
    ]

    return _func(
        'request',
        [_argument('method'), _argument('template')],
        body,
        kwonlyargs=kwonlyargs,
        kw_defaults=kw_defaults,
    )


def _try_send() -> ast.Try:
    # try:
    #     response = send(overrides.get('client', api_config.client), outgoing,
    #                     api_config.retries, deadline)
    # except TimeoutException as exc:
    #     raise ApiTimeoutError(f'Request timed out after {timeout_ms} ms: {method} {url}') from exc
    # except TransportError as exc:
    #     raise ApiError(f'Network error: {exc}') from exc
    return ast.Try(
        body=[
            _assign(
                _name('response'),
                _call(
                    _name('send'),
                    [
                        _get('overrides', 'client', _attr('api_config', 'client')),
                        _name('outgoing'),
                        _attr('api_config', 'retries'),
                        _name('deadline'),
                    ],
                ),
            )
        ],
        handlers=[
            ast.ExceptHandler(
                type=_name('TimeoutException'),
                name='exc',
                body=[
                    ast.Raise(
                        exc=_call(
                            _name('ApiTimeoutError'),
                            [
                                _fstring(
                                    'Request timed out after ',
                                    _name('timeout_ms'),
                                    ' ms: ',
                                    _name('method'),
                                    ' ',
                                    _name('url'),
                                )
                            ],
                        ),
                        cause=_name('exc'),
                    )
                ],
            ),
            ast.ExceptHandler(
                type=_name('TransportError'),
                name='exc',
                body=[
                    ast.Raise(
                        exc=_call(
                            _name('ApiError'),
                            [_fstring('Network error: ', _name('exc'))],
                        ),
                        cause=_name('exc'),
                    )
                ],
            ),
        ],
        orelse=[],
        finalbody=[],
    )


def build_client_module(options: EmitOptions) -> list[ast.stmt]:
    """Build ``client.py``, the request runtime behind every operation."""
    body_methods = sorted(method.value for method in HttpMethod if method.carries_body)

    body_kind_enum = _class(
        'BodyKind',
        [_name('Enum')],
        [
            _docstring('How a response body is decoded.'),
            _assign(_name('JSON'), _const('json')),
            _assign(_name('TEXT'), _const('text')),
            _assign(_name('BINARY'), _const('binary')),
        ],
    )

    imports = ImportCollector()
    imports.add_module('logging')
    imports.add_module('re')
    imports.add_module('time')
    imports.add_imports(
        {
            'enum': {'Enum'},
            'urllib.parse': {'quote'},
            'httpx': {
                'Client',
                'HTTPTransport',
                'Response',
                'TimeoutException',
                'TransportError',
            },
            '.auth_header': {'auth_header'},
            '.config.api_config': {'api_config'},
            '.config.errors': {'ApiError', 'ApiTimeoutError'},
        }
    )

    return [
        _docstring(
            f'Request runtime shared by every {options.title} operation.\n\n'
            'Every generated function delegates to ``request`` with the same\n'
            'keyword options: body, params, query, headers and config.\n'
        ),
        *imports.to_ast(),
        _all(['BodyKind', 'body_kind', 'build_path', 'build_query', 'decode_body', 'request']),
        _assign(
            _name('logger'),
            _call(_attr('logging', 'getLogger'), [_name('__name__')]),
        ),
        _assign(
            _name('PLACEHOLDER_PATTERN'),
            _call(_attr('re', 'compile'), [_const(r'\{([^{}]+)\}')]),
        ),
        _assign(
            _name('BODY_METHODS'),
            _call(
                _name('frozenset'),
                [_tuple([_const(method) for method in body_methods])],
            ),
        ),
        _assign(
            _name('TEXT_MEDIA_TYPES'),
            _tuple([_const(media_type) for media_type in TEXT_MEDIA_TYPES]),
        ),
        # Headers that describe the wire body, not the decoded one
        _assign(
            _name('DECODED_HEADERS'),
            _tuple([_const('content-encoding'), _const('content-length')]),
        ),
        body_kind_enum,
        _build_path_fn(),
        _build_query_fn(),
        _build_body_kind_fn(),
        _build_decode_body_fn(),
        _build_read_fn(),
        _build_send_fn(),
        _build_request_fn(),
    ]
