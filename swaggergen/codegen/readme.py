"""Markdown documentation artifact for a generated client."""

from swaggergen.codegen.runtime import BASE_URL_ENV, TOKEN_ENV
from swaggergen.codegen.types import EmitOptions, NamedGroup

__all__ = ['render_readme']


def _tree(package: str, groups: list[NamedGroup]) -> list[str]:
    lines = [
        f'{package}/',
        '├── __init__.py            # Entry point',
        '├── README.md              # This file',
        '├── auth_header.py         # Bearer token header helper',
        '├── client.py              # Request runtime',
        '├── config/',
        '│   ├── __init__.py        # Config exports',
        '│   ├── api_config.py      # ApiConfig and interceptors',
        '│   └── errors.py          # ApiError types',
        '└── services/',
        '    ├── __init__.py        # Service exports',
    ]
    for index, group in enumerate(groups):
        branch = '└──' if index == len(groups) - 1 else '├──'
        lines.append(f'    {branch} {group.module_file}')
    return lines


def render_readme(
    groups: list[NamedGroup], options: EmitOptions, package: str = 'api_generate'
) -> str:
    """Render the README summarizing groups and operation counts.

    The output depends only on its arguments; it carries no timestamp.
    """
    total = sum(len(group.operations) for group in groups)
    first = groups[0] if groups else None

    lines = [
        '# Generated API client',
        '',
        f'Generated from **{options.title}** v{options.version}.',
        '',
        '## Structure',
        '',
        '```',
        *_tree(package, groups),
        '```',
        '',
        '## Services',
        '',
        '| Service | Operations |',
        '| --- | --- |',
    ]
    for group in groups:
        names = ', '.join(f'`{op.function_name}`' for op in group.operations)
        lines.append(f'| `{group.name}` ({len(group.operations)}) | {names} |')

    lines += [
        '',
        '## Usage',
        '',
        '```python',
    ]
    if first is not None and first.operations:
        operation = first.operations[0]
        call_args = ''
        if operation.unique_path_params:
            params = ', '.join(f"'{name}': ..." for name in operation.unique_path_params)
            call_args = f'params={{{params}}}'
        lines += [
            f'from {package} import services',
            '',
            f'result = services.{first.name}.{operation.function_name}({call_args})',
        ]
    lines += [
        '```',
        '',
        'Every operation accepts the same keyword options: `body`, `params`,',
        '`query`, `headers` and `config`. Failed calls raise `ApiError` carrying',
        'the HTTP `status` and decoded `body`; calls that exceed the timeout raise',
        '`ApiTimeoutError`.',
        '',
        '## Configuration',
        '',
        '```python',
        f'from {package}.config import api_config',
        f'from {package}.auth_header import set_token_provider',
        '',
        "api_config.base_url = 'https://api.example.com'",
        'set_token_provider(lambda: load_token())',
        '',
        '@api_config.add_request_interceptor',
        'def tag_request(request):',
        "    request['headers']['X-Client'] = 'generated'",
        '    return request',
        '```',
        '',
        f'The base URL defaults to `{options.base_url}` and can be overridden with',
        f'the `{BASE_URL_ENV}` environment variable; the bearer token is read from',
        f'`{TOKEN_ENV}` unless another token provider is set.',
        '',
        '## Statistics',
        '',
        f'- **Total services**: {len(groups)}',
        f'- **Total endpoints**: {total}',
        f'- **Timeout**: {options.timeout_ms} ms',
        f'- **Retries**: {options.retries}',
        '',
    ]
    return '\n'.join(lines)
