"""Render named resource groups into the artifacts of a client package.

The emitter makes no naming or grouping decisions of its own: everything it
renders comes from the NamedGroup model and the EmitOptions. Identical input
always renders byte-identical artifacts.
"""

from __future__ import annotations

import ast
import logging

from swaggergen.codegen.ast_utils import (
    ImportCollector,
    _all,
    _argument,
    _assign,
    _call,
    _const,
    _dict,
    _docstring,
    _func,
    _keyword,
    _name,
    _return,
)
from swaggergen.codegen.readme import render_readme
from swaggergen.codegen.runtime import (
    REQUEST_OPTIONS,
    build_api_config_module,
    build_auth_header_module,
    build_client_module,
    build_config_init_module,
    build_errors_module,
)
from swaggergen.codegen.types import (
    EmitOptions,
    GeneratedArtifact,
    NamedGroup,
    NamedOperation,
)
from swaggergen.codegen.utils import render_module
from swaggergen.exceptions import CodeGenerationError

logger = logging.getLogger(__name__)

__all__ = ['ClientEmitter', 'SERVICES_DIR', 'CONFIG_DIR']

SERVICES_DIR = 'services'
CONFIG_DIR = 'config'

# Names defined by the services index next to the group modules
INDEX_NAMES = ('API_SERVICES', 'get_available_services')


def service_alias(group: NamedGroup) -> str:
    return f'{group.name}_service'


class ClientEmitter:
    """Emits the modules of a generated client package.

    The artifact set is:
    - ``services/<group>.py``: one function per operation of the group
    - ``services/__init__.py``: the aggregation index over all groups
    - ``client.py``: the shared request runtime
    - ``config/``: ``ApiConfig``, interceptors and error types
    - ``auth_header.py``: the bearer authorization header helper
    - ``__init__.py``: the package entry point
    - ``README.md``: a summary of groups and operation counts

    Example:
        >>> emitter = ClientEmitter(EmitOptions(base_url='https://api.example.com'))
        >>> artifacts = emitter.emit(groups)
    """

    def __init__(self, options: EmitOptions, package: str = 'api_generate'):
        """Initialize the emitter.

        Args:
            options: Global options baked into the generated configuration.
            package: Import name of the generated package, used in the README.
        """
        self.options = options
        self.package = package

    def emit(self, groups: list[NamedGroup]) -> list[GeneratedArtifact]:
        """Render every artifact of the client package, in write order.

        Raises:
            CodeGenerationError: If a group name or its ``<group>_service``
                alias clashes with another name in the services index.
        """
        self._check_service_names(groups)
        artifacts: list[GeneratedArtifact] = []

        for group in groups:
            artifacts.append(
                self._module(f'{SERVICES_DIR}/{group.module_file}', self._group_module(group))
            )
            logger.debug(
                f'Rendered {SERVICES_DIR}/{group.module_file} '
                f'({len(group.operations)} operations)'
            )

        artifacts += [
            self._module(f'{SERVICES_DIR}/__init__.py', self._services_index(groups)),
            self._module(f'{CONFIG_DIR}/__init__.py', build_config_init_module()),
            self._module(f'{CONFIG_DIR}/api_config.py', build_api_config_module(self.options)),
            self._module(f'{CONFIG_DIR}/errors.py', build_errors_module()),
            self._module('auth_header.py', build_auth_header_module()),
            self._module('client.py', build_client_module(self.options)),
            self._module('__init__.py', self._entry_module(groups)),
            GeneratedArtifact(
                relative_path='README.md',
                content=render_readme(groups, self.options, self.package),
            ),
        ]
        return artifacts

    @staticmethod
    def _check_service_names(groups: list[NamedGroup]) -> None:
        names = {group.name for group in groups}
        for group in groups:
            if group.name in INDEX_NAMES:
                raise CodeGenerationError(
                    f"Group '{group.name}' clashes with a name of the services index; "
                    f'rename its tag'
                )
            alias = service_alias(group)
            if alias in names:
                raise CodeGenerationError(
                    f"Alias '{alias}' of group '{group.name}' clashes with group "
                    f"'{alias}'; rename one of the tags"
                )

    @staticmethod
    def _module(relative_path: str, body: list[ast.stmt]) -> GeneratedArtifact:
        return GeneratedArtifact(
            relative_path=relative_path,
            content=render_module(body, relative_path),
        )

    def _group_module(self, group: NamedGroup) -> list[ast.stmt]:
        imports = ImportCollector()
        imports.add_import('..client', 'request as _request')

        return [
            _docstring(f"Operations of the '{group.name}' resource group."),
            *imports.to_ast(),
            _all(op.function_name for op in group.operations),
            *(self._operation_fn(op) for op in group.operations),
        ]

    def _operation_fn(self, operation: NamedOperation) -> ast.FunctionDef:
        """Build the function for one operation.

        def create_users(*, body=None, params=None, query=None, headers=None, config=None):
            return _request('POST', '/v1/users', body=body, ..., config=config)
        """
        endpoint = operation.endpoint
        return _func(
            operation.function_name,
            [],
            [
                _docstring(self._operation_doc(operation), indent=4),
                _return(
                    _call(
                        _name('_request'),
                        [_const(endpoint.method.value), _const(operation.path_template)],
                        [_keyword(option, _name(option)) for option in REQUEST_OPTIONS],
                    )
                ),
            ],
            kwonlyargs=[_argument(option) for option in REQUEST_OPTIONS],
            kw_defaults=[_const(None) for _ in REQUEST_OPTIONS],
        )

    @staticmethod
    def _operation_doc(operation: NamedOperation) -> str:
        endpoint = operation.endpoint
        spec = endpoint.operation
        summary = (spec.summary or '').strip()
        description = (spec.description or '').strip()

        sections = [summary] if summary else []
        if description and description != summary:
            sections.append(description)

        details = [f'{endpoint.method.value} {endpoint.route}']
        if operation.unique_path_params:
            details.append(f'Path parameters: {", ".join(operation.unique_path_params)}')
        if spec.deprecated:
            details.append('Deprecated.')
        sections.append('\n'.join(details))

        return '\n\n'.join(sections) + '\n'

    def _services_index(self, groups: list[NamedGroup]) -> list[ast.stmt]:
        names = [group.name for group in groups]
        body: list[ast.stmt] = [
            _docstring('Resource group modules of the generated client.'),
        ]
        if names:
            body.append(
                ast.ImportFrom(
                    module=None,
                    names=[ast.alias(name=name, asname=None) for name in names],
                    level=1,
                )
            )

        exported = ['API_SERVICES', 'get_available_services']
        for group in groups:
            exported += [group.name, service_alias(group)]

        body += [
            _all(exported),
            *(_assign(_name(service_alias(group)), _name(group.name)) for group in groups),
            _assign(
                _name('API_SERVICES'),
                _dict((_const(name), _name(name)) for name in names),
            ),
            _func(
                'get_available_services',
                [],
                [
                    _docstring('Return the identifiers of every resource group.'),
                    _return(ast.List(elts=[_const(name) for name in names], ctx=ast.Load())),
                ],
            ),
        ]
        return body

    def _entry_module(self, groups: list[NamedGroup]) -> list[ast.stmt]:
        aliases = [service_alias(group) for group in groups]

        imports = ImportCollector()
        imports.add_imports(
            {
                '.': {'services'},
                '.auth_header': {'auth_header', 'set_token_provider'},
                '.client': {'request'},
                '.config': {
                    'ApiConfig',
                    'ApiError',
                    'ApiErrorType',
                    'ApiTimeoutError',
                    'api_config',
                },
                '.services': {'API_SERVICES', 'get_available_services', *aliases},
            }
        )

        exported = sorted(
            [
                'API_SERVICES',
                'ApiConfig',
                'ApiError',
                'ApiErrorType',
                'ApiTimeoutError',
                'api_config',
                'auth_header',
                'get_available_services',
                'request',
                'services',
                'set_token_provider',
                *aliases,
            ]
        )

        return [
            _docstring(
                f'{self.options.title} {self.options.version} API client.\n\n'
                f'Generated by swaggergen from the API description; do not edit.\n'
            ),
            *imports.to_ast(),
            _all(exported),
        ]
