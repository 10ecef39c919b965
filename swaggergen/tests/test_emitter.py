"""Tests for rendering named groups into client artifacts."""

import ast

import pytest

from swaggergen.codegen.emitter import ClientEmitter
from swaggergen.codegen.endpoints import extract_endpoints
from swaggergen.codegen.grouping import group_endpoints
from swaggergen.codegen.naming import name_groups
from swaggergen.codegen.types import EmitOptions
from swaggergen.exceptions import CodeGenerationError

from .fixtures import USERS_SPEC

OPTIONS = EmitOptions(
    base_url='https://users.example.com',
    timeout_ms=5000,
    retries=2,
    title='Users API',
    version='2.1.0',
)


def _groups(spec=USERS_SPEC):
    return name_groups(group_endpoints(extract_endpoints(spec['paths'])))


@pytest.fixture
def artifacts():
    return {a.relative_path: a.content for a in ClientEmitter(OPTIONS).emit(_groups())}


class TestArtifactSet:
    """Tests for the set and order of emitted artifacts."""

    def test_emission_order(self):
        paths = [a.relative_path for a in ClientEmitter(OPTIONS).emit(_groups())]
        assert paths == [
            'services/users.py',
            'services/admin.py',
            'services/default.py',
            'services/__init__.py',
            'config/__init__.py',
            'config/api_config.py',
            'config/errors.py',
            'auth_header.py',
            'client.py',
            '__init__.py',
            'README.md',
        ]

    def test_every_module_compiles(self, artifacts):
        for path, content in artifacts.items():
            if path.endswith('.py'):
                compile(content, path, 'exec')

    def test_output_is_deterministic(self):
        """Test that identical input renders byte-identical artifacts."""
        first = ClientEmitter(OPTIONS).emit(_groups())
        second = ClientEmitter(OPTIONS).emit(_groups())
        assert first == second

    def test_no_groups(self):
        """Test that an empty document still renders a valid package."""
        artifacts = {a.relative_path: a.content for a in ClientEmitter(OPTIONS).emit([])}

        assert 'API_SERVICES = {}' in artifacts['services/__init__.py']
        for path, content in artifacts.items():
            if path.endswith('.py'):
                compile(content, path, 'exec')


class TestGroupModule:
    """Tests for the per-group service modules."""

    def test_functions_in_operation_order(self, artifacts):
        module = ast.parse(artifacts['services/users.py'])
        functions = [n.name for n in module.body if isinstance(n, ast.FunctionDef)]

        assert functions == [
            'users',
            'create_users',
            'users_by_id',
            'update_users_by_id',
            'delete_users_by_id',
            'get_user_post',
        ]

    def test_uniform_keyword_only_signature(self, artifacts):
        content = artifacts['services/users.py']
        assert (
            'def users_by_id(*, body=None, params=None, query=None, headers=None, config=None):'
            in content
        )

    def test_delegates_to_runtime(self, artifacts):
        content = artifacts['services/users.py']
        assert 'from ..client import request as _request' in content
        assert (
            "return _request('GET', '/api/v1/users/{id}/posts/{post_id}', body=body, "
            'params=params, query=query, headers=headers, config=config)'
        ) in content

    def test_all_lists_functions(self, artifacts):
        module = ast.parse(artifacts['services/admin.py'])
        assigns = [n for n in module.body if isinstance(n, ast.Assign)]
        assert ast.literal_eval(assigns[0].value) == ('create_users',)

    def test_docstrings(self, artifacts):
        module = ast.parse(artifacts['services/users.py'])
        docs = {
            n.name: ast.get_docstring(n)
            for n in module.body
            if isinstance(n, ast.FunctionDef)
        }

        assert docs['users_by_id'] == (
            'Get a user\n\n'
            'Returns a single user by identifier.\n\n'
            'GET /api/v1/users/{id}\n'
            'Path parameters: id'
        )
        assert docs['delete_users_by_id'].startswith('DELETE /api/v1/users/{id}')
        assert docs['delete_users_by_id'].endswith('Deprecated.')
        assert 'Path parameters: id, post_id' in docs['get_user_post']


class TestIndexModules:
    """Tests for the services index and the entry module."""

    def test_services_index(self, artifacts):
        content = artifacts['services/__init__.py']

        assert 'from . import users, admin, default' in content
        assert 'users_service = users' in content
        assert "API_SERVICES = {'users': users, 'admin': admin, 'default': default}" in content
        assert "return ['users', 'admin', 'default']" in content

    def test_alias_clashing_with_group_raises(self):
        """Test that group 'x' cannot alias over the module of group 'x_service'."""
        groups = _groups(
            {
                'paths': {
                    '/a': {'get': {'tags': ['x']}},
                    '/b': {'get': {'tags': ['x service']}},
                }
            }
        )
        assert [g.name for g in groups] == ['x', 'x_service']

        with pytest.raises(CodeGenerationError, match="'x_service'"):
            ClientEmitter(OPTIONS).emit(groups)

    def test_group_named_like_index_function_raises(self):
        groups = _groups({'paths': {'/a': {'get': {'tags': ['Get Available Services']}}}})

        with pytest.raises(CodeGenerationError, match='get_available_services'):
            ClientEmitter(OPTIONS).emit(groups)

    def test_entry_module_exports(self, artifacts):
        module = ast.parse(artifacts['__init__.py'])
        exported = ast.literal_eval(
            next(n for n in module.body if isinstance(n, ast.Assign)).value
        )

        for name in ['api_config', 'ApiError', 'auth_header', 'request', 'users_service']:
            assert name in exported
        assert 'Users API 2.1.0' in ast.get_docstring(module)


class TestRuntimeModules:
    """Tests for the configuration and runtime modules."""

    def test_options_are_baked_into_config(self, artifacts):
        content = artifacts['config/api_config.py']

        assert "os.environ.get('API_BASE_URL', 'https://users.example.com')" in content
        assert 'timeout_ms=5000' in content
        assert 'retries=2' in content
        assert 'enable_logging=False' in content

    def test_client_body_methods(self, artifacts):
        assert "BODY_METHODS = frozenset(('PATCH', 'POST', 'PUT'))" in artifacts['client.py']

    def test_client_reads_body_against_a_deadline(self, artifacts):
        content = artifacts['client.py']
        assert 'with client.stream(**outgoing) as response:' in content
        assert 'deadline = time.monotonic() + timeout_ms / 1000' in content

    def test_config_has_error_handler_registry(self, artifacts):
        content = artifacts['config/api_config.py']
        assert 'def add_error_handler(self, error_type, handler):' in content
        assert 'def handle_error(self, error):' in content

    def test_error_types(self, artifacts):
        content = artifacts['config/errors.py']
        for name in ['NETWORK_ERROR', 'TIMEOUT_ERROR', 'NOT_FOUND_ERROR', 'SERVER_ERROR']:
            assert f"{name} = '{name}'" in content


class TestReadme:
    """Tests for the README artifact."""

    def test_readme_summary(self, artifacts):
        readme = artifacts['README.md']

        assert 'Generated from **Users API** v2.1.0.' in readme
        assert '| `users` (6) |' in readme
        assert '| `admin` (1) | `create_users` |' in readme
        assert '- **Total services**: 3' in readme
        assert '- **Total endpoints**: 8' in readme
        assert 'services.users.users()' in readme
