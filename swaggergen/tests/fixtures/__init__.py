"""Test fixtures for swaggergen tests.

This module provides sample OpenAPI and Swagger documents used across the
test suite.
"""

# Minimal OpenAPI 3.0 document without operations
MINIMAL_OPENAPI_SPEC = {
    'openapi': '3.0.0',
    'info': {'title': 'Minimal API', 'version': '1.0.0'},
    'paths': {},
}

# Simple API with one endpoint
SIMPLE_API_SPEC = {
    'openapi': '3.0.0',
    'info': {
        'title': 'Simple API',
        'version': '1.0.0',
        'description': 'A simple API for testing',
    },
    'servers': [{'url': 'https://api.example.com/v1'}],
    'paths': {
        '/health': {
            'get': {
                'operationId': 'getHealth',
                'summary': 'Health check endpoint',
                'tags': ['system'],
                'responses': {'200': {'description': 'Successful response'}},
            }
        }
    },
}

# Users API exercising derived names, path parameters and tag fan-out
USERS_SPEC = {
    'openapi': '3.0.1',
    'info': {'title': 'Users API', 'version': '2.1.0'},
    'servers': [{'url': 'https://users.example.com'}],
    'paths': {
        '/api/v1/users': {
            'parameters': [{'name': 'trace', 'in': 'header'}],
            'get': {
                'summary': 'List users',
                'tags': ['Users'],
                'responses': {'200': {'description': 'OK'}},
            },
            'post': {
                'summary': 'Create a user',
                'tags': ['Users', 'Admin'],
                'responses': {'201': {'description': 'Created'}},
            },
        },
        '/api/v1/users/{id}': {
            'get': {
                'summary': 'Get a user',
                'description': 'Returns a single user by identifier.',
                'tags': ['Users'],
                'responses': {'200': {'description': 'OK'}},
            },
            'put': {
                'tags': ['Users'],
                'responses': {'200': {'description': 'OK'}},
            },
            'delete': {
                'tags': ['Users'],
                'deprecated': True,
                'responses': {'204': {'description': 'Deleted'}},
            },
        },
        '/api/v1/users/{id}/posts/{post-id}': {
            'get': {
                'operationId': 'getUserPost',
                'tags': ['Users'],
                'responses': {'200': {'description': 'OK'}},
            },
        },
        '/status': {
            'get': {'responses': {'200': {'description': 'OK'}}},
            'head': {'responses': {'200': {'description': 'OK'}}},
        },
    },
}

# Swagger 2.0 document deriving its server URL from host and basePath
SWAGGER_2_SPEC = {
    'swagger': '2.0',
    'info': {'title': 'Legacy API', 'version': 1.5},
    'host': 'legacy.example.com',
    'basePath': '/rest',
    'schemes': ['https', 'http'],
    'paths': {
        '/orders': {
            'get': {'tags': ['orders'], 'responses': {'200': {'description': 'OK'}}},
        },
        '/orders/{orderId}': {
            'patch': {'tags': ['orders'], 'responses': {'200': {'description': 'OK'}}},
        },
    },
}

# Two routes deriving the same function name in one group
COLLIDING_SPEC = {
    'openapi': '3.0.0',
    'info': {'title': 'Colliding API', 'version': '1.0.0'},
    'paths': {
        '/v1/users': {
            'get': {'tags': ['users'], 'responses': {'200': {'description': 'OK'}}},
        },
        '/v2/users': {
            'get': {'tags': ['users'], 'responses': {'200': {'description': 'OK'}}},
        },
    },
}

# No servers section and no info section
BARE_SPEC = {
    'paths': {
        '/ping': {
            'get': {'responses': {'200': {'description': 'OK'}}},
        },
    },
}
