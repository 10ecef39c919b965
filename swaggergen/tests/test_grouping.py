"""Tests for grouping endpoints by tag."""

import pytest

from swaggergen.codegen.endpoints import extract_endpoints
from swaggergen.codegen.grouping import DEFAULT_GROUP, group_endpoints, normalize_tag

from .fixtures import USERS_SPEC


class TestNormalizeTag:
    """Tests for normalize_tag."""

    @pytest.mark.parametrize(
        'tag,expected',
        [
            ('Users', 'users'),
            ('User Accounts', 'user_accounts'),
            ('user-accounts', 'user_accounts'),
            ('  Pet / Store  ', 'pet_store'),
            ('Café', 'cafe'),
            ('2fa', '_2fa'),
            ('class', 'class_'),
            ('', DEFAULT_GROUP),
            ('!!!', DEFAULT_GROUP),
        ],
    )
    def test_normalization(self, tag, expected):
        assert normalize_tag(tag) == expected

    @pytest.mark.parametrize('tag', ['Users', '123', 'import', 'a--b', 'ñandú', '   '])
    def test_result_is_identifier(self, tag):
        assert normalize_tag(tag).isidentifier()


class TestGroupEndpoints:
    """Tests for group_endpoints."""

    def test_groups_in_first_seen_order(self):
        groups = group_endpoints(extract_endpoints(USERS_SPEC['paths']))
        assert [group.name for group in groups] == ['users', 'admin', DEFAULT_GROUP]

    def test_fan_out_to_every_tag(self):
        """Test that a doubly tagged operation lands in both groups."""
        groups = {g.name: g for g in group_endpoints(extract_endpoints(USERS_SPEC['paths']))}

        assert [e.label for e in groups['admin'].endpoints] == ['POST /api/v1/users']
        assert 'POST /api/v1/users' in [e.label for e in groups['users'].endpoints]
        assert sum(len(g.endpoints) for g in groups.values()) == 8

    def test_untagged_goes_to_default(self):
        groups = {g.name: g for g in group_endpoints(extract_endpoints(USERS_SPEC['paths']))}
        assert [e.label for e in groups[DEFAULT_GROUP].endpoints] == ['GET /status']

    def test_endpoint_order_within_group(self):
        groups = group_endpoints(extract_endpoints(USERS_SPEC['paths']))
        assert [e.label for e in groups[0].endpoints] == [
            'GET /api/v1/users',
            'POST /api/v1/users',
            'GET /api/v1/users/{id}',
            'PUT /api/v1/users/{id}',
            'DELETE /api/v1/users/{id}',
            'GET /api/v1/users/{id}/posts/{post-id}',
        ]

    def test_tags_normalizing_to_same_group_add_once(self):
        endpoints = extract_endpoints({'/pets': {'get': {'tags': ['Pets', 'pets', 'PETS ']}}})
        groups = group_endpoints(endpoints)

        assert len(groups) == 1
        assert len(groups[0].endpoints) == 1

    def test_no_endpoints(self):
        assert group_endpoints([]) == []
