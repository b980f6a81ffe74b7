"""Tests for PermissionChecker queries."""

import threading

import pytest

import kontrolle
from kontrolle.errors import ConfigError
from kontrolle.rbac.checker import PermissionChecker, PermissionQuery
from kontrolle.rbac.models import Access, Feature, Role


@pytest.fixture
def checker(sample_config):
    return PermissionChecker.from_config(sample_config)


class TestRoleQueries:
    """Test role lookups."""

    def test_has_role(self, checker):
        """Test a defined role is returned."""
        role = checker.has_role("admin")
        assert isinstance(role, Role)
        assert role.name == "admin"

    def test_has_role_missing(self, checker):
        """Test an undefined role answers False."""
        assert checker.has_role("root") is False

    def test_has_any_role(self, checker):
        """Test any-of role checks."""
        assert checker.has_any_role(["root", "viewer"])
        assert not checker.has_any_role(["root", "guest"])
        assert not checker.has_any_role([])

    def test_has_all_roles(self, checker):
        """Test all-of role checks."""
        assert checker.has_all_roles(["admin", "viewer"])
        assert not checker.has_all_roles(["admin", "root"])

    def test_has_all_roles_counts_index_entries(self, checker):
        """Test repeated names are not double counted."""
        assert not checker.has_all_roles(["admin", "admin"])


class TestPermissionQueries:
    """Test permission checks."""

    def test_can(self, checker):
        """Test a declared action is allowed and others are not."""
        assert checker.can("users", "manage", "create")
        assert not checker.can("users", "manage", "delete")
        assert not checker.can("users", "unknown", "create")

    def test_can_any(self, checker):
        """Test any-of permission queries."""
        assert checker.can_any([
            ["users", "manage", "read"],
            ["users", "licence", "view"],
        ])
        assert not checker.can_any([
            ["users", "manage", "*"],
            ["users", "licence", "update"],
        ])
        assert not checker.can_any([])

    def test_can_any_accepts_named_queries(self, checker):
        """Test PermissionQuery tuples."""
        assert checker.can_any([PermissionQuery("reports", "export", "download")])

    def test_mapping_queries(self, checker):
        """Test queries given as mappings."""
        assert checker.can_all([
            {"group": "users", "resource": "manage", "action": "update"},
            {"group": "reports", "resource": "export", "action": "read"},
        ])

    def test_can_all(self, checker):
        """Test all-of permission queries."""
        assert checker.can_all([
            ("users", "manage", "read"),
            ("users", "licence", "view"),
        ])
        assert not checker.can_all([
            ["users", "manage", "*"],
            ["users", "licence", "view"],
        ])

    def test_can_all_empty(self, checker):
        """Test an empty batch has nothing to fail."""
        assert checker.can_all([])

    def test_can_any_action(self, checker):
        """Test any-of actions on one permission."""
        assert checker.can_any_action("users", "manage", ["delete", "read"])
        assert not checker.can_any_action("users", "manage", ["delete", "assign"])
        assert not checker.can_any_action("users", "missing", ["read"])

    def test_can_all_actions(self, checker):
        """Test all-of actions on one permission."""
        assert checker.can_all_actions("users", "manage", ["create", "read"])
        assert not checker.can_all_actions("users", "manage", ["create", "delete"])
        assert not checker.can_all_actions("users", "missing", ["read"])

    def test_no_permissions_configured(self):
        """Test a roles-only index allows nothing."""
        checker = kontrolle.init({"roles": ["admin"]})
        assert not checker.can("users", "manage", "read")
        assert not checker.can_any_action("users", "manage", ["read"])

    def test_invalid_query_shape(self, checker):
        """Test a bare string is not unpacked into a query."""
        with pytest.raises(TypeError):
            checker.can_any(["abc"])
        with pytest.raises(TypeError):
            checker.can_all(["abc"])

    def test_group_with_delimiter_finds_nothing(self):
        """Test a group holding the delimiter never reaches another key."""
        checker = kontrolle.init({
            "roles": ["admin"],
            "permissions": {"a": {"b:c": "read"}},
            "features": {"a": {"b:c": "read"}},
            "role_features": {"admin": {"a": ["b:c"]}},
        })
        assert checker.can_any_action("a", "b:c", ["read"])
        assert not checker.can_any_action("a:b", "c", ["read"])
        assert not checker.can_all_actions("a:b", "c", ["read"])
        assert checker.has_feature("a:b", "c") is False
        assert not checker.can_access("a:b", "c", Access.READ)
        assert not checker.has_role_feature("admin", "a:b", "c")
        assert checker.has_role_feature("admin", "a", "b:c")


class TestFeatureQueries:
    """Test feature checks."""

    def test_has_feature(self, checker):
        """Test a defined feature is returned."""
        feature = checker.has_feature("billing", "invoices")
        assert isinstance(feature, Feature)
        assert feature.version == "2.0"

    def test_has_feature_missing(self, checker):
        """Test an undefined feature answers False."""
        assert checker.has_feature("billing", "payroll") is False

    def test_can_access(self, checker):
        """Test access bits are checked by containment."""
        assert checker.can_access("billing", "invoices", Access.READ)
        assert checker.can_access("billing", "invoices", ["read", "update"])
        assert not checker.can_access("billing", "invoices", Access.DELETE)
        assert checker.can_access("billing", "refunds", "delete")
        assert not checker.can_access("billing", "payroll", Access.READ)

    def test_empty_access_grants_nothing(self, checker):
        """Test a requirement without bits is never satisfied."""
        assert not checker.can_access("billing", "refunds", 0)
        assert not checker.can_access("billing", "refunds", Access.NONE)
        assert not checker.can_access("billing", "refunds", [])

    def test_role_features(self, checker):
        """Test feature names assigned to a role."""
        assert checker.role_features("viewer") == ["users:licence"]
        assert checker.role_features("editor") == []

    def test_has_role_feature(self, checker):
        """Test role feature membership."""
        assert checker.has_role_feature("admin", "billing", "refunds")
        assert not checker.has_role_feature("viewer", "billing", "refunds")
        assert not checker.has_role_feature("ghost", "users", "licence")


class TestReinitialization:
    """Test wholesale index replacement."""

    def test_init_replaces_index(self, checker):
        """Test queries see only the new configuration."""
        checker.init({"roles": ["auditor"], "permissions": {"logs": {"audit": "read"}}})
        assert checker.has_role("auditor")
        assert not checker.has_role("admin")
        assert checker.can("logs", "audit", "read")
        assert not checker.can("users", "manage", "create")

    def test_init_with_new_delimiter(self, checker):
        """Test lookups encode with the delimiter of the current index."""
        checker.init({
            "roles": ["admin"],
            "features": {"a:x": {"b": "read"}},
            "role_features": {"admin": {"a:x": ["b"]}},
            "delimiter": "|",
        })
        assert checker.index.delimiter == "|"
        assert checker.has_feature("a:x", "b")
        assert checker.can_access("a:x", "b", "read")
        assert checker.has_role_feature("admin", "a:x", "b")
        assert checker.role_features("admin") == ["a:x|b"]

    def test_failed_init_keeps_index(self, checker):
        """Test a malformed config leaves the current index in place."""
        old_index = checker.index
        with pytest.raises(ConfigError):
            checker.init({"roles": []})
        assert checker.index is old_index
        assert checker.can("users", "manage", "create")

    def test_readers_during_init(self, sample_config):
        """Test concurrent readers see a complete index."""
        checker = PermissionChecker.from_config(sample_config)
        replacement = dict(sample_config, roles=["admin", "editor", "viewer", "auditor"])
        errors = []

        def read():
            for _ in range(200):
                if not checker.can("users", "manage", "create"):
                    errors.append("missing permission")

        readers = [threading.Thread(target=read) for _ in range(4)]
        for reader in readers:
            reader.start()
        for _ in range(20):
            checker.init(replacement)
        for reader in readers:
            reader.join()

        assert errors == []
        assert checker.has_role("auditor")
