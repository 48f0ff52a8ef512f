"""Unit tests for the role and permission policy table."""

import pytest

from tenancy.domain.authorization import (
    OWNER_ROLE,
    ROLE_PERMISSIONS,
    Permission,
    Role,
    any_role_has_permission,
    has_permission,
    permissions_for,
)


class TestRolePermissions:
    """Tests for the static policy table."""

    def test_every_role_has_an_entry(self):
        assert set(ROLE_PERMISSIONS) == set(Role)

    def test_admin_has_every_permission(self):
        assert permissions_for("Admin") == frozenset(Permission)

    def test_owner_is_admin(self):
        assert OWNER_ROLE == Role.ADMIN

    def test_policy_table_is_read_only(self):
        with pytest.raises(TypeError):
            ROLE_PERMISSIONS[Role.SALES] = frozenset()  # type: ignore[index]

    @pytest.mark.parametrize(
        ("role", "permission", "expected"),
        [
            ("Sales", "view_leads", True),
            ("Sales", "manage_invoices", False),
            ("Finance", "manage_invoices", True),
            ("Finance", "create_leads", False),
            ("Assistant", "view_leads", True),
            ("Assistant", "edit_leads", False),
            ("Manager", "manage_targets", True),
            ("Manager", "edit_company_info", False),
            ("Admin", "manage_company_details", True),
        ],
    )
    def test_has_permission(self, role, permission, expected):
        assert has_permission(role, permission) is expected

    def test_unknown_role_has_no_permissions(self):
        assert permissions_for("Intern") == frozenset()
        assert has_permission("Intern", "view_leads") is False


class TestAnyRoleHasPermission:
    def test_any_role_grants(self):
        assert any_role_has_permission(["Assistant", "Finance"], "manage_taxes")

    def test_no_roles(self):
        assert not any_role_has_permission([], "view_leads")
