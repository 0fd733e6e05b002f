"""Tests for the role ranking and page permission table."""
import pytest

from nightguard.models.enums import UserRole
from nightguard.services.permissions import (
    PAGE_PERMISSIONS,
    accessible_pages,
    has_permission,
    role_rank
)


class TestRoleRanking:
    """Roles form a strict total order: staff < security < manager < admin."""

    def test_ranks_are_strictly_ordered(self):
        ranks = [role_rank(role) for role in (UserRole.STAFF, UserRole.SECURITY, UserRole.MANAGER, UserRole.ADMIN)]
        assert ranks == sorted(ranks)
        assert len(set(ranks)) == 4

    def test_security_denied_manager_actions(self):
        assert not has_permission(UserRole.SECURITY, UserRole.MANAGER)
        assert not has_permission(UserRole.SECURITY, UserRole.ADMIN)

    def test_security_permitted_lower_actions(self):
        assert has_permission(UserRole.SECURITY, UserRole.SECURITY)
        assert has_permission(UserRole.SECURITY, UserRole.STAFF)

    @pytest.mark.parametrize("role", list(UserRole))
    def test_every_role_meets_its_own_rank(self, role):
        assert has_permission(role, role)

    def test_admin_meets_every_requirement(self):
        assert all(has_permission(UserRole.ADMIN, required) for required in UserRole)

    def test_plain_strings_are_accepted(self):
        assert has_permission("manager", "security")
        assert not has_permission("staff", "security")

    def test_unknown_role_is_rejected(self):
        with pytest.raises(ValueError):
            has_permission("bouncer", UserRole.STAFF)


class TestPagePermissions:
    """Page minimums served to the dashboard."""

    def test_page_minimums(self):
        assert PAGE_PERMISSIONS["dashboard"] == UserRole.STAFF
        assert PAGE_PERMISSIONS["security_sign_in"] == UserRole.SECURITY
        assert PAGE_PERMISSIONS["cctv_register"] == UserRole.SECURITY
        assert PAGE_PERMISSIONS["reports"] == UserRole.MANAGER
        assert PAGE_PERMISSIONS["users"] == UserRole.ADMIN

    def test_staff_pages(self):
        assert accessible_pages(UserRole.STAFF) == ["dashboard", "venues", "incidents", "notifications", "settings"]

    def test_security_adds_guard_and_cctv_pages(self):
        pages = accessible_pages(UserRole.SECURITY)
        assert "security_sign_in" in pages
        assert "cctv_register" in pages
        assert "reports" not in pages

    def test_manager_sees_reports_but_not_users(self):
        pages = accessible_pages(UserRole.MANAGER)
        assert "reports" in pages
        assert "users" not in pages

    def test_admin_sees_everything(self):
        assert accessible_pages(UserRole.ADMIN) == list(PAGE_PERMISSIONS)
