import pytest

from ticketpro.core.permissions import Permission, has_permission, permissions_for


@pytest.mark.parametrize("permission", list(Permission))
def test_admin_holds_every_permission(permission):
    assert has_permission("admin", permission)


@pytest.mark.parametrize("permission,manager,staff", [
    ("view_tickets", True, True),
    ("create_bookings", True, True),
    ("confirm_sales", True, False),
    ("view_all_bookings", True, False),
    ("partial_payments", False, True),
    ("view_buying_price", False, False),
    ("view_profit", False, False),
    ("create_batches", False, False),
    ("edit_batches", False, False),
    ("delete_batches", False, False),
    ("override_locks", False, False),
    ("manage_users", False, False),
    ("delete_bookings", False, False),
    ("system_settings", False, False),
    ("manage_umrah", False, False),
])
def test_role_table(permission, manager, staff):
    assert has_permission("manager", permission) is manager
    assert has_permission("staff", permission) is staff


def test_unknown_names_are_never_granted():
    assert not has_permission("superuser", "view_tickets")
    assert not has_permission("admin", "launch_rockets")
    assert permissions_for("nobody") == []


def test_permissions_for_lists_sorted_values():
    assert permissions_for("staff") == ["create_bookings", "partial_payments", "view_tickets"]
    assert len(permissions_for("admin")) == len(Permission)
