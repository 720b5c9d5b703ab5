from enum import Enum


class Role(str, Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    STAFF = "staff"


class Permission(str, Enum):
    VIEW_BUYING_PRICE = "view_buying_price"
    EDIT_BATCHES = "edit_batches"
    DELETE_BATCHES = "delete_batches"
    CREATE_BATCHES = "create_batches"
    VIEW_PROFIT = "view_profit"
    OVERRIDE_LOCKS = "override_locks"
    MANAGE_USERS = "manage_users"
    VIEW_ALL_BOOKINGS = "view_all_bookings"
    CONFIRM_SALES = "confirm_sales"
    DELETE_BOOKINGS = "delete_bookings"
    SYSTEM_SETTINGS = "system_settings"
    VIEW_TICKETS = "view_tickets"
    CREATE_BOOKINGS = "create_bookings"
    PARTIAL_PAYMENTS = "partial_payments"
    MANAGE_UMRAH = "manage_umrah"


# admin is granted every capability, including the ones no other role holds
ROLE_PERMISSIONS: dict[Role, frozenset[Permission]] = {
    Role.ADMIN: frozenset(Permission),
    Role.MANAGER: frozenset({
        Permission.VIEW_TICKETS,
        Permission.CREATE_BOOKINGS,
        Permission.CONFIRM_SALES,
        Permission.VIEW_ALL_BOOKINGS,
    }),
    Role.STAFF: frozenset({
        Permission.VIEW_TICKETS,
        Permission.CREATE_BOOKINGS,
        Permission.PARTIAL_PAYMENTS,
    }),
}


def has_permission(role: str, permission: str) -> bool:
    """Return True when ``role`` holds ``permission``. Unknown names are never granted."""
    try:
        granted = ROLE_PERMISSIONS[Role(role)]
        return Permission(permission) in granted
    except ValueError:
        return False


def permissions_for(role: str) -> list[str]:
    try:
        return sorted(p.value for p in ROLE_PERMISSIONS[Role(role)])
    except ValueError:
        return []
