"""Role-based permission table.

Every check in the service layer goes through ``has_permission``: a flat
lookup of (role, permission). ``None`` as role means "not a member of the
family in question".
"""
from enum import StrEnum

from ..models.family_member import FamilyMember, MemberRole
from .errors import PermissionDenied


class Permission(StrEnum):
    MANAGE_PROFILE = "MANAGE_PROFILE"
    CREATE_FAMILY = "CREATE_FAMILY"
    JOIN_FAMILY = "JOIN_FAMILY"

    LEAVE_FAMILY = "LEAVE_FAMILY"
    VIEW_DWELLINGS = "VIEW_DWELLINGS"
    VIEW_CONTRACTS = "VIEW_CONTRACTS"
    CREATE_EXPENSE = "CREATE_EXPENSE"
    EDIT_OWN_MOVEMENT = "EDIT_OWN_MOVEMENT"
    VIEW_MOVEMENTS = "VIEW_MOVEMENTS"
    VIEW_REPORT = "VIEW_REPORT"

    CREATE_INCOME = "CREATE_INCOME"
    VIEW_INCOME = "VIEW_INCOME"
    MANAGE_DWELLINGS = "MANAGE_DWELLINGS"
    MANAGE_CONTRACTS = "MANAGE_CONTRACTS"

    MANAGE_MEMBERS = "MANAGE_MEMBERS"
    REMOVE_MEMBER = "REMOVE_MEMBER"
    CHANGE_MEMBER_ROLE = "CHANGE_MEMBER_ROLE"
    REGENERATE_INVITE_CODE = "REGENERATE_INVITE_CODE"
    EDIT_ANY_MOVEMENT = "EDIT_ANY_MOVEMENT"
    DELETE_FAMILY = "DELETE_FAMILY"


_ANYONE = frozenset({
    Permission.MANAGE_PROFILE,
    Permission.CREATE_FAMILY,
    Permission.JOIN_FAMILY,
})

_MEMBER = _ANYONE | {
    Permission.LEAVE_FAMILY,
    Permission.VIEW_DWELLINGS,
    Permission.VIEW_CONTRACTS,
    Permission.CREATE_EXPENSE,
    Permission.EDIT_OWN_MOVEMENT,
    Permission.VIEW_MOVEMENTS,
    Permission.VIEW_REPORT,
}

_WORKER = _MEMBER | {
    Permission.CREATE_INCOME,
    Permission.VIEW_INCOME,
    Permission.MANAGE_DWELLINGS,
    Permission.MANAGE_CONTRACTS,
}

_HEAD = _WORKER | {
    Permission.MANAGE_MEMBERS,
    Permission.REMOVE_MEMBER,
    Permission.CHANGE_MEMBER_ROLE,
    Permission.REGENERATE_INVITE_CODE,
    Permission.EDIT_ANY_MOVEMENT,
    Permission.DELETE_FAMILY,
}

PERMISSIONS: dict[MemberRole | None, frozenset[Permission]] = {
    None: _ANYONE,
    MemberRole.MEMBER: frozenset(_MEMBER),
    MemberRole.WORKER: frozenset(_WORKER),
    MemberRole.HEAD: frozenset(_HEAD),
}


def has_permission(permission: Permission, role: MemberRole | None) -> bool:
    return permission in PERMISSIONS.get(role, _ANYONE)


def require_permission(member: FamilyMember | None, permission: Permission, message: str) -> FamilyMember | None:
    role = member.role if member else None
    if not has_permission(permission, role):
        raise PermissionDenied(message)
    return member


def accessible_sections(role: MemberRole | None, has_family: bool) -> list[str]:
    """Navigation entries the UI should offer to a user with ``role``."""
    sections = ["/profile"]
    if not has_family:
        sections += ["/family/new", "/family/join"]
        return sections

    sections += ["/dashboard", "/family", "/dwellings", "/report"]
    if has_permission(Permission.CREATE_INCOME, role):
        sections.append("/incomes")
    if has_permission(Permission.MANAGE_CONTRACTS, role):
        sections.append("/contracts")
    if has_permission(Permission.MANAGE_MEMBERS, role):
        sections.append("/family/members")
    return sections
