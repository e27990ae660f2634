"""
Access policy.

Every (operation, role) pair maps to one Permission in ``POLICY``:

- ``allowed``: any base; a base filter requested by the caller is honored.
- ``all_bases``: any base; requested filters are ignored (read-only roles).
- ``own_base_only``: reads are forced to the user's base, writes must
  target it.
- ``denied``: the operation is refused with Forbidden.

Reads resolve to a Scope (``AllBases`` or ``SingleBase``) that the query
layer turns into bound filter clauses.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Optional, Union

from . import errors
from .models import UserRole


logger = logging.getLogger(__name__)


class Operation(str, enum.Enum):
    view_dashboard = "view_dashboard"
    list_purchases = "list_purchases"
    create_purchase = "create_purchase"
    list_transfers = "list_transfers"
    create_transfer = "create_transfer"
    list_assignments = "list_assignments"
    create_assignment = "create_assignment"
    list_expenditures = "list_expenditures"
    create_expenditure = "create_expenditure"
    list_assets = "list_assets"
    list_personnel = "list_personnel"
    list_bases = "list_bases"
    list_equipment_types = "list_equipment_types"
    list_audit_logs = "list_audit_logs"


class Permission(str, enum.Enum):
    allowed = "allowed"
    all_bases = "all_bases"
    own_base_only = "own_base_only"
    denied = "denied"


@dataclass(frozen=True)
class AllBases:
    pass


@dataclass(frozen=True)
class SingleBase:
    base_id: int


Scope = Union[AllBases, SingleBase]
ALL_BASES = AllBases()

_A, _C, _L = UserRole.admin, UserRole.commander, UserRole.logistics
_ok, _all, _own, _no = Permission.allowed, Permission.all_bases, Permission.own_base_only, Permission.denied

POLICY: dict[Operation, dict[UserRole, Permission]] = {
    Operation.view_dashboard: {_A: _ok, _C: _own, _L: _all},
    Operation.list_purchases: {_A: _ok, _C: _own, _L: _all},
    Operation.create_purchase: {_A: _ok, _C: _own, _L: _no},
    Operation.list_transfers: {_A: _ok, _C: _own, _L: _all},
    Operation.create_transfer: {_A: _ok, _C: _own, _L: _ok},
    Operation.list_assignments: {_A: _ok, _C: _own, _L: _all},
    Operation.create_assignment: {_A: _ok, _C: _own, _L: _no},
    Operation.list_expenditures: {_A: _ok, _C: _own, _L: _all},
    Operation.create_expenditure: {_A: _ok, _C: _own, _L: _no},
    Operation.list_assets: {_A: _ok, _C: _own, _L: _all},
    Operation.list_personnel: {_A: _ok, _C: _own, _L: _all},
    Operation.list_bases: {_A: _ok, _C: _ok, _L: _ok},
    Operation.list_equipment_types: {_A: _ok, _C: _ok, _L: _ok},
    Operation.list_audit_logs: {_A: _ok, _C: _no, _L: _no},
}


def permission_for(operation: Operation, role: UserRole) -> Permission:
    # a pair missing from the table is refused
    return POLICY.get(operation, {}).get(role, Permission.denied)


def authorize(user, operation: Operation) -> Permission:
    """Refuse the operation outright when the user's role may not perform it."""
    permission = permission_for(operation, user.role)
    if permission == Permission.denied:
        _deny(user, operation, "role")
    if permission == Permission.own_base_only and user.base_id is None:
        _deny(user, operation, "no assigned base")
    return permission


def resolve_scope(user, operation: Operation, requested_base_id: Optional[int] = None) -> Scope:
    permission = authorize(user, operation)
    if permission == Permission.own_base_only:
        return SingleBase(user.base_id)
    if permission == Permission.allowed and requested_base_id is not None:
        return SingleBase(requested_base_id)
    return ALL_BASES


def check_base_ownership(user, operation: Operation, *base_ids: int) -> None:
    """
    For own-base-only writes at least one of ``base_ids`` must be the
    user's base (a single target base, or either end of a transfer).
    """
    permission = authorize(user, operation)
    if permission == Permission.own_base_only and user.base_id not in base_ids:
        _deny(user, operation, "foreign base")


def _deny(user, operation: Operation, reason: str) -> None:
    logger.warning(
        "Access denied for user %s (%s) on %s: %s",
        getattr(user, "email", user.id),
        user.role.value,
        operation.value,
        reason,
    )
    raise errors.Forbidden()
