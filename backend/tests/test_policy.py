"""
Access policy tests.

Verifies:
- Every operation has a permission for every role
- Commanders are pinned to their own base, on reads and on writes
- Admin base filters are honored, logistics filters are ignored
- Audit history is admin only
"""

from types import SimpleNamespace

import pytest

from armory import errors
from armory.models import UserRole
from armory.policy import (
    ALL_BASES,
    POLICY,
    Operation,
    Permission,
    SingleBase,
    authorize,
    check_base_ownership,
    permission_for,
    resolve_scope,
)


def make_user(role, base_id=None):
    return SimpleNamespace(id=1, email=f"{role.value}@test.mil", role=role, base_id=base_id)


ADMIN = make_user(UserRole.admin)
COMMANDER = make_user(UserRole.commander, base_id=1)
LOGISTICS = make_user(UserRole.logistics, base_id=3)

READS = [
    Operation.view_dashboard,
    Operation.list_purchases,
    Operation.list_transfers,
    Operation.list_assignments,
    Operation.list_expenditures,
    Operation.list_assets,
    Operation.list_personnel,
]


class TestPolicyTable:
    @pytest.mark.parametrize("operation", list(Operation))
    @pytest.mark.parametrize("role", list(UserRole))
    def test_every_pair_is_defined(self, operation, role):
        assert role in POLICY[operation]

    @pytest.mark.parametrize("operation", list(Operation))
    def test_admin_is_never_refused(self, operation):
        assert permission_for(operation, UserRole.admin) == Permission.allowed

    @pytest.mark.parametrize(
        "operation",
        [Operation.create_purchase, Operation.create_assignment, Operation.create_expenditure],
    )
    def test_logistics_cannot_book_base_stock(self, operation):
        with pytest.raises(errors.Forbidden):
            authorize(LOGISTICS, operation)

    def test_logistics_may_create_transfers(self):
        assert authorize(LOGISTICS, Operation.create_transfer) == Permission.allowed

    @pytest.mark.parametrize("user", [COMMANDER, LOGISTICS])
    def test_audit_history_is_admin_only(self, user):
        with pytest.raises(errors.Forbidden):
            authorize(user, Operation.list_audit_logs)
        assert authorize(ADMIN, Operation.list_audit_logs) == Permission.allowed

    def test_forbidden_message_does_not_name_the_rule(self):
        with pytest.raises(errors.Forbidden) as exc:
            authorize(LOGISTICS, Operation.create_purchase)
        assert exc.value.detail == errors.Forbidden.default_detail
        assert "purchase" not in exc.value.detail.lower()


class TestResolveScope:
    @pytest.mark.parametrize("operation", READS)
    def test_commander_is_forced_to_own_base(self, operation):
        assert resolve_scope(COMMANDER, operation) == SingleBase(1)
        assert resolve_scope(COMMANDER, operation, requested_base_id=2) == SingleBase(1)

    @pytest.mark.parametrize("operation", READS)
    def test_admin_filter_is_honored(self, operation):
        assert resolve_scope(ADMIN, operation) == ALL_BASES
        assert resolve_scope(ADMIN, operation, requested_base_id=2) == SingleBase(2)

    @pytest.mark.parametrize("operation", READS)
    def test_logistics_reads_every_base(self, operation):
        assert resolve_scope(LOGISTICS, operation) == ALL_BASES
        assert resolve_scope(LOGISTICS, operation, requested_base_id=2) == ALL_BASES

    @pytest.mark.parametrize("operation", READS)
    @pytest.mark.parametrize("requested_base_id", [None, 2])
    @pytest.mark.parametrize("user", [ADMIN, COMMANDER, LOGISTICS], ids=["admin", "commander", "logistics"])
    def test_resolving_twice_gives_the_same_scope(self, user, requested_base_id, operation):
        first = resolve_scope(user, operation, requested_base_id=requested_base_id)
        second = resolve_scope(user, operation, requested_base_id=requested_base_id)
        assert first == second

    def test_commander_without_base_is_refused(self):
        orphan = make_user(UserRole.commander)
        with pytest.raises(errors.Forbidden):
            resolve_scope(orphan, Operation.view_dashboard)

    def test_shared_catalogs_are_unscoped_for_commanders(self):
        assert resolve_scope(COMMANDER, Operation.list_bases) == ALL_BASES
        assert resolve_scope(COMMANDER, Operation.list_equipment_types) == ALL_BASES


class TestBaseOwnership:
    def test_commander_writes_to_own_base(self):
        check_base_ownership(COMMANDER, Operation.create_purchase, 1)

    def test_commander_cannot_write_to_foreign_base(self):
        with pytest.raises(errors.Forbidden):
            check_base_ownership(COMMANDER, Operation.create_purchase, 2)

    @pytest.mark.parametrize("from_base,to_base", [(1, 2), (2, 1)])
    def test_commander_transfer_needs_either_end(self, from_base, to_base):
        check_base_ownership(COMMANDER, Operation.create_transfer, from_base, to_base)

    def test_commander_transfer_between_foreign_bases(self):
        with pytest.raises(errors.Forbidden):
            check_base_ownership(COMMANDER, Operation.create_transfer, 2, 3)

    def test_admin_and_logistics_are_not_pinned(self):
        check_base_ownership(ADMIN, Operation.create_purchase, 2)
        check_base_ownership(LOGISTICS, Operation.create_transfer, 1, 2)
