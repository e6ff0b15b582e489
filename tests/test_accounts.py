"""
test_accounts.py — Unit tests for linked-account resolution.
"""

from production_dashboard.accounts import get_account_group_name, get_linked_accounts
from production_dashboard.config import ACCOUNT_GROUPS


class TestLinkedAccounts:

    def test_group_members_resolve_to_same_set(self):
        assert get_linked_accounts("Kroger") == get_linked_accounts("mariano's")

    def test_set_contains_both_lowercased(self):
        linked = get_linked_accounts("KROGER")
        assert "kroger" in linked
        assert "mariano's" in linked

    def test_unknown_account_is_its_own_group(self):
        assert get_linked_accounts("Unknown Store") == {"unknown store"}

    def test_every_alias_resolves_to_its_full_group(self):
        for aliases in ACCOUNT_GROUPS.values():
            expected = {a.lower() for a in aliases}
            for alias in aliases:
                assert get_linked_accounts(alias) == expected

    def test_franchise_group(self):
        linked = get_linked_accounts("Pigs Tietz")
        assert "piggly wiggly" in linked
        assert len(linked) == 14

    def test_group_name(self):
        assert get_account_group_name("Reliance Fuel, LLC") == "fuel on"
        assert get_account_group_name("Festival Foods") is None
