"""
Linked-account resolution.

Selecting one account in a group selects every account in that group.
The reverse index is built once at import from config.ACCOUNT_GROUPS and
never changes afterwards.
"""

from .config import ACCOUNT_GROUPS


def _build_reverse_index(
    groups: dict[str, list[str]],
) -> tuple[dict[str, frozenset[str]], dict[str, str]]:
    members_by_alias: dict[str, frozenset[str]] = {}
    group_by_alias: dict[str, str] = {}
    for group_name, aliases in groups.items():
        members = frozenset(a.lower() for a in aliases)
        for alias in members:
            members_by_alias[alias] = members
            group_by_alias[alias] = group_name
    return members_by_alias, group_by_alias


_ACCOUNT_TO_GROUP, _ACCOUNT_TO_GROUP_NAME = _build_reverse_index(ACCOUNT_GROUPS)


def get_linked_accounts(account_name: str) -> frozenset[str]:
    """Return every lowercased account name linked to ``account_name``.

    Accounts outside any group form a group of one.
    """
    key = account_name.lower()
    return _ACCOUNT_TO_GROUP.get(key, frozenset({key}))


def get_account_group_name(account_name: str) -> str | None:
    """Canonical group name for ``account_name``, or None if ungrouped."""
    return _ACCOUNT_TO_GROUP_NAME.get(account_name.lower())
