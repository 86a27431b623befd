"""
Organization Name Reconciliation

Upstream datasets label the same business unit differently: the sales,
collection, order and aging extracts carry the sales organization ("Building
Materials"), while the P&L and profitability extracts carry the organization
team ("Building Materials Team"). These helpers reconcile the two without
maintaining a mapping table.

Matching rule (shared by every helper):
1. Both names are whitespace-trimmed; a blank name never matches.
2. Exact equality wins.
3. Otherwise either name containing the other counts as a match.

Comparison is case sensitive. There is no similarity scoring: when several
keys contain (or are contained in) the candidate, the first one in the
mapping's insertion order wins.
"""

from collections.abc import Mapping
from typing import Any, Collection, Iterable, List, Optional, TypeVar

V = TypeVar('V')
T = TypeVar('T')


def normalize_org_name(name: Optional[str]) -> str:
    """Trim surrounding whitespace; None becomes an empty string."""
    return (name or '').strip()


def fuzzy_match(
    mapping: Mapping,
    name: Optional[str],
    default: Optional[V] = None,
) -> Optional[V]:
    """
    Look up a value by organization name, tolerating naming differences.

    Args:
        mapping: Organization name -> value. Iteration order decides which
            value is returned when several keys match structurally.
        name: Candidate organization name
        default: Returned when nothing matches ("not found")

    Returns:
        The value of the exact key, else the value of the first key that
        contains or is contained in the candidate, else default.

    Example:
        >>> fuzzy_match({"Building Materials Team": 1}, "Building Materials")
        1
        >>> fuzzy_match({}, "anything") is None
        True
    """
    candidate = normalize_org_name(name)
    if not candidate:
        return default

    if candidate in mapping:
        return mapping[candidate]

    for key, value in mapping.items():
        trimmed_key = normalize_org_name(key)
        if not trimmed_key:
            continue
        if trimmed_key == candidate or candidate in trimmed_key or trimmed_key in candidate:
            return value

    return default


def is_same_org(org_a: Optional[str], org_b: Optional[str]) -> bool:
    """
    Decide whether two organization names refer to the same organization.

    Uses the same trim + equals-or-containment rule as fuzzy_match.
    """
    a = normalize_org_name(org_a)
    b = normalize_org_name(org_b)
    if not a or not b:
        return False
    if a == b:
        return True
    return a in b or b in a


def _field_value(row: Any, field: str) -> Any:
    if isinstance(row, Mapping):
        return row.get(field)
    return getattr(row, field, None)


def filter_by_org_fuzzy(
    rows: Iterable[T],
    org_names: Collection[str],
    field: str = 'org',
) -> List[T]:
    """
    Keep the rows whose organization field matches any selected name.

    Works for both record models (attribute access) and plain mappings, so the
    same filter serves sales-side ("org") and P&L-side ("orgTeam") records.

    Args:
        rows: Records to filter
        org_names: Selected organization names. An empty selection means
            "no filter" and every row is returned.
        field: Name of the organization field on each row

    Returns:
        New list with the matching rows, input order preserved. Rows with a
        blank organization are dropped whenever a selection is active.
    """
    if not org_names:
        return list(rows)

    selected = {normalize_org_name(name) for name in org_names}
    selected.discard('')

    kept: List[T] = []
    for row in rows:
        value = normalize_org_name(str(_field_value(row, field) or ''))
        if not value:
            continue
        if value in selected or any(is_same_org(value, name) for name in selected):
            kept.append(row)
    return kept
