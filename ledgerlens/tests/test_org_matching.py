"""
Tests for organization name reconciliation.

Covers the exact / containment matching rule in both directions, the
"not found" default, and the fuzzy row filter for record models and plain
mappings.
"""

import pytest

from ledgerlens.models import OrgProfitRecord, SalesRecord
from ledgerlens.services.org_matching import (
    filter_by_org_fuzzy,
    fuzzy_match,
    is_same_org,
    normalize_org_name,
)


class TestFuzzyMatch:
    """Tests for fuzzy_match lookups."""

    @pytest.mark.parity
    def test_key_contains_candidate(self) -> None:
        assert fuzzy_match({'건자재팀': 'X'}, '건자재') == 'X'

    @pytest.mark.parity
    def test_candidate_contains_key(self) -> None:
        assert fuzzy_match({'건자재': 'X'}, '건자재팀') == 'X'

    def test_empty_mapping_is_not_found(self) -> None:
        assert fuzzy_match({}, 'anything') is None

    def test_default_returned_when_not_found(self) -> None:
        assert fuzzy_match({'Chemicals': 1}, 'Steel', default=-1) == -1

    def test_exact_match_wins_over_containment(self) -> None:
        mapping = {'Building Materials Team': 1, 'Building Materials': 2}
        assert fuzzy_match(mapping, 'Building Materials') == 2

    def test_first_containment_match_in_insertion_order(self) -> None:
        mapping = {'Steel East Team': 1, 'Steel West Team': 2}
        assert fuzzy_match(mapping, 'Steel') == 1

    def test_whitespace_is_trimmed(self) -> None:
        assert fuzzy_match({' Chemicals ': 5}, 'Chemicals  ') == 5

    def test_blank_candidate_never_matches(self) -> None:
        assert fuzzy_match({'Chemicals': 5}, '   ') is None
        assert fuzzy_match({'Chemicals': 5}, None) is None

    def test_blank_key_is_ignored(self) -> None:
        assert fuzzy_match({'': 1, 'Chemicals': 2}, 'Chemicals Team') == 2

    def test_zero_value_is_returned(self) -> None:
        """A falsy mapped value is still a match, not "not found"."""
        assert fuzzy_match({'Chemicals': 0.0}, 'Chemicals Team', default=99.0) == 0.0


class TestIsSameOrg:
    """Tests for pairwise organization comparison."""

    def test_symmetric_containment(self) -> None:
        assert is_same_org('Chemicals', 'Chemicals Team')
        assert is_same_org('Chemicals Team', 'Chemicals')

    def test_unrelated_names(self) -> None:
        assert not is_same_org('Chemicals', 'Steel')

    def test_blank_names(self) -> None:
        assert not is_same_org('', 'Steel')
        assert not is_same_org(None, None)

    def test_normalize(self) -> None:
        assert normalize_org_name('  Steel ') == 'Steel'
        assert normalize_org_name(None) == ''


class TestFilterByOrgFuzzy:
    """Tests for the fuzzy row filter."""

    def test_empty_selection_returns_all_rows(self) -> None:
        rows = [SalesRecord(org='A'), SalesRecord(org='')]
        assert filter_by_org_fuzzy(rows, []) == rows

    def test_filters_models_by_containment(self) -> None:
        rows = [
            SalesRecord(org='Building Materials', amount=1),
            SalesRecord(org='Chemicals', amount=2),
            SalesRecord(org='', amount=3),
        ]
        kept = filter_by_org_fuzzy(rows, ['Building Materials Team'])
        assert [r.amount for r in kept] == [1]

    def test_custom_field_for_team_records(self) -> None:
        rows = [OrgProfitRecord(orgTeam='Chemicals Team'), OrgProfitRecord(orgTeam='Steel Team')]
        kept = filter_by_org_fuzzy(rows, ['Chemicals'], field='orgTeam')
        assert [r.orgTeam for r in kept] == ['Chemicals Team']

    def test_plain_mappings(self) -> None:
        rows = [{'org': 'Steel'}, {'org': 'Chemicals'}, {'other': 'x'}]
        assert filter_by_org_fuzzy(rows, ['Steel Team']) == [{'org': 'Steel'}]

    def test_preserves_input_order(self) -> None:
        rows = [SalesRecord(org='B', amount=i) for i in range(3)]
        assert filter_by_org_fuzzy(rows, ['B']) == rows
