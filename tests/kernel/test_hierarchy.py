"""
Tests for the chart-of-accounts hierarchy builder and AccountIndex.

Covers the round-trip property, orphan exclusion, cycle and duplicate
guards, the synthetic category roots and reference resolution.
"""

import pytest

from ledger_kernel.domain.accounts import AccountCategory, NormalBalance
from ledger_kernel.domain.hierarchy import (
    AccountIndex,
    build_chart,
    build_hierarchy,
    collect_descendant_ids,
    find_account,
    flatten_hierarchy,
    walk_preorder,
)
from tests.conftest import make_account, standard_chart


def _edges(roots) -> set[tuple[str, str | None]]:
    return {(node.account_id, parent) for node, parent, _ in walk_preorder(roots)}


def _ids(roots) -> list[str]:
    return [node.account_id for node, _, _ in walk_preorder(roots)]


class TestBuildHierarchy:
    """Two-pass arena build of one category forest."""

    def test_children_attached_in_source_order(self):
        roots = build_hierarchy([
            make_account("P", "1"),
            make_account("C2", "1-02", parent="P"),
            make_account("C1", "1-01", parent="P"),
        ])
        assert [r.account_id for r in roots] == ["P"]
        assert [c.account_id for c in roots[0].children] == ["C2", "C1"]

    def test_child_listed_before_parent_is_attached(self):
        roots = build_hierarchy([
            make_account("C", parent="P"),
            make_account("P"),
        ])
        assert [r.account_id for r in roots] == ["P"]
        assert roots[0].children[0].account_id == "C"

    def test_multiple_roots(self):
        roots = build_hierarchy([make_account("A"), make_account("B")])
        assert [r.account_id for r in roots] == ["A", "B"]

    def test_empty_input(self):
        assert build_hierarchy([]) == []


class TestOrphanRegression:
    """An unresolvable parent id makes the account unreachable (preserved behavior)."""

    def test_orphan_is_neither_root_nor_child(self):
        roots = build_hierarchy([
            make_account("P"),
            make_account("ORPHAN", parent="MISSING"),
        ])
        assert _ids(roots) == ["P"]

    def test_orphan_subtree_is_unreachable(self):
        roots = build_hierarchy([
            make_account("ORPHAN", parent="MISSING"),
            make_account("GRANDCHILD", parent="ORPHAN"),
        ])
        assert roots == []

    def test_orphan_exclusion_logged(self, captured_logs):
        build_hierarchy([make_account("ORPHAN", parent="MISSING")])
        logs = captured_logs()
        orphan_logs = [r for r in logs if r["message"] == "orphan_accounts_excluded"]
        assert orphan_logs and orphan_logs[0]["orphan_count"] == 1


class TestCycleAndDuplicateGuards:
    """Walks terminate on corrupted parent references."""

    def test_self_parent_not_attached_to_itself(self):
        roots = build_hierarchy([make_account("A", parent="A")])
        assert roots == []

    def test_two_node_cycle_is_unreachable(self):
        roots = build_hierarchy([
            make_account("A", parent="B"),
            make_account("B", parent="A"),
        ])
        assert roots == []

    def test_walk_terminates_on_cycle_through_root(self):
        roots = build_hierarchy([
            make_account("R"),
            make_account("A", parent="R"),
            make_account("B", parent="A"),
        ])
        # Corrupt the tree after build: B points back at R.
        roots[0].children[0].children[0].children.append(roots[0])
        assert _ids(roots) == ["R", "A", "B"]
        assert collect_descendant_ids(roots[0]) == ["R", "A", "B"]

    def test_duplicate_ids_visited_once(self):
        roots = build_hierarchy([
            make_account("R"),
            make_account("X", parent="R"),
            make_account("X", parent="R"),
        ])
        assert _ids(roots) == ["R", "X"]


class TestRoundTrip:
    """Flatten then rebuild yields identical parent/child relationships."""

    @pytest.mark.parametrize(
        "records",
        [
            [make_account("A")],
            [
                make_account("A", "1"),
                make_account("B", "1-1", parent="A"),
                make_account("C", "1-1-1", parent="B"),
                make_account("D", "1-2", parent="A"),
                make_account("E", "2"),
            ],
            [
                make_account("Z", parent="Y"),
                make_account("Y", parent="X"),
                make_account("X"),
            ],
        ],
    )
    def test_round_trip(self, records):
        roots = build_hierarchy(records)
        rebuilt = build_hierarchy(flatten_hierarchy(roots))
        assert _edges(rebuilt) == _edges(roots)

    def test_round_trip_whole_chart(self):
        roots = build_chart(standard_chart())
        rebuilt = build_hierarchy(flatten_hierarchy(roots))
        assert _edges(rebuilt) == _edges(roots)


class TestBuildChart:
    """Five synthetic category roots in fixed order."""

    def test_five_roots_in_order(self):
        roots = build_chart(standard_chart())
        assert [r.account_id for r in roots] == [
            "assets", "revenues", "liabilities", "expenses", "equities",
        ]
        assert [r.description for r in roots] == [
            "Assets", "Revenue", "Liabilities", "Expenses", "Equity",
        ]
        assert [r.listid for r in roots] == ["1", "4", "2", "5", "3"]

    def test_missing_category_gets_empty_root(self):
        roots = build_chart({AccountCategory.ASSETS: [make_account("CASH")]})
        assert len(roots) == 5
        assert roots[1].children == []

    def test_find_and_collect(self):
        roots = build_chart(standard_chart())
        node = find_account(roots, "CA")
        assert node is not None
        assert collect_descendant_ids(node) == ["CA", "CASH", "BANK"]

    def test_find_unknown_or_blank(self):
        roots = build_chart(standard_chart())
        assert find_account(roots, "NOPE") is None
        assert find_account(roots, "") is None
        assert collect_descendant_ids(None) == []


class TestAccountIndex:
    """Id-keyed lookup table built from the chart."""

    def _index(self) -> AccountIndex:
        return AccountIndex.from_roots(build_chart(standard_chart()))

    def test_contains_every_account_and_root(self):
        index = self._index()
        assert "CASH" in index
        assert "assets" in index
        assert len(index) == 5 + 7

    def test_preorder_iteration(self):
        assert list(self._index())[:4] == ["assets", "CA", "CASH", "BANK"]

    def test_blank_listid_and_description_fall_back_to_id(self):
        index = AccountIndex.from_roots(build_hierarchy([make_account("X")]))
        info = index.get("X")
        assert info.listid == "X"
        assert info.description == "X"

    def test_category_and_normal_balance(self):
        index = self._index()
        assert index.get("CASH").category == AccountCategory.ASSETS
        assert index.get("CASH").normal_balance == NormalBalance.DEBIT
        assert index.get("REV").normal_balance == NormalBalance.CREDIT
        assert index.get("CAP").normal_balance == NormalBalance.CREDIT
        assert index.get("EXP").normal_balance == NormalBalance.DEBIT

    def test_parent_id_recorded(self):
        index = self._index()
        assert index.get("CASH").parent_id == "CA"
        assert index.get("CA").parent_id == "assets"

    def test_resolve_by_id_listid_or_description(self):
        index = self._index()
        assert index.resolve("CASH").account_id == "CASH"
        assert index.resolve(" cash ").account_id == "CASH"
        assert index.resolve("1-01").account_id == "CASH"
        assert index.resolve("Accounts Payable").account_id == "AP"
        assert index.resolve("unknown") is None
        assert index.resolve("") is None

    def test_real_account_wins_shared_key_over_category_root(self):
        index = self._index()
        # "Revenue" and "1" are both category root labels and chart entries
        assert index.resolve("revenue").account_id == "REV"
        assert index.resolve("1").account_id == "CA"
        assert index.resolve("Equity").account_id == "equities"
        assert index.resolve("revenues").account_id == "revenues"
