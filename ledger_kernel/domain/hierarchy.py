"""
Chart-of-accounts hierarchy and index.

Responsibility:
    AccountHierarchyBuilder -- turn flat category account lists into a forest
    wrapped under five synthetic category roots.
    AccountIndex -- flatten that forest into an id-keyed lookup table.

Architecture position:
    Kernel > Domain -- pure functions, zero I/O.

Invariants enforced:
    - Every tree walk is iterative with an explicit visited set keyed by
      account id, so duplicated ids or cyclic parent references can never
      loop or recurse without bound.
    - A record whose parent id is unresolvable is neither a root nor a child:
      it is silently excluded (orphan).  A record naming itself as its
      parent is never attached to itself.

Failure modes:
    - None raised.  Malformed parent references only make nodes unreachable.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence

from ledger_kernel.domain.accounts import (
    AccountCategory,
    AccountInfo,
    AccountNode,
    AccountRecord,
    normalize_key,
)
from ledger_kernel.logging_config import get_logger

logger = get_logger("domain.hierarchy")


# =========================================================================
# AccountHierarchyBuilder
# =========================================================================


def build_hierarchy(records: Sequence[AccountRecord]) -> list[AccountNode]:
    """
    Build a forest from one category's flat account list.

    Pass 1 creates an id -> node arena.  Pass 2 attaches each record to its
    parent's ``children`` (source order preserved) or collects it as a root
    when its parent id is ``None``.  Records with an unknown parent are
    dropped.
    """
    arena: dict[str, AccountNode] = {}
    for record in records:
        arena[record.account_id] = AccountNode.from_record(record)

    roots: list[AccountNode] = []
    orphans = 0
    for record in records:
        node = arena[record.account_id]
        if record.parent_account_id is None:
            roots.append(node)
            continue
        parent = arena.get(record.parent_account_id)
        if parent is None:
            orphans += 1
            continue
        if parent is node:
            continue
        parent.children.append(node)

    if orphans:
        logger.debug(
            "orphan_accounts_excluded",
            extra={"orphan_count": orphans, "record_count": len(records)},
        )
    return roots


def category_root(
    category: AccountCategory, children: list[AccountNode],
) -> AccountNode:
    """Synthetic root owning one category's forest."""
    return AccountNode(
        account_id=category.value,
        listid=category.listid,
        description=category.label,
        parent_account_id=None,
        children=children,
    )


def build_chart(
    category_records: Mapping[AccountCategory, Sequence[AccountRecord]],
) -> list[AccountNode]:
    """
    Wrap each category's forest under its synthetic root.

    Always returns the five roots in the fixed order Assets, Revenues,
    Liabilities, Expenses, Equities; a missing category gets an empty root.
    """
    return [
        category_root(category, build_hierarchy(category_records.get(category, ())))
        for category in AccountCategory
    ]


# =========================================================================
# Walks
# =========================================================================


def walk_preorder(
    roots: Iterable[AccountNode],
) -> Iterator[tuple[AccountNode, str | None, AccountCategory | None]]:
    """
    Yield ``(node, parent_id, category)`` in pre-order.

    The category is taken from the nearest synthetic category root above the
    node (``None`` for a forest that is not wrapped in a chart).
    """
    stack: list[tuple[AccountNode, str | None, AccountCategory | None]] = [
        (root, None, None) for root in reversed(list(roots))
    ]
    visited: set[str] = set()
    while stack:
        node, parent_id, category = stack.pop()
        if node.account_id in visited:
            continue
        visited.add(node.account_id)
        if parent_id is None:
            try:
                category = AccountCategory(node.account_id)
            except ValueError:
                pass
        yield node, parent_id, category
        for child in reversed(node.children):
            stack.append((child, node.account_id, category))


def flatten_hierarchy(roots: Iterable[AccountNode]) -> list[AccountRecord]:
    """
    Inverse of ``build_hierarchy``: pre-order records carrying tree parents.

    Rebuilding the result yields the same parent/child relationships.
    """
    return [
        AccountRecord(
            account_id=node.account_id,
            listid=node.listid,
            description=node.description,
            parent_account_id=parent_id,
        )
        for node, parent_id, _ in walk_preorder(roots)
    ]


def find_account(roots: Iterable[AccountNode], account_id: str) -> AccountNode | None:
    """Find a node by id anywhere in the forest."""
    if not account_id:
        return None
    for node, _, _ in walk_preorder(roots):
        if node.account_id == account_id:
            return node
    return None


def collect_descendant_ids(node: AccountNode | None) -> list[str]:
    """The node's id plus every descendant id, pre-order, no duplicates."""
    if node is None:
        return []
    return [n.account_id for n, _, _ in walk_preorder([node])]


# =========================================================================
# AccountIndex
# =========================================================================


class AccountIndex:
    """
    Id-keyed lookup table over a chart-of-accounts forest.

    Contract:
        Built once per report run from the current tree, O(n) in the total
        account count.  Iteration yields account ids in pre-order.

    Guarantees:
        - ``listid`` and ``description`` fall back to the id when blank.
        - The first occurrence of a duplicated id wins.
    """

    def __init__(self, entries: Mapping[str, AccountInfo]):
        self._entries: dict[str, AccountInfo] = dict(entries)
        self._by_key: dict[str, AccountInfo] | None = None

    @classmethod
    def from_roots(cls, roots: Iterable[AccountNode]) -> AccountIndex:
        entries: dict[str, AccountInfo] = {}
        for node, parent_id, category in walk_preorder(roots):
            entries[node.account_id] = AccountInfo(
                account_id=node.account_id,
                listid=node.listid or node.account_id,
                description=node.description or node.account_id,
                category=category,
                parent_id=parent_id,
            )
        return cls(entries)

    def __contains__(self, account_id: object) -> bool:
        return account_id in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, account_id: str) -> AccountInfo | None:
        return self._entries.get(account_id)

    def entries(self) -> list[AccountInfo]:
        return list(self._entries.values())

    def resolve(self, reference: str) -> AccountInfo | None:
        """
        Resolve a voucher account reference.

        Exact id first, then the normalized id, listid or description of any
        indexed account (legacy vouchers record accounts by name).  Real
        accounts take those keys before the synthetic category roots, whose
        codes and labels ("1", "Revenue") often repeat in the chart.
        """
        if reference in self._entries:
            return self._entries[reference]
        key = normalize_key(reference)
        if not key:
            return None
        if self._by_key is None:
            self._by_key = {}
            ordered = sorted(self._entries.values(), key=lambda info: info.is_category_root)
            for info in ordered:
                for k in (info.account_id, info.listid, info.description):
                    self._by_key.setdefault(normalize_key(k), info)
        return self._by_key.get(key)
