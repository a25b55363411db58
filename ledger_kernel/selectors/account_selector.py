"""
Module: ledger_kernel.selectors.account_selector
Responsibility: Resolve a user's account filter (by head, by listid range, or
    specific accounts) into the set of selected account ids and the
    normalized key set used to match voucher legs.
Architecture position: Kernel > Selectors.  May import from domain/.
    Read-only over the account tree and index.

Invariants enforced:
    - The three modes are mutually exclusive.
    - Range bounds compare listid strings lexicographically (plain ``str``
      ordering, NOT numeric): "10" < "9".
    - The key set holds the normalized id, listid and description of every
      selected account, so legs recorded by name still match.
    - An empty key set is the sentinel for "no account filter".

Failure modes:
    - Unknown mode -> UnknownSelectionModeError.
    - Ids absent from the index are reported in ``unmatched_ids``; they never
      raise.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from ledger_kernel.domain.accounts import AccountNode, normalize_key
from ledger_kernel.domain.hierarchy import (
    AccountIndex,
    collect_descendant_ids,
    find_account,
)
from ledger_kernel.exceptions import UnknownSelectionModeError
from ledger_kernel.logging_config import get_logger

logger = get_logger("selectors.account")


class SelectionMode(str, Enum):
    """Account-selection modes available when running a report."""

    BY_HEAD = "byHead"
    RANGE = "range"
    SPECIFIC = "specific"

    @classmethod
    def parse(cls, value: str | SelectionMode) -> SelectionMode:
        if isinstance(value, SelectionMode):
            return value
        for mode in cls:
            if mode.value.lower() == str(value).strip().lower():
                return mode
        raise UnknownSelectionModeError(str(value))


@dataclass(frozen=True)
class AccountFilter:
    """The user's account filter choice."""

    mode: SelectionMode = SelectionMode.BY_HEAD
    head_account_id: str = ""
    range_from_id: str = ""
    range_to_id: str = ""
    specific_ids: tuple[str, ...] = ()

    @classmethod
    def by_head(cls, account_id: str) -> AccountFilter:
        return cls(mode=SelectionMode.BY_HEAD, head_account_id=account_id)

    @classmethod
    def range(cls, from_id: str = "", to_id: str = "") -> AccountFilter:
        return cls(mode=SelectionMode.RANGE, range_from_id=from_id, range_to_id=to_id)

    @classmethod
    def specific(cls, *account_ids: str) -> AccountFilter:
        return cls(mode=SelectionMode.SPECIFIC, specific_ids=tuple(account_ids))


@dataclass(frozen=True)
class AccountSelection:
    """Resolved selection: account ids, normalized match keys, unknown ids."""

    account_ids: tuple[str, ...] = ()
    keys: frozenset[str] = frozenset()
    unmatched_ids: tuple[str, ...] = ()

    @property
    def is_unfiltered(self) -> bool:
        return not self.keys

    def matches(self, account_ref: str) -> bool:
        """True if a leg's account reference passes the filter."""
        return not self.keys or normalize_key(account_ref) in self.keys


class AccountSelector:
    """
    Resolves an ``AccountFilter`` against the current chart of accounts.

    Contract:
        ``select()`` is pure with respect to the tree and index it was built
        with; the same filter always yields the same selection.
    """

    def __init__(self, roots: Sequence[AccountNode], index: AccountIndex):
        self._roots = roots
        self._index = index

    def select(self, account_filter: AccountFilter) -> AccountSelection:
        mode = SelectionMode.parse(account_filter.mode)
        if mode == SelectionMode.BY_HEAD:
            ids, requested = self._by_head(account_filter.head_account_id)
        elif mode == SelectionMode.RANGE:
            ids, requested = self._by_range(
                account_filter.range_from_id, account_filter.range_to_id,
            )
        else:
            ids, requested = self._specific(account_filter.specific_ids)

        unmatched = tuple(i for i in requested if i not in self._index)
        selection = AccountSelection(
            account_ids=tuple(ids),
            keys=self.normalized_keys(ids),
            unmatched_ids=unmatched,
        )
        logger.debug(
            "accounts_selected",
            extra={
                "mode": mode.value,
                "selected_count": len(selection.account_ids),
                "key_count": len(selection.keys),
                "unmatched_ids": list(unmatched),
            },
        )
        return selection

    def normalized_keys(self, account_ids: Sequence[str]) -> frozenset[str]:
        """Normalized id, listid and description of every selected account."""
        keys: set[str] = set()
        for account_id in account_ids:
            if not account_id:
                continue
            keys.add(normalize_key(account_id))
            info = self._index.get(account_id)
            if info is not None:
                if info.listid:
                    keys.add(normalize_key(info.listid))
                if info.description:
                    keys.add(normalize_key(info.description))
        keys.discard("")
        return frozenset(keys)

    # ------------------------------------------------------------------
    # Modes
    # ------------------------------------------------------------------

    def _by_head(self, head_id: str) -> tuple[list[str], list[str]]:
        if not head_id:
            return [], []
        node = find_account(self._roots, head_id)
        return collect_descendant_ids(node), [head_id]

    def _by_range(self, from_id: str, to_id: str) -> tuple[list[str], list[str]]:
        if from_id and to_id:
            from_code = self._listid(from_id)
            to_code = self._listid(to_id)
            low, high = (from_code, to_code) if from_code < to_code else (to_code, from_code)
            ids = [
                account_id
                for account_id in self._index
                if low <= self._listid(account_id) <= high
            ]
            return ids, [from_id, to_id]
        only = from_id or to_id
        if only:
            return [only], [only]
        return [], []

    def _specific(self, account_ids: Sequence[str]) -> tuple[list[str], list[str]]:
        chosen = list(dict.fromkeys(i for i in account_ids[:2] if i))
        return chosen, chosen

    def _listid(self, account_id: str) -> str:
        info = self._index.get(account_id)
        return info.listid if info is not None else account_id
