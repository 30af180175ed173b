"""Append-only, chronologically ordered store of point entries."""

from types import MappingProxyType
from typing import Mapping

from .models import LedgerEntry, Transaction


class Ledger:
    """
    Entries are never mutated or removed. ``append`` does not sort; callers
    run ``reorder`` after an append or a batch of appends and before any
    spend computation. Entries sharing a timestamp stay in arrival order.
    """

    def __init__(self):
        self._entries: list[LedgerEntry] = []
        self._balances: dict[str, int] = {}
        self._next_sequence = 0

    def append(self, transaction: Transaction) -> LedgerEntry:
        entry = LedgerEntry(
            sequence=self._next_sequence,
            payer=transaction.payer,
            points=transaction.points,
            timestamp=transaction.timestamp,
        )
        self._next_sequence += 1
        self._entries.append(entry)
        self._balances[entry.payer] = self._balances.get(entry.payer, 0) + entry.points
        return entry

    def reorder(self) -> None:
        self._entries.sort(key=LedgerEntry.sort_key)

    def projection(self) -> Mapping[str, int]:
        return MappingProxyType(self._balances)

    def rebuild_projection(self) -> dict[str, int]:
        # Fold over the entries; must always agree with projection().
        totals: dict[str, int] = {}
        for entry in self._entries:
            totals[entry.payer] = totals.get(entry.payer, 0) + entry.points
        return totals

    def entries(self) -> tuple[LedgerEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
