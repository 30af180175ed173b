"""
Spend allocation over a chronologically ordered ledger.

Two passes: ``resolve_availability`` walks newest to oldest and works out how
much of every grant is still free once later withdrawals for the same payer
are charged against the earliest grants before them. ``plan_spend`` then
walks oldest to newest consuming that free amount until the target is met.
Neither function touches the ledger.
"""

from typing import Sequence

from .models import LedgerEntry, PayerDelta, SpendMode


def resolve_availability(entries: Sequence[LedgerEntry]) -> list[int]:
    available = [0] * len(entries)
    pending: dict[str, int] = {}

    for i in range(len(entries) - 1, -1, -1):
        entry = entries[i]
        payer = entry.payer

        if payer not in pending:
            if entry.points < 0:
                pending[payer] = entry.points
            else:
                available[i] = entry.points
            continue

        pending[payer] += entry.points
        if entry.points > 0 and pending[payer] >= 0:
            # Grant fully offsets the later withdrawals; the surplus is free.
            available[i] = pending.pop(payer)

    return available


def total_available(entries: Sequence[LedgerEntry], available: Sequence[int]) -> int:
    return sum(free for entry, free in zip(entries, available) if entry.points > 0)


def plan_spend(
    entries: Sequence[LedgerEntry],
    available: Sequence[int],
    amount: int,
    mode: SpendMode = SpendMode.ACCUMULATE,
) -> tuple[list[PayerDelta], int]:
    """
    Returns the per-payer deductions and the amount left unsatisfied. A
    non-zero remainder means the plan must not be applied.

    In ``SpendMode.OVERWRITE`` a payer drawn from more than one grant keeps
    only its last draw, reproducing the behaviour of the service this ledger
    replaces.
    """
    remaining = amount
    deductions: dict[str, int] = {}

    for entry, free in zip(entries, available):
        if entry.points <= 0:
            continue
        if remaining == 0:
            break
        if free > 0:
            take = min(free, remaining)
            if mode == SpendMode.OVERWRITE:
                deductions[entry.payer] = -take
            else:
                deductions[entry.payer] = deductions.get(entry.payer, 0) - take
            remaining -= take

    plan = [PayerDelta(payer=payer, points=points) for payer, points in deductions.items()]
    return plan, remaining
