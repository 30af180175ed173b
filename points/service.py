import logging
import threading
from datetime import datetime, timezone
from typing import Optional, Union

from pydantic import ValidationError

from .allocation import plan_spend, resolve_availability, total_available
from .ledger import Ledger
from .models import (
    LedgerEntry,
    PayerDelta,
    SpendMode,
    Transaction,
    TransactionHistoryResponse,
)

logger = logging.getLogger(__name__)


class PointsServiceError(Exception):
    pass


class InvalidInputError(PointsServiceError):
    pass


class InsufficientPointsError(PointsServiceError):
    def __init__(self, requested: int, available: int):
        self.requested = requested
        self.available = available
        self.shortfall = requested - available
        super().__init__(
            f"Insufficient points to spend: requested {requested}, "
            f"available {available}, short by {self.shortfall}"
        )


def _describe(error: ValidationError) -> str:
    parts = []
    for detail in error.errors():
        location = ".".join(str(loc) for loc in detail["loc"])
        parts.append(f"{location}: {detail['msg']}" if location else detail["msg"])
    return "; ".join(parts)


class PointsService:
    def __init__(self, ledger: Optional[Ledger] = None, spend_mode: SpendMode = SpendMode.ACCUMULATE):
        self.ledger = ledger if ledger is not None else Ledger()
        self.spend_mode = spend_mode
        self._lock = threading.RLock()

    def grant(self, payer: str, points: int, timestamp: Union[str, datetime]) -> LedgerEntry:
        try:
            transaction = Transaction(payer=payer, points=points, timestamp=timestamp)
        except ValidationError as e:
            logger.info("Rejected transaction for payer %r: %s", payer, _describe(e))
            raise InvalidInputError(_describe(e)) from e
        return self.add_transaction(transaction)

    def add_transaction(self, transaction: Transaction) -> LedgerEntry:
        with self._lock:
            entry = self.ledger.append(transaction)
            self.ledger.reorder()
        logger.debug("Recorded %+d points for %s at %s", entry.points, entry.payer, entry.timestamp.isoformat())
        return entry

    def spend(self, amount: int) -> list[PayerDelta]:
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise InvalidInputError(f"Spend amount must be an integer, got {amount!r}")
        if amount < 0:
            raise InvalidInputError(f"Cannot spend a negative amount of points: {amount}")

        with self._lock:
            self.ledger.reorder()
            entries = self.ledger.entries()
            available = resolve_availability(entries)
            plan, remaining = plan_spend(entries, available, amount, self.spend_mode)

            if remaining > 0:
                error = InsufficientPointsError(amount, total_available(entries, available))
                logger.warning(str(error))
                raise error

            # Withdrawals must sort after every grant they drew from, including future-dated ones.
            stamp = datetime.now(timezone.utc)
            if entries and entries[-1].timestamp > stamp:
                stamp = entries[-1].timestamp
            for delta in plan:
                self.ledger.append(Transaction(payer=delta.payer, points=delta.points, timestamp=stamp))
            self.ledger.reorder()

        logger.info(
            "Spent %d points: %s",
            amount,
            ", ".join(f"{d.payer} {d.points}" for d in plan) or "nothing to deduct",
        )
        return plan

    def balances(self) -> dict[str, int]:
        with self._lock:
            return dict(self.ledger.projection())

    def history(self, payer: Optional[str] = None, limit: int = 50, offset: int = 0) -> TransactionHistoryResponse:
        with self._lock:
            entries = [e for e in self.ledger.entries() if payer is None or e.payer == payer]
            if payer is None:
                balance = sum(self.ledger.projection().values())
            else:
                balance = self.ledger.projection().get(payer, 0)

        return TransactionHistoryResponse(
            payer=payer,
            entries=entries[offset:offset + limit],
            total_count=len(entries),
            balance=balance,
        )
