"""
Points Loyalty Ledger

This module provides:
- An append-only, chronologically ordered ledger of payer point entries
- Per-payer balance projection
- Oldest-first spending that never drives a payer's history negative
- All-or-nothing spend plans
"""

from .models import (
    LedgerEntry,
    PayerDelta,
    SpendMode,
    Transaction,
)
from .ledger import Ledger
from .service import (
    InsufficientPointsError,
    InvalidInputError,
    PointsService,
    PointsServiceError,
)

__all__ = [
    "LedgerEntry",
    "PayerDelta",
    "SpendMode",
    "Transaction",
    "Ledger",
    "InsufficientPointsError",
    "InvalidInputError",
    "PointsService",
    "PointsServiceError",
]
