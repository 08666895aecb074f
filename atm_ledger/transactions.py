"""
Transaction Module

Deposit and withdrawal records plus the bounded history that backs the
mini statement. Once full, the history evicts its oldest entry on append.
"""

from decimal import Decimal
from dataclasses import dataclass
from collections import deque
from typing import Iterable, Iterator, List, Optional
from enum import Enum

from .amounts import quantize_amount, format_amount


DEFAULT_HISTORY_CAPACITY = 10


class TransactionType(Enum):
    """Kinds of ledger transactions; the value is the store token"""
    DEPOSIT = "Deposit"
    WITHDRAW = "Withdraw"


@dataclass(frozen=True)
class Transaction:
    """
    A single deposit or withdrawal. Immutable once created.
    """
    transaction_type: TransactionType
    amount: Decimal

    def __post_init__(self):
        amount = quantize_amount(self.amount)
        if amount < Decimal('0'):
            raise ValueError("Transaction amount cannot be negative")
        object.__setattr__(self, 'amount', amount)

    def to_string(self) -> str:
        """Format for display"""
        return f"{self.transaction_type.value} : {format_amount(self.amount)}"


class TransactionHistory:
    """
    Bounded FIFO of the most recent transactions, oldest first
    """

    def __init__(self, capacity: int = DEFAULT_HISTORY_CAPACITY,
                 transactions: Optional[Iterable[Transaction]] = None):
        if capacity < 1:
            raise ValueError("History capacity must be at least 1")
        self.capacity = capacity
        self._entries: deque = deque(maxlen=capacity)
        for transaction in transactions or ():
            self.append(transaction)

    def append(self, transaction: Transaction) -> None:
        """Append a transaction, evicting the oldest one when at capacity"""
        self._entries.append(transaction)

    @property
    def is_full(self) -> bool:
        return len(self._entries) == self.capacity

    def to_list(self) -> List[Transaction]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Transaction]:
        return iter(self._entries)

    def __getitem__(self, index: int) -> Transaction:
        return self._entries[index]

    def __eq__(self, other) -> bool:
        if not isinstance(other, TransactionHistory):
            return False
        return self.capacity == other.capacity and self.to_list() == other.to_list()

    def __repr__(self) -> str:
        return f"TransactionHistory(capacity={self.capacity}, entries={self.to_list()!r})"
