"""
Storage Backend Module

Provides abstract storage interface and implementations for in-memory (testing)
and flat-file (persistence) ledger stores.

The store is plain whitespace-separated text:

    <balance> <pin> <tx_count>
    <type> <amount>        (repeated tx_count times, oldest first)

Monetary values are written with two decimal places.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import List, Optional, Union

from .amounts import parse_amount, format_amount
from .transactions import Transaction, TransactionType
from .logging_config import get_logger, log_action


logger = get_logger("atm_ledger.storage")


class StorageError(Exception):
    """Raised when a store cannot be parsed"""
    pass


@dataclass
class LedgerSnapshot:
    """Plain persisted state of the ledger"""
    balance: Decimal
    pin: str
    transactions: List[Transaction] = field(default_factory=list)


def serialize_snapshot(snapshot: LedgerSnapshot) -> str:
    """Render a snapshot in the flat store format"""
    lines = [f"{format_amount(snapshot.balance)} {snapshot.pin} {len(snapshot.transactions)}"]
    for transaction in snapshot.transactions:
        lines.append(f"{transaction.transaction_type.value} {format_amount(transaction.amount)}")
    return "\n".join(lines) + "\n"


def parse_snapshot(text: str) -> LedgerSnapshot:
    """
    Parse the flat store format

    A bad header raises StorageError. A bad or missing transaction row ends
    the history at that row; the rows read so far are kept.

    Raises:
        StorageError: If the header cannot be parsed
    """
    tokens = text.split()
    if len(tokens) < 3:
        raise StorageError("Store header is incomplete")

    balance_token, pin, count_token = tokens[:3]
    try:
        balance = parse_amount(balance_token)
    except ValueError as e:
        raise StorageError(f"Invalid balance in store: {e}")
    if balance < Decimal('0'):
        raise StorageError("Balance in store is negative")

    try:
        declared_count = int(count_token)
    except ValueError:
        raise StorageError(f"Invalid transaction count in store: '{count_token}'")
    if declared_count < 0:
        raise StorageError("Transaction count in store is negative")

    transactions = []
    rows = tokens[3:]
    for index in range(declared_count):
        row = rows[index * 2:index * 2 + 2]
        try:
            if len(row) != 2:
                raise ValueError("row is incomplete")
            transactions.append(Transaction(TransactionType(row[0]), parse_amount(row[1])))
        except ValueError as e:
            log_action(
                logger, "warning",
                f"Store history truncated at row {index + 1} of {declared_count}: {e}",
                action="load", resource="store"
            )
            break

    return LedgerSnapshot(balance=balance, pin=pin, transactions=transactions)


class StorageInterface(ABC):
    """Abstract interface for ledger stores"""

    @abstractmethod
    def load(self) -> Optional[LedgerSnapshot]:
        """Load the snapshot, or None if the store does not exist"""
        pass

    @abstractmethod
    def save(self, snapshot: LedgerSnapshot) -> None:
        """Overwrite the store with a snapshot"""
        pass

    @abstractmethod
    def exists(self) -> bool:
        """Check if the store exists"""
        pass


class InMemoryStorage(StorageInterface):
    """In-memory storage implementation for testing"""

    def __init__(self, text: Optional[str] = None):
        self._text = text

    def load(self) -> Optional[LedgerSnapshot]:
        if self._text is None:
            return None
        return parse_snapshot(self._text)

    def save(self, snapshot: LedgerSnapshot) -> None:
        self._text = serialize_snapshot(snapshot)

    def exists(self) -> bool:
        return self._text is not None

    def get_raw(self) -> Optional[str]:
        """Get stored text for debugging/inspection"""
        return self._text


class FileStorage(StorageInterface):
    """Flat text file storage implementation for persistence"""

    def __init__(self, path: Union[str, Path] = "atm_data.txt"):
        self.path = Path(path)

    def load(self) -> Optional[LedgerSnapshot]:
        """
        Load the snapshot from disk

        Raises:
            StorageError: If the file exists but cannot be read or parsed
        """
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Cannot read store {self.path}: {e}")
        return parse_snapshot(text)

    def save(self, snapshot: LedgerSnapshot) -> None:
        """
        Overwrite the file with a snapshot

        Raises:
            OSError: If the file cannot be written
        """
        self.path.write_text(serialize_snapshot(snapshot), encoding="utf-8")

    def exists(self) -> bool:
        return self.path.is_file()
