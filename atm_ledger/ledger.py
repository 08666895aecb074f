"""
Account Ledger Module

The single account behind the ATM: balance, PIN, and a bounded transaction
history. Every mutating operation writes the full state back to the store;
read-only operations never touch it.
"""

from decimal import Decimal
from typing import List, Optional

from .amounts import quantize_amount, parse_amount, format_amount
from .config import AtmConfig, get_config
from .storage import StorageInterface, StorageError, LedgerSnapshot
from .transactions import Transaction, TransactionType, TransactionHistory
from .logging_config import get_logger, log_action


class InsufficientFundsError(ValueError):
    """Raised when a withdrawal exceeds the balance"""

    def __init__(self, balance: Decimal):
        self.balance = balance
        super().__init__(f"Insufficient funds. Current balance: {format_amount(balance)}")


def is_valid_pin(pin: str, length: int) -> bool:
    """Check that a PIN is a numeric token of the given length"""
    return isinstance(pin, str) and len(pin) == length and pin.isascii() and pin.isdigit()


class AccountLedger:
    """
    In-memory account state bound to a store
    """

    def __init__(
        self,
        storage: StorageInterface,
        balance: Decimal,
        pin: str,
        history: Optional[TransactionHistory] = None,
        config: Optional[AtmConfig] = None
    ):
        self.storage = storage
        self.config = config or get_config()
        self.balance = quantize_amount(balance)
        self.pin = pin
        self.history = history if history is not None else TransactionHistory(self.config.max_transactions)
        self.persisted = True
        self.logger = get_logger("atm_ledger.ledger")

        if self.balance < Decimal('0'):
            raise ValueError("Balance cannot be negative")
        if not is_valid_pin(pin, self.config.pin_length):
            raise ValueError(f"PIN must be {self.config.pin_length} digits.")

    @classmethod
    def default(cls, storage: StorageInterface, config: Optional[AtmConfig] = None) -> 'AccountLedger':
        """Create a ledger with the configured initial state"""
        config = config or get_config()
        return cls(
            storage,
            balance=parse_amount(config.default_balance),
            pin=config.default_pin,
            config=config
        )

    @classmethod
    def load(cls, storage: StorageInterface, config: Optional[AtmConfig] = None) -> 'AccountLedger':
        """
        Load the ledger from a store

        A missing or malformed store is replaced by the default state, which
        is written out immediately.
        """
        config = config or get_config()
        logger = get_logger("atm_ledger.ledger")

        try:
            snapshot = storage.load()
        except StorageError as e:
            log_action(logger, "warning", f"Malformed store replaced with defaults: {e}",
                       action="load", resource="store")
            snapshot = None
        else:
            if snapshot is None:
                log_action(logger, "info", "No store found, creating defaults",
                           action="load", resource="store")

        if snapshot is not None and not is_valid_pin(snapshot.pin, config.pin_length):
            log_action(logger, "warning", "Store holds an invalid PIN, replaced with defaults",
                       action="load", resource="store")
            snapshot = None

        if snapshot is None:
            ledger = cls.default(storage, config)
            ledger.save()
            return ledger

        history = TransactionHistory(
            config.max_transactions,
            snapshot.transactions[:config.max_transactions]
        )
        return cls(storage, snapshot.balance, snapshot.pin, history, config)

    def to_snapshot(self) -> LedgerSnapshot:
        return LedgerSnapshot(
            balance=self.balance,
            pin=self.pin,
            transactions=self.history.to_list()
        )

    def save(self) -> bool:
        """
        Write the full state to the store

        Returns:
            True if the write succeeded; on failure the in-memory state is
            kept and a warning is logged
        """
        try:
            self.storage.save(self.to_snapshot())
        except OSError as e:
            log_action(self.logger, "warning", f"Could not save data: {e}",
                       action="save", resource="store")
            self.persisted = False
            return False

        self.persisted = True
        return True

    def authenticate(self, pin_attempt: str) -> bool:
        """Compare a PIN attempt with the stored PIN"""
        return pin_attempt == self.pin

    def _validate_amount(self, amount: Decimal) -> Decimal:
        try:
            amount = quantize_amount(amount)
        except ValueError:
            raise ValueError("Invalid amount.")
        if amount <= Decimal('0'):
            raise ValueError("Invalid amount.")
        return amount

    def deposit(self, amount: Decimal) -> Transaction:
        """
        Add funds to the balance

        Raises:
            ValueError: If the amount is not positive or the new balance
                is too large to store with two decimal places
        """
        amount = self._validate_amount(amount)
        try:
            new_balance = quantize_amount(self.balance + amount)
        except ValueError:
            raise ValueError("Invalid amount.")

        transaction = Transaction(TransactionType.DEPOSIT, amount)
        self.balance = new_balance
        self.history.append(transaction)
        self.save()

        log_action(self.logger, "info", f"Deposited {format_amount(amount)}",
                   action="deposit", resource="ledger",
                   extra={"amount": format_amount(amount), "balance": format_amount(self.balance)})
        return transaction

    def withdraw(self, amount: Decimal) -> Transaction:
        """
        Take funds from the balance

        Raises:
            ValueError: If the amount is not positive
            InsufficientFundsError: If the amount exceeds the balance
        """
        amount = self._validate_amount(amount)
        if amount > self.balance:
            raise InsufficientFundsError(self.balance)

        transaction = Transaction(TransactionType.WITHDRAW, amount)
        self.balance -= amount
        self.history.append(transaction)
        self.save()

        log_action(self.logger, "info", f"Withdrew {format_amount(amount)}",
                   action="withdraw", resource="ledger",
                   extra={"amount": format_amount(amount), "balance": format_amount(self.balance)})
        return transaction

    def mini_statement(self) -> List[Transaction]:
        """Most recent transactions, oldest first"""
        return self.history.to_list()

    def change_pin(self, old_pin: str, new_pin: str, confirm_pin: str) -> None:
        """
        Replace the PIN after checking the current one and the confirmation

        Raises:
            ValueError: If the current PIN is wrong, the confirmation differs,
                or the new PIN has the wrong format
        """
        if not self.authenticate(old_pin):
            raise ValueError("PIN does not match.")
        if new_pin != confirm_pin:
            raise ValueError("PINs do not match. Aborting.")
        if not is_valid_pin(new_pin, self.config.pin_length):
            raise ValueError(f"PIN must be {self.config.pin_length} digits.")

        self.pin = new_pin
        self.save()

        log_action(self.logger, "info", "PIN changed", action="change_pin", resource="ledger")
