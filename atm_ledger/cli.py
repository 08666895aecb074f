"""
Interactive ATM driver

Runs PIN authentication once, then the menu loop against a single
AccountLedger until the user exits.
"""

import argparse
import sys
from typing import Callable, List, Optional, TextIO

from .amounts import parse_amount, format_amount
from .config import AtmConfig, get_config
from .ledger import AccountLedger
from .storage import FileStorage
from .logging_config import setup_logging


MENU = (
    "\n--- ATM Menu ---\n"
    "1. Check Balance\n"
    "2. Deposit\n"
    "3. Withdraw\n"
    "4. Mini Statement\n"
    "5. Change PIN\n"
    "6. Exit"
)

EXIT_CHOICE = 6


class AtmSession:
    """Menu-driven session over stdin/stdout"""

    def __init__(
        self,
        ledger: AccountLedger,
        input_func: Optional[Callable[[str], str]] = None,
        output: Optional[TextIO] = None
    ):
        self.ledger = ledger
        self.input_func = input_func or input
        self.output = output or sys.stdout
        self.handlers = {
            1: self.check_balance,
            2: self.deposit,
            3: self.withdraw,
            4: self.mini_statement,
            5: self.change_pin,
        }

    def say(self, message: str = "") -> None:
        print(message, file=self.output)

    def ask(self, prompt: str) -> str:
        """Prompt for one token; raises EOFError when input runs out"""
        print(prompt, end="", file=self.output, flush=True)
        return self.input_func("").strip()

    def _report_persistence(self) -> None:
        if not self.ledger.persisted:
            self.say("Warning: Could not save data.")

    def verify_pin(self) -> bool:
        """
        Allow the configured number of PIN attempts

        Raises:
            EOFError: If input runs out before a PIN is accepted
        """
        tries = self.ledger.config.pin_attempts
        while tries > 0:
            attempt = self.ask("Enter PIN: ")
            if self.ledger.authenticate(attempt):
                return True
            tries -= 1
            self.say(f"Incorrect PIN. {tries} attempt(s) left.")
        return False

    def check_balance(self) -> None:
        self.say(f"Your current balance: {format_amount(self.ledger.balance)}")

    def _ask_amount(self, prompt: str):
        try:
            return parse_amount(self.ask(prompt))
        except ValueError:
            self.say("Invalid amount.")
            return None

    def deposit(self) -> None:
        amount = self._ask_amount("Enter amount to deposit: ")
        if amount is None:
            return
        try:
            self.ledger.deposit(amount)
        except ValueError as e:
            self.say(str(e))
            return
        self._report_persistence()
        self.say(f"Deposited {format_amount(amount)} successfully.")

    def withdraw(self) -> None:
        amount = self._ask_amount("Enter amount to withdraw: ")
        if amount is None:
            return
        try:
            self.ledger.withdraw(amount)
        except ValueError as e:
            self.say(str(e))
            return
        self._report_persistence()
        self.say(f"Withdrawn {format_amount(amount)} successfully.")

    def mini_statement(self) -> None:
        transactions = self.ledger.mini_statement()
        self.say(f"----- Mini Statement (last {len(transactions)}) -----")
        for index, transaction in enumerate(transactions, start=1):
            self.say(f"{index}. {transaction.to_string()}")
        if not transactions:
            self.say("No transactions yet.")

    def change_pin(self) -> None:
        old_pin = self.ask("Enter current PIN: ")
        if not self.ledger.authenticate(old_pin):
            self.say("PIN does not match.")
            return
        new_pin = self.ask("Enter new PIN: ")
        confirm_pin = self.ask("Confirm new PIN: ")
        try:
            self.ledger.change_pin(old_pin, new_pin, confirm_pin)
        except ValueError as e:
            self.say(str(e))
            return
        self._report_persistence()
        self.say("PIN changed successfully.")

    def run(self) -> int:
        """Authenticate, then serve the menu until exit"""
        self.say("Welcome to Simple ATM Simulation")
        try:
            authenticated = self.verify_pin()
        except EOFError:
            self.say("Invalid input. Exiting.")
            return 0
        if not authenticated:
            self.say("Too many incorrect attempts. Exiting.")
            return 0

        while True:
            self.say(MENU)
            try:
                choice = int(self.ask("Enter choice: "))
            except (ValueError, EOFError):
                self.say("Invalid input. Exiting.")
                return 0

            if choice == EXIT_CHOICE:
                self.say("Thank you. Goodbye.")
                return 0

            handler = self.handlers.get(choice)
            if handler is None:
                self.say("Invalid choice. Try again.")
                continue

            try:
                handler()
            except EOFError:
                self.say("Invalid input. Exiting.")
                return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="atm-ledger",
        description="Single-account ATM simulator with a flat-file store",
    )
    parser.add_argument(
        "--data-file",
        help="Path of the ledger store (default: ATM_DATA_FILE or atm_data.txt)",
    )
    return parser


def main(argv: Optional[List[str]] = None, config: Optional[AtmConfig] = None) -> int:
    """Console entry point"""
    args = build_parser().parse_args(argv)
    config = config or get_config()

    setup_logging(
        level=config.log_level,
        log_format=config.log_format,
        log_file=config.log_file,
    )

    storage = FileStorage(args.data_file or config.data_file)
    ledger = AccountLedger.load(storage, config)
    if not ledger.persisted:
        print("Warning: Could not save data.")

    return AtmSession(ledger).run()


if __name__ == "__main__":
    sys.exit(main())
