"""
ATM Ledger Simulator

A single-account teller machine with PIN authentication, a bounded
transaction history, and a flat-file store that survives between runs.
All monetary values use Decimal precision.
"""

__version__ = "1.0.0"
