"""
Budget Verifier - finds bank transactions missing from a budget.

This package provides functionality to:
- Read bank exports in several known layouts (Bank of America debit and
  credit, Chase credit) and budgeting application exports
- Exclude known transactions with user-defined filters
- Match bank transactions to budget entries by amount and date
- Report the bank transactions that have no budget entry

The common transaction model includes:
- timestamp: Date of the transaction
- description: Merchant or payee
- details: Budget category (budget exports only)
- amount: Signed amount in cents (negative for debits)
"""

from .transaction import Transaction
from .parse import (
    read_records,
    detect_bank_format,
    parse_bank_transactions,
    parse_budget_transactions,
    load_bank_transactions,
    load_budget_transactions
)
from .filters import Filter, is_filtered, load_filters
from .reconcile import (
    compare_transactions,
    format_missing_report,
    format_report_summary,
    save_missing_transactions,
    run
)
from .utils import ReconcileConfig

__all__ = [
    'Transaction',
    'read_records',
    'detect_bank_format',
    'parse_bank_transactions',
    'parse_budget_transactions',
    'load_bank_transactions',
    'load_budget_transactions',
    'Filter',
    'is_filtered',
    'load_filters',
    'compare_transactions',
    'format_missing_report',
    'format_report_summary',
    'save_missing_transactions',
    'run',
    'ReconcileConfig'
]
