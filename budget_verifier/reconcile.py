"""
Budget Verifier

Compares a bank export against a budgeting application export and reports the
bank transactions that never made it into the budget.

Matching Rules:
1. Bank transactions excluded by a filter are ignored entirely.
2. A budget entry is a candidate when its amount equals the bank amount and it
   has not already been matched.
3. The candidate closest in time on or before the bank date wins; budget
   entries dated after the bank date are never chosen. On a tie the earliest
   candidate in the budget export wins.
4. The winner is only accepted when its date is strictly within the match
   window around the bank date.

Matching is greedy and follows bank export order: an earlier bank transaction
may claim a budget entry a later one would also have matched.
"""

import argparse
import csv
import logging
import os
import pathlib
from datetime import timedelta

import pandas as pd

from budget_verifier.filters import is_filtered, load_filters
from budget_verifier.parse import load_bank_transactions, load_budget_transactions
from budget_verifier.utils import (
    DEFAULT_MATCH_WINDOW_DAYS,
    ReconcileConfig,
    format_amount,
    setup_logging,
)

logger = logging.getLogger(__name__)

DEFAULT_FILTER_FILE = 'filters.json'

MISSING_COLUMNS = ['Date', 'Description', 'Details', 'Amount']


def find_candidates(bank_transaction, budget_transactions):
    """Unmatched budget transactions with the same amount, in budget order."""
    return [
        budget_transaction for budget_transaction in budget_transactions
        if budget_transaction.amount == bank_transaction.amount and budget_transaction.matching is None
    ]


def find_closest(bank_transaction, candidates):
    """Pick the candidate dated closest to, and not after, the bank transaction.

    Returns:
        Transaction or None: The first candidate with the smallest non-negative
        time delta, or None if every candidate is dated after the bank date
    """
    closest = None
    closest_hours = None
    for candidate in candidates:
        hours = (bank_transaction.timestamp - candidate.timestamp).total_seconds() / 3600
        # budget entries are made when the purchase happens, the bank posts it later
        if hours >= 0 and (closest_hours is None or hours < closest_hours):
            closest = candidate
            closest_hours = hours
    return closest


def within_window(bank_transaction, candidate, window_days):
    window = timedelta(days=window_days)
    return bank_transaction.timestamp - window < candidate.timestamp < bank_transaction.timestamp + window


def compare_transactions(bank_transactions, budget_transactions, filters=(), config=None):
    """Match bank transactions to budget transactions.

    Matched pairs have their ``matching`` attributes pointed at each other.

    Args:
        bank_transactions (list): Transactions from the bank export
        budget_transactions (list): Transactions from the budget export
        filters (list): Filters excluding bank transactions from matching
        config (ReconcileConfig, optional): Window sizes and verbosity

    Returns:
        list: Bank transactions with no accepted budget counterpart, in bank order
    """
    if config is None:
        config = ReconcileConfig()

    missing_transactions = []

    for bank_transaction in bank_transactions:
        if is_filtered(bank_transaction, filters, config.filter_window_days):
            logger.debug(f"bank item {bank_transaction.describe()} is filtered, skipping")
            continue

        candidates = find_candidates(bank_transaction, budget_transactions)
        if config.verbose and len(candidates) > 1:
            logger.info(
                f"bank item {bank_transaction.describe()} has {len(candidates)} potential matches: "
                f"{[candidate.describe() for candidate in candidates]}"
            )

        closest = find_closest(bank_transaction, candidates)
        # same amount from a very different date is not the same transaction
        if closest is not None and within_window(bank_transaction, closest, config.match_window_days):
            bank_transaction.matching = closest
            closest.matching = bank_transaction

        if config.verbose and len(candidates) > 1:
            logger.info(f"bank item {bank_transaction.describe()} matched with {bank_transaction.matching}")

        if bank_transaction.matching is None:
            missing_transactions.append(bank_transaction)

    if config.verbose:
        logger.info("****************** start bank transactions: ******************")
        for bank_transaction in bank_transactions:
            logger.info(str(bank_transaction))
        logger.info("****************** end bank transactions *********************")

    return missing_transactions


def format_missing_report(missing_transactions):
    """Format the list of missing transactions for display.

    Args:
        missing_transactions (list): Unmatched bank transactions

    Returns:
        str: Report text
    """
    if not missing_transactions:
        return "There are no missing transactions.  Good job budgeter!"

    lines = [f"There are {len(missing_transactions)} missing transactions:"]
    lines.extend(str(transaction) for transaction in missing_transactions)
    return "\n".join(lines)


def format_report_summary(bank_transactions, budget_transactions, missing_transactions):
    """Format a summary of reconciliation results.

    Args:
        bank_transactions (list): All parsed bank transactions
        budget_transactions (list): All parsed budget transactions
        missing_transactions (list): Result of ``compare_transactions``

    Returns:
        str: Formatted summary text
    """
    matched_count = sum(1 for t in bank_transactions if t.matching is not None)
    filtered_count = len(bank_transactions) - matched_count - len(missing_transactions)
    missing_amount = sum(t.amount for t in missing_transactions)
    sign = "-" if missing_amount < 0 else ""

    summary = [
        f"Bank Transactions: {len(bank_transactions)}",
        f"Budget Transactions: {len(budget_transactions)}",
        f"Filtered Transactions: {filtered_count}",
        f"Matched Transactions: {matched_count}",
        f"Missing Transactions: {len(missing_transactions)}",
        f"Missing Amount: {sign}${format_amount(abs(missing_amount))}"
    ]

    return "\n".join(summary)


def transactions_to_frame(transactions):
    """Build a DataFrame of transactions with amounts in currency units."""
    if not transactions:
        return pd.DataFrame(columns=MISSING_COLUMNS)

    return pd.DataFrame({
        'Date': [t.timestamp.strftime('%Y-%m-%d') for t in transactions],
        'Description': [t.description for t in transactions],
        'Details': [t.details or '' for t in transactions],
        'Amount': [t.amount / 100.0 for t in transactions],
    }, columns=MISSING_COLUMNS)


def save_missing_transactions(missing_transactions, output_path):
    """Save missing transactions to a CSV file.

    Args:
        missing_transactions (list): Unmatched bank transactions
        output_path (str or pathlib.Path): Output file, or a directory (any path
            without a file extension) to write missing_transactions.csv into

    Returns:
        pathlib.Path: The file written
    """
    output_path = pathlib.Path(output_path)
    if output_path.is_dir() or not output_path.suffix:
        output_path = output_path / "missing_transactions.csv"

    output_path.parent.mkdir(parents=True, exist_ok=True)

    result = transactions_to_frame(missing_transactions)
    logger.debug(f"Writing {len(result)} missing transactions to {output_path}")
    result.to_csv(output_path, index=False, quoting=csv.QUOTE_NONNUMERIC, float_format='%.2f')
    return output_path


def run(bank_path, budget_path, filter_path=None, config=None, output_path=None):
    """Run a full reconciliation of two export files.

    Returns:
        list: Missing bank transactions

    Raises:
        FileNotFoundError: If an export file does not exist
        ValueError: If an export or the filter file cannot be used
    """
    if config is None:
        config = ReconcileConfig()

    logger.info(f"comparing bank statement {bank_path} to budget entries {budget_path}")

    filters = load_filters(filter_path, verbose=config.verbose)
    bank_transactions = load_bank_transactions(bank_path)
    budget_transactions = load_budget_transactions(budget_path)

    missing_transactions = compare_transactions(bank_transactions, budget_transactions, filters, config)

    for line in format_missing_report(missing_transactions).split("\n"):
        logger.info(line)
    for line in format_report_summary(bank_transactions, budget_transactions, missing_transactions).split("\n"):
        logger.info(line)

    if output_path is not None:
        written = save_missing_transactions(missing_transactions, output_path)
        logger.info(f"Missing transactions written to {written}")

    return missing_transactions


def positive_int(value):
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive number of days, got {value}")
    return number


def build_parser():
    parser = argparse.ArgumentParser(
        prog='budget-verifier',
        description='Find bank transactions missing from a budget export'
    )
    parser.add_argument('bank', help='Path to the bank export (CSV)')
    parser.add_argument('budget', help='Path to the budget export (CSV)')
    parser.add_argument('--filters', type=str, default=os.getenv('BUDGET_FILTERS', DEFAULT_FILTER_FILE),
                        help='Path to the JSON filter file (ignored if it does not exist)')
    parser.add_argument('--window', type=positive_int, default=DEFAULT_MATCH_WINDOW_DAYS,
                        help='Days a budget entry may be from the bank date and still match')
    parser.add_argument('--output', type=str, default=None,
                        help='Write missing transactions to this CSV file; a path without '
                             'a file extension is treated as a directory and gets missing_transactions.csv')
    parser.add_argument('--verbose', action='store_true',
                        help='Log matching details')
    parser.add_argument('--debug', action='store_true',
                        help='Enable debug logging')
    return parser


def main(argv=None):
    """Main execution function."""
    args = build_parser().parse_args(argv)

    setup_logging(debug=args.debug)

    config = ReconcileConfig(match_window_days=args.window, verbose=args.verbose)

    try:
        run(args.bank, args.budget, filter_path=args.filters, config=config, output_path=args.output)
    except Exception as e:
        logger.error(f"Error during reconciliation: {str(e)}")
        raise


if __name__ == '__main__':
    main()
