"""
Exclusion filters for bank transactions.

Filters describe bank transactions that are never expected to show up in the
budget (transfers between own accounts, refunds, ...). They are loaded from a
JSON file holding a list of objects:

    [
        {"regex": "ONLINE TRANSFER", "min": -100000, "max": 100000},
        {"regex": "AMAZON", "min": 1999, "max": 1999, "date": "2024-03-05"}
    ]

``min`` and ``max`` are inclusive bounds in cents; ``date`` is optional.
"""

import datetime
import json
import logging
import os
import re
from dataclasses import dataclass
from typing import List, Optional

from budget_verifier.utils import DEFAULT_FILTER_WINDOW_DAYS, format_amount

logger = logging.getLogger(__name__)

FILTER_DATE_FORMAT = '%Y-%m-%d'


@dataclass(frozen=True)
class Filter:
    """A rule excluding matching bank transactions from reconciliation."""
    regex: str
    min_amount: int
    max_amount: int
    date: Optional[datetime.date] = None

    def __str__(self):
        return "[filter:'{}', min:{}, max:{}]".format(
            self.regex, format_amount(self.min_amount), format_amount(self.max_amount))

    def matches_description(self, description):
        try:
            return re.search(self.regex, description, re.IGNORECASE) is not None
        except re.error as e:
            logger.debug(f"Filter regex {self.regex!r} does not compile, ignoring: {str(e)}")
            return False

    def matches_amount(self, amount):
        return self.min_amount <= amount <= self.max_amount

    def matches_date(self, timestamp, window_days=DEFAULT_FILTER_WINDOW_DAYS):
        if self.date is None:
            return True
        window = datetime.timedelta(days=window_days)
        return self.date - window < timestamp < self.date + window


def is_filtered(transaction, filters, window_days=DEFAULT_FILTER_WINDOW_DAYS):
    """Check whether a transaction is excluded by any of the filters.

    Filters are checked in order. A filter without a date that matches on
    description and amount excludes the transaction outright. A dated filter
    additionally needs the transaction date inside its window; if it is not,
    the remaining filters are still checked.

    Args:
        transaction (Transaction): Bank transaction to check
        filters (list): Filters in configuration order
        window_days (int): Half-width of a dated filter's window, exclusive

    Returns:
        bool: True if the transaction should be left out of reconciliation
    """
    for f in filters:
        if not (f.matches_description(transaction.description) and f.matches_amount(transaction.amount)):
            continue

        if f.date is None:
            return True

        if f.matches_date(transaction.timestamp, window_days):
            return True

    return False


def _parse_filter(entry, index):
    if not isinstance(entry, dict):
        raise ValueError(f"Filter {index} must be an object, got {type(entry).__name__}")

    missing_fields = [name for name in ('regex', 'min', 'max') if name not in entry]
    if missing_fields:
        raise ValueError(f"Filter {index} is missing required fields: {missing_fields}")

    regex = entry['regex']
    if not isinstance(regex, str):
        raise ValueError(f"Filter {index} regex must be a string")

    # bool is an int subclass
    for name in ('min', 'max'):
        value = entry[name]
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"Filter {index} {name} must be an integer amount in cents, got {value!r}")

    filter_date = None
    raw_date = entry.get('date')
    if raw_date:
        try:
            filter_date = datetime.datetime.strptime(raw_date, FILTER_DATE_FORMAT).date()
        except (TypeError, ValueError):
            raise ValueError(f"Filter {index} has an invalid date: {raw_date!r}")

    return Filter(regex=regex, min_amount=entry['min'], max_amount=entry['max'], date=filter_date)


def load_filters(filter_path, verbose=False) -> List[Filter]:
    """Load filters from a JSON file.

    Args:
        filter_path (str or pathlib.Path or None): Path to the filter file
        verbose (bool): Log every filter instead of just the count

    Returns:
        list: Filters in file order; empty if the file does not exist

    Raises:
        ValueError: If the file cannot be read or its contents are invalid
    """
    if filter_path is None or not os.path.exists(filter_path):
        logger.info(f"No filter file found at {filter_path}, continuing without filters")
        return []

    try:
        with open(filter_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError) as e:
        raise ValueError(f"Failed to read filter file {filter_path}: {str(e)}")
    except json.JSONDecodeError as e:
        raise ValueError(f"Failed to parse filter file {filter_path}: {str(e)}")

    if not isinstance(data, list):
        raise ValueError(f"Filter file {filter_path} must contain a list of filters")

    filters = [_parse_filter(entry, i) for i, entry in enumerate(data)]

    if verbose:
        logger.info(f"filters: {[str(f) for f in filters]}")
    else:
        logger.info(f"found {len(filters)} filters")

    return filters
