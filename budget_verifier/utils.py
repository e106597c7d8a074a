"""
Utility functions for the budget verifier.

This module contains helper functions that are used across the system but
are not directly related to parsing or matching transactions.
"""

import os
import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_MATCH_WINDOW_DAYS = 5
DEFAULT_FILTER_WINDOW_DAYS = 1


@dataclass
class ReconcileConfig:
    """Settings for a single reconciliation run.

    Attributes:
        match_window_days (int): A budget entry is only accepted as a match when
            its date is strictly less than this many days from the bank date.
        filter_window_days (int): Window around a dated filter's date.
        verbose (bool): Log candidate details while matching.
    """
    match_window_days: int = DEFAULT_MATCH_WINDOW_DAYS
    filter_window_days: int = DEFAULT_FILTER_WINDOW_DAYS
    verbose: bool = False


def setup_logging(debug=False, log_level='info'):
    """Configure logging for the application."""
    # Determine log level
    if debug:
        level = logging.DEBUG
    else:
        level = getattr(logging, log_level.upper(), logging.INFO)

    format = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

    # Get log file path from environment or use default
    log_file = os.getenv('LOG_FILE', 'debug.log')

    log_dir = os.path.dirname(log_file)
    if log_dir and not os.path.exists(log_dir):
        os.makedirs(log_dir, exist_ok=True)

    # Set up logging to file and console
    logging.basicConfig(
        level=level,
        format=format,
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler()
        ]
    )

    return log_file


def format_amount(cents):
    """Render an amount in cents as a two-decimal currency string (-450 -> '-4.50')."""
    return f"{cents / 100.0:.2f}"
