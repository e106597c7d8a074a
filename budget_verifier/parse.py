"""
Record parsing for bank and budget exports.

Raw exports are read as plain rows of strings and converted into
``Transaction`` objects. Bank exports come in several layouts which are
identified by their header row; budget exports always use a single layout with
the header on the first row.

Supported bank layouts:
- boa_debit: Date, Description, Amount, ... (a summary divider row follows the header)
- boa_credit: Posted Date, Reference Number, Payee, Address, Amount
- chase_credit: Transaction Date, Post Date, Description, Category, Type, Amount, Memo

Budget layout:
- Date, <unused>, Description, Details, <unused>, Amount

Dates are exactly MM/DD/YYYY. Amounts may contain grouping commas but no
surrounding whitespace, and are stored as integer cents.
"""

import csv
import logging
import os
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import numpy as np
import pandas as pd

from budget_verifier.transaction import Transaction

logger = logging.getLogger(__name__)

DATE_FORMAT = '%m/%d/%Y'
DATE_PATTERN = r'\d{2}/\d{2}/\d{4}'

ENCODINGS = ['utf-8-sig', 'utf-8', 'cp1252']


@dataclass(frozen=True)
class RecordLayout:
    """Column positions of the fields making up a transaction."""
    date: int
    description: int
    amount: int
    details: Optional[int] = None

    @property
    def width(self):
        columns = [self.date, self.description, self.amount]
        if self.details is not None:
            columns.append(self.details)
        return max(columns) + 1


@dataclass(frozen=True)
class BankFormat:
    """A known bank export layout, recognized by the text of its header row.

    Attributes:
        name (str): Format identifier used in log output.
        signature (dict): Header column index -> expected header text.
        min_fields (int): Minimum number of fields the header row must have.
        offset (int): Rows between the header and the first data row.
        layout (RecordLayout): Column mapping for the data rows.
    """
    name: str
    signature: Dict[int, str]
    min_fields: int
    offset: int
    layout: RecordLayout

    def matches(self, record):
        if len(record) < self.min_fields:
            return False
        return all(record[i].strip() == text for i, text in self.signature.items())


BANK_FORMATS = [
    BankFormat(
        name='boa_debit',
        signature={0: 'Date', 1: 'Description', 2: 'Amount'},
        min_fields=4,
        offset=2,
        layout=RecordLayout(date=0, description=1, amount=2),
    ),
    BankFormat(
        name='boa_credit',
        signature={0: 'Posted Date', 1: 'Reference Number', 2: 'Payee'},
        min_fields=4,
        offset=1,
        layout=RecordLayout(date=0, description=2, amount=4),
    ),
    BankFormat(
        name='chase_credit',
        signature={0: 'Transaction Date', 1: 'Post Date', 3: 'Category'},
        min_fields=5,
        offset=1,
        layout=RecordLayout(date=0, description=2, amount=5),
    ),
]

BUDGET_LAYOUT = RecordLayout(date=0, description=2, amount=5, details=3)


def read_records(file_path) -> List[List[str]]:
    """Read a delimited file into a list of rows.

    Rows may have differing numbers of fields; bank exports often start with a
    short summary block before the real header.

    Args:
        file_path (str or pathlib.Path): Path to the file

    Returns:
        list: Rows, each a list of string fields

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the path is a directory or the file cannot be decoded
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"File not found: {file_path}")

    if os.path.isdir(file_path):
        raise ValueError(f"Path is a directory: {file_path}")

    for encoding in ENCODINGS:
        try:
            with open(file_path, 'r', encoding=encoding, newline='') as f:
                records = list(csv.reader(f))
            logger.debug(f"Read {len(records)} rows from {file_path} with encoding: {encoding}")
            return records
        except UnicodeDecodeError:
            continue
        except csv.Error as e:
            raise ValueError(f"Error reading {file_path}: {str(e)}")

    raise ValueError(f"Could not read {file_path} with any supported encoding")


def detect_bank_format(records) -> Tuple[BankFormat, int]:
    """Find the bank format and the index of the first data row.

    Every row is checked, and the last header found wins, so summary rows that
    happen to look like a header ahead of the real one are ignored.

    Raises:
        ValueError: If no known header is found
    """
    detected = None
    start = -1
    for i, record in enumerate(records):
        for bank_format in BANK_FORMATS:
            if bank_format.matches(record):
                detected = bank_format
                start = i + bank_format.offset
                break

    if detected is None:
        raise ValueError("Failed to find a recognized bank format header")

    logger.info(f"Identified bank format: {detected.name} (data starts at row {start})")
    return detected, start


def parse_records(records, layout, source='bank') -> List[Transaction]:
    """Convert data rows into transactions using a column layout.

    Rows whose date or amount cannot be parsed are logged and skipped; exports
    regularly end in summary rows that are not transactions.

    Args:
        records (list): Data rows (no header)
        layout (RecordLayout): Column mapping
        source (str): 'bank' or 'budget', used in log output

    Returns:
        list: Parsed transactions in row order
    """
    if not records:
        return []

    df = pd.DataFrame([list(record[:layout.width]) for record in records])
    df = df.reindex(columns=range(layout.width))

    raw_dates = df[layout.date].where(df[layout.date].notna(), '').astype(str)
    dates = pd.to_datetime(raw_dates, format=DATE_FORMAT, errors='coerce')
    # two-digit month and day only
    dates = dates.where(raw_dates.str.fullmatch(DATE_PATTERN))

    raw_amounts = df[layout.amount].where(df[layout.amount].notna(), '').astype(str)
    amounts = pd.to_numeric(raw_amounts.str.replace(',', '', regex=False), errors='coerce')
    amounts = amounts.astype(float).where(raw_amounts == raw_amounts.str.strip())
    # round half to even
    cents = np.rint(amounts * 100)

    valid = (dates.notna() & np.isfinite(cents)).to_numpy()

    transactions = []
    for position, record in enumerate(records):
        if not valid[position]:
            reason = 'invalid timestamp' if pd.isna(dates.iloc[position]) else 'invalid amount'
            logger.info(f"{reason} in {source} record, skipping: {record}")
            continue

        transactions.append(Transaction(
            timestamp=dates.iloc[position].date(),
            description=record[layout.description],
            amount=int(cents.iloc[position]),
            details=record[layout.details] if layout.details is not None else None,
        ))

    return transactions


def parse_bank_transactions(records) -> List[Transaction]:
    """Parse a raw bank export into transactions.

    Raises:
        ValueError: If the export layout is not recognized
    """
    bank_format, start = detect_bank_format(records)
    transactions = parse_records(records[start:], bank_format.layout, source='bank')
    logger.info(f"Parsed {len(transactions)} bank transactions")
    return transactions


def parse_budget_transactions(records) -> List[Transaction]:
    """Parse a raw budget export into transactions. The first row is the header."""
    transactions = parse_records(records[1:], BUDGET_LAYOUT, source='budget')
    logger.info(f"Parsed {len(transactions)} budget transactions")
    return transactions


def load_bank_transactions(file_path):
    return parse_bank_transactions(read_records(file_path))


def load_budget_transactions(file_path):
    return parse_budget_transactions(read_records(file_path))
