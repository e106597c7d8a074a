import csv
from datetime import date

import pytest

from budget_verifier.transaction import Transaction

# Raw export rows for each supported layout
boa_debit_records = [
    ['Description', '', 'Summary Amt.'],
    ['Beginning balance as of 03/01/2024', '', '1,000.00'],
    ['Total credits', '', '1,250.00'],
    ['Total debits', '', '-4.50'],
    ['Ending balance as of 03/31/2024', '', '2,245.50'],
    [],
    ['Date', 'Description', 'Amount', 'Running Bal.'],
    ['03/01/2024', 'Beginning balance as of 03/01/2024', '', '1,000.00'],
    ['03/05/2024', 'COFFEE SHOP #12', '-4.50', '995.50'],
    ['03/06/2024', 'PAYROLL DEPOSIT', '1,250.00', '2,245.50'],
]

boa_credit_records = [
    ['Posted Date', 'Reference Number', 'Payee', 'Address', 'Amount'],
    ['03/05/2024', '24692164', 'NETFLIX.COM', 'Los Gatos CA', '-15.49'],
    ['03/07/2024', '24692165', 'PAYMENT - THANK YOU', '', '200.00'],
]

chase_credit_records = [
    ['Transaction Date', 'Post Date', 'Description', 'Category', 'Type', 'Amount', 'Memo'],
    ['03/04/2024', '03/05/2024', 'AMAZON MKTPL', 'Shopping', 'Sale', '-19.99', ''],
    ['03/08/2024', '03/09/2024', 'AUTOMATIC PAYMENT - THANK', '', 'Payment', '1,019.99', ''],
]

budget_records = [
    ['Date', 'Account', 'Payee', 'Category', 'Memo', 'Amount'],
    ['03/04/2024', 'Checking', 'Coffee', 'Dining Out', '', '-4.50'],
    ['03/06/2024', 'Checking', 'Paycheck', 'Income', '', '1,250.00'],
]


@pytest.fixture
def create_records():
    """Helper fixture returning a copy of the sample rows for a layout"""
    def _create_records(format_name):
        sample_records = {
            'boa_debit': boa_debit_records,
            'boa_credit': boa_credit_records,
            'chase_credit': chase_credit_records,
            'budget': budget_records
        }
        if format_name not in sample_records:
            raise ValueError(f"Unknown format: {format_name}")
        return [list(record) for record in sample_records[format_name]]
    return _create_records


@pytest.fixture
def write_csv(tmp_path):
    """Helper fixture writing rows to a CSV file under tmp_path"""
    def _write_csv(name, records, encoding='utf-8'):
        file_path = tmp_path / name
        with open(file_path, 'w', encoding=encoding, newline='') as f:
            csv.writer(f).writerows(records)
        return file_path
    return _write_csv


@pytest.fixture
def make_transaction():
    """Helper fixture building a Transaction from an ISO date string"""
    def _make_transaction(day, amount, description='TEST TRANSACTION', details=None):
        return Transaction(
            timestamp=date.fromisoformat(day),
            description=description,
            amount=amount,
            details=details
        )
    return _make_transaction
