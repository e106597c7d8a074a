import pytest

from budget_verifier.parse import (
    read_records,
    load_bank_transactions,
    load_budget_transactions,
)


class TestDataLoading:
    """Test suite for reading raw export files"""

    def test_csv_import(self, write_csv, create_records):
        """Rows keep their own field counts"""
        file_path = write_csv('bank.csv', create_records('boa_debit'))
        records = read_records(file_path)

        assert records[0] == ['Description', '', 'Summary Amt.']
        assert records[5] == []
        assert records[6] == ['Date', 'Description', 'Amount', 'Running Bal.']
        assert records[8] == ['03/05/2024', 'COFFEE SHOP #12', '-4.50', '995.50']

    def test_quoted_fields(self, tmp_path):
        file_path = tmp_path / 'quoted.csv'
        file_path.write_text('Date,Description,Amount,Running Bal.\n03/05/2024,"SHOP, INC","-1,234.50",0\n')

        records = read_records(str(file_path))
        assert records[1] == ['03/05/2024', 'SHOP, INC', '-1,234.50', '0']

    def test_byte_order_mark_stripped(self, write_csv, create_records):
        file_path = write_csv('budget.csv', create_records('budget'), encoding='utf-8-sig')
        records = read_records(file_path)
        assert records[0][0] == 'Date'

    def test_cp1252_fallback(self, tmp_path):
        file_path = tmp_path / 'cafe.csv'
        file_path.write_bytes('Date,Description,Amount,x\n03/05/2024,CAF\xc9,-4.50,0\n'.encode('cp1252'))

        records = read_records(file_path)
        assert records[1][1] == 'CAF\xc9'

    def test_missing_file(self, tmp_path):
        missing = tmp_path / 'nonexistent.csv'
        with pytest.raises(FileNotFoundError, match='nonexistent.csv'):
            read_records(missing)

    def test_directory(self, tmp_path):
        with pytest.raises(ValueError, match='directory'):
            read_records(tmp_path)

    def test_empty_file(self, tmp_path):
        empty_file = tmp_path / 'empty.csv'
        empty_file.touch()
        assert read_records(empty_file) == []


class TestTransactionLoading:
    """Test suite for reading and parsing export files in one step"""

    def test_load_bank(self, write_csv, create_records):
        file_path = write_csv('bank.csv', create_records('chase_credit'))
        transactions = load_bank_transactions(file_path)
        assert [t.amount for t in transactions] == [-1999, 101999]

    def test_load_budget(self, write_csv, create_records):
        file_path = write_csv('budget.csv', create_records('budget'))
        transactions = load_budget_transactions(file_path)
        assert [t.details for t in transactions] == ['Dining Out', 'Income']

    def test_load_unrecognized_bank(self, write_csv):
        file_path = write_csv('bank.csv', [['When', 'What', 'How Much', 'Balance']])
        with pytest.raises(ValueError):
            load_bank_transactions(file_path)
