"""
Pytest configuration and fixtures for household-finance-mcp tests.
"""

import json
from pathlib import Path
from typing import Any, Dict, List

import pytest

from household_finance_mcp.core.database import FinanceDatabase
from household_finance_mcp.core.decoder import decode_accounts, decode_transactions
from household_finance_mcp.core.store import MemoryStore


def _account_records() -> List[Dict[str, Any]]:
    return [
        {"id": "acc_bca_h", "name": "BCA Utama", "group": "Bank Accounts",
         "balance": 5_000_000, "owner": "Husband"},
        {"id": "acc_mandiri_w", "name": "Mandiri Istri", "group": "Bank Accounts",
         "balance": 3_000_000, "owner": "Wife"},
        {"id": "acc_cash_h", "name": "Dompet Suami", "group": "Cash",
         "balance": 500_000, "owner": "Husband"},
        {"id": "acc_cc", "name": "BCA Credit Card", "group": "Credit Cards",
         "balance": -2_000_000, "owner": "Husband"},
        {"id": "acc_hidden", "name": "Old Savings", "group": "Investments",
         "balance": 1_000_000, "owner": "Husband", "includeInTotals": False},
    ]


def _transaction_records() -> List[Dict[str, Any]]:
    return [
        {"id": "tx1", "date": "2026-03-01T09:00:00", "type": "INCOME", "amount": 2_000_000,
         "accountId": "acc_bca_h", "category": "Salary", "notes": "Gaji Maret"},
        {"id": "tx2", "date": "2026-03-05T10:00:00", "type": "TRANSFER", "amount": 500_000,
         "accountId": "acc_bca_h", "toAccountId": "acc_cash_h", "category": "Transfer",
         "fees": 2_500},
        {"id": "tx3", "date": "2026-03-10T19:00:00", "type": "EXPENSE", "amount": 150_000,
         "accountId": "acc_cash_h", "category": "Food", "notes": "Makan malam"},
        {"id": "tx4", "date": "2026-03-12T08:00:00", "type": "INCOME", "amount": 1_000_000,
         "accountId": "acc_mandiri_w", "category": "Freelance"},
        {"id": "tx5", "date": "2026-03-14T20:00:00", "type": "EXPENSE", "amount": 300_000,
         "accountId": "acc_cc", "category": "Shopping", "notes": "Sepatu"},
    ]


@pytest.fixture
def account_records() -> List[Dict[str, Any]]:
    """Stored camelCase account records."""
    return _account_records()


@pytest.fixture
def transaction_records() -> List[Dict[str, Any]]:
    """Stored camelCase transaction records, oldest first."""
    return _transaction_records()


@pytest.fixture
def sample_document(account_records, transaction_records) -> Dict[str, Any]:
    return {"accounts": account_records, "transactions": transaction_records}


@pytest.fixture
def sample_accounts(account_records):
    accounts, errors = decode_accounts(account_records)
    assert errors == []
    return accounts


@pytest.fixture
def sample_transactions(transaction_records):
    transactions, errors = decode_transactions(transaction_records)
    assert errors == []
    return transactions


@pytest.fixture
def data_path(tmp_path: Path, sample_document) -> Path:
    """Sample document written to a temporary JSON file."""
    path = tmp_path / "data.json"
    path.write_text(json.dumps(sample_document), encoding="utf-8")
    return path


@pytest.fixture
def database(data_path: Path) -> FinanceDatabase:
    """Database backed by the sample document on disk."""
    return FinanceDatabase(data_path)


@pytest.fixture
def memory_database(sample_document) -> FinanceDatabase:
    """Database backed by an in-memory copy of the sample document."""
    return FinanceDatabase(store=MemoryStore(sample_document))
