#!/usr/bin/env python3
"""
Write a demo household data document.

Seeds the husband/wife demo accounts with a few weeks of transactions, or
converts a flat spreadsheet export (JSON list of rows) into the native
document format.

Usage:
    python scripts/seed_demo_data.py [--output PATH] [--from-export FILE]
"""

import argparse
import json
from datetime import datetime, timedelta
from pathlib import Path

from household_finance_mcp.core.database import DEFAULT_DATA_PATH
from household_finance_mcp.core.decoder import (
    DEFAULT_CATEGORIES,
    decode_flat_export,
    encode_account,
    encode_transaction,
)
from household_finance_mcp.core.store import (
    ACCOUNTS,
    CATEGORIES,
    FUND_DEPOSITS,
    FUNDS,
    TRANSACTIONS,
    JsonFileStore,
)
from household_finance_mcp.models.account import Account
from household_finance_mcp.models.transaction import Transaction

DEMO_ACCOUNTS = [
    Account(account_id="acc_bca_h", name="BCA Utama", group="Bank Accounts", balance=5_000_000, owner="Husband"),
    Account(account_id="acc_mandiri_w", name="Mandiri Istri", group="Bank Accounts", balance=3_000_000, owner="Wife"),
    Account(account_id="acc_cash_h", name="Dompet Suami", group="Cash", balance=500_000, owner="Husband"),
    Account(account_id="acc_cash_w", name="Dompet Istri", group="Cash", balance=500_000, owner="Wife"),
    Account(account_id="acc_cc", name="BCA Credit Card", group="Credit Cards", balance=-2_000_000, owner="Husband"),
    Account(account_id="acc_invest", name="Bibit / Stock", group="Investments", balance=10_000_000, owner="Husband"),
    Account(
        account_id="acc_gold",
        name="Emas Antam",
        group="Investments",
        balance=0,
        owner="Wife",
        metadata={"grams": 0},
    ),
]


def demo_transactions(now: datetime) -> list:
    """A few weeks of activity ending today; balances above are the result."""

    def at(days_ago: int, hour: int = 9) -> str:
        moment = (now - timedelta(days=days_ago)).replace(hour=hour, minute=0, second=0, microsecond=0)
        return moment.isoformat(timespec="seconds")

    return [
        Transaction(transaction_id="tx_demo_1", date=at(20), type="INCOME", amount=8_000_000,
                    account_id="acc_bca_h", category="Salary", notes="Gaji bulanan"),
        Transaction(transaction_id="tx_demo_2", date=at(18), type="TRANSFER", amount=1_000_000,
                    account_id="acc_bca_h", to_account_id="acc_cash_h", category="Transfer",
                    notes="Tarik tunai", fee=6_500),
        Transaction(transaction_id="tx_demo_3", date=at(12), type="EXPENSE", amount=750_000,
                    account_id="acc_cash_h", category="Groceries", notes="Belanja bulanan"),
        Transaction(transaction_id="tx_demo_4", date=at(7), type="EXPENSE", amount=350_000,
                    account_id="acc_mandiri_w", category="Utilities", notes="Listrik"),
        Transaction(transaction_id="tx_demo_5", date=at(3), type="INCOME", amount=1_500_000,
                    account_id="acc_mandiri_w", category="Freelance"),
        Transaction(transaction_id="tx_demo_6", date=at(1), type="EXPENSE", amount=120_000,
                    account_id="acc_cash_w", category="Food", notes="Makan malam"),
    ]


def seed(output: Path, export_path: Path = None) -> None:
    store = JsonFileStore(output)
    if export_path is not None:
        with open(export_path, "r", encoding="utf-8") as f:
            rows = json.load(f)
        decoded = decode_flat_export(rows)
        for error in decoded.errors:
            print(f"Skipped: {error}")
        accounts, transactions = decoded.accounts, decoded.transactions
        categories = decoded.categories
    else:
        accounts, transactions = DEMO_ACCOUNTS, demo_transactions(datetime.now())
        categories = list(DEFAULT_CATEGORIES)

    store.save(
        {
            ACCOUNTS: [encode_account(acc) for acc in accounts],
            TRANSACTIONS: [encode_transaction(txn) for txn in transactions],
            FUNDS: [],
            FUND_DEPOSITS: [],
            CATEGORIES: categories,
        }
    )
    print(f"Wrote {len(accounts)} accounts and {len(transactions)} transactions to {output}")


def main():
    parser = argparse.ArgumentParser(description="Write a demo household data document")
    parser.add_argument("--output", type=Path, default=DEFAULT_DATA_PATH, help="Destination JSON file")
    parser.add_argument("--from-export", type=Path, help="Flat spreadsheet export (JSON list of rows)")
    args = parser.parse_args()

    seed(args.output, args.from_export)


if __name__ == "__main__":
    main()
