"""
Database abstraction layer for household finance data.

Provides filtered access to transactions and accounts on top of a document
store, and keeps account balances consistent with transaction writes.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, List, Optional, Tuple
from uuid import uuid4

from household_finance_mcp.core.decoder import (
    DEFAULT_CATEGORIES,
    decode_document,
    encode_account,
    encode_fund,
    encode_fund_deposit,
    encode_transaction,
)
from household_finance_mcp.core.exceptions import MissingAccountError, ParseError
from household_finance_mcp.core.store import (
    ACCOUNTS,
    CATEGORIES,
    FUND_DEPOSITS,
    FUNDS,
    TRANSACTIONS,
    DocumentStore,
    JsonFileStore,
)
from household_finance_mcp.models.account import Account
from household_finance_mcp.models.fund import FundAccount, FundDeposit
from household_finance_mcp.models.transaction import (
    ADJUSTMENT_CATEGORY,
    EXPENSE,
    FUND_TRANSFER_CATEGORY,
    INCOME,
    Transaction,
)

logger = logging.getLogger(__name__)

DEFAULT_DATA_PATH = Path.home() / ".household-finance" / "data.json"


class FinanceDatabase:
    """
    Abstraction layer for querying and updating household finance data.

    Wraps a DocumentStore and provides filtering capabilities. Every write
    is saved before it becomes visible in memory, and bumps ``version`` so
    derived results can be memoized per log version.
    """

    def __init__(
        self,
        data_path: Optional[Path] = None,
        store: Optional[DocumentStore] = None,
    ):
        """
        Initialize the database.

        Args:
            data_path: Path to the JSON data document.
                    If None, uses ~/.household-finance/data.json.
            store: Explicit store; takes precedence over data_path.
        """
        if store is None:
            store = JsonFileStore(data_path or DEFAULT_DATA_PATH)

        self.store = store
        self.version = 0
        self.load_errors: List[ParseError] = []
        self._loaded = False
        self._transactions: List[Transaction] = []
        self._accounts: List[Account] = []
        self._funds: List[FundAccount] = []
        self._fund_deposits: List[FundDeposit] = []
        self._categories: List[str] = list(DEFAULT_CATEGORIES)

    def is_available(self) -> bool:
        """Check if the data document exists."""
        return self.store.exists()

    def _ensure_loaded(self) -> None:
        if self._loaded:
            return
        self._loaded = True

        if not self.store.exists():
            return

        decoded = decode_document(self.store.load())
        self._accounts = decoded.accounts
        self._transactions = decoded.transactions
        self._funds = decoded.funds
        self._fund_deposits = decoded.fund_deposits
        self._categories = decoded.categories
        self.load_errors = decoded.errors
        if decoded.errors:
            logger.warning("Excluded %d malformed records on load", len(decoded.errors))
        logger.info(
            "Loaded %d accounts and %d transactions",
            len(self._accounts), len(self._transactions),
        )

    def reload(self) -> None:
        """Drop cached data so the next query reads the store again."""
        self._loaded = False
        self._accounts, self._transactions = [], []
        self._funds, self._fund_deposits = [], []
        self._categories = list(DEFAULT_CATEGORIES)
        self.load_errors = []
        self.version += 1

    @property
    def accounts(self) -> List[Account]:
        self._ensure_loaded()
        return self._accounts

    @property
    def transactions(self) -> List[Transaction]:
        """Full transaction log in stored order."""
        self._ensure_loaded()
        return self._transactions

    @property
    def funds(self) -> List[FundAccount]:
        """Hajj/Umrah funds; kept apart from the main accounts."""
        self._ensure_loaded()
        return self._funds

    @property
    def fund_deposits(self) -> List[FundDeposit]:
        self._ensure_loaded()
        return self._fund_deposits

    def get_transactions(
        self,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        category: Optional[str] = None,
        query: Optional[str] = None,
        account_id: Optional[str] = None,
        owner: Optional[str] = None,
        transaction_type: Optional[str] = None,
        min_amount: Optional[float] = None,
        max_amount: Optional[float] = None,
        limit: int = 1000,
    ) -> List[Transaction]:
        """
        Get transactions with optional filters.

        Args:
            start_date: Filter by day >= this (YYYY-MM-DD)
            end_date: Filter by day <= this (YYYY-MM-DD)
            category: Filter by category (case-insensitive substring match)
            query: Filter by notes or category (case-insensitive substring match)
            account_id: Filter by either leg's account_id
            owner: Filter by the owner of the source account
            transaction_type: Filter by INCOME, EXPENSE or TRANSFER
            min_amount: Filter by amount >= this
            max_amount: Filter by amount <= this
            limit: Maximum number of transactions to return

        Returns:
            List of filtered transactions, sorted by date descending
        """
        result = sorted(self.transactions, key=lambda t: t.occurred_at, reverse=True)

        # Apply date range filter on calendar days
        if start_date:
            result = [txn for txn in result if txn.day.isoformat() >= start_date]
        if end_date:
            result = [txn for txn in result if txn.day.isoformat() <= end_date]

        if category:
            category_lower = category.lower()
            result = [txn for txn in result if category_lower in txn.category.lower()]

        if query:
            result = [txn for txn in result if _matches(txn, query)]

        if account_id:
            result = [txn for txn in result if txn.touches(account_id)]

        if owner:
            owners = {acc.account_id: acc.owner for acc in self.accounts}
            result = [txn for txn in result if owners.get(txn.account_id) == owner]

        if transaction_type:
            result = [txn for txn in result if txn.type == transaction_type.upper()]

        if min_amount is not None:
            result = [txn for txn in result if txn.amount >= min_amount]
        if max_amount is not None:
            result = [txn for txn in result if txn.amount <= max_amount]

        return result[:limit]

    def search_transactions(self, query: str, limit: int = 50) -> List[Transaction]:
        """
        Free-text search of transactions.

        Searches notes and category.

        Args:
            query: Search query (case-insensitive)
            limit: Maximum results

        Returns:
            List of matching transactions, newest first
        """
        return self.get_transactions(query=query, limit=limit)

    def get_accounts(
        self, group: Optional[str] = None, owner: Optional[str] = None
    ) -> List[Account]:
        """
        Get all accounts.

        Args:
            group: Optional filter by account group (case-insensitive)
            owner: Optional filter by owner (Husband or Wife)

        Returns:
            List of accounts
        """
        result = self.accounts[:]

        if group:
            group_lower = group.lower()
            result = [acc for acc in result if acc.group.lower() == group_lower]
        if owner:
            result = [acc for acc in result if acc.owner == owner]

        return result

    def get_account(self, account_id: str) -> Account:
        """
        Get one account by id.

        Raises:
            MissingAccountError: If account_id is not found
        """
        for acc in self.accounts:
            if acc.account_id == account_id:
                return acc
        raise MissingAccountError(account_id)

    def get_categories(self) -> List[str]:
        """Get the managed category list offered for new transactions."""
        self._ensure_loaded()
        return self._categories[:]

    def used_categories(self) -> List[str]:
        """Get categories found in the log, in order of first appearance."""
        seen = set()
        categories = []
        for txn in self.transactions:
            if txn.category not in seen:
                seen.add(txn.category)
                categories.append(txn.category)
        return categories

    def earliest_transaction_date(self) -> Optional[datetime]:
        if not self.transactions:
            return None
        return min(txn.occurred_at for txn in self.transactions)

    # --- Writes ---

    def upsert_account(self, account: Account) -> Account:
        """Insert or replace an account by id. Its balance is taken as given."""
        accounts = self.accounts[:]
        for index, existing in enumerate(accounts):
            if existing.account_id == account.account_id:
                accounts[index] = account
                break
        else:
            accounts.append(account)

        self._commit(accounts=accounts)
        return account

    def delete_account(self, account_id: str) -> Account:
        """
        Delete an account. Its transactions stay in the log.

        Raises:
            MissingAccountError: If account_id is not found
        """
        account = self.get_account(account_id)
        self._commit(accounts=[a for a in self.accounts if a.account_id != account_id])
        logger.info("Deleted account %s", account_id)
        return account

    def add_transaction(self, txn: Transaction) -> Transaction:
        """
        Append a transaction and apply its effect to account balances.

        Raises:
            MissingAccountError: If either leg references an unknown account
            ValueError: If the transaction id is already used
        """
        self._check_accounts(txn)
        if any(t.transaction_id == txn.transaction_id for t in self.transactions):
            raise ValueError(f"Duplicate transaction id: {txn.transaction_id}")

        self._commit(
            accounts=_applied(self.accounts, txn, direction=1),
            transactions=self.transactions + [txn],
        )
        logger.info(
            "Recorded %s %s of %.2f on %s", txn.type, txn.transaction_id, txn.amount, txn.account_id
        )
        return txn

    def delete_transaction(self, transaction_id: str) -> Transaction:
        """
        Delete a transaction and reverse its effect on account balances.

        Raises:
            ValueError: If transaction_id is not found
        """
        txn = next(
            (t for t in self.transactions if t.transaction_id == transaction_id), None
        )
        if txn is None:
            raise ValueError(f"Transaction not found: {transaction_id}")

        self._commit(
            accounts=_applied(self.accounts, txn, direction=-1),
            transactions=[t for t in self.transactions if t.transaction_id != transaction_id],
        )
        logger.info("Deleted transaction %s", transaction_id)
        return txn

    def set_account_balance(
        self, account_id: str, new_balance: float, now: Optional[datetime] = None
    ) -> Optional[Transaction]:
        """
        Correct an account's balance, recording an Adjustment transaction.

        Args:
            account_id: Account to correct
            new_balance: Balance after correction
            now: Timestamp of the correction (default: now)

        Returns:
            The Adjustment transaction, or None if the balance was unchanged

        Raises:
            MissingAccountError: If account_id is not found
        """
        account = self.get_account(account_id)
        diff = new_balance - account.balance
        if diff == 0:
            return None

        now = now or datetime.now()
        adjustment = Transaction(
            transaction_id=f"adj-{uuid4().hex[:12]}",
            date=now.isoformat(timespec="seconds"),
            type=INCOME if diff > 0 else EXPENSE,
            amount=abs(diff),
            account_id=account_id,
            category=ADJUSTMENT_CATEGORY,
            notes=f"Manual Balance Correction ({'Surplus' if diff > 0 else 'Deficit'})",
        )
        return self.add_transaction(adjustment)

    # --- Hajj/Umrah funds ---

    def get_fund(self, fund_id: str) -> FundAccount:
        """
        Get one fund by id.

        Raises:
            MissingAccountError: If fund_id is not found
        """
        for fund in self.funds:
            if fund.fund_id == fund_id:
                return fund
        raise MissingAccountError(fund_id)

    def add_fund(self, fund: FundAccount) -> FundAccount:
        """
        Add a new fund.

        Raises:
            ValueError: If the fund id is already used
        """
        if any(f.fund_id == fund.fund_id for f in self.funds):
            raise ValueError(f"Duplicate fund id: {fund.fund_id}")
        self._commit(funds=self.funds + [fund])
        return fund

    def delete_fund(self, fund_id: str) -> FundAccount:
        """Delete a fund together with its deposits."""
        fund = self.get_fund(fund_id)
        self._commit(
            funds=[f for f in self.funds if f.fund_id != fund_id],
            fund_deposits=[d for d in self.fund_deposits if d.fund_id != fund_id],
        )
        return fund

    def deposit_to_fund(
        self,
        fund_id: str,
        amount: float,
        source_account_id: Optional[str] = None,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Tuple[FundDeposit, Optional[Transaction]]:
        """
        Deposit into a fund, optionally moving the money out of a main account.

        A deposit with a source account also records an EXPENSE on that
        account, so the money leaves the main ledger.

        Args:
            fund_id: Fund to deposit into
            amount: Positive amount
            source_account_id: Main account paying for the deposit
            notes: Optional notes (default: "Transfer" or "Deposit")
            now: Timestamp of the deposit (default: now)

        Returns:
            Tuple of (deposit, main ledger expense or None)

        Raises:
            MissingAccountError: If the fund or source account is not found
            ValueError: If the source account balance is too low
        """
        fund = self.get_fund(fund_id)
        now = now or datetime.now()
        deposit = FundDeposit(
            deposit_id=f"np-{uuid4().hex[:9]}",
            date=now.isoformat(timespec="seconds"),
            amount=float(amount),
            fund_id=fund_id,
            notes=notes or ("Transfer" if source_account_id else "Deposit"),
        )
        changes: Any = {
            "funds": [
                f.model_copy(update={"balance": f.balance + deposit.amount})
                if f.fund_id == fund_id else f
                for f in self.funds
            ],
            "fund_deposits": self.fund_deposits + [deposit],
        }

        expense = None
        if source_account_id:
            source = self.get_account(source_account_id)
            if deposit.amount > source.balance:
                raise ValueError(f"Insufficient balance in {source.display_name}")
            expense = Transaction(
                transaction_id=f"tr-{deposit.deposit_id}",
                date=deposit.date,
                type=EXPENSE,
                amount=deposit.amount,
                account_id=source_account_id,
                category=FUND_TRANSFER_CATEGORY,
                notes=f"Transfer to {fund.name}",
            )
            changes["accounts"] = _applied(self.accounts, expense, direction=1)
            changes["transactions"] = self.transactions + [expense]

        self._commit(**changes)
        logger.info("Deposited %.2f into fund %s", deposit.amount, fund_id)
        return deposit, expense

    def set_fund_balance(self, fund_id: str, balance: float) -> FundAccount:
        """Overwrite a fund balance. No deposit is recorded."""
        fund = self.get_fund(fund_id).model_copy(update={"balance": float(balance)})
        self._commit(funds=[fund if f.fund_id == fund_id else f for f in self.funds])
        return fund

    def complete_fund(self, fund_id: str) -> FundAccount:
        """Mark a fund as used: its balance resets to 0."""
        return self.set_fund_balance(fund_id, 0.0)

    # --- Categories ---

    def add_category(self, name: str) -> List[str]:
        """
        Add a category to the managed list.

        Raises:
            ValueError: If the name is blank or already listed
        """
        name = _category_name(name)
        if name in self.get_categories():
            raise ValueError(f"Category already exists: {name}")
        self._commit(categories=self.get_categories() + [name])
        return self.get_categories()

    def rename_category(self, old_name: str, new_name: str) -> List[str]:
        """
        Rename a category in place. Logged transactions keep their category.

        Raises:
            ValueError: If old_name is unknown or new_name is blank or taken
        """
        categories = self.get_categories()
        if old_name not in categories:
            raise ValueError(f"Category not found: {old_name}")
        new_name = _category_name(new_name)
        if new_name in categories:
            raise ValueError(f"Category already exists: {new_name}")

        categories[categories.index(old_name)] = new_name
        self._commit(categories=categories)
        return self.get_categories()

    def delete_category(self, name: str) -> List[str]:
        """
        Remove a category from the managed list.

        Raises:
            ValueError: If the category is not listed
        """
        categories = self.get_categories()
        if name not in categories:
            raise ValueError(f"Category not found: {name}")
        self._commit(categories=[c for c in categories if c != name])
        return self.get_categories()

    def _check_accounts(self, txn: Transaction) -> None:
        known = {acc.account_id for acc in self.accounts}
        if txn.account_id not in known:
            raise MissingAccountError(txn.account_id)
        if txn.to_account_id and txn.to_account_id not in known:
            raise MissingAccountError(txn.to_account_id)

    def _commit(self, **changes: Any) -> None:
        """Save the document with ``changes`` applied, then adopt them in memory."""
        self._ensure_loaded()
        state = {
            "accounts": self._accounts,
            "transactions": self._transactions,
            "funds": self._funds,
            "fund_deposits": self._fund_deposits,
            "categories": self._categories,
        }
        state.update(changes)

        # A failed save leaves memory and version untouched
        self.store.save(
            {
                ACCOUNTS: [encode_account(acc) for acc in state["accounts"]],
                TRANSACTIONS: [encode_transaction(txn) for txn in state["transactions"]],
                FUNDS: [encode_fund(fund) for fund in state["funds"]],
                FUND_DEPOSITS: [encode_fund_deposit(d) for d in state["fund_deposits"]],
                CATEGORIES: list(state["categories"]),
            }
        )

        for name, value in changes.items():
            setattr(self, f"_{name}", value)
        self.version += 1


def _applied(accounts: List[Account], txn: Transaction, direction: int) -> List[Account]:
    """Return new account list with the transaction's effect applied."""
    updated = []
    for acc in accounts:
        effect = txn.signed_amount_for(acc.account_id)
        if effect:
            acc = acc.model_copy(update={"balance": acc.balance + direction * effect})
        updated.append(acc)
    return updated


def _category_name(name: str) -> str:
    name = (name or "").strip()
    if not name:
        raise ValueError("Category name must not be blank")
    return name


def _matches(txn: Transaction, query: str) -> bool:
    query_lower = query.lower()
    return query_lower in txn.category.lower() or query_lower in (txn.notes or "").lower()
