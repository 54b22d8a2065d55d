"""
MCP tool definitions for household finance data.

Exposes database, analytics and zakat functionality through the Model
Context Protocol.
"""

from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple
from uuid import uuid4

from household_finance_mcp.core.database import FinanceDatabase
from household_finance_mcp.core.funds import deposit_reminder_due, fund_name, total_saved
from household_finance_mcp.core.history import AssetHistoryCache
from household_finance_mcp.core.identity import IdentityProvider, StaticIdentityProvider
from household_finance_mcp.core.market import GoldPriceFeed
from household_finance_mcp.core.reports import (
    category_breakdown,
    daily_summaries,
    filter_transactions,
    group_totals,
    summarize_cashflow,
)
from household_finance_mcp.core.zakat import (
    HAUL_DAYS,
    NotificationLedger,
    assess_zakat,
    build_zakat_payment,
    eligible_funding_accounts,
    notify_if_obligated,
    payment_allowed,
)
from household_finance_mcp.models.account import ACCOUNT_GROUPS, Account
from household_finance_mcp.models.fund import FUND_TYPES, FundAccount
from household_finance_mcp.models.scope import Scope
from household_finance_mcp.models.transaction import TRANSFER, TRANSFER_CATEGORY, Transaction
from household_finance_mcp.utils.date_utils import (
    ALL,
    CUSTOM,
    MONTH,
    NAVIGABLE_KINDS,
    parse_date,
    parse_period,
    period_range,
    shift_cursor,
)
from household_finance_mcp.utils.formatting import format_compact, to_chart_points

PERIOD_DESCRIPTION = (
    "Period shorthand: today, this_week, this_month, last_month, "
    "last_7_days, last_30_days, last_90_days, ytd, this_year, last_year"
)

DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"


class HouseholdFinanceTools:
    """Collection of MCP tools for querying household finance data."""

    def __init__(
        self,
        database: FinanceDatabase,
        gold_feed: Optional[GoldPriceFeed] = None,
        notifications: Optional[NotificationLedger] = None,
        identity: Optional[IdentityProvider] = None,
    ):
        """
        Initialize tools.

        Args:
            database: FinanceDatabase instance
            gold_feed: Gold price source (default: fixed default price)
            notifications: Notification ledger owned by the session
            identity: Identity provider (default: nobody signed in)
        """
        self.db = database
        self.gold_feed = gold_feed or GoldPriceFeed()
        self.notifications = notifications or NotificationLedger()
        self.identity = identity or StaticIdentityProvider()
        self.history_cache = AssetHistoryCache()

    def _resolve_range(
        self,
        period: Optional[str],
        start_date: Optional[str],
        end_date: Optional[str],
    ) -> Tuple[Optional[date], Optional[date]]:
        if period:
            start_date, end_date = parse_period(period)
        start = parse_date(start_date) if start_date else None
        end = parse_date(end_date) if end_date else None
        return start, end

    def get_transactions(
        self,
        period: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        category: Optional[str] = None,
        query: Optional[str] = None,
        account_id: Optional[str] = None,
        owner: Optional[str] = None,
        transaction_type: Optional[str] = None,
        min_amount: Optional[float] = None,
        max_amount: Optional[float] = None,
        limit: int = 100,
    ) -> Dict[str, Any]:
        """
        Get transactions with optional filters.

        Args:
            period: Period shorthand (this_month, last_30_days, ytd, etc.)
            start_date: Filter by date >= this (YYYY-MM-DD)
            end_date: Filter by date <= this (YYYY-MM-DD)
            category: Filter by category (case-insensitive substring match)
            query: Filter by notes or category text
            account_id: Filter by account_id (either leg)
            owner: Filter by owner of the source account
            transaction_type: INCOME, EXPENSE or TRANSFER
            min_amount: Filter by amount >= this
            max_amount: Filter by amount <= this
            limit: Maximum number of transactions to return (default: 100)

        Returns:
            Dict with transaction count and list of transactions
        """
        if period:
            start_date, end_date = parse_period(period)

        transactions = self.db.get_transactions(
            start_date=start_date,
            end_date=end_date,
            category=category,
            query=query,
            account_id=account_id,
            owner=owner,
            transaction_type=transaction_type,
            min_amount=min_amount,
            max_amount=max_amount,
            limit=limit,
        )

        return {
            "count": len(transactions),
            "transactions": [txn.model_dump(mode="json") for txn in transactions],
        }

    def search_transactions(self, query: str, limit: int = 50) -> Dict[str, Any]:
        """
        Free-text search of transactions.

        Searches notes and category.

        Args:
            query: Search query (case-insensitive)
            limit: Maximum results (default: 50)

        Returns:
            Dict with transaction count and list of matching transactions
        """
        transactions = self.db.search_transactions(query=query, limit=limit)

        return {
            "count": len(transactions),
            "transactions": [txn.model_dump(mode="json") for txn in transactions],
        }

    def get_accounts(
        self, group: Optional[str] = None, owner: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Get all accounts with balances.

        Args:
            group: Optional filter by account group
                   (Cash, Bank Accounts, Credit Cards, Investments, Loans)
            owner: Optional filter by owner (Husband, Wife)

        Returns:
            Dict with account count, totals and list of accounts
        """
        accounts = self.db.get_accounts(group=group, owner=owner)

        # Only accounts flagged for totals count toward the headline figure
        total_balance = sum(acc.balance for acc in accounts if acc.include_in_totals)

        return {
            "count": len(accounts),
            "total_balance": total_balance,
            "group_totals": group_totals(accounts),
            "accounts": [acc.model_dump(mode="json") for acc in accounts],
        }

    def get_account_balance(self, account_id: str) -> Dict[str, Any]:
        """
        Get balance for a specific account.

        Args:
            account_id: Account ID to query

        Returns:
            Dict with account details and balance

        Raises:
            MissingAccountError: If account_id is not found
        """
        account = self.db.get_account(account_id)

        return {
            "account_id": account.account_id,
            "name": account.display_name,
            "group": account.group,
            "owner": account.owner,
            "balance": account.balance,
            "currency": account.currency,
            "include_in_totals": account.include_in_totals,
        }

    def get_spending_by_category(
        self,
        period: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        owner: Optional[str] = None,
        transaction_type: str = "EXPENSE",
        include_adjustments: bool = False,
    ) -> Dict[str, Any]:
        """
        Get amounts aggregated by category.

        Args:
            period: Period shorthand (this_month, last_30_days, ytd, etc.)
            start_date: Filter by date >= this (YYYY-MM-DD)
            end_date: Filter by date <= this (YYYY-MM-DD)
            owner: Only transactions from this owner's accounts
            transaction_type: EXPENSE (default) or INCOME
            include_adjustments: Include balance corrections (default: False)

        Returns:
            Dict with breakdown by category
        """
        start, end = self._resolve_range(period, start_date, end_date)
        transactions = filter_transactions(
            self.db.transactions, self.db.accounts, start, end, owner
        )
        categories = category_breakdown(
            transactions,
            transaction_type=transaction_type.upper(),
            exclude_adjustments=not include_adjustments,
        )
        total = sum(cat.total for cat in categories)

        return {
            "period": {
                "start_date": start.isoformat() if start else None,
                "end_date": end.isoformat() if end else None,
            },
            "transaction_type": transaction_type.upper(),
            "total": round(total, 2),
            "category_count": len(categories),
            "categories": [cat.model_dump() for cat in categories],
        }

    def get_cashflow_summary(
        self,
        period: Optional[str] = "this_month",
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        owner: Optional[str] = None,
        include_daily: bool = False,
    ) -> Dict[str, Any]:
        """
        Get income, expense and net for a period.

        Args:
            period: Period shorthand (default: this_month)
            start_date: Custom start (YYYY-MM-DD), used when period is empty
            end_date: Custom end (YYYY-MM-DD), used when period is empty
            owner: Only transactions from this owner's accounts
            include_daily: Also return per-day summaries

        Returns:
            Dict with cashflow totals
        """
        start, end = self._resolve_range(period, start_date, end_date)
        transactions = filter_transactions(
            self.db.transactions, self.db.accounts, start, end, owner
        )
        result = summarize_cashflow(transactions, start, end).model_dump()
        if include_daily:
            result["daily"] = [d.model_dump() for d in daily_summaries(transactions)]
        return result

    def get_asset_history(
        self,
        range_type: str = MONTH,
        cursor_date: Optional[str] = None,
        offset: int = 0,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        owner: Optional[str] = None,
        account_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Reconstruct day-by-day total assets for charting.

        Args:
            range_type: DAY, WEEK, MONTH, YEAR, ALL (lifetime) or CUSTOM
            cursor_date: Any day inside the wanted bucket (default: today)
            offset: Buckets to move from the cursor (-1 = previous)
            start_date: CUSTOM range start (YYYY-MM-DD)
            end_date: CUSTOM range end (YYYY-MM-DD)
            owner: Limit to one owner's accounts
            account_id: Limit to one account (takes precedence over owner)

        Returns:
            Dict with live current balance and chart points
        """
        now = datetime.now()
        today = now.date()
        range_type = range_type.upper()

        if account_id:
            self.db.get_account(account_id)
            scope = Scope.for_account(account_id)
        elif owner:
            scope = Scope.for_owner(owner)
        else:
            scope = Scope.global_scope()

        if range_type == CUSTOM:
            if not start_date or not end_date:
                raise ValueError("CUSTOM range needs start_date and end_date")
            start, end = parse_date(start_date), parse_date(end_date)
        elif range_type == ALL:
            earliest = self.db.earliest_transaction_date()
            start = earliest.date() if earliest else today
            end = today
        elif range_type in NAVIGABLE_KINDS:
            cursor = parse_date(cursor_date) if cursor_date else today
            if offset:
                cursor = shift_cursor(range_type, cursor, offset)
            start, end = period_range(range_type, cursor)
        else:
            raise ValueError(f"Unknown range_type: {range_type}")

        history = self.history_cache.get_or_compute(
            self.db.accounts,
            self.db.transactions,
            start,
            end,
            log_version=self.db.version,
            scope=scope,
            now=now,
        )

        return {
            "title": self._scope_title(scope),
            "range_type": range_type,
            "start_date": history.start_date,
            "end_date": history.end_date,
            "clamped": history.clamped,
            "current_balance": history.current_total,
            "current_balance_label": format_compact(history.current_total),
            "points": to_chart_points(history, range_type),
        }

    def _scope_title(self, scope: Scope) -> str:
        if scope.kind == "ACCOUNT":
            return self.db.get_account(scope.account_id).display_name
        return scope.label

    def _gold_price(self, gold_price: Optional[float]) -> float:
        # An explicit price wins over the feed and becomes the last known one
        if gold_price is not None:
            self.gold_feed.set_price(gold_price)
            return float(gold_price)
        return self.gold_feed.current_price()

    def get_zakat_status(
        self, owner: str = "Husband", gold_price: Optional[float] = None
    ) -> Dict[str, Any]:
        """
        Assess the Zakat Mal obligation for one owner.

        Args:
            owner: Husband or Wife
            gold_price: Gold price per gram; refreshes from the feed when omitted

        Returns:
            Dict with the assessment, funding options and any new alert
        """
        price = self._gold_price(gold_price)

        now = datetime.now()
        assessment = assess_zakat(
            owner, self.db.accounts, self.db.transactions, price, now=now
        )
        alert = notify_if_obligated(assessment, self.notifications, now=now)

        return {
            **assessment.model_dump(mode="json"),
            "funding_accounts": [
                {"account_id": acc.account_id, "name": acc.display_name, "balance": acc.balance}
                for acc in eligible_funding_accounts(self.db.accounts, owner)
            ],
            "new_alert": alert.model_dump() if alert else None,
        }

    def pay_zakat(
        self,
        owner: str,
        funding_account_id: Optional[str] = None,
        gold_price: Optional[float] = None,
    ) -> Dict[str, Any]:
        """
        Record the zakat payment for one owner from a funding account.

        The payment is only recorded while the owner is OBLIGATED and the
        funding account is an eligible cash or bank account.

        Args:
            owner: Husband or Wife
            funding_account_id: Account to pay from
            gold_price: Gold price per gram; uses the feed when omitted

        Returns:
            Dict with "paid" flag and the recorded transaction or the reason
        """
        price = self._gold_price(gold_price)

        now = datetime.now()
        assessment = assess_zakat(owner, self.db.accounts, self.db.transactions, price, now=now)
        allowed, reason = payment_allowed(assessment, funding_account_id, self.db.accounts)
        if not allowed:
            return {"paid": False, "reason": reason, "status": assessment.status.value}

        txn = build_zakat_payment(assessment, funding_account_id, self.db.accounts, now=now)
        self.db.add_transaction(txn)

        return {
            "paid": True,
            "transaction": txn.model_dump(mode="json"),
            "next_haul_date": (now.date() + timedelta(days=HAUL_DAYS)).isoformat(),
        }

    def add_transaction(
        self,
        transaction_type: str,
        amount: float,
        account_id: str,
        to_account_id: Optional[str] = None,
        category: Optional[str] = None,
        date: Optional[str] = None,
        notes: Optional[str] = None,
        fee: Optional[float] = None,
    ) -> Dict[str, Any]:
        """
        Record a new transaction and update account balances.

        Args:
            transaction_type: INCOME, EXPENSE or TRANSFER
            amount: Positive amount
            account_id: Source account
            to_account_id: Destination account (TRANSFER only)
            category: Category (TRANSFER always uses "Transfer")
            date: Day of the transaction (YYYY-MM-DD, default: now)
            notes: Optional notes
            fee: Transfer fee charged to the source account

        Returns:
            Dict with the recorded transaction
        """
        transaction_type = transaction_type.upper()
        if amount <= 0:
            raise ValueError("Please enter a valid amount")

        occurred = datetime.combine(parse_date(date), datetime.min.time()) if date else datetime.now()
        txn = Transaction(
            transaction_id=f"tx-{uuid4().hex[:12]}",
            date=occurred.isoformat(timespec="seconds"),
            type=transaction_type,
            amount=float(amount),
            account_id=account_id,
            to_account_id=to_account_id if transaction_type == TRANSFER else None,
            category=TRANSFER_CATEGORY if transaction_type == TRANSFER else (category or "Uncategorized"),
            notes=notes,
            fee=float(fee) if fee is not None and transaction_type == TRANSFER else None,
        )
        self.db.add_transaction(txn)

        return {"transaction": txn.model_dump(mode="json")}

    def set_account_balance(self, account_id: str, balance: float) -> Dict[str, Any]:
        """
        Correct an account balance, logging an Adjustment transaction.

        Args:
            account_id: Account to correct
            balance: New balance

        Returns:
            Dict with the new balance and the adjustment, if any
        """
        adjustment = self.db.set_account_balance(account_id, float(balance))
        account = self.db.get_account(account_id)

        return {
            "account_id": account_id,
            "balance": account.balance,
            "adjustment": adjustment.model_dump(mode="json") if adjustment else None,
        }

    def delete_transaction(self, transaction_id: str) -> Dict[str, Any]:
        """
        Delete a transaction and reverse its effect on balances.

        Args:
            transaction_id: Transaction to delete

        Returns:
            Dict with the deleted transaction
        """
        txn = self.db.delete_transaction(transaction_id)
        return {"deleted": txn.model_dump(mode="json")}

    def create_account(
        self,
        name: str,
        group: str,
        owner: Optional[str] = None,
        balance: float = 0.0,
        currency: str = "IDR",
        include_in_totals: bool = True,
        description: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Create a main ledger account with an opening balance.

        Returns:
            Dict with the new account
        """
        account = Account(
            account_id=f"acc-{uuid4().hex[:12]}",
            name=name,
            group=group,
            owner=owner,
            balance=float(balance),
            currency=currency,
            include_in_totals=include_in_totals,
            description=description,
        )
        self.db.upsert_account(account)
        return {"account": account.model_dump(mode="json")}

    def update_account(
        self,
        account_id: str,
        name: Optional[str] = None,
        group: Optional[str] = None,
        owner: Optional[str] = None,
        include_in_totals: Optional[bool] = None,
        description: Optional[str] = None,
        balance: Optional[float] = None,
    ) -> Dict[str, Any]:
        """
        Edit account details.

        A changed balance is applied through an Adjustment transaction,
        as set_account_balance does.

        Returns:
            Dict with the updated account and the adjustment, if any
        """
        current = self.db.get_account(account_id)
        updates = {
            "name": name,
            "group": group,
            "owner": owner,
            "include_in_totals": include_in_totals,
            "description": description,
        }
        fields = current.model_dump(exclude={"display_name"})
        fields.update({key: value for key, value in updates.items() if value is not None})
        self.db.upsert_account(Account.model_validate(fields))

        adjustment = None
        if balance is not None:
            adjustment = self.db.set_account_balance(account_id, float(balance))

        return {
            "account": self.db.get_account(account_id).model_dump(mode="json"),
            "adjustment": adjustment.model_dump(mode="json") if adjustment else None,
        }

    def delete_account(self, account_id: str) -> Dict[str, Any]:
        """
        Delete an account. Its transactions stay in the log.

        Returns:
            Dict with the deleted account
        """
        account = self.db.delete_account(account_id)
        return {"deleted": account.model_dump(mode="json")}

    def get_funds(self) -> Dict[str, Any]:
        """
        List Hajj/Umrah funds with their deposits.

        Returns:
            Dict with funds, total saved, recent deposits and the monthly reminder
        """
        funds = self.db.funds
        deposits = sorted(self.db.fund_deposits, key=lambda d: d.occurred_at, reverse=True)
        return {
            "count": len(funds),
            "total_balance": total_saved(funds),
            "monthly_reminder": deposit_reminder_due(funds, deposits),
            "funds": [fund.model_dump(mode="json") for fund in funds],
            "deposits": [deposit.model_dump(mode="json") for deposit in deposits],
        }

    def create_fund(
        self,
        fund_type: str,
        owner: str,
        target: Optional[float] = None,
        initial_balance: float = 0.0,
    ) -> Dict[str, Any]:
        """
        Open a Hajj or Umrah fund for one owner.

        Args:
            fund_type: Haji or Umrah
            owner: Husband or Wife
            target: Optional target amount
            initial_balance: Amount already saved

        Returns:
            Dict with the new fund
        """
        fund = FundAccount(
            fund_id=f"np-{uuid4().hex[:12]}",
            name=fund_name(fund_type, owner),
            owner=owner,
            balance=float(initial_balance),
            target=float(target) if target else None,
        )
        self.db.add_fund(fund)
        return {"fund": fund.model_dump(mode="json")}

    def deposit_to_fund(
        self,
        fund_id: str,
        amount: float,
        source_account_id: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Deposit into a fund, by hand or by transfer from a main account.

        Args:
            fund_id: Fund to deposit into
            amount: Positive amount
            source_account_id: Main account to transfer from (omit for cash brought in)
            notes: Optional notes

        Returns:
            Dict with the deposit, the fund and the main ledger expense, if any
        """
        if amount <= 0:
            raise ValueError("Please enter a valid amount")

        deposit, expense = self.db.deposit_to_fund(
            fund_id, float(amount), source_account_id=source_account_id, notes=notes
        )
        return {
            "deposit": deposit.model_dump(mode="json"),
            "fund": self.db.get_fund(fund_id).model_dump(mode="json"),
            "expense": expense.model_dump(mode="json") if expense else None,
        }

    def set_fund_balance(self, fund_id: str, balance: float) -> Dict[str, Any]:
        """Overwrite a fund balance without recording a deposit."""
        fund = self.db.set_fund_balance(fund_id, float(balance))
        return {"fund": fund.model_dump(mode="json")}

    def complete_fund(self, fund_id: str) -> Dict[str, Any]:
        """
        Mark a fund as used for the pilgrimage; its balance resets to 0.

        Returns:
            Dict with the amount collected and the emptied fund
        """
        collected = self.db.get_fund(fund_id).balance
        fund = self.db.complete_fund(fund_id)
        return {"collected": collected, "fund": fund.model_dump(mode="json")}

    def delete_fund(self, fund_id: str) -> Dict[str, Any]:
        fund = self.db.delete_fund(fund_id)
        return {"deleted": fund.model_dump(mode="json")}

    def get_categories(self) -> Dict[str, Any]:
        """
        List the managed categories and those used in the log.

        Returns:
            Dict with "categories" and "in_use" lists
        """
        return {
            "categories": self.db.get_categories(),
            "in_use": self.db.used_categories(),
        }

    def add_category(self, name: str) -> Dict[str, Any]:
        return {"categories": self.db.add_category(name)}

    def rename_category(self, old_name: str, new_name: str) -> Dict[str, Any]:
        """Rename a managed category; logged transactions keep their category."""
        return {"categories": self.db.rename_category(old_name, new_name)}

    def delete_category(self, name: str) -> Dict[str, Any]:
        return {"categories": self.db.delete_category(name)}

    def get_notifications(
        self, unread_only: bool = False, mark_read: Optional[List[str]] = None
    ) -> Dict[str, Any]:
        """
        List session notifications, newest first.

        Args:
            unread_only: Only unread notifications
            mark_read: Notification IDs to mark as read before listing

        Returns:
            Dict with notification count and list
        """
        for notification_id in mark_read or []:
            self.notifications.mark_as_read(notification_id)

        items = self.notifications.unread() if unread_only else self.notifications.notifications
        return {
            "count": len(items),
            "unread_count": len(self.notifications.unread()),
            "notifications": [n.model_dump() for n in items],
        }

    def get_session(self) -> Dict[str, Any]:
        """
        Describe the signed-in user and data state.

        Returns:
            Dict with user, data availability and gold price
        """
        user = self.identity.current_user()
        return {
            "user": user.model_dump() if user else None,
            "data_available": self.db.is_available(),
            "account_count": len(self.db.accounts),
            "transaction_count": len(self.db.transactions),
            "skipped_records": [e.to_dict() for e in self.db.load_errors],
            "gold_price_per_gram": self.gold_feed.last_price,
        }


def _owner_property() -> Dict[str, Any]:
    return {
        "type": "string",
        "enum": ["Husband", "Wife"],
        "description": "Account owner",
    }


def _date_property(description: str) -> Dict[str, Any]:
    return {"type": "string", "description": description, "pattern": DATE_PATTERN}


def create_tool_schemas() -> List[Dict[str, Any]]:
    """
    Create MCP tool schemas for all tools.

    Returns:
        List of tool schema definitions
    """
    return [
        {
            "name": "get_transactions",
            "description": (
                "Get transactions with optional filters. Supports date ranges, "
                "category, free text, account, owner, type and amount filters. "
                "Use 'period' for common date ranges (this_month, last_30_days, ytd, etc.)."
            ),
            "inputSchema": {
                "type": "object",
                "properties": {
                    "period": {"type": "string", "description": PERIOD_DESCRIPTION},
                    "start_date": _date_property("Start date (YYYY-MM-DD)"),
                    "end_date": _date_property("End date (YYYY-MM-DD)"),
                    "category": {
                        "type": "string",
                        "description": "Filter by category (case-insensitive substring)",
                    },
                    "query": {
                        "type": "string",
                        "description": "Filter by notes or category text",
                    },
                    "account_id": {"type": "string", "description": "Filter by account ID"},
                    "owner": _owner_property(),
                    "transaction_type": {
                        "type": "string",
                        "enum": ["INCOME", "EXPENSE", "TRANSFER"],
                        "description": "Filter by transaction type",
                    },
                    "min_amount": {"type": "number", "description": "Minimum transaction amount"},
                    "max_amount": {"type": "number", "description": "Maximum transaction amount"},
                    "limit": {
                        "type": "integer",
                        "description": "Maximum number of results (default: 100)",
                        "default": 100,
                    },
                },
            },
        },
        {
            "name": "search_transactions",
            "description": (
                "Free-text search of transactions by notes and category. "
                "Case-insensitive search."
            ),
            "inputSchema": {
                "type": "object",
                "properties": {
                    "query": {"type": "string", "description": "Search query"},
                    "limit": {
                        "type": "integer",
                        "description": "Maximum number of results (default: 50)",
                        "default": 50,
                    },
                },
                "required": ["query"],
            },
        },
        {
            "name": "get_accounts",
            "description": (
                "Get all accounts with balances and per-group totals. Optionally "
                "filter by group (Cash, Bank Accounts, Credit Cards, Investments, "
                "Loans) or owner."
            ),
            "inputSchema": {
                "type": "object",
                "properties": {
                    "group": {"type": "string", "description": "Filter by account group"},
                    "owner": _owner_property(),
                },
            },
        },
        {
            "name": "get_account_balance",
            "description": "Get balance and details for a specific account by ID.",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "account_id": {"type": "string", "description": "Account ID to query"},
                },
                "required": ["account_id"],
            },
        },
        {
            "name": "get_spending_by_category",
            "description": (
                "Get amounts aggregated by category for a date range, largest first. "
                "Balance adjustments are excluded unless requested."
            ),
            "inputSchema": {
                "type": "object",
                "properties": {
                    "period": {"type": "string", "description": PERIOD_DESCRIPTION},
                    "start_date": _date_property("Start date (YYYY-MM-DD)"),
                    "end_date": _date_property("End date (YYYY-MM-DD)"),
                    "owner": _owner_property(),
                    "transaction_type": {
                        "type": "string",
                        "enum": ["EXPENSE", "INCOME"],
                        "default": "EXPENSE",
                        "description": "Which side of the cashflow to break down",
                    },
                    "include_adjustments": {
                        "type": "boolean",
                        "default": False,
                        "description": "Include balance corrections",
                    },
                },
            },
        },
        {
            "name": "get_cashflow_summary",
            "description": "Get total income, expense and net for a period.",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "period": {"type": "string", "description": PERIOD_DESCRIPTION},
                    "start_date": _date_property("Start date (YYYY-MM-DD)"),
                    "end_date": _date_property("End date (YYYY-MM-DD)"),
                    "owner": _owner_property(),
                    "include_daily": {
                        "type": "boolean",
                        "default": False,
                        "description": "Also return per-day summaries",
                    },
                },
            },
        },
        {
            "name": "get_asset_history",
            "description": (
                "Reconstruct day-by-day total assets (net worth) for charting, "
                "globally, for one owner or for one account. Navigate buckets "
                "with cursor_date and offset."
            ),
            "inputSchema": {
                "type": "object",
                "properties": {
                    "range_type": {
                        "type": "string",
                        "enum": ["DAY", "WEEK", "MONTH", "YEAR", "ALL", "CUSTOM"],
                        "default": "MONTH",
                        "description": "Chart range; ALL is lifetime",
                    },
                    "cursor_date": _date_property("Any day inside the wanted bucket"),
                    "offset": {
                        "type": "integer",
                        "default": 0,
                        "description": "Buckets to move from the cursor (-1 = previous)",
                    },
                    "start_date": _date_property("CUSTOM range start (YYYY-MM-DD)"),
                    "end_date": _date_property("CUSTOM range end (YYYY-MM-DD)"),
                    "owner": _owner_property(),
                    "account_id": {"type": "string", "description": "Single account scope"},
                },
            },
        },
        {
            "name": "get_zakat_status",
            "description": (
                "Assess Zakat Mal for one owner: nisab (85 g gold), haul window "
                "(354 days), status NOT_OBLIGATED / OBLIGATED / PAID and amount due."
            ),
            "inputSchema": {
                "type": "object",
                "properties": {
                    "owner": _owner_property(),
                    "gold_price": {
                        "type": "number",
                        "description": "Gold price per gram (default: last known price)",
                    },
                },
            },
        },
        {
            "name": "pay_zakat",
            "description": (
                "Record the zakat payment as an expense from a cash or bank account. "
                "Only allowed while the owner is OBLIGATED."
            ),
            "inputSchema": {
                "type": "object",
                "properties": {
                    "owner": _owner_property(),
                    "funding_account_id": {
                        "type": "string",
                        "description": "Cash or bank account to pay from",
                    },
                    "gold_price": {
                        "type": "number",
                        "description": "Gold price per gram (default: last known price)",
                    },
                },
                "required": ["owner", "funding_account_id"],
            },
        },
        {
            "name": "add_transaction",
            "description": "Record an income, expense or transfer and update balances.",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "transaction_type": {
                        "type": "string",
                        "enum": ["INCOME", "EXPENSE", "TRANSFER"],
                    },
                    "amount": {"type": "number", "exclusiveMinimum": 0},
                    "account_id": {"type": "string", "description": "Source account"},
                    "to_account_id": {
                        "type": "string",
                        "description": "Destination account (TRANSFER only)",
                    },
                    "category": {"type": "string"},
                    "date": _date_property("Day of the transaction (default: now)"),
                    "notes": {"type": "string"},
                    "fee": {"type": "number", "minimum": 0, "description": "Transfer fee"},
                },
                "required": ["transaction_type", "amount", "account_id"],
            },
        },
        {
            "name": "set_account_balance",
            "description": (
                "Correct an account balance. The difference is logged as an "
                "Adjustment transaction."
            ),
            "inputSchema": {
                "type": "object",
                "properties": {
                    "account_id": {"type": "string"},
                    "balance": {"type": "number"},
                },
                "required": ["account_id", "balance"],
            },
        },
        {
            "name": "delete_transaction",
            "description": "Delete a transaction and reverse its effect on account balances.",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "transaction_id": {"type": "string"},
                },
                "required": ["transaction_id"],
            },
        },
        {
            "name": "create_account",
            "description": "Create an account with an opening balance.",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "group": {"type": "string", "enum": list(ACCOUNT_GROUPS)},
                    "owner": _owner_property(),
                    "balance": {"type": "number", "default": 0},
                    "currency": {"type": "string", "default": "IDR"},
                    "include_in_totals": {"type": "boolean", "default": True},
                    "description": {"type": "string"},
                },
                "required": ["name", "group"],
            },
        },
        {
            "name": "update_account",
            "description": (
                "Edit account details. A new balance is applied through an "
                "Adjustment transaction."
            ),
            "inputSchema": {
                "type": "object",
                "properties": {
                    "account_id": {"type": "string"},
                    "name": {"type": "string"},
                    "group": {"type": "string", "enum": list(ACCOUNT_GROUPS)},
                    "owner": _owner_property(),
                    "include_in_totals": {"type": "boolean"},
                    "description": {"type": "string"},
                    "balance": {"type": "number"},
                },
                "required": ["account_id"],
            },
        },
        {
            "name": "delete_account",
            "description": "Delete an account. Its transactions stay in the log.",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "account_id": {"type": "string"},
                },
                "required": ["account_id"],
            },
        },
        {
            "name": "get_funds",
            "description": (
                "List Hajj/Umrah savings funds, their deposits and whether the "
                "monthly deposit reminder is due. Funds are kept out of net worth."
            ),
            "inputSchema": {"type": "object", "properties": {}},
        },
        {
            "name": "create_fund",
            "description": "Open a Hajj or Umrah savings fund for one owner.",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "fund_type": {"type": "string", "enum": list(FUND_TYPES)},
                    "owner": _owner_property(),
                    "target": {"type": "number", "minimum": 0, "description": "Target amount"},
                    "initial_balance": {"type": "number", "default": 0},
                },
                "required": ["fund_type", "owner"],
            },
        },
        {
            "name": "deposit_to_fund",
            "description": (
                "Deposit into a fund. With source_account_id the money is moved "
                "out of that account as a 'Non-Profit Transfer' expense."
            ),
            "inputSchema": {
                "type": "object",
                "properties": {
                    "fund_id": {"type": "string"},
                    "amount": {"type": "number", "exclusiveMinimum": 0},
                    "source_account_id": {
                        "type": "string",
                        "description": "Main account to transfer from",
                    },
                    "notes": {"type": "string"},
                },
                "required": ["fund_id", "amount"],
            },
        },
        {
            "name": "set_fund_balance",
            "description": "Overwrite a fund balance.",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "fund_id": {"type": "string"},
                    "balance": {"type": "number"},
                },
                "required": ["fund_id", "balance"],
            },
        },
        {
            "name": "complete_fund",
            "description": "Mark a fund as used; its balance resets to 0.",
            "inputSchema": {
                "type": "object",
                "properties": {"fund_id": {"type": "string"}},
                "required": ["fund_id"],
            },
        },
        {
            "name": "delete_fund",
            "description": "Delete a fund and its deposits.",
            "inputSchema": {
                "type": "object",
                "properties": {"fund_id": {"type": "string"}},
                "required": ["fund_id"],
            },
        },
        {
            "name": "get_categories",
            "description": "List the managed categories and the categories used in the log.",
            "inputSchema": {"type": "object", "properties": {}},
        },
        {
            "name": "add_category",
            "description": "Add a category to the managed list.",
            "inputSchema": {
                "type": "object",
                "properties": {"name": {"type": "string"}},
                "required": ["name"],
            },
        },
        {
            "name": "rename_category",
            "description": "Rename a managed category. Logged transactions keep their category.",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "old_name": {"type": "string"},
                    "new_name": {"type": "string"},
                },
                "required": ["old_name", "new_name"],
            },
        },
        {
            "name": "delete_category",
            "description": "Remove a category from the managed list.",
            "inputSchema": {
                "type": "object",
                "properties": {"name": {"type": "string"}},
                "required": ["name"],
            },
        },
        {
            "name": "get_notifications",
            "description": "List notifications raised in this session, newest first.",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "unread_only": {"type": "boolean", "default": False},
                    "mark_read": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "Notification IDs to mark as read",
                    },
                },
            },
        },
        {
            "name": "get_session",
            "description": "Show the signed-in user, data availability and gold price.",
            "inputSchema": {"type": "object", "properties": {}},
        },
    ]
