"""
Decoder for stored household finance documents.

Turns raw JSON records into validated models. Malformed records never
abort a load: each one becomes a ParseError that is logged and returned
alongside the records that did decode.
"""

import logging
import math
from datetime import datetime
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    List,
    NamedTuple,
    Optional,
    Tuple,
    Type,
    TypeVar,
)
from uuid import uuid4

from pydantic import BaseModel, ValidationError

from household_finance_mcp.core.exceptions import ParseError
from household_finance_mcp.models.account import Account
from household_finance_mcp.models.fund import FundAccount, FundDeposit
from household_finance_mcp.models.transaction import EXPENSE, INCOME, Transaction
from household_finance_mcp.utils.date_utils import parse_iso_datetime

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

DEFAULT_CATEGORIES = (
    "Food & Drink",
    "Groceries",
    "Utilities",
    "Salary",
    "Investment",
    "Entertainment",
    "Transport",
    "Shopping",
    "Health",
    "Education",
    "Other",
)


class DecodedDocument(NamedTuple):
    accounts: List[Account]
    transactions: List[Transaction]
    errors: List[ParseError]
    funds: List[FundAccount]
    fund_deposits: List[FundDeposit]
    categories: List[str]


def _to_parse_error(record: Any, exc: ValidationError) -> ParseError:
    first = exc.errors()[0]
    field = ".".join(str(part) for part in first.get("loc", ())) or None
    record_id = record.get("id") if isinstance(record, dict) else None
    return ParseError(first.get("msg", str(exc)), record_id=record_id, field=field)


def _decode_records(
    records: Iterable[Any],
    model: Type[ModelT],
    kind: str,
    key: Callable[[ModelT], str],
) -> Tuple[List[ModelT], List[ParseError]]:
    decoded: List[ModelT] = []
    errors: List[ParseError] = []
    seen = set()

    for record in records:
        if not isinstance(record, dict):
            errors.append(ParseError(f"Expected an object, got {type(record).__name__}"))
            continue
        try:
            item = model.model_validate(record)
        except ValidationError as e:
            error = _to_parse_error(record, e)
            logger.warning(
                "Skipping %s %s: %s (%s)", kind, error.record_id, error.message, error.field
            )
            errors.append(error)
            continue

        record_id = key(item)
        if record_id in seen:
            logger.warning("Skipping duplicate %s id %s", kind, record_id)
            continue
        seen.add(record_id)
        decoded.append(item)

    return decoded, errors


def decode_accounts(records: Iterable[Any]) -> Tuple[List[Account], List[ParseError]]:
    """
    Decode account records.

    Args:
        records: Raw account dicts (camelCase or snake_case keys)

    Returns:
        Tuple of (accounts, parse_errors); duplicate ids keep the first record
    """
    return _decode_records(records, Account, "account", lambda a: a.account_id)


def decode_transactions(
    records: Iterable[Any],
) -> Tuple[List[Transaction], List[ParseError]]:
    """
    Decode transaction records.

    Args:
        records: Raw transaction dicts (camelCase or snake_case keys)

    Returns:
        Tuple of (transactions, parse_errors), in stored order
    """
    return _decode_records(
        records, Transaction, "transaction", lambda t: t.transaction_id
    )


def decode_funds(records: Iterable[Any]) -> Tuple[List[FundAccount], List[ParseError]]:
    """Decode Hajj/Umrah fund records; duplicate ids keep the first record."""
    return _decode_records(records, FundAccount, "fund", lambda f: f.fund_id)


def decode_fund_deposits(
    records: Iterable[Any],
) -> Tuple[List[FundDeposit], List[ParseError]]:
    """Decode fund deposit records, in stored order."""
    return _decode_records(records, FundDeposit, "fund deposit", lambda d: d.deposit_id)


def decode_categories(raw: Any) -> Tuple[List[str], List[ParseError]]:
    """
    Decode the managed category list.

    A missing list yields the default categories. Blank or non-string
    entries are skipped with a ParseError; repeats are dropped.
    """
    if raw is None:
        return list(DEFAULT_CATEGORIES), []
    if not isinstance(raw, list):
        error = ParseError("Expected a list", field="categories")
        logger.warning("Using default categories: %s", error.message)
        return list(DEFAULT_CATEGORIES), [error]

    categories: List[str] = []
    errors: List[ParseError] = []
    for value in raw:
        if not isinstance(value, str) or not value.strip():
            errors.append(ParseError(f"Invalid category: {value!r}", field="categories"))
            continue
        name = value.strip()
        if name not in categories:
            categories.append(name)
    return categories, errors


def decode_document(raw: Any) -> DecodedDocument:
    """
    Decode a stored document in either supported format.

    - Native backup: {"accounts": [...], "transactions": [...],
      "nonProfitAccounts": [...], "nonProfitTransactions": [...],
      "categories": [...]}
    - Flat export: a list of rows, see decode_flat_export()

    Raises:
        ParseError: If the document is neither format
    """
    if isinstance(raw, dict) and isinstance(raw.get("accounts"), list):
        accounts, account_errors = decode_accounts(raw["accounts"])
        transactions, txn_errors = decode_transactions(raw.get("transactions") or [])
        funds, fund_errors = decode_funds(raw.get("nonProfitAccounts") or [])
        deposits, deposit_errors = decode_fund_deposits(raw.get("nonProfitTransactions") or [])
        categories, category_errors = decode_categories(raw.get("categories"))
        return DecodedDocument(
            accounts,
            transactions,
            account_errors + txn_errors + fund_errors + deposit_errors + category_errors,
            funds,
            deposits,
            categories,
        )

    if isinstance(raw, list):
        return decode_flat_export(raw)

    raise ParseError("Unknown document format")


def guess_owner(account_name: str) -> str:
    """Guess the owner from an account name; defaults to Husband."""
    name = account_name.lower()
    if "istri" in name or "wife" in name:
        return "Wife"
    return "Husband"


def guess_group(account_name: str) -> str:
    """Guess the account group from keywords in the name."""
    name = account_name.lower()
    if any(word in name for word in ("gold", "invest", "saham", "reksa")):
        return "Investments"
    if any(word in name for word in ("cash", "tunai", "dompet")):
        return "Cash"
    if any(word in name for word in ("cc", "credit", "kartu")):
        return "Credit Cards"
    return "Bank Accounts"


def _row_amount(row: Dict[str, Any]) -> float:
    for key in ("Amount", "IDR"):
        value = row.get(key)
        if value in (None, ""):
            continue
        amount = abs(float(value))
        if not math.isfinite(amount):
            raise ValueError(f"Amount {value!r} is not finite")
        return amount
    return 0.0


def decode_flat_export(
    rows: Iterable[Any], now: Optional[datetime] = None
) -> DecodedDocument:
    """
    Decode a flat export: one row per transaction, accounts implied by name.

    Recognised row keys: "Accounts", "Category", "Amount" or "IDR",
    "Income/Expense", "Period", "Note" or "Description", "Currency".
    Accounts are created on first sight with a guessed group and owner and
    a balance accumulated from their rows. The category list is rebuilt
    from the rows and the fund sub-ledger starts empty.

    Args:
        rows: Exported rows
        now: Timestamp for rows without a "Period" (default: now)

    Returns:
        DecodedDocument with the created accounts, transactions and categories
    """
    now = now or datetime.now()
    accounts: Dict[str, Dict[str, Any]] = {}
    transactions: List[Transaction] = []
    categories: List[str] = []
    errors: List[ParseError] = []

    for index, row in enumerate(rows):
        if not isinstance(row, dict):
            errors.append(ParseError(f"Row {index} is not an object"))
            continue

        try:
            amount = _row_amount(row)
        except (TypeError, ValueError):
            error = ParseError(f"Row {index} has a malformed amount", field="Amount")
            logger.warning("Skipping export row: %s", error.message)
            errors.append(error)
            continue

        period = row.get("Period")
        try:
            occurred = parse_iso_datetime(period) if period else now
        except ValueError:
            error = ParseError(f"Row {index} has a malformed date", field="Period")
            logger.warning("Skipping export row: %s", error.message)
            errors.append(error)
            continue

        account_name = str(row.get("Accounts") or "Unknown Account")
        if account_name not in accounts:
            accounts[account_name] = {
                "id": f"acc_{uuid4().hex[:9]}_{index}",
                "name": account_name,
                "group": guess_group(account_name),
                "owner": guess_owner(account_name),
                "balance": 0.0,
                "currency": str(row.get("Currency") or "IDR"),
                "includeInTotals": True,
            }
        account = accounts[account_name]

        category = str(row.get("Category") or "")
        if category and category not in categories:
            categories.append(category)

        kind = str(row.get("Income/Expense") or "Expense")
        txn_type = INCOME if "income" in kind.lower() else EXPENSE

        transactions.append(
            Transaction(
                transaction_id=f"tx_{uuid4().hex[:9]}_{index}",
                date=occurred.isoformat(),
                type=txn_type,
                amount=amount,
                account_id=account["id"],
                category=category or "Uncategorized",
                notes=str(row.get("Note") or row.get("Description") or ""),
            )
        )
        account["balance"] += amount if txn_type == INCOME else -amount

    decoded_accounts, account_errors = decode_accounts(accounts.values())
    logger.info(
        "Imported %d transactions into %d accounts from flat export",
        len(transactions), len(decoded_accounts),
    )
    return DecodedDocument(
        decoded_accounts, transactions, errors + account_errors, [], [], categories
    )


def encode_account(account: Account) -> Dict[str, Any]:
    """Serialize an account to its stored camelCase form."""
    return account.model_dump(by_alias=True, exclude_none=True, exclude={"display_name"})


def encode_transaction(txn: Transaction) -> Dict[str, Any]:
    """Serialize a transaction to its stored camelCase form."""
    return txn.model_dump(by_alias=True, exclude_none=True)


def encode_fund(fund: FundAccount) -> Dict[str, Any]:
    return fund.model_dump(by_alias=True, exclude_none=True, exclude={"progress"})


def encode_fund_deposit(deposit: FundDeposit) -> Dict[str, Any]:
    return deposit.model_dump(by_alias=True, exclude_none=True)
