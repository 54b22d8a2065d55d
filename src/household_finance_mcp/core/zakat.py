"""
Zakat Mal eligibility engine.

The state (NOT_OBLIGATED, OBLIGATED, PAID) is derived fresh on every
assessment from current balances and the transaction log; nothing about it
is stored. The only write this engine produces is the payment transaction,
which the caller appends to the log.
"""

import logging
import re
from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Sequence, Set, Tuple
from uuid import uuid4

from household_finance_mcp.core.exceptions import ZakatPaymentError
from household_finance_mcp.core.history import reconstruct_asset_history, scope_balance
from household_finance_mcp.models.account import Account
from household_finance_mcp.models.scope import Scope
from household_finance_mcp.models.transaction import EXPENSE, ZAKAT_CATEGORY, Transaction
from household_finance_mcp.models.zakat import Notification, ZakatAssessment, ZakatStatus

logger = logging.getLogger(__name__)

NISAB_GOLD_GRAMS = 85
HAUL_DAYS = 354  # One lunar year
ZAKAT_RATE = 0.025
FUNDING_GROUPS = ("Cash", "Bank Accounts")

_OWNER_TAG = re.compile(r"\((Husband|Wife)\)")


def nisab_threshold(gold_price_per_gram: float) -> float:
    """Minimum wealth above which zakat is due: 85 grams of gold."""
    return gold_price_per_gram * NISAB_GOLD_GRAMS


def haul_start(now: datetime) -> datetime:
    return now - timedelta(days=HAUL_DAYS)


def payment_owner(txn: Transaction, accounts: Sequence[Account]) -> Optional[str]:
    """
    Owner a zakat payment was made for.

    The "(Owner)" tag in the notes wins; otherwise the funding account's owner.
    """
    match = _OWNER_TAG.search(txn.notes or "")
    if match:
        return match.group(1)
    for acc in accounts:
        if acc.account_id == txn.account_id:
            return acc.owner
    return None


def find_qualifying_payment(
    owner: str,
    accounts: Sequence[Account],
    transactions: Iterable[Transaction],
    now: datetime,
) -> Optional[Transaction]:
    """
    Most recent zakat payment for ``owner`` within the current haul window.

    Args:
        owner: Husband or Wife
        accounts: Current accounts, used to resolve funding account owners
        transactions: Transaction log
        now: Reference clock

    Returns:
        The latest qualifying payment, or None
    """
    window_start = haul_start(now).date()
    today = now.date()

    latest: Optional[Transaction] = None
    for txn in transactions:
        if txn.category != ZAKAT_CATEGORY or txn.type != EXPENSE:
            continue
        if not window_start <= txn.day <= today:
            continue
        if payment_owner(txn, accounts) != owner:
            continue
        if latest is None or txn.occurred_at >= latest.occurred_at:
            latest = txn
    return latest


def assess_zakat(
    owner: str,
    accounts: Sequence[Account],
    transactions: Sequence[Transaction],
    gold_price_per_gram: float,
    now: Optional[datetime] = None,
) -> ZakatAssessment:
    """
    Evaluate one owner's zakat obligation.

    Rules, in order:
    1. A zakat payment for the owner dated within the last 354 days -> PAID.
    2. Owner's current total >= gold price x 85 (inclusive) -> OBLIGATED,
       due 2.5% of the total.
    3. Otherwise NOT_OBLIGATED.

    Args:
        owner: Husband or Wife
        accounts: Current accounts
        transactions: Transaction log
        gold_price_per_gram: Spot gold price per gram
        now: Reference clock (default: datetime.now())

    Returns:
        ZakatAssessment
    """
    now = now or datetime.now()
    scope = Scope.for_owner(owner)
    nisab = nisab_threshold(gold_price_per_gram)
    start = haul_start(now)
    current_total = scope_balance(accounts, scope)

    history = reconstruct_asset_history(
        accounts, transactions, start.date(), now.date(), scope=scope, now=now
    )
    lowest = min(point.value for point in history.points)

    common = dict(
        owner=owner,
        gold_price_per_gram=gold_price_per_gram,
        nisab_value=nisab,
        haul_start_date=start.date().isoformat(),
        current_total=current_total,
        lowest_balance_in_haul=lowest,
    )

    payment = find_qualifying_payment(owner, accounts, transactions, now)
    if payment is not None:
        paid_on = payment.day
        return ZakatAssessment(
            status=ZakatStatus.PAID,
            reason="Zakat already paid within the current haul.",
            zakat_amount=payment.amount,
            payment_date=paid_on.isoformat(),
            payment_transaction_id=payment.transaction_id,
            next_haul_date=(paid_on + timedelta(days=HAUL_DAYS)).isoformat(),
            **common,
        )

    if current_total >= nisab:
        return ZakatAssessment(
            status=ZakatStatus.OBLIGATED,
            reason="Current assets reached the nisab.",
            zakat_amount=current_total * ZAKAT_RATE,
            **common,
        )

    return ZakatAssessment(
        status=ZakatStatus.NOT_OBLIGATED,
        reason="Current assets below nisab.",
        **common,
    )


class NotificationLedger:
    """
    Caller-owned record of sent notifications.

    Deduplicates alerts by (period, owner) so an obligation is announced
    once per cycle, however often it is re-evaluated.
    """

    def __init__(self):
        self._sent: Set[Tuple[int, str]] = set()
        self.notifications: List[Notification] = []

    def has_sent(self, period: int, owner: str) -> bool:
        return (period, owner) in self._sent

    def notify_once(self, period: int, owner: str, notification: Notification) -> bool:
        """
        Record a notification unless one was already sent for this key.

        Returns:
            True if the notification was recorded
        """
        key = (period, owner)
        if key in self._sent:
            return False
        self._sent.add(key)
        self.notifications.insert(0, notification)
        return True

    def unread(self) -> List[Notification]:
        return [n for n in self.notifications if not n.read]

    def mark_as_read(self, notification_id: str) -> bool:
        for index, notification in enumerate(self.notifications):
            if notification.notification_id == notification_id:
                self.notifications[index] = notification.model_copy(update={"read": True})
                return True
        return False

    def clear(self) -> None:
        """Drop the notification list; dedup markers are kept."""
        self.notifications = []


def notify_if_obligated(
    assessment: ZakatAssessment,
    ledger: NotificationLedger,
    now: Optional[datetime] = None,
) -> Optional[Notification]:
    """
    Emit one alert the first time an owner is found OBLIGATED in a year.

    Returns:
        The new notification, or None if not obligated or already notified
    """
    if assessment.status != ZakatStatus.OBLIGATED:
        return None

    now = now or datetime.now()
    notification = Notification(
        notification_id=f"zakat-{now.year}-{assessment.owner.lower()}",
        title="Zakat Mal is due",
        message=(
            f"{assessment.owner}'s assets reached the nisab. "
            f"Zakat due: {assessment.zakat_amount:,.0f}."
        ),
        date=now.isoformat(timespec="seconds"),
        type="ALERT",
    )
    if not ledger.notify_once(now.year, assessment.owner, notification):
        return None
    logger.info("Zakat alert raised for %s (%d)", assessment.owner, now.year)
    return notification


def eligible_funding_accounts(accounts: Iterable[Account], owner: str) -> List[Account]:
    """Cash and bank accounts owned by ``owner`` or by nobody in particular."""
    return [
        acc
        for acc in accounts
        if acc.group in FUNDING_GROUPS and (acc.owner is None or acc.owner == owner)
    ]


def payment_allowed(
    assessment: ZakatAssessment,
    funding_account_id: Optional[str],
    accounts: Iterable[Account],
) -> Tuple[bool, str]:
    """
    Check whether the payment action is enabled.

    Returns:
        Tuple of (allowed, reason)
    """
    if assessment.status != ZakatStatus.OBLIGATED:
        return False, f"Zakat is not due (status {assessment.status.value})"
    if assessment.zakat_amount <= 0:
        return False, "Nothing to pay"
    if not funding_account_id:
        return False, "Select a funding account"
    eligible = {acc.account_id for acc in eligible_funding_accounts(accounts, assessment.owner)}
    if funding_account_id not in eligible:
        return False, f"Account {funding_account_id} cannot fund this payment"
    return True, "OK"


def build_zakat_payment(
    assessment: ZakatAssessment,
    funding_account_id: Optional[str],
    accounts: Sequence[Account],
    now: Optional[datetime] = None,
) -> Transaction:
    """
    Build the single EXPENSE transaction that pays the assessed zakat.

    Args:
        assessment: An OBLIGATED assessment
        funding_account_id: Cash or bank account to pay from
        accounts: Current accounts
        now: Payment timestamp (default: datetime.now())

    Returns:
        Transaction to append to the log

    Raises:
        ZakatPaymentError: If the payment action is blocked
    """
    allowed, reason = payment_allowed(assessment, funding_account_id, accounts)
    if not allowed:
        raise ZakatPaymentError(reason)

    now = now or datetime.now()
    return Transaction(
        transaction_id=f"zakat-{uuid4().hex[:9]}",
        date=now.isoformat(timespec="seconds"),
        type=EXPENSE,
        amount=assessment.zakat_amount,
        account_id=funding_account_id,
        category=ZAKAT_CATEGORY,
        notes=f"Zakat Mal ({assessment.owner})",
    )
