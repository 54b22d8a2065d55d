"""
Scope model: which accounts a derived total is computed over.
"""

from typing import Literal, Optional

from pydantic import BaseModel, model_validator

from household_finance_mcp.models.account import Account, AccountOwner

ScopeKind = Literal["GLOBAL", "OWNER", "ACCOUNT"]


class Scope(BaseModel):
    """
    Subset of accounts for an aggregate: everything, one owner, or one account.

    Scopes are frozen so they can key memoization caches.
    """

    model_config = {"strict": True, "frozen": True}

    kind: ScopeKind = "GLOBAL"
    owner: Optional[AccountOwner] = None
    account_id: Optional[str] = None

    @model_validator(mode="after")
    def validate_target(self) -> "Scope":
        if self.kind == "OWNER" and self.owner is None:
            raise ValueError("Owner scope requires an owner")
        if self.kind == "ACCOUNT" and not self.account_id:
            raise ValueError("Account scope requires an account_id")
        return self

    @classmethod
    def global_scope(cls) -> "Scope":
        return cls(kind="GLOBAL")

    @classmethod
    def for_owner(cls, owner: AccountOwner) -> "Scope":
        return cls(kind="OWNER", owner=owner)

    @classmethod
    def for_account(cls, account_id: str) -> "Scope":
        return cls(kind="ACCOUNT", account_id=account_id)

    def includes(self, account: Account) -> bool:
        """
        Check whether an account belongs to this scope.

        Aggregate scopes (GLOBAL, OWNER) honour the account's
        include_in_totals flag; an ACCOUNT scope always includes its account.
        """
        if self.kind == "ACCOUNT":
            return account.account_id == self.account_id
        if not account.include_in_totals:
            return False
        if self.kind == "OWNER":
            return account.owner == self.owner
        return True

    @property
    def label(self) -> str:
        if self.kind == "ACCOUNT":
            return f"Account {self.account_id}"
        if self.kind == "OWNER":
            return f"{self.owner}'s Assets"
        return "Total Net Worth"
