"""
Document stores for household finance data.

The store is a simple load/save document holder, not a query engine. The
stored document is the native backup format:

    {
        "accounts": [...],
        "transactions": [...],
        "nonProfitAccounts": [...],
        "nonProfitTransactions": [...],
        "categories": [...]
    }

with camelCase keys, one dict per record. Only "accounts" is required.
"""

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional

from household_finance_mcp.core.exceptions import StoreNotFoundError

logger = logging.getLogger(__name__)

Record = Dict[str, Any]
Document = Dict[str, List[Any]]

ACCOUNTS = "accounts"
TRANSACTIONS = "transactions"
FUNDS = "nonProfitAccounts"
FUND_DEPOSITS = "nonProfitTransactions"
CATEGORIES = "categories"

RECORD_SECTIONS = (ACCOUNTS, TRANSACTIONS, FUNDS, FUND_DEPOSITS)


class DocumentStore(ABC):
    """
    Abstract persistence collaborator.

    Implementations only need load() and save(); incremental upsert and
    delete are built on top of them.
    """

    @abstractmethod
    def exists(self) -> bool:
        """Check whether the store holds a document."""

    @abstractmethod
    def load(self) -> Any:
        """
        Load the raw stored document.

        Returns:
            Parsed JSON: normally a native backup dict, or a flat list of
            exported rows

        Raises:
            StoreNotFoundError: If there is nothing to load
        """

    @abstractmethod
    def save(self, document: Document) -> None:
        """Replace the stored document."""

    def upsert(self, kind: str, record: Record) -> None:
        """Insert or replace one record of ``kind`` keyed by its "id"."""
        document = self._load_document()
        records = [r for r in document[kind] if r.get("id") != record["id"]]
        records.append(record)
        document[kind] = records
        self.save(document)

    def delete(self, kind: str, record_id: str) -> bool:
        """
        Delete one record of ``kind``.

        Returns:
            True if a record was removed
        """
        document = self._load_document()
        records = [r for r in document[kind] if r.get("id") != record_id]
        removed = len(records) != len(document[kind])
        if removed:
            document[kind] = records
            self.save(document)
        return removed

    def _load_document(self) -> Document:
        if not self.exists():
            return {kind: [] for kind in RECORD_SECTIONS}
        raw = self.load()
        if not isinstance(raw, dict):
            raise ValueError("Incremental updates need a native backup document")
        document = {kind: list(raw.get(kind) or []) for kind in RECORD_SECTIONS}
        if CATEGORIES in raw:
            document[CATEGORIES] = list(raw[CATEGORIES] or [])
        return document


class JsonFileStore(DocumentStore):
    """Stores the document as a JSON file, written atomically."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> Any:
        if not self.exists():
            raise StoreNotFoundError(f"Data file not found: {self.path}")
        with open(self.path, "r", encoding="utf-8") as f:
            return json.load(f)

    def save(self, document: Document) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)

        # Write to a sibling temp file, then swap it in
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

        logger.debug(
            "Saved %d accounts and %d transactions to %s",
            len(document.get(ACCOUNTS, [])), len(document.get(TRANSACTIONS, [])), self.path,
        )


class MemoryStore(DocumentStore):
    """Keeps the document in memory; used by tests and demos."""

    def __init__(self, document: Optional[Any] = None):
        self._document = document

    def exists(self) -> bool:
        return self._document is not None

    def load(self) -> Any:
        if self._document is None:
            raise StoreNotFoundError("Memory store is empty")
        return json.loads(json.dumps(self._document))

    def save(self, document: Document) -> None:
        self._document = json.loads(json.dumps(document))
