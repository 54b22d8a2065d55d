"""
Unit tests for document stores.
"""

import json

import pytest

from household_finance_mcp.core.exceptions import StoreNotFoundError
from household_finance_mcp.core.identity import StaticIdentityProvider, UserIdentity
from household_finance_mcp.core.store import (
    ACCOUNTS,
    CATEGORIES,
    FUND_DEPOSITS,
    FUNDS,
    TRANSACTIONS,
    JsonFileStore,
    MemoryStore,
)


class TestJsonFileStore:
    def test_missing_file(self, tmp_path):
        store = JsonFileStore(tmp_path / "missing.json")
        assert store.exists() is False
        with pytest.raises(StoreNotFoundError):
            store.load()

    def test_save_and_load(self, tmp_path):
        store = JsonFileStore(tmp_path / "nested" / "data.json")
        document = {ACCOUNTS: [{"id": "a"}], TRANSACTIONS: [{"id": "t"}], CATEGORIES: ["Food"]}
        store.save(document)

        assert store.exists()
        assert store.load() == document
        # No temp files left behind
        assert [p.name for p in (tmp_path / "nested").iterdir()] == ["data.json"]

    def test_upsert_and_delete(self, data_path):
        store = JsonFileStore(data_path)
        store.upsert(ACCOUNTS, {"id": "acc_new", "name": "New", "group": "Cash", "balance": 0})
        store.upsert(ACCOUNTS, {"id": "acc_new", "name": "Renamed", "group": "Cash", "balance": 0})

        accounts = json.loads(data_path.read_text())[ACCOUNTS]
        assert [a["name"] for a in accounts if a["id"] == "acc_new"] == ["Renamed"]

        assert store.delete(TRANSACTIONS, "tx1") is True
        assert store.delete(TRANSACTIONS, "tx1") is False
        assert len(store.load()[TRANSACTIONS]) == 4


class TestMemoryStore:
    def test_empty(self):
        store = MemoryStore()
        assert store.exists() is False
        with pytest.raises(StoreNotFoundError):
            store.load()

    def test_load_returns_copy(self, sample_document):
        store = MemoryStore(sample_document)
        loaded = store.load()
        loaded[ACCOUNTS].clear()
        assert len(store.load()[ACCOUNTS]) == 5

    def test_upsert_into_empty_store(self):
        store = MemoryStore()
        store.upsert(TRANSACTIONS, {"id": "t"})
        assert store.load() == {
            ACCOUNTS: [],
            TRANSACTIONS: [{"id": "t"}],
            FUNDS: [],
            FUND_DEPOSITS: [],
        }

    def test_upsert_keeps_other_sections(self):
        store = MemoryStore({ACCOUNTS: [], CATEGORIES: ["Food"], FUNDS: [{"id": "np_1"}]})
        store.upsert(FUND_DEPOSITS, {"id": "d1", "accountId": "np_1"})

        document = store.load()
        assert document[CATEGORIES] == ["Food"]
        assert document[FUNDS] == [{"id": "np_1"}]
        assert document[FUND_DEPOSITS] == [{"id": "d1", "accountId": "np_1"}]

    def test_incremental_update_needs_native_document(self):
        store = MemoryStore([{"Accounts": "BCA"}])
        with pytest.raises(ValueError):
            store.upsert(ACCOUNTS, {"id": "a"})


class TestIdentity:
    def test_static_identity(self):
        provider = StaticIdentityProvider(UserIdentity(name="Budi", email="budi@example.com"))
        assert provider.current_user().name == "Budi"

        provider.sign_out()
        assert provider.current_user() is None

    def test_signed_out_by_default(self):
        assert StaticIdentityProvider().current_user() is None
