from __future__ import annotations

import asyncio
import logging
from unittest.mock import AsyncMock, MagicMock

import pytest

from core import transaction


@pytest.mark.asyncio
async def test_finish_commits_when_no_error():
    tx = AsyncMock()

    await transaction.finish(tx, None, operation="op")

    tx.commit.assert_awaited_once()
    tx.rollback.assert_not_awaited()


@pytest.mark.asyncio
async def test_finish_rolls_back_and_returns_on_error():
    tx = AsyncMock()

    result = await transaction.finish(tx, ValueError("boom"), operation="op")

    assert result is None
    tx.rollback.assert_awaited_once()
    tx.commit.assert_not_awaited()


@pytest.mark.asyncio
async def test_finish_rollback_failure_keeps_original_error(caplog):
    original = ValueError("insert failed")
    rollback_error = ConnectionError("connection lost")
    tx = AsyncMock()
    tx.rollback.side_effect = rollback_error

    with caplog.at_level(logging.ERROR, logger="core.transaction"):
        with pytest.raises(transaction.TransactionRollbackError) as excinfo:
            await transaction.finish(tx, original, operation="add_contacts_to_group")

    err = excinfo.value
    assert err.original is original
    assert err.rollback_error is rollback_error
    assert err.__cause__ is original
    assert "transaction_rollback_failed operation=add_contacts_to_group" in caplog.text


@pytest.mark.asyncio
async def test_finish_commit_failure_is_raised(caplog):
    tx = AsyncMock()
    tx.commit.side_effect = ConnectionError("gone")

    with caplog.at_level(logging.ERROR, logger="core.transaction"):
        with pytest.raises(transaction.TransactionCommitError) as excinfo:
            await transaction.finish(tx, None, operation="op")

    assert isinstance(excinfo.value.__cause__, ConnectionError)
    assert "transaction_commit_failed" in caplog.text


@pytest.mark.asyncio
async def test_scoped_transaction_commits_on_success(fake_store):
    async with transaction.scoped_transaction(operation="op") as conn:
        assert conn is not None

    assert fake_store.events == ["begin", "commit"]


@pytest.mark.asyncio
async def test_scoped_transaction_rolls_back_and_reraises(fake_store):
    with pytest.raises(KeyError):
        async with transaction.scoped_transaction(operation="op"):
            raise KeyError("missing")

    assert fake_store.events == ["begin", "rollback"]


@pytest.mark.asyncio
async def test_scoped_transaction_rollback_failure_wraps_body_error(fake_store):
    fake_store.fail_rollback = ConnectionError("rollback failed")

    with pytest.raises(transaction.TransactionRollbackError) as excinfo:
        async with transaction.scoped_transaction(operation="op"):
            raise KeyError("missing")

    assert isinstance(excinfo.value.original, KeyError)


@pytest.mark.asyncio
async def test_scoped_transaction_commit_failure(fake_store):
    fake_store.fail_commit = ConnectionError("commit failed")

    with pytest.raises(transaction.TransactionCommitError):
        async with transaction.scoped_transaction(operation="op"):
            pass

    assert fake_store.events == ["begin"]


@pytest.mark.asyncio
async def test_scoped_transaction_times_out_and_rolls_back(fake_store):
    with pytest.raises(TimeoutError):
        async with transaction.scoped_transaction(operation="slow", timeout_s=0.01):
            await asyncio.sleep(1)

    assert fake_store.events == ["begin", "rollback"]


@pytest.mark.asyncio
async def test_scoped_transaction_open_failure(monkeypatch):
    from contextlib import asynccontextmanager

    from core import db

    tx = AsyncMock()
    tx.start.side_effect = ConnectionError("refused")
    conn = MagicMock()
    conn.transaction.return_value = tx

    class _Pool:
        @asynccontextmanager
        async def acquire(self):
            yield conn

    monkeypatch.setattr(db, "_pool", _Pool())

    with pytest.raises(transaction.TransactionOpenError):
        async with transaction.scoped_transaction(operation="op"):
            pytest.fail("body must not run")

    tx.commit.assert_not_awaited()
    tx.rollback.assert_not_awaited()
