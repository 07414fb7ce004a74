"""
Transaction lifecycle helpers.

Repository operations that mutate more than one row open a scoped transaction:

    async with transaction.scoped_transaction(operation="add_contacts_to_group") as conn:
        await conn.execute(...)

The guard acquires a pooled connection, starts a transaction, bounds the body
with the repository timeout and finishes the transaction exactly once on every
exit path (commit on success, rollback on error).
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import asyncpg
from asyncpg.transaction import Transaction

from . import config, db

logger = logging.getLogger(__name__)


class TransactionError(RuntimeError):
    pass


class TransactionOpenError(TransactionError):
    pass


class TransactionCommitError(TransactionError):
    pass


class TransactionRollbackError(TransactionError):
    """
    Rollback failed after the body had already failed.

    `original` is the error that triggered the rollback; it is also the
    `__cause__` of this exception.
    """

    def __init__(self, message: str, *, original: BaseException, rollback_error: BaseException) -> None:
        super().__init__(message)
        self.original = original
        self.rollback_error = rollback_error


async def finish(tx: Transaction, error: BaseException | None, *, operation: str = "") -> None:
    """
    Commit when `error` is None, otherwise roll back.

    A successful rollback returns normally; the caller re-raises `error` itself.
    """
    if error is not None:
        try:
            await tx.rollback()
        except Exception as rollback_error:
            logger.error(
                "transaction_rollback_failed operation=%s error=%r cause=%r",
                operation,
                rollback_error,
                error,
            )
            raise TransactionRollbackError(
                f"Rollback failed for {operation or 'transaction'}: {rollback_error}",
                original=error,
                rollback_error=rollback_error,
            ) from error
        return None

    try:
        await tx.commit()
    except Exception as commit_error:
        logger.error("transaction_commit_failed operation=%s error=%r", operation, commit_error)
        raise TransactionCommitError(
            f"Commit failed for {operation or 'transaction'}: {commit_error}"
        ) from commit_error
    return None


@asynccontextmanager
async def scoped_transaction(
    *,
    operation: str,
    timeout_s: float | None = None,
) -> AsyncIterator[asyncpg.Connection]:
    limit = config.repository_timeout_s() if timeout_s is None else timeout_s

    async with db.pool().acquire() as conn:
        tx = conn.transaction()
        try:
            await tx.start()
        except Exception as exc:
            logger.error("transaction_open_failed operation=%s error=%r", operation, exc)
            raise TransactionOpenError(f"Could not open transaction for {operation}: {exc}") from exc

        try:
            # Commit/rollback below run outside the timeout window.
            async with asyncio.timeout(limit):
                yield conn
        except BaseException as exc:
            logger.warning("transaction_aborted operation=%s error=%r", operation, exc)
            await finish(tx, exc, operation=operation)
            raise

        await finish(tx, None, operation=operation)
