"""
Translation of store-side failures into HTTP errors.

Repositories let asyncpg and transaction errors propagate unchanged; routers
wrap calls in `store_errors()` so clients get a meaningful status code.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import asyncpg
from fastapi import HTTPException, status

from . import transaction


@contextmanager
def store_errors(*, not_found: str = "Referenced record not found.") -> Iterator[None]:
    try:
        yield
    except asyncpg.ForeignKeyViolationError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=not_found) from exc
    except asyncpg.UniqueViolationError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Conflicting concurrent update, retry the request.",
        ) from exc
    except TimeoutError as exc:
        raise HTTPException(
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            detail="Database operation timed out.",
        ) from exc
    except transaction.TransactionError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database transaction failed.",
        ) from exc
