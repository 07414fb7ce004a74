"""
Group persistence (raw SQL).

Besides plain CRUD this module owns group membership:
- slurm.contact_in_group(created_at, updated_at, group_id, contact_id)
  with PRIMARY KEY (group_id, contact_id)
- slurm."group".contact_count, kept equal to the number of membership rows

Membership writes run inside a scoped transaction (see `core.transaction`);
the `*_tx` helpers expect the caller's connection and never commit.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from uuid import UUID

import asyncpg

from contacts import repository as contact_repository
from contacts.domain import Contact
from core import db, transaction
from core.query import QueryParameter

from .domain import Group, existence_map, filter_new_contact_ids

# Column order of the membership COPY path.
MEMBERSHIP_COLUMNS = ("created_at", "updated_at", "group_id", "contact_id")

SORTABLE_COLUMNS = {
    "created_at": "created_at",
    "modified_at": "modified_at",
    "name": "name",
    "contact_count": "contact_count",
}

MEMBER_SORTABLE_COLUMNS = {
    "created_at": "c.created_at",
    "added_at": "m.created_at",
    "name": "c.name",
    "surname": "c.surname",
    "phone_number": "c.phone_number",
}

logger = logging.getLogger(__name__)


async def create_group(group: Group) -> Group:
    row = await db.fetch_one(
        """
        INSERT INTO slurm."group" (id, created_at, modified_at, name, description, contact_count)
        VALUES ($1, $2, $3, $4, $5, 0)
        RETURNING id, created_at, modified_at, name, description, contact_count
        """,
        group.id,
        group.created_at,
        group.modified_at,
        group.name,
        group.description,
    )
    if row is None:
        raise RuntimeError("Failed to create group.")
    return Group.from_row(row)


async def get_group(group_id: UUID) -> Group | None:
    row = await db.fetch_one(
        """
        SELECT id, created_at, modified_at, name, description, contact_count
        FROM slurm."group"
        WHERE id = $1
        """,
        group_id,
    )
    return Group.from_row(row) if row is not None else None


async def list_groups(params: QueryParameter) -> list[Group]:
    rows = await db.fetch_all(
        """
        SELECT id, created_at, modified_at, name, description, contact_count
        FROM slurm."group"
        """
        + params.order_by(SORTABLE_COLUMNS)
        + """
        LIMIT $1
        OFFSET $2
        """,
        params.limit,
        params.offset,
    )
    return [Group.from_row(r) for r in rows]


async def count_groups() -> int:
    row = await db.fetch_one('SELECT count(*) AS n FROM slurm."group"')
    return int((row or {}).get("n", 0))


async def update_group(group_id: UUID, *, name: str, description: str) -> Group | None:
    row = await db.fetch_one(
        """
        UPDATE slurm."group"
        SET name = $2,
            description = $3,
            modified_at = now()
        WHERE id = $1
        RETURNING id, created_at, modified_at, name, description, contact_count
        """,
        group_id,
        name,
        description,
    )
    return Group.from_row(row) if row is not None else None


async def delete_group(group_id: UUID) -> bool:
    """
    Delete a group; its membership rows go with it (ON DELETE CASCADE).
    """
    status = await db.execute('DELETE FROM slurm."group" WHERE id = $1', group_id)
    return db.affected_rows(status) > 0


async def list_group_contacts(group_id: UUID, params: QueryParameter) -> list[Contact]:
    rows = await db.fetch_all(
        """
        SELECT c.id, c.created_at, c.modified_at, c.name, c.surname, c.patronymic,
               c.phone_number, c.email, c.age, c.gender
        FROM slurm.contact_in_group m
        JOIN slurm.contact c ON c.id = m.contact_id
        WHERE m.group_id = $1
        """
        + params.order_by(MEMBER_SORTABLE_COLUMNS, tiebreaker="c.id")
        + """
        LIMIT $2
        OFFSET $3
        """,
        group_id,
        params.limit,
        params.offset,
    )
    return [Contact.from_row(r) for r in rows]


async def create_contacts_into_group(group_id: UUID, contacts: list[Contact]) -> list[Contact]:
    """
    Persist new contacts and attach them to `group_id` in one transaction.

    If attaching fails the created contacts are rolled back too.
    """
    async with transaction.scoped_transaction(operation="create_contacts_into_group") as conn:
        created = await contact_repository.create_contacts_tx(conn, contacts)
        await fill_group_tx(conn, group_id, [c.id for c in created])
        return created


async def add_contacts_to_group(group_id: UUID, contact_ids: list[UUID]) -> list[UUID]:
    """
    Attach existing contacts to a group. Already-attached ids are skipped.

    Returns the ids that were actually inserted.
    """
    if not contact_ids:
        return []
    async with transaction.scoped_transaction(operation="add_contacts_to_group") as conn:
        return await fill_group_tx(conn, group_id, contact_ids)


async def delete_contact_from_group(group_id: UUID, contact_id: UUID) -> None:
    """
    Detach one contact. A missing membership is not an error.
    """
    async with transaction.scoped_transaction(operation="delete_contact_from_group") as conn:
        await lock_group_tx(conn, group_id)
        status = await conn.execute(
            """
            DELETE FROM slurm.contact_in_group
            WHERE contact_id = $1
              AND group_id = $2
            """,
            contact_id,
            group_id,
        )
        await update_group_contact_count_tx(conn, group_id)

    logger.info(
        "group_member_removed group_id=%s contact_id=%s removed=%s",
        group_id,
        contact_id,
        db.affected_rows(status),
    )


async def fill_group_tx(conn: asyncpg.Connection, group_id: UUID, contact_ids: list[UUID]) -> list[UUID]:
    """
    Insert memberships for the candidates that are not members yet.

    The group row is locked first. Rows go through COPY with one shared timestamp, then the group's count is
    recomputed. Returns the inserted ids (empty when everything was attached).
    """
    await lock_group_tx(conn, group_id)
    _, existence = await check_exist_contacts_in_group_tx(conn, group_id, contact_ids)
    new_ids = filter_new_contact_ids(contact_ids, existence)
    if not new_ids:
        return []

    now = datetime.now(timezone.utc)
    await conn.copy_records_to_table(
        "contact_in_group",
        schema_name="slurm",
        columns=MEMBERSHIP_COLUMNS,
        records=[(now, now, group_id, contact_id) for contact_id in new_ids],
    )
    await update_group_contact_count_tx(conn, group_id)

    logger.info(
        "group_members_added group_id=%s requested=%s inserted=%s",
        group_id,
        len(contact_ids),
        len(new_ids),
    )
    return new_ids


async def check_exist_contacts_in_group_tx(
    conn: asyncpg.Connection,
    group_id: UUID,
    contact_ids: list[UUID],
) -> tuple[list[UUID], dict[UUID, bool]]:
    """
    Return (ids already in the group, candidate -> is_member map).
    """
    if not contact_ids:
        return [], {}

    rows = await conn.fetch(
        """
        SELECT contact_id
        FROM slurm.contact_in_group
        WHERE group_id = $1
          AND contact_id = ANY($2::uuid[])
        """,
        group_id,
        list(contact_ids),
    )
    existing = [UUID(str(r["contact_id"])) for r in rows]
    return existing, existence_map(contact_ids, existing)


async def lock_group_tx(conn: asyncpg.Connection, group_id: UUID) -> None:
    """
    Take the group row lock so concurrent membership changes recount in turn.
    """
    await conn.execute(
        """
        SELECT id
        FROM slurm."group"
        WHERE id = $1
        FOR UPDATE
        """,
        group_id,
    )


async def update_group_contact_count_tx(conn: asyncpg.Connection, group_id: UUID) -> None:
    await conn.execute(
        """
        UPDATE slurm."group"
        SET contact_count = (
            SELECT count(*)
            FROM slurm.contact_in_group
            WHERE group_id = $1
        )
        WHERE id = $1
        """,
        group_id,
    )
