"""
Contact persistence (raw SQL).

Schema comes from the dbmate migration in `db/migrations`:
- slurm.contact(id uuid, created_at, modified_at, name, surname, patronymic,
  phone_number, email, age, gender)
"""

from __future__ import annotations

from uuid import UUID

import asyncpg

from core import db, transaction
from core.query import QueryParameter

from .domain import Contact

# Column order used by the COPY path; see Contact.copy_record().
CONTACT_COLUMNS = (
    "id",
    "created_at",
    "modified_at",
    "name",
    "surname",
    "patronymic",
    "phone_number",
    "email",
    "age",
    "gender",
)

SORTABLE_COLUMNS = {
    "created_at": "created_at",
    "modified_at": "modified_at",
    "name": "name",
    "surname": "surname",
    "phone_number": "phone_number",
    "email": "email",
    "age": "age",
}

_SELECT_CONTACT = """
    SELECT id, created_at, modified_at, name, surname, patronymic,
           phone_number, email, age, gender
    FROM slurm.contact
"""


async def create_contacts_tx(conn: asyncpg.Connection, contacts: list[Contact]) -> list[Contact]:
    """
    Bulk-insert new contacts inside the caller's transaction.

    Identities are assigned by `Contact.new()`, so the created objects are
    returned as-is.
    """
    if not contacts:
        return []

    await conn.copy_records_to_table(
        "contact",
        schema_name="slurm",
        columns=CONTACT_COLUMNS,
        records=[c.copy_record() for c in contacts],
    )
    return list(contacts)


async def create_contacts(contacts: list[Contact]) -> list[Contact]:
    async with transaction.scoped_transaction(operation="create_contacts") as conn:
        return await create_contacts_tx(conn, contacts)


async def get_contact(contact_id: UUID) -> Contact | None:
    row = await db.fetch_one(
        _SELECT_CONTACT + "WHERE id = $1",
        contact_id,
    )
    return Contact.from_row(row) if row is not None else None


async def list_contacts(params: QueryParameter) -> list[Contact]:
    rows = await db.fetch_all(
        _SELECT_CONTACT
        + params.order_by(SORTABLE_COLUMNS)
        + """
        LIMIT $1
        OFFSET $2
        """,
        params.limit,
        params.offset,
    )
    return [Contact.from_row(r) for r in rows]


async def count_contacts() -> int:
    row = await db.fetch_one("SELECT count(*) AS n FROM slurm.contact")
    return int((row or {}).get("n", 0))


async def update_contact(contact: Contact) -> Contact | None:
    row = await db.fetch_one(
        """
        UPDATE slurm.contact
        SET modified_at = $2,
            name = $3,
            surname = $4,
            patronymic = $5,
            phone_number = $6,
            email = $7,
            age = $8,
            gender = $9
        WHERE id = $1
        RETURNING id, created_at, modified_at, name, surname, patronymic,
                  phone_number, email, age, gender
        """,
        contact.id,
        contact.modified_at,
        contact.name,
        contact.surname,
        contact.patronymic,
        contact.phone_number,
        contact.email,
        contact.age,
        contact.gender,
    )
    return Contact.from_row(row) if row is not None else None


async def delete_contact(contact_id: UUID) -> bool:
    """
    Delete a contact together with its memberships.

    The contact row is locked first, then the rows of every group it belongs to
    in id order. Their counts are recomputed in the same transaction. Returns
    False when the contact does not exist.
    """
    async with transaction.scoped_transaction(operation="delete_contact") as conn:
        # Blocks attaches of this contact until the delete commits.
        await conn.execute("SELECT id FROM slurm.contact WHERE id = $1 FOR UPDATE", contact_id)
        rows = await conn.fetch(
            """
            SELECT group_id
            FROM slurm.contact_in_group
            WHERE contact_id = $1
            """,
            contact_id,
        )
        group_ids = sorted({UUID(str(r["group_id"])) for r in rows})
        if group_ids:
            await conn.execute(
                """
                SELECT id
                FROM slurm."group"
                WHERE id = ANY($1::uuid[])
                ORDER BY id
                FOR UPDATE
                """,
                group_ids,
            )
        await conn.execute(
            "DELETE FROM slurm.contact_in_group WHERE contact_id = $1",
            contact_id,
        )
        status = await conn.execute(
            "DELETE FROM slurm.contact WHERE id = $1",
            contact_id,
        )
        if group_ids:
            await conn.execute(
                """
                UPDATE slurm."group" g
                SET contact_count = (
                    SELECT count(*) FROM slurm.contact_in_group m WHERE m.group_id = g.id
                )
                WHERE g.id = ANY($1::uuid[])
                """,
                group_ids,
            )
        return db.affected_rows(status) > 0
