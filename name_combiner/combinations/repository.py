from typing import Any, Mapping, Sequence, TypeAlias

import psycopg
from loguru import logger
from psycopg.rows import dict_row

from name_combiner.configuration import get_connection

from .models import CombinationSet, GeneratedName, StoredName

Params: TypeAlias = Sequence[Any] | Mapping[str, Any]

INSERT_SET_SQL: str = """
    insert into name_combination_sets (name1, name2, user_id)
        values (%(name1)s, %(name2)s, %(user_id)s)
    returning id, name1, name2, created_at, user_id
"""

INSERT_NAME_SQL: str = """
    insert into generated_names (name, goodness, set_id)
        values (%(name)s, %(goodness)s, %(set_id)s)
    returning id, name, goodness
"""

SELECT_SETS_SQL: str = """
    select id, name1, name2, created_at, user_id
    from name_combination_sets
    where user_id = %(user_id)s
    order by created_at desc, id desc
"""

SELECT_NAMES_SQL: str = """
    select id, name, goodness, set_id
    from generated_names
    where set_id = any(%(set_ids)s)
    order by set_id, id
"""

SELECT_SESSION_USER_SQL: str = """
    select user_id
    from sessions
    where session_token = %(token)s
      and expires > now()
"""


class CombinationRepository:
    """Persists and reads combination sets with their generated names"""

    def __init__(self, connection: psycopg.AsyncConnection | None = None) -> None:
        self.connection: psycopg.AsyncConnection | None = connection

    async def get_connection(self) -> psycopg.AsyncConnection:
        if not self.connection:
            self.connection = await get_connection()
        return self.connection

    async def fetch_all(self, sql: str, params: Params | None = None) -> list[dict[str, Any]]:
        connection: psycopg.AsyncConnection = await self.get_connection()
        async with connection.cursor(row_factory=dict_row) as cursor:
            await cursor.execute(sql.strip(), params)  # type: ignore
            rows: list[dict[str, Any]] = await cursor.fetchall()
            return [dict(row) for row in rows]

    async def fetch_one(self, sql: str, params: Params | None = None) -> dict[str, Any] | None:
        connection: psycopg.AsyncConnection = await self.get_connection()
        async with connection.cursor(row_factory=dict_row) as cursor:
            await cursor.execute(sql.strip(), params)  # type: ignore
            row: dict[str, Any] | None = await cursor.fetchone()
            return dict(row) if row else None

    async def create_set(self, user_id: str, name1: str, name2: str, results: list[GeneratedName]) -> CombinationSet:
        """Insert a set and all its names in one transaction"""
        connection: psycopg.AsyncConnection = await self.get_connection()
        async with connection.transaction():
            async with connection.cursor(row_factory=dict_row) as cursor:
                await cursor.execute(INSERT_SET_SQL.strip(), {"name1": name1, "name2": name2, "user_id": user_id})
                set_row: dict[str, Any] = await cursor.fetchone()

                stored: list[StoredName] = []
                for result in results:
                    await cursor.execute(
                        INSERT_NAME_SQL.strip(),
                        {"name": result.name, "goodness": result.goodness, "set_id": set_row["id"]},
                    )
                    stored.append(StoredName.model_validate(dict(await cursor.fetchone())))

        logger.info(f"Stored combination set {set_row['id']} with {len(stored)} names for user {user_id}")
        return CombinationSet.model_validate(dict(set_row) | {"results": stored})

    async def list_sets(self, user_id: str) -> list[CombinationSet]:
        """Return the user's sets, newest first, each with names in creation order"""
        set_rows: list[dict[str, Any]] = await self.fetch_all(SELECT_SETS_SQL, {"user_id": user_id})
        if not set_rows:
            return []

        name_rows: list[dict[str, Any]] = await self.fetch_all(SELECT_NAMES_SQL, {"set_ids": [row["id"] for row in set_rows]})

        names_by_set: dict[int, list[StoredName]] = {}
        for row in name_rows:
            names_by_set.setdefault(row["set_id"], []).append(StoredName(id=row["id"], name=row["name"], goodness=row["goodness"]))

        return [CombinationSet.model_validate(row | {"results": names_by_set.get(row["id"], [])}) for row in set_rows]

    async def get_session_user(self, token: str) -> str | None:
        """Return the id of the user owning an unexpired session token"""
        row: dict[str, Any] | None = await self.fetch_one(SELECT_SESSION_USER_SQL, {"token": token})
        return row["user_id"] if row else None
