"""PostgreSQL access for the certificates table."""

import logging
from typing import List, Optional

import asyncpg
from asyncpg import Pool

from certstore.exceptions import PersistenceError
from certstore.models import Certificate, CertificateFields

logger = logging.getLogger(__name__)

# Errors raised by the driver or the network that become PersistenceError
DRIVER_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError)


class CertificateRepository:
    """Parameterized statements against the ``certificates`` table.

    Every method issues exactly one statement, so each row mutation is
    atomic on its own and nothing spans more than one statement.
    """

    def __init__(self, connection_string: str, min_size: int = 1, max_size: int = 10):
        self.connection_string = connection_string
        self.min_size = min_size
        self.max_size = max_size
        self.pool: Optional[Pool] = None

    async def connect(self) -> None:
        """Open the connection pool."""
        try:
            self.pool = await asyncpg.create_pool(
                self.connection_string,
                min_size=self.min_size,
                max_size=self.max_size,
            )
        except DRIVER_ERRORS as e:
            raise PersistenceError(f"Failed to connect to database: {e}") from e

    async def disconnect(self) -> None:
        """Close the connection pool."""
        if self.pool:
            await self.pool.close()
            self.pool = None

    async def insert(self, fields: CertificateFields, image_url: str) -> Certificate:
        """Insert a row and return it with its assigned id."""
        row = await self._fetchrow(
            """
            INSERT INTO certificates
                (name, title, description, provider, category, date, link, image)
            VALUES ($1, $2, $3, $4, $5, $6::text::date, $7, $8)
            RETURNING *
            """,
            fields.name,
            fields.title,
            fields.description,
            fields.provider,
            fields.category,
            fields.date,
            fields.link,
            image_url,
        )
        return Certificate(**dict(row))

    async def list_all(self) -> List[Certificate]:
        return await self._fetch("SELECT * FROM certificates")

    async def get(self, certificate_id: int) -> Optional[Certificate]:
        row = await self._fetchrow(
            "SELECT * FROM certificates WHERE id = $1", certificate_id
        )
        return Certificate(**dict(row)) if row else None

    async def update(
        self,
        certificate_id: int,
        fields: CertificateFields,
        image_url: Optional[str] = None,
    ) -> Optional[Certificate]:
        """Overwrite every metadata column; keep ``image`` when no URL is given.

        Returns:
            The updated row, or None if no row has that id
        """
        row = await self._fetchrow(
            """
            UPDATE certificates
            SET name = $1, title = $2, description = $3, provider = $4,
                category = $5, date = $6::text::date, link = $7,
                image = COALESCE($8, image)
            WHERE id = $9
            RETURNING *
            """,
            fields.name,
            fields.title,
            fields.description,
            fields.provider,
            fields.category,
            fields.date,
            fields.link,
            image_url,
            certificate_id,
        )
        return Certificate(**dict(row)) if row else None

    async def delete(self, certificate_id: int) -> Optional[Certificate]:
        row = await self._fetchrow(
            "DELETE FROM certificates WHERE id = $1 RETURNING *", certificate_id
        )
        return Certificate(**dict(row)) if row else None

    async def list_by_provider(self, provider: str) -> List[Certificate]:
        return await self._fetch(
            "SELECT * FROM certificates WHERE provider = $1", provider
        )

    async def list_by_date(self, newest_first: bool = False) -> List[Certificate]:
        """All rows ordered by date; undated rows come last either way."""
        direction = "DESC" if newest_first else "ASC"
        return await self._fetch(
            f"SELECT * FROM certificates ORDER BY date {direction} NULLS LAST, id ASC"
        )

    async def _fetchrow(self, query: str, *args) -> Optional[asyncpg.Record]:
        pool = self._require_pool()
        try:
            async with pool.acquire() as conn:
                return await conn.fetchrow(query, *args)
        except DRIVER_ERRORS as e:
            logger.error(f"Database statement failed: {e}")
            raise PersistenceError(str(e)) from e

    async def _fetch(self, query: str, *args) -> List[Certificate]:
        pool = self._require_pool()
        try:
            async with pool.acquire() as conn:
                rows = await conn.fetch(query, *args)
        except DRIVER_ERRORS as e:
            logger.error(f"Database statement failed: {e}")
            raise PersistenceError(str(e)) from e

        return [Certificate(**dict(row)) for row in rows]

    def _require_pool(self) -> Pool:
        if not self.pool:
            raise PersistenceError("Database pool is not initialised")
        return self.pool
