"""
PostgreSQL persistence layer for the Client Queries service.
"""

from typing import Optional

import asyncpg

from shared.logging import get_logger
from shared.errors import DurableStoreError
from ..models import ClientRecord


class PostgresClientStore:
    """PostgreSQL source of truth for clients.

    The asyncpg pool is bound to the event loop that runs ``start()``.
    """

    def __init__(
        self,
        dsn: str,
        min_size: int = 2,
        max_size: int = 10,
        command_timeout: float = 30.0,
        create_schema: bool = False,
    ):
        self.dsn = dsn
        self.min_size = min_size
        self.max_size = max_size
        self.command_timeout = command_timeout
        self.create_schema = create_schema
        self.logger = get_logger("client-queries.persistence.postgres")
        self.pool: Optional[asyncpg.Pool] = None

    async def start(self):
        """Start the persistence layer."""
        try:
            self.pool = await asyncpg.create_pool(
                self.dsn,
                min_size=self.min_size,
                max_size=self.max_size,
                command_timeout=self.command_timeout
            )

            if self.create_schema:
                await self._create_tables()

            self.logger.info("PostgreSQL persistence started")

        except Exception as e:
            self.logger.error("Failed to start PostgreSQL persistence", error=str(e))
            raise DurableStoreError("Failed to start PostgreSQL persistence", {"error": str(e)}) from e

    async def stop(self):
        """Stop the persistence layer."""
        if self.pool:
            await self.pool.close()
            self.pool = None
            self.logger.info("PostgreSQL persistence stopped")

    async def _create_tables(self):
        """Create database tables."""
        async with self.pool.acquire() as conn:
            await conn.execute("""
                CREATE TABLE IF NOT EXISTS client (
                    id BIGSERIAL PRIMARY KEY,
                    document VARCHAR(255) UNIQUE,
                    document_type VARCHAR(255),
                    name VARCHAR(255),
                    phone VARCHAR(255),
                    email VARCHAR(255) UNIQUE,
                    address VARCHAR(255),
                    credit_card VARCHAR(255)
                );
            """)

    async def find_by_key(self, document: str) -> Optional[ClientRecord]:
        """Load a client by its unique document."""
        if self.pool is None:
            raise DurableStoreError("PostgreSQL persistence not started")

        self.logger.info("Querying client store", document=document)
        try:
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow("""
                    SELECT document, document_type, name, phone, email, address, credit_card
                    FROM client
                    WHERE document = $1
                    LIMIT 1
                """, document)
        except Exception as e:
            self.logger.error(
                "Error loading client",
                document=document,
                error_type=type(e).__name__,
                error=str(e)
            )
            raise DurableStoreError("Failed to load client", {"document": document, "error": str(e)}) from e

        if not row:
            return None

        return ClientRecord.from_row(row)

    async def health_check(self) -> bool:
        """Check database health."""
        if self.pool is None:
            return False
        try:
            async with self.pool.acquire() as conn:
                await conn.fetchval("SELECT 1")
                return True
        except Exception:
            return False
