"""
Client Queries service.
"""

import asyncio
from typing import Dict

from fastapi.responses import JSONResponse

from shared.base_service import BaseService
from shared.errors import CacheError

from .cache.redis_cache import RedisClientCache
from .lookup import ReadThroughLookup
from .models import ResponseBody
from .persistence.postgres import PostgresClientStore

CLIENT_FOUND_MESSAGE = "Client retrieved successfully"
CLIENT_NOT_FOUND_MESSAGE = "The client was not found or does not exist"
BLANK_DOCUMENT_MESSAGE = "Document must not be blank"


def envelope(code: int, message: str, body=None) -> JSONResponse:
    """Build a response wrapped in the standard header/body envelope."""
    payload = ResponseBody.build(code, message, body)
    return JSONResponse(status_code=code, content=payload.model_dump(by_alias=True))


class ClientQueriesService(BaseService):
    """Client queries service implementation."""

    def __init__(self):
        super().__init__("client-queries", 8080)

        self.cache = RedisClientCache(
            self.config.redis_url,
            cache_name=self.config.cache_name,
            socket_timeout=self.config.redis_socket_timeout
        )
        self.store = PostgresClientStore(
            self.config.postgres_dsn,
            min_size=self.config.postgres_min_pool,
            max_size=self.config.postgres_max_pool,
            command_timeout=self.config.postgres_command_timeout,
            create_schema=self.config.create_schema
        )
        self.lookup = ReadThroughLookup(
            self.cache,
            self.store,
            propagate_cache_read_errors=self.config.propagate_cache_read_errors,
            metrics=self.metrics
        )

        self._setup_client_routes()

    def _setup_client_routes(self):
        """Set up client query routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": self.service_name,
                "message": "Client Queries Service",
                "version": "1.0.0",
                "capabilities": ["read_through_cache", "persistence"]
            }

        @self.app.get("/api/v1/clients/")
        async def get_client_without_document():
            """Reject a lookup with an empty document."""
            return envelope(400, BLANK_DOCUMENT_MESSAGE)

        @self.app.get("/api/v1/clients/{document}")
        async def get_client_by_document(document: str):
            """Get a client by document, cache first."""
            if not document.strip():
                return envelope(400, BLANK_DOCUMENT_MESSAGE)

            record = await self.lookup.lookup(document)
            if record is None:
                return envelope(404, CLIENT_NOT_FOUND_MESSAGE)

            return envelope(200, CLIENT_FOUND_MESSAGE, record)

    async def _check_dependencies(self) -> Dict[str, str]:
        """Check client queries dependencies."""
        return {
            "redis": "ok" if await self.cache.health_check() else "error",
            "postgres": "ok" if await self.store.health_check() else "error",
        }

    async def start(self):
        """Start client queries components."""
        await self.store.start()
        # Pin lookups to the loop that owns the asyncpg pool
        self.lookup.bind_loop(asyncio.get_running_loop())

        try:
            await self.cache.start()
        except CacheError as e:
            self.logger.warning("Cache unavailable, lookups will fall through to the store", error=e.message)

        self.logger.info("Client queries service started")

    async def stop(self):
        """Stop client queries components."""
        await self.lookup.drain()
        await self.cache.stop()
        await self.store.stop()

        self.logger.info("Client queries service stopped")


def create_app():
    """Create client queries service application."""
    service = ClientQueriesService()
    return service.app


if __name__ == "__main__":
    service = ClientQueriesService()
    service.run()
