"""
Client Queries service package.

Resolves client records by document number using a read-through cache:

- app.main: API surface for client queries and health.
- app.lookup: Read-through orchestration and execution context affinity.
- app.cache: Redis-backed cache of client records (no expiry).
- app.persistence: PostgreSQL storage, the source of truth for clients.

Guidelines:
- Cache hits are trusted; the store is consulted only on a miss.
- Cache failures degrade latency, never correctness.
"""
