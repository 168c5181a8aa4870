"""
Cache package for the Client Queries service.

Provides a Redis-backed mirror of client records. Entries are written
without expiry; eviction is left to Redis.
"""
