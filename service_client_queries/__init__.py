"""Client Queries service."""
