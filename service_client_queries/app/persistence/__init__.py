"""Persistence layer for the Client Queries service."""
