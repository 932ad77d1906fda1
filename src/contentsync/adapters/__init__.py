"""Adapters connecting the domain to serialization formats and storage."""
