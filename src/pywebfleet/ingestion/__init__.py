"""Ingestion layer.

This package turns raw WEBFLEET responses into normalized domain
records. Nothing here performs I/O.
"""

__all__: list[str] = []
