"""Warehouse inventory ledger and stock aggregation service."""

__version__ = "1.0.0"
