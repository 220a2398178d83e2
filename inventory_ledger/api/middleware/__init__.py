"""API middleware."""

from inventory_ledger.api.middleware.error_handler import ErrorHandlerMiddleware
from inventory_ledger.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware", "ErrorHandlerMiddleware"]
