"""fintrack: async client and analytics for the personal finance tracker API."""

from fintrack.client import FinanceClient

__all__ = ["FinanceClient"]
