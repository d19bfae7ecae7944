"""API route handlers."""
from . import dashboard, exchange_rates, preferences, rebalancing, snapshots

__all__ = ["dashboard", "exchange_rates", "preferences", "rebalancing", "snapshots"]
