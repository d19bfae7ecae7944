"""External data source integrations.

This package contains:
- Exchange-rate provider protocol: Common interface for rate table sources
"""

from integrations.exchange_rate_protocol import ExchangeRateProvider

__all__ = [
    "ExchangeRateProvider",
]
