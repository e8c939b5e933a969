"""Domain models and the settlement calculation for multi-send transfers.

This package contains in-memory (Pydantic) models describing balances, denom
definitions and transfers, plus the pure calculation turning a transfer into
balance deltas. They are independent from persistence models so that
business logic and testing can evolve without DB coupling.
"""

__all__ = [
    "balance_sheet",
    "base_types",
    "errors",
    "settlement",
]
