"""
Money Manager - Ledger Core

Keeps a log of income, expense and transfer transactions, derives
account balances and reports from it, and keeps it in sync with a
remote ledger API, falling back to local storage when the API is away.

DESIGN PRINCIPLES:
1. The ledger is the only source of truth; balances are always derived
2. Validate before touching any store
3. A write is never dropped: remote first, local on failure
4. Every sync decision is logged
5. Storage backends are swappable
"""

__version__ = "1.0.0"
