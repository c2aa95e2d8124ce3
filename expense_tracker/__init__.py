"""
Expense Tracker - Core Package

The domain core of a personal expense tracker: record model, filtering and
sorting, aggregation for dashboards and analytics, CSV/JSON/PDF export, and
a persistence gateway over a swappable key-value store.

DESIGN PRINCIPLES:
1. Pure functions over explicit inputs; "now" is always injected
2. Storage failures are audited, never raised to the caller
3. No record is saved without passing validation
4. Every mutation and export is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Expense Tracker Team"
