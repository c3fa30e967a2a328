"""
Restaurant and dish store.

Responsibilities:
- Load the restaurant and menu datasets from CSV on first use.
- Expose restaurant and dish lookups as typed models.
- Report an unreadable dataset as ``StoreUnavailable``.
"""
