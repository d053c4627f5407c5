"""Warden: account management core with audit trails.

Registration, sign-in and profile editing against a managed identity
provider and a row-scoped record store, with append-only login history
and per-field profile change history.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
