"""
KitabKhata - Source Package

Digital bookkeeping for a small book shop: every sale, what was paid,
what is still owed, per-customer accounts and printable bills.

DESIGN PRINCIPLES:
1. Balance and status are always derived, never typed
2. Fail early, fail visibly
3. No silent corrections
4. Every change must be auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "KitabKhata Team"
