"""
FinTrack - Source Package

A personal-finance client that mirrors a remote ledger backend and
derives dashboards, goal progress and investment projections from it.

DESIGN PRINCIPLES:
1. The backend is the source of truth, local state is a mirror
2. Fail visibly, never crash the view
3. Every record shown belongs to the logged-in owner
4. Every step must be auditable
5. Transport layer is swappable
"""

__version__ = "1.0.0"
__author__ = "FinTrack Team"
