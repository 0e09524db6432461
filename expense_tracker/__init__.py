"""
Expense Tracker - Source Package

The data and session core of a single-user personal expense tracker.

DESIGN PRINCIPLES:
1. One explicit session at a time; no ambient global state
2. Every mutation is persisted immediately
3. Bad input is rejected whole, never half-applied
4. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Expense Tracker Team"
