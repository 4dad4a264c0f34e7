"""
Life Tracker - Source Package

The household-finance rules behind the Life Tracker dashboard:
pay cycles, bill occurrences, debt payoff plans and shopping lists.

DESIGN PRINCIPLES:
1. Every calculation is a pure function of its inputs
2. Money is Decimal, never float
3. Suspicious input is reported, never silently corrected
4. Every automated decision (auto-matched bill, payoff plan) is auditable
5. Rules that vary per household live in configuration
"""

__version__ = "1.0.0"
__author__ = "Life Tracker Team"
