"""
Life Ledger - Source Package

A client-local personal ledger: expenses, income, transfers, budgets and
accounts, plus a small organizer (tasks, plans, holidays, diary) driven by
free-text commands.

DESIGN PRINCIPLES:
1. Aggregates are recomputed from the ledger, never cached
2. Bad references degrade gracefully, they never crash a report
3. Commands that aren't understood are rejected, never guessed at
4. Every write is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Life Ledger Team"
