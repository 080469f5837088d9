"""Services Layer — account lifecycle and SQLAlchemy-backed repositories.

Invariants:
    - Services own transactions: every successful mutation ends in a commit
    - Decisions live in core/; services load, call core, persist
"""
