"""Core Layer — domain rules with no database, no HTTP and no environment access.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Domain decisions take "now" from an injectable Clock (default utc_now)
    - IO appears only as Protocol contracts (repository_protocols.py)
"""
