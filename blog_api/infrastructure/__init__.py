"""Infrastructure Layer — database, logging and outbound mail.

Invariants:
    - Infrastructure never imports from services/ or api/
    - All external calls wrapped with timeout/error mapping
"""
