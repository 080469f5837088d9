"""Blog API Package — accounts with e-mail verification and owner-scoped blogs.

Invariants:
    - Package root holds only the version string (import side-effects prohibited)
"""

__version__ = "1.0.0"
