"""Credential Hasher — salted, adaptive one-way password hashing (Argon2id).

Invariants:
    - hash() output differs on every call for the same password (random salt)
    - verify() never raises on mismatch or on a foreign/corrupt hash — returns False
    - Cost parameters are read from the encoded hash on verify, so hashes made
      under older parameters keep verifying after a cost change
"""

from argon2 import PasswordHasher
from argon2.exceptions import HashingError, InvalidHashError, VerificationError

from blog_api.core.errors import HashError


class CredentialHasher:
    """Argon2id hasher with configurable cost."""

    def __init__(
        self, time_cost: int = 3, memory_cost: int = 65536, parallelism: int = 4,
    ):
        self._hasher = PasswordHasher(
            time_cost=time_cost,
            memory_cost=memory_cost,
            parallelism=parallelism,
        )

    def hash(self, password: str) -> str:
        try:
            return self._hasher.hash(password)
        except HashingError as e:
            raise HashError(str(e)) from e

    def verify(self, password_hash: str, password: str) -> bool:
        if not password_hash or not password:
            return False
        try:
            return self._hasher.verify(password_hash, password)
        except (VerificationError, InvalidHashError):
            return False

    def needs_rehash(self, password_hash: str) -> bool:
        """True when the hash was made with cost parameters other than the current ones."""
        try:
            return self._hasher.check_needs_rehash(password_hash)
        except InvalidHashError:
            return True
