"""
bcrypt password hasher adapter - Implements PasswordHasher protocol.

bcrypt.checkpw() compares in constant time; with cost factor >= 10 its
running time dominates the request and masks other timing differences.
"""

import bcrypt


class BcryptPasswordHasher:
    """
    Implements PasswordHasher protocol via bcrypt.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, rounds: int = 10) -> None:
        if rounds < 10:
            raise ValueError("bcrypt cost factor must be at least 10")
        self._rounds = rounds

    def hash(self, password: str) -> str:
        return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=self._rounds)).decode()

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode(), password_hash.encode())
        except ValueError:
            # Malformed stored hash
            return False
