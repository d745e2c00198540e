"""
In-memory repository adapters - Implement UserStore and TokenStore protocols.

Thread-safe dictionaries guarded by a lock, with the same atomicity
guarantees as the PostgreSQL adapters. Used for local development and
for tests that do not need a database.
"""

import secrets
import threading
from dataclasses import replace
from datetime import datetime, timedelta

from src.domain.ports import Clock, TokenVerdict
from src.domain.users import Role, User

from .postgres import hash_reset_token


class InMemoryUserStore:
    """
    Implements UserStore protocol with an in-process dict.

    Returned users are copies; callers never hold a reference into the store.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._users: dict[int, User] = {}
        self._next_id = 1

    def _find(self, predicate) -> User | None:
        with self._lock:
            for user in self._users.values():
                if predicate(user):
                    return replace(user)
        return None

    def find_by_id(self, user_id: int) -> User | None:
        with self._lock:
            user = self._users.get(user_id)
            return replace(user) if user is not None else None

    def find_by_email(self, email: str) -> User | None:
        return self._find(lambda user: user.email == email)

    def find_by_username(self, username: str) -> User | None:
        return self._find(lambda user: user.username == username)

    def create(
        self,
        username: str,
        email: str,
        password_hash: str,
        role: Role = Role.USER,
        name: str | None = None,
        email_verified_at: datetime | None = None,
    ) -> User | None:
        with self._lock:
            for existing in self._users.values():
                if existing.email == email or existing.username == username:
                    return None
            user = User(
                id=self._next_id,
                username=username,
                email=email,
                password_hash=password_hash,
                role=role,
                name=name,
                email_verified_at=email_verified_at,
            )
            self._users[user.id] = user
            self._next_id += 1
            return replace(user)

    def mark_verified(self, user_id: int, verified_at: datetime) -> bool:
        with self._lock:
            user = self._users.get(user_id)
            if user is None or user.email_verified_at is not None:
                return False
            user.email_verified_at = verified_at
            return True

    def set_password(self, email: str, password_hash: str, remember_token: str) -> bool:
        with self._lock:
            for user in self._users.values():
                if user.email == email:
                    user.password_hash = password_hash
                    user.remember_token = remember_token
                    return True
        return False


class InMemoryTokenStore:
    """
    Implements TokenStore protocol with an in-process dict.

    validate_and_consume holds the lock for the whole check-and-delete,
    which gives the same single-winner behaviour as SELECT ... FOR UPDATE.
    """

    def __init__(self, users: InMemoryUserStore, clock: Clock, ttl_seconds: int = 3600) -> None:
        self._users = users
        self._clock = clock
        self._ttl = timedelta(seconds=ttl_seconds)
        self._lock = threading.Lock()
        self._tokens: dict[str, tuple[str, datetime]] = {}

    def create(self, email: str, token: str) -> None:
        with self._lock:
            self._tokens[email] = (hash_reset_token(token), self._clock.now())

    def validate_and_consume(self, email: str, token: str) -> TokenVerdict:
        if self._users.find_by_email(email) is None:
            return TokenVerdict.USER_NOT_FOUND

        with self._lock:
            entry = self._tokens.get(email)
            if entry is None:
                return TokenVerdict.INVALID

            stored_hash, created_at = entry
            if not secrets.compare_digest(stored_hash, hash_reset_token(token)):
                return TokenVerdict.INVALID

            del self._tokens[email]
            if self._clock.now() - created_at > self._ttl:
                return TokenVerdict.INVALID
            return TokenVerdict.VALID
