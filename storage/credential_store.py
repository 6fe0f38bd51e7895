import os
import sqlite3
from contextlib import closing
from typing import Optional

from crypto.passwords import PasswordHasher
from protocol.errors import DuplicateUserError, InvalidCredentials
from utils.helpers import get_logger

logger = get_logger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS users(
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    username TEXT UNIQUE NOT NULL,
    password TEXT NOT NULL
);
"""


class UserBackend:
    """Storage capability behind CredentialStore."""

    def create_user(self, username: str, password_hash: str) -> None:
        """Persist a new user; raise DuplicateUserError if the name is taken."""
        raise NotImplementedError

    def lookup_hash(self, username: str) -> Optional[str]:
        """Return the stored hash for ``username`` or None."""
        raise NotImplementedError


class SqliteUserBackend(UserBackend):
    def __init__(self, db_path: str = "users.db"):
        self.db_path = db_path
        self.setup_database()

    def _connect(self):
        return sqlite3.connect(self.db_path, timeout=30)

    def setup_database(self):
        """Create the users table if absent."""
        directory = os.path.dirname(self.db_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with closing(self._connect()) as conn, conn:
            conn.executescript(SCHEMA)
        logger.debug(f"Credential store ready at {self.db_path}")

    def create_user(self, username: str, password_hash: str) -> None:
        try:
            with closing(self._connect()) as conn, conn:
                conn.execute(
                    "INSERT INTO users (username, password) VALUES (?, ?)",
                    (username, password_hash),
                )
        except sqlite3.IntegrityError as e:
            raise DuplicateUserError(username) from e

    def lookup_hash(self, username: str) -> Optional[str]:
        with closing(self._connect()) as conn:
            row = conn.execute(
                "SELECT password FROM users WHERE username = ?", (username,)
            ).fetchone()
        return row[0] if row else None


class CredentialStore:
    """Registers users and checks their passwords.

    Only salted hashes reach the backend. ``login`` gives one answer for an
    unknown user and a wrong password alike.
    """

    def __init__(self, backend: UserBackend, hasher: Optional[PasswordHasher] = None):
        self.backend = backend
        self.hasher = hasher or PasswordHasher()
        # Verified against when the user is unknown so both failures hash once.
        self._dummy_hash = self.hasher.hash(os.urandom(16).hex())

    def register(self, username: str, password: str) -> None:
        if not username or not username.strip():
            raise InvalidCredentials("Username must not be empty")
        if not password:
            raise InvalidCredentials("Password must not be empty")
        password_hash = self.hasher.hash(password)
        self.backend.create_user(username, password_hash)
        logger.info(f"Registered user '{username}'")

    def login(self, username: str, password: str) -> bool:
        stored = self.backend.lookup_hash(username)
        if stored is None:
            self.hasher.verify(password, self._dummy_hash)
            logger.info(f"Login failed for '{username}'")
            return False
        ok = self.hasher.verify(password, stored)
        if not ok:
            logger.info(f"Login failed for '{username}'")
        return ok
