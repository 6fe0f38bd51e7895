from __future__ import annotations

import queue
import sys
from pathlib import Path

import pytest

# Make the repo-root packages importable without installing.
ROOT = Path(__file__).resolve().parents[1]

root_str = str(ROOT)
if root_str not in sys.path:
    sys.path.insert(0, root_str)

from config import DEFAULT_CONFIG  # noqa: E402
from crypto.passwords import PasswordHasher  # noqa: E402
from peer.listener import ConnectionListener  # noqa: E402
from storage.credential_store import CredentialStore, SqliteUserBackend  # noqa: E402


@pytest.fixture
def fast_hasher() -> PasswordHasher:
    # Low cost keeps the suite quick; production cost comes from config.
    return PasswordHasher(n=2 ** 8, r=8, p=1)


@pytest.fixture
def db_path(tmp_path: Path) -> str:
    return str(tmp_path / "users.db")


@pytest.fixture
def credentials(db_path: str, fast_hasher: PasswordHasher) -> CredentialStore:
    return CredentialStore(SqliteUserBackend(db_path), fast_hasher)


@pytest.fixture
def node_config(db_path: str) -> dict:
    cfg = dict(DEFAULT_CONFIG)
    cfg.update({"db_path": db_path, "listen_host": "127.0.0.1", "connect_timeout": 5, "read_timeout": 5})
    return cfg


@pytest.fixture
def inbox_listener():
    """A listener on an ephemeral loopback port that queues what it receives."""
    inbox: queue.Queue = queue.Queue()
    listener = ConnectionListener(on_message=inbox.put, host="127.0.0.1", read_timeout=5)
    listener.bind(0)
    listener.start()
    yield listener, inbox
    listener.close()
