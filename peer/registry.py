import threading
from typing import Tuple


class PeerRegistry:
    """Known peer addresses, in the order they were added.

    Duplicates and unreachable addresses are kept; nothing is ever removed.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._peers = []

    def add(self, address: str) -> None:
        if not address:
            raise ValueError("Peer address must not be empty")
        with self._lock:
            self._peers.append(address)

    def snapshot(self) -> Tuple[str, ...]:
        with self._lock:
            return tuple(self._peers)
