import socket
from concurrent.futures import ThreadPoolExecutor

from protocol.json_handler import send_message
from utils.helpers import get_logger, parse_address

logger = get_logger(__name__)


class Broadcaster:
    """Fire-and-forget delivery of one message to every known peer.

    Each peer is dialed on its own pool task with a fresh connection, so a
    failing peer never holds up the others. Nothing is acknowledged or retried.
    """

    def __init__(self, registry, max_workers=32, connect_timeout=None, notify=None):
        self.registry = registry
        self.connect_timeout = connect_timeout
        self.notify = notify
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="broadcast")

    def broadcast(self, message):
        targets = self.registry.snapshot()
        logger.debug(f"Broadcasting to {len(targets)} peer(s)")
        for address in targets:
            self._executor.submit(self.deliver, address, message)

    def deliver(self, address, message):
        try:
            host, port = parse_address(address)
            with socket.create_connection((host, port), timeout=self.connect_timeout) as sock:
                send_message(sock, message)
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to deliver to {address}: {e}")
            if self.notify is not None:
                self.notify(f"Failed to connect to {address}")
            return False
        logger.debug(f"Delivered message to {address}")
        return True

    def shutdown(self, wait=True):
        self._executor.shutdown(wait=wait)
