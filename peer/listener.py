import socket
import threading

from protocol.errors import MalformedMessage
from protocol.json_handler import recv_message
from protocol.message import DEFAULT_MAX_MESSAGE_BYTES
from utils.helpers import get_logger

logger = get_logger(__name__)


class ConnectionListener:
    """Accepts inbound connections and reads one message from each.

    Every accepted connection gets its own thread. At most ``max_workers`` of
    them run at once; a connection arriving while all are busy is closed
    unread. The accept loop itself never waits on a handler.
    """

    def __init__(self, on_message, host="", max_workers=64, read_timeout=10.0,
                 max_message_bytes=DEFAULT_MAX_MESSAGE_BYTES):
        self.on_message = on_message
        self.host = host
        self.read_timeout = read_timeout
        self.max_workers = max_workers
        self.max_message_bytes = max_message_bytes
        self._slots = threading.BoundedSemaphore(max_workers)
        self._sock = None
        self._closed = False
        self.port = None

    def bind(self, port):
        """Bind and listen. An OSError here is fatal to the node."""
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((self.host, port))
            sock.listen()
        except OSError:
            sock.close()
            raise
        self._sock = sock
        self.port = sock.getsockname()[1]
        logger.info(f"Listening on port {self.port}")
        return self.port

    def start(self):
        """Serve in a daemon thread for the rest of the process."""
        thread = threading.Thread(target=self.serve_forever, name="listener", daemon=True)
        thread.start()
        return thread

    def listen(self, port):
        self.bind(port)
        self.serve_forever()

    def serve_forever(self):
        if self._sock is None:
            raise RuntimeError("bind() must be called before serve_forever()")
        while not self._closed:
            try:
                conn, addr = self._sock.accept()
            except OSError as e:
                if self._closed:
                    break
                logger.error(f"Connection error: {e}")
                continue
            logger.debug(f"Accepted connection from {addr}")
            if not self._slots.acquire(blocking=False):
                logger.warning(f"All {self.max_workers} handlers busy, dropping connection from {addr}")
                conn.close()
                continue
            try:
                threading.Thread(target=self.handle_conn, args=(conn, addr), daemon=True).start()
            except RuntimeError as e:
                self._slots.release()
                conn.close()
                logger.error(f"Could not start handler for {addr}: {e}")

    def handle_conn(self, conn, addr):
        try:
            conn.settimeout(self.read_timeout)
            message = recv_message(conn, self.max_message_bytes)
        except MalformedMessage as e:
            logger.warning(f"Dropped malformed message from {addr}: {e}")
            return
        except OSError as e:
            logger.warning(f"Error reading from {addr}: {e}")
            return
        finally:
            conn.close()
            self._slots.release()
        try:
            self.on_message(message)
        except Exception:
            logger.exception(f"Display of message from {addr} failed")

    def close(self):
        self._closed = True
        if self._sock is not None:
            try:
                self._sock.shutdown(socket.SHUT_RDWR)
            except OSError:
                pass
            self._sock.close()
