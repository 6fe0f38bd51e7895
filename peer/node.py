from peer.broadcast import Broadcaster
from peer.listener import ConnectionListener
from peer.registry import PeerRegistry
from protocol.message import Message
from utils.helpers import format_message, get_logger

logger = get_logger(__name__)

HELP_TEXT = (
    "Commands:\n"
    "  /connect <ip:port>   Add a peer\n"
    "  /peers               List peers\n"
    "  /help                Show this help\n"
    "  /quit                Exit"
)


class Node:
    """A logged-in chat node: inbound listener plus outbound broadcaster."""

    def __init__(self, config, session, display=print):
        if not session.active:
            raise ValueError("Node requires an authenticated session")
        self.username = session.username
        self.display = display
        self.registry = PeerRegistry()
        self.listener = ConnectionListener(
            on_message=self.on_message,
            host=config["listen_host"],
            max_workers=config["max_inbound_workers"],
            read_timeout=config["read_timeout"],
            max_message_bytes=config["max_message_bytes"],
        )
        self.broadcaster = Broadcaster(
            self.registry,
            max_workers=config["max_outbound_workers"],
            connect_timeout=config["connect_timeout"],
            notify=display,
        )

    def start(self, port):
        """Bind synchronously, then accept in the background."""
        bound = self.listener.bind(port)
        self.listener.start()
        self.display(f"Listening on port {bound}")
        return bound

    def on_message(self, message):
        self.display(format_message(message))

    def send(self, content):
        message = Message(sender=self.username, content=content)
        # local echo happens before the broadcast is dispatched
        self.display(format_message(message))
        self.broadcaster.broadcast(message)
        return message

    def handle_line(self, line):
        """Run one line of user input. Returns False once the user quits."""
        line = line.strip()
        if line == "/quit":
            self.display("Bye.")
            return False
        if line == "/help":
            self.display(HELP_TEXT)
        elif line == "/peers":
            peers = self.registry.snapshot()
            if not peers:
                self.display("(no peers)")
            for address in peers:
                self.display(f"- {address}")
        elif line == "/connect" or line.startswith("/connect "):
            address = line[len("/connect"):].strip()
            if not address:
                self.display("Usage: /connect <ip:port>")
            else:
                self.registry.add(address)
                self.display(f"Connected to {address}")
        elif line:
            self.send(line)
        return True

    def run_cli(self, input_fn=input):
        self.display(HELP_TEXT)
        while True:
            try:
                line = input_fn()
            except EOFError:
                break
            except KeyboardInterrupt:
                logger.debug("CLI interrupted by user")
                self.display("\nInterrupted. Exiting")
                break
            if not self.handle_line(line):
                break

    def shutdown(self):
        self.listener.close()
        self.broadcaster.shutdown(wait=False)
