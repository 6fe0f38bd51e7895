#main.py  ==  PostScriptum P2P messenger node
           #↳ gates the session behind register/login
           #↳ accepts connections
           #↳ sends every typed line to all known peers
import sys
from getpass import getpass

from config import load_config
from crypto.passwords import PasswordHasher
from peer.node import Node
from peer.session import Session
from protocol.errors import ConfigError
from storage.credential_store import CredentialStore, SqliteUserBackend
from utils.helpers import configure_logging, get_logger

logger = get_logger(__name__)

USAGE = "Usage: python main.py <port>"


def authenticate(session, input_fn=input, password_fn=getpass):
    """Loop on register/login until a login succeeds. Returns False on EOF."""
    while not session.active:
        try:
            choice = input_fn("Login (l) or Register (r)? ").strip().lower()
            if choice not in ("l", "r"):
                print("Please enter 'l' or 'r'.")
                continue
            username = input_fn("Username: ").strip()
            password = password_fn("Password: ").strip()
        except EOFError:
            return False
        if choice == "r":
            ok, reason = session.register(username, password)
            if ok:
                print("User registered. Please log in.")
            else:
                print(f"Registration failed: {reason}")
        elif session.login(username, password):
            print("Login successful!")
        else:
            print("Login failed: unknown user or wrong password.")
    return True


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    print("Welcome to the PostScriptum P2P Messenger!")
    if not argv:
        print(USAGE)
        return 0
    try:
        port = int(argv[0])
    except ValueError:
        print(USAGE)
        return 2

    try:
        config = load_config()
    except ConfigError as e:
        print(f"[!] {e}")
        return 1
    configure_logging(config["log_level"])

    hasher = PasswordHasher(**config["hashing"])
    credentials = CredentialStore(SqliteUserBackend(config["db_path"]), hasher)
    session = Session(credentials)
    if not authenticate(session):
        return 0

    node = Node(config, session)
    try:
        node.start(port)
    except OSError as e:
        logger.error(f"Cannot bind port {port}: {e}")
        print(f"[!] Cannot bind port {port}: {e}")
        return 1
    node.run_cli()
    return 0


if __name__ == "__main__":
    sys.exit(main())
