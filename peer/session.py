from enum import Enum

from protocol.errors import DuplicateUserError, InvalidCredentials, SessionStateError
from utils.helpers import get_logger

logger = get_logger(__name__)


class SessionState(Enum):
    AUTHENTICATING = "authenticating"
    ACTIVE = "active"


class Session:
    """Gates the node behind register/login.

    The session leaves AUTHENTICATING exactly once, on the first successful
    login, and keeps that username for the rest of the process.
    """

    def __init__(self, credentials):
        self.credentials = credentials
        self.state = SessionState.AUTHENTICATING
        self._username = None

    @property
    def active(self):
        return self.state is SessionState.ACTIVE

    @property
    def username(self):
        if not self.active:
            raise SessionStateError("Not logged in")
        return self._username

    def _require_authenticating(self):
        if self.active:
            raise SessionStateError(f"Already logged in as '{self._username}'")

    def register(self, username, password):
        """Returns (ok, reason)."""
        self._require_authenticating()
        try:
            self.credentials.register(username, password)
        except (DuplicateUserError, InvalidCredentials) as e:
            return False, str(e)
        return True, None

    def login(self, username, password):
        self._require_authenticating()
        if not self.credentials.login(username, password):
            return False
        self._username = username
        self.state = SessionState.ACTIVE
        logger.info(f"Session active for '{username}'")
        return True
