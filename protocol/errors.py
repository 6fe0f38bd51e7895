class ChatError(Exception):
    """Base class for errors raised by the chat node."""


class MalformedMessage(ChatError):
    """Inbound bytes could not be decoded into a Message."""


class DuplicateUserError(ChatError):
    def __init__(self, username):
        super().__init__(f"User '{username}' already exists")
        self.username = username


class InvalidCredentials(ChatError):
    """Username or password rejected before reaching the store."""


class ConfigError(ChatError):
    pass


class SessionStateError(ChatError):
    pass
