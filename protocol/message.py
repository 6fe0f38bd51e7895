import json
from dataclasses import dataclass

from protocol.errors import MalformedMessage

DEFAULT_MAX_MESSAGE_BYTES = 1024 * 1024


@dataclass(frozen=True)
class Message:
    """One chat line as it travels between nodes.

    ``sender`` is carried on the wire under the ``from`` key.
    """
    sender: str
    content: str

    def to_dict(self):
        return {"from": self.sender, "content": self.content}

    @classmethod
    def from_dict(cls, data):
        if not isinstance(data, dict):
            raise MalformedMessage(f"Expected a JSON object, got {type(data).__name__}")
        sender = data.get("from")
        content = data.get("content")
        if not isinstance(sender, str) or not isinstance(content, str):
            raise MalformedMessage("Message requires string 'from' and 'content' fields")
        return cls(sender=sender, content=content)


def encode(message: Message) -> bytes:
    """
    Serialize a message as one line of JSON.

    json.dumps escapes control characters, so the trailing newline is the only
    one in the output and marks the end of the message on the stream.
    """
    return (json.dumps(message.to_dict(), ensure_ascii=False) + "\n").encode("utf-8")


def decode_line(line: bytes) -> Message:
    try:
        text = line.decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedMessage(f"Invalid UTF-8: {e}") from e
    if not text.strip():
        raise MalformedMessage("Empty message")
    try:
        data = json.loads(text)
    except (ValueError, RecursionError) as e:
        # JSONDecodeError, oversized int literals and deep nesting
        raise MalformedMessage(f"Invalid JSON: {e}") from e
    return Message.from_dict(data)


def decode(stream, max_bytes=DEFAULT_MAX_MESSAGE_BYTES) -> Message:
    """
    Read exactly one message from a binary stream (anything with ``readline``).

    A peer that closes without the trailing newline still delivers a message if
    what it sent is a complete JSON object.
    """
    line = stream.readline(max_bytes + 1)
    if not line:
        raise MalformedMessage("Connection closed before a message arrived")
    if len(line) > max_bytes:
        raise MalformedMessage(f"Message exceeds {max_bytes} bytes")
    return decode_line(line)
