from protocol.errors import MalformedMessage
from protocol.message import Message, decode, encode

__all__ = ["Message", "MalformedMessage", "encode", "decode"]
