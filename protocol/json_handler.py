from protocol.message import DEFAULT_MAX_MESSAGE_BYTES, Message, decode, encode


def send_message(sock, message: Message):
    """
    Send one Message as a newline-terminated JSON line.
    """
    sock.sendall(encode(message))


def recv_message(sock, max_bytes=DEFAULT_MAX_MESSAGE_BYTES) -> Message:
    """
    Receive exactly one newline-delimited Message from a socket.
    """
    with sock.makefile('rb') as stream:
        return decode(stream, max_bytes)
