import logging

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

_handler = None
_loggers = {}
_level = logging.WARNING


def get_logger(name):
    """
    Module-level logger sharing one stderr handler across the project.
    """
    global _handler
    if _handler is None:
        _handler = logging.StreamHandler()
        _handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger = logging.getLogger(name)
    if _handler not in logger.handlers:
        logger.addHandler(_handler)
    logger.setLevel(_level)
    logger.propagate = False
    _loggers[name] = logger
    return logger


def configure_logging(level):
    global _level
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level}")
        level = resolved
    _level = level
    for logger in _loggers.values():
        logger.setLevel(level)


def parse_address(address):
    """
    Split ``host:port`` into a (host, port) tuple. IPv6 hosts may be bracketed.
    """
    host, sep, port = address.strip().rpartition(':')
    if not sep or not host or not port:
        raise ValueError(f"Expected host:port, got '{address}'")
    if host.startswith('[') and host.endswith(']'):
        host = host[1:-1]
    try:
        port_num = int(port)
    except ValueError:
        raise ValueError(f"Invalid port in '{address}'") from None
    if not 0 < port_num < 65536:
        raise ValueError(f"Port out of range in '{address}'")
    return host, port_num


def format_message(message):
    return f"[{message.sender}] {message.content}"
