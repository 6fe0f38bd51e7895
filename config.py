import copy
import os

import yaml

from protocol.errors import ConfigError
from utils.helpers import get_logger

logger = get_logger(__name__)

CONFIG_ENV = "P2P_CHAT_CONFIG"

DEFAULT_CONFIG = {
    "db_path": "users.db",
    "listen_host": "",
    "max_inbound_workers": 64,
    "max_outbound_workers": 32,
    # None blocks indefinitely on dial
    "connect_timeout": None,
    # seconds an inbound peer may take to send its message
    "read_timeout": 10.0,
    "max_message_bytes": 1024 * 1024,
    "hashing": {"n": 2 ** 14, "r": 8, "p": 1},
    "log_level": "WARNING",
}


def _merge(base, override):
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(path=None):
    """
    Load YAML configuration over the defaults. A missing file means defaults.
    """
    path = path or os.environ.get(CONFIG_ENV, "config.yaml")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        logger.debug(f"Config file {path} not found. Using default values.")
        return copy.deepcopy(DEFAULT_CONFIG)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid config file {path}: {e}") from e
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return _merge(DEFAULT_CONFIG, data)
