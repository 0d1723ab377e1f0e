"""Configuration management for lircclient.

Loads user settings from ~/.config/lircclient/config.cfg, then applies
overrides from a .env file and finally from the process environment.

Recognised keys (case-insensitive):
    socket_path    Unix socket of the daemon (default /var/run/lirc/lircd)
    address        host[:port] of a TCP daemon; wins over socket_path
    settle_delay   seconds to wait before reading a reply
"""

import configparser
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from dotenv import dotenv_values

from lircclient.daemon.endpoint import DEFAULT_SOCKET_PATH, Endpoint, UnixEndpoint, parse_address
from lircclient.daemon.transport import DEFAULT_SETTLE_DELAY

CONFIG_PATH = Path.home() / ".config" / "lircclient" / "config.cfg"
ENV_PATH = Path.cwd() / ".env"

# Environment variable -> config key
ENV_KEYS = {
    "LIRC_SOCKET_PATH": "socket_path",
    "LIRC_ADDRESS": "address",
    "LIRC_SETTLE_DELAY_S": "settle_delay",
}


@dataclass
class ClientSettings:
    socket_path: str = DEFAULT_SOCKET_PATH
    address: Optional[str] = None
    settle_delay: float = DEFAULT_SETTLE_DELAY

    def endpoint(self) -> Endpoint:
        if self.address:
            return parse_address(self.address)
        return UnixEndpoint(self.socket_path)


def load_raw_config(path: Path = CONFIG_PATH) -> Dict[str, str]:
    """
    Load configuration values from the config file.
    Values are returned with lowercase keys for convenience.
    """
    cfg = configparser.ConfigParser()
    data: Dict[str, str] = {}

    if path.exists():
        cfg.read(path)
        if "DEFAULT" in cfg:
            data.update({k.lower(): v for k, v in cfg["DEFAULT"].items()})

    return data


def load_env_overrides(env_path: Path = ENV_PATH) -> Dict[str, str]:
    """Read LIRC_* overrides from a .env file, if present."""
    if not env_path.exists():
        return {}
    values = dotenv_values(env_path)
    return {
        ENV_KEYS[key.upper()]: value
        for key, value in values.items()
        if key.upper() in ENV_KEYS and value
    }


def get_client_settings(
    raw: Optional[Dict[str, str]] = None,
    env_path: Path = ENV_PATH,
) -> ClientSettings:
    """
    Build ClientSettings from raw config, .env and the environment.
    Raises ValueError if settle_delay is not a number.
    """
    merged: Dict[str, str] = dict(load_raw_config() if raw is None else raw)
    merged.update(load_env_overrides(env_path))
    for env_name, key in ENV_KEYS.items():
        value = os.environ.get(env_name)
        if value is not None and value.strip() != "":
            merged[key] = value.strip()

    delay_value = merged.get("settle_delay", "")
    try:
        settle_delay = float(delay_value) if str(delay_value).strip() else DEFAULT_SETTLE_DELAY
    except ValueError:
        raise ValueError(f"Invalid settle_delay: {delay_value!r}") from None
    if settle_delay < 0:
        raise ValueError(f"settle_delay must not be negative: {settle_delay}")

    return ClientSettings(
        socket_path=merged.get("socket_path") or DEFAULT_SOCKET_PATH,
        address=merged.get("address") or None,
        settle_delay=settle_delay,
    )
