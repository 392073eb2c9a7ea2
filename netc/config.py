"""
Client configuration for the netc library.

Configuration is a YAML file with a top-level "netc" list, one entry per client:

    netc:
      - network: unix
        address: /tmp/mysocket
      - network: tcp
        address: localhost:7000
        max_read_bytes: 4096
"""
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from .exceptions import NetcConfigurationError


@dataclass
class ClientConfig:
    """Settings for one NetClient"""
    network: str
    address: str
    max_read_bytes: int = 2048

    def __post_init__(self):
        if not isinstance(self.network, str) or not self.network:
            raise NetcConfigurationError(f"network must be a non-empty string, got {self.network!r}")
        if not isinstance(self.address, str):
            raise NetcConfigurationError(f"address must be a string, got {self.address!r}")
        if isinstance(self.max_read_bytes, bool) or not isinstance(self.max_read_bytes, int) or self.max_read_bytes < 0:
            raise NetcConfigurationError(f"max_read_bytes must be a non-negative integer, got {self.max_read_bytes!r}")


def parse_config(config: dict[str, Any]) -> list[ClientConfig]:
    """Build client configurations from an already loaded mapping"""
    if not isinstance(config, dict) or "netc" not in config:
        raise NetcConfigurationError("configuration has no 'netc' section")
    entries = config["netc"]
    if not isinstance(entries, list):
        raise NetcConfigurationError("'netc' section must be a list of clients")
    if not entries:
        raise NetcConfigurationError("'netc' section lists no clients")

    known = {f.name for f in fields(ClientConfig)}
    clients = []
    for i, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise NetcConfigurationError(f"netc[{i}] must be a mapping")
        unknown = set(entry) - known
        if unknown:
            raise NetcConfigurationError(f"netc[{i}] has unknown keys: {', '.join(sorted(unknown))}")
        missing = {"network", "address"} - set(entry)
        if missing:
            raise NetcConfigurationError(f"netc[{i}] is missing keys: {', '.join(sorted(missing))}")
        clients.append(ClientConfig(**entry))
    return clients


def load_config(config_path: str | Path = "config.yaml") -> list[ClientConfig]:
    """
    Load client configurations from a YAML file.

    Raises:
        NetcConfigurationError: if the file content is not a valid configuration
        OSError: if the file cannot be read
    """
    with open(config_path) as f:
        try:
            config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise NetcConfigurationError(f"{config_path}: {e}") from e
    return parse_config(config)
