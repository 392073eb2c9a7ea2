"""
netc Python Library

A thin client wrapper around stream connections (TCP, Unix domain sockets),
adding a write-then-listen callback pattern on top of blocking socket I/O.

Example usage:
    import netc

    client = netc.NetClient("unix", "/tmp/mysocket")
    client.connect()

    def on_response(data, err, done):
        print(data)
        done()

    client.write(b"hello", on_response)
    client.close()

    # Or read responses as a sequence
    with netc.NetClient("tcp", "localhost:7000") as client:
        client.write(b"ping")
        for chunk in client.responses():
            print(chunk)
"""

# Client
from .io import NetClient, CancelToken, ClientConst, Handler, Done, dial, split_host_port

# Configuration
from .config import ClientConfig, load_config, parse_config

# Exceptions
from .exceptions import (
    NetcError,
    NoConnectionError,
    InvalidReadSizeError,
    DialError,
    UnknownNetworkError,
    AddressError,
    EndOfStreamError,
    NetcConfigurationError,
)

# Utilities
from .utils import run_with_keyboard_interrupt

__version__ = "0.0.0"

# Public API
__all__ = [
    # Client
    "NetClient",
    "CancelToken",
    "ClientConst",
    "Handler",
    "Done",
    "dial",
    "split_host_port",

    # Configuration
    "ClientConfig",
    "load_config",
    "parse_config",

    # Exceptions
    "NetcError",
    "NoConnectionError",
    "InvalidReadSizeError",
    "DialError",
    "UnknownNetworkError",
    "AddressError",
    "EndOfStreamError",
    "NetcConfigurationError",

    # Utilities
    "run_with_keyboard_interrupt",
]
