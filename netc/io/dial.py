"""
netc dialer.

This module turns a network family and an address into a connected stream socket.

Supported networks:
- tcp  = TCP over IPv4 or IPv6, whichever the resolver returns first that accepts
- tcp4 = TCP over IPv4 only
- tcp6 = TCP over IPv6 only
- unix = Unix domain stream socket, the address is a filesystem path

Addresses for the tcp networks are "host:port", "[ipv6-host]:port" or ":port".
An empty host dials the local system. The port may be a number or a service name.

Example usage:
    sock = dial("tcp", "localhost:7000")
    sock = dial("unix", "/tmp/mysocket")
"""

import logging
import socket
from typing import Optional, Tuple

from ..exceptions import AddressError, DialError, UnknownNetworkError

# Constants
class DialConst:
    """Address families per network name"""
    TCP_NETWORKS = {
        "tcp": socket.AF_UNSPEC,
        "tcp4": socket.AF_INET,
        "tcp6": socket.AF_INET6,
    }
    UNIX_NETWORKS = ("unix",)


def split_host_port(address: str) -> Tuple[str, str]:
    """
    Split "host:port", "[host]:port" or ":port" into host and port.

    Raises:
        AddressError: if the port is missing or the host is malformed
    """
    i = address.rfind(":")
    if i < 0:
        raise AddressError(f"address {address}: missing port in address", address=address)

    if address.startswith("["):
        # Bracketed host, only ":port" may follow the closing bracket
        end = address.find("]")
        if end < 0:
            raise AddressError(f"address {address}: missing ']' in address", address=address)
        if end + 1 == len(address):
            raise AddressError(f"address {address}: missing port in address", address=address)
        if end + 1 != i:
            if address[end + 1] == ":":
                raise AddressError(f"address {address}: too many colons in address", address=address)
            raise AddressError(f"address {address}: missing port in address", address=address)
        host = address[1:end]
        if "[" in host:
            raise AddressError(f"address {address}: unexpected '[' in address", address=address)
    else:
        host = address[:i]
        if ":" in host:
            raise AddressError(f"address {address}: too many colons in address", address=address)
        if "[" in host:
            raise AddressError(f"address {address}: unexpected '[' in address", address=address)
        if "]" in host:
            raise AddressError(f"address {address}: unexpected ']' in address", address=address)

    port = address[i + 1:]
    if "[" in port or "]" in port:
        raise AddressError(f"address {address}: unexpected bracket in port", address=address)
    if not port:
        raise AddressError(f"address {address}: missing port in address", address=address)
    return host, port


def dial(network: str, address: str, logger: Optional[logging.Logger] = None) -> socket.socket:
    """
    Connect to address on the named network and return the connected socket.

    Raises:
        UnknownNetworkError: if network is not supported
        AddressError: if address cannot be parsed for the network
        DialError: if every connection attempt failed, chained from the last OSError
    """
    logger = logger or logging.getLogger(__name__)

    if network in DialConst.TCP_NETWORKS:
        return _dial_tcp(network, address, logger)
    if network in DialConst.UNIX_NETWORKS:
        return _dial_unix(network, address, logger)
    raise UnknownNetworkError(f"dial {network}: unknown network {network}", network=network, address=address)


def _dial_tcp(network: str, address: str, logger: logging.Logger) -> socket.socket:
    try:
        host, port = split_host_port(address)
    except AddressError as e:
        e.network = network
        raise
    family = DialConst.TCP_NETWORKS[network]

    try:
        infos = socket.getaddrinfo(host or None, port, family, socket.SOCK_STREAM)
    except OSError as e:
        raise DialError(f"dial {network} {address}: {e}", network=network, address=address) from e

    last_error: Optional[OSError] = None
    for af, socktype, proto, _, sockaddr in infos:
        sock = None
        try:
            sock = socket.socket(af, socktype, proto)
            sock.connect(sockaddr)
        except OSError as e:
            logger.debug(f"Dial {network} {sockaddr} failed: {e}")
            if sock is not None:
                sock.close()
            last_error = e
            continue
        return sock

    if last_error is None:
        raise DialError(f"dial {network} {address}: no suitable address found", network=network, address=address)
    raise DialError(f"dial {network} {address}: {last_error}", network=network, address=address) from last_error


def _dial_unix(network: str, address: str, logger: logging.Logger) -> socket.socket:
    if not hasattr(socket, "AF_UNIX"):
        raise UnknownNetworkError(f"dial {network}: unix sockets are not supported on this platform", network=network, address=address)
    if not address:
        raise AddressError(f"dial {network}: missing socket path", network=network, address=address)

    sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    try:
        sock.connect(address)
    except OSError as e:
        logger.debug(f"Dial {network} {address} failed: {e}")
        sock.close()
        raise DialError(f"dial {network} {address}: {e}", network=network, address=address) from e
    return sock
