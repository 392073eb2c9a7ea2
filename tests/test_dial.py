import errno
import socket

import pytest

from netc import AddressError, DialError, UnknownNetworkError, dial, split_host_port


@pytest.mark.parametrize("address, expected", [
    ("localhost:80", ("localhost", "80")),
    ("127.0.0.1:7000", ("127.0.0.1", "7000")),
    ("[::1]:443", ("::1", "443")),
    (":8080", ("", "8080")),
    ("example.com:http", ("example.com", "http")),
])
def test_split_host_port(address, expected):
    assert split_host_port(address) == expected


@pytest.mark.parametrize("address", [
    "localhost",
    "localhost:",
    "a:b:c",
    "[::1]",
    "[::1:80",
    "[::1]:80:90",
    "[::1]x80",
])
def test_split_host_port_invalid(address):
    with pytest.raises(AddressError):
        split_host_port(address)


def test_dial_unknown_network():
    with pytest.raises(UnknownNetworkError) as exc_info:
        dial("udp", "localhost:53")
    assert exc_info.value.network == "udp"


def test_dial_bad_tcp_address():
    with pytest.raises(AddressError) as exc_info:
        dial("tcp", "localhost")
    assert exc_info.value.network == "tcp"
    assert isinstance(exc_info.value, DialError)


def test_dial_tcp(tcp_server):
    sock = dial("tcp", tcp_server.address)
    try:
        assert sock.type == socket.SOCK_STREAM
        assert sock.getpeername()[1] == tcp_server.port
    finally:
        sock.close()


def test_dial_tcp4(tcp_server):
    sock = dial("tcp4", tcp_server.address)
    try:
        assert sock.family == socket.AF_INET
    finally:
        sock.close()


def test_dial_tcp_refused():
    # Bind without listening so the port is known to refuse connections
    placeholder = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    placeholder.bind(("127.0.0.1", 0))
    port = placeholder.getsockname()[1]
    try:
        with pytest.raises(DialError) as exc_info:
            dial("tcp", f"127.0.0.1:{port}")
        assert isinstance(exc_info.value.__cause__, OSError)
    finally:
        placeholder.close()


def test_dial_unix(unix_server):
    sock = dial("unix", unix_server.path)
    try:
        assert sock.family == socket.AF_UNIX
    finally:
        sock.close()


def test_dial_unix_missing_path(unix_server):
    with pytest.raises(DialError) as exc_info:
        dial("unix", unix_server.path + ".missing")
    assert exc_info.value.address == unix_server.path + ".missing"
    assert isinstance(exc_info.value.__cause__, FileNotFoundError)


def test_dial_unix_empty_path():
    with pytest.raises(AddressError):
        dial("unix", "")


def refuse_ipv6(monkeypatch):
    real_socket = socket.socket

    def fake_socket(*args, **kwargs):
        family = args[0] if args else kwargs.get("family")
        if family == socket.AF_INET6:
            raise OSError(errno.EAFNOSUPPORT, "Address family not supported by protocol")
        return real_socket(*args, **kwargs)

    monkeypatch.setattr(socket, "socket", fake_socket)


def test_dial_unsupported_family_raises_dial_error(monkeypatch):
    monkeypatch.setattr(socket, "getaddrinfo", lambda *args, **kwargs: [
        (socket.AF_INET6, socket.SOCK_STREAM, 6, "", ("::1", 1, 0, 0)),
    ])
    refuse_ipv6(monkeypatch)

    with pytest.raises(DialError) as exc_info:
        dial("tcp6", "[::1]:1")
    assert exc_info.value.__cause__.errno == errno.EAFNOSUPPORT


def test_dial_falls_back_to_ipv4(monkeypatch, tcp_server):
    monkeypatch.setattr(socket, "getaddrinfo", lambda *args, **kwargs: [
        (socket.AF_INET6, socket.SOCK_STREAM, 6, "", ("::1", tcp_server.port, 0, 0)),
        (socket.AF_INET, socket.SOCK_STREAM, 6, "", ("127.0.0.1", tcp_server.port)),
    ])
    refuse_ipv6(monkeypatch)

    sock = dial("tcp", f"localhost:{tcp_server.port}")
    try:
        assert sock.family == socket.AF_INET
        assert sock.getpeername() == ("127.0.0.1", tcp_server.port)
    finally:
        sock.close()
