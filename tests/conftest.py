import os
import shutil
import socket
import tempfile
import threading

import pytest


class EchoServer:
    """Threaded echo server over a Unix socket or loopback TCP.

    With close_after_echo set, each connection is closed after its first echo.
    """

    def __init__(self, family=socket.AF_UNIX, close_after_echo=False):
        self.family = family
        self.close_after_echo = close_after_echo
        self.server_socket = socket.socket(family, socket.SOCK_STREAM)
        if family == socket.AF_UNIX:
            self._tmpdir = tempfile.mkdtemp()
            self.path = os.path.join(self._tmpdir, "echo.sock")
            self.server_socket.bind(self.path)
            self.network, self.address = "unix", self.path
        else:
            self.server_socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            self.server_socket.bind(("127.0.0.1", 0))
            self.port = self.server_socket.getsockname()[1]
            self.network, self.address = "tcp", f"127.0.0.1:{self.port}"
        self.server_socket.listen()
        # Poll accept so stop() does not depend on close() waking a blocked accept
        self.server_socket.settimeout(0.1)
        self.running = False
        self.received = []
        self.connections = 0
        self.thread = None

    def start(self):
        self.running = True
        self.thread = threading.Thread(target=self.run, daemon=True)
        self.thread.start()

    def stop(self):
        self.running = False
        if self.thread:
            self.thread.join(timeout=2)
        self.server_socket.close()
        if self.family == socket.AF_UNIX:
            shutil.rmtree(self._tmpdir, ignore_errors=True)

    def run(self):
        while self.running:
            try:
                client_socket, _ = self.server_socket.accept()
            except socket.timeout:
                continue
            except OSError:
                return
            self.connections += 1
            client_socket.settimeout(None)
            threading.Thread(target=self.handle_client, args=(client_socket,), daemon=True).start()

    def handle_client(self, client_socket):
        with client_socket:
            while True:
                try:
                    data = client_socket.recv(1024)
                except OSError:
                    return
                if not data:
                    return
                self.received.append(data)
                client_socket.sendall(data)
                if self.close_after_echo:
                    return


@pytest.fixture
def unix_server():
    server = EchoServer(socket.AF_UNIX)
    server.start()
    yield server
    server.stop()


@pytest.fixture
def tcp_server():
    server = EchoServer(socket.AF_INET)
    server.start()
    yield server
    server.stop()


@pytest.fixture
def closing_server():
    server = EchoServer(socket.AF_UNIX, close_after_echo=True)
    server.start()
    yield server
    server.stop()


@pytest.fixture(params=["unix", "tcp"])
def echo_server(request):
    server = EchoServer(socket.AF_UNIX if request.param == "unix" else socket.AF_INET)
    server.start()
    yield server
    server.stop()
