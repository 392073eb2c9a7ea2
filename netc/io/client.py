"""
netc stream client.

This module implements a thin client over a single stream connection (TCP or Unix socket).
It contains the NetClient class for writing data and reading responses.

Terms:
- Handler = A callable invoked once per read as handler(data, error, done)
- Done = A one-shot completion signal; calling it ends the read loop
- Read loop = Repeated blocking reads, entered by listen() or by write() when a handler is given

Example usage:
def main():
    client = NetClient("unix", "/tmp/mysocket")
    client.connect()

    def on_response(data: bytes, err: Optional[Exception], done: Callable[[], None]):
        if err is not None:
            print("Error:", err)
        else:
            print("Received:", data)
        done()

    n = client.write(b"hello", on_response)
    client.close()
"""

import errno
import logging
import socket
import threading
from typing import Callable, Iterator, Optional, Self

from ..config import ClientConfig
from ..exceptions import EndOfStreamError, InvalidReadSizeError, NoConnectionError
from .dial import dial

# Constants
class ClientConst:
    """Constants for the NetClient"""
    DEFAULT_MAX_READ_BYTES = 2048

Done = Callable[[], None]
Handler = Callable[[bytes, Optional[Exception], Done], None]


def _noop() -> None:
    pass


class CancelToken:
    """
    One-shot, thread-safe completion signal for a read loop.

    The token is callable so it can be handed to a response handler as its done() argument.
    Cancelling takes effect once the read in progress returns.
    """

    def __init__(self):
        self._event = threading.Event()

    def __call__(self) -> None:
        self.cancel()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def __repr__(self) -> str:
        return f"CancelToken(cancelled={self.cancelled})"


class NetClient:
    """
    Owns one stream connection and layers write-then-listen on top of it.

    Lifecycle:
      - NetClient(network, address) performs no I/O
      - connect() dials and stores the socket, replacing any previous one
      - close() closes the socket but keeps the reference, so later writes fail in the OS layer
    """

    def __init__(self, network: str, address: str, logger: Optional[logging.Logger] = None):
        self._network = network
        self._address = address
        self.logger = logger or logging.getLogger(__name__)
        self.max_read_bytes: int = ClientConst.DEFAULT_MAX_READ_BYTES
        self._conn: Optional[socket.socket] = None
        self._closed = False
        # State lock guards the handle, write and read locks give single writer / single reader
        self._lock = threading.RLock()
        self._write_lock = threading.RLock()
        self._read_lock = threading.RLock()

    @classmethod
    def from_config(cls, config: ClientConfig, logger: Optional[logging.Logger] = None) -> Self:
        """Create a client from a configuration entry"""
        self = cls(config.network, config.address, logger)
        self.max_read_bytes = config.max_read_bytes
        return self

    @property
    def network(self) -> str:
        return self._network

    @property
    def address(self) -> str:
        return self._address

    @property
    def conn(self) -> Optional[socket.socket]:
        """The current connection, or None if connect() never succeeded"""
        return self._conn

    def is_connected(self) -> bool:
        """Check if client holds an open connection"""
        return self._conn is not None and not self._closed

    def connect(self) -> None:
        """
        Establish a new connection, replacing the current one.

        The previous connection is not closed; on failure it is left untouched.

        Raises:
            DialError: if the connection cannot be established
        """
        conn = dial(self._network, self._address, logger=self.logger)
        with self._lock:
            if self.is_connected():
                self.logger.warning(f"Replacing open connection to {self._network} {self._address}")
            self._conn = conn
            self._closed = False
        self.logger.info(f"Connected to {self._network} {self._address}")

    def write(self, data: bytes, handler: Optional[Handler] = None, *, send_all: bool = False) -> int:
        """
        Write data with a single send and return the number of bytes the send reported.

        With send_all=True every byte is sent before returning. If a handler is given and the
        write succeeds, block in the read loop until the handler calls done().

        Raises:
            NoConnectionError: if connect() never succeeded
            OSError: if the write fails, in which case the handler is not called
        """
        conn = self._conn
        if conn is None:
            raise NoConnectionError("no available network connection to write")

        with self._write_lock:
            if send_all:
                conn.sendall(data)
                n = len(data)
            else:
                n = conn.send(data)
        self.logger.debug(f"Sent {n} of {len(data)} bytes to {self._network} {self._address}")

        if handler is not None:
            self.listen(handler)
        return n

    def listen(self, handler: Handler, token: Optional[CancelToken] = None) -> None:
        """
        Run the read loop, calling handler(data, error, done) once per read.

        The loop ends when done() is called, when the peer closes the stream (EndOfStreamError)
        or when a read fails (the OSError). Both end cases are still reported to the handler.
        If there is no connection or max_read_bytes is negative, the handler is called once
        with the error and a no-op done().
        """
        try:
            conn = self._readable_conn()
        except (NoConnectionError, InvalidReadSizeError) as e:
            handler(b"", e, _noop)
            return

        if token is None:
            token = CancelToken()

        with self._read_lock:
            while not token.cancelled:
                data, err = self._read(conn)
                handler(data, err, token)
                if err is not None:
                    self.logger.debug(f"Read loop on {self._network} {self._address} ended: {err}")
                    return

    def responses(self, token: Optional[CancelToken] = None) -> Iterator[bytes]:
        """
        Yield chunks read from the connection until end of stream or until token is cancelled.

        Raises:
            NoConnectionError: if connect() never succeeded
            InvalidReadSizeError: if max_read_bytes is negative
            OSError: if a read fails
        """
        conn = self._readable_conn()
        if token is None:
            token = CancelToken()

        with self._read_lock:
            while not token.cancelled:
                data, err = self._read(conn)
                if isinstance(err, EndOfStreamError):
                    return
                if err is not None:
                    raise err
                yield data

    def close(self) -> None:
        """
        Close the current connection.

        An open connection is shut down first, so a listen() blocked in another thread ends
        with EndOfStreamError.

        Raises:
            NoConnectionError: if connect() never succeeded
            OSError: if shutting down or closing the socket fails
        """
        with self._lock:
            if self._conn is None:
                raise NoConnectionError("no available network connection to close")
            if not self._closed:
                self._shutdown(self._conn)
            self._conn.close()
            self._closed = True
        self.logger.info(f"Connection to {self._network} {self._address} closed")

    def _shutdown(self, conn: socket.socket) -> None:
        """Shut down both directions so a reader blocked in recv() sees end of stream"""
        try:
            conn.shutdown(socket.SHUT_RDWR)
        except OSError as e:
            if e.errno != errno.ENOTCONN:
                raise
            self.logger.debug(f"Connection to {self._network} {self._address} already disconnected")

    def _readable_conn(self) -> socket.socket:
        conn = self._conn
        if conn is None:
            raise NoConnectionError("no available network connection to read")
        if self.max_read_bytes < 0:
            raise InvalidReadSizeError(f"max_read_bytes must not be negative, got {self.max_read_bytes}")
        return conn

    def _read(self, conn: socket.socket) -> tuple[bytes, Optional[Exception]]:
        """One blocking read as a (data, error) pair"""
        size = self.max_read_bytes
        if size == 0:
            return b"", None
        try:
            data = conn.recv(size)
        except OSError as e:
            return b"", e
        if not data:
            return b"", EndOfStreamError(f"{self._network} {self._address}: connection closed by peer")
        return data, None

    def __enter__(self) -> Self:
        if not self.is_connected():
            self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.is_connected():
            self.close()

    def __repr__(self) -> str:
        return f"NetClient(network={self._network!r}, address={self._address!r}, connected={self.is_connected()})"
