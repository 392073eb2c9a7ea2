"""
netc library exceptions.

This module defines all custom exceptions used throughout the library.
"""


class NetcError(Exception):
    """Base exception for netc errors"""
    pass


class NoConnectionError(NetcError):
    """Raised when an operation needs a connection and none is held"""
    pass


class InvalidReadSizeError(NetcError, ValueError):
    """Raised when max_read_bytes is negative"""
    pass


class DialError(NetcError):
    """Raised when a connection cannot be established"""

    def __init__(self, message: str, network: str = "", address: str = ""):
        super().__init__(message)
        self.network = network
        self.address = address


class UnknownNetworkError(DialError):
    """Raised for an unsupported network family"""
    pass


class AddressError(DialError):
    """Raised for a malformed address"""
    pass


class EndOfStreamError(NetcError, EOFError):
    """Passed to response handlers when the peer closes the stream"""
    pass


class NetcConfigurationError(NetcError):
    """Raised when configuration is invalid"""
    pass
