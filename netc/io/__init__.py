"""
Connection-level client implementation.

This module contains the lowest-level communication components:
- dial - Connect a stream socket from a network family and address
- NetClient - Write-then-listen over one owned connection
- CancelToken - Completion signal for the read loop
"""

from .client import NetClient, CancelToken, ClientConst, Handler, Done
from .dial import dial, split_host_port, DialConst

__all__ = [
    "NetClient",
    "CancelToken",
    "ClientConst",
    "Handler",
    "Done",
    "dial",
    "split_host_port",
    "DialConst",
]
