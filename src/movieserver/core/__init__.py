"""
Networking plumbing under the HTTP layer.

    ┌──────────────────┐   Connection   ┌──────────────┐   task   ┌─────────┐
    │  SocketServer    │ ─────────────► │  ThreadPool  │ ───────► │ Worker  │
    │  accept() loop   │                │  bounded Q   │          │ threads │
    └──────────────────┘                └──────────────┘          └─────────┘
"""

from .connection import Connection, ConnectionState
from .socket_server import SocketServer
from .thread_pool import ThreadPool, WorkerState

__all__ = [
    "Connection",
    "ConnectionState",
    "SocketServer",
    "ThreadPool",
    "WorkerState",
]
