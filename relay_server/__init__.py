"""
Line relay server package.

Main exports:
- Server: Main server class
- ClientSession: Individual client handler
- Registry: Set of connected sessions with broadcast
- Connection: Line-oriented stream wrapper
"""

from relay_server.client_session import ClientSession
from relay_server.connection import Connection
from relay_server.registry import Registry
from relay_server.server import Server

__version__ = "1.0.0"
__all__ = ['Server', 'ClientSession', 'Registry', 'Connection']
