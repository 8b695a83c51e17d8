"""
Main relay server implementation.

Accepts client connections, relays lines between clients and reports the
number of connected clients.
"""

import argparse
import asyncio
import logging
import socket
import sys

from relay_server.client_session import ClientSession
from relay_server.connection import Connection
from relay_server.registry import Registry

logger = logging.getLogger(__name__)

DEFAULT_PORT = 2000


def status_message(count):
    """Status line broadcast to clients."""
    return f"SERVER STATUS: Connected Clients={count}"


class Server:
    """
    Multi-client TCP line relay.

    Features:
    - One task per connected client
    - Every line is relayed to all other clients
    - Join/leave status broadcast to all clients
    """

    def __init__(self, port=DEFAULT_PORT, host=None):
        """
        Initialize server.

        Args:
            port: Port to listen on (0 picks a free port)
            host: Interface to bind, None for all interfaces
        """
        self.port = port
        self.host = host
        self.registry = Registry()
        self.server = None

    @property
    def hostname(self):
        try:
            return socket.gethostname()
        except OSError:
            return "Unknown Host"

    async def client_handler(self, reader, writer):
        """Handle a single client connection."""
        session = ClientSession(Connection(reader, writer), self)
        logger.info(f"Client Connected: {session.format_addr()}")
        await self.add_client(session)
        await session.run()

    async def add_client(self, session):
        """Add a new client to the registry and announce the new count"""
        count = await self.registry.add(session)
        self.update_server_status(count)
        await self.broadcast(status_message(count))

    async def remove_client(self, session):
        """Remove the client from the registry and notify the others"""
        count = await self.registry.remove(session)
        if count is None:
            logger.debug(f"Client {session.format_addr()} already removed!")
            return
        await self.broadcast(f"Client disconnected: {session.host}", exclude=session)
        logger.info(f"Client disconnected: {session.host}")
        self.update_server_status(count)
        await self.broadcast(status_message(count))

    async def broadcast(self, message, exclude=None):
        """Broadcast message to all connected clients except exclude."""
        return await self.registry.broadcast(message, exclude)

    def update_server_status(self, count):
        logger.info(f"SERVER STATUS: Host={self.hostname}, Port={self.port}, Connected Clients={count}")

    async def start(self):
        """Bind and start accepting connections. Raises OSError if binding fails."""
        self.server = await asyncio.start_server(
            self.client_handler,
            self.host,
            self.port
        )
        self.port = self.server.sockets[0].getsockname()[1]
        logger.info(f"Server started on host: {self.hostname} port: {self.port}")
        self.update_server_status(await self.registry.count())
        return self.server

    async def run_server(self):
        if self.server is None:
            await self.start()
        async with self.server:
            await self.server.serve_forever()

    async def close(self):
        """Stop accepting new connections."""
        if self.server is not None:
            self.server.close()
            await self.server.wait_closed()


def main(argv=None):
    """Entry point for server"""
    parser = argparse.ArgumentParser(description="Line relay server")
    parser.add_argument('port', nargs='?', type=int, default=DEFAULT_PORT, help='Port to listen on')
    parser.add_argument('--debug', action='store_true', help='Enable debug logging')
    args = parser.parse_args(argv)

    # setup logging
    level = logging.DEBUG if args.debug else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    server = Server(args.port)
    try:
        asyncio.run(server.run_server())
    except OSError as e:
        logger.error(f"Could not start server on port: {args.port}: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Server stopped by user")


if __name__ == "__main__":
    main()
