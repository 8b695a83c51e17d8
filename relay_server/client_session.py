"""
Client session management.

Handles one client's connection: the read loop that relays its lines and
the teardown once the client goes away.
"""

import itertools
import logging

logger = logging.getLogger(__name__)

_session_ids = itertools.count(1)


class ClientSession:
    """
    Represents a single connected client.

    Manages:
    - Read loop relaying each line to the other clients
    - Line delivery to this client
    - Teardown (removal from the server, then close)
    """

    def __init__(self, connection, server):
        """
        Initialize client session.

        Args:
            connection: Connection accepted by the server
            server: Server owning the registry this session belongs to
        """
        self.connection = connection
        self.server = server
        self.session_id = next(_session_ids)
        self.addr = connection.addr
        self.host = connection.host
        self.closed = False

    def format_addr(self):
        """Format address as IP:Port string."""
        if not self.addr:
            return self.host
        return f"{self.addr[0]}:{self.addr[1]}"

    def __repr__(self):
        return f"<ClientSession #{self.session_id} {self.format_addr()}>"

    async def run(self):
        """
        Main read loop.

        Relays every line as "Client [host]: line" to all other clients
        until the client disconnects or the connection fails.
        """
        error = None
        try:
            while True:
                try:
                    line = await self.connection.read_line()
                except (ConnectionResetError, ConnectionAbortedError, BrokenPipeError, OSError) as e:
                    logger.error(f"ERROR: {self.format_addr()} has connection error: {e}")
                    error = e
                    break
                except Exception as e:
                    logger.error(f"ERROR: Unexpected error@{self.format_addr()}: {type(e).__name__}: {e}")
                    error = e
                    break
                if line is None:
                    logger.info(f"{self.format_addr()} disconnected (EOF)")
                    break
                logger.debug(f"Received msg from {self.format_addr()}: {line}")
                await self.server.broadcast(f"Client [{self.host}]: {line}", exclude=self)
        finally:
            # notice, removal and close must happen in this order
            if error is not None:
                await self.server.broadcast(f"Client [{self.host}] connection error: {error}", exclude=self)
            await self.server.remove_client(self)
            await self.close()

    async def send(self, message):
        """Send one line to this client. Write errors go to the caller."""
        await self.connection.write_line(message)

    async def close(self):
        """Close the connection, logging any error instead of raising."""
        if self.closed:
            return
        self.closed = True
        try:
            await self.connection.close()
        except (ConnectionResetError, BrokenPipeError, ConnectionAbortedError, OSError) as e:
            logger.warning(f"Close error@{self.format_addr()}: {e}")
        except Exception as e:
            logger.warning(f"Unexpected close error@{self.format_addr()}: {type(e).__name__}: {e}")
