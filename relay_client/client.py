"""
Main client implementation
Connects to the relay server, sends console input and prints relayed lines
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional, TextIO

from relay_server.connection import Connection

logger = logging.getLogger(__name__)

DEFAULT_HOST = '127.0.0.1'
DEFAULT_PORT = 2000


class Client():
    """
    Async client for the relay server

    Features:
    - Receiver printing every line coming from the server
    - Sender forwarding every console line to the server
    - Both loops run independently until each one ends
    """
    def __init__(self, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT,
                 stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> None:
        """
        Initialize client
        Args:
            host: ip of the server to connect to
            port: port of the server to connect to
            stdin: where outgoing lines are read from (default sys.stdin)
            stdout: where received lines are printed (default sys.stdout)
        """
        self.host = host
        self.port = port
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self.connection: Optional[Connection] = None

    async def connect(self) -> bool:
        """Handle the connection to the relay server"""
        try:
            self.connection = await Connection.open(self.host, self.port)
            logger.info(f"Connected to the server at {self.host}:{self.port}")
            return True
        except ConnectionRefusedError:
            logger.error(f"ERROR: Server at {self.host}:{self.port} refused connection")
        except OSError as e:
            logger.error(f"ERROR: Could not connect to the server at {self.host}:{self.port}: {e}")
        return False

    async def receive_messages(self) -> None:
        """Print every line received from the server"""
        try:
            while True:
                message = await self.connection.read_line()
                if message is None:
                    logger.debug("Server closed the connection")
                    break
                print(f"Server: {message}", file=self.stdout, flush=True)
        except (ConnectionResetError, ConnectionAbortedError, BrokenPipeError, OSError) as e:
            logger.debug(f"Error reading message from the server: {e}")
        except ValueError as e:
            # line longer than the stream buffer limit
            logger.debug(f"Unreadable message from the server: {e}")

    async def send_user_input(self) -> None:
        """Read console lines and send them to the server"""
        loop = asyncio.get_running_loop()
        while True:
            line = await loop.run_in_executor(None, self.stdin.readline)
            if not line:
                logger.debug("Console input closed")
                break
            try:
                await self.connection.write_line(line.rstrip("\r\n"))
            except (ConnectionResetError, BrokenPipeError, ConnectionAbortedError, OSError) as e:
                logger.error(f"Error sending message to the server: {e}")
                break

    async def run(self) -> bool:
        """Main client loop"""
        if not await self.connect():
            return False

        receiver_task = asyncio.create_task(self.receive_messages())
        sender_task = asyncio.create_task(self.send_user_input())
        try:
            # neither loop stops the other
            await asyncio.gather(receiver_task, sender_task)
        finally:
            try:
                await self.connection.close()
            except OSError as e:
                logger.debug(f"Close error: {e}")
            logger.info("Disconnected from server")
        return True


def main(argv=None):
    """Entry point for client"""
    parser = argparse.ArgumentParser(description="Line relay client")
    parser.add_argument('host', nargs='?', default=DEFAULT_HOST, help='Server host')
    parser.add_argument('port', nargs='?', type=int, default=DEFAULT_PORT, help='Server port')
    parser.add_argument('--debug', action='store_true', help='Enable debug logging')
    args = parser.parse_args(argv)
    # setup logging
    level = logging.DEBUG if args.debug else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    client = Client(host=args.host, port=args.port)
    try:
        connected = asyncio.run(client.run())
    except KeyboardInterrupt:
        logger.info("Client stopped by user")
        return
    if not connected:
        sys.exit(1)


if __name__ == "__main__":
    main()
