"""
Line-oriented connection wrapper.

Wraps an asyncio stream pair and exposes read_line, write_line and close.
Used by the server sessions and by the client.
"""

import asyncio
import logging
from typing import Optional, Tuple

logger = logging.getLogger(__name__)


class Connection:
    """
    One TCP connection carrying newline-delimited text.
    """

    def __init__(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter, encoding: str = "utf-8") -> None:
        """
        Initialize connection.

        Args:
            reader: asyncio StreamReader for incoming bytes
            writer: asyncio StreamWriter for outgoing bytes
            encoding: text encoding used on the wire
        """
        self.reader = reader
        self.writer = writer
        self.encoding = encoding
        self.addr = writer.get_extra_info("peername")

    @classmethod
    async def open(cls, host: str, port: int) -> "Connection":
        """Open a TCP connection to host:port."""
        reader, writer = await asyncio.open_connection(host, port)
        return cls(reader, writer)

    @property
    def host(self) -> str:
        """Remote host label."""
        if not self.addr:
            return "unknown"
        return str(self.addr[0])

    async def read_line(self) -> Optional[str]:
        """Read one line, None on end-of-stream."""
        data = await self.reader.readline()
        if not data:
            return None
        return data.decode(self.encoding, errors="replace").rstrip("\r\n")

    async def write_line(self, line: str) -> None:
        """Write one line and wait for the buffer to flush."""
        if self.writer.is_closing():
            raise ConnectionResetError(f"connection to {self.host} is closed")
        self.writer.write(line.encode(self.encoding) + b"\n")
        await self.writer.drain()

    async def close(self) -> None:
        if not self.writer.is_closing():
            self.writer.close()
        await self.writer.wait_closed()
