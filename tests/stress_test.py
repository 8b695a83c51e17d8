"""
Load script for a running relay server.

Usage: python tests/stress_test.py [light|heavy|slow] [port]
"""
import asyncio
import sys
import time

RELAYED_PREFIX = b"Client ["


class LoadClient:
    def __init__(self, client_id: int, host: str, port: int):
        self.client_id = client_id
        self.host = host
        self.port = port
        self.reader = None
        self.writer = None
        self.lines_sent = 0
        self.lines_relayed = 0
        self.errors = 0

    async def connect(self):
        """Connect to server"""
        try:
            self.reader, self.writer = await asyncio.open_connection(self.host, self.port)
            return True
        except OSError as e:
            print(f"Client {self.client_id}: Connection failed: {e}")
            self.errors += 1
            return False

    async def send_line(self, line: str):
        try:
            self.writer.write(line.encode() + b"\n")
            await self.writer.drain()
            self.lines_sent += 1
        except OSError:
            self.errors += 1

    async def handle_line(self, data: bytes):
        pass

    async def receive_loop(self):
        """Count relayed lines, status lines are ignored"""
        try:
            while True:
                data = await self.reader.readline()
                if not data:
                    break
                if data.startswith(RELAYED_PREFIX):
                    self.lines_relayed += 1
                await self.handle_line(data)
        except asyncio.CancelledError:
            pass
        except OSError:
            self.errors += 1

    async def send_loop(self, duration: float, rate: float):
        end_time = time.time() + duration
        while time.time() < end_time:
            await self.send_line(f"Line {self.lines_sent} from client {self.client_id}")
            await asyncio.sleep(1.0 / rate)

    async def close(self):
        if self.writer is None:
            return
        self.writer.close()
        try:
            await self.writer.wait_closed()
        except OSError:
            pass


class SlowLoadClient(LoadClient):
    """Reads with a delay to simulate a slow recipient"""

    async def handle_line(self, data: bytes):
        await asyncio.sleep(0.1)


async def run_stress_test(num_clients: int, duration: float, rate: float,
                          slow: bool = False, host: str = '127.0.0.1', port: int = 2000):
    """
    Run stress test

    Args:
        num_clients: Number of concurrent clients
        duration: How long to send (seconds)
        rate: Lines per second per client
        slow: Use slow readers for half of the clients
    """
    clients = [
        (SlowLoadClient if slow and i % 2 else LoadClient)(i, host, port)
        for i in range(num_clients)
    ]
    connected = sum(await asyncio.gather(*(c.connect() for c in clients)))
    print(f"Connected: {connected}/{num_clients}")
    if connected == 0:
        print("No clients connected. Is server running?")
        return
    clients = [c for c in clients if c.writer]
    # let the join status lines settle
    await asyncio.sleep(1)

    receive_tasks = [asyncio.create_task(c.receive_loop()) for c in clients]
    start_time = time.time()
    await asyncio.gather(*(c.send_loop(duration, rate) for c in clients), return_exceptions=True)
    await asyncio.sleep(2)
    for task in receive_tasks:
        task.cancel()
    await asyncio.gather(*receive_tasks, return_exceptions=True)
    elapsed = time.time() - start_time
    await asyncio.gather(*(c.close() for c in clients), return_exceptions=True)

    total_sent = sum(c.lines_sent for c in clients)
    total_relayed = sum(c.lines_relayed for c in clients)
    expected = total_sent * (connected - 1)
    print("=" * 60)
    print(f"Duration: {elapsed:.2f}s")
    print(f"Lines sent: {total_sent}")
    print(f"Lines relayed: {total_relayed}")
    print(f"Errors: {sum(c.errors for c in clients)}")
    if expected:
        print(f"Delivery rate: {total_relayed / expected * 100:.2f}% of {expected}")
    print("=" * 60)


SCENARIOS = {
    'light': dict(num_clients=10, duration=10, rate=10),
    'heavy': dict(num_clients=100, duration=30, rate=10),
    'slow': dict(num_clients=20, duration=10, rate=5, slow=True),
}


if __name__ == "__main__":
    name = sys.argv[1] if len(sys.argv) > 1 else 'light'
    if name not in SCENARIOS:
        print(f"Unknown test: {name}")
        print(f"Available: {', '.join(SCENARIOS)}")
        sys.exit(1)
    port = int(sys.argv[2]) if len(sys.argv) > 2 else 2000
    asyncio.run(run_stress_test(port=port, **SCENARIOS[name]))
