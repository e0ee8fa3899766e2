"""
Bounded in-memory duplex byte channel.

Each direction is a pipe with a fixed capacity. A writer that fills its pipe
is suspended until the reader drains it, so neither side of a session can
buffer without bound.
"""

from __future__ import annotations

import asyncio


class _Pipe:
    """Single-direction bounded byte buffer."""

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            msg = "capacity must be positive"
            raise ValueError(msg)
        self.capacity = capacity
        self._buffer = bytearray()
        self._write_closed = False
        self._read_closed = False
        self._cond = asyncio.Condition()

    async def write(self, data: bytes) -> None:
        view = memoryview(data)
        async with self._cond:
            while view:
                if self._write_closed:
                    raise BrokenPipeError("write after shutdown")
                if self._read_closed:
                    raise BrokenPipeError("reader has closed")
                space = self.capacity - len(self._buffer)
                if space == 0:
                    await self._cond.wait()
                    continue
                self._buffer += view[:space]
                view = view[space:]
                self._cond.notify_all()

    async def read(self, n: int) -> bytes:
        if n == 0:
            return b""
        async with self._cond:
            while not self._buffer and not self._write_closed and not self._read_closed:
                await self._cond.wait()
            if self._read_closed:
                return b""
            if n < 0 or n > len(self._buffer):
                n = len(self._buffer)
            data = bytes(self._buffer[:n])
            del self._buffer[:n]
            self._cond.notify_all()
            return data

    async def close_write(self) -> None:
        async with self._cond:
            self._write_closed = True
            self._cond.notify_all()

    async def close_read(self) -> None:
        async with self._cond:
            self._read_closed = True
            self._buffer.clear()
            self._cond.notify_all()


class DuplexEndpoint:
    """One end of a duplex channel: reads from one pipe, writes to the other."""

    def __init__(self, inbound: _Pipe, outbound: _Pipe) -> None:
        self._inbound = inbound
        self._outbound = outbound

    async def read(self, n: int = -1) -> bytes:
        """Read up to ``n`` bytes.

        ``b""`` for any ``n`` other than 0 means the peer will send no more.
        """
        return await self._inbound.read(n)

    async def write(self, data: bytes) -> None:
        """Write all of ``data``, waiting for the peer to drain when full."""
        await self._outbound.write(data)

    async def shutdown(self) -> None:
        """Signal end-of-stream to the peer; reading stays possible."""
        await self._outbound.close_write()

    async def close(self) -> None:
        """Shut down both directions."""
        await self._outbound.close_write()
        await self._inbound.close_read()


def duplex(capacity: int) -> tuple[DuplexEndpoint, DuplexEndpoint]:
    """Create a connected pair of endpoints, each direction holding ``capacity`` bytes."""
    a_to_b = _Pipe(capacity)
    b_to_a = _Pipe(capacity)
    return DuplexEndpoint(b_to_a, a_to_b), DuplexEndpoint(a_to_b, b_to_a)
