"""Bounded update stream shared between a producer task and one consumer."""
import asyncio
from typing import Generic, Optional, TypeVar

T = TypeVar("T")

_CLOSED = object()


class UpdateStream(Generic[T]):
    """
    Receive-only sequence of updates backed by a bounded asyncio queue.

    The producer calls ``send`` (which waits while the queue is full) and
    ``close`` once it is done; the consumer iterates with ``async for`` or
    calls ``recv`` until it returns None. A producer that fails closes with
    an error, which ``recv`` raises after the pending items are delivered.
    """

    def __init__(self, capacity: int = 1000):
        """Initialise the stream with a queue of ``capacity`` items."""
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=capacity)
        self._closed = False
        self._error: Optional[BaseException] = None
        self._producer: Optional[asyncio.Task] = None

    @property
    def closed(self) -> bool:
        return self._closed

    def attach(self, producer: asyncio.Task):
        """Tie the producer task's lifetime to this stream."""
        self._producer = producer

    async def send(self, item: T):
        """Queue an update for the consumer."""
        if self._closed:
            raise RuntimeError("send on closed stream")
        await self._queue.put(item)

    async def close(self, error: Optional[BaseException] = None):
        """
        Mark the end of the sequence without waiting for queue space.

        Pending items are still delivered. When ``error`` is given the
        consumer receives it in place of the normal end.
        """
        if self._closed:
            return
        self._closed = True
        self._error = error
        try:
            self._queue.put_nowait(_CLOSED)
        except asyncio.QueueFull:
            # the consumer is not waiting; it finds the end once it drains the queue
            pass

    async def recv(self) -> Optional[T]:
        """Next update, or None once the producer has closed the stream."""
        if self._closed and self._queue.empty():
            return self._end()
        item = await self._queue.get()
        if item is _CLOSED:
            return self._end()
        return item

    def _end(self) -> None:
        if self._error is not None:
            raise self._error
        return None

    async def aclose(self):
        """Cancel the producer and end the stream."""
        if self._producer and not self._producer.done():
            self._producer.cancel()
            try:
                await self._producer
            except asyncio.CancelledError:
                pass
        await self.close()

    def __aiter__(self):
        return self

    async def __anext__(self) -> T:
        item = await self.recv()
        if item is None:
            raise StopAsyncIteration
        return item
