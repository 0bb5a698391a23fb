"""
Order Stream - per-connection generator of synthetic coffee orders.

Each stream owns:
- one ticker task firing every `interval` seconds, measured from start
- one single-slot queue between the ticker and the consumer

Backpressure: if the slot is still occupied when the next tick fires, the new
order is dropped. The ticker never waits for the consumer, so a slow client
sees gaps instead of slowing the clock or growing a buffer.
"""
import asyncio
import logging
from typing import Optional

from app.domain.entities import CoffeeOrder

logger = logging.getLogger(__name__)

# Marks end-of-stream in the queue after close()
_CLOSED = object()


class OrderStream:
    """
    Infinite async iterator of CoffeeOrder events for one coffee id.

    Usage:
        async with OrderStream(coffee_id) as orders:
            async for order in orders:
                ...

    Not restartable: every instance starts its own clock when first iterated
    (or entered) and stops for good on close().
    """

    def __init__(self, coffee_id: str, interval: float = 1.0):
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self.coffee_id = coffee_id
        self.interval = interval

        self._queue: asyncio.Queue = asyncio.Queue(maxsize=1)
        self._ticker: Optional[asyncio.Task] = None
        self._closed = False

        # Counters
        self.ticks = 0
        self.dropped = 0
        self.delivered = 0

    @property
    def closed(self) -> bool:
        return self._closed

    def start(self) -> None:
        """Start the ticker. Idempotent; a closed stream cannot be restarted."""
        if self._closed:
            raise RuntimeError("OrderStream is closed")
        if self._ticker is None:
            self._ticker = asyncio.create_task(
                self._run_ticker(), name=f"order-stream-{self.coffee_id}"
            )
            logger.debug(f"Order stream started for coffee {self.coffee_id} (every {self.interval}s)")

    async def _run_ticker(self) -> None:
        loop = asyncio.get_running_loop()
        started_at = loop.time()

        while True:
            deadline = started_at + (self.ticks + 1) * self.interval
            # Timer handles may fire up to one clock resolution early
            while (remaining := deadline - loop.time()) > 0:
                await asyncio.sleep(remaining)

            self.ticks += 1
            order = CoffeeOrder.now(self.coffee_id)
            try:
                self._queue.put_nowait(order)
            except asyncio.QueueFull:
                self.dropped += 1
                logger.debug(
                    f"Dropped order tick {self.ticks} for coffee {self.coffee_id} "
                    f"(consumer busy, {self.dropped} dropped so far)"
                )

    async def close(self) -> None:
        """
        Stop the ticker and end the stream.

        A consumer blocked in __anext__ is woken and sees StopAsyncIteration.
        """
        if self._closed:
            return
        self._closed = True

        # Discard the pending order (if any) and leave the end marker
        while not self._queue.empty():
            self._queue.get_nowait()
        self._queue.put_nowait(_CLOSED)

        logger.debug(
            f"Order stream closed for coffee {self.coffee_id}: "
            f"{self.ticks} ticks, {self.delivered} delivered, {self.dropped} dropped"
        )

        if self._ticker is not None:
            self._ticker.cancel()
            await asyncio.gather(self._ticker, return_exceptions=True)

    def __aiter__(self):
        return self

    async def __anext__(self) -> CoffeeOrder:
        if self._closed:
            raise StopAsyncIteration
        self.start()

        item = await self._queue.get()
        if item is _CLOSED or self._closed:
            raise StopAsyncIteration

        self.delivered += 1
        return item

    async def __aenter__(self):
        self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
