"""
Tests for OrderStream: tick cadence, drop-on-backpressure and cancellation.

A short interval keeps the suite fast; the behaviour does not depend on it.
"""
import asyncio
from datetime import timedelta, timezone

import pytest

from app.domain.entities import CoffeeOrder
from app.services.order_stream import OrderStream

INTERVAL = 0.05

# Wall-clock timestamps vs. the loop's monotonic clock
CLOCK_SLACK = timedelta(milliseconds=5)


async def take(stream: OrderStream, count: int):
    orders = []
    async for order in stream:
        orders.append(order)
        if len(orders) == count:
            break
    return orders


class TestOrderCadence:
    """Orders arrive one per tick, in order, tagged with the coffee id."""

    @pytest.mark.asyncio
    async def test_first_three_orders_are_one_interval_apart(self):
        """
        Ticks are fixed-rate: tick n fires at start + n * interval, like
        Reactor's Flux.interval. A tick that fires a little late leaves a
        slightly shorter gap before the next one, so the gap check allows
        CLOCK_SLACK below the interval.
        """
        async with OrderStream("x", interval=INTERVAL) as stream:
            orders = await take(stream, 3)

        assert [o.coffee_id for o in orders] == ["x", "x", "x"]
        for previous, current in zip(orders, orders[1:]):
            assert current.when_ordered > previous.when_ordered
            assert current.when_ordered - previous.when_ordered >= timedelta(seconds=INTERVAL) - CLOCK_SLACK

    @pytest.mark.asyncio
    async def test_timestamps_are_utc_generation_time(self):
        async with OrderStream("x", interval=INTERVAL) as stream:
            order = (await take(stream, 1))[0]

        assert isinstance(order, CoffeeOrder)
        assert order.when_ordered.tzinfo == timezone.utc

    @pytest.mark.asyncio
    async def test_each_stream_starts_its_own_clock(self):
        """A second stream starts fresh; its first order is newer than the first stream's last."""
        async with OrderStream("a", interval=INTERVAL) as first:
            first_orders = await take(first, 2)

        async with OrderStream("a", interval=INTERVAL) as second:
            second_orders = await take(second, 1)

        assert second.ticks >= 1
        assert second_orders[0].when_ordered > first_orders[-1].when_ordered

    @pytest.mark.asyncio
    async def test_iterating_starts_the_ticker(self):
        stream = OrderStream("lazy", interval=INTERVAL)
        try:
            orders = await take(stream, 1)
            assert orders[0].coffee_id == "lazy"
        finally:
            await stream.close()

    def test_interval_must_be_positive(self):
        with pytest.raises(ValueError):
            OrderStream("x", interval=0)


class TestBackpressure:
    """A slow consumer loses orders; the ticker never slows down."""

    @pytest.mark.asyncio
    async def test_slow_consumer_gets_a_subset_and_clock_keeps_ticking(self):
        async with OrderStream("slow", interval=INTERVAL) as stream:
            first = (await take(stream, 1))[0]
            ticks_before = stream.ticks

            # Consumer cannot accept anything for three tick periods
            await asyncio.sleep(INTERVAL * 3.5)

            assert stream.ticks - ticks_before >= 3
            assert stream.dropped >= 2
            # Never more than one order waiting
            assert stream._queue.qsize() == 1

            # The waiting order is the first one produced during the stall
            buffered = (await take(stream, 1))[0]
            assert buffered.when_ordered > first.when_ordered

            # Ticks + drops account for everything produced so far
            assert stream.delivered + stream.dropped + stream._queue.qsize() == stream.ticks

    @pytest.mark.asyncio
    async def test_tick_rate_ignores_consumer(self):
        """Ticks keep pace with elapsed time even when nobody reads."""
        loop = asyncio.get_running_loop()
        async with OrderStream("idle", interval=INTERVAL) as stream:
            started = loop.time()
            await asyncio.sleep(INTERVAL * 6.5)
            elapsed = loop.time() - started

            assert stream.ticks >= int(elapsed / INTERVAL) - 1
            assert stream.delivered == 0
            assert stream.dropped == stream.ticks - 1

    @pytest.mark.asyncio
    async def test_slow_consumer_does_not_affect_another_stream(self):
        async with OrderStream("slow", interval=INTERVAL) as slow, \
                OrderStream("fast", interval=INTERVAL) as fast:
            fast_orders = await take(fast, 4)

            assert len(fast_orders) == 4
            assert fast.dropped == 0
            # Nobody read the slow stream meanwhile
            assert slow.delivered == 0
            assert slow.dropped >= 2


class TestCancellation:
    """close() or consumer cancellation stops production immediately."""

    @pytest.mark.asyncio
    async def test_no_ticks_after_close(self):
        stream = OrderStream("x", interval=INTERVAL)
        await take(stream, 1)

        await stream.close()
        ticks_at_close = stream.ticks
        await asyncio.sleep(INTERVAL * 3)

        assert stream.closed
        assert stream.ticks == ticks_at_close
        assert stream._ticker.done()
        with pytest.raises(StopAsyncIteration):
            await stream.__anext__()

    @pytest.mark.asyncio
    async def test_close_wakes_a_waiting_consumer(self):
        stream = OrderStream("x", interval=60)
        stream.start()

        waiter = asyncio.create_task(stream.__anext__())
        await asyncio.sleep(0)
        await stream.close()

        with pytest.raises(StopAsyncIteration):
            await waiter
        assert stream.ticks == 0

    @pytest.mark.asyncio
    async def test_cancelled_consumer_stops_the_stream(self):
        stream = OrderStream("x", interval=INTERVAL)
        received = []

        async def consume():
            async with stream:
                async for order in stream:
                    received.append(order)

        task = asyncio.create_task(consume())
        await asyncio.sleep(INTERVAL * 2.5)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        count = len(received)
        ticks = stream.ticks
        await asyncio.sleep(INTERVAL * 3)

        assert count >= 1
        assert stream.closed
        assert len(received) == count
        assert stream.ticks == ticks

    @pytest.mark.asyncio
    async def test_close_is_idempotent_and_final(self):
        stream = OrderStream("x", interval=INTERVAL)
        await stream.close()
        await stream.close()

        with pytest.raises(RuntimeError):
            stream.start()
        with pytest.raises(StopAsyncIteration):
            await stream.__anext__()


def test_order_wire_format():
    from datetime import datetime

    order = CoffeeOrder(
        coffee_id="abc",
        when_ordered=datetime(2024, 5, 1, 12, 30, 0, tzinfo=timezone.utc),
    )

    assert order.to_dict() == {
        "coffeeId": "abc",
        "whenOrdered": "2024-05-01T12:30:00+00:00",
    }
