"""Notice bus for handing results back to the event loop that shows them.

Database work runs on worker threads; whatever they produce for the user is
wrapped in a ``Notice`` and queued here. A dispatcher running on the event
loop consumes the queue and routes each notice to a display::

    Worker ──(call_soon_threadsafe)──► publish_nowait() ──► Queue ──► consume() ──► Display

The queue is an in-memory asyncio.Queue and must only be touched from the
loop's own thread. Workers reach it through ``loop.call_soon_threadsafe``.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass


@dataclass
class Notice:
    """A short message destined for a display.

    Attributes:
        display: Name of the display that should show it (e.g. "console").
        content: Text to show.
    """

    display: str
    content: str


class NoticeBus:
    """Async queue between result producers and displays.

    Usage::

        bus = NoticeBus()

        # Producer side (on the loop)
        await bus.publish(Notice("console", "1: Karla Kolumna"))

        # Dispatcher side
        notice = await bus.consume()
        ...
        bus.task_done()
    """

    def __init__(self) -> None:
        self.outbound: asyncio.Queue[Notice] = asyncio.Queue()

    async def publish(self, notice: Notice) -> None:
        """Queue a notice for display."""
        await self.outbound.put(notice)

    def publish_nowait(self, notice: Notice) -> None:
        """Queue a notice from a loop callback that cannot await."""
        self.outbound.put_nowait(notice)

    async def consume(self) -> Notice:
        """Wait for and return the next notice."""
        return await self.outbound.get()

    def task_done(self) -> None:
        """Mark the most recently consumed notice as shown."""
        self.outbound.task_done()

    async def join(self) -> None:
        """Wait until every published notice has been marked done."""
        await self.outbound.join()
