"""Two ways of running the write-and-read workflow off the event loop.

* ``DatabaseTask``: submit work to a thread pool and get a callback on the
  loop when it finishes. The task only keeps weak references to the bus and
  the database, so it never keeps either alive on its own.
* ``database_write_and_read_async``: await the same work directly.

Both run ``database_write_and_read``, which inserts the two sample users and
renders the whole table as ``"idx: first last"`` lines.
"""

from __future__ import annotations

import asyncio
import logging
import weakref
from concurrent.futures import Executor, Future
from typing import Iterable, Optional

from .bus import Notice, NoticeBus
from .database import AppDatabase
from .store import User

logger = logging.getLogger(__name__)

SAMPLE_USERS = (
    ("Benjamin", "Blümchen"),
    ("Karla", "Kolumna"),
)


def format_user_list(users: Iterable[User]) -> str:
    return "\n".join(
        f"{idx}: {user.first_name} {user.last_name}"
        for idx, user in enumerate(users, start=1)
    )


def database_write_and_read(database: AppDatabase) -> str:
    """Insert the sample users, then list every stored user as text."""
    users = database.user_dao()
    users.insert_all(User(first_name=first, last_name=last) for first, last in SAMPLE_USERS)
    return format_user_list(users.all())


async def database_write_and_read_async(
    database: AppDatabase, executor: Optional[Executor] = None
) -> str:
    """Run :func:`database_write_and_read` on a worker and await the text.

    Args:
        database: Open database to write to.
        executor: Thread pool to use; the loop's default executor if None.
    """
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(executor, database_write_and_read, database)


class DatabaseTask:
    """Background write-and-read with a completion callback on the loop.

    ``do_in_background`` runs on a worker thread. When it finishes, the
    result is handed to ``on_post_execute`` on the loop that called
    ``execute``, which publishes it as a ``Notice``.

    Args:
        bus: Bus to publish the result on (held weakly).
        database: Database to work on (held weakly).
        display: Name of the display the notice is addressed to.
    """

    def __init__(self, bus: NoticeBus, database: AppDatabase, display: str = "console"):
        self._bus = weakref.ref(bus)
        self._database = weakref.ref(database)
        self.display = display

    def do_in_background(self) -> str:
        database = self._database()
        if database is None:
            return ""
        return database_write_and_read(database)

    def on_post_execute(self, text: str) -> None:
        bus = self._bus()
        if bus is None:
            logger.debug("Notice bus is gone, dropping task result")
            return
        bus.publish_nowait(Notice(display=self.display, content=text))

    def execute(
        self, executor: Executor, loop: Optional[asyncio.AbstractEventLoop] = None
    ) -> Future:
        """Submit the task and return its future.

        Must be called from a running loop unless ``loop`` is given. Errors
        are logged and left on the returned future; no notice is published.
        """
        loop = loop or asyncio.get_running_loop()
        future = executor.submit(self.do_in_background)
        future.add_done_callback(
            lambda done: loop.call_soon_threadsafe(self._deliver, done)
        )
        return future

    def _deliver(self, future: Future) -> None:
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            logger.error(f"Database task failed: {exc}")
            return
        self.on_post_execute(future.result())
