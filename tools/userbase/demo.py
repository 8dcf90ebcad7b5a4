#!/usr/bin/env python3
"""userbase demo: write two users, read the table back, show the result.

The workflow runs once per requested mode:

    basic      blocking calls straight from the event loop
    task       DatabaseTask on the worker pool, result via callback
    coroutine  awaited on the worker pool

Every result travels as a Notice over the NoticeBus to a display.

Usage:
    python3 demo.py
    python3 demo.py --mode coroutine --db-path /tmp/users.db
    python3 demo.py --config .userbase/config.json --log-level DEBUG
"""

import argparse
import asyncio
import logging
import sys
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Iterable, Optional

# Ensure userbase package is importable
sys.path.insert(0, str(Path(__file__).parent.parent))

from userbase.bus import Notice, NoticeBus
from userbase.config import DEFAULT_CONFIG_PATH, ConfigError, load_config
from userbase.database import AppDatabase
from userbase.display import BaseDisplay, ConsoleDisplay
from userbase.errors import UserStoreError
from userbase.events import log_event
from userbase.tasks import (
    DatabaseTask,
    database_write_and_read,
    database_write_and_read_async,
)

logger = logging.getLogger("userbase.demo")

DEMO_MODES = ("basic", "task", "coroutine")


async def notice_dispatcher(bus: NoticeBus, displays: dict[str, BaseDisplay]):
    """Consume notices and route each one to its display.

    Args:
        bus: NoticeBus instance
        displays: Dict of {name: display} for notice delivery
    """
    while True:
        notice = await bus.consume()
        try:
            display = displays.get(notice.display)
            if display:
                await display.show(notice)
                logger.debug(f"Shown on {notice.display}: {notice.content[:80]}")
            else:
                logger.warning(f"No display '{notice.display}' for notice")
        except Exception as e:
            logger.error(f"Display error [{notice.display}]: {e}")
        finally:
            bus.task_done()


async def run_mode(
    mode: str,
    database: AppDatabase,
    bus: NoticeBus,
    executor: ThreadPoolExecutor,
    display: str,
) -> None:
    if mode == "basic":
        text = database_write_and_read(database)
        await bus.publish(Notice(display=display, content=text))
    elif mode == "task":
        future = DatabaseTask(bus, database, display=display).execute(executor)
        await asyncio.wrap_future(future)
    elif mode == "coroutine":
        text = await database_write_and_read_async(database, executor)
        await bus.publish(Notice(display=display, content=text))
    else:
        raise ValueError(f"Unknown demo mode: {mode}")


async def run_demo(
    config: dict[str, Any],
    modes: Iterable[str] = DEMO_MODES,
    displays: Optional[list[BaseDisplay]] = None,
) -> None:
    """Open the database, run each mode and wait for its notice to be shown.

    Notices go to the first display. The database is closed on exit.

    Args:
        config: Configuration dictionary (see userbase.config)
        modes: Modes to run, in order
        displays: Displays to route notices to (default: console)
    """
    modes = list(modes)
    for mode in modes:
        if mode not in DEMO_MODES:
            raise ValueError(f"Unknown demo mode: {mode}")

    displays = displays or [ConsoleDisplay()]
    by_name = {display.name: display for display in displays}
    target = displays[0].name

    database = AppDatabase(
        db_path=config["db_path"],
        fallback_to_destructive_migration=config["fallback_to_destructive_migration"],
        journal_mode=config["journal_mode"],
    )
    bus = NoticeBus()
    executor = ThreadPoolExecutor(
        max_workers=config["worker_threads"], thread_name_prefix="userbase-db"
    )
    dispatcher = asyncio.create_task(notice_dispatcher(bus, by_name))

    log_event("demo_started", db_path=database.db_path, modes=modes)
    try:
        for mode in modes:
            logger.info(f"Running {mode} demo")
            await run_mode(mode, database, bus, executor, target)
        await bus.join()
    finally:
        dispatcher.cancel()
        await asyncio.gather(dispatcher, return_exceptions=True)
        executor.shutdown(wait=True)
        database.close()
        log_event("demo_stopped", db_path=database.db_path)


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="userbase-demo",
        description="Write sample users to the store and show the table",
    )
    parser.add_argument(
        "--config",
        "-c",
        default=DEFAULT_CONFIG_PATH,
        help=f"Path to config.json (default: {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument("--db-path", help="Override the database path from config")
    parser.add_argument(
        "--mode",
        "-m",
        action="append",
        choices=DEMO_MODES,
        help="Mode to run, repeatable (default: all modes)",
    )
    parser.add_argument(
        "--log-level",
        "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: from config, else INFO)",
    )

    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    if args.db_path:
        config["db_path"] = args.db_path

    logging.basicConfig(
        level=getattr(logging, args.log_level or config["log_level"]),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    try:
        asyncio.run(run_demo(config, modes=args.mode or DEMO_MODES))
    except UserStoreError as e:
        logger.error(f"Demo failed: {e}")
        return 1
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    sys.exit(main())
