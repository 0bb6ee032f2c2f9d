"""Main daemon entry point.

Connects two i3 IPC sessions, subscribes to window events, and runs the
dispatcher (producer) and submitter (consumer) as two asyncio tasks joined
until one of them fails. Every failure is fatal: the process exits non-zero.
"""

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import DEFAULT_CONFIG_FILE, AutosplitConfig, load_config
from .connection import FocusEventStream, WindowManagerSession
from .dispatcher import EventDispatcher
from .errors import AutosplitError
from .models import SplitCommand
from .submitter import CommandSubmitter

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


async def join_tasks(producer: asyncio.Task, consumer: asyncio.Task) -> None:
    """Wait for both tasks and re-raise the first failure.

    A failed consumer cancels the producer, whose commands could no longer be
    delivered. A failed producer leaves the consumer running until it has
    drained the commands already queued.
    """
    done, _ = await asyncio.wait({producer, consumer}, return_when=asyncio.FIRST_EXCEPTION)

    first_failed = next(
        (
            task for task in (producer, consumer)
            if task in done and not task.cancelled() and task.exception() is not None
        ),
        None,
    )
    if first_failed is consumer:
        producer.cancel()

    results = await asyncio.gather(producer, consumer, return_exceptions=True)
    for task, result in zip((producer, consumer), results):
        if task is first_failed or isinstance(result, asyncio.CancelledError):
            continue
        if isinstance(result, BaseException):
            logger.error(f"{task.get_name()} also failed: {result}")

    if first_failed is not None:
        raise first_failed.exception()


class AutosplitDaemon:
    """Main daemon class."""

    def __init__(self, config: AutosplitConfig) -> None:
        self.config = config
        self.events_session: Optional[WindowManagerSession] = None
        self.command_session: Optional[WindowManagerSession] = None
        self.stream: Optional[FocusEventStream] = None
        self.commands: Optional["asyncio.Queue[Optional[SplitCommand]]"] = None
        self.dispatcher: Optional[EventDispatcher] = None
        self.submitter: Optional[CommandSubmitter] = None

    async def initialize(self) -> None:
        """Connect sessions, build the queue, and subscribe to window events.

        Raises:
            IPCConnectionError: If i3 is unreachable or the subscription fails
        """
        logger.info("Initializing i3 autosplit daemon...")

        self.events_session = await WindowManagerSession(
            self.config.socket_path, label="events"
        ).connect()
        self.command_session = await WindowManagerSession(
            self.config.socket_path, label="commands"
        ).connect()

        self.commands = asyncio.Queue(maxsize=self.config.queue_size)
        self.dispatcher = EventDispatcher(
            self.events_session, self.commands, self.config.terminal_names
        )
        self.submitter = CommandSubmitter(self.command_session, self.commands)

        self.stream = await self.events_session.subscribe()

        logger.info(
            f"Daemon initialized: queue_size={self.config.queue_size}, "
            f"terminals={sorted(self.config.terminal_names)}"
        )

    async def run(self) -> None:
        """Run dispatcher and submitter until one of them fails.

        Raises:
            AutosplitError: The first fatal error from either task
        """
        if self.dispatcher is None or self.submitter is None or self.stream is None:
            raise RuntimeError("Daemon not initialized")

        dispatch_task = asyncio.create_task(self.dispatcher.run(self.stream), name="dispatcher")
        submit_task = asyncio.create_task(self.submitter.run(), name="submitter")

        try:
            await join_tasks(dispatch_task, submit_task)
        finally:
            self.stream.close()
            await self.dispatcher.abandon_close()
            logger.info(f"Submitted {self.submitter.submitted} commands")


def setup_logging(level: str) -> None:
    """Setup logging to stderr."""
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    handler = logging.StreamHandler(sys.stderr)
    formatter = logging.Formatter("%(levelname)s [%(name)s] %(message)s")
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    logger.debug(f"Logging configured: level={level}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="i3-autosplit",
        description="Pick i3 split direction automatically on every window focus change.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG_FILE,
        help=f"JSON config file (default: {DEFAULT_CONFIG_FILE})",
    )
    parser.add_argument("--socket", help="i3/Sway IPC socket path (default: autodetect)")
    parser.add_argument(
        "--terminal",
        action="append",
        metavar="NAME",
        help="Window name treated as a terminal (repeatable, replaces the default set)",
    )
    parser.add_argument("--queue-size", type=int, help="Command queue capacity")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=os.environ.get("LOG_LEVEL", "INFO").upper(),
        help="Logging level (default: $LOG_LEVEL or INFO)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


async def main_async(args: argparse.Namespace) -> int:
    """Async main function.

    Returns:
        Exit code (0 = success, non-zero = error)
    """
    try:
        config = load_config(args.config).with_overrides(
            terminal_names=args.terminal,
            queue_size=args.queue_size,
            socket_path=args.socket,
        )
        daemon = AutosplitDaemon(config)
        await daemon.initialize()
        await daemon.run()
        return 0

    except AutosplitError as e:
        logger.error(f"Fatal error: {e.to_dict()}", exc_info=True)
        return 1

    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        return 1


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    if args.log_level not in LOG_LEVELS:
        args.log_level = "INFO"
    setup_logging(args.log_level)

    logger.info(f"i3 autosplit {__version__} starting (PID {os.getpid()})")

    try:
        exit_code = asyncio.run(main_async(args))
        sys.exit(exit_code)

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(0)


if __name__ == "__main__":
    main()
