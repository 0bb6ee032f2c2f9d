"""i3 IPC session adapter.

Wraps i3ipc.aio.Connection so the rest of the daemon only sees WindowNode /
FocusEvent snapshots and this package's error types. There is no reconnection:
a lost connection is fatal.
"""

import asyncio
import logging
from typing import Any, Optional

from i3ipc import Event
from i3ipc import aio

from .errors import (
    CommandError,
    EventStreamError,
    IPCConnectionError,
    TreeFetchError,
)
from .models import FocusEvent, SplitCommand, WindowNode

logger = logging.getLogger(__name__)


class _StreamEnd:
    """Queue marker for the end of the event stream."""

    def __init__(self, error: Optional[BaseException] = None) -> None:
        self.error = error


class FocusEventStream:
    """Ordered async stream of window events.

    i3ipc reads the socket eagerly and runs every event handler in its own
    task. The handler here is synchronous, so it runs in the first step of
    that task, in the order i3ipc created the tasks, and appends to an
    unbounded FIFO. Events that arrive during a tree fetch wait there; the
    only backpressure point is the bounded command queue downstream.

    Iteration ends with EventStreamError once the connection's main loop
    returns, whether it failed or closed normally.
    """

    def __init__(self, conn: aio.Connection) -> None:
        self.conn = conn
        self.events_seen = 0
        self._events: asyncio.Queue = asyncio.Queue()
        self._main_task: Optional[asyncio.Task] = None
        self._ended = False

    async def start(self) -> "FocusEventStream":
        """Register the window handler, subscribe, and start the i3ipc main loop.

        Raises:
            IPCConnectionError: If the subscription fails
        """
        self.conn.on(Event.WINDOW, self._on_window)
        try:
            await self.conn.subscribe([Event.WINDOW])
        except Exception as e:
            raise IPCConnectionError(
                f"Failed to subscribe to window events: {e}", subscribe=True
            ) from e

        logger.info("Subscribed to i3 window events")
        self._main_task = asyncio.create_task(self._run_main())
        return self

    def _on_window(self, conn: aio.Connection, event: Any) -> None:
        # Must not await: ordering relies on running within the task's first step.
        try:
            focus_event = FocusEvent.from_ipc(event)
        except Exception as e:
            logger.error(f"Failed to convert window event: {e}")
            self._events.put_nowait(_StreamEnd(e))
            return
        self._events.put_nowait(focus_event)

    async def _run_main(self) -> None:
        try:
            await self.conn.main()
        except Exception as e:
            logger.error(f"i3 event loop error: {e}")
            self._events.put_nowait(_StreamEnd(e))
        else:
            logger.info("i3 event loop ended")
            self._events.put_nowait(_StreamEnd())

    def __aiter__(self) -> "FocusEventStream":
        return self

    async def __anext__(self) -> FocusEvent:
        if self._ended:
            raise StopAsyncIteration

        item = await self._events.get()
        if isinstance(item, _StreamEnd):
            self._ended = True
            if item.error is not None:
                raise EventStreamError(
                    f"Window event stream failed: {item.error}",
                    events_seen=self.events_seen,
                ) from item.error
            raise EventStreamError(
                "Window event stream closed", closed=True, events_seen=self.events_seen
            )

        self.events_seen += 1
        return item

    def close(self) -> None:
        """Stop the i3ipc main loop task if it is still running."""
        if self._main_task and not self._main_task.done():
            self._main_task.cancel()


class WindowManagerSession:
    """One i3 IPC connection.

    The dispatcher and the submitter each own a session, so tree fetches and
    commands never share a socket.
    """

    def __init__(self, socket_path: Optional[str] = None, label: str = "ipc") -> None:
        """Initialize session.

        Args:
            socket_path: IPC socket path (None lets i3ipc discover it)
            label: Name used in log lines
        """
        self.socket_path = socket_path
        self.label = label
        self.conn: Optional[aio.Connection] = None

    @property
    def is_connected(self) -> bool:
        return self.conn is not None

    async def connect(self) -> "WindowManagerSession":
        """Connect to i3.

        Raises:
            IPCConnectionError: If i3 is unreachable
        """
        try:
            self.conn = await aio.Connection(
                socket_path=self.socket_path, auto_reconnect=False
            ).connect()
        except Exception as e:
            raise IPCConnectionError(
                f"Failed to connect to i3 ({self.label}): {e}",
                socket_path=self.socket_path,
            ) from e

        logger.info(f"Connected to i3 IPC ({self.label})")
        return self

    def _require_conn(self) -> aio.Connection:
        if self.conn is None:
            raise IPCConnectionError(
                f"Session {self.label} is not connected", socket_path=self.socket_path
            )
        return self.conn

    async def subscribe(self) -> FocusEventStream:
        """Subscribe to window events.

        Returns:
            Started FocusEventStream
        """
        stream = FocusEventStream(self._require_conn())
        return await stream.start()

    async def get_tree(self) -> WindowNode:
        """Fetch the full layout tree.

        Raises:
            TreeFetchError: If the GET_TREE round trip fails
        """
        conn = self._require_conn()
        try:
            root = await conn.get_tree()
        except Exception as e:
            raise TreeFetchError(f"GET_TREE failed ({self.label}): {e}") from e
        return WindowNode.from_con(root)

    async def run_command(self, command: SplitCommand) -> None:
        """Send a command to i3.

        Raises:
            CommandError: If the round trip fails or i3 reports an unsuccessful reply
        """
        conn = self._require_conn()
        body = command.value if isinstance(command, SplitCommand) else str(command)

        try:
            replies = await conn.command(body)
        except Exception as e:
            raise CommandError(body, f"RUN_COMMAND failed ({self.label}): {e}") from e

        for reply in replies or []:
            if not reply.success:
                raise CommandError(body, f"i3 rejected '{body}': {getattr(reply, 'error', None)}")

        logger.debug(f"Executed command: {body}")
