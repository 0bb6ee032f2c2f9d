"""Focus event dispatcher (producer side).

For each focus event: fetch a fresh tree, check for a tabbed/stacked
ancestor, and if there is none enqueue the split command chosen by the
heuristic. One event is fully resolved before the next is taken.
"""

import asyncio
import logging
from enum import Enum
from typing import AsyncIterator, FrozenSet, Optional

from .connection import WindowManagerSession
from .models import FocusEvent, SplitCommand
from .split_heuristic import TERMINAL_NAMES, choose_split
from .tree_walker import has_tabbed_ancestor

logger = logging.getLogger(__name__)


class DispatcherState(str, Enum):
    IDLE = "idle"
    AWAITING_TREE = "awaiting_tree"
    FORWARDING = "forwarding"
    CLOSED = "closed"


class EventDispatcher:
    """Turns focus events into split commands on the command queue."""

    def __init__(
        self,
        session: WindowManagerSession,
        commands: "asyncio.Queue[Optional[SplitCommand]]",
        terminal_names: FrozenSet[str] = TERMINAL_NAMES,
    ) -> None:
        """Initialize dispatcher.

        Args:
            session: Session used for GET_TREE
            commands: Bounded command queue shared with the CommandSubmitter
            terminal_names: Names the split heuristic treats as terminals
        """
        self.session = session
        self.commands = commands
        self.terminal_names = terminal_names
        self.state = DispatcherState.IDLE
        self.focus_events_handled = 0
        self.commands_enqueued = 0
        self._close_task: Optional[asyncio.Task] = None

    async def handle_event(self, event: FocusEvent) -> Optional[SplitCommand]:
        """Resolve one window event into zero or one enqueued command.

        Returns:
            The enqueued command, or None if nothing was enqueued

        Raises:
            TreeFetchError: If the tree cannot be fetched
        """
        if not event.is_focus:
            return None

        self.state = DispatcherState.AWAITING_TREE
        root = await self.session.get_tree()
        self.focus_events_handled += 1

        container = event.container
        tabbed_parent = has_tabbed_ancestor(
            root, container.id, container.layout.is_tabbed_or_stacked
        )
        logger.debug(f"name={container.name!r}, tabbed_parent={tabbed_parent}")

        if tabbed_parent:
            self.state = DispatcherState.IDLE
            return None

        self.state = DispatcherState.FORWARDING
        command = choose_split(container, self.terminal_names)
        await self.commands.put(command)
        self.commands_enqueued += 1
        self.state = DispatcherState.IDLE
        return command

    async def run(self, events: AsyncIterator[FocusEvent]) -> None:
        """Consume the event stream until it fails or ends.

        Always closes the command queue on exit so the submitter can drain
        what was already enqueued and stop.
        """
        try:
            async for event in events:
                await self.handle_event(event)
            logger.debug("Sender loop ended")
        finally:
            self.state = DispatcherState.CLOSED
            logger.info(
                f"Dispatcher closed after {self.focus_events_handled} focus events, "
                f"{self.commands_enqueued} commands"
            )
            self._close_queue()

    def _close_queue(self) -> None:
        # Never blocks: also runs on cancellation, when the consumer may be gone.
        try:
            self.commands.put_nowait(None)
        except asyncio.QueueFull:
            self._close_task = asyncio.get_running_loop().create_task(self.commands.put(None))

    @property
    def close_pending(self) -> bool:
        """True while the end marker is still waiting for queue space."""
        return self._close_task is not None and not self._close_task.done()

    async def abandon_close(self) -> None:
        """Cancel a pending end marker; used once the submitter is gone."""
        if not self.close_pending:
            return
        logger.debug("Dropping end marker, command queue has no consumer")
        self._close_task.cancel()
        await asyncio.gather(self._close_task, return_exceptions=True)
