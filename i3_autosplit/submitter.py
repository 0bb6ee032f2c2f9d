"""Command submitter (consumer side).

Drains the command queue in FIFO order, one RUN_COMMAND round trip at a time.
"""

import asyncio
import logging
from typing import Optional

from .connection import WindowManagerSession
from .models import SplitCommand

logger = logging.getLogger(__name__)


class CommandSubmitter:
    """Sends queued split commands to i3 in arrival order."""

    def __init__(
        self,
        session: WindowManagerSession,
        commands: "asyncio.Queue[Optional[SplitCommand]]",
    ) -> None:
        self.session = session
        self.commands = commands
        self.submitted = 0

    async def run(self) -> None:
        """Submit commands until the queue is closed.

        ``None`` on the queue marks the producer as finished; everything queued
        before it has already been submitted when this returns.

        Raises:
            CommandError: If a submission fails (not retried)
        """
        while True:
            command = await self.commands.get()
            try:
                if command is None:
                    logger.debug(f"Receiver loop ended after {self.submitted} commands")
                    return
                await self.session.run_command(command)
                self.submitted += 1
            finally:
                self.commands.task_done()
