"""Split direction heuristic.

Terminals stack to the right: a terminal flush with the left edge of its
workspace is split horizontally, any other terminal vertically. Everything
else spirals: split along the longer side of the window content.
"""

from typing import FrozenSet

from .models import SplitCommand, WindowNode

# Matched against the container name (window title), exact match only.
TERMINAL_NAMES: FrozenSet[str] = frozenset({"Alacritty", "xterm"})


def is_terminal(container: WindowNode, terminal_names: FrozenSet[str] = TERMINAL_NAMES) -> bool:
    return container.name is not None and container.name in terminal_names


def choose_split(
    container: WindowNode,
    terminal_names: FrozenSet[str] = TERMINAL_NAMES,
) -> SplitCommand:
    """Pick the split command for a newly focused container.

    Args:
        container: Focused container snapshot from the focus event
        terminal_names: Names recognized as terminals

    Returns:
        SplitCommand.HORIZONTAL or SplitCommand.VERTICAL
    """
    if is_terminal(container, terminal_names):
        # TODO: only the first split builds a right-hand stack; splitting the
        # left terminal again should append to that stack instead.
        if container.rect.x == 0:
            return SplitCommand.HORIZONTAL
        return SplitCommand.VERTICAL

    if container.window_rect.width > container.window_rect.height:
        return SplitCommand.HORIZONTAL
    return SplitCommand.VERTICAL
