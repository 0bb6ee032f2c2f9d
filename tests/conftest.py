"""Pytest configuration and shared fixtures for i3 autosplit tests."""

import sys
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock

import pytest

# Make the package importable without installation
package_root = Path(__file__).parent.parent
if str(package_root) not in sys.path:
    sys.path.insert(0, str(package_root))

from i3_autosplit.connection import WindowManagerSession  # noqa: E402
from i3_autosplit.models import NodeLayout, Rect, WindowNode  # noqa: E402


def _make_node(node_id, layout=NodeLayout.SPLITH, nodes=None, name=None,
               rect=None, window_rect=None):
    return WindowNode(
        id=node_id,
        name=name,
        layout=layout,
        rect=rect or Rect(x=0, y=0, width=1920, height=1080),
        window_rect=window_rect or Rect(x=0, y=0, width=1920, height=1080),
        nodes=nodes or [],
    )


@pytest.fixture
def make_node():
    """Factory for WindowNode snapshots."""
    return _make_node


@pytest.fixture
def sample_tree(make_node):
    """Realistic root → output → workspace tree.

    Workspace 1 (splith) holds window 10 and a tabbed container 20 with
    windows 21 and 22. Window 22 is nested in a splitv container 23 inside
    the tabbed one.
    """
    tabbed = make_node(20, NodeLayout.TABBED, nodes=[
        make_node(21, name="Firefox"),
        make_node(23, NodeLayout.SPLITV, nodes=[make_node(22, name="xterm")]),
    ])
    workspace = make_node(3, NodeLayout.SPLITH, nodes=[
        make_node(10, name="Alacritty"),
        tabbed,
    ])
    output = make_node(2, NodeLayout.OTHER, nodes=[workspace])
    return make_node(1, NodeLayout.SPLITH, nodes=[output])


def ipc_con(con_id, layout="splith", name=None, nodes=None,
            rect=(0, 0, 1920, 1080), window_rect=(0, 0, 1920, 1080)):
    """i3ipc Con stand-in with the attributes WindowNode.from_con reads."""
    return SimpleNamespace(
        id=con_id,
        name=name,
        layout=layout,
        rect=SimpleNamespace(x=rect[0], y=rect[1], width=rect[2], height=rect[3]),
        window_rect=SimpleNamespace(
            x=window_rect[0], y=window_rect[1], width=window_rect[2], height=window_rect[3]
        ),
        nodes=nodes or [],
        floating_nodes=[],
    )


@pytest.fixture
def make_con():
    """Factory for i3ipc Con stand-ins."""
    return ipc_con


@pytest.fixture
def mock_i3_connection(make_con):
    """Mock i3ipc.aio.Connection."""
    conn = AsyncMock()
    conn.get_tree.return_value = make_con(1, nodes=[make_con(10, name="Alacritty")])
    conn.command.return_value = [Mock(success=True, error=None)]
    conn.on = Mock()
    return conn


@pytest.fixture
def mock_session(sample_tree):
    """Mock WindowManagerSession returning ``sample_tree`` from get_tree."""
    session = AsyncMock(spec=WindowManagerSession)
    session.get_tree.return_value = sample_tree
    session.run_command.return_value = None
    return session
