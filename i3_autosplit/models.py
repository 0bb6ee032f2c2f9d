"""Data models for the i3 autosplit daemon.

Pydantic models for window tree snapshots, focus events and split commands.
All models are frozen: a snapshot is built per event, evaluated once and
discarded.
"""

from enum import Enum
from typing import Any, List, Optional
from pydantic import BaseModel, Field


class NodeLayout(str, Enum):
    """Container layout as reported by i3 GET_TREE.

    i3 reports a handful of layout strings that are irrelevant to splitting
    (output, dockarea); those collapse to OTHER.
    """

    NORMAL = "default"
    TABBED = "tabbed"
    STACKED = "stacked"
    SPLITH = "splith"
    SPLITV = "splitv"
    OTHER = "other"

    @classmethod
    def from_str(cls, value: Optional[str]) -> "NodeLayout":
        """Parse an i3 layout string, mapping unknown values to OTHER."""
        if not value:
            return cls.OTHER
        try:
            return cls(value.lower())
        except ValueError:
            return cls.OTHER

    @property
    def is_tabbed_or_stacked(self) -> bool:
        return self in (NodeLayout.TABBED, NodeLayout.STACKED)


class SplitCommand(str, Enum):
    """The two commands this daemon ever sends to i3."""

    HORIZONTAL = "split horizontal"
    VERTICAL = "split vertical"


class Rect(BaseModel):
    """Rectangle in absolute pixel coordinates."""

    x: int = Field(0, description="Left edge")
    y: int = Field(0, description="Top edge")
    width: int = Field(0, ge=0, description="Width in pixels")
    height: int = Field(0, ge=0, description="Height in pixels")

    @classmethod
    def from_ipc(cls, rect: Any) -> "Rect":
        """Build from an i3ipc Rect (or anything with x/y/width/height)."""
        if rect is None:
            return cls()
        return cls(
            x=getattr(rect, "x", 0) or 0,
            y=getattr(rect, "y", 0) or 0,
            width=getattr(rect, "width", 0) or 0,
            height=getattr(rect, "height", 0) or 0,
        )

    class Config:
        frozen = True


class WindowNode(BaseModel):
    """A node of the i3 layout tree.

    Only the tiling children (``nodes``) are kept; floating containers are not
    part of the tree this daemon walks.
    """

    id: int = Field(..., description="i3 container ID (con_id)")
    name: Optional[str] = Field(None, description="Window title / container name")
    layout: NodeLayout = Field(NodeLayout.OTHER, description="Container layout")
    rect: Rect = Field(default_factory=Rect, description="Absolute container rectangle")
    window_rect: Rect = Field(
        default_factory=Rect, description="Window content rectangle (inside decorations)"
    )
    nodes: List["WindowNode"] = Field(default_factory=list, description="Tiling children")

    @classmethod
    def from_con(cls, con: Any) -> "WindowNode":
        """Convert an i3ipc Con (and its tiling subtree) into a WindowNode.

        Args:
            con: i3ipc.aio.Con or i3ipc.Con

        Returns:
            Immutable WindowNode snapshot
        """
        return cls(
            id=con.id,
            name=con.name,
            layout=NodeLayout.from_str(con.layout),
            rect=Rect.from_ipc(con.rect),
            window_rect=Rect.from_ipc(getattr(con, "window_rect", None)),
            nodes=[cls.from_con(child) for child in (con.nodes or [])],
        )

    class Config:
        frozen = True


WindowNode.model_rebuild()


class FocusEvent(BaseModel):
    """A window event from the i3 event stream.

    Despite the name, every window change is delivered; only ``change == "focus"``
    is acted upon.
    """

    change: str = Field(..., description="Window change kind (focus, new, close, ...)")
    container: WindowNode = Field(..., description="Container snapshot at event time")

    @property
    def is_focus(self) -> bool:
        return self.change == "focus"

    @classmethod
    def from_ipc(cls, event: Any) -> "FocusEvent":
        """Convert an i3ipc WindowEvent."""
        return cls(change=event.change, container=WindowNode.from_con(event.container))

    class Config:
        frozen = True
