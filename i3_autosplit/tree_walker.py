"""Tabbed/stacked ancestry lookup over a window tree snapshot."""

from typing import Optional

from .models import WindowNode


def _find_inherited(node: WindowNode, target_id: int, inherited: bool) -> Optional[bool]:
    """Inherited flag at the first pre-order match, or None if not found."""
    if node.id == target_id:
        return inherited

    child_inherited = node.layout.is_tabbed_or_stacked or inherited
    for child in node.nodes:
        found = _find_inherited(child, target_id, child_inherited)
        if found is not None:
            return found
    return None


def has_tabbed_ancestor(root: WindowNode, target_id: int, seed_tabbed: bool) -> bool:
    """Check whether ``target_id`` sits under a tabbed or stacked container.

    Depth-first pre-order walk. The inherited flag becomes True below any
    tabbed/stacked node and is returned when the target is reached. The walk
    stops at the first match, so that one wins if ids are duplicated.

    Args:
        root: Tree snapshot fetched after the focus event
        target_id: Container ID of the focused window
        seed_tabbed: Initial inherited flag. It is carried unchanged through
            every untabbed ancestor, so a True seed makes any reachable
            target report True.

    Returns:
        True if any ancestor of the first match is tabbed/stacked, or the
        seed is True. False otherwise, or if the target is absent from the tree.
    """
    return _find_inherited(root, target_id, seed_tabbed) is True
