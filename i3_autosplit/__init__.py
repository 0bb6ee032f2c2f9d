"""
i3 autosplit

Sets the split direction of the focused i3/Sway container on every focus
change, so the next window tiles as a right-hand terminal stack or a spiral.
"""

__version__ = "1.0.0"
__author__ = "NixOS Configuration Team"
