"""Sidebar listing the buffers of a frame's purpose."""

from .sorting import SORT_KEYS, DEFAULT_SORT, resolve_sort_key, sort_buffers
from .renderer import SidebarLine, SidebarContent, render_line, render_sidebar
from .manager import SIDEBAR_KEYMAP, SidebarState, SidebarManager

__all__ = [
    "SORT_KEYS",
    "DEFAULT_SORT",
    "resolve_sort_key",
    "sort_buffers",
    "SidebarLine",
    "SidebarContent",
    "render_line",
    "render_sidebar",
    "SIDEBAR_KEYMAP",
    "SidebarState",
    "SidebarManager",
]
