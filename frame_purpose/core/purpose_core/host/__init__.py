"""Host editor abstraction for frame purposes."""

from .models import Buffer, Window, Frame
from .base import EditorHost, BufferListHook, BufferSwitchHook
from .memory import InMemoryHost, SCRATCH_BUFFER
from .snapshot import HostSnapshot, load_snapshot

__all__ = [
    "Buffer",
    "Window",
    "Frame",
    "EditorHost",
    "BufferListHook",
    "BufferSwitchHook",
    "InMemoryHost",
    "SCRATCH_BUFFER",
    "HostSnapshot",
    "load_snapshot",
]
