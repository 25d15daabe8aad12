"""In-memory host editor for testing, the CLI and embedding."""

import logging
from datetime import datetime, UTC
from typing import Any, Callable, Dict, Iterable, List, Optional

from .base import EditorHost, BufferListHook, BufferSwitchHook
from .models import Buffer, Frame, Window
from ..errors import HostError
from ..purposes.models import SidebarSide

logger = logging.getLogger(__name__)

SCRATCH_BUFFER = "*scratch*"


class InMemoryHost(EditorHost):
    """Host editor that keeps buffers and frames in memory.

    Buffer-list-update hooks run when buffers are created, killed or renamed,
    when their modified flag changes, and when a buffer is switched to.
    """

    def __init__(
        self,
        buffers: Optional[Iterable[Buffer]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize in-memory host.

        Args:
            buffers: Initial buffers, in buffer-list order
            clock: Time source used to stamp buffer display times
        """
        self.clock = clock or (lambda: datetime.now(UTC))
        self._buffers: Dict[str, Buffer] = {}
        self._order: List[str] = []
        self._text: Dict[str, str] = {}
        self._frames: Dict[str, Frame] = {}
        self._frame_counter = 0
        self._list_hooks: List[BufferListHook] = []
        self._switch_hooks: List[BufferSwitchHook] = []

        for buffer in buffers or []:
            self._buffers[buffer.name] = buffer
            self._order.append(buffer.name)
            self._text[buffer.name] = ""

    # Buffers

    def buffer_list(self) -> List[Buffer]:
        return [self._buffers[name] for name in self._order]

    def get_buffer(self, name: str) -> Optional[Buffer]:
        return self._buffers.get(name)

    def _require_buffer(self, name: str) -> Buffer:
        buffer = self._buffers.get(name)
        if buffer is None:
            raise HostError(f"No such buffer: {name}")
        return buffer

    def add_buffer(self, buffer: Buffer, text: str = "") -> Buffer:
        """Add a buffer to the end of the buffer list.

        Raises:
            HostError: If a buffer with the same name exists
        """
        if buffer.name in self._buffers:
            raise HostError(f"Buffer already exists: {buffer.name}")
        self._buffers[buffer.name] = buffer
        self._order.append(buffer.name)
        self._text[buffer.name] = text
        self._run_list_hooks()
        return buffer

    def ensure_buffer(self, name: str, major_mode: str) -> Buffer:
        existing = self._buffers.get(name)
        if existing is not None:
            return existing
        return self.add_buffer(Buffer(name=name, major_mode=major_mode, read_only=True))

    def set_buffer_text(self, name: str, text: str) -> None:
        self._require_buffer(name)
        self._text[name] = text

    def buffer_text(self, name: str) -> str:
        self._require_buffer(name)
        return self._text[name]

    def kill_buffer(self, name: str) -> None:
        self._require_buffer(name)
        del self._buffers[name]
        del self._text[name]
        self._order.remove(name)

        for frame in self._frames.values():
            frame.windows = [
                w for w in frame.windows
                if not (w.is_side_window and w.buffer_name == name)
            ]
            for window in frame.windows:
                if window.buffer_name == name:
                    window.buffer_name = self._fallback_buffer(frame.purpose, exclude=name)
            if frame.selected_window >= len(frame.windows):
                frame.selected_window = 0

        logger.debug(f"Killed buffer {name}")
        self._run_list_hooks()

    def rename_buffer(self, old_name: str, new_name: str) -> Buffer:
        """Rename a buffer, keeping its position in the buffer list."""
        buffer = self._require_buffer(old_name)
        if new_name in self._buffers:
            raise HostError(f"Buffer already exists: {new_name}")

        renamed = buffer.model_copy(update={"name": new_name})
        del self._buffers[old_name]
        self._buffers[new_name] = renamed
        self._text[new_name] = self._text.pop(old_name)
        self._order[self._order.index(old_name)] = new_name

        for frame in self._frames.values():
            for window in frame.windows:
                if window.buffer_name == old_name:
                    window.buffer_name = new_name

        self._run_list_hooks()
        return renamed

    def set_modified(self, name: str, modified: bool = True) -> None:
        """Set a buffer's modified flag."""
        buffer = self._require_buffer(name)
        if buffer.modified != modified:
            buffer.modified = modified
            self._run_list_hooks()

    def _fallback_buffer(self, purpose: Any, exclude: Optional[str] = None) -> str:
        """Buffer to show when nothing else is requested, honouring a purpose."""
        candidates = [
            self._buffers[name] for name in self._order
            if name != exclude and not self._buffers[name].read_only
        ]
        if purpose is not None:
            candidates = [b for b in candidates if purpose.matches(b)]
        if candidates:
            return candidates[0].name
        if SCRATCH_BUFFER not in self._buffers:
            self._buffers[SCRATCH_BUFFER] = Buffer(name=SCRATCH_BUFFER, major_mode="lisp-interaction-mode")
            self._order.append(SCRATCH_BUFFER)
            self._text[SCRATCH_BUFFER] = ""
        return SCRATCH_BUFFER

    # Frames

    def create_frame(self, parameters: Dict[str, Any], purpose: Any = None) -> Frame:
        self._frame_counter += 1
        frame_id = f"F{self._frame_counter}"
        initial = self._fallback_buffer(purpose)
        frame = Frame(
            frame_id=frame_id,
            title=parameters.get("title") or parameters.get("name") or frame_id,
            parameters=dict(parameters),
            windows=[Window(buffer_name=initial)],
            purpose=purpose,
        )
        self._frames[frame_id] = frame
        logger.debug(f"Created frame {frame_id} showing {initial}")
        return frame

    def delete_frame(self, frame: Frame) -> None:
        if frame.frame_id not in self._frames:
            raise HostError(f"No such frame: {frame.frame_id}")
        del self._frames[frame.frame_id]

    def frames(self) -> List[Frame]:
        return list(self._frames.values())

    def current_buffer(self, frame: Frame) -> Optional[Buffer]:
        window = frame.selected()
        if window is None:
            return None
        return self._buffers.get(window.buffer_name)

    def switch_to_buffer(self, frame: Frame, name: str) -> Buffer:
        buffer = self._require_buffer(name)

        window = frame.selected()
        if window is None or window.is_side_window:
            main = frame.main_windows
            if not main:
                frame.windows.append(Window(buffer_name=name))
                main = frame.main_windows
            window = main[0]
            frame.selected_window = frame.windows.index(window)
        window.buffer_name = name

        buffer.last_display_time = self.clock()
        self._order.remove(name)
        self._order.insert(0, name)

        for hook in list(self._switch_hooks):
            hook(frame, buffer)
        self._run_list_hooks()
        return buffer

    def split_window(self, frame: Frame, name: str) -> Window:
        """Add a main window to the frame showing a buffer."""
        self._require_buffer(name)
        window = Window(buffer_name=name)
        frame.windows.append(window)
        return window

    def restore_layout(self, frame: Frame, names: List[str]) -> None:
        """Replace the frame's main windows without running hooks or stamping display times."""
        for name in names:
            self._require_buffer(name)
        if not names:
            return
        side_windows = [w for w in frame.windows if w.is_side_window]
        frame.windows = [Window(buffer_name=name) for name in names] + side_windows
        frame.selected_window = 0

    def display_side_window(self, frame: Frame, buffer_name: str, side: SidebarSide, size: int) -> None:
        self._require_buffer(buffer_name)
        existing = frame.side_window(buffer_name)
        if existing is not None:
            existing.side = side
            existing.size = size
            return
        frame.windows.append(Window(buffer_name=buffer_name, side=side, size=size))

    def close_side_window(self, frame: Frame, buffer_name: str) -> None:
        window = frame.side_window(buffer_name)
        if window is None:
            return
        selected = frame.selected()
        frame.windows.remove(window)
        if selected is not None and selected in frame.windows:
            frame.selected_window = frame.windows.index(selected)
        else:
            frame.selected_window = 0

    # Hooks

    def add_buffer_list_update_hook(self, hook: BufferListHook) -> None:
        if hook not in self._list_hooks:
            self._list_hooks.append(hook)

    def remove_buffer_list_update_hook(self, hook: BufferListHook) -> None:
        if hook in self._list_hooks:
            self._list_hooks.remove(hook)

    def add_buffer_switch_hook(self, hook: BufferSwitchHook) -> None:
        if hook not in self._switch_hooks:
            self._switch_hooks.append(hook)

    def remove_buffer_switch_hook(self, hook: BufferSwitchHook) -> None:
        if hook in self._switch_hooks:
            self._switch_hooks.remove(hook)

    def _run_list_hooks(self) -> None:
        for hook in list(self._list_hooks):
            hook()
