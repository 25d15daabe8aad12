"""Sidebar buffers: creation, throttled updates and line selection."""

import time
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from ..config import FramePurposeSettings
from ..errors import PurposeConfigError, SidebarError
from ..host.base import EditorHost
from ..host.models import Buffer, Frame
from ..purposes.filter import filter_buffers
from ..purposes.models import SidebarSide
from .renderer import SidebarContent, render_sidebar

logger = logging.getLogger(__name__)

SIDEBAR_KEYMAP: Dict[str, str] = {
    "RET": "select",
    "mouse-1": "select",
    "g": "refresh",
    "q": "quit",
}


@dataclass
class SidebarState:
    """Per-frame sidebar bookkeeping."""
    frame: Frame
    buffer_name: str
    side: SidebarSide
    content: Optional[SidebarContent] = None
    last_update: Optional[float] = None
    pending: bool = False
    update_count: int = 0


def _line_flags(content: SidebarContent) -> List[tuple]:
    return [(line.buffer_name, line.modified, line.visible) for line in content.lines]


def _same_content(a: SidebarContent, b: SidebarContent) -> bool:
    return a.plain == b.plain and _line_flags(a) == _line_flags(b)


class SidebarManager:
    """Shows, refreshes and hides purpose sidebars for frames."""

    def __init__(
        self,
        host: EditorHost,
        settings: Optional[FramePurposeSettings] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        """Initialize sidebar manager.

        Args:
            host: Editor host owning frames and buffers
            settings: Sidebar defaults and throttle interval
            clock: Monotonic time source in seconds
        """
        self.host = host
        self.settings = settings or FramePurposeSettings()
        self.clock = clock or time.monotonic
        self._states: Dict[str, SidebarState] = {}
        self._attached = False
        self._busy = False

    @contextmanager
    def _quiet(self):
        """Ignore host notifications caused by our own buffer changes."""
        previous = self._busy
        self._busy = True
        try:
            yield
        finally:
            self._busy = previous

    # Queries

    def state(self, frame: Frame) -> Optional[SidebarState]:
        return self._states.get(frame.frame_id)

    def has_sidebar(self, frame: Frame) -> bool:
        return frame.frame_id in self._states

    def is_sidebar_buffer(self, name: str) -> bool:
        return any(state.buffer_name == name for state in self._states.values())

    def _sidebar_buffer_names(self) -> List[str]:
        return [state.buffer_name for state in self._states.values()]

    def prune(self) -> List[str]:
        """Forget sidebars whose frame was deleted or whose buffer is gone.

        The sidebar buffer of a deleted frame is killed. A frame whose sidebar
        buffer was killed or renamed by the host loses its sidebar window.

        Returns:
            Ids of the frames whose sidebars were dropped
        """
        live = {frame.frame_id for frame in self.host.frames()}
        dropped = []
        for frame_id, state in list(self._states.items()):
            frame_gone = frame_id not in live
            buffer_gone = self.host.get_buffer(state.buffer_name) is None
            if not (frame_gone or buffer_gone):
                continue

            del self._states[frame_id]
            with self._quiet():
                if frame_gone and not buffer_gone:
                    self.host.kill_buffer(state.buffer_name)
                elif not frame_gone:
                    self.host.close_side_window(state.frame, state.buffer_name)

            reason = "frame deleted" if frame_gone else "buffer gone"
            logger.info(f"Dropped sidebar {state.buffer_name} of frame {frame_id} ({reason})")
            dropped.append(frame_id)
        return dropped

    # Showing and hiding

    def _resolve_side(self, frame: Frame) -> SidebarSide:
        if frame.purpose.sidebar_side is not None:
            return frame.purpose.sidebar_side
        try:
            return SidebarSide(self.settings.sidebar_side)
        except ValueError:
            raise PurposeConfigError(
                f"Invalid sidebar side {self.settings.sidebar_side!r}; "
                f"expected one of {', '.join(s.value for s in SidebarSide)}"
            ) from None

    def _check_context(self, frame: Frame) -> None:
        if frame.purpose is None:
            raise SidebarError(f"Frame {frame.frame_id} has no purpose")

        current = self.host.current_buffer(frame)
        if current is None:
            return
        if current.major_mode in self.settings.sidebar_blacklist_modes:
            raise SidebarError(f"Sidebar not available from {current.major_mode} buffers")
        if self.is_sidebar_buffer(current.name):
            raise SidebarError("Sidebar not available from inside a sidebar")

    def _unique_buffer_name(self, frame: Frame) -> str:
        name = self.settings.sidebar_buffer_name(frame.purpose.title)
        taken = {
            state.buffer_name for frame_id, state in self._states.items()
            if frame_id != frame.frame_id
        }
        if name in taken:
            name = f"{name}<{frame.frame_id}>"
        return name

    def show(self, frame: Frame) -> SidebarContent:
        """Open the frame's sidebar, or refresh it if already open.

        Raises:
            SidebarError: If the frame has no purpose or the current buffer is blacklisted
        """
        self.prune()
        existing = self._states.get(frame.frame_id)
        if existing is not None:
            self.update(frame, force=True)
            return existing.content

        self._check_context(frame)
        side = self._resolve_side(frame)
        buffer_name = self._unique_buffer_name(frame)

        with self._quiet():
            self.host.ensure_buffer(buffer_name, self.settings.sidebar_mode)
            self.host.display_side_window(frame, buffer_name, side, self.settings.sidebar_width)

        state = SidebarState(frame=frame, buffer_name=buffer_name, side=side)
        self._states[frame.frame_id] = state
        logger.info(f"Opened sidebar {buffer_name} on the {side.value} of frame {frame.frame_id}")

        self.update(frame, force=True)
        return state.content

    def hide(self, frame: Frame) -> bool:
        """Close the frame's sidebar window and kill its buffer."""
        state = self._states.pop(frame.frame_id, None)
        if state is None:
            return False

        with self._quiet():
            self.host.close_side_window(frame, state.buffer_name)
            if self.host.get_buffer(state.buffer_name) is not None:
                self.host.kill_buffer(state.buffer_name)

        logger.info(f"Closed sidebar {state.buffer_name} of frame {frame.frame_id}")
        return True

    # Rendering

    def sidebar_buffers(self, frame: Frame) -> List[Buffer]:
        """Buffers listed in the frame's sidebar."""
        purpose = frame.purpose
        if purpose.sidebar_buffers_fn is not None:
            buffers = list(purpose.sidebar_buffers_fn())
        else:
            buffers = filter_buffers(self.host.buffer_list(), purpose.predicate)
        sidebars = set(self._sidebar_buffer_names())
        return [b for b in buffers if b.name not in sidebars]

    def render(self, frame: Frame) -> SidebarContent:
        """Compute the frame's sidebar content without touching its buffer."""
        if frame.purpose is None:
            raise SidebarError(f"Frame {frame.frame_id} has no purpose")
        return render_sidebar(
            self.sidebar_buffers(frame),
            visible=self.host.visible_buffers(frame),
            sort=frame.purpose.sidebar_sort,
            header=frame.purpose.sidebar_header,
        )

    def update(self, frame: Frame, force: bool = False) -> bool:
        """Recompute the frame's sidebar, at most once per update interval.

        A throttled call marks the sidebar pending unless its content is
        already current. Sidebars of deleted frames or killed buffers are
        dropped instead of rendered.

        Args:
            frame: Frame whose sidebar to refresh
            force: Ignore the update interval

        Returns:
            True if the sidebar was re-rendered, False if throttled or absent
        """
        state = self._states.get(frame.frame_id)
        if state is None or frame.frame_id in self.prune():
            return False

        content = self.render(frame)
        now = self.clock()
        interval = self.settings.sidebar_update_interval
        if not force and state.last_update is not None and now - state.last_update < interval:
            if state.content is not None and _same_content(content, state.content):
                state.pending = False
                return False
            state.pending = True
            logger.debug(f"Throttled sidebar update for frame {frame.frame_id}")
            return False

        with self._quiet():
            self.host.set_buffer_text(state.buffer_name, content.plain)

        state.content = content
        state.last_update = now
        state.pending = False
        state.update_count += 1
        logger.debug(f"Rendered sidebar for frame {frame.frame_id} ({len(content.lines)} buffers)")
        return True

    def flush(self) -> int:
        """Run throttled updates whose interval has elapsed.

        Returns:
            Number of sidebars re-rendered
        """
        self.prune()
        updated = 0
        for state in list(self._states.values()):
            if state.pending and self.update(state.frame):
                updated += 1
        return updated

    # Host notifications

    def attach(self) -> None:
        """Subscribe to host buffer-list and buffer-switch notifications."""
        if self._attached:
            return
        self.host.add_buffer_list_update_hook(self._on_buffer_list_update)
        self.host.add_buffer_switch_hook(self._on_buffer_switch)
        self._attached = True

    def detach(self) -> None:
        if not self._attached:
            return
        self.host.remove_buffer_list_update_hook(self._on_buffer_list_update)
        self.host.remove_buffer_switch_hook(self._on_buffer_switch)
        self._attached = False

    @property
    def attached(self) -> bool:
        return self._attached

    def _on_buffer_list_update(self) -> None:
        if self._busy:
            return
        self.prune()
        for state in list(self._states.values()):
            if state.frame.purpose.sidebar_auto_update:
                self.update(state.frame)

    def _on_buffer_switch(self, frame: Frame, buffer: Buffer) -> None:
        if self._busy:
            return
        self.prune()
        state = self._states.get(frame.frame_id)
        if state is not None and frame.purpose.sidebar_update_on_buffer_switch:
            self.update(frame)

    # Input

    def handle_key(self, frame: Frame, key: str, line_number: Optional[int] = None) -> Optional[str]:
        """Dispatch a key pressed in the frame's sidebar.

        Args:
            frame: Frame owning the sidebar
            key: Key description, e.g. "RET" or "mouse-1"
            line_number: 1-based line the key was pressed on

        Returns:
            Name of the buffer switched to, for selection keys

        Raises:
            SidebarError: For unbound keys, missing sidebars or lines without a buffer
        """
        action = SIDEBAR_KEYMAP.get(key)
        if action is None:
            raise SidebarError(f"Key {key} is not bound in the sidebar")

        state = self._states.get(frame.frame_id)
        if state is None:
            raise SidebarError(f"Frame {frame.frame_id} has no sidebar")

        if action == "refresh":
            self.update(frame, force=True)
            return None
        if action == "quit":
            self.hide(frame)
            return None

        return self.select_line(frame, line_number)

    def select_line(self, frame: Frame, line_number: Optional[int]) -> str:
        """Switch the frame's main window to the buffer on a sidebar line."""
        state = self._states.get(frame.frame_id)
        if state is None or state.content is None:
            raise SidebarError(f"Frame {frame.frame_id} has no sidebar")
        if line_number is None:
            raise SidebarError("No sidebar line given")

        name = state.content.buffer_at(line_number)
        if name is None:
            raise SidebarError(f"No buffer on sidebar line {line_number}")
        if self.host.get_buffer(name) is None:
            raise SidebarError(f"Buffer {name} no longer exists")

        self.host.switch_to_buffer(frame, name)
        return name
