"""Purpose-specific frames on top of an editor host."""

import os
import re
import logging
from typing import Any, Callable, List, Optional

from pydantic import ValidationError

from ..config import FramePurposeSettings, load_settings
from ..errors import HostError, PurposeConfigError, SidebarError
from ..host.base import EditorHost
from ..host.models import Buffer, Frame
from ..purposes.filter import BufferListFilter
from ..purposes.models import Purpose, PurposeConfig
from ..purposes.predicate import build_purpose
from ..sidebar.manager import SidebarManager
from ..sidebar.renderer import SidebarContent
from ..sidebar.sorting import resolve_sort_key

logger = logging.getLogger(__name__)


class FramePurposeManager:
    """Makes purpose-specific frames and serves purpose-aware buffer lists.

    Nothing is filtered until ``enable()`` is called; every caller that wants
    a frame's view of the buffers asks ``buffer_list(frame)`` explicitly.
    """

    def __init__(
        self,
        host: EditorHost,
        settings: Optional[FramePurposeSettings] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        """Initialize frame purpose manager.

        Args:
            host: Editor host owning frames and buffers
            settings: Defaults, loads from environment and config file if None
            clock: Monotonic time source for sidebar throttling
        """
        self.host = host
        self.settings = settings or load_settings()
        self.buffer_filter = BufferListFilter()
        self.sidebars = SidebarManager(host, self.settings, clock=clock)

    # Mode toggle

    @property
    def enabled(self) -> bool:
        return self.buffer_filter.installed

    def enable(self) -> None:
        """Install the buffer list filter and sidebar notifications."""
        self.buffer_filter.install()
        self.sidebars.attach()
        logger.info("Frame purpose mode enabled")

    def disable(self) -> None:
        """Remove the buffer list filter and sidebar notifications."""
        self.buffer_filter.uninstall()
        self.sidebars.detach()
        logger.info("Frame purpose mode disabled")

    def toggle(self) -> bool:
        """Flip frame purpose mode, returning the new state."""
        if self.enabled:
            self.disable()
        else:
            self.enable()
        return self.enabled

    # Frames

    def build_purpose(self, config: PurposeConfig) -> Purpose:
        """Validate options into a purpose without creating a frame.

        Raises:
            PurposeConfigError: If the options are missing, conflicting or invalid
        """
        purpose = build_purpose(config, self.settings)
        for key in purpose.sidebar_sort:
            resolve_sort_key(key)
        return purpose

    def make_frame(self, **options: Any) -> Frame:
        """Make a purpose-specific frame from keyword options.

        Recognized options: modes, filenames, buffer_predicate, require_mode,
        title, sidebar, sidebar_auto_update, sidebar_update_on_buffer_switch,
        sidebar_sort, sidebar_buffers_fn, sidebar_header.

        Raises:
            PurposeConfigError: For unknown, missing or conflicting options
        """
        try:
            config = PurposeConfig(**options)
        except ValidationError as e:
            raise PurposeConfigError(f"Invalid frame options: {e}") from e
        return self.make_frame_from_config(config)

    def make_frame_from_config(self, config: PurposeConfig) -> Frame:
        """Make a frame with a purpose built from a config.

        Errors abort the request: a config error before any frame exists, a
        sidebar error after deleting the new frame again.
        """
        purpose = self.build_purpose(config)

        frame = self.host.create_frame({"title": purpose.title}, purpose=purpose)

        if purpose.sidebar_side is not None:
            try:
                self.sidebars.show(frame)
            except (SidebarError, PurposeConfigError):
                self.host.delete_frame(frame)
                raise

        logger.info(f"Made frame {frame.frame_id} for purpose {purpose.title!r} ({purpose.describe()})")
        return frame

    def make_mode_frame(self, mode: Optional[str] = None, frame: Optional[Frame] = None, **options: Any) -> Frame:
        """Make a frame for one major mode.

        Args:
            mode: Major mode, defaults to the mode of ``frame``'s current buffer
            frame: Frame whose current buffer supplies the default mode
        """
        if mode is None:
            if frame is None:
                raise PurposeConfigError("A mode or a frame to take the mode from is required")
            current = self.host.current_buffer(frame)
            if current is None:
                raise PurposeConfigError(f"Frame {frame.frame_id} has no current buffer")
            mode = current.major_mode

        options.setdefault("title", mode)
        return self.make_frame(modes=[mode], **options)

    def make_directory_frame(self, directory: str, **options: Any) -> Frame:
        """Make a frame for files under a directory."""
        if not directory:
            raise PurposeConfigError("A directory is required")
        root = os.path.expanduser(directory).rstrip("/") + "/"
        options.setdefault("title", os.path.basename(root.rstrip("/")) or root)
        return self.make_frame(filenames=[f"^{re.escape(root)}"], **options)

    def delete_frame(self, frame: Frame) -> None:
        """Close the frame's sidebar, if any, and delete it."""
        self.sidebars.hide(frame)
        self.host.delete_frame(frame)

    # Buffers

    def buffer_list(self, frame: Optional[Frame] = None) -> List[Buffer]:
        """Buffers as seen from a frame; unfiltered while the mode is disabled."""
        return self.buffer_filter.buffer_list(self.host, frame)

    def switch_to_buffer(self, frame: Frame, name: str) -> Buffer:
        """Switch a frame to a buffer."""
        if self.host.get_buffer(name) is None:
            raise HostError(f"No such buffer: {name}")
        return self.host.switch_to_buffer(frame, name)

    # Sidebar

    def show_sidebar(self, frame: Frame) -> SidebarContent:
        """Open or refresh the frame's sidebar.

        Raises:
            SidebarError: If the frame has no purpose or the context is blacklisted
        """
        if frame.purpose is None:
            raise SidebarError(f"Frame {frame.frame_id} has no purpose")
        return self.sidebars.show(frame)

    def hide_sidebar(self, frame: Frame) -> bool:
        return self.sidebars.hide(frame)
