"""Abstract interface to the host editor."""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional

from .models import Buffer, Frame
from ..purposes.models import SidebarSide

BufferListHook = Callable[[], None]
BufferSwitchHook = Callable[[Frame, Buffer], None]


class EditorHost(ABC):
    """Abstract base class for host editors.

    The host owns buffers and frames. Frame purposes only read buffer
    attributes, attach purposes to frames, and write text into their own
    sidebar buffers.
    """

    @abstractmethod
    def buffer_list(self) -> List[Buffer]:
        """Enumerate all live buffers, most recently selected first.

        Returns:
            Unfiltered list of buffers
        """
        pass

    @abstractmethod
    def get_buffer(self, name: str) -> Optional[Buffer]:
        """Look up a live buffer by name."""
        pass

    @abstractmethod
    def create_frame(self, parameters: Dict[str, Any], purpose: Any = None) -> Frame:
        """Create a new frame.

        Args:
            parameters: Host frame parameters (title, size, ...)
            purpose: Purpose descriptor to attach, if any

        Returns:
            The new frame
        """
        pass

    @abstractmethod
    def delete_frame(self, frame: Frame) -> None:
        """Delete a frame."""
        pass

    @abstractmethod
    def frames(self) -> List[Frame]:
        """All live frames."""
        pass

    @abstractmethod
    def current_buffer(self, frame: Frame) -> Optional[Buffer]:
        """Buffer in the frame's selected window."""
        pass

    @abstractmethod
    def switch_to_buffer(self, frame: Frame, name: str) -> Buffer:
        """Display a buffer in the frame's selected main window.

        Raises:
            HostError: If the buffer does not exist
        """
        pass

    @abstractmethod
    def ensure_buffer(self, name: str, major_mode: str) -> Buffer:
        """Return the named buffer, creating it with the given mode if needed."""
        pass

    @abstractmethod
    def set_buffer_text(self, name: str, text: str) -> None:
        """Replace a buffer's text."""
        pass

    @abstractmethod
    def buffer_text(self, name: str) -> str:
        """Current text of a buffer."""
        pass

    @abstractmethod
    def kill_buffer(self, name: str) -> None:
        """Kill a buffer, removing it from every frame."""
        pass

    @abstractmethod
    def display_side_window(self, frame: Frame, buffer_name: str, side: SidebarSide, size: int) -> None:
        """Show a buffer in a dedicated side window of the frame."""
        pass

    @abstractmethod
    def close_side_window(self, frame: Frame, buffer_name: str) -> None:
        """Close the side window showing a buffer, if any."""
        pass

    @abstractmethod
    def add_buffer_list_update_hook(self, hook: BufferListHook) -> None:
        """Register a callback run whenever the set of buffers changes."""
        pass

    @abstractmethod
    def remove_buffer_list_update_hook(self, hook: BufferListHook) -> None:
        pass

    @abstractmethod
    def add_buffer_switch_hook(self, hook: BufferSwitchHook) -> None:
        """Register a callback run when a frame switches buffers."""
        pass

    @abstractmethod
    def remove_buffer_switch_hook(self, hook: BufferSwitchHook) -> None:
        pass

    def visible_buffers(self, frame: Frame) -> List[str]:
        """Names of buffers shown in the frame's main windows."""
        return [w.buffer_name for w in frame.main_windows]
