"""Host-owned editor objects: buffers, windows and frames."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..purposes.models import Purpose, SidebarSide


class Buffer(BaseModel):
    """An open document as seen by the host editor."""

    name: str
    file_name: Optional[str] = None
    major_mode: str = "fundamental-mode"
    modified: bool = False
    read_only: bool = False
    last_display_time: Optional[datetime] = None


class Window(BaseModel):
    """A window inside a frame showing one buffer."""

    buffer_name: str
    side: Optional[SidebarSide] = None  # None for ordinary windows
    size: Optional[int] = None

    @property
    def is_side_window(self) -> bool:
        return self.side is not None


class Frame(BaseModel):
    """A top-level window grouping, optionally carrying a purpose."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    frame_id: str
    title: str = ""
    parameters: Dict[str, Any] = Field(default_factory=dict)
    windows: List[Window] = Field(default_factory=list)
    selected_window: int = 0
    purpose: Optional[Purpose] = None

    @property
    def main_windows(self) -> List[Window]:
        """Windows that are not side windows."""
        return [w for w in self.windows if not w.is_side_window]

    def side_window(self, buffer_name: str) -> Optional[Window]:
        """Find the side window showing a buffer."""
        for window in self.windows:
            if window.is_side_window and window.buffer_name == buffer_name:
                return window
        return None

    def selected(self) -> Optional[Window]:
        """The selected window, falling back to the first main window."""
        if 0 <= self.selected_window < len(self.windows):
            return self.windows[self.selected_window]
        main = self.main_windows
        return main[0] if main else None
