"""Render a purpose's buffers as sidebar text."""

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Sequence

from rich.text import Text

from ..purposes.models import SortKey
from .sorting import DEFAULT_SORT, sort_buffers

MODIFIED_STYLE = "bold"
VISIBLE_STYLE = "reverse"
HEADER_STYLE = "bold underline"


@dataclass
class SidebarLine:
    """One sidebar line and the buffer it stands for."""
    buffer_name: str
    modified: bool
    visible: bool
    text: Text

    @property
    def plain(self) -> str:
        return self.text.plain


@dataclass
class SidebarContent:
    """Rendered sidebar: an optional header followed by one line per buffer."""
    header: Optional[str] = None
    lines: List[SidebarLine] = field(default_factory=list)

    @property
    def plain(self) -> str:
        """Text written into the sidebar buffer."""
        rows = [self.header] if self.header is not None else []
        rows.extend(line.plain for line in self.lines)
        return "\n".join(rows)

    def to_text(self) -> Text:
        """Styled text for terminal display."""
        text = Text()
        rows: List[Text] = []
        if self.header is not None:
            rows.append(Text(self.header, style=HEADER_STYLE))
        rows.extend(line.text for line in self.lines)
        for i, row in enumerate(rows):
            if i:
                text.append("\n")
            text.append_text(row)
        return text

    def buffer_at(self, line_number: int) -> Optional[str]:
        """Buffer named on a 1-based line, or None for the header and out-of-range lines."""
        index = line_number - 1
        if self.header is not None:
            index -= 1
        if 0 <= index < len(self.lines):
            return self.lines[index].buffer_name
        return None

    def line_of(self, buffer_name: str) -> Optional[int]:
        """1-based line number of a buffer's entry."""
        offset = 2 if self.header is not None else 1
        for i, line in enumerate(self.lines):
            if line.buffer_name == buffer_name:
                return i + offset
        return None


def render_line(buffer: Any, visible: bool) -> SidebarLine:
    marker = "*" if buffer.modified else " "
    text = Text(f"{marker} {buffer.name}")
    if buffer.modified:
        text.stylize(MODIFIED_STYLE)
    if visible:
        text.stylize(VISIBLE_STYLE)
    return SidebarLine(
        buffer_name=buffer.name,
        modified=buffer.modified,
        visible=visible,
        text=text,
    )


def render_sidebar(
    buffers: Iterable[Any],
    visible: Iterable[str] = (),
    sort: Sequence[SortKey] = DEFAULT_SORT,
    header: Optional[str] = None,
) -> SidebarContent:
    """Render sorted buffers with modified and visible emphasis.

    Args:
        buffers: Buffers matching the frame's purpose
        visible: Names of buffers shown in the frame's main windows
        sort: Sort keys, primary first
        header: Optional first line

    Returns:
        Sidebar content; identical inputs give identical output
    """
    visible_names = set(visible)
    lines = [
        render_line(buffer, buffer.name in visible_names)
        for buffer in sort_buffers(buffers, sort)
    ]
    return SidebarContent(header=header, lines=lines)
