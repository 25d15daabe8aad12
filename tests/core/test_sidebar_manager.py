"""Tests for sidebar bookkeeping on purpose frames."""

import pytest

from frame_purpose.core.purpose_core.config import FramePurposeSettings
from frame_purpose.core.purpose_core.errors import SidebarError
from frame_purpose.core.purpose_core.frames import FramePurposeManager
from frame_purpose.core.purpose_core.host import Buffer, InMemoryHost
from frame_purpose.core.purpose_core.purposes import SidebarSide

SIDEBAR = "*Frame Purpose: Python*"


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 100.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class TestSidebarManager:
    """Test showing, updating and hiding sidebars."""

    def setup_method(self):
        """Set up a host, a manager and a python frame with a sidebar."""
        self.host = InMemoryHost(buffers=[
            Buffer(name="a.py", major_mode="python-mode", file_name="/proj/a.py"),
            Buffer(name="b.py", major_mode="python-mode", file_name="/proj/b.py", modified=True),
            Buffer(name="notes.txt", major_mode="text-mode", file_name="/home/notes.txt"),
        ])
        self.clock = FakeClock()
        self.settings = FramePurposeSettings(sidebar_update_interval=0.5)
        self.manager = FramePurposeManager(self.host, self.settings, clock=self.clock)
        self.manager.enable()
        self.frame = self.manager.make_frame(modes=["python-mode"], title="Python", sidebar="left")

    def test_sidebar_created_with_frame(self):
        """Test that a sidebar buffer and side window are created."""
        state = self.manager.sidebars.state(self.frame)

        assert state is not None
        assert state.buffer_name == SIDEBAR
        assert state.side == SidebarSide.LEFT
        assert self.host.get_buffer(SIDEBAR) is not None
        window = self.frame.side_window(SIDEBAR)
        assert window is not None
        assert window.size == self.settings.sidebar_width

    def test_sidebar_text(self):
        """Test the rendered sidebar text."""
        assert self.host.buffer_text(SIDEBAR) == "* b.py\n  a.py"

    def test_sidebar_does_not_list_itself(self):
        """Test that sidebar buffers are excluded even if the predicate matches."""
        frame = self.manager.make_frame(buffer_predicate=lambda b: True, title="All", sidebar="right")

        text = self.host.buffer_text("*Frame Purpose: All*")

        assert "*Frame Purpose" not in text
        assert "notes.txt" in text
        assert self.manager.sidebars.has_sidebar(frame)

    def test_frame_without_purpose(self):
        """Test that a sidebar cannot be shown for a frame with no purpose."""
        plain = self.host.create_frame({})
        buffer_count = len(self.host.buffer_list())

        with pytest.raises(SidebarError, match="no purpose"):
            self.manager.show_sidebar(plain)

        assert len(self.host.buffer_list()) == buffer_count
        assert plain.side_window(SIDEBAR) is None

    def test_blacklisted_context(self):
        """Test that a sidebar cannot be opened from a blacklisted buffer."""
        self.host.add_buffer(Buffer(name=" *Minibuf-1*", major_mode="minibuffer-inactive-mode"))
        frame = self.manager.make_frame(modes=["org-mode"], title="Org")
        self.host.switch_to_buffer(frame, " *Minibuf-1*")

        with pytest.raises(SidebarError, match="minibuffer-inactive-mode"):
            self.manager.show_sidebar(frame)

        assert self.host.get_buffer("*Frame Purpose: Org*") is None

    def test_show_refreshes_existing_sidebar(self):
        """Test that showing an open sidebar re-renders it without a new buffer."""
        state = self.manager.sidebars.state(self.frame)
        count = state.update_count

        self.manager.show_sidebar(self.frame)

        assert state.update_count == count + 1
        assert len([w for w in self.frame.windows if w.is_side_window]) == 1

    def test_auto_update_on_new_buffer(self):
        """Test that buffer-list changes re-render the sidebar."""
        self.clock.advance(1.0)
        self.host.add_buffer(Buffer(name="c.py", major_mode="python-mode", file_name="/proj/c.py"))

        assert self.host.buffer_text(SIDEBAR) == "* b.py\n  a.py\n  c.py"

    def test_auto_update_on_modified_change(self):
        """Test that modified flags are reflected after a change."""
        self.clock.advance(1.0)
        self.host.set_modified("b.py", False)

        assert self.host.buffer_text(SIDEBAR) == "  a.py\n  b.py"

    def test_auto_update_on_kill(self):
        """Test that killed buffers disappear from the sidebar."""
        self.clock.advance(1.0)
        self.host.kill_buffer("b.py")

        assert self.host.buffer_text(SIDEBAR) == "  a.py"

    def test_updates_are_throttled(self):
        """Test that rapid changes are deferred until the interval elapses."""
        self.host.add_buffer(Buffer(name="c.py", major_mode="python-mode"))
        state = self.manager.sidebars.state(self.frame)

        assert state.pending
        assert "c.py" not in self.host.buffer_text(SIDEBAR)
        assert self.manager.sidebars.flush() == 0

        self.clock.advance(0.6)

        assert self.manager.sidebars.flush() == 1
        assert "c.py" in self.host.buffer_text(SIDEBAR)
        assert not state.pending
        assert self.manager.sidebars.flush() == 0

    def test_no_auto_update_when_disabled_for_purpose(self):
        """Test that purposes can turn automatic updates off."""
        frame = self.manager.make_frame(
            modes=["text-mode"], title="Text", sidebar="bottom", sidebar_auto_update=False
        )
        self.clock.advance(1.0)
        self.host.add_buffer(Buffer(name="todo.txt", major_mode="text-mode"))

        assert self.host.buffer_text("*Frame Purpose: Text*") == "  notes.txt"

        self.manager.sidebars.update(frame, force=True)

        assert self.host.buffer_text("*Frame Purpose: Text*") == "  notes.txt\n  todo.txt"

    def test_no_auto_update_when_mode_disabled(self):
        """Test that disabling the mode stops listening to host notifications."""
        self.manager.disable()
        self.clock.advance(1.0)
        self.host.add_buffer(Buffer(name="c.py", major_mode="python-mode"))

        assert "c.py" not in self.host.buffer_text(SIDEBAR)

    def test_update_on_buffer_switch(self):
        """Test that buffer switches update the visible emphasis."""
        frame = self.manager.make_frame(
            modes=["python-mode"], title="Py2", sidebar="left", sidebar_update_on_buffer_switch=True
        )
        self.clock.advance(1.0)
        self.host.switch_to_buffer(frame, "b.py")

        content = self.manager.sidebars.state(frame).content
        visible = {line.buffer_name for line in content.lines if line.visible}

        assert visible == {"b.py"}

    def test_sidebar_buffers_fn(self):
        """Test that a custom buffer source replaces the filtered list."""
        frame = self.manager.make_frame(
            modes=["python-mode"],
            title="Custom",
            sidebar="top",
            sidebar_buffers_fn=lambda: [self.host.get_buffer("notes.txt")],
            sidebar_header="Notes",
        )

        assert self.host.buffer_text("*Frame Purpose: Custom*") == "Notes\n  notes.txt"
        assert self.manager.sidebars.state(frame).side == SidebarSide.TOP

    def test_same_title_gets_unique_buffer(self):
        """Test that two frames with one title get distinct sidebar buffers."""
        other = self.manager.make_frame(modes=["python-mode"], title="Python", sidebar="right")

        other_name = self.manager.sidebars.state(other).buffer_name

        assert other_name == f"{SIDEBAR}<{other.frame_id}>"
        assert self.host.get_buffer(other_name) is not None

    def test_default_side_from_settings(self):
        """Test that frames shown without a purpose side use the settings side."""
        frame = self.manager.make_frame(modes=["text-mode"], title="Text")

        self.manager.show_sidebar(frame)

        assert self.manager.sidebars.state(frame).side == SidebarSide.LEFT

    def test_hide(self):
        """Test that hiding removes the window and kills the buffer."""
        assert self.manager.hide_sidebar(self.frame)

        assert self.host.get_buffer(SIDEBAR) is None
        assert self.frame.side_window(SIDEBAR) is None
        assert not self.manager.sidebars.has_sidebar(self.frame)
        assert not self.manager.hide_sidebar(self.frame)


class TestSidebarKeys:
    """Test key dispatch inside the sidebar."""

    def setup_method(self):
        """Set up a python frame with a sidebar."""
        self.host = InMemoryHost(buffers=[
            Buffer(name="a.py", major_mode="python-mode"),
            Buffer(name="b.py", major_mode="python-mode", modified=True),
        ])
        self.clock = FakeClock()
        self.manager = FramePurposeManager(self.host, FramePurposeSettings(), clock=self.clock)
        self.manager.enable()
        self.frame = self.manager.make_frame(modes=["python-mode"], title="Python", sidebar="left")

    def test_return_switches_buffer(self):
        """Test that RET on a line shows that line's buffer."""
        name = self.manager.sidebars.handle_key(self.frame, "RET", 1)

        assert name == "b.py"
        assert self.host.current_buffer(self.frame).name == "b.py"
        assert self.frame.side_window(SIDEBAR) is not None

    def test_mouse_click_switches_buffer(self):
        """Test that mouse-1 behaves like RET."""
        assert self.manager.sidebars.handle_key(self.frame, "mouse-1", 2) == "a.py"

    def test_refresh_key(self):
        """Test that g re-renders immediately."""
        self.manager.sidebars.handle_key(self.frame, "RET", 1)
        self.manager.sidebars.handle_key(self.frame, "g")

        content = self.manager.sidebars.state(self.frame).content

        assert [line.buffer_name for line in content.lines if line.visible] == ["b.py"]

    def test_quit_key(self):
        """Test that q closes the sidebar."""
        self.manager.sidebars.handle_key(self.frame, "q")

        assert not self.manager.sidebars.has_sidebar(self.frame)

    def test_unbound_key(self):
        """Test that unbound keys are rejected."""
        with pytest.raises(SidebarError, match="not bound"):
            self.manager.sidebars.handle_key(self.frame, "x", 1)

    def test_line_without_buffer(self):
        """Test selecting past the last line."""
        with pytest.raises(SidebarError, match="No buffer on sidebar line"):
            self.manager.sidebars.handle_key(self.frame, "RET", 9)

    def test_killed_buffer_line(self):
        """Test selecting a buffer killed since the last render."""
        self.host.kill_buffer("b.py")  # throttled, so line 1 still names b.py

        with pytest.raises(SidebarError, match="no longer exists"):
            self.manager.sidebars.handle_key(self.frame, "RET", 1)


class TestSidebarLifecycle:
    """Test sidebars when the host kills, renames or deletes what they use."""

    def setup_method(self):
        """Set up a python frame with a sidebar."""
        self.host = InMemoryHost(buffers=[
            Buffer(name="a.py", major_mode="python-mode"),
            Buffer(name="b.py", major_mode="python-mode", modified=True),
        ])
        self.clock = FakeClock()
        self.manager = FramePurposeManager(self.host, FramePurposeSettings(), clock=self.clock)
        self.manager.enable()
        self.frame = self.manager.make_frame(modes=["python-mode"], title="Python", sidebar="left")

    def test_host_kills_sidebar_buffer(self):
        """Test that killing the sidebar buffer drops the sidebar without errors."""
        self.host.kill_buffer(SIDEBAR)

        assert not self.manager.sidebars.has_sidebar(self.frame)
        assert self.frame.side_window(SIDEBAR) is None
        assert self.host.get_buffer(SIDEBAR) is None

        self.clock.advance(1.0)
        self.host.add_buffer(Buffer(name="c.py", major_mode="python-mode"))

        assert not self.manager.sidebars.update(self.frame, force=True)

    def test_host_renames_sidebar_buffer(self):
        """Test that renaming the sidebar buffer drops the sidebar without errors."""
        self.host.rename_buffer(SIDEBAR, "old sidebar")

        assert not self.manager.sidebars.has_sidebar(self.frame)
        assert self.host.get_buffer(SIDEBAR) is None

        text = self.host.buffer_text("old sidebar")
        self.clock.advance(1.0)
        self.host.add_buffer(Buffer(name="c.py", major_mode="python-mode"))

        assert self.host.buffer_text("old sidebar") == text

    def test_sidebar_can_be_reopened_after_kill(self):
        """Test that a dropped sidebar can be shown again."""
        self.host.kill_buffer(SIDEBAR)

        self.manager.show_sidebar(self.frame)

        assert self.manager.sidebars.has_sidebar(self.frame)
        assert self.host.buffer_text(SIDEBAR) == "* b.py\n  a.py"

    def test_host_deletes_frame(self):
        """Test that a frame deleted by the host loses its sidebar and buffer."""
        self.host.delete_frame(self.frame)
        self.clock.advance(1.0)
        self.host.add_buffer(Buffer(name="c.py", major_mode="python-mode"))

        assert self.manager.sidebars.state(self.frame) is None
        assert self.host.get_buffer(SIDEBAR) is None

    def test_flush_drops_deleted_frames(self):
        """Test that flushing forgets frames deleted while an update was pending."""
        self.host.add_buffer(Buffer(name="c.py", major_mode="python-mode"))
        assert self.manager.sidebars.state(self.frame).pending

        self.host.delete_frame(self.frame)
        self.clock.advance(1.0)

        assert self.manager.sidebars.flush() == 0
        assert not self.manager.sidebars.has_sidebar(self.frame)
        assert self.host.get_buffer(SIDEBAR) is None

    def test_switch_leaves_nothing_pending(self):
        """Test that a switch rendered by the switch hook is not queued again."""
        frame = self.manager.make_frame(
            modes=["python-mode"], title="Py2", sidebar="right", sidebar_update_on_buffer_switch=True
        )
        state = self.manager.sidebars.state(frame)
        count = state.update_count
        self.clock.advance(1.0)

        self.host.switch_to_buffer(frame, "a.py")

        assert state.update_count == count + 1
        assert not state.pending
        assert self.manager.sidebars.flush() == 0
