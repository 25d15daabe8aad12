"""Exception hierarchy for frame purposes."""


class FramePurposeError(Exception):
    """Base exception for frame-purpose errors."""
    pass


class PurposeConfigError(FramePurposeError):
    """Missing, conflicting or malformed purpose configuration."""
    pass


class SidebarError(FramePurposeError):
    """Sidebar requested where one cannot be shown."""
    pass


class HostError(FramePurposeError):
    """Host operation on an unknown frame, window or buffer."""
    pass
