"""Purpose-specific frames."""

from .manager import FramePurposeManager

__all__ = ["FramePurposeManager"]
