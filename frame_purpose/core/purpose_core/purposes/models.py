"""Purpose models: frame construction options and the resulting descriptor."""

import re
from enum import Enum
from typing import Any, Callable, List, Optional, Pattern, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


BufferPredicate = Callable[[Any], bool]
SortKey = Union[str, Callable[[Any], Any]]
ModeEntry = Union[str, Pattern[str]]


class SidebarSide(Enum):
    """Frame edge a sidebar is displayed on."""
    LEFT = "left"
    RIGHT = "right"
    TOP = "top"
    BOTTOM = "bottom"


def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, (str, re.Pattern)):
        return [value]
    return list(value)


def mode_label(mode: ModeEntry) -> str:
    """Display form of a mode entry; compiled patterns show their source."""
    if isinstance(mode, re.Pattern):
        return mode.pattern
    return mode


class PurposeConfig(BaseModel):
    """Options accepted when making a purpose-specific frame.

    Exactly one of ``buffer_predicate`` or ``modes``/``filenames`` must be given.
    Mode entries given as strings are compared with the major mode name;
    compiled ``re.Pattern`` entries are searched in it.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="forbid")

    # str or re.Pattern, checked below; strings must stay uncompiled
    modes: List[Any] = Field(default_factory=list)
    filenames: List[str] = Field(default_factory=list)
    buffer_predicate: Optional[BufferPredicate] = None
    require_mode: Optional[str] = None
    title: Optional[str] = None
    sidebar: Optional[SidebarSide] = None
    sidebar_auto_update: Optional[bool] = None
    sidebar_update_on_buffer_switch: bool = False
    sidebar_sort: Optional[List[SortKey]] = None
    sidebar_buffers_fn: Optional[Callable[[], List[Any]]] = None
    sidebar_header: Optional[str] = None

    @field_validator("modes", mode="before")
    @classmethod
    def _modes_single_or_list(cls, value: Any) -> List[ModeEntry]:
        modes = _as_list(value)
        for mode in modes:
            if not isinstance(mode, (str, re.Pattern)):
                raise ValueError(f"Mode entries must be strings or compiled patterns, got {mode!r}")
        return modes

    @field_validator("filenames", mode="before")
    @classmethod
    def _single_or_list(cls, value: Any) -> List[str]:
        return _as_list(value)

    @field_validator("sidebar_sort", mode="before")
    @classmethod
    def _sort_single_or_list(cls, value: Any) -> Optional[List[Any]]:
        if value is None:
            return None
        if isinstance(value, str) or callable(value):
            return [value]
        return list(value)


class Purpose(BaseModel):
    """Immutable purpose descriptor attached to a frame."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    predicate: BufferPredicate
    title: str
    modes: List[Any] = Field(default_factory=list)
    filenames: List[str] = Field(default_factory=list)
    sidebar_side: Optional[SidebarSide] = None
    sidebar_auto_update: bool = True
    sidebar_update_on_buffer_switch: bool = False
    sidebar_sort: List[SortKey] = Field(default_factory=lambda: ["modified", "name"])
    sidebar_buffers_fn: Optional[Callable[[], List[Any]]] = None
    sidebar_header: Optional[str] = None

    def matches(self, buffer: Any) -> bool:
        """Whether a buffer belongs to this purpose."""
        return bool(self.predicate(buffer))

    def describe(self) -> str:
        """Short human-readable description of what the purpose matches."""
        parts = []
        if self.modes:
            parts.append(f"modes: {', '.join(mode_label(m) for m in self.modes)}")
        if self.filenames:
            parts.append(f"filenames: {', '.join(self.filenames)}")
        return "; ".join(parts) or "custom predicate"
