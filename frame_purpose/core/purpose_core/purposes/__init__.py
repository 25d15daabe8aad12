"""Purposes: which buffers a frame considers."""

from .models import BufferPredicate, SortKey, ModeEntry, SidebarSide, PurposeConfig, Purpose, mode_label
from .predicate import make_predicate, build_purpose
from .filter import filter_buffers, BufferListFilter

__all__ = [
    "BufferPredicate",
    "SortKey",
    "ModeEntry",
    "mode_label",
    "SidebarSide",
    "PurposeConfig",
    "Purpose",
    "make_predicate",
    "build_purpose",
    "filter_buffers",
    "BufferListFilter",
]
