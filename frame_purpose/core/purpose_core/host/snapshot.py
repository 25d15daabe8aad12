"""Read-only buffer snapshots used to drive an in-memory host."""

import json
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError

from ..errors import HostError
from .memory import InMemoryHost
from .models import Buffer, Frame


class HostSnapshot(BaseModel):
    """Buffers of a host editor at one moment, plus what a frame displays."""

    buffers: List[Buffer] = Field(default_factory=list)
    visible: List[str] = Field(default_factory=list)
    current: Optional[str] = None

    def to_host(self) -> InMemoryHost:
        """Build an in-memory host holding the snapshot's buffers."""
        return InMemoryHost(buffers=[b.model_copy() for b in self.buffers])

    def apply_layout(self, host: InMemoryHost, frame: Frame) -> None:
        """Show the snapshot's visible buffers in a frame, current buffer first."""
        names = list(self.visible)
        if self.current is not None:
            if self.current in names:
                names.remove(self.current)
            names.insert(0, self.current)
        host.restore_layout(frame, names)


def load_snapshot(path: Path) -> HostSnapshot:
    """Load a snapshot from a JSON file.

    Raises:
        HostError: If the file is missing or not a valid snapshot
    """
    if not path.exists():
        raise HostError(f"Snapshot not found: {path}")
    try:
        with open(path, "r") as f:
            data = json.load(f)
        return HostSnapshot.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as e:
        raise HostError(f"Invalid snapshot {path}: {e}") from e
