"""Purpose-aware buffer enumeration."""

import logging
from typing import Any, Iterable, List, Optional

from .models import BufferPredicate

logger = logging.getLogger(__name__)


def filter_buffers(buffers: Iterable[Any], predicate: Optional[BufferPredicate]) -> List[Any]:
    """Return the buffers for which the predicate holds, in their original order.

    With no predicate the buffers are returned unchanged.
    """
    if predicate is None:
        return list(buffers)
    return [buffer for buffer in buffers if predicate(buffer)]


class BufferListFilter:
    """Opt-in filter applied by callers that want purpose-aware buffer lists.

    While uninstalled, or for frames without a purpose, ``buffer_list``
    returns the host's enumeration untouched.
    """

    def __init__(self):
        self.installed = False

    def install(self) -> None:
        if not self.installed:
            self.installed = True
            logger.info("Buffer list filter installed")

    def uninstall(self) -> None:
        if self.installed:
            self.installed = False
            logger.info("Buffer list filter removed")

    def buffer_list(self, host: Any, frame: Any = None) -> List[Any]:
        """Enumerate the host's buffers as seen from a frame.

        Args:
            host: Editor host providing ``buffer_list()``
            frame: Frame whose purpose restricts the list, if any

        Returns:
            Filtered list when installed and the frame has a purpose
        """
        buffers = host.buffer_list()
        purpose = getattr(frame, "purpose", None)
        if not self.installed or purpose is None:
            return list(buffers)
        return filter_buffers(buffers, purpose.predicate)
