"""Build buffer predicates from mode and filename specifications."""

import re
import logging
from typing import Any, List, Optional, Pattern, Sequence

from .models import BufferPredicate, ModeEntry, Purpose, PurposeConfig, mode_label
from ..config import FramePurposeSettings
from ..errors import PurposeConfigError

logger = logging.getLogger(__name__)


def _compile_filenames(filenames: Sequence[str]) -> List[Pattern[str]]:
    compiled = []
    for pattern in filenames:
        try:
            compiled.append(re.compile(pattern))
        except re.error as e:
            raise PurposeConfigError(f"Invalid filename regex {pattern!r}: {e}") from e
    return compiled


def make_predicate(
    modes: Sequence[ModeEntry] = (),
    filenames: Sequence[str] = (),
    require_mode: Optional[str] = None,
) -> BufferPredicate:
    """Construct a single predicate from mode and filename specifications.

    A buffer matches when its major mode equals any string mode entry or
    contains a match for any compiled pattern entry, or its file name matches
    any filename regex. With ``require_mode`` the major mode must additionally
    equal that mode.

    Args:
        modes: Major mode names, or compiled patterns searched in the mode name
        filenames: Regexes searched in buffer file names
        require_mode: Mode every matching buffer must have

    Returns:
        Predicate taking a buffer and returning bool

    Raises:
        PurposeConfigError: If a filename regex does not compile
    """
    mode_names = {mode for mode in modes if isinstance(mode, str)}
    mode_patterns = [mode for mode in modes if isinstance(mode, re.Pattern)]
    filename_patterns = _compile_filenames(filenames)

    def predicate(buffer: Any) -> bool:
        major_mode = buffer.major_mode or ""
        if require_mode is not None and major_mode != require_mode:
            return False

        if major_mode in mode_names:
            return True
        for pattern in mode_patterns:
            if pattern.search(major_mode):
                return True

        file_name = buffer.file_name
        if file_name:
            for pattern in filename_patterns:
                if pattern.search(file_name):
                    return True

        return False

    return predicate


def _default_title(config: PurposeConfig) -> str:
    if config.title:
        return config.title
    if config.modes:
        return ", ".join(mode_label(m) for m in config.modes)
    if config.filenames:
        return ", ".join(config.filenames)
    return "Custom"


def build_purpose(config: PurposeConfig, settings: Optional[FramePurposeSettings] = None) -> Purpose:
    """Validate frame options and build the purpose descriptor.

    Args:
        config: Frame construction options
        settings: Defaults for sidebar options the config leaves unset

    Returns:
        Immutable purpose

    Raises:
        PurposeConfigError: If predicate sources are missing or conflicting
    """
    settings = settings or FramePurposeSettings()
    has_specs = bool(config.modes or config.filenames)

    if config.buffer_predicate is not None and has_specs:
        raise PurposeConfigError(
            "Specify either a buffer predicate or modes/filenames, not both"
        )
    if config.buffer_predicate is None and not has_specs:
        raise PurposeConfigError(
            "A buffer predicate or at least one mode or filename is required"
        )

    if config.buffer_predicate is not None:
        if config.require_mode is not None:
            base = config.buffer_predicate
            required = config.require_mode
            predicate = lambda buffer: buffer.major_mode == required and bool(base(buffer))
        else:
            predicate = config.buffer_predicate
    else:
        predicate = make_predicate(config.modes, config.filenames, config.require_mode)

    auto_update = config.sidebar_auto_update
    if auto_update is None:
        auto_update = settings.sidebar_auto_update

    purpose = Purpose(
        predicate=predicate,
        title=_default_title(config),
        modes=config.modes,
        filenames=config.filenames,
        sidebar_side=config.sidebar,
        sidebar_auto_update=auto_update,
        sidebar_update_on_buffer_switch=config.sidebar_update_on_buffer_switch,
        sidebar_sort=config.sidebar_sort or list(settings.sidebar_sort),
        sidebar_buffers_fn=config.sidebar_buffers_fn,
        sidebar_header=config.sidebar_header,
    )
    logger.debug(f"Built purpose {purpose.title!r} ({purpose.describe()})")
    return purpose
