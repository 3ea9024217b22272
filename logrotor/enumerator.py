"""Lists archived siblings of a target log file, oldest first."""

import logging
import os

from logrotor.metadata import FileMetadata, default_metadata
from logrotor.namer import generation_of, strip_suffix

logger = logging.getLogger(__name__)


def is_archive_of(candidate: str, target_path: str) -> bool:
    """True if *candidate* is *target_path* plus exactly one rotation suffix."""
    return candidate != target_path and strip_suffix(candidate) == target_path


def list_archives(target_path: str, metadata: FileMetadata | None = None) -> list[str]:
    """Return archive paths for *target_path* sorted oldest-first by mtime.

    Equal mtimes fall back to generation number (higher is older), then name.
    Any filesystem error yields an empty list.
    """
    metadata = metadata or default_metadata()
    target_path = os.path.abspath(target_path)
    directory = os.path.dirname(target_path)

    try:
        candidates = [
            os.path.join(directory, name)
            for name in os.listdir(directory)
        ]
        archives = [
            path for path in candidates
            if is_archive_of(path, target_path) and os.path.isfile(path)
        ]
        keyed = []
        for path in archives:
            generation = generation_of(path)
            keyed.append((
                metadata.mtime_ns(path),
                -generation if generation is not None else 0,
                path,
            ))
    except OSError as exc:
        logger.warning("Could not enumerate archives of %s: %s", target_path, exc)
        return []

    keyed.sort()
    result = [path for _mtime, _gen, path in keyed]
    logger.debug("Archives of %s (oldest first): %s", target_path, result)
    return result
