"""Archive file naming for both suffix policies."""

import os
import uuid
from datetime import datetime, timezone

from logrotor.config import SuffixExtension

TIMESTAMP_FORMAT = "%Y%m%dT%H%M%SZ"


def strip_suffix(path: str) -> str:
    """Drop the last dot-extension of the basename: ``app.log.3`` -> ``app.log``."""
    root, _ext = os.path.splitext(path)
    return root


def suffix_of(path: str) -> str:
    """Return the rotation suffix without its dot, or "" if there is none."""
    return os.path.splitext(path)[1][1:]


def generation_of(path: str) -> int | None:
    """Integer generation number of a numbered archive, None for anything else."""
    suffix = suffix_of(path)
    if suffix.isdigit():
        return int(suffix)
    return None


def with_generation(path: str, generation: int) -> str:
    """Replace the rotation suffix of *path* with *generation*."""
    return f"{strip_suffix(path)}.{generation}"


def date_uuid_suffix(now: datetime | None = None, unique_id: str | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    unique_id = unique_id or str(uuid.uuid4())
    return f"{now.strftime(TIMESTAMP_FORMAT)}_{unique_id.lower()}"


def archive_path_for(
    target_path: str,
    policy: SuffixExtension,
    now: datetime | None = None,
    unique_id: str | None = None,
) -> str:
    """Path the target file is renamed to when it is archived.

    Numbering always yields ``<target>.1``; renumbering has already moved
    any previous ``.1`` out of the way.
    """
    if policy is SuffixExtension.NUMBERING:
        return f"{target_path}.1"
    return f"{target_path}.{date_uuid_suffix(now, unique_id)}"
