"""Rotation executor: renumber old archives, archive the target, evict, reopen.

Every step handles its own filesystem errors. A failed step is logged,
counted and recorded on the returned RotationResult; the remaining steps
still run. Nothing here raises to the caller.
"""

import logging
import os
from dataclasses import dataclass, field

from logrotor.config import RotationConfig, SuffixExtension
from logrotor.enumerator import list_archives
from logrotor.events import notify
from logrotor.metadata import FileMetadata, default_metadata
from logrotor.metrics import RotationMetrics
from logrotor.namer import archive_path_for, with_generation

logger = logging.getLogger(__name__)


@dataclass
class RotationResult:
    renamed: list[tuple[str, str]] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    archive_path: str | None = None
    removed: list[str] = field(default_factory=list)
    reopened: bool = False
    failed_steps: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed_steps


class RotationExecutor:
    def __init__(
        self,
        target_path: str,
        config: RotationConfig,
        metadata: FileMetadata | None = None,
        observer=None,
        metrics: RotationMetrics | None = None,
        now=None,
    ):
        self.target_path = os.path.abspath(target_path)
        self.config = config
        self._metadata = metadata or default_metadata()
        self._observer = observer
        self._metrics = metrics or RotationMetrics()
        self._now = now

    def _fail(self, result: RotationResult, step: str):
        if step not in result.failed_steps:
            result.failed_steps.append(step)
        self._metrics.record_failure(step)

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def renumber_archives(self, result: RotationResult):
        """Shift numbered archives up one generation so ``.1`` is free.

        The oldest of N archives becomes N+1, the newest becomes 2. A
        destination that already exists is left alone rather than overwritten.
        """
        if self.config.suffix_extension is not SuffixExtension.NUMBERING:
            return

        archives = list_archives(self.target_path, self._metadata)
        count = len(archives)
        for index, archive in enumerate(archives):
            generation = count + 1 - index
            rotated = with_generation(archive, generation)
            if rotated == archive:
                continue
            if os.path.exists(rotated):
                logger.debug("Skipping renumber of %s: %s already exists", archive, rotated)
                result.skipped.append(archive)
                continue
            try:
                os.rename(archive, rotated)
            except OSError as exc:
                logger.error("Renumbering %s to %s failed: %s", archive, rotated, exc)
                self._fail(result, "renumber")
                continue
            logger.debug("Renumbered %s -> %s (generation %d)", archive, rotated, generation)
            result.renamed.append((archive, rotated))

    def archive_target(self, result: RotationResult):
        """Move the target file to its archive name and tell the observer."""
        now = self._now() if self._now else None
        archive_path = archive_path_for(self.target_path, self.config.suffix_extension, now=now)
        if os.path.lexists(archive_path):
            logger.error("Archiving %s failed: %s already exists", self.target_path, archive_path)
            self._fail(result, "archive")
            return
        try:
            os.rename(self.target_path, archive_path)
        except OSError as exc:
            logger.error("Archiving %s to %s failed: %s", self.target_path, archive_path, exc)
            self._fail(result, "archive")
            return
        result.archive_path = archive_path
        logger.info("Archived %s -> %s", self.target_path, archive_path)
        notify(self._observer, "on_archived", self.target_path, archive_path)

    def evict_archives(self, result: RotationResult):
        """Delete the oldest archives beyond max_archived_files_count."""
        archives = list_archives(self.target_path, self._metadata)
        excess = len(archives) - self.config.max_archived_files_count
        if excess <= 0:
            return
        for archive in archives[:excess]:
            try:
                os.remove(archive)
            except OSError as exc:
                logger.error("Removing archive %s failed: %s", archive, exc)
                self._fail(result, "evict")
                continue
            logger.info("Removed archive %s", archive)
            result.removed.append(archive)
            notify(self._observer, "on_archive_removed", archive)

    def reopen_target(self, result: RotationResult, reopen):
        try:
            reopen()
        except OSError as exc:
            logger.error("Reopening %s after rotation failed: %s", self.target_path, exc)
            self._fail(result, "reopen")
            return
        result.reopened = True

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def rotate(self, reopen) -> RotationResult:
        """Run all four steps in order. *reopen* creates the new target file."""
        result = RotationResult()
        self.renumber_archives(result)
        self.archive_target(result)
        self.evict_archives(result)
        self.reopen_target(result, reopen)
        self._metrics.record_rotation(
            archived=result.archive_path is not None,
            renumbered=len(result.renamed),
            removed=len(result.removed),
        )
        if result.failed_steps:
            logger.warning("Rotation of %s finished with failures in: %s",
                           self.target_path, ", ".join(result.failed_steps))
        return result
