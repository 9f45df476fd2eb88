"""
Reverse Dependency Index.

Answers "who depends on X?" for any item in the corpus. The source of truth
only stores forward references, so the index is built by scanning every
project item once and inverting its direct dependencies.

The index is a point-in-time snapshot: it is either valid or must be rebuilt
in full before the next use. There is no partial update.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from .exceptions import IndexBuildInProgressError
from .interfaces import IAssetRepository
from .result import Err, Ok, Result

logger = logging.getLogger(__name__)

# (processed, total) -> True to request cancellation
ProgressCallback = Callable[[int, int], bool]


@dataclass(frozen=True)
class IndexStats:
    """Summary of a completed index build."""
    items_scanned: int
    items_with_dependents: int
    edges: int
    elapsed_sec: float


@dataclass(frozen=True)
class ScanCancelled:
    """A build that was stopped by its progress callback."""
    processed: int
    total: int

    @property
    def message(self) -> str:
        return f"Dependency index build cancelled ({self.processed}/{self.total} items scanned)"


class ReverseDependencyIndex:
    """
    Corpus-wide mapping from item path to the items that reference it.

    Example:
        ```python
        index = ReverseDependencyIndex(repository)
        result = index.build()
        if result.is_ok():
            index.dependents_of("Assets/Materials/Player.mat")
        ```
    """

    def __init__(
        self,
        repository: IAssetRepository,
        project_prefix: str = "Assets/",
        progress_threshold: int = 50,
    ):
        self.repository = repository
        self.project_prefix = project_prefix
        self.progress_threshold = progress_threshold
        self._dependents: Optional[Dict[str, List[str]]] = None
        self._is_valid = False
        self._building = False

    @property
    def is_valid(self) -> bool:
        return self._is_valid

    def invalidate(self) -> None:
        """Drop the snapshot; the next use must rebuild."""
        if self._is_valid:
            logger.debug("Dependency index invalidated")
        self._is_valid = False
        self._dependents = None

    def build(self, progress: Optional[ProgressCallback] = None) -> Result[IndexStats, ScanCancelled]:
        """
        Rebuild the index from a full corpus scan.

        Progress is reported roughly every percent when the corpus is larger
        than `progress_threshold`. A truthy return from `progress` cancels the
        scan, leaving the index invalid.
        """
        if self._building:
            raise IndexBuildInProgressError()

        self._building = True
        self.invalidate()
        try:
            return self._scan(progress)
        finally:
            self._building = False

    def _scan(self, progress: Optional[ProgressCallback]) -> Result[IndexStats, ScanCancelled]:
        start = time.perf_counter()
        dependents: Dict[str, List[str]] = {}

        # dict.fromkeys keeps first-seen order while dropping repeats
        paths = list(dict.fromkeys(
            p for p in self.repository.list_all_paths()
            if p and p.startswith(self.project_prefix)
        ))
        total = len(paths)
        interval = max(1, total // 100)
        report = progress is not None and total > self.progress_threshold
        edges = 0

        for i, path in enumerate(paths):
            if report and i % interval == 0 and progress(i, total):
                cancelled = ScanCancelled(processed=i, total=total)
                logger.warning(cancelled.message)
                return Err(cancelled)

            for dependency in dict.fromkeys(self.repository.get_direct_dependencies(path)):
                if dependency == path:
                    continue
                dependents.setdefault(dependency, []).append(path)
                edges += 1

        self._dependents = dependents
        self._is_valid = True

        elapsed = time.perf_counter() - start
        logger.info(f"Dependency index built in {elapsed:.2f} seconds. Scanned {total} items.")
        return Ok(IndexStats(
            items_scanned=total,
            items_with_dependents=len(dependents),
            edges=edges,
            elapsed_sec=round(elapsed, 3),
        ))

    def dependents_of(self, path: str) -> List[str]:
        """Direct dependents of an item, in scan order. Empty when unknown or invalid."""
        if self._dependents is None:
            return []
        return list(self._dependents.get(path, []))

    def most_depended_upon(self, limit: int = 10) -> List[tuple]:
        """(path, dependent count) pairs, most referenced first."""
        if self._dependents is None:
            return []
        ranked = sorted(self._dependents.items(), key=lambda kv: (-len(kv[1]), kv[0]))
        return [(path, len(deps)) for path, deps in ranked[:limit]]

    def __contains__(self, path: str) -> bool:
        return self._dependents is not None and path in self._dependents

    def __len__(self) -> int:
        return len(self._dependents) if self._dependents is not None else 0
