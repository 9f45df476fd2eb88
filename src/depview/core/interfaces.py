"""
Interfaces for the host collaborators depview consumes.

The core never enumerates a corpus or resolves references itself; a host
supplies an IAssetRepository that does.
"""

from typing import Optional, Protocol, Sequence, runtime_checkable

from .types import AssetMetadata


@runtime_checkable
class IAssetRepository(Protocol):
    """
    Source of truth for items and their forward references.

    Paths are opaque string keys. `get_direct_dependencies` is non-recursive;
    self references in its result are tolerated and filtered by the core.
    """

    def list_all_paths(self) -> Sequence[str]:
        """Enumerate every item in the corpus."""
        ...

    def get_direct_dependencies(self, path: str) -> Sequence[str]:
        """Direct forward references of one item, in repository order."""
        ...

    def contains(self, path: str) -> bool:
        """Whether the repository knows about an item."""
        ...

    def load_preview(self, path: str) -> Optional[bytes]:
        """Encoded preview image of an item, or None."""
        ...

    def load_item_metadata(self, path: str) -> AssetMetadata:
        """Kind and size of an item; unknown fields use their defaults."""
        ...
