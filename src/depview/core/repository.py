"""
Manifest-backed Asset Repository.

Loads a YAML (or JSON) manifest describing which item references which:

    assets:
      Assets/Prefabs/Player.prefab:
        dependencies: [Assets/Materials/Player.mat]
        kind: Prefab
        size: 2048
        preview: previews/player.png
      Assets/Materials/Player.mat: [Assets/Textures/Player.png]

An entry is either a list (its dependencies) or a mapping. Items that only
appear as dependencies are still known to the repository.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml
from pydantic import BaseModel, Field, ValidationError

from .exceptions import ManifestFormatError, ManifestNotFoundError
from .types import AssetMetadata

logger = logging.getLogger(__name__)

# Kind inferred from the extension when the manifest does not name one
KIND_BY_EXTENSION: Dict[str, str] = {
    ".prefab": "GameObject",
    ".unity": "SceneAsset",
    ".mat": "Material",
    ".png": "Texture2D",
    ".jpg": "Texture2D",
    ".jpeg": "Texture2D",
    ".tga": "Texture2D",
    ".psd": "Texture2D",
    ".fbx": "GameObject",
    ".obj": "GameObject",
    ".shader": "Shader",
    ".cs": "MonoScript",
    ".asset": "ScriptableObject",
    ".anim": "AnimationClip",
    ".controller": "AnimatorController",
    ".wav": "AudioClip",
    ".mp3": "AudioClip",
    ".ogg": "AudioClip",
    ".ttf": "Font",
    ".dll": "PluginAsset",
}


class ManifestEntry(BaseModel):
    """One item as declared in a manifest."""
    dependencies: List[str] = Field(default_factory=list)
    kind: Optional[str] = None
    size: Optional[int] = None
    preview: Optional[str] = None


class ManifestRepository:
    """
    IAssetRepository over an in-memory manifest.

    Item order follows the manifest: declared items first, in declaration
    order, then items only referenced as dependencies, in first-seen order.
    """

    def __init__(self, entries: Mapping[str, ManifestEntry], root_dir: Optional[Path] = None):
        self._entries: Dict[str, ManifestEntry] = dict(entries)
        self.root_dir = root_dir
        self._paths: List[str] = list(self._entries)

        seen = set(self._paths)
        for entry in self._entries.values():
            for dep in entry.dependencies:
                if dep not in seen:
                    seen.add(dep)
                    self._paths.append(dep)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], root_dir: Optional[Path] = None) -> "ManifestRepository":
        """
        Build a repository from manifest data.

        Accepts either the full document (with an `assets` key) or the bare
        path mapping.
        """
        assets = data.get("assets", data) if isinstance(data, Mapping) else data
        if not isinstance(assets, Mapping):
            raise ManifestFormatError("Manifest 'assets' must be a mapping of path to entry")

        entries: Dict[str, ManifestEntry] = {}
        for path, raw in assets.items():
            if raw is None:
                raw = {}
            elif isinstance(raw, list):
                raw = {"dependencies": raw}
            try:
                entries[str(path)] = ManifestEntry.model_validate(raw)
            except ValidationError as e:
                raise ManifestFormatError(f"Invalid manifest entry for {path}: {e}") from e

        return cls(entries, root_dir=root_dir)

    @classmethod
    def load(cls, manifest_path: Path, root_dir: Optional[Path] = None) -> "ManifestRepository":
        """Load a manifest file. JSON manifests parse as YAML."""
        if not manifest_path.exists():
            raise ManifestNotFoundError(str(manifest_path))

        try:
            text = manifest_path.read_text(encoding="utf-8")
        except (UnicodeDecodeError, OSError) as e:
            raise ManifestFormatError(f"Failed to read {manifest_path}: {e}") from e

        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError as e:
            raise ManifestFormatError(f"Failed to parse {manifest_path}: {e}") from e

        repo = cls.from_mapping(data, root_dir=root_dir or manifest_path.parent)
        logger.debug(f"Loaded {len(repo)} items from {manifest_path}")
        return repo

    def list_all_paths(self) -> Sequence[str]:
        return list(self._paths)

    def get_direct_dependencies(self, path: str) -> Sequence[str]:
        entry = self._entries.get(path)
        if entry is None:
            return []
        return list(entry.dependencies)

    def contains(self, path: str) -> bool:
        return path in self._entries or path in self._paths

    def load_preview(self, path: str) -> Optional[bytes]:
        entry = self._entries.get(path)
        if entry is None or not entry.preview:
            return None

        preview_path = self._resolve(entry.preview)
        if preview_path is None or not preview_path.is_file():
            logger.debug(f"Preview for {path} not found at {entry.preview}")
            return None
        return preview_path.read_bytes()

    def load_item_metadata(self, path: str) -> AssetMetadata:
        if not self.contains(path):
            return AssetMetadata()

        entry = self._entries.get(path) or ManifestEntry()
        kind = entry.kind or KIND_BY_EXTENSION.get(Path(path).suffix.lower(), "Unknown")

        size = entry.size
        if size is None:
            file_path = self._resolve(path)
            if file_path is not None and file_path.is_file():
                size = file_path.stat().st_size

        return AssetMetadata(kind=kind, size_bytes=size)

    def _resolve(self, relative: str) -> Optional[Path]:
        if self.root_dir is None:
            return None
        return self.root_dir / relative

    def __len__(self) -> int:
        return len(self._paths)
