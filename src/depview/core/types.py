"""
Core type definitions for depview.

Geometry primitives are plain frozen dataclasses so they can be used in tight
layout and hit-testing loops; graph nodes and asset metadata are pydantic
models so they serialize straight into CLI responses.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class Vec2:
    """2D vector in world or screen space."""
    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: "Vec2") -> "Vec2":
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vec2") -> "Vec2":
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> "Vec2":
        return Vec2(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> "Vec2":
        return Vec2(self.x / scalar, self.y / scalar)

    def is_close(self, other: "Vec2", tolerance: float = 1e-6) -> bool:
        return abs(self.x - other.x) <= tolerance and abs(self.y - other.y) <= tolerance


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle. `contains` is half-open on the far edges."""
    x: float
    y: float
    width: float
    height: float

    @property
    def x_max(self) -> float:
        return self.x + self.width

    @property
    def y_max(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Vec2:
        return Vec2(self.x + self.width / 2, self.y + self.height / 2)

    def contains(self, point: Vec2) -> bool:
        return self.x <= point.x < self.x_max and self.y <= point.y < self.y_max

    def overlaps(self, other: "Rect") -> bool:
        return (
            other.x_max > self.x
            and other.x < self.x_max
            and other.y_max > self.y
            and other.y < self.y_max
        )


class EdgeKind(StrEnum):
    """How an edge was discovered during expansion."""
    DEPENDENCY = "dependency"
    DEPENDENT = "dependent"


class GraphNode(BaseModel):
    """
    One discovered item in a dependency graph.

    `dependencies` and `dependents` hold paths, which are keys into the owning
    DependencyGraph. Each path resolves to exactly one GraphNode per graph.
    """
    path: str
    depth: int
    is_root: bool = False
    position: Optional[Vec2] = None
    dependencies: List[str] = Field(default_factory=list)
    dependents: List[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=False)

    @property
    def name(self) -> str:
        """File name without directory or extension."""
        file_name = self.path.rsplit("/", 1)[-1]
        stem, dot, _ = file_name.rpartition(".")
        return stem if dot and stem else file_name

    def __hash__(self):
        return hash(self.path)

    def __eq__(self, other):
        if isinstance(other, GraphNode):
            return self.path == other.path
        return False


class AssetMetadata(BaseModel):
    """Descriptive data about one item, shown in tooltips."""
    kind: str = "Unknown"
    size_bytes: Optional[int] = None

    @property
    def size_human(self) -> str:
        if self.size_bytes is None:
            return "N/A"
        return format_file_size(self.size_bytes)


def format_file_size(size_bytes: int) -> str:
    """Format a byte count with up to two decimals, e.g. `1.5 KB`."""
    units = ["B", "KB", "MB", "GB"]
    size = float(size_bytes)
    order = 0
    while size >= 1024 and order < len(units) - 1:
        order += 1
        size /= 1024
    text = f"{size:.2f}".rstrip("0").rstrip(".")
    return f"{text} {units[order]}"
