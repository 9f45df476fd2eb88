"""
Global Configuration and Safe Defaults.

This module centralizes the defaults used by the index, graph builder,
layout engine and viewport. Every default can be overridden from
`.depview/config.yaml`, which `depview init` writes.
"""

import logging
from pathlib import Path
from typing import List, Optional, Set

import yaml
from pydantic import BaseModel, Field, ValidationError

from .core.exceptions import ConfigError

logger = logging.getLogger(__name__)

CONFIG_DIR = ".depview"
CONFIG_FILE = "config.yaml"

# --- Corpus ---
# Only items under this namespace are scanned when building the reverse index
PROJECT_PREFIX = "Assets/"

# Compiled code modules are never traversed
EXCLUDED_EXTENSIONS: Set[str] = {".dll"}

# Scans smaller than this do not report progress
PROGRESS_THRESHOLD = 50

# --- Graph ---
DEFAULT_MAX_DEPTH = 5
MIN_DEPTH = 5

# --- Layout ---
MIN_NODE_SPACING_X = 80.0
MAX_NODE_SPACING_X = 300.0
NODE_SPACING_Y = 240.0

# --- Viewport ---
MIN_ZOOM = 0.5
MAX_ZOOM = 2.0
ZOOM_SENSITIVITY = 0.05
NODE_SIZE = 64.0
TOOLBAR_HEIGHT = 18.0

# --- Labels & Tooltips ---
LABEL_HEIGHT = 30.0
LABEL_SPACING = 8.0
LABEL_WIDTH_MULTIPLIER = 1.2
LABEL_FONT_SIZE = 10
TOOLTIP_FONT_SIZE = 11
TOOLTIP_OFFSET_X = 15.0
TOOLTIP_OFFSET_Y = 15.0
TOOLTIP_MAX_WIDTH_RATIO = 0.5
ELLIPSIS = "..."
FALLBACK_TEXT_LENGTH = 20

# --- Connections ---
BEZIER_TANGENT_STRENGTH = 100.0
CONNECTION_LINE_WIDTH = 6.0

# --- Background Grid ---
GRID_SPACING_SMALL = 20.0
GRID_SPACING_LARGE = 100.0
# Grid is skipped when minor lines would sit closer than this (pixels)
MIN_GRID_SPACING = 5.0


class IndexSettings(BaseModel):
    project_prefix: str = PROJECT_PREFIX
    progress_threshold: int = Field(default=PROGRESS_THRESHOLD, ge=0)


class GraphSettings(BaseModel):
    max_depth: int = Field(default=DEFAULT_MAX_DEPTH, ge=0)
    min_depth: int = Field(default=MIN_DEPTH, ge=0)
    excluded_extensions: List[str] = Field(default_factory=lambda: sorted(EXCLUDED_EXTENSIONS))


class LayoutSettings(BaseModel):
    min_spacing_x: float = Field(default=MIN_NODE_SPACING_X, gt=0)
    max_spacing_x: float = Field(default=MAX_NODE_SPACING_X, gt=0)
    row_spacing: float = Field(default=NODE_SPACING_Y, gt=0)


class ViewportSettings(BaseModel):
    min_zoom: float = Field(default=MIN_ZOOM, gt=0)
    max_zoom: float = Field(default=MAX_ZOOM, gt=0)
    zoom_sensitivity: float = ZOOM_SENSITIVITY
    node_size: float = Field(default=NODE_SIZE, gt=0)
    toolbar_height: float = Field(default=TOOLBAR_HEIGHT, ge=0)


class TextSettings(BaseModel):
    ellipsis: str = ELLIPSIS
    fallback_length: int = Field(default=FALLBACK_TEXT_LENGTH, ge=0)


class DepviewConfig(BaseModel):
    """
    Validated view of `.depview/config.yaml`.

    Every section is optional; missing keys fall back to the module defaults.
    """
    index: IndexSettings = Field(default_factory=IndexSettings)
    graph: GraphSettings = Field(default_factory=GraphSettings)
    layout: LayoutSettings = Field(default_factory=LayoutSettings)
    viewport: ViewportSettings = Field(default_factory=ViewportSettings)
    text: TextSettings = Field(default_factory=TextSettings)


def default_config_path(root_dir: Optional[Path] = None) -> Path:
    """Location of the config file for a project root (cwd by default)."""
    return (root_dir or Path.cwd()) / CONFIG_DIR / CONFIG_FILE


def load_config(path: Optional[Path] = None) -> DepviewConfig:
    """
    Load configuration from YAML.

    A missing file yields the defaults. A file that is not valid YAML, or
    whose values fail validation, raises ConfigError.
    """
    config_path = path or default_config_path()
    if not config_path.exists():
        logger.debug(f"No config at {config_path}, using defaults")
        return DepviewConfig()

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (UnicodeDecodeError, OSError) as e:
        raise ConfigError(f"Failed to read {config_path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config root must be a mapping: {config_path}")

    try:
        return DepviewConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config {config_path}: {e}") from e


def is_excluded_extension(path: str, extensions: Set[str] = EXCLUDED_EXTENSIONS) -> bool:
    """Check if a path ends with a blocklisted extension."""
    lowered = path.lower()
    return any(lowered.endswith(ext) for ext in extensions)
