"""Load renderer settings and post snapshots for travel blog page builds.

This subpackage parses ``config/renderer.yaml`` (render mode, generic-content
filter thresholds, retired section kinds and extra template alias tables) and
exported post snapshots into the typed records the section pipeline consumes.
The entry points are :func:`load_renderer_config` and
:func:`load_post_snapshot`; both raise :class:`ConfigError` for malformed
documents.

Examples
--------
>>> from pathlib import Path
>>> from travelblog_pages.config import load_post_snapshot, load_renderer_config
>>> config = load_renderer_config(Path("config/renderer.yaml"))  # doctest: +SKIP
>>> snapshot = load_post_snapshot(Path("posts/amalfi-coast.yaml"))  # doctest: +SKIP
>>> snapshot.post.slug  # doctest: +SKIP
'amalfi-coast-guide'
"""

from .loader import load_renderer_config, parse_mode
from .models import ConfigError, PostSnapshot, RendererConfig
from .snapshot import build_post_snapshot, load_post_snapshot

__all__ = [
    "ConfigError",
    "PostSnapshot",
    "RendererConfig",
    "build_post_snapshot",
    "load_post_snapshot",
    "load_renderer_config",
    "parse_mode",
]
