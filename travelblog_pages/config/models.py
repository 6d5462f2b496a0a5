"""Typed dataclasses describing renderer configuration and post snapshots."""

from __future__ import annotations

import dataclasses as dc

from travelblog_pages.sections.filters import FilterConfig
from travelblog_pages.sections.models import (
    PostContext,
    RenderContext,
    RenderMode,
    Section,
)
from travelblog_pages.sections.registry import (
    AliasTable,
    TemplateRegistry,
    build_default_registry,
)


class ConfigError(ValueError):
    """Raised when renderer configuration or a post snapshot is invalid."""


@dc.dataclass(slots=True)
class RendererConfig:
    """Settings read from ``config/renderer.yaml``."""

    mode: RenderMode = RenderMode.PRODUCTION
    filters: FilterConfig = dc.field(default_factory=FilterConfig)
    alias_tables: list[AliasTable] = dc.field(default_factory=list)

    def build_registry(self) -> TemplateRegistry:
        """Return the built-in registry extended with the configured tables."""
        return build_default_registry(self.alias_tables)


@dc.dataclass(slots=True)
class PostSnapshot:
    """A post and its sections as exported from the content store."""

    post: PostContext
    sections: list[Section] = dc.field(default_factory=list)
    language: str = "en"

    def context(self, mode: RenderMode = RenderMode.PRODUCTION) -> RenderContext:
        """Return the render context for this post in ``mode``."""
        return RenderContext(post=self.post, language=self.language, mode=mode)


__all__ = ["ConfigError", "PostSnapshot", "RendererConfig"]
