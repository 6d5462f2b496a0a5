"""Section template resolution, filtering, layout and page composition."""

from __future__ import annotations

from .composer import PageComposer, PageMarkup, SectionSlot
from .diagnostics import (
    DiagnosticEvent,
    DiagnosticSink,
    EventKind,
    LoggingSink,
    RecordingSink,
    null_sink,
)
from .filters import (
    FaqFilterConfig,
    FilterConfig,
    PlaceholderHighlight,
    StarterPackFilterConfig,
    is_generic_faq_content,
    is_generic_starter_pack_content,
    is_suppressed_kind,
    normalize_faqs,
)
from .headings import (
    HeadingSource,
    SoupHeadingSource,
    TocObserver,
    assign_heading_ids,
    extract_headings,
    merge_headings,
    observe,
    slugify,
)
from .layout import LayoutDecision, classify
from .models import (
    AuthorInfo,
    Heading,
    HeadingRef,
    PostContext,
    RenderContext,
    RenderMode,
    Section,
    SectionKind,
    TemplateDescriptor,
)
from .registry import (
    AliasTable,
    RegistryError,
    TemplateRegistry,
    build_default_registry,
)
from .renderer import SectionRenderer, SectionRenderError

__all__ = [
    "AliasTable",
    "AuthorInfo",
    "DiagnosticEvent",
    "DiagnosticSink",
    "EventKind",
    "FaqFilterConfig",
    "FilterConfig",
    "Heading",
    "HeadingRef",
    "HeadingSource",
    "LayoutDecision",
    "LoggingSink",
    "PageComposer",
    "PageMarkup",
    "PlaceholderHighlight",
    "PostContext",
    "RecordingSink",
    "RegistryError",
    "RenderContext",
    "RenderMode",
    "Section",
    "SectionKind",
    "SectionRenderError",
    "SectionRenderer",
    "SectionSlot",
    "StarterPackFilterConfig",
    "TemplateDescriptor",
    "TemplateRegistry",
    "TocObserver",
    "assign_heading_ids",
    "build_default_registry",
    "classify",
    "extract_headings",
    "is_generic_faq_content",
    "is_generic_starter_pack_content",
    "is_suppressed_kind",
    "merge_headings",
    "normalize_faqs",
    "null_sink",
    "observe",
    "slugify",
]
