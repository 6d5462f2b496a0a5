"""Typed records shared by the section rendering pipeline."""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import datetime as dt  # noqa: TC003 - used for runtime type metadata
import enum
import typing as typ


class RenderMode(enum.StrEnum):
    """Audience the page is rendered for."""

    PRODUCTION = "production"
    DEVELOPMENT = "development"


class SectionKind(enum.StrEnum):
    """Closed set of semantic section types that the renderer dispatches on.

    Values are the canonical component names stored in template descriptors.
    Legacy kebab-case names found in older section rows are accepted by
    :meth:`parse`.
    """

    HERO = "HeroSection"
    HTML_HERO = "HtmlHeroSection"
    SKIP = "SkipSection"
    AUTHOR_BLOCK = "AuthorBlock"
    STARTER_PACK = "StarterPackSection"
    RICH_TEXT = "RichTextContent"
    HOTEL_CAROUSEL = "HotelCarousel"
    THINGS_TO_DO = "ThingsToDoCards"
    AI_ITINERARY_CTA = "AIItineraryCTA"
    FAQ = "FAQSection"
    INTERNAL_LINKS = "InternalLinksSection"
    RELATED_ARTICLES = "RelatedArticlesSection"
    WHERE_TO_STAY = "WhereToStay"
    WHY_DIFFERENT = "WhyDestinationDifferent"
    LOCAL_TIPS = "LocalTips"
    TRAVEL_TIPS = "TravelTips"
    TABLE_OF_CONTENTS = "TableOfContentsSection"
    WHY_CHOOSE = "WhyChooseSection"
    COMPARISON_TABLE = "ComparisonTableSection"
    TIP_BOXES = "TipBoxesSection"
    BUDGET_TIMELINE = "BudgetTimelineSection"
    HTML_CONTENT_CONTAINER = "HtmlContentContainer"

    @classmethod
    def parse(cls, name: str | None) -> SectionKind | None:
        """Return the kind named by ``name`` or ``None`` when it is not known."""
        if not name:
            return None
        text = name.strip()
        try:
            return cls(text)
        except ValueError:
            return _LEGACY_COMPONENT_NAMES.get(text.lower())


_LEGACY_COMPONENT_NAMES: dict[str, SectionKind] = {
    "hero-section": SectionKind.HERO,
    "html-hero-section": SectionKind.HTML_HERO,
    "skip-section": SectionKind.SKIP,
    "author-section": SectionKind.AUTHOR_BLOCK,
    "author-block": SectionKind.AUTHOR_BLOCK,
    "starter-pack-section": SectionKind.STARTER_PACK,
    "overview-intro": SectionKind.STARTER_PACK,
    "rich-text-content": SectionKind.RICH_TEXT,
    "rich-text-editor": SectionKind.RICH_TEXT,
    "richtexteditor": SectionKind.RICH_TEXT,
    "blog-content-section": SectionKind.RICH_TEXT,
    "blogcontentsection": SectionKind.RICH_TEXT,
    "hotel-carousel": SectionKind.HOTEL_CAROUSEL,
    "things-to-do-cards": SectionKind.THINGS_TO_DO,
    "ai-itinerary-cta": SectionKind.AI_ITINERARY_CTA,
    "faq-section": SectionKind.FAQ,
    "internal-links-section": SectionKind.INTERNAL_LINKS,
    "internal-linking": SectionKind.INTERNAL_LINKS,
    "internallinking": SectionKind.INTERNAL_LINKS,
    "related-articles-section": SectionKind.RELATED_ARTICLES,
    "where-to-stay": SectionKind.WHERE_TO_STAY,
    "why-destination-different": SectionKind.WHY_DIFFERENT,
    "local-tips": SectionKind.LOCAL_TIPS,
    "travel-tips": SectionKind.TRAVEL_TIPS,
    "table-of-contents": SectionKind.TABLE_OF_CONTENTS,
    "why-choose-section": SectionKind.WHY_CHOOSE,
    "comparison-table": SectionKind.COMPARISON_TABLE,
    "tip-boxes": SectionKind.TIP_BOXES,
    "budget-timeline": SectionKind.BUDGET_TIMELINE,
    "html-content-container": SectionKind.HTML_CONTENT_CONTAINER,
}

HERO_KINDS: frozenset[SectionKind] = frozenset(
    {SectionKind.HERO, SectionKind.HTML_HERO}
)
HTML_LAYOUT_KINDS: frozenset[SectionKind] = frozenset(
    {
        SectionKind.HTML_HERO,
        SectionKind.TABLE_OF_CONTENTS,
        SectionKind.WHY_CHOOSE,
        SectionKind.COMPARISON_TABLE,
        SectionKind.TIP_BOXES,
        SectionKind.BUDGET_TIMELINE,
        SectionKind.HTML_CONTENT_CONTAINER,
    }
)


@dc.dataclass(frozen=True, slots=True)
class TemplateDescriptor:
    """Static description of a section template.

    Attributes
    ----------
    name : str
        Human-readable template slug (``"faq-section"``).
    component : str
        Component name used for dispatch; may name a kind outside
        :class:`SectionKind` for rows written by newer admin builds.
    category : str
        Cosmetic grouping shown in the admin UI.
    """

    name: str
    component: str
    category: str = "content"

    @property
    def kind(self) -> SectionKind | None:
        """Return the dispatch kind, or ``None`` for unknown component names."""
        return SectionKind.parse(self.component)


@dc.dataclass(frozen=True, slots=True)
class Section:
    """One content block of a post as supplied by the content store.

    Attributes
    ----------
    id : str
        Opaque unique identifier.
    template_id : str
        Key into the template registry.
    position : int
        Display order; ties keep their original order.
    is_active : bool
        Inactive sections never render.
    title : str or None
        Optional override merged into ``data`` as ``title``.
    data : Mapping[str, Any]
        Template-specific payload.
    template : TemplateDescriptor or None
        Descriptor embedded in the row, used when the registry cannot
        resolve ``template_id``.
    """

    id: str
    template_id: str
    position: int = 0
    is_active: bool = True
    title: str | None = None
    data: typ.Mapping[str, typ.Any] = dc.field(default_factory=dict)
    template: TemplateDescriptor | None = None

    def payload(self) -> dict[str, typ.Any]:
        """Return a copy of ``data`` with the title override applied."""
        merged = dict(self.data or {})
        if self.title:
            merged["title"] = self.title
        return merged


@dc.dataclass(frozen=True, slots=True)
class AuthorInfo:
    """Author metadata attached to a post."""

    display_name: str
    bio: str | None = None
    avatar: str | None = None


@dc.dataclass(frozen=True, slots=True)
class PostContext:
    """Post-level metadata shared with every section renderer."""

    title: str = ""
    excerpt: str = ""
    slug: str = ""
    author: AuthorInfo | None = None
    published_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None


@dc.dataclass(frozen=True, slots=True)
class RenderContext:
    """Per-render inputs supplied by the host page."""

    post: PostContext = dc.field(default_factory=PostContext)
    language: str = "en"
    mode: RenderMode = RenderMode.PRODUCTION

    @property
    def is_development(self) -> bool:
        """Return ``True`` when diagnostics may be shown inline."""
        return self.mode is RenderMode.DEVELOPMENT


@dc.dataclass(frozen=True, slots=True)
class Heading:
    """Table-of-contents entry; the whole triple is the identity."""

    id: str
    title: str
    level: int


@dc.dataclass(slots=True)
class HeadingRef:
    """A heading found in mounted output by a heading source.

    ``id`` is ``None`` when the element carries no id attribute yet;
    ``write_id`` stores a generated id back onto the element.
    """

    level: int
    title: str
    id: str | None = None
    write_id: cabc.Callable[[str], None] | None = None


__all__ = [
    "HERO_KINDS",
    "HTML_LAYOUT_KINDS",
    "AuthorInfo",
    "Heading",
    "HeadingRef",
    "PostContext",
    "RenderContext",
    "RenderMode",
    "Section",
    "SectionKind",
    "TemplateDescriptor",
]
