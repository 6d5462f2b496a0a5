"""Render one section record into HTML.

:class:`SectionRenderer` resolves a section's template, applies the section
filters, and dispatches on :class:`~travelblog_pages.sections.models.SectionKind`
to a kind renderer registered in :data:`KIND_RENDERERS`. Kind renderers
normalise the untyped payload (every missing list becomes ``[]``) and render a
Jinja partial from ``templates/sections``.

The dispatch table must cover every kind; a gap raises
:class:`~travelblog_pages.sections.registry.RegistryError` when this module is
imported.

Examples
--------
>>> from travelblog_pages.sections.models import RenderContext, Section
>>> renderer = SectionRenderer()
>>> section = Section(id="s1", template_id="rich-text-editor", data={"content": "<p>Hi</p>"})
>>> "<p>Hi</p>" in renderer.render_section(section, RenderContext())
True
"""

from __future__ import annotations

import collections.abc as cabc
import datetime as dt
import json
import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader
from markdown import markdown
from markupsafe import Markup

from .diagnostics import DiagnosticEvent, DiagnosticSink, EventKind, null_sink
from .filters import (
    DEFAULT_FILTERS,
    FilterConfig,
    is_generic_faq_content,
    is_generic_starter_pack_content,
    is_suppressed_kind,
    normalize_faqs,
)
from .models import SectionKind
from .registry import RegistryError, TemplateRegistry, build_default_registry

if typ.TYPE_CHECKING:
    from .models import RenderContext, Section, TemplateDescriptor

DEFAULT_TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"
RICH_TEXT_FALLBACK = "<p>Content not available in this language yet.</p>"
STARTER_PACK_DESCRIPTION = "Everything you need to know at a glance"


class SectionRenderError(RuntimeError):
    """Raised when a kind renderer fails for one section."""

    def __init__(self, section: Section, kind: SectionKind, cause: Exception) -> None:
        self.section_id = section.id
        self.template_id = section.template_id
        self.kind = kind
        super().__init__(
            f"{kind.value} failed for section '{section.id}': "
            f"{type(cause).__name__}: {cause}"
        )


Payload = dict[str, typ.Any]
KindRenderer = cabc.Callable[..., Markup | None]
KIND_RENDERERS: dict[SectionKind, KindRenderer] = {}


def _renders(*kinds: SectionKind) -> cabc.Callable[[KindRenderer], KindRenderer]:
    def register(func: KindRenderer) -> KindRenderer:
        for kind in kinds:
            KIND_RENDERERS[kind] = func
        return func

    return register


def ensure_exhaustive(table: typ.Mapping[SectionKind, KindRenderer]) -> None:
    """Raise :class:`RegistryError` unless ``table`` covers every kind."""
    missing = [kind.value for kind in SectionKind if kind not in table]
    if missing:
        msg = f"No renderer registered for section kinds: {', '.join(missing)}."
        raise RegistryError(msg)


class SectionRenderer:
    """Turn section records into HTML fragments."""

    def __init__(
        self,
        registry: TemplateRegistry | None = None,
        *,
        filters: FilterConfig | None = None,
        diagnostics: DiagnosticSink = null_sink,
        templates_dir: Path | None = None,
    ) -> None:
        """Initialise the renderer and its Jinja environment.

        Parameters
        ----------
        registry : TemplateRegistry, optional
            Resolves template ids; defaults to the built-in alias tables.
        filters : FilterConfig, optional
            Generic-content thresholds and the suppressed kinds.
        diagnostics : DiagnosticSink, optional
            Receives an event for every dropped or failed section.
        templates_dir : Path, optional
            Directory holding ``sections/`` and ``notices/`` partials.
            Defaults to ``travelblog_pages/templates``.
        """
        self.registry = registry or build_default_registry()
        self.filters = filters or DEFAULT_FILTERS
        self.diagnostics = diagnostics
        self.templates_dir = templates_dir or DEFAULT_TEMPLATES_DIR
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["markdown"] = self.markdown
        self._markdown_extensions = ["sane_lists", "tables"]

    def markdown(self, text: object) -> Markup:
        """Render short editor-supplied Markdown into HTML."""
        normalized = str(text or "").strip()
        if not normalized:
            return Markup("")
        return Markup(
            markdown(
                normalized,
                extensions=self._markdown_extensions,
                output_format="html",
            )
        )

    def partial(self, name: str, /, **context: typ.Any) -> Markup:
        """Render ``templates/<name>.jinja`` with ``context``."""
        template = self.env.get_template(f"{name}.jinja")
        return Markup(template.render(**context))

    def emit(
        self,
        kind: EventKind,
        message: str,
        section: Section | None = None,
        **details: typ.Any,
    ) -> None:
        """Send a diagnostic event about ``section`` to the configured sink."""
        self.diagnostics(
            DiagnosticEvent(
                kind,
                message,
                section_id=section.id if section else None,
                template_id=section.template_id if section else None,
                details=details,
            )
        )

    def render_section(
        self, section: Section, context: RenderContext
    ) -> Markup | None:
        """Render ``section`` or return ``None`` when it must not appear.

        Parameters
        ----------
        section : Section
            The section record to render.
        context : RenderContext
            Post metadata, language and render mode shared by all sections.

        Returns
        -------
        Markup or None
            The section's HTML, a diagnostic or error notice, or ``None``
            for inactive, unresolved, suppressed, generic, unknown and skip
            sections. Kind renderer failures never propagate.
        """
        if not section.is_active:
            return None

        descriptor = self.registry.resolve_section(section)
        if descriptor is None:
            self.emit(
                EventKind.TEMPLATE_UNRESOLVED,
                f"no template registered for '{section.template_id}'",
                section,
            )
            if context.is_development:
                return self.partial(
                    "notices/unresolved_template", section=section
                )
            return None

        kind = descriptor.kind
        if is_suppressed_kind(kind, self.filters):
            self.emit(
                EventKind.SECTION_SUPPRESSED,
                f"{descriptor.component} is retired",
                section,
                component=descriptor.component,
            )
            return None

        payload = section.payload()
        if kind is None:
            return self._render_unknown(section, descriptor, payload, context)

        if self._is_generic(kind, payload):
            self.emit(
                EventKind.SECTION_FILTERED,
                f"{kind.value} holds placeholder content",
                section,
                component=kind.value,
            )
            return None

        try:
            return KIND_RENDERERS[kind](self, payload, section, context)
        except Exception as exc:  # noqa: BLE001 - one section must not blank the page
            error = SectionRenderError(section, kind, exc)
            error.__cause__ = exc
            self.emit(
                EventKind.SECTION_FAILED,
                str(error),
                section,
                component=kind.value,
                error=type(exc).__name__,
            )
            return self.partial(
                "notices/section_error",
                section=section,
                error=error,
                development=context.is_development,
            )

    def _is_generic(self, kind: SectionKind, payload: Payload) -> bool:
        match kind:
            case SectionKind.FAQ:
                payload["faqs"] = normalize_faqs(payload.get("faqs"))
                return is_generic_faq_content(payload["faqs"], self.filters.faq)
            case SectionKind.STARTER_PACK:
                return is_generic_starter_pack_content(
                    payload, self.filters.starter_pack
                )
            case _:
                return False

    def _render_unknown(
        self,
        section: Section,
        descriptor: TemplateDescriptor,
        payload: Payload,
        context: RenderContext,
    ) -> Markup | None:
        self.emit(
            EventKind.KIND_UNKNOWN,
            f"no renderer for component '{descriptor.component}'",
            section,
            component=descriptor.component,
        )
        if not context.is_development:
            return None
        return self.partial(
            "notices/unknown_kind",
            section=section,
            descriptor=descriptor,
            payload_json=json.dumps(payload, indent=2, default=str, sort_keys=True),
        )


def _text(payload: typ.Mapping[str, typ.Any], key: str, default: str = "") -> str:
    value = payload.get(key)
    if value is None:
        return default
    text = str(value).strip()
    return text or default


def _items(value: object) -> list[typ.Mapping[str, typ.Any]]:
    """Return the mapping entries of a list field, or ``[]``."""
    if not isinstance(value, list | tuple):
        return []
    return [item for item in value if isinstance(item, cabc.Mapping)]


def _strings(value: object) -> list[str]:
    if isinstance(value, str):
        return [value] if value.strip() else []
    if not isinstance(value, list | tuple):
        return []
    return [str(item) for item in value if str(item).strip()]


def _cell(value: object) -> str:
    if isinstance(value, list | tuple):
        return ", ".join(_strings(value))
    return "" if value is None else str(value).strip()


def _format_date(value: object) -> str:
    match value:
        case dt.datetime() | dt.date():
            return value.strftime("%B %d, %Y")
        case str() as text:
            return text.strip()
        case _:
            return ""


@_renders(SectionKind.SKIP)
def _render_skip(
    renderer: SectionRenderer,
    payload: Payload,
    section: Section,
    context: RenderContext,  # noqa: ARG001
) -> Markup | None:
    renderer.emit(
        EventKind.SECTION_SKIPPED,
        f"skipping '{_text(payload, 'title', 'untitled')}' (duplicate navigation)",
        section,
    )
    return None


@_renders(SectionKind.HERO, SectionKind.HTML_HERO)
def _render_hero(
    renderer: SectionRenderer,
    payload: Payload,
    section: Section,
    context: RenderContext,
) -> Markup | None:
    kind = renderer.registry.kind_of(section)
    meta = payload.get("meta") if isinstance(payload.get("meta"), cabc.Mapping) else {}
    return renderer.partial(
        "sections/html_hero" if kind is SectionKind.HTML_HERO else "sections/hero",
        title=_text(payload, "title", context.post.title),
        description=_text(payload, "subtitle", context.post.excerpt),
        location=_text(payload, "location"),
        hero_image=_text(payload, "backgroundImage"),
        badge=_text(payload, "badge"),
        rating=_text(payload, "rating"),
        highlights=_items(payload.get("highlights")),
        cta_primary=payload.get("ctaPrimary") or {},
        cta_secondary=payload.get("ctaSecondary") or {},
        breadcrumbs=_items(payload.get("breadcrumbs")),
        show_breadcrumbs=bool(payload.get("showBreadcrumbs", True)),
        meta=meta,
        show_meta=bool(payload.get("showMeta", True)),
        context=context,
    )


@_renders(SectionKind.AUTHOR_BLOCK)
def _render_author(
    renderer: SectionRenderer,
    payload: Payload,
    section: Section,  # noqa: ARG001
    context: RenderContext,
) -> Markup | None:
    author = context.post.author
    return renderer.partial(
        "sections/author_block",
        name=_text(
            payload,
            "authorName",
            author.display_name if author else "Our Travel Team",
        ),
        bio=_text(payload, "bio", (author.bio or "") if author else ""),
        avatar=_text(payload, "avatar", (author.avatar or "") if author else ""),
        badges=_strings(payload.get("badges")),
        published=_format_date(payload.get("publishedDate"))
        or _format_date(context.post.published_at),
        updated=_format_date(payload.get("updatedDate"))
        or _format_date(context.post.updated_at),
    )


@_renders(SectionKind.STARTER_PACK)
def _render_starter_pack(
    renderer: SectionRenderer,
    payload: Payload,
    section: Section,  # noqa: ARG001
    context: RenderContext,
) -> Markup | None:
    highlights = _items(payload.get("highlights")) or _items(payload.get("items"))
    return renderer.partial(
        "sections/starter_pack",
        badge=_text(payload, "badge"),
        title=_text(
            payload, "title", f"{context.post.title} Travel Essentials".strip()
        ),
        description=_text(payload, "description", STARTER_PACK_DESCRIPTION),
        highlights=highlights,
        features=_items(payload.get("features")),
    )


@_renders(SectionKind.RICH_TEXT)
def _render_rich_text(
    renderer: SectionRenderer,
    payload: Payload,
    section: Section,  # noqa: ARG001
    context: RenderContext,  # noqa: ARG001
) -> Markup | None:
    return renderer.partial(
        "sections/rich_text",
        content=Markup(_text(payload, "content", RICH_TEXT_FALLBACK)),
    )


@_renders(SectionKind.HOTEL_CAROUSEL)
def _render_hotels(
    renderer: SectionRenderer,
    payload: Payload,
    section: Section,  # noqa: ARG001
    context: RenderContext,  # noqa: ARG001
) -> Markup | None:
    return renderer.partial(
        "sections/hotel_carousel",
        title=_text(payload, "title", "Where to Stay"),
        description=_text(
            payload, "description", "Top hotels offering luxury amenities"
        ),
        destination=_text(payload, "destination", "the area"),
        hotels=_items(payload.get("hotels")),
    )


@_renders(SectionKind.THINGS_TO_DO)
def _render_things_to_do(
    renderer: SectionRenderer,
    payload: Payload,
    section: Section,  # noqa: ARG001
    context: RenderContext,
) -> Markup | None:
    return renderer.partial(
        "sections/things_to_do",
        destination=context.post.title,
        title=_text(payload, "title", "Things To Do"),
        description=_text(payload, "description", "Discover amazing experiences"),
        activities=_items(payload.get("activities")),
    )


@_renders(SectionKind.AI_ITINERARY_CTA)
def _render_cta(
    renderer: SectionRenderer,
    payload: Payload,
    section: Section,  # noqa: ARG001
    context: RenderContext,  # noqa: ARG001
) -> Markup | None:
    return renderer.partial(
        "sections/ai_itinerary_cta",
        title=_text(payload, "title", "Plan Your Perfect Trip"),
        description=_text(
            payload,
            "description",
            "Let our AI help you create the perfect itinerary",
        ),
        button_url=_text(payload, "buttonUrl", "#"),
        button_text=_text(payload, "buttonText", "Start Planning"),
    )


@_renders(SectionKind.FAQ)
def _render_faq(
    renderer: SectionRenderer,
    payload: Payload,
    section: Section,  # noqa: ARG001
    context: RenderContext,  # noqa: ARG001
) -> Markup | None:
    return renderer.partial(
        "sections/faq",
        title=_text(payload, "title", "Frequently Asked Questions"),
        faqs=normalize_faqs(payload.get("faqs")),
    )


@_renders(SectionKind.INTERNAL_LINKS, SectionKind.RELATED_ARTICLES)
def _render_links(
    renderer: SectionRenderer,
    payload: Payload,
    section: Section,
    context: RenderContext,  # noqa: ARG001
) -> Markup | None:
    if renderer.registry.kind_of(section) is SectionKind.RELATED_ARTICLES:
        title = _text(payload, "title", "Related Articles")
        links = _items(payload.get("articles"))
    else:
        title = _text(payload, "title", "Related Guides")
        links = _items(payload.get("links"))
    return renderer.partial("sections/links", title=title, links=links)


@_renders(SectionKind.WHERE_TO_STAY)
def _render_where_to_stay(
    renderer: SectionRenderer,
    payload: Payload,
    section: Section,  # noqa: ARG001
    context: RenderContext,  # noqa: ARG001
) -> Markup | None:
    neighborhoods = [
        {
            "name": _text(item, "name"),
            "description": _text(item, "description"),
            "pros": _strings(item.get("pros")),
            "cons": _strings(item.get("cons")),
            "best_for": _text(item, "bestFor"),
        }
        for item in _items(payload.get("neighborhoods"))
    ]
    return renderer.partial(
        "sections/where_to_stay",
        title=_text(payload, "title", "Where to Stay"),
        subtitle=_text(payload, "subtitle"),
        description=_text(payload, "description"),
        neighborhoods=neighborhoods,
        hotels=_items(payload.get("hotels")),
    )


@_renders(SectionKind.WHY_DIFFERENT)
def _render_why_different(
    renderer: SectionRenderer,
    payload: Payload,
    section: Section,  # noqa: ARG001
    context: RenderContext,  # noqa: ARG001
) -> Markup | None:
    return renderer.partial(
        "sections/why_different",
        title=_text(payload, "title", "Why This Destination Hits Different"),
        subtitle=_text(payload, "subtitle"),
        reasons=_items(payload.get("reasons")),
    )


@_renders(SectionKind.LOCAL_TIPS, SectionKind.TRAVEL_TIPS)
def _render_tips(
    renderer: SectionRenderer,
    payload: Payload,
    section: Section,
    context: RenderContext,  # noqa: ARG001
) -> Markup | None:
    if renderer.registry.kind_of(section) is SectionKind.LOCAL_TIPS:
        categories = [
            {"title": _text(item, "title"), "tips": _strings(item.get("tips"))}
            for item in _items(payload.get("categories"))
        ]
        return renderer.partial(
            "sections/local_tips",
            title=_text(payload, "title", "Local Tips"),
            categories=categories,
        )
    return renderer.partial(
        "sections/travel_tips",
        title=_text(payload, "title", "Travel Tips"),
        tips=_strings(payload.get("tips")),
    )


@_renders(SectionKind.TABLE_OF_CONTENTS)
def _render_table_of_contents(
    renderer: SectionRenderer,
    payload: Payload,
    section: Section,
    context: RenderContext,  # noqa: ARG001
) -> Markup | None:
    items = [
        {
            "title": _text(item, "title"),
            "href": _text(item, "href") or f"#{_text(item, 'id')}",
        }
        for item in _items(payload.get("items"))
        if _text(item, "title")
    ]
    if not items:
        renderer.emit(
            EventKind.SECTION_SKIPPED, "table of contents has no items", section
        )
        return None
    return renderer.partial(
        "sections/table_of_contents",
        title=_text(payload, "customTitle")
        or _text(payload, "title", "Table of Contents"),
        show_title=bool(payload.get("showTitle", True)),
        items=items,
    )


@_renders(SectionKind.WHY_CHOOSE)
def _render_why_choose(
    renderer: SectionRenderer,
    payload: Payload,
    section: Section,  # noqa: ARG001
    context: RenderContext,  # noqa: ARG001
) -> Markup | None:
    columns = payload.get("columns")
    return renderer.partial(
        "sections/why_choose",
        title=_text(payload, "title"),
        subtitle=_text(payload, "subtitle"),
        show_title=bool(payload.get("showTitle", True)),
        show_subtitle=bool(payload.get("showSubtitle", True)),
        items=_items(payload.get("items")),
        columns=columns if columns in (2, 3, 4) else 3,
    )


@_renders(SectionKind.COMPARISON_TABLE)
def _render_comparison_table(
    renderer: SectionRenderer,
    payload: Payload,
    section: Section,  # noqa: ARG001
    context: RenderContext,  # noqa: ARG001
) -> Markup | None:
    rows = _items(payload.get("rows"))
    columns = [
        {
            "key": _text(column, "key"),
            "label": _text(column, "label", _text(column, "key")),
            "align": _text(column, "align", "left"),
        }
        for column in _items(payload.get("columns"))
        if _text(column, "key")
    ]
    if not columns and rows:
        columns = [
            {"key": key, "label": key, "align": "left"}
            for key in rows[0]
            if key != "id"
        ]
    table = [[_cell(row.get(column["key"])) for column in columns] for row in rows]
    return renderer.partial(
        "sections/comparison_table",
        title=_text(payload, "title"),
        subtitle=_text(payload, "subtitle"),
        columns=columns,
        rows=table,
    )


@_renders(SectionKind.TIP_BOXES)
def _render_tip_boxes(
    renderer: SectionRenderer,
    payload: Payload,
    section: Section,  # noqa: ARG001
    context: RenderContext,  # noqa: ARG001
) -> Markup | None:
    boxes = []
    for box in _items(payload.get("tipBoxes")):
        tips = []
        for item in box.get("items") or []:
            match item:
                case str() as text:
                    tips.append({"text": text, "highlighted": False})
                case cabc.Mapping():
                    tips.append(
                        {
                            "text": _text(item, "text"),
                            "highlighted": bool(item.get("isHighlighted")),
                        }
                    )
                case _:
                    continue
        boxes.append(
            {"title": _text(box, "title"), "icon": _text(box, "icon"), "items": tips}
        )
    return renderer.partial(
        "sections/tip_boxes",
        title=_text(payload, "title"),
        subtitle=_text(payload, "subtitle"),
        boxes=boxes,
    )


@_renders(SectionKind.BUDGET_TIMELINE)
def _render_budget_timeline(
    renderer: SectionRenderer,
    payload: Payload,
    section: Section,  # noqa: ARG001
    context: RenderContext,  # noqa: ARG001
) -> Markup | None:
    mode = _text(payload, "type", "both")
    timeline = [
        {
            "title": _text(item, "title"),
            "subtitle": _text(item, "subtitle"),
            "description": _text(item, "description"),
            "details": _strings(item.get("details")),
        }
        for item in _items(payload.get("timelineItems"))
    ]
    budget = [
        {"category": _text(item, "category"), "items": _strings(item.get("items"))}
        for item in _items(payload.get("budgetItems"))
    ]
    return renderer.partial(
        "sections/budget_timeline",
        title=_text(payload, "title"),
        subtitle=_text(payload, "subtitle"),
        timeline=timeline if mode in ("timeline", "both") else [],
        budget=budget if mode in ("budget", "both") else [],
    )


@_renders(SectionKind.HTML_CONTENT_CONTAINER)
def _render_html_content(
    renderer: SectionRenderer,
    payload: Payload,
    section: Section,
    context: RenderContext,  # noqa: ARG001
) -> Markup | None:
    content = _text(payload, "content")
    if not content:
        renderer.emit(EventKind.SECTION_SKIPPED, "content container is empty", section)
        return None
    return renderer.partial("sections/html_content", content=Markup(content))


ensure_exhaustive(KIND_RENDERERS)


__all__ = [
    "KIND_RENDERERS",
    "SectionRenderError",
    "SectionRenderer",
    "ensure_exhaustive",
]
