"""Template registry built from an ordered list of versioned alias tables.

Section rows carry opaque template identifiers. Over the life of the blog the
same literal identifier has been reassigned to a different component, and many
identifiers point at the same component. Rather than relying on dictionary
literal overwrite order, each generation of identifiers lives in its own
:class:`AliasTable`, and :class:`TemplateRegistry` merges them in order with
later tables winning every collision.

Examples
--------
>>> registry = build_default_registry()
>>> registry.resolve("faq-section").component
'FAQSection'
>>> registry.source_of("5251d41a-d7f8-44b6-bfaf-636d50c859b1")
'v2-html'
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import typing as typ

from .models import Section, SectionKind, TemplateDescriptor


class RegistryError(ValueError):
    """Raised when an alias table or the dispatch table is malformed."""


KNOWN_CATEGORIES: frozenset[str] = frozenset(
    {"hero", "content", "layout", "cta", "meta", "hidden"}
)


@dc.dataclass(frozen=True, slots=True)
class AliasTable:
    """A named generation of template identifiers."""

    name: str
    entries: typ.Mapping[str, TemplateDescriptor]

    def __post_init__(self) -> None:
        for template_id, descriptor in self.entries.items():
            if not str(template_id).strip():
                msg = f"Alias table '{self.name}' contains an empty template id."
                raise RegistryError(msg)
            if not descriptor.component.strip():
                msg = (
                    f"Alias table '{self.name}' maps '{template_id}' to an empty "
                    "component name."
                )
                raise RegistryError(msg)
            if descriptor.category not in KNOWN_CATEGORIES:
                msg = (
                    f"Alias table '{self.name}' uses unknown category "
                    f"'{descriptor.category}' for '{template_id}'."
                )
                raise RegistryError(msg)

    @classmethod
    def from_rows(
        cls, name: str, rows: cabc.Iterable[tuple[str, str, SectionKind | str, str]]
    ) -> AliasTable:
        """Build a table from ``(template_id, name, component, category)`` rows.

        Rows are applied in order so a repeated identifier keeps its last value.
        """
        entries: dict[str, TemplateDescriptor] = {}
        for template_id, label, component, category in rows:
            entries[template_id] = TemplateDescriptor(
                name=label, component=str(component), category=category
            )
        return cls(name=name, entries=entries)


class TemplateRegistry:
    """Resolve template identifiers to descriptors across alias tables."""

    def __init__(self, tables: cabc.Iterable[AliasTable] = ()) -> None:
        self.tables: tuple[AliasTable, ...] = tuple(tables)
        self._descriptors: dict[str, TemplateDescriptor] = {}
        self._sources: dict[str, str] = {}
        for table in self.tables:
            for template_id, descriptor in table.entries.items():
                self._descriptors[template_id] = descriptor
                self._sources[template_id] = table.name

    def resolve(self, template_id: str | None) -> TemplateDescriptor | None:
        """Return the descriptor for ``template_id`` or ``None`` if unknown."""
        if not template_id:
            return None
        return self._descriptors.get(template_id)

    def source_of(self, template_id: str) -> str | None:
        """Return the name of the alias table that supplied ``template_id``."""
        return self._sources.get(template_id)

    def resolve_section(self, section: Section) -> TemplateDescriptor | None:
        """Resolve a section, falling back to its embedded descriptor."""
        return self.resolve(section.template_id) or section.template

    def kind_of(self, section: Section) -> SectionKind | None:
        """Return the dispatch kind of ``section`` or ``None``."""
        descriptor = self.resolve_section(section)
        return descriptor.kind if descriptor else None

    def with_tables(self, *tables: AliasTable) -> TemplateRegistry:
        """Return a new registry with ``tables`` merged after the current ones."""
        return TemplateRegistry((*self.tables, *tables))

    def __contains__(self, template_id: object) -> bool:
        return template_id in self._descriptors

    def __len__(self) -> int:
        return len(self._descriptors)


_K = SectionKind

LEGACY_SLUG_ROWS: tuple[tuple[str, str, SectionKind | str, str], ...] = (
    ("rich-text-editor", "rich-text-editor", _K.RICH_TEXT, "content"),
    ("RichTextEditor", "rich-text-editor", _K.RICH_TEXT, "content"),
    ("faq-section", "faq-section", _K.FAQ, "content"),
    ("internal-linking", "internal-linking", _K.INTERNAL_LINKS, "meta"),
    ("InternalLinking", "internal-linking", _K.INTERNAL_LINKS, "meta"),
    ("things-to-do-cards", "things-to-do-cards", _K.THINGS_TO_DO, "content"),
    ("hotel-carousel", "hotel-carousel", _K.HOTEL_CAROUSEL, "content"),
    ("overview-intro", "overview-intro", _K.STARTER_PACK, "content"),
    ("blog-content", "blog-content-section", _K.RICH_TEXT, "content"),
    ("html-hero-section", "html-hero-section", _K.HTML_HERO, "hero"),
    ("html-content-container", "html-content-container", _K.HTML_CONTENT_CONTAINER, "layout"),
    ("table-of-contents", "table-of-contents", _K.TABLE_OF_CONTENTS, "content"),
    ("why-choose-section", "why-choose-section", _K.WHY_CHOOSE, "content"),
    ("comparison-table", "comparison-table", _K.COMPARISON_TABLE, "content"),
    ("tip-boxes", "tip-boxes", _K.TIP_BOXES, "content"),
    ("budget-timeline", "budget-timeline", _K.BUDGET_TIMELINE, "content"),
)

V1_UUID_ROWS: tuple[tuple[str, str, SectionKind | str, str], ...] = (
    ("6f579a71-463c-43b4-b203-c2cb46c80d47", "hero-section", _K.HERO, "hero"),
    ("58e1b71c-600b-48d3-a956-f9b27bc368b2", "author-section", _K.AUTHOR_BLOCK, "content"),
    ("b87245be-1b68-47d4-83a6-fac582a0847f", "starter-pack", _K.STARTER_PACK, "content"),
    ("8642ef7e-6198-4cd4-b0f9-8ba6bb868951", "starter-pack", _K.STARTER_PACK, "content"),
    ("e596d688-31d9-4722-926d-18868f50f0cf", "things-to-do-cards", _K.THINGS_TO_DO, "content"),
    ("833666f2-e112-40c0-9d50-02f160b96f3a", "travel-tips", _K.TRAVEL_TIPS, "content"),
    ("e2036f8e-e01e-4a04-8cf7-814f77b4343b", "hotel-carousel", _K.HOTEL_CAROUSEL, "content"),
    ("5251d41a-d7f8-44b6-bfaf-636d50c859b1", "attractions-carousel", "AttractionsCarousel", "content"),
    ("9d56d088-6aff-4e2c-b263-6e830d8d332c", "local-tips", _K.LOCAL_TIPS, "content"),
    ("710f8880-c86d-4353-b16f-474c74debd31", "faq-section", _K.FAQ, "content"),
    ("c2caf0b9-68b6-48c1-999c-4cc48bd12242", "internal-links-section", _K.INTERNAL_LINKS, "meta"),
    ("b1d8062e-9fff-46d4-86b8-f198de9f3d38", "overview-intro", _K.STARTER_PACK, "content"),
    ("550e8400-e29b-41d4-a716-446655440000", "rich-text-content", _K.RICH_TEXT, "content"),
    ("e30d9e40-eb3a-41d3-aeac-413cfca52fe0", "rich-text-content", _K.RICH_TEXT, "content"),
    ("03d9efa8-2c31-489d-94af-d2d85f52aa9c", "ai-itinerary-cta", _K.AI_ITINERARY_CTA, "cta"),
    ("12345678-1234-4321-8765-123456789abc", "html-hero-section", _K.HTML_HERO, "hero"),
    ("d7279f1d-831f-4fd0-9bde-662d8f60b1b0", "table-of-contents", _K.TABLE_OF_CONTENTS, "content"),
    ("23456789-2345-4321-8765-123456789bcd", "table-of-contents", _K.TABLE_OF_CONTENTS, "content"),
    ("34567890-3456-5432-9876-234567890def", "why-choose", _K.WHY_CHOOSE, "content"),
    ("34567890-3456-4321-8765-123456789cde", "comparison-table", _K.COMPARISON_TABLE, "content"),
    ("45678901-4567-4321-8765-123456789def", "tip-boxes", _K.TIP_BOXES, "content"),
    ("56789012-5678-7654-0987-456789012abc", "tip-boxes", _K.TIP_BOXES, "content"),
    ("67890123-6789-8765-1098-567890123bcd", "budget-timeline", _K.BUDGET_TIMELINE, "content"),
    ("56789012-5678-4321-8765-123456789ef0", "budget-timeline", _K.BUDGET_TIMELINE, "content"),
    ("123456789cde", "why-choose", _K.WHY_CHOOSE, "content"),
)

V2_HTML_ROWS: tuple[tuple[str, str, SectionKind | str, str], ...] = (
    ("12345678-1234-4321-8765-123456789abc", "html-hero-section", _K.HTML_HERO, "hero"),
    ("d7279f1d-831f-4fd0-9bde-662d8f60b1b0", "skip-section", _K.SKIP, "hidden"),
    ("23456789-2345-4321-8765-123456789bcd", "table-of-contents", _K.TABLE_OF_CONTENTS, "content"),
    ("34567890-3456-4321-8765-123456789cde", "why-choose-section", _K.WHY_CHOOSE, "content"),
    ("45678901-4567-4321-8765-123456789def", "tip-boxes", _K.TIP_BOXES, "content"),
    ("56789012-5678-4321-8765-123456789ef0", "budget-timeline", _K.BUDGET_TIMELINE, "content"),
    ("5251d41a-d7f8-44b6-bfaf-636d50c859b1", "comparison-table", _K.COMPARISON_TABLE, "content"),
    ("8642ef7e-6198-4cd4-b0f9-8ba6bb868951", "html-content-container", _K.HTML_CONTENT_CONTAINER, "layout"),
    ("6f579a71-463c-43b4-b203-c2cb46c80d47", "hero-section", _K.HERO, "hero"),
    ("58e1b71c-600b-48d3-a956-f9b27bc368b2", "author-section", _K.AUTHOR_BLOCK, "content"),
    ("b87245be-1b68-47d4-83a6-fac582a0847f", "starter-pack", _K.STARTER_PACK, "content"),
    ("550e8400-e29b-41d4-a716-446655440000", "rich-text-content", _K.RICH_TEXT, "content"),
    ("e30d9e40-eb3a-41d3-aeac-413cfca52fe0", "rich-text-content", _K.RICH_TEXT, "content"),
    ("e2036f8e-e01e-4a04-8cf7-814f77b4343b", "hotel-carousel", _K.HOTEL_CAROUSEL, "content"),
    ("e596d688-31d9-4722-926d-18868f50f0cf", "things-to-do-cards", _K.THINGS_TO_DO, "content"),
    ("03d9efa8-2c31-489d-94af-d2d85f52aa9c", "ai-itinerary-cta", _K.AI_ITINERARY_CTA, "cta"),
    ("710f8880-c86d-4353-b16f-474c74debd31", "faq-section", _K.FAQ, "content"),
    ("c2caf0b9-68b6-48c1-999c-4cc48bd12242", "internal-links-section", _K.INTERNAL_LINKS, "meta"),
    ("related-articles-123-456-789", "related-articles", _K.RELATED_ARTICLES, "meta"),
    ("833666f2-e112-40c0-9d50-02f160b96f3a", "where-to-stay", _K.WHERE_TO_STAY, "content"),
    ("b1d8062e-9fff-46d4-86b8-f198de9f3d38", "why-choose-section", _K.WHY_CHOOSE, "content"),
)


def default_alias_tables() -> tuple[AliasTable, ...]:
    """Return the built-in alias tables in precedence order."""
    return (
        AliasTable.from_rows("legacy-slugs", LEGACY_SLUG_ROWS),
        AliasTable.from_rows("v1-uuids", V1_UUID_ROWS),
        AliasTable.from_rows("v2-html", V2_HTML_ROWS),
    )


def build_default_registry(
    extra_tables: cabc.Iterable[AliasTable] = (),
) -> TemplateRegistry:
    """Return a registry of the built-in tables followed by ``extra_tables``."""
    return TemplateRegistry((*default_alias_tables(), *extra_tables))


__all__ = [
    "KNOWN_CATEGORIES",
    "AliasTable",
    "RegistryError",
    "TemplateRegistry",
    "build_default_registry",
    "default_alias_tables",
]
